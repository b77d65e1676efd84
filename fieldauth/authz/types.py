"""
Authorization types for the field authorization gate.
Implements operators, check declarations, compiled checks and decisions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import ConfigurationError, ErrorCode, create_operator_error
from .path import CompiledPath


class Effect(Enum):
    """Decision effect."""
    ALLOW = "allow"
    DENY = "deny"


class OperatorKind(Enum):
    """Closed set of comparison operators a check may declare."""
    LESS_THAN = "LESS_THAN"
    LESS_THAN_EQUAL = "LESS_THAN_EQUAL"
    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    GREATER_THAN_EQUAL = "GREATER_THAN_EQUAL"
    GREATER_THAN = "GREATER_THAN"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"

    @classmethod
    def parse(cls, token: Union[str, "OperatorKind"]) -> "OperatorKind":
        """
        Normalize an operator token or alias to its kind.

        Raises:
            ConfigurationError: if the token is not part of the enumeration
        """
        if isinstance(token, OperatorKind):
            return token
        if isinstance(token, str):
            if token in cls.__members__:
                return cls[token]
            if token in _ALIASES:
                return _ALIASES[token]
        raise create_operator_error(token)

    @classmethod
    def tokens(cls) -> List[str]:
        """Every accepted token: canonical names first, then aliases."""
        return list(cls.__members__) + list(_ALIASES)

    @property
    def aliases(self) -> List[str]:
        return [alias for alias, kind in _ALIASES.items() if kind is self]


_ALIASES: Dict[str, OperatorKind] = {
    "LT": OperatorKind.LESS_THAN,
    "LTE": OperatorKind.LESS_THAN_EQUAL,
    "E": OperatorKind.EQUAL,
    "EQ": OperatorKind.EQUAL,
    "NE": OperatorKind.NOT_EQUAL,
    "NEQ": OperatorKind.NOT_EQUAL,
    "GTE": OperatorKind.GREATER_THAN_EQUAL,
    "GT": OperatorKind.GREATER_THAN,
}


@dataclass(frozen=True)
class CheckSpec:
    """
    A declared check: compare the value at `field` with `value` using `op`.
    """
    field: str
    op: Union[str, OperatorKind]
    value: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        op = self.op.value if isinstance(self.op, OperatorKind) else self.op
        return {
            'field': self.field,
            'op': op,
            'value': self.value
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CheckSpec':
        """Create from dictionary representation (e.g. directive arguments)."""
        missing = [key for key in ('field', 'op', 'value') if data.get(key) is None]
        if missing:
            raise ConfigurationError(
                f"Check declaration is missing {', '.join(missing)}: {dict(data)!r}",
                code=ErrorCode.INVALID_CHECK
            )
        if not isinstance(data['value'], str):
            raise ConfigurationError(
                f"Check value for {data['field']!r} must be a string, got {data['value']!r}",
                code=ErrorCode.INVALID_CHECK
            )
        return cls(field=data['field'], op=data['op'], value=data['value'])


@dataclass(frozen=True)
class CompiledCheck:
    """
    A check with its operator normalized and its path compiled.
    Immutable; shared by every request resolving the protected field.
    """
    field: str
    op: OperatorKind
    value: str
    accessor: CompiledPath

    def resolve(self, context: Any) -> Any:
        return self.accessor.resolve(context)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'field': self.field,
            'op': self.op.value,
            'value': self.value,
            'steps': list(self.accessor.steps)
        }


@dataclass(frozen=True)
class Decision:
    """
    Authorization decision for one protected field and one request.

    A denial carries the failing path, the resolved value, the operator and
    the declared value. That detail is meant for server-side logs only.
    """
    allowed: bool
    reason: str = ""
    field_name: Optional[str] = None
    failing_field: Optional[str] = None
    operator: Optional[OperatorKind] = None
    value: Any = None
    declared: Optional[str] = None

    UNAUTHENTICATED = "Unauthenticated"

    @property
    def effect(self) -> Effect:
        return Effect.ALLOW if self.allowed else Effect.DENY

    @property
    def unauthenticated(self) -> bool:
        return not self.allowed and self.reason == self.UNAUTHENTICATED

    @classmethod
    def allow(cls, field_name: Optional[str] = None) -> 'Decision':
        return cls(allowed=True, field_name=field_name)

    @classmethod
    def deny(cls, reason: str, failing_field: str, field_name: Optional[str] = None,
             operator: Optional[OperatorKind] = None, value: Any = None,
             declared: Optional[str] = None) -> 'Decision':
        return cls(
            allowed=False,
            reason=reason,
            field_name=field_name,
            failing_field=failing_field,
            operator=operator,
            value=value,
            declared=declared
        )

    @classmethod
    def unauthenticated_for(cls, user_field: str, field_name: Optional[str] = None) -> 'Decision':
        return cls(
            allowed=False,
            reason=cls.UNAUTHENTICATED,
            field_name=field_name,
            failing_field=user_field
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'effect': self.effect.value,
            'reason': self.reason,
            'field_name': self.field_name,
            'failing_field': self.failing_field,
            'operator': self.operator.value if self.operator else None,
            'value': self.value,
            'declared': self.declared
        }
