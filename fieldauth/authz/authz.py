"""
Check evaluation engine for the field authorization gate.
Compiles declared checks and turns a request context into a decision.
"""

from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union
import logging

from ..core.config import Config
from ..errors import AuthenticationError, ForbiddenError
from .operators import evaluate, is_truthy, render_value
from .path import compile_path, walk
from .types import CheckSpec, CompiledCheck, Decision, OperatorKind


logger = logging.getLogger(__name__)


_FAILURE_PHRASES = {
    OperatorKind.LESS_THAN: "is not less than",
    OperatorKind.LESS_THAN_EQUAL: "is not less than or equal to",
    OperatorKind.EQUAL: "is not equal to",
    OperatorKind.NOT_EQUAL: "is equal to",
    OperatorKind.GREATER_THAN_EQUAL: "is not greater than or equal to",
    OperatorKind.GREATER_THAN: "is not greater than",
    OperatorKind.CONTAINS: "does not contain",
    OperatorKind.NOT_CONTAINS: "contains",
}


def compile_check(spec: Union[CheckSpec, Mapping[str, Any]]) -> CompiledCheck:
    """
    Validate a declared check and compile its path.

    Args:
        spec: A CheckSpec or its dictionary form

    Returns:
        CompiledCheck: Immutable check ready for evaluation

    Raises:
        ConfigurationError: If the operator or declaration is invalid
        PathSyntaxError: If the field path is malformed
    """
    if not isinstance(spec, CheckSpec):
        spec = CheckSpec.from_dict(spec)
    op = OperatorKind.parse(spec.op)
    accessor = compile_path(spec.field)
    return CompiledCheck(field=spec.field, op=op, value=spec.value, accessor=accessor)


def compile_checks(specs: Optional[Iterable[Union[CheckSpec, Mapping[str, Any]]]]) -> Tuple[CompiledCheck, ...]:
    """Compile every check; the first invalid one aborts the whole list."""
    return tuple(compile_check(spec) for spec in (specs or ()))


def describe_failure(check: CompiledCheck, value: Any) -> str:
    return (
        f"context.{check.field} ({render_value(value)}) "
        f"{_FAILURE_PHRASES[check.op]} {check.value}"
    )


def authorize(context: Any,
              checks: Sequence[CompiledCheck],
              user_field: Optional[str] = "user",
              field_name: Optional[str] = None,
              *,
              config: Optional[Config] = None) -> Decision:
    """
    Decide whether a request may resolve a protected field.

    The authentication gate runs first, then every check in declaration
    order. Evaluation stops at the first failure.

    Args:
        context: Request context, read but never modified
        checks: Compiled checks for the field
        user_field: Context entry whose truthiness marks an authenticated
            caller; empty or None disables the gate
        field_name: Name of the protected field, used in reasons
        config: Evaluation settings

    Returns:
        Decision: Allow, or Deny with the failing path and values

    Raises:
        ConfigurationError: If a check holds an operator outside the enumeration
    """
    config = config or Config()

    if user_field and not is_truthy(walk(context, (user_field,))):
        if config.log_denials:
            logger.info(f"User invalid because context.{user_field} is not set (field \"{field_name}\")")
        return Decision.unauthenticated_for(user_field, field_name=field_name)

    for check in checks:
        value = check.resolve(context)
        if evaluate(check.op, value, check.value, strict_greater_than=config.strict_greater_than):
            continue

        reason = describe_failure(check, value)
        if config.log_denials:
            logger.info(f"User invalid because {reason} (field \"{field_name}\")")
        return Decision.deny(
            reason,
            failing_field=check.field,
            field_name=field_name,
            operator=check.op,
            value=value,
            declared=check.value
        )

    return Decision.allow(field_name)


class CheckEvaluator:
    """
    Compiled checks for one protected field, bound to their settings.

    Built once when the schema is assembled and shared read-only by every
    request that resolves the field.
    """

    def __init__(self,
                 checks: Iterable[Union[CompiledCheck, CheckSpec, Mapping[str, Any]]] = (),
                 config: Optional[Config] = None):
        self.config = config or Config()
        self.checks: Tuple[CompiledCheck, ...] = tuple(
            check if isinstance(check, CompiledCheck) else compile_check(check)
            for check in checks
        )

        if not self.config.strict_greater_than and any(
            check.op is OperatorKind.GREATER_THAN for check in self.checks
        ):
            logger.warning("GREATER_THAN checks are evaluated as GREATER_THAN_EQUAL (legacy mode)")

    @property
    def user_field(self) -> Optional[str]:
        return self.config.user_field

    def authorize(self, context: Any, field_name: Optional[str] = None) -> Decision:
        """Evaluate the checks for one request."""
        return authorize(
            context,
            self.checks,
            user_field=self.config.user_field,
            field_name=field_name,
            config=self.config
        )

    def enforce(self, context: Any, field_name: Optional[str] = None) -> Decision:
        """
        Evaluate the checks and raise on denial.

        Raises:
            AuthenticationError: If the caller is not authenticated
            ForbiddenError: If a check failed
        """
        decision = self.authorize(context, field_name)
        if decision.allowed:
            return decision
        if decision.unauthenticated:
            raise AuthenticationError(field_name=field_name)
        raise ForbiddenError(decision)

    def __len__(self) -> int:
        return len(self.checks)
