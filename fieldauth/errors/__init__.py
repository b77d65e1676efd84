# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Structured error handling for the field authorization gate.

Two families of errors live here:
  - setup defects (PathSyntaxError, ConfigurationError) raised while the
    schema is built, never at request time;
  - authorization outcomes (AuthenticationError, ForbiddenError) raised
    while a protected field is resolved.

Authorization errors only carry generic messages across the trust boundary.
The diagnostic detail stays on the attached Decision for server-side use.
"""

from enum import Enum
from datetime import datetime
from typing import Dict, Any, Optional, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from ..authz.types import Decision


class ErrorCode(Enum):
    """Structured error codes."""

    # Setup errors
    PATH_SYNTAX = "path_syntax"
    INVALID_OPERATOR = "invalid_operator"
    INVALID_CHECK = "invalid_check"
    INVALID_CONFIG = "invalid_config"

    # Request errors
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


class ErrorSource(Enum):
    """Sources where errors can originate."""

    SCHEMA = "schema"
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"


@dataclass
class ErrorContext:
    """Additional context for errors."""

    field_name: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)


class FieldAuthError(Exception):
    """
    Base exception class for all fieldauth errors.

    Provides structured error information with error codes,
    sources and additional context.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        source: ErrorSource = ErrorSource.SCHEMA,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None
    ):
        self.code = code
        self.message = message
        self.source = source
        self.context = context or ErrorContext()
        self.cause = cause

        super().__init__(self.message)

    @property
    def extensions(self) -> Dict[str, Any]:
        """Extensions picked up by graphql-core when the error is reported."""
        return {"code": self.code.name}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "error": self.code.value,
            "error_description": self.message,
            "error_source": self.source.value,
            "timestamp": self.context.timestamp.isoformat(),
        }

        if self.context.field_name:
            result["field_name"] = self.context.field_name

        if self.context.metadata:
            result["metadata"] = self.context.metadata

        if self.cause:
            result["caused_by"] = str(self.cause)

        return result

    def is_client_error(self) -> bool:
        """Check if this error is an authorization outcome for the caller."""
        return self.source in (ErrorSource.AUTHENTICATION, ErrorSource.AUTHORIZATION)


class PathSyntaxError(FieldAuthError):
    """Malformed field-path expression."""

    def __init__(self, message: str, expression: Any = None, position: Optional[int] = None, **kwargs):
        context = kwargs.pop("context", ErrorContext())
        context.metadata["expression"] = expression
        if position is not None:
            context.metadata["position"] = position
        self.expression = expression
        self.position = position

        super().__init__(
            code=ErrorCode.PATH_SYNTAX,
            message=message,
            source=ErrorSource.SCHEMA,
            context=context,
            **kwargs
        )


class ConfigurationError(FieldAuthError):
    """Invalid operator token, check declaration or settings."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_CONFIG,
                 token: Any = None, **kwargs):
        context = kwargs.pop("context", ErrorContext())
        if token is not None:
            context.metadata["token"] = token
        self.token = token

        super().__init__(
            code=code,
            message=message,
            source=ErrorSource.CONFIGURATION,
            context=context,
            **kwargs
        )


class AuthenticationError(FieldAuthError):
    """The request context carries no authenticated user."""

    def __init__(self, message: str = "User not authenticated", field_name: Optional[str] = None, **kwargs):
        super().__init__(
            code=ErrorCode.UNAUTHENTICATED,
            message=message,
            source=ErrorSource.AUTHENTICATION,
            context=ErrorContext(field_name=field_name),
            **kwargs
        )


class ForbiddenError(FieldAuthError):
    """A declared check failed for the current request."""

    def __init__(self, decision: "Decision", message: Optional[str] = None, **kwargs):
        self.decision = decision
        if message is None:
            message = f'User not allowed to access "{decision.field_name}"'

        super().__init__(
            code=ErrorCode.FORBIDDEN,
            message=message,
            source=ErrorSource.AUTHORIZATION,
            context=ErrorContext(field_name=decision.field_name),
            **kwargs
        )


def create_operator_error(token: Any) -> ConfigurationError:
    """Create the error raised for an operator outside the enumeration."""
    return ConfigurationError(
        f'Invalid operation enumeration value "{token}" received!',
        code=ErrorCode.INVALID_OPERATOR,
        token=token
    )


__all__ = [
    "ErrorCode",
    "ErrorSource",
    "ErrorContext",
    "FieldAuthError",
    "PathSyntaxError",
    "ConfigurationError",
    "AuthenticationError",
    "ForbiddenError",
    "create_operator_error",
]
