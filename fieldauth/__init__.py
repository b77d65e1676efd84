"""
fieldauth Python Package

Field-level authorization gate for GraphQL schemas
"""

__version__ = "0.1.0"
__author__ = "Mauricio Fernandez"
__email__ = "mauricio.fernandez@siemens.com"

from .core.config import Config
from .authz import (
    OperatorKind,
    CheckSpec,
    CompiledCheck,
    CompiledPath,
    Decision,
    CheckEvaluator,
    authorize,
    compile_check,
    compile_checks,
    compile_path,
    walk,
)
from .errors import (
    FieldAuthError,
    PathSyntaxError,
    ConfigurationError,
    AuthenticationError,
    ForbiddenError,
)
from .schema import AUTH_DIRECTIVE_SDL, AuthDirective, create_auth_directive, guard_resolver

__all__ = [
    "Config",
    "OperatorKind",
    "CheckSpec",
    "CompiledCheck",
    "CompiledPath",
    "Decision",
    "CheckEvaluator",
    "authorize",
    "compile_check",
    "compile_checks",
    "compile_path",
    "walk",
    "FieldAuthError",
    "PathSyntaxError",
    "ConfigurationError",
    "AuthenticationError",
    "ForbiddenError",
    "AUTH_DIRECTIVE_SDL",
    "AuthDirective",
    "create_auth_directive",
    "guard_resolver",
]
