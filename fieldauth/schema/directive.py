# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
The ``@auth`` schema directive.

Declare checks in SDL and bind them to a graphql-core schema:

    type Query {
        report: Report @auth(checks: [{field: "role", op: EQUAL, value: "admin"}])
    }

    schema = build_schema(AUTH_DIRECTIVE_SDL + type_defs)
    AuthDirective().apply(schema)

A directive on an object type applies to all of its fields and replaces any
field-level declaration.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional
import logging

from graphql import (
    GraphQLField,
    GraphQLObjectType,
    GraphQLSchema,
    default_field_resolver,
    value_from_ast_untyped,
)

from ..authz.authz import CheckEvaluator, compile_checks
from ..authz.types import OperatorKind
from ..core.config import Config
from ..errors import ConfigurationError, ErrorCode, FieldAuthError
from .resolver import guard_resolver


logger = logging.getLogger(__name__)


def build_directive_sdl(name: str = "auth") -> str:
    """SDL declaring the operator enum, the check input and the directive."""
    operations = "\n".join(f"        {token}" for token in OperatorKind.tokens())
    return f"""
    enum AuthDirectiveOperation {{
{operations}
    }}

    input AuthDirectiveInput {{
        field: String!
        op: AuthDirectiveOperation!
        value: String!
    }}

    directive @{name}(
        checks: [AuthDirectiveInput!]
    ) on OBJECT | FIELD_DEFINITION
"""


AUTH_DIRECTIVE_SDL = build_directive_sdl()


@dataclass
class _Binding:
    type_name: str
    field_name: str
    field: GraphQLField
    evaluator: CheckEvaluator


class AuthDirective:
    """
    Binds ``@auth`` declarations of a schema to guarded resolvers.
    """

    def __init__(self, config: Optional[Config] = None, name: str = "auth"):
        self.config = config or Config()
        self.name = name

    @property
    def sdl(self) -> str:
        return build_directive_sdl(self.name)

    def apply(self, schema: GraphQLSchema) -> GraphQLSchema:
        """
        Wrap the resolver of every protected field in the schema.

        All declarations are compiled before any resolver is replaced, so a
        malformed declaration leaves the schema untouched.

        Raises:
            PathSyntaxError: If a check declares a malformed path
            ConfigurationError: If a check declares an unknown operator
        """
        bindings = list(self._collect(schema))

        for binding in bindings:
            binding.field.resolve = guard_resolver(
                binding.field.resolve or default_field_resolver,
                binding.field_name,
                binding.evaluator
            )
            logger.debug(
                f"Protected {binding.type_name}.{binding.field_name} "
                f"with {len(binding.evaluator)} check(s)"
            )

        return schema

    def _collect(self, schema: GraphQLSchema) -> Iterable[_Binding]:
        for type_name, gql_type in schema.type_map.items():
            if type_name.startswith("__") or not isinstance(gql_type, GraphQLObjectType):
                continue

            type_checks = self._read_checks(
                [gql_type.ast_node, *(gql_type.extension_ast_nodes or ())]
            )
            for field_name, field in gql_type.fields.items():
                checks = type_checks
                if checks is None:
                    checks = self._read_checks([field.ast_node])
                if checks is None:
                    continue
                try:
                    evaluator = CheckEvaluator(compile_checks(checks), self.config)
                except FieldAuthError as error:
                    error.context.field_name = f"{type_name}.{field_name}"
                    raise
                yield _Binding(type_name, field_name, field, evaluator)

    def _read_checks(self, nodes: List[Any]) -> Optional[List[Any]]:
        """Checks declared by the directive on the nodes; None without a directive."""
        for node in nodes:
            for directive in getattr(node, "directives", None) or ():
                if directive.name.value != self.name:
                    continue
                for argument in directive.arguments or ():
                    if argument.name.value == "checks":
                        checks = value_from_ast_untyped(argument.value)
                        if checks is None:
                            return []
                        if isinstance(checks, dict):
                            return [checks]
                        if not isinstance(checks, list):
                            raise ConfigurationError(
                                f"@{self.name}(checks:) must be a list, got {checks!r}",
                                code=ErrorCode.INVALID_CHECK
                            )
                        return checks
                return []
        return None


def create_auth_directive(user_field: Optional[str] = "user", **options) -> AuthDirective:
    """
    Create an ``@auth`` directive binder.

    Args:
        user_field: Context entry that marks an authenticated caller
        **options: Further Config settings, plus ``name`` for the directive

    Returns:
        AuthDirective: Binder whose ``sdl`` must be part of the schema source
    """
    name = options.pop("name", "auth")
    return AuthDirective(Config(user_field=user_field, **options), name=name)
