"""
End-to-end tests for the @auth directive on graphql-core schemas.
"""

import pytest
from graphql import build_schema, graphql, graphql_sync

from fieldauth import Config
from fieldauth.errors import ConfigurationError, PathSyntaxError
from fieldauth.schema import (
    AUTH_DIRECTIVE_SDL,
    AuthDirective,
    build_directive_sdl,
    create_auth_directive,
    guard_resolver,
)
from fieldauth.authz import CheckEvaluator, CheckSpec, OperatorKind


TYPE_DEFS = """
    type Query {
        public: String
        report: String @auth(checks: [{field: "role", op: EQUAL, value: "admin"}])
        drinks: String @auth(checks: [
            {field: "role", op: EQ, value: "admin"},
            {field: "age", op: GTE, value: "18"}
        ])
        profile: String @auth
    }
"""

ROOT = {"public": "hello", "report": "numbers", "drinks": "beer", "profile": "me"}


@pytest.fixture
def schema():
    """Create a schema with the directive applied."""
    return AuthDirective().apply(build_schema(AUTH_DIRECTIVE_SDL + TYPE_DEFS))


class TestDirectiveSdl:
    """Test the generated directive declarations."""

    def test_every_token_is_declared(self):
        """Test that the operator enum lists names and aliases."""
        for token in OperatorKind.tokens():
            assert f"        {token}\n" in AUTH_DIRECTIVE_SDL

    def test_custom_name(self):
        """Test renaming the directive."""
        assert "directive @guard(" in build_directive_sdl("guard")
        assert "on OBJECT | FIELD_DEFINITION" in AUTH_DIRECTIVE_SDL


class TestAuthDirective:
    """Test protecting fields through the directive."""

    def test_admin_is_allowed(self, schema):
        """Test an authenticated admin reading a protected field."""
        result = graphql_sync(
            schema, "{ report }",
            root_value=ROOT,
            context_value={"user": {"id": 1}, "role": "admin"}
        )
        assert result.errors is None
        assert result.data == {"report": "numbers"}

    def test_unauthenticated_is_rejected(self, schema):
        """Test a request without a user."""
        result = graphql_sync(schema, "{ report }", root_value=ROOT, context_value={})
        assert result.data == {"report": None}
        assert result.errors[0].message == "User not authenticated"

    def test_failed_check_is_forbidden(self, schema):
        """Test the caller-facing denial message."""
        result = graphql_sync(
            schema, "{ drinks }",
            root_value=ROOT,
            context_value={"user": {"id": 1}, "role": "admin", "age": 15}
        )
        assert result.data == {"drinks": None}
        assert result.errors[0].message == 'User not allowed to access "drinks"'
        assert "15" not in result.errors[0].message

    def test_unprotected_fields_are_untouched(self, schema):
        """Test that fields without the directive keep their resolver."""
        assert schema.query_type.fields["public"].resolve is None
        result = graphql_sync(schema, "{ public }", root_value=ROOT, context_value={})
        assert result.data == {"public": "hello"}

    def test_directive_without_checks(self, schema):
        """Test that a bare @auth only requires authentication."""
        ok = graphql_sync(schema, "{ profile }", root_value=ROOT, context_value={"user": {"id": 2}})
        assert ok.data == {"profile": "me"}
        denied = graphql_sync(schema, "{ profile }", root_value=ROOT, context_value={"user": None})
        assert denied.errors[0].message == "User not authenticated"

    def test_type_level_checks_override_field_level(self):
        """Test that checks on an object type replace field declarations."""
        type_defs = """
            type Query {
                account: Account
            }

            type Account @auth(checks: [{field: "role", op: EQUAL, value: "admin"}]) {
                id: ID
                owner: String @auth(checks: [{field: "role", op: EQUAL, value: "guest"}])
            }
        """
        schema = AuthDirective().apply(build_schema(AUTH_DIRECTIVE_SDL + type_defs))
        root = {"account": {"id": "a1", "owner": "ann"}}

        admin = graphql_sync(schema, "{ account { id owner } }", root_value=root,
                             context_value={"user": 1, "role": "admin"})
        assert admin.errors is None
        assert admin.data == {"account": {"id": "a1", "owner": "ann"}}

        guest = graphql_sync(schema, "{ account { owner } }", root_value=root,
                             context_value={"user": 1, "role": "guest"})
        assert guest.errors[0].message == 'User not allowed to access "owner"'

    def test_type_extension_checks(self):
        """Test declarations attached through a type extension."""
        type_defs = """
            type Query {
                report: String
            }

            extend type Query @auth(checks: [{field: "role", op: EQ, value: "admin"}])
        """
        schema = AuthDirective().apply(build_schema(AUTH_DIRECTIVE_SDL + type_defs))
        result = graphql_sync(schema, "{ report }", root_value=ROOT,
                              context_value={"user": 1, "role": "viewer"})
        assert result.errors[0].message == 'User not allowed to access "report"'

    def test_malformed_path_aborts_binding(self):
        """Test that a bad declaration leaves the whole schema unwrapped."""
        type_defs = """
            type Query {
                first: String @auth(checks: [{field: "role", op: EQ, value: "admin"}])
                second: String @auth(checks: [{field: "user.isAdmin()", op: EQ, value: "true"}])
            }
        """
        schema = build_schema(AUTH_DIRECTIVE_SDL + type_defs)
        with pytest.raises(PathSyntaxError) as exc_info:
            AuthDirective().apply(schema)
        assert exc_info.value.context.field_name == "Query.second"
        assert schema.query_type.fields["first"].resolve is None
        assert schema.query_type.fields["second"].resolve is None

    def test_unknown_operator_aborts_binding(self):
        """Test that operator tokens are validated when binding."""
        type_defs = """
            type Query {
                report: String @auth(checks: [{field: "role", op: LIKE, value: "adm"}])
            }
        """
        schema = build_schema(AUTH_DIRECTIVE_SDL + type_defs, assume_valid_sdl=True)
        with pytest.raises(ConfigurationError):
            AuthDirective().apply(schema)

    def test_custom_user_field(self):
        """Test the factory with a different authentication entry."""
        directive = create_auth_directive(user_field="viewer")
        schema = directive.apply(build_schema(directive.sdl + TYPE_DEFS))
        result = graphql_sync(schema, "{ report }", root_value=ROOT,
                              context_value={"viewer": "v", "role": "admin"})
        assert result.data == {"report": "numbers"}

    def test_legacy_greater_than_option(self):
        """Test passing evaluation settings through the factory."""
        directive = create_auth_directive(strict_greater_than=False)
        assert directive.config == Config(strict_greater_than=False)
        assert directive.name == "auth"

    @pytest.mark.asyncio
    async def test_async_resolver_is_awaited(self):
        """Test that an async resolver runs after authorization."""
        schema = build_schema(AUTH_DIRECTIVE_SDL + TYPE_DEFS)
        calls = []

        async def resolve_report(root, info):
            calls.append(info.context["role"])
            return "async numbers"

        schema.query_type.fields["report"].resolve = resolve_report
        AuthDirective().apply(schema)

        allowed = await graphql(schema, "{ report }", context_value={"user": 1, "role": "admin"})
        assert allowed.data == {"report": "async numbers"}

        denied = await graphql(schema, "{ report }", context_value={"user": 1, "role": "viewer"})
        assert denied.data == {"report": None}
        assert calls == ["admin"]


class TestGuardResolver:
    """Test the resolver wrapper directly."""

    class Info:
        def __init__(self, context):
            self.context = context

    def test_sync_resolver(self):
        """Test wrapping a plain function."""
        def resolver(root, info, **args):
            return (root, args)

        wrapped = guard_resolver(resolver, "thing", CheckEvaluator([CheckSpec("role", "EQ", "admin")]))
        assert wrapped.__name__ == "resolver"
        assert wrapped("root", self.Info({"user": 1, "role": "admin"}), limit=3) == ("root", {"limit": 3})

    @pytest.mark.asyncio
    async def test_async_resolver(self):
        """Test wrapping a coroutine function."""
        async def resolver(root, info):
            return "value"

        wrapped = guard_resolver(resolver, "thing", CheckEvaluator())
        assert await wrapped(None, self.Info({"user": 1})) == "value"
