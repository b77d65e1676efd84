"""
Basic fieldauth usage example.

This example demonstrates the fundamental fieldauth operations:
- Declaring checks with the @auth directive
- Binding the directive to a graphql-core schema
- Resolving protected fields for different callers
"""

import asyncio
import logging

from graphql import build_schema, graphql

from fieldauth import AUTH_DIRECTIVE_SDL, AuthDirective, Config


TYPE_DEFS = """
    type Query {
        menu: [String]
        drinks: [String] @auth(checks: [{field: "user.age", op: GTE, value: "18"}])
        cellar: [String] @auth(checks: [
            {field: "user.roles", op: CONTAINS, value: "sommelier"},
            {field: "venue.license", op: EQ, value: "full"}
        ])
    }
"""


async def resolve_cellar(root, info):
    await asyncio.sleep(0)
    return ["Barolo 2016", "Rioja 2012"]


async def basic_example():
    """Demonstrate basic fieldauth usage"""
    print("Basic fieldauth Example")
    print("=" * 30)

    # 1. Build the schema and bind the directive
    schema = build_schema(AUTH_DIRECTIVE_SDL + TYPE_DEFS)
    schema.query_type.fields["cellar"].resolve = resolve_cellar
    AuthDirective(Config(user_field="user")).apply(schema)
    print("✓ Bound @auth checks")

    root = {"menu": ["Soup", "Bread"], "drinks": ["Lemonade", "Cider"]}
    callers = {
        "anonymous": {},
        "teen": {"user": {"age": 15, "roles": []}},
        "sommelier": {"user": {"age": 34, "roles": ["sommelier"]}, "venue": {"license": "full"}},
    }

    # 2. Resolve as each caller
    for name, context in callers.items():
        result = await graphql(schema, "{ menu drinks cellar }", root_value=root, context_value=context)
        errors = [error.message for error in result.errors or ()]
        print(f"✓ {name}: {result.data} {errors}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(basic_example())
