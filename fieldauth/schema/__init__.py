"""
GraphQL schema integration: the ``@auth`` directive and guarded resolvers.
"""

from .directive import AUTH_DIRECTIVE_SDL, AuthDirective, build_directive_sdl, create_auth_directive
from .resolver import guard_resolver

__all__ = [
    "AUTH_DIRECTIVE_SDL",
    "AuthDirective",
    "build_directive_sdl",
    "create_auth_directive",
    "guard_resolver",
]
