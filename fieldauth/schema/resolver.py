"""
Resolver wrapping for protected fields.
"""

import functools
import inspect
from typing import Any, Callable, TypeVar

from ..authz.authz import CheckEvaluator

F = TypeVar('F', bound=Callable[..., Any])


def guard_resolver(resolver: F, field_name: str, evaluator: CheckEvaluator) -> F:
    """
    Wrap a graphql-core resolver so that it only runs for authorized callers.

    The wrapper keeps the ``(root, info, **args)`` signature, enforces the
    evaluator against ``info.context`` and returns the delegate's result
    unchanged. Denials raise before the delegate is called.

    Args:
        resolver: The field's original resolver
        field_name: Name reported in denial messages
        evaluator: Compiled checks for the field
    """
    @functools.wraps(resolver)
    async def async_wrapper(root, info, **args):
        evaluator.enforce(info.context, field_name)
        result = resolver(root, info, **args)
        if inspect.isawaitable(result):
            result = await result
        return result

    @functools.wraps(resolver)
    def sync_wrapper(root, info, **args):
        evaluator.enforce(info.context, field_name)
        return resolver(root, info, **args)

    wrapper = async_wrapper if inspect.iscoroutinefunction(resolver) else sync_wrapper
    wrapper.evaluator = evaluator
    return wrapper
