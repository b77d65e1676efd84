"""
Comparison semantics for declared checks.

Checks are declared with string literals and compared against whatever the
request context holds. The coercion rules are the ones the declarations were
written against (JavaScript abstract comparison):

  - ordering compares two strings lexically, anything else numerically;
  - loose equality lets ``5 == "5"`` and ``True == "1"`` hold;
  - strict equality requires the same kind of value.

A missing value (None) never satisfies an ordering comparison.
"""

import json
import math
import re
from collections.abc import Mapping
from typing import Any, Optional, Union

from ..errors import create_operator_error
from .types import OperatorKind


Number = Union[int, float]

NAN = float('nan')

_DECIMAL_PATTERN = re.compile(
    r'^[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)$'
)
_RADIX_PATTERN = re.compile(r'^0([xXoObB])([0-9a-fA-F]+)$')
_RADIX = {'x': 16, 'o': 8, 'b': 2}


def is_primitive(value: Any) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def number_to_string(value: Number) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer():
            return str(int(value))
    return str(value)


def to_string(value: Any) -> str:
    """String form used when a value meets a string in a comparison."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return number_to_string(value)
    if isinstance(value, str):
        return value
    return to_string(to_primitive(value))


def to_primitive(value: Any) -> Any:
    """Reduce a container to the primitive it compares as."""
    if is_primitive(value):
        return value
    if isinstance(value, (list, tuple)):
        return ','.join(to_string(item) for item in value)
    if isinstance(value, Mapping):
        return '[object Object]'
    return str(value)


def to_number(value: Any) -> Number:
    """Numeric form of a value; NaN when it has none."""
    if value is None:
        return NAN
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return to_number(to_primitive(value))

    text = value.strip()
    if not text:
        return 0
    if text in ('Infinity', '+Infinity'):
        return math.inf
    if text == '-Infinity':
        return -math.inf
    radix = _RADIX_PATTERN.match(text)
    if radix:
        try:
            return int(radix.group(2), _RADIX[radix.group(1).lower()])
        except ValueError:
            return NAN
    if _DECIMAL_PATTERN.match(text):
        number = float(text)
        return int(number) if number.is_integer() and abs(number) < 2 ** 53 else number
    return NAN


def is_truthy(value: Any) -> bool:
    """Truthiness where empty containers still count as present."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ''
    return True


def strict_equals(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if is_primitive(left) or is_primitive(right):
        return False
    return left is right


def loose_equals(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None
    if not is_primitive(left) and not is_primitive(right):
        return left is right

    left, right = to_primitive(left), to_primitive(right)
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return to_number(left) == to_number(right)


def compare(left: Any, right: Any) -> Optional[int]:
    """
    Order two values.

    Returns -1, 0 or 1, or None when the values are unordered (a missing
    value or NaN on either side).
    """
    if left is None or right is None:
        return None
    left, right = to_primitive(left), to_primitive(right)
    if not (isinstance(left, str) and isinstance(right, str)):
        left, right = to_number(left), to_number(right)
        if math.isnan(left) or math.isnan(right):
            return None
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def contains(value: Any, declared: Any) -> bool:
    """Membership for sequences, strict equality for anything else."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(strict_equals(item, declared) for item in value)
    return strict_equals(value, declared)


def evaluate(op: OperatorKind, value: Any, declared: Any, strict_greater_than: bool = True) -> bool:
    """
    Apply an operator to a resolved value and a declared literal.

    Args:
        op: The operator kind
        value: Value resolved from the request context
        declared: The declared literal
        strict_greater_than: If False, GREATER_THAN behaves like
            GREATER_THAN_EQUAL

    Returns:
        bool: True if the check passes

    Raises:
        ConfigurationError: If op is not an OperatorKind
    """
    if op is OperatorKind.LESS_THAN:
        return compare(value, declared) == -1
    elif op is OperatorKind.LESS_THAN_EQUAL:
        return compare(value, declared) in (-1, 0)
    elif op is OperatorKind.EQUAL:
        return loose_equals(value, declared)
    elif op is OperatorKind.NOT_EQUAL:
        return not loose_equals(value, declared)
    elif op is OperatorKind.GREATER_THAN_EQUAL:
        return compare(value, declared) in (0, 1)
    elif op is OperatorKind.GREATER_THAN:
        if strict_greater_than:
            return compare(value, declared) == 1
        return compare(value, declared) in (0, 1)
    elif op is OperatorKind.CONTAINS:
        return contains(value, declared)
    elif op is OperatorKind.NOT_CONTAINS:
        return not contains(value, declared)
    raise create_operator_error(op)


def render_value(value: Any) -> str:
    """JSON rendering of a resolved value for denial reasons."""
    try:
        return json.dumps(value, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return repr(value)
