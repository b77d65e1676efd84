# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Field-path compiler and walker.

A path expression names a value inside the request context:

    user.roles[0]
    ['user-info'].tier
    [0].id

Expressions are parsed once, when a check is declared, into a tuple of
steps (property names and array indices). At request time the steps are
walked against the context. Only plain identifiers and literal member
access are accepted, so nothing in an expression is ever executed.
"""

import functools
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterable, List, NamedTuple, Tuple, Union

from ..errors import PathSyntaxError


# A single property access: a property name or an array index
PathStep = Union[str, int]


@dataclass(frozen=True)
class CompiledPath:
    """
    Field-path expression parsed into property-access steps.
    """
    expression: str
    steps: Tuple[PathStep, ...]

    def resolve(self, context: Any) -> Any:
        """Walk the context along the steps; None when anything is missing."""
        return walk(context, self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __str__(self) -> str:
        return self.expression


_TOKEN_PATTERN = re.compile(r"""
      (?P<ws>\s+)
    | (?P<ident>[A-Za-z_$][A-Za-z0-9_$]*)
    | (?P<number>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
    | (?P<string>'(?:[^'\\\n]|\\.)*'|"(?:[^"\\\n]|\\.)*")
    | (?P<punct>[.\[\],])
    | (?P<other>.)
""", re.VERBOSE)

_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b',
    'f': '\f', 'v': '\v', '0': '\0',
}
_ESCAPE_PATTERN = re.compile(r"""
    \\(?:
          u\{(?P<braced>[0-9a-fA-F]+)\}
        | u(?P<unicode>[0-9a-fA-F]{4})
        | x(?P<hex>[0-9a-fA-F]{2})
        | (?P<malformed>[ux])
        | (?P<char>.)
    )
""", re.VERBOSE)


class _Token(NamedTuple):
    kind: str
    text: str
    position: int


def _tokenize(expression: str) -> List[_Token]:
    tokens = []
    for match in _TOKEN_PATTERN.finditer(expression):
        kind = match.lastgroup
        if kind == 'ws':
            continue
        if kind == 'other':
            raise PathSyntaxError(
                f"Unexpected character {match.group()!r} at position {match.start()} "
                f"in path {expression!r}",
                expression=expression,
                position=match.start()
            )
        text = match.group()
        tokens.append(_Token(text if kind == 'punct' else kind, text, match.start()))
    return tokens


def _decode_escape(match: re.Match) -> str:
    if match.group('char') is not None:
        char = match.group('char')
        return _ESCAPES.get(char, char)
    if match.group('malformed') is not None:
        raise ValueError(f"Invalid escape sequence {match.group()!r}")
    digits = match.group('braced') or match.group('unicode') or match.group('hex')
    code_point = int(digits, 16)
    if code_point > 0x10FFFF:
        raise ValueError(f"Code point out of range in {match.group()!r}")
    return chr(code_point)


def _unquote(text: str) -> str:
    """
    Strip the quotes from a string literal and decode its escapes.

    Raises:
        ValueError: If a ``\\u`` or ``\\x`` escape is malformed
    """
    decoded = _ESCAPE_PATTERN.sub(_decode_escape, text[1:-1])
    # surrogate pairs become one character; lone surrogates are kept
    return decoded.encode('utf-16', 'surrogatepass').decode('utf-16', 'surrogatepass')


class _PathParser:
    """Recursive-descent parser for the property-access chain grammar."""

    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = _tokenize(expression)
        self.index = 0

    def parse(self) -> Tuple[PathStep, ...]:
        steps = [self._head()]
        while not self._at_end():
            token = self._advance()
            if token.kind == '.':
                name = self._advance()
                if name is None or name.kind != 'ident':
                    self._fail("Expected a property name after '.'", name or token)
                steps.append(name.text)
            elif token.kind == '[':
                steps.append(self._member_access(token))
            else:
                self._fail(f"Unexpected {token.text!r}", token)
        return tuple(steps)

    def _head(self) -> PathStep:
        token = self._advance()
        if token is None:
            raise PathSyntaxError("Empty path expression", expression=self.expression)
        if token.kind == 'ident':
            return token.text
        if token.kind == '[':
            elements = self._array_shorthand(token)
            if len(elements) != 1:
                self._fail(
                    f"Leading array shorthand must hold exactly one element, got {len(elements)}",
                    token
                )
            return elements[0]
        self._fail(f"Path must start with a property name or '[', got {token.text!r}", token)

    def _member_access(self, opener: _Token) -> PathStep:
        literal = self._literal(opener)
        closer = self._advance()
        if closer is None or closer.kind != ']':
            self._fail("Computed member access must be a single literal", closer or opener)
        return literal

    def _array_shorthand(self, opener: _Token) -> List[PathStep]:
        elements: List[PathStep] = []
        token = self._peek()
        if token is not None and token.kind == ']':
            self._advance()
            return elements
        while True:
            elements.append(self._literal(opener))
            token = self._advance()
            if token is None:
                self._fail("Unterminated '['", opener)
            if token.kind == ']':
                return elements
            if token.kind != ',':
                self._fail(f"Unexpected {token.text!r} in array shorthand", token)
            # one trailing comma before ']'
            token = self._peek()
            if token is not None and token.kind == ']':
                self._advance()
                return elements

    def _literal(self, opener: _Token) -> PathStep:
        token = self._advance()
        if token is None:
            self._fail("Unterminated '['", opener)
        if token.kind == 'string':
            try:
                return _unquote(token.text)
            except ValueError as exc:
                self._fail(str(exc), token)
        if token.kind == 'number':
            if token.text.isdigit():
                return int(token.text)
            number = float(token.text)
            if not number.is_integer():
                self._fail(f"Array index must be an integer, got {token.text}", token)
            return int(number)
        self._fail(f"Expected a string or number literal, got {token.text!r}", token)

    def _peek(self):
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _advance(self):
        token = self._peek()
        if token is not None:
            self.index += 1
        return token

    def _at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def _fail(self, message: str, token: _Token):
        position = token.position if token is not None else len(self.expression)
        raise PathSyntaxError(
            f"{message} (position {position} in path {self.expression!r})",
            expression=self.expression,
            position=position
        )


@functools.lru_cache(maxsize=512)
def _compile(expression: str) -> CompiledPath:
    return CompiledPath(expression=expression, steps=_PathParser(expression).parse())


def compile_path(expression: str) -> CompiledPath:
    """
    Compile a field-path expression into property-access steps.

    Args:
        expression: Path such as ``a.b[0].c`` or ``[2].x``

    Returns:
        CompiledPath: The parsed steps

    Raises:
        PathSyntaxError: If the expression is empty, unparsable, or uses
            anything beyond identifiers and literal member access
    """
    if not isinstance(expression, str):
        raise PathSyntaxError(
            f"Path expression must be a string, got {type(expression).__name__}",
            expression=expression
        )
    if not expression.strip():
        raise PathSyntaxError("Empty path expression", expression=expression)
    return _compile(expression)


def _step_into(target: Any, step: PathStep) -> Any:
    if isinstance(target, Mapping):
        if step in target:
            return target[step]
        # obj[0] and obj["0"] address the same property
        if isinstance(step, int):
            return target.get(str(step))
        return None

    if step == 'length' and isinstance(target, (str, list, tuple)):
        return len(target)

    if isinstance(target, Sequence):
        if isinstance(step, str):
            if not step.isdigit():
                return None
            step = int(step)
        if 0 <= step < len(target):
            return target[step]
        return None

    if isinstance(step, str) and not step.startswith('__'):
        return getattr(target, step, None)
    return None


def walk(context: Any, steps: Iterable[PathStep]) -> Any:
    """
    Resolve steps against a context object.

    Mappings are read by key, sequences by index and anything else by
    attribute. Lists and strings also answer ``length``. Returns None as
    soon as an intermediate value is missing.
    """
    current = context
    for step in steps:
        if current is None:
            return None
        current = _step_into(current, step)
    return current
