"""Others-expressions: boolean expressions over the presence of other properties.

An expression such as ``a && !(b || ~IS_ADMIN)`` is evaluated against the
object currently being validated.  Names refer to keys of that object, dotted
names walk into nested objects or up through the ancestry, and names starting
with ``~`` test a condition token instead of a property.

Operators are applied strictly left to right with no precedence between
``&&``, ``||`` and ``^^``; use parentheses to group.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Sequence, Tuple, Union

from ..errors import ExpressionError

_NAME_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789$_@~.-/"
)
_WHITESPACE = frozenset(" \t\r\n")


class BooleanOperator(Enum):
    AND = "&&"
    OR = "||"
    XOR = "^^"

    def apply(self, left: bool, right: bool) -> bool:
        if self is BooleanOperator.AND:
            return left and right
        if self is BooleanOperator.OR:
            return left or right
        return left != right


# ------------------------------------------------------------------
# Expression tree
# ------------------------------------------------------------------
@dataclass
class OtherProperty:
    """Leaf: ``name`` is present (or, for ``~name``, the condition is set)."""

    name: str
    negated: bool = False
    op: BooleanOperator = BooleanOperator.AND

    def evaluate(self, current: Any, ancestry: Sequence[Any] = (), ctx: Any = None) -> bool:
        if self.name.startswith("~"):
            result = ctx is not None and ctx.is_condition(self.name[1:])
        else:
            result = _property_exists(self.name, current, ancestry)
        return result != self.negated

    def clone(self) -> "OtherProperty":
        return OtherProperty(self.name, self.negated, self.op)

    def __str__(self) -> str:
        return ("!" if self.negated else "") + _quote_name(self.name)


@dataclass
class OtherGrouping:
    """Parenthesised sub-expression."""

    expr: "OthersExpr"
    negated: bool = False
    op: BooleanOperator = BooleanOperator.AND

    def evaluate(self, current: Any, ancestry: Sequence[Any] = (), ctx: Any = None) -> bool:
        return self.expr.evaluate(current, ancestry, ctx) != self.negated

    def clone(self) -> "OtherGrouping":
        return OtherGrouping(self.expr.clone(), self.negated, self.op)

    def __str__(self) -> str:
        return ("!" if self.negated else "") + "(" + str(self.expr) + ")"


OtherItem = Union[OtherProperty, OtherGrouping]


@dataclass
class OthersExpr:
    """Sequence of items, each joined to its predecessor by ``op``.

    The operator of the first item is ignored.  An empty expression is true.
    """

    items: List[OtherItem] = field(default_factory=list)

    @staticmethod
    def parse(text: str) -> "OthersExpr":
        return parse_expression(text)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def evaluate(self, current: Any, ancestry: Sequence[Any] = (), ctx: Any = None) -> bool:
        """Evaluate against ``current`` with ``ancestry`` ordered nearest first."""
        result = True
        for index, item in enumerate(self.items):
            value = item.evaluate(current, ancestry, ctx)
            result = value if index == 0 else item.op.apply(result, value)
        return result

    def add(self, item: OtherItem) -> "OthersExpr":
        self.items.append(item)
        return self

    def clone(self) -> "OthersExpr":
        return OthersExpr([item.clone() for item in self.items])

    def __str__(self) -> str:
        parts: List[str] = []
        for index, item in enumerate(self.items):
            if index:
                parts.append(f" {item.op.value} ")
            parts.append(str(item))
        return "".join(parts)


def _quote_name(name: str) -> str:
    if name and all(ch in _NAME_CHARS for ch in name):
        return name
    if "'" in name and '"' not in name:
        return f'"{name}"'
    return f"'{name}'"


# ------------------------------------------------------------------
# Property paths
# ------------------------------------------------------------------
@lru_cache(maxsize=2048)
def _split_path(name: str) -> Tuple[bool, int, Tuple[str, ...]]:
    """Return (from_root, levels_up, segments) for a property name."""
    from_root = False
    up = 0
    rest = name
    if rest.startswith("/"):
        from_root = True
        rest = rest[1:]
        if rest.startswith("."):
            rest = rest[1:]
    else:
        while up < len(rest) and rest[up] == ".":
            up += 1
        rest = rest[up:]
    if not rest:
        return from_root, up, ()
    segments: List[str] = []
    buf: List[str] = []
    i = 0
    while i < len(rest):
        ch = rest[i]
        if ch == "\\" and i + 1 < len(rest) and rest[i + 1] == ".":
            buf.append(".")
            i += 2
            continue
        if ch == ".":
            segments.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1
    segments.append("".join(buf))
    return from_root, up, tuple(segments)


def _property_exists(name: str, current: Any, ancestry: Sequence[Any]) -> bool:
    from_root, up, segments = _split_path(name)
    if from_root:
        target = ancestry[-1] if ancestry else current
    elif up:
        if up > len(ancestry):
            return False
        target = ancestry[up - 1]
    else:
        target = current
    if not segments:
        return target is not None
    for segment in segments:
        if not isinstance(target, dict) or segment not in target:
            return False
        target = target[segment]
    return True


# ------------------------------------------------------------------
# Parser
# ------------------------------------------------------------------
_START, _NAME, _NOT, _OP, _OPEN, _CLOSE, _END = range(7)

_FOLLOWS: Dict[int, frozenset] = {
    _START: frozenset({_NAME, _NOT, _OPEN, _END}),
    _OP: frozenset({_NAME, _NOT, _OPEN}),
    _NOT: frozenset({_NAME, _NOT, _OPEN}),
    _OPEN: frozenset({_NAME, _NOT, _OPEN}),
    _NAME: frozenset({_OP, _CLOSE, _END}),
    _CLOSE: frozenset({_OP, _CLOSE, _END}),
}


@dataclass
class _Token:
    kind: int
    position: int
    value: str = ""


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch in _WHITESPACE:
            i += 1
        elif ch in "&|^":
            if i + 1 < length and text[i + 1] == ch:
                tokens.append(_Token(_OP, i, ch * 2))
                i += 2
            else:
                raise ExpressionError(
                    f"invalid operator character '{ch}' (at position {i})", i, text
                )
        elif ch == "!":
            tokens.append(_Token(_NOT, i))
            i += 1
        elif ch == "(":
            tokens.append(_Token(_OPEN, i))
            i += 1
        elif ch == ")":
            tokens.append(_Token(_CLOSE, i))
            i += 1
        elif ch in "'\"":
            end = text.find(ch, i + 1)
            if end < 0:
                raise ExpressionError(f"unclosed quote (started at position {i})", i, text)
            tokens.append(_Token(_NAME, i, text[i + 1:end]))
            i = end + 1
        elif ch in _NAME_CHARS:
            start = i
            while i < length and text[i] in _NAME_CHARS:
                i += 1
            tokens.append(_Token(_NAME, start, text[start:i]))
        else:
            raise ExpressionError(
                f"unexpected non-naming character '{ch}' (at position {i})"
                " - use enclosing quotes if necessary",
                i,
                text,
            )
    tokens.append(_Token(_END, max(0, length - 1)))
    return tokens


def _sequence_error(token: _Token, text: str) -> ExpressionError:
    pos = token.position
    if token.kind == _NOT:
        message = f"unexpected not operator (at position {pos})"
    elif token.kind == _NAME:
        message = f"unexpected property name start (at position {pos})"
    elif token.kind == _OP:
        message = f"unexpected operator '{token.value}' (at position {pos})"
    elif token.kind == _OPEN:
        message = f"unexpected group open character (at position {pos})"
    elif token.kind == _CLOSE:
        message = f"unexpected group close character (at position {pos})"
    else:
        message = f"unexpected end of expression (at position {pos})"
    return ExpressionError(message, pos, text)


def parse_expression(text: str) -> OthersExpr:
    """Parse ``text`` into an :class:`OthersExpr`.

    Raises :class:`~jsonvet.errors.ExpressionError` carrying the 0-based
    position of the first problem found.
    """
    root = OthersExpr()
    stack: List[OthersExpr] = [root]
    opened: List[int] = []
    negated = False
    op = BooleanOperator.AND
    previous = _START
    for token in _tokenize(text):
        if token.kind not in _FOLLOWS[previous]:
            raise _sequence_error(token, text)
        if token.kind == _NOT:
            negated = not negated
        elif token.kind == _OP:
            op = BooleanOperator(token.value)
        elif token.kind == _NAME:
            stack[-1].items.append(OtherProperty(token.value, negated, op))
            negated, op = False, BooleanOperator.AND
        elif token.kind == _OPEN:
            group = OtherGrouping(OthersExpr(), negated, op)
            stack[-1].items.append(group)
            stack.append(group.expr)
            opened.append(token.position)
            negated, op = False, BooleanOperator.AND
        elif token.kind == _CLOSE:
            if len(stack) == 1:
                raise ExpressionError(
                    f"unexpected group close character (at position {token.position})",
                    token.position,
                    text,
                )
            stack.pop()
            opened.pop()
        elif opened:
            raise ExpressionError(
                f"unbalanced grouping parentheses (at position {opened[-1]})", opened[-1], text
            )
        previous = token.kind
    return root


__all__ = [
    "BooleanOperator",
    "OtherProperty",
    "OtherGrouping",
    "OthersExpr",
    "parse_expression",
]
