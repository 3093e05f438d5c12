"""
Expression tree for the lispy reader.

An expression is one of four immutable node types:

    Number(42)                      42
    String("hello")                 "hello"
    Symbol("+")                     +
    List((Symbol("+"), Number(1)))  (+ 1)

Nodes are frozen dataclasses, so a parsed tree can be shared freely and
compared by value. Lists hold their children in a tuple.

Usage:
    from lispy.reader.expr import List, Number, Symbol

    tree = List.of("+", 1, 2)
    tree.to_string()  # '(+ 1 2)'

    match tree:
        case List((Symbol("+"), *args)):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

# Range of a signed 64-bit integer
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

OPERATOR_CHARS = "+-*/="


class Expr:
    """Base class for all expression nodes."""

    __slots__ = ()

    def to_string(self) -> str:
        """Serialize to canonical text."""
        raise NotImplementedError

    def to_data(self) -> Any:
        """Convert to plain JSON-compatible data."""
        raise NotImplementedError

    @property
    def is_atom(self) -> bool:
        """True if this is a leaf node (number, string, symbol)."""
        return not isinstance(self, List)

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class Number(Expr):
    """Signed 64-bit integer literal."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Number value must be an int, got {type(self.value).__name__}")
        if not INT_MIN <= self.value <= INT_MAX:
            raise ValueError(f"Number out of 64-bit range: {self.value}")

    def to_string(self) -> str:
        return str(self.value)

    def to_data(self) -> int:
        return self.value


@dataclass(frozen=True)
class String(Expr):
    """Double-quoted string literal. The text is stored without the quotes."""

    text: str

    def to_string(self) -> str:
        return f'"{self.text}"'

    def to_data(self) -> dict[str, str]:
        return {"string": self.text}


@dataclass(frozen=True)
class Symbol(Expr):
    """Bare identifier or operator character."""

    name: str

    @property
    def is_operator(self) -> bool:
        return len(self.name) == 1 and self.name in OPERATOR_CHARS

    def to_string(self) -> str:
        return self.name

    def to_data(self) -> dict[str, str]:
        return {"symbol": self.name}


@dataclass(frozen=True)
class List(Expr):
    """Parenthesized sequence of expressions. May be empty."""

    items: tuple[Expr, ...] = ()

    def __post_init__(self):
        # Accept any iterable of nodes but always store a tuple
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index: int) -> Expr:
        return self.items[index]

    @property
    def head(self) -> Expr | None:
        """First element, or None for the empty list."""
        return self.items[0] if self.items else None

    def to_string(self) -> str:
        return "(" + " ".join(item.to_string() for item in self.items) + ")"

    def to_data(self) -> list[Any]:
        return [item.to_data() for item in self.items]

    @classmethod
    def of(cls, *items: Union[Expr, int, str]) -> List:
        """
        Build a list from nodes or plain Python values.

        Ints become Numbers and strs become Symbols; use String() explicitly
        for string literals.
        """
        return cls(tuple(_coerce(item) for item in items))


def _coerce(value: Union[Expr, int, str]) -> Expr:
    if isinstance(value, Expr):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Number(value)
    if isinstance(value, str):
        return Symbol(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to an expression")


def deref(name: str) -> List:
    """Expansion of the ``@name`` shorthand: ``(deref name)``."""
    return List((Symbol("deref"), Symbol(name)))


def format_expr(expr: Expr) -> str:
    """Canonical text for an expression tree."""
    return expr.to_string()


__all__ = [
    "Expr",
    "Number",
    "String",
    "Symbol",
    "List",
    "deref",
    "format_expr",
    "INT_MIN",
    "INT_MAX",
    "OPERATOR_CHARS",
]
