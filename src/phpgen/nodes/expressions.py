"""Expression nodes for the phpgen input tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from phpgen.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Constant value: string, number, boolean, null."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Variable reference: $user, or $ij.user when injected."""

    name: str
    injected: bool = False


@dataclass(frozen=True, slots=True)
class Global(Expr):
    """Compile-time global reference: app.VERSION"""

    name: str


@dataclass(frozen=True, slots=True)
class List(Expr):
    """List literal: [a, b, c]

    Items are normally expressions. Raw Python ``int``/``float``/``str``
    values are accepted as pre-folded constants.
    """

    items: Sequence[Expr | int | float | str]


@dataclass(frozen=True, slots=True)
class Dict(Expr):
    """Map literal: ['a': b, 'c': d]"""

    keys: Sequence[Expr]
    values: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class Getattr(Expr):
    """Field access: obj.attr"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class OptionalGetattr(Expr):
    """Null-safe field access: obj?.attr"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class Getitem(Expr):
    """Item access: obj[key]"""

    obj: Expr
    key: Expr


@dataclass(frozen=True, slots=True)
class OptionalGetitem(Expr):
    """Null-safe item access: obj?[key]"""

    obj: Expr
    key: Expr


@dataclass(frozen=True, slots=True)
class FuncCall(Expr):
    """Function call: name(args)"""

    name: str
    args: Sequence[Expr] = ()


@dataclass(frozen=True, slots=True)
class BinOp(Expr):
    """Binary arithmetic or comparison: left op right"""

    op: Literal["+", "-", "*", "/", "%", "<", ">", "<=", ">=", "==", "!="]
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class BoolOp(Expr):
    """Boolean operation: expr1 and/or expr2"""

    op: Literal["and", "or"]
    values: Sequence[Expr]


@dataclass(frozen=True, slots=True)
class UnaryOp(Expr):
    """Unary operation: not x, -x"""

    op: Literal["not", "-"]
    operand: Expr


@dataclass(frozen=True, slots=True)
class CondExpr(Expr):
    """Conditional expression: cond ? a : b"""

    test: Expr
    if_true: Expr
    if_false: Expr


@dataclass(frozen=True, slots=True)
class NullCoalesce(Expr):
    """Null coalescing: a ?: b"""

    left: Expr
    right: Expr


DataAccess = Getattr | OptionalGetattr | Getitem | OptionalGetitem

AnyExpr = (
    Const
    | Name
    | Global
    | List
    | Dict
    | Getattr
    | OptionalGetattr
    | Getitem
    | OptionalGetitem
    | FuncCall
    | BinOp
    | BoolOp
    | UnaryOp
    | CondExpr
    | NullCoalesce
)
