"""PHP expression values and precedence utilities.

Every piece of generated PHP expression text travels as a ``PhpExpr``:
the text plus the binding precedence of its outermost operator. Callers
splice sub-expressions into larger ones through ``protect``, which adds
parentheses only where the surrounding operator binds at least as tightly.

Subtypes carry what the compiler knows about the runtime value:

- ``PhpStringExpr``: already a PHP string, concatenates as is
- ``PhpArrayExpr``: a PHP array, must be joined before concatenation

Design Notes:
- Pure functions over immutable values; no compiler state lives here
- Precedences follow PHP's grammar for the operators templates can use
- String concatenation (``.``) shares the additive precedence level

"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from phpgen.exceptions import UnsupportedLiteralElementError
from phpgen.nodes.types import ContentKind

MAX_PRECEDENCE = sys.maxsize

# Higher binds tighter. Keys are template-level operator names.
PRECEDENCE: dict[str, int] = {
    "neg": 10,
    "not": 9,
    "*": 8,
    "/": 8,
    "%": 8,
    "+": 7,
    "-": 7,
    "<": 6,
    ">": 6,
    "<=": 6,
    ">=": 6,
    "==": 5,
    "!=": 5,
    "and": 4,
    "or": 3,
    "null_coalescing": 2,
    "conditional": 1,
}

# PHP rejects ``$a < $b < $c`` and ``$a == $b == $c`` outright.
NON_ASSOCIATIVE = frozenset({"<", ">", "<=", ">=", "==", "!="})

CONDITIONAL_PRECEDENCE = PRECEDENCE["conditional"]
EQUALITY_PRECEDENCE = PRECEDENCE["=="]
CONCAT_PRECEDENCE = PRECEDENCE["+"]

TRANSLATOR_NAME = "Translator"

SANITIZED_CLASSES: dict[ContentKind, str] = {
    ContentKind.HTML: "\\Goog\\Soy\\SanitizedHtml",
    ContentKind.JS: "\\Goog\\Soy\\SanitizedJs",
    ContentKind.CSS: "\\Goog\\Soy\\SanitizedCss",
    ContentKind.URI: "\\Goog\\Soy\\SanitizedUri",
    ContentKind.ATTRIBUTES: "\\Goog\\Soy\\SanitizedHtmlAttribute",
    ContentKind.TEXT: "\\Goog\\Soy\\UnsanitizedText",
}

PHP_KEYWORDS = frozenset({
    "__halt_compiler", "abstract", "and", "array", "as", "break", "callable", "case",
    "catch", "class", "clone", "const", "continue", "declare", "default", "die",
    "do", "echo", "else", "elseif", "empty", "enddeclare", "endfor", "endforeach", "endif",
    "endswitch", "endwhile", "eval", "exit", "extends", "final", "finally", "fn", "for",
    "foreach", "function", "global", "goto", "if", "implements", "include", "include_once",
    "instanceof", "insteadof", "interface", "isset", "list", "match", "namespace", "new",
    "or", "print", "private", "protected", "public", "readonly", "require", "require_once",
    "return", "static", "switch", "throw", "trait", "try", "unset", "use", "var", "while",
    "xor", "yield",
})


@dataclass(frozen=True, slots=True)
class PhpExpr:
    """PHP expression text with the precedence of its outermost operator."""

    text: str
    precedence: int = MAX_PRECEDENCE

    def with_text(self, text: str, precedence: int | None = None) -> PhpExpr:
        """Same subtype, new text (and optionally precedence)."""
        return type(self)(text, self.precedence if precedence is None else precedence)


@dataclass(frozen=True, slots=True)
class PhpStringExpr(PhpExpr):
    """Expression known to evaluate to a PHP string."""


@dataclass(frozen=True, slots=True)
class PhpArrayExpr(PhpExpr):
    """Expression known to evaluate to a PHP array."""


NULL = PhpExpr("null")
EMPTY_STRING = PhpStringExpr("''")


def protect(expr: PhpExpr, min_safe_precedence: int) -> PhpExpr:
    """Parenthesize ``expr`` unless it binds tighter than ``min_safe_precedence``.

    Idempotent: the parenthesized result has MAX precedence.

    Example:
        >>> protect(PhpExpr("$a - $b", 7), 7).text
        '($a - $b)'
        >>> protect(PhpExpr("$a * $b", 8), 7).text
        '$a * $b'
    """
    if expr.precedence > min_safe_precedence:
        return expr
    return expr.with_text(f"({expr.text})", MAX_PRECEDENCE)


def to_php_string(expr: PhpExpr) -> PhpStringExpr:
    """Coerce an expression to a string-typed one.

    Arrays do not stringify in PHP, so they are joined explicitly.
    """
    if isinstance(expr, PhpStringExpr):
        return expr
    if isinstance(expr, PhpArrayExpr):
        return PhpStringExpr(f"implode('', {expr.text})", MAX_PRECEDENCE)
    return PhpStringExpr(expr.text, expr.precedence)


def concat(exprs: Sequence[PhpExpr]) -> PhpStringExpr:
    """Concatenate expressions with PHP's ``.`` operator.

    Example:
        >>> concat([PhpStringExpr("'Hello '"), PhpExpr("$a - $b", 7)]).text
        "'Hello '.($a - $b)"
    """
    if not exprs:
        return EMPTY_STRING
    if len(exprs) == 1:
        return to_php_string(exprs[0])
    pieces = [protect(to_php_string(e), CONCAT_PRECEDENCE).text for e in exprs]
    return PhpStringExpr(".".join(pieces), MAX_PRECEDENCE)


def gen_operator(op: str, operands: Sequence[PhpExpr], token: str | None = None) -> PhpExpr:
    """Render a unary or left-associative binary operator.

    ``op`` is the template-level operator name (a PRECEDENCE key); ``token``
    is the PHP spelling, defaulting to ``op``. The leftmost operand only
    needs parentheses when it binds looser than the operator; the others
    also need them at equal precedence. Comparisons chain in neither
    direction, so both sides are protected at equal precedence.

    Example:
        >>> gen_operator("==", [PhpExpr("$a == $b", PRECEDENCE["=="]), PhpExpr("$c")]).text
        '($a == $b) == $c'
    """
    precedence = PRECEDENCE[op]
    token = token or op
    if len(operands) == 1:
        operand = protect(operands[0], precedence)
        if op == "neg":
            return PhpExpr(f"{token}{operand.text}", precedence)
        return PhpExpr(f"{token} {operand.text}", precedence)

    first, *rest = operands
    left_floor = precedence if op in NON_ASSOCIATIVE else precedence - 1
    parts = [protect(first, left_floor).text]
    parts.extend(protect(o, precedence).text for o in rest)
    return PhpExpr(f" {token} ".join(parts), precedence)


def ternary(cond: PhpExpr, if_true: PhpExpr, if_false: PhpExpr) -> PhpExpr:
    """Render ``cond ? if_true : if_false`` with every part protected."""
    p = CONDITIONAL_PRECEDENCE
    return PhpExpr(
        f"{protect(cond, p).text} ? {protect(if_true, p).text} : {protect(if_false, p).text}",
        p,
    )


def not_null_check(expr: PhpExpr) -> PhpExpr:
    """Render ``expr !== null``."""
    return gen_operator("!=", [expr, NULL], "!==")


def quote_string(value: str) -> str:
    """Render a PHP single-quoted string literal.

    Only backslash and the quote itself are special inside single quotes.
    """
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def string_literal(value: str) -> PhpStringExpr:
    return PhpStringExpr(quote_string(value), MAX_PRECEDENCE)


def scalar_literal(value: str | int | float | bool | None) -> PhpExpr:
    """Render a Python scalar as a PHP literal."""
    if value is None:
        return NULL
    if isinstance(value, bool):
        return PhpExpr("true" if value else "false")
    if isinstance(value, str):
        return string_literal(value)
    if isinstance(value, float):
        return PhpExpr(repr(value), MAX_PRECEDENCE if value >= 0 else PRECEDENCE["neg"])
    if isinstance(value, int):
        return PhpExpr(str(value), MAX_PRECEDENCE if value >= 0 else PRECEDENCE["neg"])
    raise UnsupportedLiteralElementError(value)


def array_literal(items: Iterable[PhpExpr | int | float | str]) -> PhpArrayExpr:
    """Render a PHP list literal ``[a, b, c]``.

    Accepts numbers, strings (quoted) and expressions. Booleans and any
    other value raise UnsupportedLiteralElementError.
    """
    values: list[str] = []
    for item in items:
        if isinstance(item, PhpExpr):
            values.append(item.text)
        elif isinstance(item, str):
            values.append(quote_string(item))
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            values.append(str(item))
        else:
            raise UnsupportedLiteralElementError(item)
    return PhpArrayExpr(f"[{', '.join(values)}]", MAX_PRECEDENCE)


def map_literal(pairs: Iterable[tuple[PhpExpr, PhpExpr]] | Mapping[str, PhpExpr]) -> PhpArrayExpr:
    """Render a PHP associative array ``['k' => v, ...]``.

    String keys are quoted. Insertion order is kept; a repeated key keeps
    its first position and takes the last value.
    """
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    entries: dict[str, str] = {}
    for key, value in items:
        key_text = quote_string(key) if isinstance(key, str) else key.text
        entries[key_text] = value.text
    body = ", ".join(f"{k} => {v}" for k, v in entries.items())
    return PhpArrayExpr(f"[{body}]", MAX_PRECEDENCE)


def sanitized_class(kind: ContentKind) -> str:
    return SANITIZED_CLASSES[kind]


def wrap_as_sanitized(kind: ContentKind, expr: PhpExpr) -> PhpExpr:
    """Render ``new \\Goog\\Soy\\Sanitized<Kind>(expr)``."""
    return PhpExpr(f"new {sanitized_class(kind)}({expr.text})", MAX_PRECEDENCE)


def escape_method_name(name: str) -> str:
    """Append ``_`` to names PHP reserves."""
    if name.lower() in PHP_KEYWORDS:
        return f"{name}_"
    return name


class FunctionExprBuilder:
    """Build a PHP call expression ``name(arg, ...)`` argument by argument.

    Example:
        >>> FunctionExprBuilder("Runtime::getDelegateFn").add_arg("moo.goo").add_arg("").add_arg(True).build()
        "Runtime::getDelegateFn('moo.goo', '', true)"
    """

    __slots__ = ("_args", "name")

    def __init__(self, name: str):
        self.name = name
        self._args: list[str] = []

    def add_arg(self, arg: PhpExpr | str | int | float | bool | None) -> FunctionExprBuilder:
        if isinstance(arg, PhpExpr):
            self._args.append(arg.text)
        else:
            self._args.append(scalar_literal(arg).text)
        return self

    def build(self) -> str:
        return f"{self.name}({', '.join(self._args)})"

    def as_expr(self) -> PhpExpr:
        return PhpExpr(self.build(), MAX_PRECEDENCE)

    def as_string_expr(self) -> PhpStringExpr:
        return PhpStringExpr(self.build(), MAX_PRECEDENCE)
