"""Compiler configuration and plugin protocols.

One immutable CompilerConfig is built per compilation run and shared,
read-only, by every component of every file being compiled.

Plugins:
    Functions and print directives that the compiler does not know natively
    are looked up by name. A handler turns already-translated argument
    expressions into a PHP expression:

        >>> class Strlen:
        ...     def apply(self, args):
        ...         return PhpExpr(f"strlen({args[0].text})")
        >>> config = CompilerConfig(functions={"length": Strlen()})

    For the common shape "call a PHP function with the arguments",
    SimpleFunction and SimpleDirective build the handler directly.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from phpgen.compiler.exprs import (
    MAX_PRECEDENCE,
    FunctionExprBuilder,
    PhpExpr,
    PhpStringExpr,
)

GlobalValue = str | int | float | bool | None


@runtime_checkable
class PhpFunction(Protocol):
    """Plugin function: translated arguments -> PHP expression."""

    def apply(self, args: Sequence[PhpExpr]) -> PhpExpr: ...


@runtime_checkable
class PhpPrintDirective(Protocol):
    """Plugin print directive: printed value + arguments -> PHP expression."""

    valid_arg_counts: frozenset[int]

    def apply(self, expr: PhpExpr, args: Sequence[PhpExpr]) -> PhpExpr: ...


@dataclass(frozen=True, slots=True)
class SimpleFunction:
    """Function plugin rendered as ``php_name(arg, ...)``."""

    php_name: str
    string_typed: bool = False

    def apply(self, args: Sequence[PhpExpr]) -> PhpExpr:
        builder = FunctionExprBuilder(self.php_name)
        for arg in args:
            builder.add_arg(arg)
        return builder.as_string_expr() if self.string_typed else builder.as_expr()


@dataclass(frozen=True, slots=True)
class SimpleDirective:
    """Print directive rendered as ``php_name(value, arg, ...)``.

    Directives always produce strings.
    """

    php_name: str
    valid_arg_counts: frozenset[int] = frozenset({0})

    def apply(self, expr: PhpExpr, args: Sequence[PhpExpr]) -> PhpExpr:
        builder = FunctionExprBuilder(self.php_name).add_arg(expr)
        for arg in args:
            builder.add_arg(arg)
        return builder.as_string_expr()


@dataclass(frozen=True, slots=True)
class IdentityDirective:
    """Directive that leaves the value unchanged (|id, |text)."""

    valid_arg_counts: frozenset[int] = frozenset({0})

    def apply(self, expr: PhpExpr, args: Sequence[PhpExpr]) -> PhpExpr:
        return expr


@dataclass(frozen=True, slots=True)
class TruncateDirective:
    """``|truncate:maxLen[,addEllipsis]`` via ``Directives::truncate``."""

    valid_arg_counts: frozenset[int] = frozenset({1, 2})

    def apply(self, expr: PhpExpr, args: Sequence[PhpExpr]) -> PhpExpr:
        builder = FunctionExprBuilder("Directives::truncate").add_arg(expr).add_arg(args[0])
        builder.add_arg(args[1] if len(args) == 2 else True)
        return PhpStringExpr(builder.build(), MAX_PRECEDENCE)


_SANITIZE_DIRECTIVES = (
    "changeNewlineToBr",
    "cleanHtml",
    "escapeCssString",
    "escapeHtml",
    "escapeHtmlAttribute",
    "escapeHtmlAttributeNospace",
    "escapeHtmlRcdata",
    "escapeJsRegex",
    "escapeJsString",
    "escapeJsValue",
    "escapeUri",
    "filterCssValue",
    "filterHtmlAttributes",
    "filterHtmlElementName",
    "filterImageDataUri",
    "filterNormalizeUri",
    "normalizeHtml",
    "normalizeUri",
)


def builtin_print_directives() -> dict[str, PhpPrintDirective]:
    """Directives backed by the PHP runtime's Sanitize and Directives classes."""
    directives: dict[str, PhpPrintDirective] = {
        f"|{name}": SimpleDirective(f"Sanitize::{name}") for name in _SANITIZE_DIRECTIVES
    }
    directives["|noAutoescape"] = SimpleDirective("Sanitize::filterNoAutoEscape")
    directives["|id"] = IdentityDirective()
    directives["|text"] = IdentityDirective()
    directives["|truncate"] = TruncateDirective()
    return directives


def _freeze(mapping: Mapping[str, object]) -> Mapping[str, object]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, slots=True)
class CompilerConfig:
    """Read-only settings shared by every component of a compilation run.

    Attributes:
        functions: Plugin functions by template-level name.
        print_directives: Print directives by name (``|escapeHtml``);
            defaults to the built-in runtime directives.
        translation_class: PHP class imported as ``Translator`` for messages;
            empty means no import is emitted.
        bidi_is_rtl_fn: Namespaced PHP function deciding global text direction,
            imported as ``bidiIsRtl``; empty means no import is emitted.
        globals: Compile-time global substitutions by dotted name.
        fail_on_errors: Raise CompilationFailedError when errors were reported.
    """

    functions: Mapping[str, PhpFunction] = field(default_factory=dict)
    print_directives: Mapping[str, PhpPrintDirective] = field(
        default_factory=builtin_print_directives
    )
    translation_class: str = ""
    bidi_is_rtl_fn: str = ""
    globals: Mapping[str, GlobalValue] = field(default_factory=dict)
    fail_on_errors: bool = True

    def __post_init__(self) -> None:
        # Snapshot caller-owned dicts so later mutation cannot leak in.
        object.__setattr__(self, "functions", _freeze(self.functions))
        object.__setattr__(self, "print_directives", _freeze(self.print_directives))
        object.__setattr__(self, "globals", _freeze(self.globals))
