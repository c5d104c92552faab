"""Localized message compilation.

A message becomes a pair of runtime calls on the configured translation
class (imported as ``Translator``): ``prepare*`` registers the message
text under its ID, ``render*`` substitutes the placeholder values.

Four shapes, chosen from the message structure:

    literal       Hello world
    placeholders  Hello {USERNAME}
    plural        ['=0' => 'No drafts', 'other' => '{NUM} drafts']
    ICU           {GENDER,select,female{...}other{...}}

Placeholder Naming:
    Every substitution unit (print, call, HTML tag, plural or select
    variable) gets an UPPER_SNAKE name derived from its source. Identical
    units share one name; distinct units with the same base name are
    numbered ``_1``, ``_2``, ... Plural and select variables are first
    lengthened along their access path when that resolves the clash
    (``$people[0].gender`` vs ``$people[1].gender`` ->
    ``PEOPLE_0_GENDER``, ``PEOPLE_1_GENDER``).

"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, fields, is_dataclass
from typing import TYPE_CHECKING, Literal

from phpgen.compiler.exprs import (
    CONDITIONAL_PRECEDENCE,
    NULL,
    TRANSLATOR_NAME,
    FunctionExprBuilder,
    PhpExpr,
    PhpStringExpr,
    array_literal,
    concat,
    map_literal,
    protect,
    string_literal,
    to_php_string,
)
from phpgen.compiler.msg_id import msg_id
from phpgen.compiler.translate import ExprTranslator
from phpgen.nodes import (
    Const,
    Expr,
    Getattr,
    Getitem,
    MsgHtmlTag,
    MsgPlaceholder,
    MsgPlural,
    MsgSelect,
    MsgText,
    Name,
    OptionalGetattr,
    OptionalGetitem,
    Output,
)

if TYPE_CHECKING:
    from phpgen.compiler.context import CompileContext
    from phpgen.compiler.gen_exprs import ExprsGenerator
    from phpgen.compiler.scope import LocalScope
    from phpgen.nodes import Msg, MsgFallbackGroup, MsgPart, Node

UnitKind = Literal["print", "call", "tag", "plural", "select"]

FALLBACK_PLACEHOLDER_NAME = "XXX"
FALLBACK_PLURAL_NAME = "NUM"
FALLBACK_SELECT_NAME = "STATUS"

HTML_TAG_NAMES: dict[str, str] = {
    "a": "LINK",
    "br": "BREAK",
    "b": "BOLD",
    "i": "ITALIC",
    "img": "IMAGE",
    "p": "PARAGRAPH",
    "li": "LIST_ITEM",
    "ol": "ORDERED_LIST",
    "ul": "UNORDERED_LIST",
    "em": "EMPHASIS",
}

_WORD_BOUNDARY = re.compile(
    r"(?<=[a-zA-Z])(?=[A-Z][a-z])"  # fooBar
    r"|(?<=[a-zA-Z])(?=[0-9])"  # foo2
    r"|(?<=[0-9])(?=[a-zA-Z])"  # 2foo
)
_UNDERSCORES = re.compile(r"_+")

_POSITION_FIELDS = frozenset({"lineno", "col_offset"})


def to_upper_underscore(ident: str) -> str:
    """``numDrafts`` -> ``NUM_DRAFTS``"""
    ident = _WORD_BOUNDARY.sub("_", ident.strip("_"))
    return _UNDERSCORES.sub("_", ident).upper()


def escape_braces(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def structural_key(value: object) -> object:
    """Hashable key equal for nodes with the same source, wherever they appear."""
    if is_dataclass(value) and not isinstance(value, type):
        return (
            type(value).__name__,
            *(
                structural_key(getattr(value, f.name))
                for f in fields(value)
                if f.name not in _POSITION_FIELDS
            ),
        )
    if isinstance(value, (list, tuple)):
        return tuple(structural_key(v) for v in value)
    return value


def placeholder_kind(part: MsgPlaceholder) -> UnitKind:
    if isinstance(part.content, Output):
        return "print"
    if isinstance(part.content, MsgHtmlTag):
        return "tag"
    return "call"


def naive_base_name(expr: Expr, fallback: str) -> str:
    """Base name of a data reference: its last name segment."""
    if isinstance(expr, Name):
        return to_upper_underscore(expr.name)
    if isinstance(expr, (Getattr, OptionalGetattr)):
        return to_upper_underscore(expr.attr)
    if (
        isinstance(expr, (Getitem, OptionalGetitem))
        and isinstance(expr.key, Const)
        and type(expr.key.value) is int
    ):
        return f"{naive_base_name(expr.obj, fallback)}_{expr.key.value}"
    return fallback


def candidate_base_names(expr: Expr) -> list[str]:
    """Names of increasing length along the access path, shortest first.

    ``$people[0].gender`` -> ``['GENDER', 'PEOPLE_0_GENDER']``. Integer
    keys are folded into the next segment since a bare index is not a name.
    """
    names: list[str] = []
    suffix: str | None = None
    node: Expr | None = expr
    while node is not None:
        if isinstance(node, Name):
            segment = node.name
            node = None
        elif isinstance(node, (Getattr, OptionalGetattr)):
            segment = node.attr
            node = node.obj
        elif isinstance(node, (Getitem, OptionalGetitem)):
            key = node.key
            if not (isinstance(key, Const) and type(key.value) is int) or key.value < 0:
                break
            suffix = f"{key.value}_{suffix}" if suffix else str(key.value)
            node = node.obj
            continue
        else:
            break
        part = to_upper_underscore(segment)
        suffix = f"{part}_{suffix}" if suffix else part
        names.append(suffix)
    return names


def noncolliding_base_names(exprs: Sequence[Expr], fallback: str) -> list[str]:
    """Shortest candidate name per expression that no other expression can take.

    Each expression claims its longest candidate and every ``_``-separated
    suffix of it; a candidate is usable when only one expression claims it.
    """
    candidates = [candidate_base_names(e) for e in exprs]
    claims: Counter[str] = Counter()
    for names in candidates:
        if not names:
            continue
        longest = names[-1]
        claimed = {longest}
        claimed.update(longest[i + 1 :] for i, ch in enumerate(longest) if ch == "_")
        claims.update(claimed)

    result: list[str] = []
    for expr, names in zip(exprs, candidates, strict=True):
        if not names:
            result.append(fallback)
            continue
        result.append(
            next((n for n in names if claims[n] == 1), naive_base_name(expr, fallback))
        )
    return result


@dataclass(slots=True)
class _Unit:
    """One substitution unit of a message."""

    kind: UnitKind
    node: Node
    base_name: str = ""
    name: str = ""
    # Offset of the innermost enclosing plural, for remainder().
    plural_offset: int | None = None


class PlaceholderNamer:
    """Assign final placeholder names to the substitution units of a message.

    Example:
        >>> namer = PlaceholderNamer(msg)
        >>> [u.name for u in namer.units]
        ['NUM_DRAFTS_1', 'NUM_DRAFTS_2']

    """

    __slots__ = ("_by_key", "units")

    def __init__(self, msg: Msg):
        self._by_key: dict[object, _Unit] = {}
        self.units: list[_Unit] = []
        self._collect(msg.parts, None)
        self._assign_base_names()
        self._assign_final_names()

    def name_for(self, kind: UnitKind, node: Node) -> str:
        return self._by_key[(kind, structural_key(node))].name

    def _add(self, kind: UnitKind, node: Node, plural_offset: int | None) -> None:
        key = (kind, structural_key(node))
        if key not in self._by_key:
            unit = _Unit(kind, node, plural_offset=plural_offset)
            self._by_key[key] = unit
            self.units.append(unit)

    def _collect(self, parts: Sequence[MsgPart], plural_offset: int | None) -> None:
        for part in parts:
            if isinstance(part, MsgPlaceholder):
                self._add(placeholder_kind(part), part.content, plural_offset)
            elif isinstance(part, MsgPlural):
                self._add("plural", part.expr, plural_offset)
                for case in part.cases:
                    self._collect(case.parts, part.offset)
                self._collect(part.default, part.offset)
            elif isinstance(part, MsgSelect):
                self._add("select", part.expr, plural_offset)
                for select_case in part.cases:
                    self._collect(select_case.parts, plural_offset)
                self._collect(part.default, plural_offset)

    def _assign_base_names(self) -> None:
        variables = [u for u in self.units if u.kind in ("plural", "select")]
        plural_names = noncolliding_base_names(
            [u.node for u in variables], FALLBACK_PLURAL_NAME
        )
        for unit, name in zip(variables, plural_names, strict=True):
            if name == FALLBACK_PLURAL_NAME and unit.kind == "select":
                name = FALLBACK_SELECT_NAME
            unit.base_name = name

        for unit in self.units:
            if unit.kind == "print":
                unit.base_name = naive_base_name(unit.node.expr, FALLBACK_PLACEHOLDER_NAME)
            elif unit.kind == "call":
                unit.base_name = FALLBACK_PLACEHOLDER_NAME
            elif unit.kind == "tag":
                tag = unit.node.tag.lower()
                prefix = "END" if unit.node.is_close else "START"
                unit.base_name = f"{prefix}_{HTML_TAG_NAMES.get(tag, tag.upper())}"

    def _assign_final_names(self) -> None:
        by_base: dict[str, list[_Unit]] = {}
        for unit in self.units:
            by_base.setdefault(unit.base_name, []).append(unit)
        for base, group in by_base.items():
            if len(group) == 1:
                group[0].name = base
                continue
            suffix = 1
            for unit in group:
                while f"{base}_{suffix}" in by_base:
                    suffix += 1
                unit.name = f"{base}_{suffix}"
                suffix += 1


class MessageCompiler:
    """Compile messages and fallback groups to translator calls."""

    __slots__ = ("_context", "_generator", "_scope")

    def __init__(self, context: CompileContext, scope: LocalScope, generator: ExprsGenerator):
        self._context = context
        self._scope = scope
        self._generator = generator

    def compile_fallback_group(self, group: MsgFallbackGroup) -> PhpExpr:
        expr: PhpExpr = self.compile(group.msg)
        if group.fallback is not None:
            fallback = self.compile(group.fallback)
            guard = (
                f"{TRANSLATOR_NAME}::isMsgAvailable({self.message_id(group.msg)})"
                f" || {TRANSLATOR_NAME}::isMsgAvailable({self.message_id(group.fallback)})"
            )
            p = CONDITIONAL_PRECEDENCE
            expr = PhpStringExpr(
                f"{guard} ? {protect(expr, p).text} : {protect(fallback, p).text}", p
            )
        return self._generator.apply_escaping_directives(
            expr, group.escaping_directives, group
        )

    def compile(self, msg: Msg) -> PhpStringExpr:
        namer = PlaceholderNamer(msg)
        ident = self._id_for(msg, namer)
        desc = string_literal(msg.desc) if msg.desc is not None else NULL
        meaning = string_literal(msg.meaning) if msg.meaning is not None else NULL

        if msg.is_raw_text:
            text = "".join(p.text for p in msg.parts if isinstance(p, MsgText))
            prepare = self._translator_call("prepareLiteral", ident, string_literal(text), desc, meaning)
            return self._translator_call("renderLiteral", prepare)

        names = array_literal([u.name for u in namer.units])
        values = self._placeholder_values(namer)

        if msg.is_plural:
            plural = msg.parts[0]
            cases: list[tuple[str, PhpExpr]] = [
                (f"={case.count}", string_literal(self._flat_text(case.parts, namer)))
                for case in plural.cases
            ]
            cases.append(("other", string_literal(self._flat_text(plural.default, namer))))
            prepare = self._translator_call(
                "preparePlural", ident, map_literal(cases), names, desc, meaning
            )
            plural_expr = self._generator.translator.translate(plural.expr)
            return self._translator_call(
                "renderPlural", prepare, plural_expr, values
            )

        if msg.is_plural_or_select:
            text = string_literal(self._icu_text(msg.parts, namer))
            prepare = self._translator_call("prepareIcu", ident, text, names, desc, meaning)
            return self._translator_call("renderIcu", prepare, values)

        text = string_literal(self._flat_text(msg.parts, namer))
        prepare = self._translator_call("prepare", ident, text, names, desc, meaning)
        return self._translator_call("render", prepare, values)

    def message_id(self, msg: Msg) -> int:
        return self._id_for(msg, PlaceholderNamer(msg))

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _translator_call(method: str, *args: PhpExpr | int) -> PhpStringExpr:
        builder = FunctionExprBuilder(f"{TRANSLATOR_NAME}::{method}")
        for arg in args:
            builder.add_arg(arg)
        return builder.as_string_expr()

    def _id_for(self, msg: Msg, namer: PlaceholderNamer) -> int:
        if msg.is_plural_or_select:
            return msg_id(self._icu_text(msg.parts, namer))
        content = []
        for part in msg.parts:
            if isinstance(part, MsgText):
                content.append(part.text)
            elif isinstance(part, MsgPlaceholder):
                content.append(namer.name_for(placeholder_kind(part), part.content))
        return msg_id("".join(content))

    def _flat_text(self, parts: Sequence[MsgPart], namer: PlaceholderNamer) -> str:
        text = []
        for part in parts:
            if isinstance(part, MsgText):
                text.append(escape_braces(part.text))
            elif isinstance(part, MsgPlaceholder):
                text.append(f"{{{namer.name_for(placeholder_kind(part), part.content)}}}")
        return "".join(text)

    def _icu_text(self, parts: Sequence[MsgPart], namer: PlaceholderNamer) -> str:
        text = []
        for part in parts:
            if isinstance(part, MsgText):
                text.append(escape_braces(part.text))
            elif isinstance(part, MsgPlaceholder):
                text.append(f"{{{namer.name_for(placeholder_kind(part), part.content)}}}")
            elif isinstance(part, MsgPlural):
                offset = f"offset:{part.offset} " if part.offset else ""
                text.append(f"{{{namer.name_for('plural', part.expr)},plural,{offset}")
                for case in part.cases:
                    text.append(f"={case.count}{{{self._icu_text(case.parts, namer)}}}")
                text.append(f"other{{{self._icu_text(part.default, namer)}}}}}")
            elif isinstance(part, MsgSelect):
                text.append(f"{{{namer.name_for('select', part.expr)},select,")
                for select_case in part.cases:
                    text.append(f"{select_case.value}{{{self._icu_text(select_case.parts, namer)}}}")
                text.append(f"other{{{self._icu_text(part.default, namer)}}}}}")
        return "".join(text)

    def _placeholder_values(self, namer: PlaceholderNamer) -> PhpExpr:
        values: list[tuple[str, PhpExpr]] = []
        for unit in namer.units:
            values.append((unit.name, self._unit_value(unit)))
        return map_literal(values)

    def _unit_value(self, unit: _Unit) -> PhpExpr:
        generator = self._generator
        node = unit.node
        if unit.kind in ("plural", "select"):
            return generator.translator.translate(node)
        if unit.kind == "tag":
            return concat(generator.generate_children(node.body))
        if unit.kind == "call":
            return to_php_string(generator.generate(node))
        translator = generator.translator
        if unit.plural_offset is not None:
            translator = ExprTranslator(
                self._context, self._scope, remainder_offset=unit.plural_offset
            )
        expr = translator.translate(node.expr)
        return to_php_string(generator.apply_directives(expr, node.directives, node, translator))
