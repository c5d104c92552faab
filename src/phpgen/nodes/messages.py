"""Localized message nodes for the phpgen input tree.

A message body is a sequence of parts. Plain text and placeholders form
the flat case; plural and select parts branch on a controlling
expression and each branch holds its own part sequence.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from phpgen.nodes.base import Node
from phpgen.nodes.calls import CallBasic, CallDelegate
from phpgen.nodes.expressions import Expr
from phpgen.nodes.output import Output


@dataclass(frozen=True, slots=True)
class MsgText(Node):
    """Raw message text."""

    text: str


@dataclass(frozen=True, slots=True)
class MsgHtmlTag(Node):
    """HTML tag inside a message: <a href="{$url}">, </a>

    ``body`` holds the tag's own text and prints; it becomes the value of
    the tag's placeholder.
    """

    tag: str
    is_close: bool = False
    body: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class MsgPlaceholder(Node):
    """Substitution point: a print, a call, or an HTML tag."""

    content: Output | CallBasic | CallDelegate | MsgHtmlTag


@dataclass(frozen=True, slots=True)
class MsgPluralCase(Node):
    """Plural case: {case 1}...

    ``count`` is the explicit value matched with ``=N``.
    """

    count: int
    parts: Sequence[MsgPart]


@dataclass(frozen=True, slots=True)
class MsgPlural(Node):
    """Plural block: {plural $n offset="1"}{case 0}...{default}...{/plural}"""

    expr: Expr
    cases: Sequence[MsgPluralCase]
    default: Sequence[MsgPart]
    offset: int = 0


@dataclass(frozen=True, slots=True)
class MsgSelectCase(Node):
    """Select case: {case 'female'}..."""

    value: str
    parts: Sequence[MsgPart]


@dataclass(frozen=True, slots=True)
class MsgSelect(Node):
    """Select block: {select $gender}{case 'female'}...{default}...{/select}"""

    expr: Expr
    cases: Sequence[MsgSelectCase]
    default: Sequence[MsgPart]


MsgPart = MsgText | MsgPlaceholder | MsgPlural | MsgSelect


def _placeholder_contents(parts: Sequence[MsgPart]) -> Iterator[Node]:
    for part in parts:
        if isinstance(part, MsgPlaceholder):
            yield part.content
        elif isinstance(part, (MsgPlural, MsgSelect)):
            for case in part.cases:
                yield from _placeholder_contents(case.parts)
            yield from _placeholder_contents(part.default)


@dataclass(frozen=True, slots=True)
class Msg(Node):
    """Localized message: {msg desc="..." meaning="..."}...{/msg}"""

    parts: Sequence[MsgPart]
    desc: str | None = None
    meaning: str | None = None

    @property
    def is_plural_or_select(self) -> bool:
        return any(isinstance(p, (MsgPlural, MsgSelect)) for p in self.parts)

    @property
    def is_plural(self) -> bool:
        """A single top-level plural with no select or plural nested in it."""
        if len(self.parts) != 1 or not isinstance(self.parts[0], MsgPlural):
            return False
        plural = self.parts[0]
        branches = [c.parts for c in plural.cases] + [plural.default]
        return not any(
            isinstance(p, (MsgPlural, MsgSelect)) for parts in branches for p in parts
        )

    @property
    def is_raw_text(self) -> bool:
        return all(isinstance(p, MsgText) for p in self.parts)

    def placeholder_contents(self) -> Iterator[Node]:
        """Placeholder contents in source order, plural and select branches included."""
        return _placeholder_contents(self.parts)


@dataclass(frozen=True, slots=True)
class MsgFallbackGroup(Node):
    """A message with an optional fallback: {msg}...{fallbackmsg}...{/msg}"""

    msg: Msg
    fallback: Msg | None = None
    escaping_directives: Sequence[str] = ()

    @property
    def msgs(self) -> tuple[Msg, ...]:
        return (self.msg,) if self.fallback is None else (self.msg, self.fallback)
