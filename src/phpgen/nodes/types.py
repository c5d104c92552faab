"""Type annotations carried by the input tree.

Types are resolved upstream; the backend only reads them to pick
parameter guards and sanitized-content wrappers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Literal


class ContentKind(Enum):
    """Escaping context a string is safe for."""

    HTML = "html"
    JS = "js"
    CSS = "css"
    URI = "uri"
    ATTRIBUTES = "attributes"
    TEXT = "text"


PrimitiveKind = Literal[
    "any", "unknown", "null",
    "bool", "string", "int", "float",
    "list", "record", "map", "enum", "object",
]


@dataclass(frozen=True, slots=True)
class PrimitiveType:
    """A non-parameterized type: string, int, list<?>, ..."""

    kind: PrimitiveKind


@dataclass(frozen=True, slots=True)
class SanitizedType:
    """A sanitized-content type: html, js, uri, ..."""

    content_kind: ContentKind


@dataclass(frozen=True, slots=True)
class UnionType:
    """Union of member types: string|int|null"""

    members: Sequence[PrimitiveType | SanitizedType]

    @property
    def is_nullable(self) -> bool:
        return any(
            isinstance(m, PrimitiveType) and m.kind == "null" for m in self.members
        )


AnyType = PrimitiveType | SanitizedType | UnionType
