"""Template structure nodes for the phpgen input tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from phpgen.nodes.base import Node
from phpgen.nodes.types import AnyType, ContentKind


@dataclass(frozen=True, slots=True)
class TemplateParam(Node):
    """Declared template parameter: {@param name: type}"""

    name: str
    type: AnyType
    required: bool = True
    injected: bool = False


@dataclass(frozen=True, slots=True)
class DelegateInfo:
    """Delegate registration data for a deltemplate."""

    name: str
    variant: str = ""
    priority: int = 0


@dataclass(frozen=True, slots=True)
class Template(Node):
    """One template definition: {template .name}...{/template}

    ``ensure_data_defined`` is set upstream when the body reads the data
    record loosely, so the generated function must default it to ``[]``.
    """

    name: str
    body: Sequence[Node]
    content_kind: ContentKind = ContentKind.HTML
    params: Sequence[TemplateParam] = ()
    visibility: Literal["public", "private"] = "public"
    ensure_data_defined: bool = False
    delegate: DelegateInfo | None = None

    @property
    def partial_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]


@dataclass(frozen=True, slots=True)
class TemplateFile(Node):
    """A source file: one namespace, many templates."""

    namespace: str
    file_name: str
    templates: Sequence[Template] = ()
