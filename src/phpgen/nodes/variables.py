"""Variable binding nodes for the phpgen input tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from phpgen.nodes.base import Node
from phpgen.nodes.expressions import Expr
from phpgen.nodes.types import ContentKind


@dataclass(frozen=True, slots=True)
class LetValue(Node):
    """Value binding: {let $name: expr /}

    ``unique_name`` is the collision-free generated variable name
    (without the leading ``$``), assigned upstream.
    """

    name: str
    value: Expr
    unique_name: str


@dataclass(frozen=True, slots=True)
class LetContent(Node):
    """Content binding: {let $name kind="html"}...{/let}"""

    name: str
    body: Sequence[Node]
    unique_name: str
    content_kind: ContentKind | None = None
