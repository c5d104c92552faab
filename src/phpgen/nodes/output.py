"""Output nodes for the phpgen input tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from phpgen.nodes.base import Node
from phpgen.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text between template constructs."""

    value: str


@dataclass(frozen=True, slots=True)
class Directive(Node):
    """Print directive applied to an output: |escapeHtml, |truncate:8"""

    name: str
    args: Sequence[Expr] = ()


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Print expression: {$expr |directive ...}

    Directives are applied in order, innermost first. Escaping directives
    selected by the autoescaper arrive here as ordinary directives.
    """

    expr: Expr
    directives: Sequence[Directive] = ()


@dataclass(frozen=True, slots=True)
class Css(Node):
    """CSS class name lookup: {css $component, selector}"""

    selector: str
    component: Expr | None = None
