"""Control flow nodes for the phpgen input tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from phpgen.nodes.base import Node
from phpgen.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {if cond}...{elseif cond}...{else}...{/if}

    ``else_`` is None when there is no else branch; an empty sequence is an
    empty else branch.
    """

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] | None = None


@dataclass(frozen=True, slots=True)
class SwitchCase(Node):
    """One case of a switch; several values share one body."""

    values: Sequence[Expr]
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Switch(Node):
    """Switch: {switch expr}{case a, b}...{default}...{/switch}"""

    subject: Expr
    cases: Sequence[SwitchCase]
    default: Sequence[Node] | None = None


@dataclass(frozen=True, slots=True)
class ForRange(Node):
    """Counted loop: {for $i in range(start, limit, step)}...{/for}

    ``node_id`` is the upstream unique id used to name generated variables.
    """

    target: str
    limit: Expr
    body: Sequence[Node]
    node_id: int
    start: Expr | None = None
    step: Expr | None = None


@dataclass(frozen=True, slots=True)
class Foreach(Node):
    """Collection loop: {foreach $x in items}...{ifempty}...{/foreach}"""

    target: str
    iter: Expr
    body: Sequence[Node]
    node_id: int
    empty: Sequence[Node] | None = None
