"""Template call nodes for the phpgen input tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from phpgen.nodes.base import Node
from phpgen.nodes.expressions import Expr
from phpgen.nodes.types import ContentKind


@dataclass(frozen=True, slots=True)
class DataMode:
    """What a call passes as the callee's data record.

    - ``none``: nothing (``null``)
    - ``all``: the caller's whole data record
    - ``expr``: the value of ``expr``

    """

    kind: Literal["none", "all", "expr"] = "none"
    expr: Expr | None = None

    @classmethod
    def none(cls) -> DataMode:
        return cls("none")

    @classmethod
    def all(cls) -> DataMode:
        return cls("all")

    @classmethod
    def of(cls, expr: Expr) -> DataMode:
        return cls("expr", expr)

    @property
    def passes_data(self) -> bool:
        return self.kind != "none"


@dataclass(frozen=True, slots=True)
class CallParamValue(Node):
    """Value param: {param key: expr /}"""

    key: str
    value: Expr


@dataclass(frozen=True, slots=True)
class CallParamContent(Node):
    """Content param: {param key kind="html"}...{/param}

    ``node_id`` names the temporary ``$param<id>`` used when the body
    needs full statement emission.
    """

    key: str
    body: Sequence[Node]
    node_id: int
    content_kind: ContentKind | None = None


CallParam = CallParamValue | CallParamContent


@dataclass(frozen=True, slots=True)
class CallBasic(Node):
    """Template call: {call .name data="..."}{param ...}{/call}

    ``callee`` is either a partial name (``.goo``, same file) or a fully
    qualified dotted name (``ns.sub.goo``).
    """

    callee: str
    data: DataMode = DataMode()
    params: Sequence[CallParam] = ()
    escaping_directives: Sequence[str] = ()


@dataclass(frozen=True, slots=True)
class CallDelegate(Node):
    """Delegate call: {delcall name variant="..."}...{/delcall}"""

    delegate_name: str
    data: DataMode = DataMode()
    params: Sequence[CallParam] = ()
    variant: Expr | None = None
    allow_empty_default: bool = True
    escaping_directives: Sequence[str] = ()


AnyCall = CallBasic | CallDelegate
