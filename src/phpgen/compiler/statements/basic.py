"""Basic statement emission for the phpgen compiler.

Provides mixin for emitting nodes that are always expression-capable
(raw text, prints, css names, messages) when they are visited on their
own rather than as part of a batched run.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from phpgen.compiler.core import EmitState
    from phpgen.nodes import Node


class BasicStatementMixin:
    """Mixin for emitting expression-capable nodes as output appends."""

    def _compile_expression_node(self, node: Node, state: EmitState) -> None:
        """Append the node's expression to the active output variable.

        Generates:
            $output .= 'text';
        """
        state.code.add_to_output_var(state.exprs.generate(node))
