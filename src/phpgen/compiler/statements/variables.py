"""Let binding emission for the phpgen compiler.

Provides mixin for emitting ``{let}`` bindings. Each binding is stored in
a uniquely named PHP variable chosen upstream, and the template-level
name is bound to that variable in the current scope frame.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from phpgen.compiler.exprs import PhpExpr, PhpStringExpr, wrap_as_sanitized
from phpgen.exceptions import MissingContentKindError

if TYPE_CHECKING:
    from phpgen.compiler.core import EmitState
    from phpgen.nodes import LetContent, LetValue, Node


class VariableAssignmentMixin:
    """Mixin for emitting let bindings.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    if TYPE_CHECKING:
        # From Compiler core
        def visit_children(self, body: Sequence[Node], state: EmitState) -> None: ...

    def _compile_let_value(self, node: LetValue, state: EmitState) -> None:
        """Emit {let $x: EXPR /}.

        Generates:
            $x__soy12 = EXPR;
        """
        var = f"${node.unique_name}"
        state.code.append_line(var, " = ", state.translate(node.value).text, ";")
        state.scope.add(node.name, PhpExpr(var))

    def _compile_let_content(self, node: LetContent, state: EmitState) -> None:
        """Emit {let $x kind="html"}...{/let}.

        The body renders into its own output variable, which is then
        wrapped in the sanitized class for its kind:
            $x__soy12 = 'a';
            $x__soy12 .= ...;
            $x__soy12 = new \\Goog\\Soy\\SanitizedHtml($x__soy12);

        Raises:
            MissingContentKindError: the block declares no content kind
        """
        if node.content_kind is None:
            raise MissingContentKindError(node.name, location=state.context.location(node))

        var = f"${node.unique_name}"
        code = state.code
        code.push_output_var(var)
        with state.scope.frame():
            self.visit_children(node.body, state)
        content = code.get_output_as_string()
        code.pop_output_var()

        wrapped = wrap_as_sanitized(node.content_kind, content)
        code.append_line(var, " = ", wrapped.text, ";")
        state.scope.add(node.name, PhpStringExpr(var))
