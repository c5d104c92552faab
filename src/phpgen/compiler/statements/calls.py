"""Call statement emission for the phpgen compiler.

Provides mixin for emitting template and delegate calls whose content
params cannot be rendered as expressions. Such params are rendered into
a ``$param<id>`` variable first; the call expression then references it.
Messages with such calls among their placeholders go through the same
pre-rendering before the message expression is appended.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from phpgen.compiler.calls import param_var_name
from phpgen.compiler.exprs import to_php_string
from phpgen.compiler.gen_exprs import is_computable
from phpgen.nodes import CallBasic, CallDelegate, CallParamContent, MsgHtmlTag

if TYPE_CHECKING:
    from phpgen.compiler.core import EmitState
    from phpgen.nodes import AnyCall, MsgFallbackGroup, Node


class CallStatementMixin:
    """Mixin for emitting call statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    if TYPE_CHECKING:
        # From Compiler core
        def visit_children(self, body: Sequence[Node], state: EmitState) -> None: ...

    def _compile_call(self, node: AnyCall, state: EmitState) -> None:
        """Emit a call, pre-rendering content params that need statements.

        Generates:
            $param7 = '';
            foreach (...) { ... }
            $output .= self::foo(['body' => $param7], $opt_ijData);
        """
        self._compile_call_params(node, state, set())
        state.code.add_to_output_var(to_php_string(state.exprs.generate(node)))

    def _compile_msg_fallback_group(self, node: MsgFallbackGroup, state: EmitState) -> None:
        """Emit a message, pre-rendering content params of its placeholder calls.

        Generates:
            $param7 = '';
            foreach (...) { ... }
            $output .= Translator::render(Translator::prepare(...), ['CALL' => self::foo(['body' => $param7], $opt_ijData)]);
        """
        emitted: set[str] = set()
        for msg in node.msgs:
            for content in msg.placeholder_contents():
                nodes = content.body if isinstance(content, MsgHtmlTag) else (content,)
                for call in nodes:
                    if isinstance(call, (CallBasic, CallDelegate)):
                        self._compile_call_params(call, state, emitted)
        state.code.add_to_output_var(to_php_string(state.exprs.generate(node)))

    def _compile_call_params(self, node: AnyCall, state: EmitState, emitted: set[str]) -> None:
        for param in node.params:
            if not isinstance(param, CallParamContent) or is_computable(param):
                continue
            name = param_var_name(param)
            if name not in emitted:
                emitted.add(name)
                self._compile_call_param_content(param, state)

    def _compile_call_param_content(self, param: CallParamContent, state: EmitState) -> None:
        code = state.code
        code.push_output_var(param_var_name(param))
        code.init_output_var_if_necessary()
        with state.scope.frame():
            self.visit_children(param.body, state)
        code.pop_output_var()
