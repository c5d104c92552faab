"""Control flow statement emission for the phpgen compiler.

Provides mixin for emitting control flow statements (if, switch, for
range, foreach).

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from phpgen.compiler.exprs import EQUALITY_PRECEDENCE, PhpExpr
from phpgen.compiler.gen_exprs import is_computable

if TYPE_CHECKING:
    from phpgen.compiler.core import EmitState
    from phpgen.nodes import Expr, Foreach, ForRange, If, Node, Switch

logger = logging.getLogger(__name__)

_INT_LITERAL = re.compile(r"-?\d+")


class ControlFlowMixin:
    """Mixin for emitting control flow statements.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.

    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        # From Compiler core
        def visit_children(self, body: Sequence[Node], state: EmitState) -> None: ...

        # From BasicStatementMixin
        def _compile_expression_node(self, node: Node, state: EmitState) -> None: ...

    def _compile_if(self, node: If, state: EmitState) -> None:
        """Emit an if/elseif/else chain.

        Expression-capable chains become a single ternary append. Otherwise:
            if (C1) {
              ...
            }
            else if (C2) {
              ...
            }
            else {
              ...
            }
        """
        if is_computable(node):
            self._compile_expression_node(node, state)
            return

        code = state.code
        code.append_line("if (", state.translate(node.test).text, ") {")
        with code.indent():
            self.visit_children(node.body, state)
        code.append_line("}")
        for test, body in node.elif_:
            code.append_line("else if (", state.translate(test).text, ") {")
            with code.indent():
                self.visit_children(body, state)
            code.append_line("}")
        if node.else_ is not None:
            code.append_line("else {")
            with code.indent():
                self.visit_children(node.else_, state)
            code.append_line("}")

    def _compile_switch(self, node: Switch, state: EmitState) -> None:
        """Emit a switch statement.

        Generates:
            switch (X) {
              case 1:
              case 2:
                ...
                break;
              default:
                ...
            }
        """
        code = state.code
        code.append_line("switch (", state.translate(node.subject).text, ") {")
        with code.indent():
            for case in node.cases:
                for value in case.values:
                    code.append_line("case ", state.translate(value).text, ":")
                with code.indent():
                    self.visit_children(case.body, state)
                    code.append_line("break;")
            if node.default is not None:
                code.append_line("default:")
                with code.indent():
                    self.visit_children(node.default, state)
        code.append_line("}")

    def _compile_for_range(self, node: ForRange, state: EmitState) -> None:
        """Emit a counting loop over ``range([start,] limit[, step])``.

        Bounds that are not integer literals are evaluated once into
        temporaries before the loop:
            $iLimit3 = count($opt_data['items']);
            for ($i3 = 0; $i3 < $iLimit3; $i3++) {
              ...
            }
        """
        code = state.code
        prefix = f"${node.target}"
        loop_var = f"{prefix}{node.node_id}"

        init = "0"
        if node.start is not None:
            init = self._loop_bound(node.start, f"{prefix}Init{node.node_id}", state)
        limit = self._loop_bound(node.limit, f"{prefix}Limit{node.node_id}", state)
        step = "1"
        if node.step is not None:
            step = self._loop_bound(node.step, f"{prefix}Increment{node.node_id}", state)

        increment = f"{loop_var}++" if step == "1" else f"{loop_var} += {step}"
        code.append_line(
            f"for ({loop_var} = {init}; {loop_var} < {limit}; {increment}) {{"
        )
        with state.scope.frame(), code.indent():
            state.scope.add(node.target, PhpExpr(loop_var))
            self.visit_children(node.body, state)
        code.append_line("}")

    def _loop_bound(self, expr: Expr, temp_name: str, state: EmitState) -> str:
        """Integer literals are used inline; anything else is evaluated once."""
        text = state.translate(expr).text
        if _INT_LITERAL.fullmatch(text):
            return text
        logger.debug("Hoisting loop bound %s into %s", text, temp_name)
        state.code.append_line(temp_name, " = ", text, ";")
        return temp_name

    def _compile_foreach(self, node: Foreach, state: EmitState) -> None:
        """Emit a foreach loop with first/last/index support.

        Generates:
            $itemList5 = (array)(EXPR);
            if (!empty($itemList5)) {
              reset($itemList5);
              $itemFirstKey5 = key($itemList5);
              end($itemList5);
              $itemLastKey5 = key($itemList5);
              foreach ($itemList5 as $itemIndex5 => $itemData5) {
                ...
              }
            } else {
              ...
            }

        The ``if`` wrapper is only emitted when the loop has an empty branch.
        """
        code = state.code
        prefix = f"${node.target}"
        list_var = f"{prefix}List{node.node_id}"
        index_var = f"{prefix}Index{node.node_id}"
        data_var = f"{prefix}Data{node.node_id}"
        first_key = f"{prefix}FirstKey{node.node_id}"
        last_key = f"{prefix}LastKey{node.node_id}"

        code.append_line(list_var, " = (array)(", state.translate(node.iter).text, ");")
        if node.empty is not None:
            code.append_line(f"if (!empty({list_var})) {{")
            code.increase_indent()

        code.append_line(f"reset({list_var});")
        code.append_line(f"{first_key} = key({list_var});")
        code.append_line(f"end({list_var});")
        code.append_line(f"{last_key} = key({list_var});")
        code.append_line(f"foreach ({list_var} as {index_var} => {data_var}) {{")
        with state.scope.frame(), code.indent():
            scope = state.scope
            scope.add(node.target, PhpExpr(data_var))
            scope.add(f"{node.target}__isFirst", PhpExpr(f"{index_var} === {first_key}", EQUALITY_PRECEDENCE))
            scope.add(f"{node.target}__isLast", PhpExpr(f"{index_var} === {last_key}", EQUALITY_PRECEDENCE))
            scope.add(f"{node.target}__index", PhpExpr(index_var))
            self.visit_children(node.body, state)
        code.append_line("}")

        if node.empty is not None:
            code.decrease_indent()
            code.append_line("} else {")
            with code.indent():
                self.visit_children(node.empty, state)
            code.append_line("}")
