"""Call expressions for template and delegate calls.

Every generated template function has the signature
``name($opt_data = null, $opt_ijData = null)``. A call therefore builds
one data argument and forwards the injected data unchanged:

    {call .goo data="$boo"}{param x: 1 /}{/call}
        ->  self::goo(array_replace(isset($opt_data['boo']) ? $opt_data['boo'] : null, ['x' => 1]), $opt_ijData)

Content params whose bodies need statements are compiled beforehand into
a ``$param<id>`` variable (see the call statement handler); here they are
referenced by that name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from phpgen.compiler.exprs import (
    MAX_PRECEDENCE,
    FunctionExprBuilder,
    PhpExpr,
    concat,
    escape_method_name,
    map_literal,
    to_php_string,
    wrap_as_sanitized,
)
from phpgen.compiler.translate import DATA_VAR, IJ_DATA_VAR
from phpgen.nodes import CallBasic, CallParamValue

if TYPE_CHECKING:
    from phpgen.compiler.context import CompileContext
    from phpgen.compiler.gen_exprs import ExprsGenerator
    from phpgen.compiler.scope import LocalScope
    from phpgen.nodes import AnyCall, CallParamContent, DataMode


def param_var_name(param: CallParamContent) -> str:
    """Temporary variable holding a pre-rendered content param."""
    return f"$param{param.node_id}"


def php_class_path(dotted: str) -> str:
    """Fully qualified PHP class for a dotted namespace: ``a.b`` -> ``\\a\\b``."""
    return "\\" + dotted.replace(".", "\\")


class CallExprBuilder:
    """Assemble the argument and the call expression for call nodes."""

    __slots__ = ("_context", "_generator", "_scope")

    def __init__(self, context: CompileContext, scope: LocalScope, generator: ExprsGenerator):
        self._context = context
        self._scope = scope
        self._generator = generator

    def build_call(self, call: AnyCall) -> PhpExpr:
        """Render the full call, escaping directives included."""
        argument = self.build_argument(call)
        if isinstance(call, CallBasic):
            text = f"{self._callee_text(call.callee)}({argument}, {IJ_DATA_VAR})"
        else:
            variant = (
                self._generator.translator.translate(call.variant)
                if call.variant is not None
                else ""
            )
            delegate_fn = (
                FunctionExprBuilder("Runtime::getDelegateFn")
                .add_arg(call.delegate_name)
                .add_arg(variant)
                .add_arg(call.allow_empty_default)
                .build()
            )
            text = f"call_user_func({delegate_fn}, {argument}, {IJ_DATA_VAR})"
        return self._generator.apply_escaping_directives(
            PhpExpr(text, MAX_PRECEDENCE), call.escaping_directives, call
        )

    def build_argument(self, call: AnyCall) -> str:
        """PHP text of the data argument passed to the callee."""
        data = self._data_to_pass(call.data)
        if not call.params:
            return data

        pairs: list[tuple[str, PhpExpr]] = []
        for param in call.params:
            if isinstance(param, CallParamValue):
                value = self._generator.translator.translate(param.value)
            else:
                value = self._content_param_value(param)
            pairs.append((param.key, value))
        params = map_literal(pairs).text

        if call.data.passes_data:
            # Explicit params take precedence over keys of the passed record.
            return f"array_replace({data}, {params})"
        return params

    def _data_to_pass(self, data: DataMode) -> str:
        if data.kind == "all":
            return DATA_VAR
        if data.kind == "expr" and data.expr is not None:
            return self._generator.translator.translate(data.expr).text
        return "null"

    def _content_param_value(self, param: CallParamContent) -> PhpExpr:
        from phpgen.compiler.gen_exprs import is_computable

        if is_computable(param):
            value: PhpExpr = concat(self._generator.generate_children(param.body))
        else:
            value = PhpExpr(param_var_name(param), MAX_PRECEDENCE)
        if param.content_kind is not None:
            value = wrap_as_sanitized(param.content_kind, to_php_string(value))
        return value

    def _callee_text(self, callee: str) -> str:
        namespace, _, name = callee.rpartition(".")
        if not namespace or namespace == self._context.namespace:
            return f"self::{escape_method_name(name)}"
        return f"{php_class_path(namespace)}::{escape_method_name(name)}"
