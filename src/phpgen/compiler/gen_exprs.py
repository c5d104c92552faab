"""Expression generation for nodes that can be rendered as PHP expressions.

A template body is emitted as few ``$out .= ...;`` statements as possible:
consecutive nodes that are expression-capable (raw text, prints, calls
whose content params are themselves expression-capable, ...) are turned
into expressions and concatenated into one append. Nodes that need
statements (loops, switches, lets) break the run.

``is_computable`` answers the capability question; ``ExprsGenerator``
produces the expressions.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from phpgen.compiler.calls import CallExprBuilder
from phpgen.compiler.exprs import (
    CONDITIONAL_PRECEDENCE,
    EMPTY_STRING,
    FunctionExprBuilder,
    PhpExpr,
    PhpStringExpr,
    concat,
    protect,
    string_literal,
)
from phpgen.compiler.messages import MessageCompiler
from phpgen.compiler.translate import POISON, ExprTranslator
from phpgen.exceptions import ErrorCode, InternalCompilerError

if TYPE_CHECKING:
    from phpgen.compiler.context import CompileContext
    from phpgen.compiler.scope import LocalScope
    from phpgen.nodes import (
        CallBasic,
        CallDelegate,
        Css,
        Data,
        Directive,
        Expr,
        If,
        MsgFallbackGroup,
        Node,
        Output,
    )


def _always(node: Node) -> bool:
    return True


def _never(node: Node) -> bool:
    return False


def _all_computable(nodes: Sequence[Node]) -> bool:
    return all(is_computable(n) for n in nodes)


def _if_computable(node: If) -> bool:
    bodies = [node.body, *(body for _, body in node.elif_)]
    if node.else_ is not None:
        bodies.append(node.else_)
    return all(_all_computable(body) for body in bodies)


def _call_computable(node: CallBasic | CallDelegate) -> bool:
    return all(is_computable(p) for p in node.params)


def _body_computable(node: Node) -> bool:
    return _all_computable(getattr(node, "body", ()))


def _msg_group_computable(node: MsgFallbackGroup) -> bool:
    return all(is_computable(c) for msg in node.msgs for c in msg.placeholder_contents())


# Node class name -> capability predicate.
_COMPUTABLE: dict[str, Callable[..., bool]] = {
    "Data": _always,
    "Output": _always,
    "Css": _always,
    "MsgFallbackGroup": _msg_group_computable,
    "If": _if_computable,
    "CallBasic": _call_computable,
    "CallDelegate": _call_computable,
    "CallParamValue": _always,
    "CallParamContent": _body_computable,
    "MsgHtmlTag": _body_computable,
    "Switch": _never,
    "ForRange": _never,
    "Foreach": _never,
    "LetValue": _never,
    "LetContent": _never,
}


def is_computable(node: Node) -> bool:
    """Whether ``node`` can be rendered as a PHP expression."""
    predicate = _COMPUTABLE.get(type(node).__name__)
    if predicate is None:
        raise InternalCompilerError(f"Unknown node kind {type(node).__name__}")
    return predicate(node)


class ExprsGenerator:
    """Render expression-capable nodes as PHP expressions.

    Owns the expression translator, the call builder and the message
    compiler for one scope, since all three call back into each other
    (content params and message placeholders contain nested bodies).
    """

    __slots__ = ("_calls", "_context", "_dispatch", "_messages", "_scope", "translator")

    def __init__(self, context: CompileContext, scope: LocalScope):
        self._context = context
        self._scope = scope
        self.translator = ExprTranslator(context, scope)
        self._calls = CallExprBuilder(context, scope, self)
        self._messages = MessageCompiler(context, scope, self)
        self._dispatch: dict[str, Callable[..., PhpExpr]] = {
            "Data": self._generate_data,
            "Output": self._generate_output,
            "Css": self._generate_css,
            "MsgFallbackGroup": self._generate_msg_fallback_group,
            "If": self._generate_if,
            "CallBasic": self._calls.build_call,
            "CallDelegate": self._calls.build_call,
        }

    @property
    def calls(self) -> CallExprBuilder:
        return self._calls

    def generate(self, node: Node) -> PhpExpr:
        handler = self._dispatch.get(type(node).__name__)
        if handler is None:
            raise InternalCompilerError(
                f"{type(node).__name__} cannot be rendered as an expression",
                location=self._context.location(node),
            )
        return handler(node)

    def generate_children(self, nodes: Sequence[Node]) -> list[PhpExpr]:
        return [self.generate(n) for n in nodes]

    # ─────────────────────────────────────────────────────────────────────────
    # Print directives
    # ─────────────────────────────────────────────────────────────────────────

    def apply_directive(
        self, expr: PhpExpr, name: str, args: Sequence[PhpExpr], node: Node
    ) -> PhpExpr:
        """Apply one print directive, reporting unknown names and bad arity."""
        directive = self._context.config.print_directives.get(name)
        if directive is None:
            self._context.reporter.report(
                ErrorCode.UNKNOWN_PRINT_DIRECTIVE, f"Unknown print directive '{name}'", node
            )
            return POISON
        if len(args) not in directive.valid_arg_counts:
            expected = ", ".join(str(n) for n in sorted(directive.valid_arg_counts))
            self._context.reporter.report(
                ErrorCode.DIRECTIVE_ARG_COUNT,
                f"Print directive '{name}' called with {len(args)} arguments, expected {expected}",
                node,
            )
            return POISON
        return directive.apply(expr, args)

    def apply_directives(
        self,
        expr: PhpExpr,
        directives: Sequence[Directive],
        node: Node,
        translator: ExprTranslator | None = None,
    ) -> PhpExpr:
        translator = translator or self.translator
        for directive in directives:
            args = translator.translate_all(directive.args)
            expr = self.apply_directive(expr, directive.name, args, node)
        return expr

    def apply_escaping_directives(
        self, expr: PhpExpr, names: Sequence[str], node: Node
    ) -> PhpExpr:
        """Apply argument-less escaping directives chosen by the autoescaper."""
        for name in names:
            expr = self.apply_directive(expr, name, (), node)
        return expr

    # ─────────────────────────────────────────────────────────────────────────
    # Node handlers
    # ─────────────────────────────────────────────────────────────────────────

    def _generate_data(self, node: Data) -> PhpExpr:
        return string_literal(node.value)

    def _generate_output(self, node: Output) -> PhpExpr:
        expr = self.translator.translate(node.expr)
        return self.apply_directives(expr, node.directives, node)

    def _generate_css(self, node: Css) -> PhpExpr:
        builder = FunctionExprBuilder("Runtime::getCssName")
        if node.component is not None:
            builder.add_arg(self.translator.translate(node.component))
        return builder.add_arg(node.selector).as_string_expr()

    def _generate_msg_fallback_group(self, node: MsgFallbackGroup) -> PhpExpr:
        return self._messages.compile_fallback_group(node)

    def _generate_if(self, node: If) -> PhpExpr:
        """Render an if/elseif/else chain as nested ternaries.

        ``(C1 ? A : (C2 ? B : ''))``; a missing else yields the empty string.
        """
        branches: list[tuple[Expr, Sequence[Node]]] = [(node.test, node.body), *node.elif_]
        text = ""
        for test, body in branches:
            cond = protect(self.translator.translate(test), CONDITIONAL_PRECEDENCE)
            value = protect(concat(self.generate_children(body)), CONDITIONAL_PRECEDENCE)
            text += f"({cond.text} ? {value.text} : "
        if node.else_ is not None:
            text += protect(concat(self.generate_children(node.else_)), CONDITIONAL_PRECEDENCE).text
        else:
            text += EMPTY_STRING.text
        text += ")" * len(branches)
        return PhpStringExpr(text, CONDITIONAL_PRECEDENCE)
