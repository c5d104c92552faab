"""Expression printer: expression nodes -> PHP expression text.

Each node kind has a handler returning a PhpExpr (text + precedence).
Parent handlers splice children through ``protect`` so the output never
relies on PHP's precedence rules accidentally matching the template's.

Data access:
    Variables read from the data record are guarded with ``isset``, which
    is null-safe across a whole access chain in PHP:

        $boo.goo        ->  isset($opt_data['boo']['goo']) ? $opt_data['boo']['goo'] : null

    Chains rooted in a computed value (a function result, a literal) cannot
    use ``isset``; their null-safe links (``?.`` / ``?[``) get individual
    guards instead:

        f()?.a.b        ->  f() === null ? null : f()['a']['b']

Functions:
    ``isFirst``/``isLast``/``index`` read loop bookkeeping variables from
    scope, ``checkNotNull`` calls the runtime helper, ``quoteKeysIfJs`` is a
    no-op for PHP. Every other name goes through the configured plugin
    table; an unknown name is reported and replaced by an expression that
    throws when the generated code runs.

"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from phpgen.compiler.exprs import (
    CONDITIONAL_PRECEDENCE,
    MAX_PRECEDENCE,
    FunctionExprBuilder,
    PhpExpr,
    array_literal,
    gen_operator,
    map_literal,
    not_null_check,
    protect,
    quote_string,
    scalar_literal,
    ternary,
)
from phpgen.exceptions import (
    ErrorCode,
    InternalCompilerError,
    UnsupportedLiteralElementError,
)
from phpgen.nodes import (
    Expr,
    Getattr,
    Getitem,
    Name,
    OptionalGetattr,
    OptionalGetitem,
)

if TYPE_CHECKING:
    from phpgen.compiler.context import CompileContext
    from phpgen.compiler.scope import LocalScope
    from phpgen.nodes import (
        BinOp,
        BoolOp,
        CondExpr,
        Const,
        DataAccess,
        Dict,
        FuncCall,
        Global,
        List,
        NullCoalesce,
        UnaryOp,
    )

DATA_VAR = "$opt_data"
IJ_DATA_VAR = "$opt_ijData"

# Runs of the generated code that reach this expression fail loudly.
POISON = PhpExpr(
    "(function () { throw new \\Goog\\Soy\\Exception('Template compilation failed'); })()",
    MAX_PRECEDENCE,
)

_PHP_VARIABLE = re.compile(r"^\$[A-Za-z_]\w*$")

_LOOP_FUNCTIONS = {"isFirst": "__isFirst", "isLast": "__isLast", "index": "__index"}

_BOOL_TOKENS = {"and": "&&", "or": "||"}

# Node class name -> handler method name.
_EXPR_HANDLERS: dict[str, str] = {
    "Const": "_translate_const",
    "Name": "_translate_data_access",
    "Global": "_translate_global",
    "List": "_translate_list",
    "Dict": "_translate_dict",
    "Getattr": "_translate_data_access",
    "OptionalGetattr": "_translate_data_access",
    "Getitem": "_translate_data_access",
    "OptionalGetitem": "_translate_data_access",
    "FuncCall": "_translate_func_call",
    "BinOp": "_translate_binop",
    "BoolOp": "_translate_boolop",
    "UnaryOp": "_translate_unaryop",
    "CondExpr": "_translate_condexpr",
    "NullCoalesce": "_translate_null_coalesce",
}


def literal_key_access(container: str, key: str) -> str:
    """``$container['key']``"""
    return f"{container}[{quote_string(key)}]"


def param_access(name: str, injected: bool = False) -> str:
    """PHP text reading a template parameter from its record."""
    return literal_key_access(IJ_DATA_VAR if injected else DATA_VAR, name)


def type_safe_add(*operands: PhpExpr) -> PhpExpr:
    """Template ``+``: numeric add or string concat, decided at run time."""
    if len(operands) == 1:
        return operands[0]
    builder = FunctionExprBuilder("Runtime::typeSafeAdd")
    for operand in operands:
        builder.add_arg(operand)
    return builder.as_expr()


def _as_base(expr: PhpExpr) -> str:
    """Text usable as the container of ``[...]``."""
    if expr.precedence == MAX_PRECEDENCE:
        return expr.text
    return f"({expr.text})"


class ExprTranslator:
    """Translate expression nodes to PHP using a scope for local names.

    Args:
        context: Per-file compile context (config + error sink).
        scope: Local variable scope; read only.
        remainder_offset: Offset of the enclosing plural, enabling
            ``remainder(n)`` as ``n - offset``.

    Example:
        >>> t = ExprTranslator(CompileContext(), LocalScope())
        >>> t.translate(Getattr(Name("boo"), "goo")).text
        "isset($opt_data['boo']['goo']) ? $opt_data['boo']['goo'] : null"

    """

    __slots__ = ("_context", "_remainder_offset", "_scope")

    def __init__(
        self,
        context: CompileContext,
        scope: LocalScope,
        *,
        remainder_offset: int | None = None,
    ):
        self._context = context
        self._scope = scope
        self._remainder_offset = remainder_offset

    def translate(self, node: Expr) -> PhpExpr:
        handler_name = _EXPR_HANDLERS.get(type(node).__name__)
        if handler_name is None:
            raise InternalCompilerError(
                f"No expression handler for {type(node).__name__}",
                location=self._context.location(node),
            )
        return getattr(self, handler_name)(node)

    def translate_all(self, nodes: Sequence[Expr]) -> list[PhpExpr]:
        return [self.translate(n) for n in nodes]

    # ─────────────────────────────────────────────────────────────────────────
    # Literals
    # ─────────────────────────────────────────────────────────────────────────

    def _translate_const(self, node: Const) -> PhpExpr:
        return scalar_literal(node.value)

    def _translate_list(self, node: List) -> PhpExpr:
        items = [self.translate(i) if isinstance(i, Expr) else i for i in node.items]
        try:
            return array_literal(items)
        except UnsupportedLiteralElementError as exc:
            raise UnsupportedLiteralElementError(
                exc.element, location=self._context.location(node)
            ) from exc

    def _translate_dict(self, node: Dict) -> PhpExpr:
        keys = self.translate_all(node.keys)
        values = self.translate_all(node.values)
        return map_literal(zip(keys, values, strict=True))

    def _translate_global(self, node: Global) -> PhpExpr:
        globals_table = self._context.config.globals
        if node.name in globals_table:
            return scalar_literal(globals_table[node.name])
        return PhpExpr(f"$GLOBALS[{quote_string(node.name)}]", MAX_PRECEDENCE)

    # ─────────────────────────────────────────────────────────────────────────
    # Data access
    # ─────────────────────────────────────────────────────────────────────────

    def _translate_data_access(self, node: Name | DataAccess) -> PhpExpr:
        links: list[DataAccess] = []
        root: Expr = node
        while isinstance(root, (Getattr, OptionalGetattr, Getitem, OptionalGetitem)):
            links.append(root)
            root = root.obj
        links.reverse()

        if isinstance(root, Name):
            if root.injected:
                base = literal_key_access(IJ_DATA_VAR, root.name)
            else:
                local = self._scope.lookup(root.name)
                if local is not None and not links:
                    return local
                if local is None:
                    base = literal_key_access(DATA_VAR, root.name)
                elif _PHP_VARIABLE.match(local.text):
                    base = local.text
                else:
                    return self._guarded_chain(_as_base(local), links)
            raw = base + "".join(self._accessor(link) for link in links)
            return PhpExpr(f"isset({raw}) ? {raw} : null", CONDITIONAL_PRECEDENCE)

        return self._guarded_chain(_as_base(self.translate(root)), links)

    def _guarded_chain(self, base: str, links: Sequence[DataAccess]) -> PhpExpr:
        """Access chain on a computed value, one guard per null-safe link."""
        guards: list[str] = []
        ref = base
        for link in links:
            if isinstance(link, (OptionalGetattr, OptionalGetitem)):
                guards.append(ref)
            ref += self._accessor(link)
        if not guards:
            return PhpExpr(ref, MAX_PRECEDENCE)
        text = ref
        for depth, guard in enumerate(reversed(guards)):
            inner = text if depth == 0 else f"({text})"
            text = f"{guard} === null ? null : {inner}"
        return PhpExpr(text, CONDITIONAL_PRECEDENCE)

    def _accessor(self, link: DataAccess) -> str:
        if isinstance(link, (Getattr, OptionalGetattr)):
            return f"[{quote_string(link.attr)}]"
        return f"[{self.translate(link.key).text}]"

    # ─────────────────────────────────────────────────────────────────────────
    # Operators
    # ─────────────────────────────────────────────────────────────────────────

    def _translate_binop(self, node: BinOp) -> PhpExpr:
        left = self.translate(node.left)
        right = self.translate(node.right)
        if node.op == "+":
            return type_safe_add(left, right)
        return gen_operator(node.op, [left, right])

    def _translate_boolop(self, node: BoolOp) -> PhpExpr:
        values = self.translate_all(node.values)
        if len(values) == 1:
            return values[0]
        return gen_operator(node.op, values, _BOOL_TOKENS[node.op])

    def _translate_unaryop(self, node: UnaryOp) -> PhpExpr:
        operand = self.translate(node.operand)
        if node.op == "not":
            return gen_operator("not", [operand], "!")
        return gen_operator("neg", [operand], "-")

    def _translate_condexpr(self, node: CondExpr) -> PhpExpr:
        return ternary(
            self.translate(node.test),
            self.translate(node.if_true),
            self.translate(node.if_false),
        )

    def _translate_null_coalesce(self, node: NullCoalesce) -> PhpExpr:
        # The left side is printed twice: once tested, once returned.
        left = self.translate(node.left)
        return ternary(not_null_check(left), left, self.translate(node.right))

    # ─────────────────────────────────────────────────────────────────────────
    # Functions
    # ─────────────────────────────────────────────────────────────────────────

    def _translate_func_call(self, node: FuncCall) -> PhpExpr:
        if node.name in _LOOP_FUNCTIONS:
            return self._loop_variable(node, _LOOP_FUNCTIONS[node.name])
        if node.name == "quoteKeysIfJs":
            return self.translate(node.args[0])
        if node.name == "checkNotNull":
            return FunctionExprBuilder("Runtime::checkNotNull").add_arg(
                self.translate(node.args[0])
            ).as_expr()
        if node.name == "remainder" and self._remainder_offset is not None:
            value = self.translate(node.args[0])
            return gen_operator("-", [value, scalar_literal(self._remainder_offset)])

        handler = self._context.config.functions.get(node.name)
        if handler is None:
            self._context.reporter.report(
                ErrorCode.UNKNOWN_FUNCTION, f"Unknown function '{node.name}'", node
            )
            return POISON
        return handler.apply(self.translate_all(node.args))

    def _loop_variable(self, node: FuncCall, suffix: str) -> PhpExpr:
        target = node.args[0] if node.args else None
        if not isinstance(target, Name):
            raise InternalCompilerError(
                f"{node.name}() expects a loop variable",
                location=self._context.location(node),
            )
        expr = self._scope.lookup(target.name + suffix)
        if expr is None:
            raise InternalCompilerError(
                f"{node.name}(${target.name}) used outside a foreach over ${target.name}",
                location=self._context.location(node),
            )
        return expr
