"""phpgen Compiler Core: main Compiler class.

The Compiler walks one template file and emits a PHP class with one
static method per template. Uses a mixin-based design: each statement
family lives in its own module under ``compiler/statements``.

Design Principles:
1. **Explicit state**: the code buffer, scope stack and expression
   generator of the file being compiled travel in an ``EmitState`` passed
   to every handler; the Compiler itself holds only configuration
2. **Expression batching**: consecutive expression-capable children are
   concatenated into a single ``$output .= ...;``
3. **O(1) dispatch**: dict-based node type -> handler lookup

Generated shape:

    ```php
    class foo {
      public static function bar($opt_data = null, $opt_ijData = null) {
        $output = 'Hello '.(isset($opt_data['name']) ? $opt_data['name'] : null);
        return new \\Goog\\Soy\\SanitizedHtml($output);
      }
    }
    ```

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from phpgen.compiler.code_builder import CodeBuilder
from phpgen.compiler.context import CompileContext
from phpgen.compiler.exprs import PhpExpr
from phpgen.compiler.gen_exprs import ExprsGenerator, is_computable
from phpgen.compiler.scope import LocalScope
from phpgen.compiler.statements import StatementCompilationMixin
from phpgen.compiler.statements.templates import DelegateRegistration
from phpgen.config import CompilerConfig
from phpgen.exceptions import ErrorReporter, InternalCompilerError

if TYPE_CHECKING:
    from phpgen.exceptions import ReportedError
    from phpgen.nodes import Expr, Node, TemplateFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompiledFile:
    """Result of compiling one template file."""

    file_name: str
    namespace: str
    code: str
    delegates: tuple[DelegateRegistration, ...] = ()
    errors: tuple[ReportedError, ...] = ()


@dataclass(slots=True)
class EmitState:
    """Mutable per-template emission state.

    ``code`` and ``delegates`` are shared by every template of a file;
    ``scope`` (and the generator bound to it) is fresh per template.
    """

    context: CompileContext
    code: CodeBuilder = field(default_factory=CodeBuilder)
    scope: LocalScope = field(default_factory=LocalScope)
    delegates: list[DelegateRegistration] = field(default_factory=list)
    exprs: ExprsGenerator = field(init=False)

    def __post_init__(self) -> None:
        self.exprs = ExprsGenerator(self.context, self.scope)

    def for_template(self) -> EmitState:
        """Same file buffers, fresh local scope."""
        return EmitState(self.context, self.code, LocalScope(), self.delegates)

    def translate(self, expr: Expr) -> PhpExpr:
        return self.exprs.translator.translate(expr)


class Compiler(StatementCompilationMixin):
    """Compile template files to PHP source.

    One Compiler can compile any number of files; all per-file state
    lives in the EmitState created by ``compile_file``.

    Node Dispatch:
        Uses O(1) dict lookup for node type -> handler:
            ```python
            dispatch = {
                "Data": self._compile_expression_node,
                "If": self._compile_if,
                ...
            }
            handler = dispatch[type(node).__name__]
            ```

    Example:
            >>> compiler = Compiler(CompilerConfig())
            >>> compiled = compiler.compile_file(TemplateFile("boo.foo", "foo.soy", templates))
            >>> print(compiled.code)
            <?php
            ...

    """

    __slots__ = ("_config", "_node_dispatch")

    def __init__(self, config: CompilerConfig | None = None):
        self._config = config or CompilerConfig()

    @property
    def config(self) -> CompilerConfig:
        return self._config

    def compile_file(self, file: TemplateFile) -> CompiledFile:
        """Compile every template of ``file`` into one PHP class."""
        logger.debug("Compiling %s (%d templates)", file.file_name, len(file.templates))
        reporter = ErrorReporter(file.file_name)
        context = CompileContext(
            config=self._config,
            reporter=reporter,
            namespace=file.namespace,
            file_name=file.file_name,
        )
        state = EmitState(context)
        self._compile_file(file, state)
        return CompiledFile(
            file_name=file.file_name,
            namespace=file.namespace,
            code=state.code.get_code(),
            delegates=tuple(state.delegates),
            errors=reporter.errors,
        )

    def visit_children(self, body: Sequence[Node], state: EmitState) -> None:
        """Emit a node sequence into the active output variable.

        Runs of expression-capable nodes become one append; other nodes
        flush the run and emit their own statements. The output variable
        is initialized up front when the first node is a statement, so it
        is never first assigned inside a nested block.
        """
        if body and not is_computable(body[0]):
            state.code.init_output_var_if_necessary()

        pending: list[PhpExpr] = []
        for child in body:
            if is_computable(child):
                pending.append(state.exprs.generate(child))
                continue
            if pending:
                state.code.add_to_output_var(pending)
                pending = []
            self._compile_node(child, state)
        if pending:
            state.code.add_to_output_var(pending)

    def _compile_node(self, node: Node, state: EmitState) -> None:
        """Emit a single node. O(1) type dispatch using class name lookup."""
        handler = self._get_node_dispatch().get(type(node).__name__)
        if handler is None:
            raise InternalCompilerError(
                f"No statement handler for {type(node).__name__}",
                location=state.context.location(node),
            )
        handler(node, state)

    def _get_node_dispatch(self) -> dict[str, Callable[[Node, EmitState], None]]:
        """Get node type dispatch table (cached on first call)."""
        if not hasattr(self, "_node_dispatch"):
            self._node_dispatch = {
                "Data": self._compile_expression_node,
                "Output": self._compile_expression_node,
                "Css": self._compile_expression_node,
                "MsgFallbackGroup": self._compile_msg_fallback_group,
                "If": self._compile_if,
                "Switch": self._compile_switch,
                "ForRange": self._compile_for_range,
                "Foreach": self._compile_foreach,
                "LetValue": self._compile_let_value,
                "LetContent": self._compile_let_content,
                "CallBasic": self._compile_call,
                "CallDelegate": self._compile_call,
            }
        return self._node_dispatch
