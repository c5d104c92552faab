"""Generated code buffer and output accumulator.

CodeBuilder collects indented PHP lines and tracks the output variable
that template text is appended to. Nested constructs that capture output
(let content blocks, call params, the template body itself) push their own
output variable and pop it when done; only the top entry is active.

The first write to an output variable assigns it, later writes append:

    $output = 'Hello ';
    $output .= $name;

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from phpgen.compiler.exprs import PhpExpr, PhpStringExpr, concat, to_php_string
from phpgen.exceptions import InternalCompilerError

INDENT = "  "


@dataclass(slots=True)
class _OutputVar:
    name: str
    initialized: bool = False


class CodeBuilder:
    """Line buffer with indentation and an output-variable stack."""

    __slots__ = ("_indent", "_lines", "_output_vars")

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._indent = 0
        self._output_vars: list[_OutputVar] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Lines and indentation
    # ─────────────────────────────────────────────────────────────────────────

    def append_line(self, *fragments: str) -> CodeBuilder:
        """Append one line at the current indentation."""
        self._lines.append(INDENT * self._indent + "".join(fragments) + "\n")
        return self

    def append_raw(self, text: str) -> CodeBuilder:
        """Append text verbatim, without indentation or newline."""
        self._lines.append(text)
        return self

    def increase_indent(self) -> CodeBuilder:
        self._indent += 1
        return self

    def decrease_indent(self) -> CodeBuilder:
        if self._indent == 0:
            raise InternalCompilerError("Indentation would go negative")
        self._indent -= 1
        return self

    @contextmanager
    def indent(self) -> Iterator[CodeBuilder]:
        self.increase_indent()
        try:
            yield self
        finally:
            self.decrease_indent()

    def get_code(self) -> str:
        return "".join(self._lines)

    # ─────────────────────────────────────────────────────────────────────────
    # Output variable stack
    # ─────────────────────────────────────────────────────────────────────────

    def _top(self) -> _OutputVar:
        if not self._output_vars:
            raise InternalCompilerError("No output variable is active")
        return self._output_vars[-1]

    def push_output_var(self, name: str) -> CodeBuilder:
        self._output_vars.append(_OutputVar(name))
        return self

    def pop_output_var(self) -> CodeBuilder:
        self._top()
        self._output_vars.pop()
        return self

    @property
    def output_var_name(self) -> str:
        return self._top().name

    @property
    def output_var_inited(self) -> bool:
        return self._top().initialized

    def set_output_var_inited(self) -> CodeBuilder:
        self._top().initialized = True
        return self

    def init_output_var_if_necessary(self) -> None:
        top = self._top()
        if top.initialized:
            return
        self.append_line(top.name, " = '';")
        top.initialized = True

    def add_to_output_var(self, exprs: PhpExpr | Sequence[PhpExpr]) -> None:
        """Append expressions to the active output variable.

        A sequence is concatenated first; the first write assigns.
        """
        expr = to_php_string(exprs) if isinstance(exprs, PhpExpr) else concat(exprs)
        top = self._top()
        if top.initialized:
            self.append_line(top.name, " .= ", expr.text, ";")
        else:
            self.append_line(top.name, " = ", expr.text, ";")
            top.initialized = True

    def get_output_as_string(self) -> PhpStringExpr:
        """The active output variable as an expression, initialized if needed."""
        self.init_output_var_if_necessary()
        return PhpStringExpr(self.output_var_name)
