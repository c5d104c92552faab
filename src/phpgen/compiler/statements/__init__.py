"""Statement emission for the phpgen compiler.

Provides mixins that emit PHP statements for template body nodes.

The statements package is organized into logical modules:
- basic: Expression-capable nodes (raw text, prints, css, messages)
- control_flow: Control flow (if, switch, for range, foreach)
- variables: Let bindings (value and content)
- calls: Template and delegate call statements
- templates: File header, template functions, parameter guards

Uses inline TYPE_CHECKING declarations for host attributes.

"""

from __future__ import annotations

from phpgen.compiler.statements.basic import BasicStatementMixin
from phpgen.compiler.statements.calls import CallStatementMixin
from phpgen.compiler.statements.control_flow import ControlFlowMixin
from phpgen.compiler.statements.templates import TemplateStructureMixin
from phpgen.compiler.statements.variables import VariableAssignmentMixin


class StatementCompilationMixin(
    BasicStatementMixin,
    ControlFlowMixin,
    VariableAssignmentMixin,
    CallStatementMixin,
    TemplateStructureMixin,
):
    """Combined mixin for emitting all statement types.

    This class combines all statement mixins into a single interface that
    can be inherited by the Compiler class.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks in each individual mixin.

    """
