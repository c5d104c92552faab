"""Per-file compilation context.

Bundles the read-only configuration with the file being compiled and the
error sink that collects recoverable errors for it. Every translator and
generator receives the context explicitly; nothing is stored globally.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from phpgen.config import CompilerConfig
from phpgen.exceptions import ErrorReporter, SourceLocation


@dataclass(frozen=True, slots=True)
class CompileContext:
    """Shared inputs for compiling one template file."""

    config: CompilerConfig = field(default_factory=CompilerConfig)
    reporter: ErrorReporter = field(default_factory=ErrorReporter)
    namespace: str = ""
    file_name: str | None = None

    def location(self, node: object) -> SourceLocation:
        return SourceLocation.of(node, self.file_name)
