"""Exceptions and error reporting for the phpgen compiler.

Exception Hierarchy:
CompilerError (base)
├── ContractViolationError          # Input tree breaks the backend contract
│   ├── MissingContentKindError     # {let} content block without kind="..."
│   ├── UnsupportedLiteralElementError  # List element that is not number/string/expr
│   └── UnsupportedParamTypeError   # Parameter type with no runtime guard
├── InternalCompilerError           # Node kind with no handler (a backend defect)
└── CompilationFailedError          # One or more reported errors in a file set

Contract violations and internal errors are raised immediately and abort
the template being compiled. Plugin lookups that fail (unknown function,
unknown print directive) are not raised: they are recorded on an
ErrorReporter so one pass surfaces every independent problem, and the
driver raises CompilationFailedError at the end.

Example:
    ```
    P-PLG-001: Unknown function 'fooBar'
      --> greeting.soy:12:4
      Hint: register a PhpFunction named 'fooBar' in CompilerConfig.functions
      Docs: https://phpgen.readthedocs.io/en/latest/errors/#p-plg-001
    ```

"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

from phpgen import terminal

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

_DOCS_BASE = "https://phpgen.readthedocs.io/en/latest/errors"


class ErrorCode(Enum):
    """Searchable error codes for compiler errors.

    Format: P-{CATEGORY}-{NUMBER}
    Categories: CFG (contract), PLG (plugin lookup), INT (internal), CMP (compilation)
    """

    # Contract violations (P-CFG-xxx)
    MISSING_CONTENT_KIND = "P-CFG-001"
    UNSUPPORTED_LITERAL_ELEMENT = "P-CFG-002"
    UNSUPPORTED_PARAM_TYPE = "P-CFG-003"

    # Plugin lookups, reported not raised (P-PLG-xxx)
    UNKNOWN_FUNCTION = "P-PLG-001"
    UNKNOWN_PRINT_DIRECTIVE = "P-PLG-002"
    DIRECTIVE_ARG_COUNT = "P-PLG-003"

    # Internal invariants (P-INT-xxx)
    INTERNAL_ERROR = "P-INT-001"

    # Compilation summary (P-CMP-xxx)
    COMPILATION_FAILED = "P-CMP-001"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_DOCS_BASE}/#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g., 'contract', 'plugin', 'internal')."""
        prefix = self.value.split("-")[1]
        return {
            "CFG": "contract",
            "PLG": "plugin",
            "INT": "internal",
            "CMP": "compilation",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Where in the template source an error was found."""

    file_name: str | None = None
    lineno: int = 0
    col_offset: int | None = None

    def __str__(self) -> str:
        text = self.file_name or "<template>"
        if self.lineno:
            text += f":{self.lineno}"
            if self.col_offset is not None:
                text += f":{self.col_offset}"
        return text

    @classmethod
    def of(cls, node: object, file_name: str | None = None) -> SourceLocation:
        """Build a location from any node carrying lineno/col_offset."""
        return cls(
            file_name=file_name,
            lineno=getattr(node, "lineno", 0),
            col_offset=getattr(node, "col_offset", None),
        )


# ---------------------------------------------------------------------------
# Raised errors
# ---------------------------------------------------------------------------


class CompilerError(Exception):
    """Base exception for all phpgen errors.

    Attributes:
        message: Error description without location decoration.
        location: Optional source location.
        hint: Optional actionable suggestion.
        code: ErrorCode for searchable, documentable identification.
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        location: SourceLocation | None = None,
        hint: str | None = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location is not None:
            return f"{self.message} ({self.location})"
        return self.message

    def format_compact(self) -> str:
        """Format error as a structured, human-readable summary.

        Format::

            P-CFG-001: Let content block 'foo' has no content kind
              --> page.soy:7
              Hint: add kind="html" (or another kind) to the {let} tag
              Docs: https://phpgen.readthedocs.io/en/latest/errors/#p-cfg-001
        """
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        if self.location is not None:
            parts.append(f"  --> {terminal.location(str(self.location))}")
        if self.hint:
            parts.append(f"  Hint: {terminal.hint(self.hint)}")
        if self.code:
            parts.append(f"  Docs: {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)


class ContractViolationError(CompilerError):
    """The input tree breaks an assumption the backend relies on.

    Fatal for the enclosing template; never retried.
    """


class MissingContentKindError(ContractViolationError):
    """A content-let block has no declared content kind.

    Strict escaping needs a kind to wrap the captured string in the right
    sanitized-content class; non-strict templates are not supported.
    """

    code = ErrorCode.MISSING_CONTENT_KIND

    def __init__(self, var_name: str, *, location: SourceLocation | None = None):
        self.var_name = var_name
        super().__init__(
            f"Let content block '{var_name}' has no content kind",
            location=location,
            hint='add kind="html" (or another kind) to the {let} tag',
        )


class UnsupportedLiteralElementError(ContractViolationError):
    """A list literal element is not a number, string or expression."""

    code = ErrorCode.UNSUPPORTED_LITERAL_ELEMENT

    def __init__(self, element: object, *, location: SourceLocation | None = None):
        self.element = element
        super().__init__(
            f"Unsupported list literal element {element!r} "
            f"({type(element).__name__}); only numbers, strings and expressions are allowed",
            location=location,
        )


class UnsupportedParamTypeError(ContractViolationError):
    """A declared parameter type has no runtime type guard."""

    code = ErrorCode.UNSUPPORTED_PARAM_TYPE

    def __init__(
        self, param_name: str, param_type: object, *, location: SourceLocation | None = None
    ):
        self.param_name = param_name
        self.param_type = param_type
        super().__init__(
            f"Unsupported type {param_type!r} for parameter '{param_name}'",
            location=location,
        )


class InternalCompilerError(CompilerError):
    """A backend invariant failed, e.g. a node kind reached a visitor with no handler.

    Indicates a defect in the backend or in the upstream contract, not in
    the user's template.
    """

    code = ErrorCode.INTERNAL_ERROR


class CompilationFailedError(CompilerError):
    """One or more errors were reported while compiling.

    Lists every accumulated error, so the user sees all independent
    problems of a pass at once.
    """

    code = ErrorCode.COMPILATION_FAILED

    def __init__(self, errors: Sequence[ReportedError]):
        self.errors = tuple(errors)
        count = len(self.errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(f"Compilation failed with {count} {noun}")

    def _format_message(self) -> str:
        lines = [self.message]
        lines.extend(f"  {error.format(color=False)}" for error in self.errors)
        return "\n".join(lines)

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value, self.message)]
        parts.extend(f"  {error.format()}" for error in self.errors)
        return "\n".join(parts)


# ---------------------------------------------------------------------------
# Reported (accumulated) errors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReportedError:
    """A recoverable error recorded during compilation."""

    code: ErrorCode
    message: str
    location: SourceLocation = field(default_factory=SourceLocation)

    def format(self, *, color: bool = True) -> str:
        if not color:
            return f"{self.code.value}: {self.message} ({self.location})"
        header = terminal.format_error_header(self.code.value, self.message)
        return f"{header} ({terminal.location(str(self.location))})"


class ErrorReporter:
    """Accumulating error sink, one per compiled file.

    Example:
        >>> reporter = ErrorReporter("page.soy")
        >>> reporter.report(ErrorCode.UNKNOWN_FUNCTION, "Unknown function 'x'", node)
        >>> reporter.has_errors
        True
    """

    __slots__ = ("_errors", "file_name")

    def __init__(self, file_name: str | None = None):
        self.file_name = file_name
        self._errors: list[ReportedError] = []

    def report(self, code: ErrorCode, message: str, node: object | None = None) -> None:
        location = SourceLocation.of(node, self.file_name) if node is not None else SourceLocation(self.file_name)
        logger.debug("Reported %s at %s: %s", code.value, location, message)
        self._errors.append(ReportedError(code, message, location))

    @property
    def errors(self) -> tuple[ReportedError, ...]:
        return tuple(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def __iter__(self) -> Iterator[ReportedError]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)
