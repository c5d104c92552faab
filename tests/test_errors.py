"""Tests for error types, codes and formatting."""

import pytest

from phpgen import terminal
from phpgen.exceptions import (
    CompilationFailedError,
    CompilerError,
    ContractViolationError,
    ErrorCode,
    ErrorReporter,
    InternalCompilerError,
    MissingContentKindError,
    ReportedError,
    SourceLocation,
    UnsupportedLiteralElementError,
    UnsupportedParamTypeError,
)
from phpgen.nodes import Name


@pytest.fixture
def no_colors(monkeypatch):
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            MissingContentKindError("x"),
            UnsupportedLiteralElementError(True),
            UnsupportedParamTypeError("p", "t"),
        ],
    )
    def test_contract_violations(self, error):
        assert isinstance(error, ContractViolationError)
        assert isinstance(error, CompilerError)

    def test_internal_error_is_not_a_contract_violation(self):
        assert not isinstance(InternalCompilerError("x"), ContractViolationError)

    def test_codes(self):
        assert MissingContentKindError("x").code is ErrorCode.MISSING_CONTENT_KIND
        assert InternalCompilerError("x").code is ErrorCode.INTERNAL_ERROR


class TestErrorCode:
    def test_category(self):
        assert ErrorCode.MISSING_CONTENT_KIND.category == "contract"
        assert ErrorCode.UNKNOWN_FUNCTION.category == "plugin"
        assert ErrorCode.INTERNAL_ERROR.category == "internal"
        assert ErrorCode.COMPILATION_FAILED.category == "compilation"

    def test_docs_url(self):
        assert ErrorCode.UNKNOWN_FUNCTION.docs_url.endswith("/errors/#p-plg-001")

    def test_codes_are_unique(self):
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))


class TestSourceLocation:
    @pytest.mark.parametrize(
        ("location", "expected"),
        [
            (SourceLocation(), "<template>"),
            (SourceLocation("page.soy"), "page.soy"),
            (SourceLocation("page.soy", 7), "page.soy:7"),
            (SourceLocation("page.soy", 7, 2), "page.soy:7:2"),
        ],
    )
    def test_str(self, location, expected):
        assert str(location) == expected

    def test_of_node(self):
        location = SourceLocation.of(Name("x", lineno=3, col_offset=1), "a.soy")
        assert location == SourceLocation("a.soy", 3, 1)


class TestFormatting:
    def test_message_includes_location(self):
        error = MissingContentKindError("foo", location=SourceLocation("page.soy", 7))
        assert str(error) == "Let content block 'foo' has no content kind (page.soy:7)"

    def test_format_compact(self, no_colors):
        error = MissingContentKindError("foo", location=SourceLocation("page.soy", 7))
        assert error.format_compact() == (
            "P-CFG-001: Let content block 'foo' has no content kind\n"
            "  --> page.soy:7\n"
            '  Hint: add kind="html" (or another kind) to the {let} tag\n'
            "  Docs: https://phpgen.readthedocs.io/en/latest/errors/#p-cfg-001"
        )

    def test_compilation_failed_lists_errors(self, no_colors):
        errors = [
            ReportedError(ErrorCode.UNKNOWN_FUNCTION, "Unknown function 'a'", SourceLocation("x.soy", 1)),
            ReportedError(ErrorCode.UNKNOWN_PRINT_DIRECTIVE, "Unknown print directive '|b'"),
        ]
        error = CompilationFailedError(errors)
        assert str(error) == (
            "Compilation failed with 2 errors\n"
            "  P-PLG-001: Unknown function 'a' (x.soy:1)\n"
            "  P-PLG-002: Unknown print directive '|b' (<template>)"
        )
        assert error.format_compact().startswith("P-CMP-001: Compilation failed with 2 errors\n")

    def test_reported_error_format(self, monkeypatch):
        error = ReportedError(ErrorCode.UNKNOWN_FUNCTION, "Unknown function 'a'", SourceLocation("x.soy", 1))
        assert error.format(color=False) == "P-PLG-001: Unknown function 'a' (x.soy:1)"
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        colored = error.format()
        assert colored != error.format(color=False)
        assert terminal.strip_colors(colored) == error.format(color=False)

    def test_single_error_noun(self):
        error = CompilationFailedError([ReportedError(ErrorCode.UNKNOWN_FUNCTION, "x")])
        assert error.message == "Compilation failed with 1 error"


class TestErrorReporter:
    def test_report_records_location(self):
        reporter = ErrorReporter("page.soy")
        reporter.report(ErrorCode.UNKNOWN_FUNCTION, "Unknown function 'x'", Name("x", lineno=4))
        assert reporter.has_errors
        assert len(reporter) == 1
        [error] = reporter
        assert error.location == SourceLocation("page.soy", 4, 0)

    def test_report_without_node(self):
        reporter = ErrorReporter("page.soy")
        reporter.report(ErrorCode.UNKNOWN_FUNCTION, "x")
        assert reporter.errors[0].location == SourceLocation("page.soy")

    def test_empty(self):
        reporter = ErrorReporter()
        assert not reporter.has_errors
        assert reporter.errors == ()
