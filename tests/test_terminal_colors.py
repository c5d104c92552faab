"""Tests for terminal color utilities used in diagnostics."""

from phpgen import terminal


class TestColorDetection:
    """Test terminal color detection logic."""

    def test_supports_color_respects_no_color(self, monkeypatch):
        """NO_COLOR disables colors."""
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        assert not terminal._should_use_colors()

    def test_force_color_overrides_no_color(self, monkeypatch):
        """FORCE_COLOR wins over NO_COLOR."""
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert terminal._should_use_colors()

    def test_colorize_returns_plain_when_disabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        result = terminal.colorize("Error", "red", "bold")
        assert result == "Error"
        assert not terminal.supports_color()

    def test_colorize_adds_codes_when_enabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.colorize("Error", "red", "bold")
        assert result == "\033[31m\033[1mError\033[0m"

    def test_strip_colors_removes_ansi_codes(self):
        assert terminal.strip_colors("\033[31m\033[1mError\033[0m") == "Error"


class TestSemanticHelpers:
    """Semantic helpers pick their palette entries."""

    def test_helpers(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.error_code("P-PLG-001").startswith("\033[91m\033[1m")
        assert terminal.location("a.soy:3").startswith("\033[36m")
        assert terminal.hint("Hint").startswith("\033[92m")
        assert terminal.docs_url("https://x").startswith("\033[94m")

    def test_format_error_header(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.format_error_header("P-PLG-001", "Unknown function 'foo'")
        assert terminal.strip_colors(result) == "P-PLG-001: Unknown function 'foo'"
        assert terminal.format_error_header(None, "plain") == "plain"
