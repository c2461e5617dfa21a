# =============================================================================
# test_config.py - Configuration Tests
# =============================================================================
# Tests for AssemblerConfig defaults and environment overrides.
# =============================================================================

import pytest
from spasm.config import AssemblerConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without SPASM_* variables."""
    for name in ("SPASM_CONTEXT_LINES", "SPASM_COLOR", "SPASM_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:

    def test_defaults(self):
        config = AssemblerConfig()
        assert config.context_lines == 3
        assert config.color is None
        assert config.verbose is False
        assert config.source_suffix == ".asm"

    def test_from_env_without_variables(self):
        assert AssemblerConfig.from_env() == AssemblerConfig()


class TestEnvironment:

    def test_context_lines(self, monkeypatch):
        monkeypatch.setenv("SPASM_CONTEXT_LINES", "5")
        assert AssemblerConfig.from_env().context_lines == 5

    @pytest.mark.parametrize("value", ["abc", "0", "-2"])
    def test_invalid_context_lines_ignored(self, monkeypatch, value):
        monkeypatch.setenv("SPASM_CONTEXT_LINES", value)
        assert AssemblerConfig.from_env().context_lines == 3

    @pytest.mark.parametrize("value,expected", [
        ("1", True),
        ("yes", True),
        ("TRUE", True),
        ("0", False),
        ("no", False),
        ("false", False),
    ])
    def test_color(self, monkeypatch, value, expected):
        monkeypatch.setenv("SPASM_COLOR", value)
        assert AssemblerConfig.from_env().color is expected

    def test_invalid_color_ignored(self, monkeypatch):
        monkeypatch.setenv("SPASM_COLOR", "sometimes")
        assert AssemblerConfig.from_env().color is None

    def test_verbose(self, monkeypatch):
        monkeypatch.setenv("SPASM_VERBOSE", "1")
        assert AssemblerConfig.from_env().verbose is True
