"""Tests for the GitHub Actions runner integration."""

import pytest

from release_actions.integrations import actions


class TestInputs:
    """Test action input access."""

    @pytest.mark.parametrize(
        "name, env",
        [
            ("from-author", "INPUT_FROM-AUTHOR"),
            ("template file", "INPUT_TEMPLATE_FILE"),
            ("branches", "INPUT_BRANCHES"),
        ],
    )
    def test_input_env_name(self, name, env):
        assert actions.input_env_name(name) == env

    def test_get_input_trims(self, monkeypatch):
        monkeypatch.setenv("INPUT_BRANCHES", "  main,1.0.x \n")
        assert actions.get_input("branches") == "main,1.0.x"

    def test_get_input_missing(self):
        assert actions.get_input("branches") is None

    def test_get_input_required(self):
        with pytest.raises(ValueError, match="Input required and not supplied: branches"):
            actions.get_input("branches", required=True)

    def test_boolean_input(self, monkeypatch):
        assert actions.get_boolean_input("dry-run") is None
        monkeypatch.setenv("INPUT_DRY-RUN", "true")
        assert actions.get_boolean_input("dry-run") is True
        monkeypatch.setenv("INPUT_DRY-RUN", "no")
        assert actions.get_boolean_input("dry-run") is False

    @pytest.mark.parametrize("value", ["True", "TRUE", "yes", "1"])
    def test_boolean_input_is_case_sensitive(self, monkeypatch, value):
        monkeypatch.setenv("INPUT_DRY-RUN", value)
        assert actions.get_boolean_input("dry-run") is False


class TestContext:
    """Test runner context helpers."""

    def test_get_ref(self, monkeypatch):
        assert actions.get_ref() is None
        monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
        assert actions.get_ref() == "refs/heads/main"


class TestSetFailed:
    """Test failure reporting."""

    def test_escape_data(self):
        assert actions.escape_data("50%\nnext\r") == "50%25%0Anext%0D"

    def test_set_failed(self, capsys):
        actions.set_failed("Please specify at least 2 branches")
        assert capsys.readouterr().out == "::error::Please specify at least 2 branches\n"
