"""Tests that -h is accepted as a help flag on all CLI commands."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from padlint.cli.app import app

runner = CliRunner()


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["check"],
        ["rules"],
    ],
    ids=["root", "check", "rules"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_rules_lists_both_rules() -> None:
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    assert "padded-blocks" in result.output
    assert "space-in-parens" in result.output


def test_check_without_input_is_an_error() -> None:
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 2
    assert "Nothing to lint" in result.output
