"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from padlint.core.ast import extract_source_unit
from padlint.core.config import LintConfig, resolve_config
from padlint.models import SourceUnit

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def javascript_parser() -> Parser:
    """Return a tree-sitter parser for JavaScript."""
    return get_parser("javascript")


@pytest.fixture
def make_unit() -> Callable[..., SourceUnit]:
    """Return a helper that extracts a source unit from a snippet."""

    def _make(source: str, language: str = "javascript") -> SourceUnit:
        return extract_source_unit(source, language)

    return _make


@pytest.fixture
def blocks_only() -> LintConfig:
    return resolve_config({"padded-blocks": "always"})


@pytest.fixture
def parens_only() -> LintConfig:
    return resolve_config({"space-in-parens": "never"})
