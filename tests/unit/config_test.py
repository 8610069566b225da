"""Unit tests for rule configuration loading."""

import json
from pathlib import Path
from typing import Any

import pytest

from padlint.core.config import CONFIG_ENV_VAR, default_config, load_config, resolve_config
from padlint.core.policy import BlockCategory, Mode, PaddingPolicy, resolve_block_policy, resolve_paren_policy
from padlint.errors import ConfigurationError


class TestResolveConfig:
    def test_default_config_enables_both_rules(self) -> None:
        config = default_config()
        assert config.enabled_rules == ["padded-blocks", "space-in-parens"]
        assert config.padded_blocks == resolve_block_policy()
        assert config.space_in_parens == resolve_paren_policy()

    def test_empty_mapping_disables_everything(self) -> None:
        assert resolve_config({}).enabled_rules == []

    def test_off_disables_a_rule(self) -> None:
        config = resolve_config({"padded-blocks": "off", "space-in-parens": ["off"]})
        assert config.padded_blocks is None
        assert config.space_in_parens is None

    def test_mode_with_options(self) -> None:
        config = resolve_config(
            {
                "padded-blocks": [{"classes": "always"}, {"allowSingleLineBlocks": True}],
                "space-in-parens": ["always", {"exceptions": ["{}"]}],
            }
        )
        assert config.padded_blocks is not None
        assert config.padded_blocks.policy_for(BlockCategory.CLASSES) == PaddingPolicy.from_mode(Mode.ALWAYS)
        assert config.padded_blocks.allow_single_line_blocks
        assert config.space_in_parens is not None
        assert config.space_in_parens.mode is Mode.ALWAYS
        assert config.space_in_parens.opener_exceptions == frozenset({"{"})

    def test_single_element_list(self) -> None:
        config = resolve_config({"space-in-parens": ["loose"]})
        assert config.space_in_parens is not None
        assert config.space_in_parens.mode is Mode.LOOSE
        assert config.enabled_rules == ["space-in-parens"]

    @pytest.mark.parametrize(
        "raw",
        [
            {"no-tabs": "always"},
            {"padded-blocks": 1},
            {"padded-blocks": []},
            {"padded-blocks": ["always", {}, "extra"]},
            {"space-in-parens": {"blocks": "never"}},
            {"space-in-parens": "sometimes"},
            ["padded-blocks"],
        ],
        ids=[
            "unknown-rule",
            "number-entry",
            "empty-list",
            "long-list",
            "paren-mode-mapping",
            "bad-paren-mode",
            "not-a-mapping",
        ],
    )
    def test_rejects_invalid_entries(self, raw: Any) -> None:
        with pytest.raises(ConfigurationError):
            resolve_config(raw)


class TestLoadConfig:
    def test_defaults_without_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_config() == default_config()

    def test_reads_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "padlint.json"
        path.write_text(json.dumps({"space-in-parens": ["always"]}))
        config = load_config(path)
        assert config.enabled_rules == ["space-in-parens"]

    def test_falls_back_to_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"padded-blocks": "never"}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().enabled_rules == ["padded-blocks"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{ 'padded-blocks': ")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_config(path)
