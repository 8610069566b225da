import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from padlint.core.policy import BlockPolicy, ParenPolicy, resolve_block_policy, resolve_paren_policy
from padlint.errors import ConfigurationError
from padlint.rules.padded_blocks import RULE_NAME as PADDED_BLOCKS
from padlint.rules.space_in_parens import RULE_NAME as SPACE_IN_PARENS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PADLINT_CONFIG"
OFF = "off"


class LintConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    padded_blocks: BlockPolicy | None = None
    space_in_parens: ParenPolicy | None = None

    @property
    def enabled_rules(self) -> list[str]:
        enabled = []
        if self.padded_blocks is not None:
            enabled.append(PADDED_BLOCKS)
        if self.space_in_parens is not None:
            enabled.append(SPACE_IN_PARENS)
        return enabled


def default_config() -> LintConfig:
    return LintConfig(padded_blocks=resolve_block_policy(), space_in_parens=resolve_paren_policy())


def _split_entry(rule: str, entry: Any) -> tuple[Any, Any] | None:
    """Split ``"mode"`` / ``[mode]`` / ``[mode, options]`` into its parts; ``None`` means off."""
    if entry == OFF:
        return None
    if isinstance(entry, (str, Mapping)):
        return entry, None
    if isinstance(entry, list) and 1 <= len(entry) <= 2:
        if entry[0] == OFF:
            return None
        return entry[0], entry[1] if len(entry) == 2 else None
    raise ConfigurationError(f"Rule {rule!r} must be 'off', a mode, or [mode, options]; got {entry!r}")


def resolve_config(raw: Mapping[str, Any]) -> LintConfig:
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Configuration must be an object keyed by rule name, got {raw!r}")
    unknown = sorted(set(raw) - {PADDED_BLOCKS, SPACE_IN_PARENS})
    if unknown:
        raise ConfigurationError(f"Unknown rule(s): {', '.join(unknown)}")

    padded_blocks = None
    if PADDED_BLOCKS in raw:
        parts = _split_entry(PADDED_BLOCKS, raw[PADDED_BLOCKS])
        if parts is not None:
            padded_blocks = resolve_block_policy(*parts)

    space_in_parens = None
    if SPACE_IN_PARENS in raw:
        parts = _split_entry(SPACE_IN_PARENS, raw[SPACE_IN_PARENS])
        if parts is not None:
            mode, options = parts
            if not isinstance(mode, str):
                raise ConfigurationError(f"space-in-parens mode must be a string, got {mode!r}")
            space_in_parens = resolve_paren_policy(mode, options)

    return LintConfig(padded_blocks=padded_blocks, space_in_parens=space_in_parens)


def load_config(path: str | Path | None = None) -> LintConfig:
    """Load a JSON rule configuration.

    Falls back to ``$PADLINT_CONFIG`` and then to the built-in defaults.
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR) or None
    if path is None:
        return default_config()

    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(f"Config file not found: {config_path}") from None
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {config_path}: {exc}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {exc}") from exc

    logger.debug("Loaded configuration from %s", config_path)
    return resolve_config(raw)
