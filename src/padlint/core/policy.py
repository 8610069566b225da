"""Resolve raw rule options into immutable policies.

All validation happens here, before any token is inspected.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from padlint.errors import ConfigurationError, UnreachableCategoryError
from padlint.models import NodeKind


class Mode(str, Enum):
    ALWAYS = "always"
    NEVER = "never"
    LOOSE = "loose"


class BlockCategory(str, Enum):
    BLOCKS = "blocks"
    SWITCHES = "switches"
    CLASSES = "classes"


class ExceptionTag(str, Enum):
    BRACES = "{}"
    BRACKETS = "[]"
    PARENS = "()"
    EMPTY = "empty"
    BRACKET_LINES = "bracket lines"
    BRACKET_SIDES = "bracket sides"
    BRACKET_UNCLOSED = "bracket unclosed"
    BRACKET_WITHIN = "bracket within"


# Tokens that, when adjacent to a paren, flip its requirement.
_OPENER_EXCEPTIONS = {
    ExceptionTag.BRACES: "{",
    ExceptionTag.BRACKETS: "[",
    ExceptionTag.PARENS: "(",
    ExceptionTag.EMPTY: ")",
}
_CLOSER_EXCEPTIONS = {
    ExceptionTag.BRACES: "}",
    ExceptionTag.BRACKETS: "]",
    ExceptionTag.PARENS: ")",
    ExceptionTag.EMPTY: "(",
}

_CATEGORY_BY_KIND = {
    NodeKind.BLOCK_BODY: BlockCategory.BLOCKS,
    NodeKind.STATIC_INIT_BLOCK: BlockCategory.BLOCKS,
    NodeKind.SWITCH_BODY: BlockCategory.SWITCHES,
    NodeKind.CLASS_BODY: BlockCategory.CLASSES,
}

_BLOCK_OPTION_KEYS = {"allowSingleLineBlocks", "noBottomPadding"}
_PAREN_OPTION_KEYS = {"exceptions"}


class PaddingPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    should_have_padding: bool
    only_pad_sliced: bool

    @classmethod
    def from_mode(cls, mode: Mode) -> "PaddingPolicy":
        return cls(should_have_padding=mode is Mode.ALWAYS, only_pad_sliced=mode is Mode.LOOSE)


class BlockPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: dict[BlockCategory, PaddingPolicy]
    allow_single_line_blocks: bool = False
    no_bottom_padding: bool = False

    def policy_for(self, category: BlockCategory) -> PaddingPolicy | None:
        return self.categories.get(category)


class ParenPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Mode = Mode.NEVER
    exceptions: frozenset[ExceptionTag] = frozenset()

    @property
    def opener_exceptions(self) -> frozenset[str]:
        return frozenset(_OPENER_EXCEPTIONS[tag] for tag in self.exceptions if tag in _OPENER_EXCEPTIONS)

    @property
    def closer_exceptions(self) -> frozenset[str]:
        return frozenset(_CLOSER_EXCEPTIONS[tag] for tag in self.exceptions if tag in _CLOSER_EXCEPTIONS)

    def has(self, tag: ExceptionTag) -> bool:
        return tag in self.exceptions


def category_for(kind: NodeKind) -> BlockCategory:
    try:
        return _CATEGORY_BY_KIND[kind]
    except KeyError:
        raise UnreachableCategoryError(f"Node kind {kind.value} has no padding category") from None


def _parse_mode(value: Any, what: str) -> Mode:
    try:
        return Mode(value)
    except ValueError:
        allowed = ", ".join(mode.value for mode in Mode)
        raise ConfigurationError(f"Invalid {what} mode {value!r}; expected one of: {allowed}") from None


def _check_keys(options: Mapping[str, Any], allowed: set[str], rule: str) -> None:
    unknown = sorted(set(options) - allowed)
    if unknown:
        raise ConfigurationError(f"Unknown {rule} option(s): {', '.join(unknown)}")


def _parse_flag(options: Mapping[str, Any], key: str) -> bool:
    value = options.get(key, False)
    if not isinstance(value, bool):
        raise ConfigurationError(f"Option {key!r} must be a boolean, got {value!r}")
    return value


def resolve_block_policy(
    mode: str | Mapping[str, Any] | None = None, options: Mapping[str, Any] | None = None
) -> BlockPolicy:
    """Resolve ``padded-blocks`` options.

    A string mode applies to every category. A mapping configures categories
    one by one; a category missing from the mapping is not checked at all.
    """
    if mode is None:
        mode = Mode.ALWAYS.value

    if isinstance(mode, str):
        policy = PaddingPolicy.from_mode(_parse_mode(mode, "padded-blocks"))
        categories = {category: policy for category in BlockCategory}
    elif isinstance(mode, Mapping):
        _check_keys(mode, {category.value for category in BlockCategory}, "padded-blocks category")
        if not mode:
            raise ConfigurationError("padded-blocks needs at least one of: blocks, switches, classes")
        categories = {
            BlockCategory(key): PaddingPolicy.from_mode(_parse_mode(value, f"padded-blocks {key}"))
            for key, value in mode.items()
        }
    else:
        raise ConfigurationError(f"padded-blocks mode must be a string or an object, got {mode!r}")

    options = options or {}
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"padded-blocks options must be an object, got {options!r}")
    _check_keys(options, _BLOCK_OPTION_KEYS, "padded-blocks")

    return BlockPolicy(
        categories=categories,
        allow_single_line_blocks=_parse_flag(options, "allowSingleLineBlocks"),
        no_bottom_padding=_parse_flag(options, "noBottomPadding"),
    )


def resolve_paren_policy(mode: str | None = None, options: Mapping[str, Any] | None = None) -> ParenPolicy:
    """Resolve ``space-in-parens`` options. The default mode is ``never``."""
    resolved_mode = Mode.NEVER if mode is None else _parse_mode(mode, "space-in-parens")

    options = options or {}
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"space-in-parens options must be an object, got {options!r}")
    _check_keys(options, _PAREN_OPTION_KEYS, "space-in-parens")

    raw_exceptions = options.get("exceptions", [])
    if isinstance(raw_exceptions, str) or not isinstance(raw_exceptions, (list, tuple, set, frozenset)):
        raise ConfigurationError(f"space-in-parens exceptions must be a list, got {raw_exceptions!r}")

    tags: list[ExceptionTag] = []
    for raw in raw_exceptions:
        try:
            tag = ExceptionTag(raw)
        except ValueError:
            allowed = ", ".join(repr(tag.value) for tag in ExceptionTag)
            raise ConfigurationError(f"Unknown space-in-parens exception {raw!r}; expected one of: {allowed}") from None
        if tag in tags:
            raise ConfigurationError(f"Duplicate space-in-parens exception {raw!r}")
        tags.append(tag)

    return ParenPolicy(mode=resolved_mode, exceptions=frozenset(tags))
