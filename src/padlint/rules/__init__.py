from padlint.rules.padded_blocks import RULE_NAME as PADDED_BLOCKS
from padlint.rules.padded_blocks import BlockPaddingAnalyzer, check_padded_blocks
from padlint.rules.space_in_parens import RULE_NAME as SPACE_IN_PARENS
from padlint.rules.space_in_parens import ParenSpacingAnalyzer, check_space_in_parens

RULE_DESCRIPTIONS = {
    PADDED_BLOCKS: "require or disallow padding within blocks",
    SPACE_IN_PARENS: "enforce consistent spacing inside parentheses",
}

__all__ = [
    "PADDED_BLOCKS",
    "RULE_DESCRIPTIONS",
    "SPACE_IN_PARENS",
    "BlockPaddingAnalyzer",
    "ParenSpacingAnalyzer",
    "check_padded_blocks",
    "check_space_in_parens",
]
