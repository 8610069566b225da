from rich.console import Console
from rich.table import Table

from padlint.core.policy import ExceptionTag, Mode
from padlint.models import MessageKind
from padlint.rules import PADDED_BLOCKS, RULE_DESCRIPTIONS, SPACE_IN_PARENS

console = Console()

_MESSAGES_BY_RULE = {
    PADDED_BLOCKS: [
        MessageKind.ALWAYS_PAD_BLOCK,
        MessageKind.NEVER_PAD_BLOCK,
        MessageKind.ALWAYS_PAD_SLICED_BLOCK,
        MessageKind.NEVER_PAD_MONOLITH_BLOCK,
        MessageKind.NEVER_PAD_BOTTOM,
    ],
    SPACE_IN_PARENS: [
        MessageKind.MISSING_OPENING_SPACE,
        MessageKind.MISSING_CLOSING_SPACE,
        MessageKind.REJECTED_OPENING_SPACE,
        MessageKind.REJECTED_CLOSING_SPACE,
    ],
}

_OPTIONS_BY_RULE = {
    PADDED_BLOCKS: "blocks / switches / classes; allowSingleLineBlocks, noBottomPadding",
    SPACE_IN_PARENS: "exceptions: " + ", ".join(tag.value for tag in ExceptionTag),
}


def rules() -> None:
    """List the available rules, their modes and message ids."""
    table = Table(show_lines=True)
    table.add_column("rule", no_wrap=True)
    table.add_column("description")
    table.add_column("modes")
    table.add_column("options")
    table.add_column("messages")
    modes = ", ".join(mode.value for mode in Mode)
    for rule, description in RULE_DESCRIPTIONS.items():
        messages = "\n".join(kind.value for kind in _MESSAGES_BY_RULE[rule])
        table.add_row(rule, description, modes, _OPTIONS_BY_RULE[rule], messages)
    console.print(table)
