from enum import Enum

from pydantic import BaseModel, ConfigDict


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int
    column: int


class TokenKind(str, Enum):
    PUNCTUATOR = "Punctuator"
    LINE_COMMENT = "Line"
    BLOCK_COMMENT = "Block"
    KEYWORD = "Keyword"
    IDENTIFIER = "Identifier"
    NUMERIC = "Numeric"
    STRING = "String"
    TEMPLATE = "Template"
    REGULAR_EXPRESSION = "RegularExpression"
    JSX_TEXT = "JSXText"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    start_offset: int
    end_offset: int
    start_point: Position
    end_point: Position

    @property
    def is_comment(self) -> bool:
        return self.kind in (TokenKind.LINE_COMMENT, TokenKind.BLOCK_COMMENT)


class NodeKind(str, Enum):
    BLOCK_BODY = "BlockBody"
    SWITCH_BODY = "SwitchBody"
    CLASS_BODY = "ClassBody"
    STATIC_INIT_BLOCK = "StaticInitBlock"
    METHOD = "Method"
    OTHER = "Other"


PADDED_KINDS = frozenset(
    {NodeKind.BLOCK_BODY, NodeKind.SWITCH_BODY, NodeKind.CLASS_BODY, NodeKind.STATIC_INIT_BLOCK}
)

# Members whose span is cut out of the enclosing body's own range.
NESTED_SCOPE_KINDS = PADDED_KINDS | {NodeKind.METHOD}


class SyntaxNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    kind: NodeKind
    start_offset: int
    end_offset: int
    start_point: Position
    end_point: Position
    open_token: int | None = None
    close_token: int | None = None
    children: tuple["SyntaxNode", ...] = ()


SyntaxNode.model_rebuild()  # necessary for recursive types


class SourceUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str
    text: str
    lines: tuple[str, ...]
    line_starts: tuple[int, ...]
    tokens: tuple[Token, ...]
    blocks: tuple[SyntaxNode, ...]
    path: str | None = None


class MessageKind(str, Enum):
    ALWAYS_PAD_BLOCK = "alwaysPadBlock"
    NEVER_PAD_BLOCK = "neverPadBlock"
    ALWAYS_PAD_SLICED_BLOCK = "alwaysPadSlicedBlock"
    NEVER_PAD_MONOLITH_BLOCK = "neverPadMonolithBlock"
    NEVER_PAD_BOTTOM = "neverPadBottom"
    MISSING_OPENING_SPACE = "missingOpeningSpace"
    MISSING_CLOSING_SPACE = "missingClosingSpace"
    REJECTED_OPENING_SPACE = "rejectedOpeningSpace"
    REJECTED_CLOSING_SPACE = "rejectedClosingSpace"


MESSAGES: dict[MessageKind, str] = {
    MessageKind.ALWAYS_PAD_BLOCK: "Block must be padded by blank lines.",
    MessageKind.NEVER_PAD_BLOCK: "Block must not be padded by blank lines.",
    MessageKind.ALWAYS_PAD_SLICED_BLOCK: "Sliced block must be padded by blank lines.",
    MessageKind.NEVER_PAD_MONOLITH_BLOCK: "Monolith block must not be padded by blank lines.",
    MessageKind.NEVER_PAD_BOTTOM: "Bottom of a block must not be padded by blank lines.",
    MessageKind.MISSING_OPENING_SPACE: "There must be a space after this paren.",
    MessageKind.MISSING_CLOSING_SPACE: "There must be a space before this paren.",
    MessageKind.REJECTED_OPENING_SPACE: "There should be no space after this paren.",
    MessageKind.REJECTED_CLOSING_SPACE: "There should be no space before this paren.",
}


class Fix(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    text: str


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule: str
    message_kind: MessageKind
    start_offset: int
    end_offset: int
    start_point: Position
    end_point: Position
    fix: Fix | None = None

    @property
    def message(self) -> str:
        return MESSAGES[self.message_kind]


class LintResult(BaseModel):
    path: str | None
    language: str
    diagnostics: list[Diagnostic]
    output: str | None = None

    @property
    def fixed(self) -> bool:
        return self.output is not None
