import bisect
import itertools
import logging
import re
from collections.abc import Callable
from pathlib import Path
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from padlint.core.languages import detect_language_from_path, normalize_language
from padlint.errors import SourceParseError
from padlint.models import NodeKind, Position, SourceUnit, SyntaxNode, Token, TokenKind

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|[\r\n\u2028\u2029]")

_PADDED_NODE_TYPES = {
    "statement_block": NodeKind.BLOCK_BODY,
    "switch_statement": NodeKind.SWITCH_BODY,
    "class_body": NodeKind.CLASS_BODY,
    "class_static_block": NodeKind.STATIC_INIT_BLOCK,
}

_COMMENT_TYPES = frozenset({"comment", "html_comment", "hash_bang_line"})

# Nodes that lex as a single token even though tree-sitter gives them children.
_ATOMIC_TYPES = {
    "string": TokenKind.STRING,
    "regex": TokenKind.REGULAR_EXPRESSION,
    "number": TokenKind.NUMERIC,
    "jsx_text": TokenKind.JSX_TEXT,
}

_KEYWORD_LEAVES = frozenset({"this", "super", "true", "false", "null"})

_Emit = Callable[[int, int, TokenKind], None]


class _OffsetMap:
    """Translate tree-sitter byte offsets into character offsets."""

    def __init__(self, source: str, source_bytes: bytes) -> None:
        self._table: list[int] | None = None
        if len(source_bytes) == len(source):
            return
        table = [0] * (len(source_bytes) + 1)
        position = 0
        for index, char in enumerate(source):
            width = len(char.encode("utf-8"))
            for step in range(width):
                table[position + step] = index
            position += width
        table[position] = len(source)
        self._table = table

    def __call__(self, byte_offset: int) -> int:
        if self._table is None:
            return byte_offset
        return self._table[byte_offset]


def _split_lines(source: str) -> tuple[tuple[str, ...], tuple[int, ...]]:
    lines: list[str] = []
    starts = [0]
    last = 0
    for match in _LINE_BREAK.finditer(source):
        lines.append(source[last : match.start()])
        last = match.end()
        starts.append(last)
    lines.append(source[last:])
    return tuple(lines), tuple(starts)


def _leaf_kind(node: Node, text: str) -> TokenKind:
    if node.is_named:
        return TokenKind.KEYWORD if node.type in _KEYWORD_LEAVES else TokenKind.IDENTIFIER
    if text[:1].isalpha() or text[:1] in ("_", "$"):
        return TokenKind.KEYWORD
    return TokenKind.PUNCTUATOR


def _collect_tokens(node: Node, source_bytes: bytes, emit: _Emit) -> None:
    if node.end_byte <= node.start_byte:
        return
    if node.type in _COMMENT_TYPES:
        is_block = source_bytes.startswith(b"/*", node.start_byte)
        emit(node.start_byte, node.end_byte, TokenKind.BLOCK_COMMENT if is_block else TokenKind.LINE_COMMENT)
        return
    if node.type == "template_string":
        _collect_template(node, source_bytes, emit)
        return
    if node.type in _ATOMIC_TYPES:
        emit(node.start_byte, node.end_byte, _ATOMIC_TYPES[node.type])
        return
    if node.child_count == 0:
        text = source_bytes[node.start_byte : node.end_byte].decode("utf-8")
        emit(node.start_byte, node.end_byte, _leaf_kind(node, text))
        return
    for child in node.children:
        _collect_tokens(child, source_bytes, emit)


def _collect_template(node: Node, source_bytes: bytes, emit: _Emit) -> None:
    # Each quasi chunk, delimiters included, is one token: `a ${ / } b ${ / } c`
    start = node.start_byte
    for child in node.children:
        if child.type != "template_substitution":
            continue
        parts = child.children
        emit(start, parts[0].end_byte, TokenKind.TEMPLATE)
        for inner in parts[1:-1]:
            _collect_tokens(inner, source_bytes, emit)
        start = parts[-1].start_byte
    emit(start, node.end_byte, TokenKind.TEMPLATE)


def _first_error(node: Node) -> Node | None:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _same_node(left: Node, right: Node | None) -> bool:
    return right is not None and (left.start_byte, left.end_byte, left.type) == (
        right.start_byte,
        right.end_byte,
        right.type,
    )


class _NodeBuilder:
    """Build the padded-block syntax nodes of one tree, in pre-order."""

    def __init__(
        self,
        offsets: _OffsetMap,
        position: Callable[[int], Position],
        token_starts: dict[int, int],
        token_ends: dict[int, int],
    ) -> None:
        self._offsets = offsets
        self._position = position
        self._token_starts = token_starts
        self._token_ends = token_ends
        self._counter = itertools.count()
        self.blocks: list[SyntaxNode] = []

    def discover(self, node: Node) -> None:
        for child in node.children:
            if child.type in _PADDED_NODE_TYPES:
                self.build(child)
            else:
                self.discover(child)

    def build(self, node: Node) -> SyntaxNode:
        index = next(self._counter)
        kind = _PADDED_NODE_TYPES[node.type]
        container = node if kind in (NodeKind.BLOCK_BODY, NodeKind.CLASS_BODY) else node.child_by_field_name("body")

        if not _same_node(node, container):
            for child in node.children:
                if _same_node(child, container):
                    continue
                if child.type in _PADDED_NODE_TYPES:
                    self.build(child)
                else:
                    self.discover(child)

        members: list[SyntaxNode] = []
        if container is not None:
            for child in container.named_children:
                if child.type in _COMMENT_TYPES:
                    continue
                if child.type in _PADDED_NODE_TYPES:
                    members.append(self.build(child))
                else:
                    members.append(self._member(child))
                    self.discover(child)

        syntax_node = SyntaxNode(
            index=index,
            kind=kind,
            open_token=self._token_starts.get(container.start_byte) if container is not None else None,
            close_token=self._token_ends.get(node.end_byte),
            children=tuple(members),
            **self._span(node),
        )
        self.blocks.append(syntax_node)
        return syntax_node

    def _member(self, node: Node) -> SyntaxNode:
        return SyntaxNode(
            index=next(self._counter),
            kind=NodeKind.METHOD if node.type == "method_definition" else NodeKind.OTHER,
            open_token=self._token_starts.get(node.start_byte),
            close_token=self._token_ends.get(node.end_byte),
            **self._span(node),
        )

    def _span(self, node: Node) -> dict[str, object]:
        start = self._offsets(node.start_byte)
        end = self._offsets(node.end_byte)
        return {
            "start_offset": start,
            "end_offset": end,
            "start_point": self._position(start),
            "end_point": self._position(end),
        }


def extract_source_unit(source: str, language: str, path: str | None = None) -> SourceUnit:
    parser = get_parser(cast(SupportedLanguage, language))
    source_bytes = source.encode("utf-8")
    tree = parser.parse(source_bytes)
    root = tree.root_node

    offsets = _OffsetMap(source, source_bytes)
    lines, line_starts = _split_lines(source)

    def position(offset: int) -> Position:
        row = bisect.bisect_right(line_starts, offset) - 1
        return Position(row=row, column=offset - line_starts[row])

    if root.has_error:
        error = _first_error(root) or root
        where = position(offsets(error.start_byte))
        raise SourceParseError(
            f"Parsing error in {path or '<text>'} at {where.row + 1}:{where.column + 1}",
            row=where.row,
            column=where.column,
        )

    spans: list[tuple[int, int, TokenKind]] = []
    _collect_tokens(root, source_bytes, lambda start, end, kind: spans.append((start, end, kind)))
    spans.sort(key=lambda span: span[0])

    tokens: list[Token] = []
    token_starts: dict[int, int] = {}
    token_ends: dict[int, int] = {}
    for start_byte, end_byte, kind in spans:
        start = offsets(start_byte)
        end = offsets(end_byte)
        token_starts[start_byte] = len(tokens)
        token_ends[end_byte] = len(tokens)
        tokens.append(
            Token(
                kind=kind,
                text=source[start:end],
                start_offset=start,
                end_offset=end,
                start_point=position(start),
                end_point=position(end),
            )
        )

    builder = _NodeBuilder(offsets, position, token_starts, token_ends)
    builder.discover(root)
    blocks = sorted(builder.blocks, key=lambda block: block.index)

    logger.debug("Extracted %d tokens and %d blocks from %s", len(tokens), len(blocks), path or "<text>")

    return SourceUnit(
        language=language,
        text=source,
        lines=lines,
        line_starts=line_starts,
        tokens=tuple(tokens),
        blocks=tuple(blocks),
        path=path,
    )


def extract_source_unit_from_file(path: str, language: str | None = None) -> SourceUnit:
    file_path = Path(path)
    resolved_language = normalize_language(language) if language else detect_language_from_path(file_path)

    try:
        source = file_path.read_bytes().decode("utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    return extract_source_unit(source, resolved_language, path=str(file_path))
