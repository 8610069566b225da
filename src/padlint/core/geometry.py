"""Token geometry shared by the padding and spacing rules.

Everything here is a pure function of one ``SourceUnit`` except
``OwnRangeCache``, which memoizes per analysis pass and must not outlive it.
"""

import re
from dataclasses import dataclass
from enum import Enum

from padlint.errors import StructuralError
from padlint.models import NESTED_SCOPE_KINDS, SourceUnit, SyntaxNode, Token, TokenKind

_WHITESPACE = re.compile(r"\s")

_OPPOSITE_BRACKETS = {"(": ")", ")": "(", "{": "}", "}": "{", "[": "]", "]": "["}
OPENING_BRACKETS = frozenset("({[")
CLOSING_BRACKETS = frozenset(")}]")


def is_same_line(left: Token, right: Token) -> bool:
    return left.end_point.row == right.start_point.row


def has_gap(unit: SourceUnit, left: Token, right: Token) -> bool:
    return _WHITESPACE.search(unit.text, left.end_offset, right.start_offset) is not None


def is_opening_paren(token: Token) -> bool:
    return token.kind is TokenKind.PUNCTUATOR and token.text == "("


def is_closing_paren(token: Token) -> bool:
    return token.kind is TokenKind.PUNCTUATOR and token.text == ")"


def token_after(unit: SourceUnit, index: int) -> int:
    if index + 1 >= len(unit.tokens):
        raise StructuralError(f"No token follows {unit.tokens[index].text!r} at offset {unit.tokens[index].end_offset}")
    return index + 1


def token_before(unit: SourceUnit, index: int) -> int:
    if index <= 0:
        token = unit.tokens[index]
        raise StructuralError(f"No token precedes {token.text!r} at offset {token.start_offset}")
    return index - 1


def next_real_token(unit: SourceUnit, index: int) -> int:
    """Return the first token after ``index`` that is not a comment trailing on the same line."""
    current = index
    while True:
        previous = current
        current = token_after(unit, previous)
        token = unit.tokens[current]
        if not (token.is_comment and token.start_point.row == unit.tokens[previous].end_point.row):
            return current


def prev_real_token(unit: SourceUnit, index: int) -> int:
    """Return the last token before ``index`` that is not a comment leading on the same line."""
    current = index
    while True:
        following = current
        current = token_before(unit, following)
        token = unit.tokens[current]
        if not (token.is_comment and token.end_point.row == unit.tokens[following].start_point.row):
            return current


# ---------------------------------------------------------------------------
# Own ranges
# ---------------------------------------------------------------------------


def compute_own_ranges(unit: SourceUnit, node: SyntaxNode) -> tuple[tuple[int, int], ...]:
    """Inclusive ``(low, high)`` offset intervals of ``node`` not claimed by a nested scope."""
    ranges: list[tuple[int, int]] = []
    start = node.start_offset
    for child in node.children:
        if child.kind not in NESTED_SCOPE_KINDS:
            continue
        if child.open_token is None:
            raise StructuralError(f"{child.kind.value} at offset {child.start_offset} has no opening token")
        ranges.append((start, unit.tokens[child.open_token].start_offset - 1))
        start = child.end_offset
    ranges.append((start, node.end_offset))
    return tuple(ranges)


class OwnRangeCache:
    def __init__(self, unit: SourceUnit) -> None:
        self._unit = unit
        self._ranges: dict[int, tuple[tuple[int, int], ...]] = {}

    def ranges(self, node: SyntaxNode) -> tuple[tuple[int, int], ...]:
        cached = self._ranges.get(node.index)
        if cached is None:
            cached = self._ranges[node.index] = compute_own_ranges(self._unit, node)
        return cached

    def contains(self, node: SyntaxNode, offset: int) -> bool:
        return any(low <= offset <= high for low, high in self.ranges(node))


def is_own_blank_line(unit: SourceUnit, cache: OwnRangeCache, node: SyntaxNode, row: int) -> bool:
    return cache.contains(node, unit.line_starts[row]) and not unit.lines[row].strip()


def is_sliced(unit: SourceUnit, cache: OwnRangeCache, node: SyntaxNode, first: Token, last: Token) -> bool:
    row = first.start_point.row
    while True:
        if is_own_blank_line(unit, cache, node, row):
            return True
        row += 1
        if row > last.end_point.row:
            return False


# ---------------------------------------------------------------------------
# Same-line bracket walks
# ---------------------------------------------------------------------------


class WalkDirection(Enum):
    BOTH = "both"
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class BracketWalk:
    scanned: tuple[int, ...]
    depth: int


def _push_or_pop(stack: list[str], token: Token) -> None:
    opposite = _OPPOSITE_BRACKETS.get(token.text)
    if opposite is None:
        return
    if stack and stack[-1] == opposite:
        stack.pop()
    else:
        stack.append(token.text)


def bracket_stack_walk(unit: SourceUnit, index: int, direction: WalkDirection, track_nesting: bool) -> BracketWalk:
    """Scan the tokens sharing a line with ``tokens[index]``.

    With ``track_nesting`` the walk stops as soon as the bracket opened (or
    closed) by the start token is balanced.
    """
    tokens = unit.tokens
    start = tokens[index]
    scanned = [index]
    stack = [start.text]

    steps = []
    if direction is not WalkDirection.FORWARD:
        steps.append(-1)
    if direction is not WalkDirection.BACKWARD:
        steps.append(1)

    for step in steps:
        cursor = index + step
        while 0 <= cursor < len(tokens) and is_same_line(tokens[cursor], start):
            scanned.append(cursor)
            if track_nesting:
                _push_or_pop(stack, tokens[cursor])
                if not stack:
                    break
            cursor += step

    return BracketWalk(scanned=tuple(scanned), depth=len(stack))
