"""Enforce consistent spacing just inside parentheses."""

from collections.abc import Callable

from padlint.core.geometry import (
    CLOSING_BRACKETS,
    OPENING_BRACKETS,
    WalkDirection,
    bracket_stack_walk,
    has_gap,
    is_closing_paren,
    is_opening_paren,
    is_same_line,
)
from padlint.core.policy import ExceptionTag, Mode, ParenPolicy
from padlint.errors import StructuralError
from padlint.models import Diagnostic, Fix, MessageKind, SourceUnit, Token, TokenKind

RULE_NAME = "space-in-parens"


def needs_space_loose(unit: SourceUnit, index: int) -> bool:
    """Decide whether a paren needs inner spacing in ``loose`` mode.

    Walks away from the paren: a block comment or a nested group of the same
    orientation asks for a space, a group holding a single token or nothing
    does not, and otherwise any whitespace between the inner tokens does.
    """
    tokens = unit.tokens
    paren = tokens[index]
    if is_opening_paren(paren):
        step, nested, closes = 1, is_opening_paren, is_closing_paren

        def exhausted(cursor: int) -> bool:
            return cursor + 1 > len(tokens) - 1

    elif is_closing_paren(paren):
        step, nested, closes = -1, is_closing_paren, is_opening_paren

        def exhausted(cursor: int) -> bool:
            return cursor < 2

    else:
        return False

    cursor = index
    while not exhausted(cursor):
        if tokens[cursor + step].kind is TokenKind.BLOCK_COMMENT:
            return True
        cursor += step
        current = tokens[cursor]
        if nested(current):
            return True
        beyond_index = cursor + step
        beyond = tokens[beyond_index] if 0 <= beyond_index < len(tokens) else current
        if closes(current) or closes(beyond):
            return False
        left, right = (current, beyond) if step > 0 else (beyond, current)
        if has_gap(unit, left, right):
            return True
    return False


def is_in_bracket_line(
    unit: SourceUnit, index: int, direction: WalkDirection, within: bool = False, unclosed: bool = False
) -> bool:
    """Check whether the paren only shares its line with punctuators.

    ``within`` and ``unclosed`` restrict the walk to the paren's own group:
    forward for an opener, backward for a closer, stopping once balanced.
    ``unclosed`` additionally requires the group not to balance on the line.
    """
    token = unit.tokens[index]
    if within or unclosed:
        if token.text in OPENING_BRACKETS:
            direction = WalkDirection.FORWARD
        elif token.text in CLOSING_BRACKETS:
            direction = WalkDirection.BACKWARD
        else:
            return False

    walk = bracket_stack_walk(unit, index, direction, track_nesting=within or unclosed)
    if unclosed and walk.depth == 0:
        return False
    return all(unit.tokens[i].kind is TokenKind.PUNCTUATOR for i in walk.scanned)


class ParenSpacingAnalyzer:
    def __init__(self, unit: SourceUnit, policy: ParenPolicy) -> None:
        self._unit = unit
        self._policy = policy
        self._openers = policy.opener_exceptions
        self._closers = policy.closer_exceptions

    def run(self) -> list[Diagnostic]:
        tokens = self._unit.tokens
        diagnostics: list[Diagnostic] = []
        depth = 0
        for index, token in enumerate(tokens):
            if is_opening_paren(token):
                if index + 1 >= len(tokens):
                    raise StructuralError(f"Opening paren at offset {token.start_offset} ends the token stream")
                depth += 1
                diagnostics.extend(self._check_opener(index))
            elif is_closing_paren(token):
                if depth == 0 or index == 0:
                    raise StructuralError(f"Closing paren at offset {token.start_offset} has no matching opening paren")
                depth -= 1
                diagnostics.extend(self._check_closer(index))
        diagnostics.sort(key=lambda d: (d.start_offset, d.end_offset))
        return diagnostics

    # -- exception & requirement logic ------------------------------------

    def _is_exception(self, index: int, neighbor: Token, opener: bool) -> bool:
        policy = self._policy
        side = WalkDirection.FORWARD if opener else WalkDirection.BACKWARD
        excepted = self._openers if opener else self._closers
        checks: list[tuple[ExceptionTag, Callable[[], bool]]] = [
            (ExceptionTag.BRACKET_LINES, lambda: is_in_bracket_line(self._unit, index, WalkDirection.BOTH)),
            (ExceptionTag.BRACKET_SIDES, lambda: is_in_bracket_line(self._unit, index, side)),
            (ExceptionTag.BRACKET_UNCLOSED, lambda: is_in_bracket_line(self._unit, index, side, unclosed=True)),
            (ExceptionTag.BRACKET_WITHIN, lambda: is_in_bracket_line(self._unit, index, side, within=True)),
        ]
        if not neighbor.is_comment and neighbor.text in excepted:
            return True
        return any(policy.has(tag) and check() for tag, check in checks)

    def _wants_space(self, index: int) -> bool:
        mode = self._policy.mode
        return mode is Mode.ALWAYS or (mode is Mode.LOOSE and needs_space_loose(self._unit, index))

    def _missing_space(self, index: int, neighbor: Token, opener: bool) -> bool:
        unit = self._unit
        paren = unit.tokens[index]
        left, right = (paren, neighbor) if opener else (neighbor, paren)
        if has_gap(unit, left, right):
            return False
        counterpart = is_closing_paren if opener else is_opening_paren
        if not self._policy.has(ExceptionTag.EMPTY) and counterpart(neighbor):
            return False
        is_exception = self._is_exception(index, neighbor, opener)
        return not is_exception if self._wants_space(index) else is_exception

    def _rejects_space(self, index: int, neighbor: Token, opener: bool) -> bool:
        unit = self._unit
        paren = unit.tokens[index]
        left, right = (paren, neighbor) if opener else (neighbor, paren)
        if not is_same_line(left, right):
            return False
        if opener and neighbor.kind is TokenKind.LINE_COMMENT:
            return False
        if not has_gap(unit, left, right):
            return False
        is_exception = self._is_exception(index, neighbor, opener)
        return is_exception if self._wants_space(index) else not is_exception

    # -- reporting ------------------------------------------------------------

    def _check_opener(self, index: int) -> list[Diagnostic]:
        paren = self._unit.tokens[index]
        following = self._unit.tokens[index + 1]
        found: list[Diagnostic] = []
        if self._missing_space(index, following, opener=True):
            found.append(
                self._report(
                    MessageKind.MISSING_OPENING_SPACE,
                    paren,
                    paren,
                    Fix(start=paren.end_offset, end=paren.end_offset, text=" "),
                )
            )
        if self._rejects_space(index, following, opener=True):
            found.append(
                self._report(
                    MessageKind.REJECTED_OPENING_SPACE,
                    paren,
                    following,
                    Fix(start=paren.end_offset, end=following.start_offset, text=""),
                    between=True,
                )
            )
        return found

    def _check_closer(self, index: int) -> list[Diagnostic]:
        paren = self._unit.tokens[index]
        preceding = self._unit.tokens[index - 1]
        found: list[Diagnostic] = []
        if self._missing_space(index, preceding, opener=False):
            found.append(
                self._report(
                    MessageKind.MISSING_CLOSING_SPACE,
                    paren,
                    paren,
                    Fix(start=paren.start_offset, end=paren.start_offset, text=" "),
                )
            )
        if self._rejects_space(index, preceding, opener=False):
            found.append(
                self._report(
                    MessageKind.REJECTED_CLOSING_SPACE,
                    preceding,
                    paren,
                    Fix(start=preceding.end_offset, end=paren.start_offset, text=""),
                    between=True,
                )
            )
        return found

    @staticmethod
    def _report(kind: MessageKind, left: Token, right: Token, fix: Fix, between: bool = False) -> Diagnostic:
        if between:
            start_offset, start_point = left.end_offset, left.end_point
            end_offset, end_point = right.start_offset, right.start_point
        else:
            start_offset, start_point = left.start_offset, left.start_point
            end_offset, end_point = right.end_offset, right.end_point
        return Diagnostic(
            rule=RULE_NAME,
            message_kind=kind,
            start_offset=start_offset,
            end_offset=end_offset,
            start_point=start_point,
            end_point=end_point,
            fix=fix,
        )


def check_space_in_parens(unit: SourceUnit, policy: ParenPolicy) -> list[Diagnostic]:
    return ParenSpacingAnalyzer(unit, policy).run()
