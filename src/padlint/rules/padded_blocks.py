"""Require or disallow blank-line padding inside blocks, switches and classes."""

from padlint.core.geometry import (
    OwnRangeCache,
    is_same_line,
    is_sliced,
    next_real_token,
    prev_real_token,
    token_after,
    token_before,
)
from padlint.core.policy import BlockPolicy, PaddingPolicy, category_for
from padlint.errors import StructuralError
from padlint.models import PADDED_KINDS, Diagnostic, Fix, MessageKind, SourceUnit, SyntaxNode, Token

RULE_NAME = "padded-blocks"


def _has_blank_line_between(first: Token, second: Token) -> bool:
    return second.start_point.row - first.end_point.row >= 2


class BlockPaddingAnalyzer:
    def __init__(self, unit: SourceUnit, policy: BlockPolicy) -> None:
        self._unit = unit
        self._policy = policy
        self._own_ranges = OwnRangeCache(unit)

    def run(self) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for node in self._unit.blocks:
            if node.kind not in PADDED_KINDS or not node.children:
                continue
            category_policy = self._policy.policy_for(category_for(node.kind))
            if category_policy is None:
                continue
            diagnostics.extend(self._check(node, category_policy))
        diagnostics.sort(key=lambda d: (d.start_offset, d.end_offset))
        return diagnostics

    def _check(self, node: SyntaxNode, policy: PaddingPolicy) -> list[Diagnostic]:
        unit = self._unit
        tokens = unit.tokens
        if node.open_token is None or node.close_token is None:
            raise StructuralError(f"{node.kind.value} at offset {node.start_offset} has no delimiter tokens")

        first_index = next_real_token(unit, node.open_token)
        last_index = prev_real_token(unit, node.close_token)
        first = tokens[first_index]
        last = tokens[last_index]
        before_first = tokens[token_before(unit, first_index)]
        after_last = tokens[token_after(unit, last_index)]

        if self._policy.allow_single_line_blocks and is_same_line(before_first, after_last):
            return []

        has_top_padding = _has_blank_line_between(before_first, first)
        has_bottom_padding = _has_blank_line_between(last, after_last)
        sliced = is_sliced(unit, self._own_ranges, node, first, last)
        require_padding = policy.should_have_padding or (policy.only_pad_sliced and sliced)

        always_kind = MessageKind.ALWAYS_PAD_SLICED_BLOCK if policy.only_pad_sliced else MessageKind.ALWAYS_PAD_BLOCK
        never_kind = MessageKind.NEVER_PAD_MONOLITH_BLOCK if policy.only_pad_sliced else MessageKind.NEVER_PAD_BLOCK

        found: list[Diagnostic] = []
        if require_padding:
            if not has_top_padding:
                found.append(self._top(always_kind, before_first, first, self._insert(before_first.end_offset)))
            if not has_bottom_padding and not self._policy.no_bottom_padding:
                found.append(self._bottom(always_kind, last, after_last, self._insert(after_last.start_offset)))
        elif has_top_padding:
            found.append(self._top(never_kind, before_first, first, self._collapse(before_first, first)))

        if (not require_padding or self._policy.no_bottom_padding) and has_bottom_padding:
            kind = MessageKind.NEVER_PAD_BOTTOM if self._policy.no_bottom_padding else never_kind
            found.append(self._bottom(kind, last, after_last, self._collapse(last, after_last)))
        return found

    @staticmethod
    def _insert(offset: int) -> Fix:
        return Fix(start=offset, end=offset, text="\n")

    @staticmethod
    def _collapse(left: Token, right: Token) -> Fix:
        # Keep the indentation in front of ``right``.
        return Fix(start=left.end_offset, end=right.start_offset - right.start_point.column, text="\n")

    @staticmethod
    def _top(kind: MessageKind, before_first: Token, first: Token, fix: Fix) -> Diagnostic:
        return Diagnostic(
            rule=RULE_NAME,
            message_kind=kind,
            start_offset=before_first.start_offset,
            end_offset=first.start_offset,
            start_point=before_first.start_point,
            end_point=first.start_point,
            fix=fix,
        )

    @staticmethod
    def _bottom(kind: MessageKind, last: Token, after_last: Token, fix: Fix) -> Diagnostic:
        return Diagnostic(
            rule=RULE_NAME,
            message_kind=kind,
            start_offset=last.end_offset,
            end_offset=after_last.start_offset,
            start_point=last.end_point,
            end_point=after_last.start_point,
            fix=fix,
        )


def check_padded_blocks(unit: SourceUnit, policy: BlockPolicy) -> list[Diagnostic]:
    return BlockPaddingAnalyzer(unit, policy).run()
