from typing import Protocol

from padlint.models import LintResult


class DiagnosticSink(Protocol):
    def report(self, result: LintResult) -> None: ...


class CollectingSink:
    """Keep every reported result in memory."""

    def __init__(self) -> None:
        self.results: list[LintResult] = []

    def report(self, result: LintResult) -> None:
        self.results.append(result)

    @property
    def problem_count(self) -> int:
        return sum(len(result.diagnostics) for result in self.results)
