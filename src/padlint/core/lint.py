import logging
from collections.abc import Iterable
from pathlib import Path

from padlint.core.ast import extract_source_unit
from padlint.core.config import LintConfig
from padlint.core.languages import resolve_language
from padlint.core.ports.sink import DiagnosticSink
from padlint.models import Diagnostic, LintResult, SourceUnit
from padlint.rules.padded_blocks import check_padded_blocks
from padlint.rules.space_in_parens import check_space_in_parens

logger = logging.getLogger(__name__)

MAX_FIX_PASSES = 10


def lint_unit(unit: SourceUnit, config: LintConfig) -> list[Diagnostic]:
    """Run every enabled rule over one source unit."""
    diagnostics: list[Diagnostic] = []
    if config.padded_blocks is not None:
        diagnostics.extend(check_padded_blocks(unit, config.padded_blocks))
    if config.space_in_parens is not None:
        diagnostics.extend(check_space_in_parens(unit, config.space_in_parens))
    diagnostics.sort(key=lambda d: (d.start_offset, d.end_offset, d.rule))
    return diagnostics


def apply_fixes(text: str, diagnostics: Iterable[Diagnostic]) -> tuple[str, int]:
    """Apply every non-overlapping fix; returns the new text and the number of fixes applied.

    A fix starting at or before the end of one already applied in this round
    is left for the next pass.
    """
    fixes = sorted((d.fix for d in diagnostics if d.fix is not None), key=lambda f: (f.start, f.end))
    parts: list[str] = []
    cursor = 0
    last_end = -1
    applied = 0
    for fix in fixes:
        if fix.start <= last_end:
            continue
        parts.append(text[cursor : fix.start])
        parts.append(fix.text)
        cursor = fix.end
        last_end = fix.end
        applied += 1
    parts.append(text[cursor:])
    return "".join(parts), applied


def fix_text(text: str, language: str, config: LintConfig, path: str | None = None) -> tuple[str, list[Diagnostic]]:
    """Lint and fix repeatedly until nothing changes; returns the fixed text and the remaining problems."""
    current = text
    for attempt in range(MAX_FIX_PASSES):
        diagnostics = lint_unit(extract_source_unit(current, language, path=path), config)
        fixed, applied = apply_fixes(current, diagnostics)
        if not applied or fixed == current:
            return current, diagnostics
        logger.debug("Fix pass %d applied %d fix(es) to %s", attempt + 1, applied, path or "<text>")
        current = fixed
    return current, lint_unit(extract_source_unit(current, language, path=path), config)


def lint_text(
    text: str, language: str, config: LintConfig, path: str | None = None, fix: bool = False
) -> LintResult:
    if fix:
        output, diagnostics = fix_text(text, language, config, path=path)
        return LintResult(path=path, language=language, diagnostics=diagnostics, output=output)
    unit = extract_source_unit(text, language, path=path)
    return LintResult(path=path, language=language, diagnostics=lint_unit(unit, config))


def lint_file(path: str | Path, config: LintConfig, language: str | None = None, fix: bool = False) -> LintResult:
    file_path = Path(path)
    resolved_language = resolve_language(language, file_path)
    try:
        text = file_path.read_bytes().decode("utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    result = lint_text(text, resolved_language, config, path=str(file_path), fix=fix)
    if result.output is not None and result.output != text:
        file_path.write_bytes(result.output.encode("utf-8"))
        logger.info("Wrote fixes to %s", file_path)
    logger.info("Linted %s: %d problem(s)", file_path, len(result.diagnostics))
    return result


def run_lint(
    sink: DiagnosticSink,
    paths: Iterable[str | Path],
    config: LintConfig,
    language: str | None = None,
    fix: bool = False,
) -> int:
    """Lint every path into ``sink`` and return the number of remaining problems."""
    problems = 0
    for path in paths:
        result = lint_file(path, config, language=language, fix=fix)
        problems += len(result.diagnostics)
        sink.report(result)
    return problems
