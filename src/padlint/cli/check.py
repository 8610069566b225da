import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from padlint.core.config import OFF, LintConfig, load_config
from padlint.core.languages import iter_source_files, resolve_language
from padlint.core.lint import lint_text, run_lint
from padlint.core.policy import resolve_block_policy, resolve_paren_policy
from padlint.errors import ConfigurationError, PadlintError
from padlint.models import LintResult

console = Console()

EXIT_PROBLEMS = 1
EXIT_ERROR = 2


class ConsoleSink:
    """Print each file's problems as a table."""

    def __init__(self, output: Console | None = None) -> None:
        self._console = output or console
        self.problems = 0
        self.files = 0

    def report(self, result: LintResult) -> None:
        self.files += 1
        self.problems += len(result.diagnostics)
        if not result.diagnostics:
            return
        table = Table(title=escape(result.path or "<code>"), show_lines=False, title_justify="left")
        table.add_column("location")
        table.add_column("rule", no_wrap=True)
        table.add_column("message")
        for diagnostic in result.diagnostics:
            point = diagnostic.start_point
            table.add_row(f"{point.row + 1}:{point.column + 1}", diagnostic.rule, diagnostic.message)
        self._console.print(table)


def _apply_overrides(
    config: LintConfig,
    padded_blocks: str | None,
    allow_single_line_blocks: bool,
    no_bottom_padding: bool,
    space_in_parens: str | None,
    exceptions: list[str] | None,
) -> LintConfig:
    block_policy = config.padded_blocks
    if padded_blocks == OFF:
        block_policy = None
    elif padded_blocks is not None or allow_single_line_blocks or no_bottom_padding:
        options = {
            "allowSingleLineBlocks": allow_single_line_blocks
            or bool(block_policy and block_policy.allow_single_line_blocks),
            "noBottomPadding": no_bottom_padding or bool(block_policy and block_policy.no_bottom_padding),
        }
        if padded_blocks is not None:
            block_policy = resolve_block_policy(padded_blocks, options)
        elif block_policy is not None:
            block_policy = block_policy.model_copy(
                update={
                    "allow_single_line_blocks": options["allowSingleLineBlocks"],
                    "no_bottom_padding": options["noBottomPadding"],
                }
            )
        else:
            block_policy = resolve_block_policy(None, options)

    paren_policy = config.space_in_parens
    if space_in_parens == OFF:
        paren_policy = None
    elif space_in_parens is not None or exceptions:
        mode = space_in_parens or (paren_policy.mode.value if paren_policy else None)
        if exceptions:
            tags = exceptions
        else:
            tags = sorted(tag.value for tag in paren_policy.exceptions) if paren_policy else []
        paren_policy = resolve_paren_policy(mode, {"exceptions": tags})

    return LintConfig(padded_blocks=block_policy, space_in_parens=paren_policy)


def check(
    paths: Annotated[list[str] | None, typer.Argument(help="Files or directories to lint.")] = None,
    code: Annotated[str | None, typer.Option(help="Source code string to lint instead of files.")] = None,
    language: Annotated[str | None, typer.Option(help="Language name (javascript, typescript, tsx).")] = None,
    config: Annotated[Path | None, typer.Option("--config", "-c", help="JSON rule configuration file.")] = None,
    padded_blocks: Annotated[
        str | None, typer.Option("--padded-blocks", help="padded-blocks mode: always, never, loose or off.")
    ] = None,
    allow_single_line_blocks: Annotated[
        bool, typer.Option("--allow-single-line-blocks", help="Skip blocks written on a single line.")
    ] = False,
    no_bottom_padding: Annotated[
        bool, typer.Option("--no-bottom-padding", help="Disallow blank lines before a closing brace.")
    ] = False,
    space_in_parens: Annotated[
        str | None, typer.Option("--space-in-parens", help="space-in-parens mode: always, never, loose or off.")
    ] = None,
    exception: Annotated[
        list[str] | None, typer.Option("--exception", "-e", help="space-in-parens exception, e.g. '{}' or 'empty'.")
    ] = None,
    fix: Annotated[bool, typer.Option("--fix", help="Apply fixes in place (or print the fixed --code).")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Check blank-line padding and paren spacing."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    try:
        resolved = _apply_overrides(
            load_config(config),
            padded_blocks,
            allow_single_line_blocks,
            no_bottom_padding,
            space_in_parens,
            exception,
        )
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(EXIT_ERROR) from None

    sink = ConsoleSink()
    try:
        if code is not None:
            result = lint_text(code, resolve_language(language or "javascript", None), resolved, fix=fix)
            sink.report(result)
            problems = sink.problems
            if result.output is not None:
                console.print(result.output, markup=False, highlight=False, soft_wrap=True, end="")
        else:
            if not paths:
                console.print("[red]Nothing to lint:[/red] pass file paths or --code.")
                raise typer.Exit(EXIT_ERROR)
            problems = run_lint(sink, iter_source_files(paths), resolved, language=language, fix=fix)
    except (PadlintError, ValueError, FileNotFoundError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(EXIT_ERROR) from None

    if problems:
        console.print(f"[yellow]{problems} problem(s)[/yellow] in {sink.files} file(s)")
        raise typer.Exit(EXIT_PROBLEMS)
    console.print(f"[green]No problems[/green] in {sink.files} file(s)")
