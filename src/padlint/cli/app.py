import typer

from padlint.cli.check import check
from padlint.cli.rules import rules

app = typer.Typer(
    name="padlint",
    help="padlint: blank-line padding and paren spacing checks for JavaScript and TypeScript.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("check")(check)
app.command("rules")(rules)


def main() -> None:
    app()
