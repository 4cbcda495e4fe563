"""
Command line entry point: `minic FILE`.

Prints the syntax tree of a miniC source file, or a report for every
lexical or syntax error and exit status 1.
"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .frontend import parse_source
from .parser import format_program
from .report import report_errors


def _setup_logging(verbose: bool, console: Console):
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def _token_table(tokens) -> Table:
    table = Table(title="Tokens")
    table.add_column("Type", style="cyan")
    table.add_column("Lexeme", style="green")
    table.add_column("Value")
    table.add_column("Span", style="yellow")

    for token in tokens:
        value = "" if token.value is None else str(token.value)
        table.add_row(token.type.name, token.lexeme, value, str(token.span))
    return table


@click.command()
@click.argument("input_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.option("--tokens", "show_tokens", is_flag=True, help="Print the token list instead of the syntax tree.")
@click.option("--recover", is_flag=True, help="Keep parsing after a broken statement to report more errors.")
@click.option("--no-color", is_flag=True, envvar="MINIC_NO_COLOR", help="Disable colored output.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="minic")
def main(input_file, show_tokens, recover, no_color, verbose):
    """Parse a miniC source FILE and print its syntax tree."""
    out = Console(no_color=no_color, highlight=False)
    err = Console(stderr=True, no_color=no_color, highlight=False)
    _setup_logging(verbose, err)

    try:
        with open(input_file, "r", encoding="utf-8") as f:
            source = f.read()
    except UnicodeDecodeError as e:
        raise click.FileError(input_file, hint=f"not valid UTF-8 ({e.reason})")

    result = parse_source(source, input_file, recover=recover)

    if result.has_errors():
        report_errors(result.errors, source, input_file, console=err)
        err.print(f"{len(result.errors)} {result.stage} error(s)", style="bold red")
        sys.exit(1)

    if show_tokens:
        out.print(_token_table(result.tokens))
    else:
        out.print(format_program(result.program), markup=False, soft_wrap=True)


if __name__ == "__main__":
    main()
