"""
Diagnostic rendering for the command line.

Turns lexer and parser errors into annotated reports against the original
source text:

    Error[P004]: Unclosed delimiter (
      --> main.c:1:11
       |
     1 | int main( { return 0; }
       |         ^ Unclosed delimiter (
       |           ^ Must be closed before this {
       = help: The '(' at 8..9 was never closed.
"""

from typing import Iterable, List, Optional, Tuple

from rich.console import Console
from rich.text import Text

from .lexer.tokens import Span
from .lexer.errors import FrontendError, ErrorReason
from .parser.errors import UnclosedDelimiter

LABEL_STYLES = {
    "primary": "bold red",
    "secondary": "bold yellow",
}


def line_and_column(source: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based line and column of a character offset."""
    offset = min(offset, len(source))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def _source_line(source: str, line: int) -> str:
    lines = source.split("\n")
    if line - 1 < len(lines):
        return lines[line - 1].rstrip("\r")
    return ""


def _found_text(error: FrontendError) -> str:
    return "end of file" if error.found is None else error.found


def _labels(error: FrontendError) -> List[Tuple[Span, str, str]]:
    """Spans to underline, each with its message and style key."""
    if error.reason == ErrorReason.UNCLOSED and isinstance(error, UnclosedDelimiter):
        return [
            (error.delimiter_span, f"Unclosed delimiter {error.delimiter}", "secondary"),
            (error.span, f"Must be closed before this {_found_text(error)}", "primary"),
        ]
    if error.reason == ErrorReason.CUSTOM:
        return [(error.span, error.message, "primary")]
    return [(error.span, f"Unexpected token {_found_text(error)}", "primary")]


def render_error(error: FrontendError, source: str, filename: str = "<string>") -> Text:
    """Build a rich Text report for one error."""
    labels = _labels(error)
    line, column = line_and_column(source, error.span.start)
    lines_shown = sorted({line_and_column(source, span.start)[0] for span, _, _ in labels})
    gutter = len(str(lines_shown[-1]))

    text = Text()
    code = f"[{error.diagnostic.code}]" if error.diagnostic.code else ""
    text.append(f"Error{code}", style="bold red")
    text.append(f": {error.message}\n", style="bold")
    text.append(f"{' ' * gutter} --> {filename}:{line}:{column}\n", style="blue")
    text.append(f"{' ' * gutter} |\n", style="blue")

    for shown in lines_shown:
        source_line = _source_line(source, shown)
        text.append(f"{shown:>{gutter}} | ", style="blue")
        text.append(source_line + "\n")

        for span, message, style_key in labels:
            label_line, label_column = line_and_column(source, span.start)
            if label_line != shown:
                continue
            # Clip to the line; the end-of-input marker sits past the last character
            width = max(1, min(len(span), len(source_line) - label_column + 1))
            text.append(f"{' ' * gutter} | ", style="blue")
            text.append(" " * (label_column - 1))
            text.append("^" * width + " " + message + "\n", style=LABEL_STYLES[style_key])

    if error.diagnostic.help_text:
        text.append(f"{' ' * gutter} = help: {error.diagnostic.help_text}\n")
    for suggestion in error.diagnostic.suggestions or []:
        text.append(f"{' ' * gutter} = note: {suggestion}\n")

    return text


def format_error(error: FrontendError, source: str, filename: str = "<string>") -> str:
    """Plain-text form of ``render_error``."""
    return render_error(error, source, filename).plain


def report_errors(errors: Iterable[FrontendError], source: str, filename: str = "<string>",
                  console: Optional[Console] = None):
    """Print a report for every error, to stderr unless a console is given."""
    if console is None:
        console = Console(stderr=True, highlight=False)

    for error in errors:
        console.print(render_error(error, source, filename), soft_wrap=True)
