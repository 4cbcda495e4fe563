"""
miniC Compiler Front End

Turns miniC source text into an immutable syntax tree, or into structured
diagnostics with exact source spans.

Architecture:
    minic/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST generation
    ├── frontend.py      # Lexer + parser pipeline
    ├── report.py        # Diagnostic rendering
    └── cli.py           # `minic FILE`
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, tokenize
from .parser import Parser, parse
from .frontend import FrontendResult, parse_source, parse_file

__all__ = [
    "Lexer",
    "Parser",
    "tokenize",
    "parse",
    "FrontendResult",
    "parse_source",
    "parse_file",
    "__version__",
    "__license__",
]
