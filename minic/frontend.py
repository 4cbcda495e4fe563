"""
Front-end driver: source text in, syntax tree or diagnostics out.

Tokenizing and parsing run in sequence. Lexical errors stop the pipeline
before the parser sees a partial token list.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .lexer import Token, FrontendError, tokenize
from .parser import Program, parse

logger = logging.getLogger(__name__)


@dataclass
class FrontendResult:
    """Result of running the front end over one source text."""
    source: str
    filename: str
    program: Optional[Program] = None
    tokens: Optional[List[Token]] = None
    errors: List[FrontendError] = field(default_factory=list)
    stage: str = "parser"  # stage that produced the errors, if any

    def has_errors(self) -> bool:
        """Check if either stage rejected the input."""
        return len(self.errors) > 0


def parse_source(source: str, filename: str = "<string>", recover: bool = False) -> FrontendResult:
    """
    Tokenize and parse a source string.

    Args:
        source: Source code string
        filename: Filename used in diagnostics
        recover: Let the parser resynchronize at statement boundaries

    Returns:
        FrontendResult with either a program or the errors of the first
        failing stage
    """
    lexed = tokenize(source, filename)
    if lexed.has_errors():
        logger.debug("%s: lexing failed, parser not run", filename)
        return FrontendResult(source, filename, errors=list(lexed.errors), stage="lexer")

    parsed = parse(lexed.tokens, lexed.end, recover=recover)
    return FrontendResult(
        source,
        filename,
        program=parsed.program,
        tokens=lexed.tokens,
        errors=list(parsed.errors),
        stage="parser"
    )


def parse_file(filepath: str, recover: bool = False) -> FrontendResult:
    """
    Tokenize and parse a UTF-8 source file.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return parse_source(source, filepath, recover=recover)
