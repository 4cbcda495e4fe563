"""
miniC Lexer - turns source text into tokens

Scans the whole input in one pass. Whitespace and comments are skipped,
everything else must become a token. Bad characters are reported and
skipped so one run shows all of them.
"""

import re
import logging
from typing import List, Optional
from dataclasses import dataclass

from .tokens import (
    Token, TokenType, Span, KEYWORDS, OPERATORS, PUNCTUATION,
    INT_MIN, INT_MAX, UINT_MAX, MAX_LITERAL_DIGITS
)
from .errors import (
    LexerError, UnexpectedChar, create_invalid_character_error,
    create_unterminated_comment_error, create_literal_range_error
)

logger = logging.getLogger(__name__)


@dataclass
class TokenizeResult:
    """Outcome of tokenizing a source text. Exactly one side is populated."""
    tokens: Optional[List[Token]]
    errors: List[LexerError]
    end: int  # Offset of the end-of-input marker

    def has_errors(self) -> bool:
        """Check if tokenizing failed."""
        return len(self.errors) > 0


class Lexer:
    """
    miniC lexical analyzer.

    At each position the alternatives are tried in a fixed order: words
    (keywords, type names, identifiers), unsigned literals, signed
    literals, punctuation, then operators.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string (already decoded)
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""
        self.identifier_pattern = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
        self.unsigned_pattern = re.compile(r'([0-9]+)[uU]')
        # The sign belongs to the literal, so `a-1` is `a` followed by `-1`.
        self.signed_pattern = re.compile(r'[+-]?[0-9]+')

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens, without an end-of-input token. Check
            ``has_errors()`` before using it.
        """
        self.pos = 0
        self.tokens.clear()
        self.errors.clear()

        while self.pos < len(self.source):
            try:
                self._skip_whitespace_and_comments()

                if self.pos >= len(self.source):
                    break

                self.tokens.append(self._next_token())

            except UnexpectedChar as e:
                self.errors.append(e)
                # Skip the offending character and keep scanning
                self._advance()
            except LexerError as e:
                # Position is already past the bad input
                self.errors.append(e)

        logger.debug("%s: %d tokens, %d errors", self.filename, len(self.tokens), len(self.errors))
        return self.tokens

    def _next_token(self) -> Token:
        """Get the next token from the source."""
        start_pos = self.pos
        current_char = self.source[self.pos]

        # Keywords, type names and identifiers
        match = self.identifier_pattern.match(self.source, self.pos)
        if match:
            lexeme = match.group(0)
            self.pos = match.end()
            token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
            value = lexeme if token_type == TokenType.IDENTIFIER else None
            return Token(token_type, lexeme, value, Span(start_pos, self.pos))

        # Unsigned literals need the suffix directly after the digits
        match = self.unsigned_pattern.match(self.source, self.pos)
        if match:
            self.pos = match.end()
            return self._make_literal(TokenType.UINT_NUM, match.group(0), match.group(1), start_pos)

        match = self.signed_pattern.match(self.source, self.pos)
        if match:
            self.pos = match.end()
            return self._make_literal(TokenType.INT_NUM, match.group(0), match.group(0), start_pos)

        if current_char in PUNCTUATION:
            self._advance()
            return Token(PUNCTUATION[current_char], current_char, None, Span(start_pos, self.pos))

        # Operators (multi-character first)
        for op_len in [2, 1]:
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                self.pos += op_len
                return Token(OPERATORS[potential_op], potential_op, None, Span(start_pos, self.pos))

        raise create_invalid_character_error(current_char, start_pos)

    def _make_literal(self, token_type: TokenType, lexeme: str, digits: str, start_pos: int) -> Token:
        """Build a literal token, checking it fits in 32 bits."""
        span = Span(start_pos, self.pos)

        # Only short digit runs are converted; int() refuses very long ones
        value = None
        if len(digits.lstrip("+-").lstrip("0")) <= MAX_LITERAL_DIGITS:
            value = int(digits)

        if token_type == TokenType.UINT_NUM:
            if value is None or value > UINT_MAX:
                raise create_literal_range_error(lexeme, span, "Unsigned", 0, UINT_MAX)
        elif value is None or not INT_MIN <= value <= INT_MAX:
            raise create_literal_range_error(lexeme, span, "Signed", INT_MIN, INT_MAX)

        return Token(token_type, lexeme, value, span)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and comments."""
        while self.pos < len(self.source):
            if self.source[self.pos].isspace():
                self._advance()
                continue

            # Line comments run to the end of the line or of the input
            if self.source.startswith('//', self.pos):
                newline = self.source.find('\n', self.pos)
                self.pos = len(self.source) if newline == -1 else newline + 1
                continue

            if self.source.startswith('/*', self.pos):
                close = self.source.find('*/', self.pos + 2)
                if close == -1:
                    start_pos = self.pos
                    self.pos = len(self.source)
                    raise create_unterminated_comment_error(start_pos)
                self.pos = close + 2
                continue

            break

    def _advance(self):
        """Advance position by one character."""
        if self.pos < len(self.source):
            self.pos += 1

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0


def tokenize(source: str, filename: str = "<string>") -> TokenizeResult:
    """
    Tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for logging

    Returns:
        TokenizeResult holding either the tokens or every lexical error
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        return TokenizeResult(None, list(lexer.errors), len(source))

    return TokenizeResult(list(tokens), [], len(source))


def tokenize_file(filepath: str) -> TokenizeResult:
    """
    Tokenize a UTF-8 source file.

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize(source, filepath)
