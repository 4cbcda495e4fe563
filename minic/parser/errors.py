"""
Error handling for the miniC parser.

Parse errors share the lexer's error vocabulary: each records the span of
the offending token, the set of token kinds that would have been accepted
there and the token actually found (None at end of input).
"""

from typing import Iterable, List, Optional

from ..lexer.tokens import Token, TokenType, Span, KEYWORDS, describe
from ..lexer.errors import FrontendError, ErrorReason, ErrorRecovery


class ParseError(FrontendError):
    """
    Error raised when the parser meets a token the grammar does not allow.
    """

    def __init__(
        self,
        message: str,
        token: Token,
        expected_types: Iterable[TokenType] = (),
        reason: ErrorReason = ErrorReason.UNEXPECTED,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.expected_types = frozenset(expected_types)
        super().__init__(
            message=message,
            span=token.span,
            expected={describe(t) for t in self.expected_types},
            found=None if token.type == TokenType.EOF else token.lexeme,
            reason=reason,
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def at_end_of_input(self) -> bool:
        return self.token.type == TokenType.EOF


class UnexpectedToken(ParseError):
    """A token (or the end of input) the grammar does not allow here."""


class UnclosedDelimiter(ParseError):
    """
    A '(' or '{' whose closing partner never arrived.

    ``delimiter_span`` points at the opening delimiter, ``span`` at the
    token found where the closer was required.
    """

    def __init__(self, opening: Token, closing: TokenType, found: Token,
                 expected_types: Iterable[TokenType]):
        super().__init__(
            message=f"{PARSER_ERROR_CODES['P004']} {opening.lexeme}",
            token=found,
            expected_types=expected_types,
            reason=ErrorReason.UNCLOSED,
            code="P004",
            help_text=f"The '{opening.lexeme}' at {opening.span} was never closed.",
            suggestions=[f"Add a closing '{describe(closing)}'"]
        )
        self.delimiter = opening.lexeme
        self.delimiter_span: Span = opening.span
        self.closing = describe(closing)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    Lets the parser skip past a broken statement and carry on, so several
    syntax errors can be reported in one run.
    """

    # Parsing resumes in front of these
    STATEMENT_BOUNDARIES = {
        TokenType.RIGHT_BRACE,
        TokenType.IF,
        TokenType.RETURN,
    }

    @staticmethod
    def synchronize_to_statement_boundary(tokens: List[Token], error_pos: int,
                                          statement_start: int) -> int:
        """
        Skip to the next likely statement boundary.

        Scanning from the failing token, returns the position just past the
        next ';' or the position of the next '}', 'if' or 'return',
        whichever comes first. The result always lies after
        ``statement_start`` so the parser cannot loop on the same input.
        """
        pos = error_pos
        while pos < len(tokens):
            token_type = tokens[pos].type
            if token_type == TokenType.SEMICOLON:
                return pos + 1
            if token_type in SyntaxErrorRecovery.STATEMENT_BOUNDARIES and pos > statement_start:
                return pos
            pos += 1

        return len(tokens)

    @staticmethod
    def suggest_keywords(expected_types: Iterable[TokenType], found: Token) -> List[str]:
        """Suggest an expected keyword when the found identifier looks like a typo of one."""
        if found.type != TokenType.IDENTIFIER:
            return []

        candidates = [word for word, token_type in KEYWORDS.items() if token_type in expected_types]
        return [f"Did you mean '{keyword}'?"
                for keyword in ErrorRecovery.suggest_keyword_corrections(found.lexeme, candidates)]


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P004": "Unclosed delimiter",
    "P010": "Unexpected end of input",
    "P020": "Nesting too deep",
}


def describe_expected(expected: Iterable[str]) -> str:
    """Join an expected set for messages; empty means anything else."""
    names = sorted(expected)
    if not names:
        return "something else"
    return ", ".join(names)


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected_types: Iterable[TokenType], found: Token) -> UnexpectedToken:
    """Create an error for an unexpected token or end of input."""
    expected_types = frozenset(expected_types)
    expected_str = describe_expected(describe(t) for t in expected_types)

    if found.type == TokenType.EOF:
        return UnexpectedToken(
            message=f"{PARSER_ERROR_CODES['P010']}, expected {expected_str}",
            token=found,
            expected_types=expected_types,
            code="P010",
            help_text=f"The parser reached the end of the file while expecting {expected_str}.",
        )

    return UnexpectedToken(
        message=f"{PARSER_ERROR_CODES['P001']} in input, expected {expected_str}",
        token=found,
        expected_types=expected_types,
        code="P001",
        help_text=f"Found '{found.lexeme}' where {expected_str} was required.",
        suggestions=SyntaxErrorRecovery.suggest_keywords(expected_types, found)
    )


def create_unclosed_delimiter_error(opening: Token, closing: TokenType, found: Token,
                                    expected_types: Iterable[TokenType]) -> UnclosedDelimiter:
    """Create an error for a missing closing delimiter."""
    return UnclosedDelimiter(opening, closing, found, expected_types)


def create_nesting_error(found: Token) -> ParseError:
    """Create an error for input nested deeper than the parser can follow."""
    return ParseError(
        message=f"{PARSER_ERROR_CODES['P020']} at '{found}'",
        token=found,
        reason=ErrorReason.CUSTOM,
        code="P020",
        help_text="Split deeply nested expressions or blocks into smaller functions.",
    )
