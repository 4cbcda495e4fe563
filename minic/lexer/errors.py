"""
Error handling for the miniC lexer.

Also defines the error vocabulary shared with the parser: every diagnostic
carries a reason (unexpected input, unclosed delimiter, custom message), the
span it points at, the set of things that would have been accepted there
and what was actually found.
"""

from typing import Optional, List, Iterable
from dataclasses import dataclass
from enum import Enum

from .tokens import Span, KEYWORDS


class ErrorReason(Enum):
    """Why a stage rejected its input."""
    UNEXPECTED = "unexpected"
    UNCLOSED = "unclosed"
    CUSTOM = "custom"


@dataclass
class Diagnostic:
    """Base record for diagnostics (errors, warnings, info)."""
    message: str
    span: Span
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None


class FrontendError(Exception):
    """
    Base class for lexer and parser errors.

    Errors are plain data: they are raised inside a stage to unwind to its
    recovery point, and handed back to the caller inside a result object.
    ``found`` is None when the offending input is the end of the source.
    """

    def __init__(
        self,
        message: str,
        span: Span,
        expected: Iterable[str] = (),
        found: Optional[str] = None,
        reason: ErrorReason = ErrorReason.UNEXPECTED,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.reason = reason
        self.span = span
        self.expected = frozenset(expected)
        self.found = found
        self.diagnostic = Diagnostic(
            message=message,
            span=span,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}({self.reason.value}, {self.span}, "
                f"expected={sorted(self.expected)}, found={self.found!r})")


class LexerError(FrontendError):
    """
    Error raised when the lexer cannot turn the input into tokens.
    """


class UnexpectedChar(LexerError):
    """A character that starts no token."""

    def __init__(self, char: str, offset: int, help_text: Optional[str] = None):
        super().__init__(
            message=f"{ERROR_CODES['L001']}: '{char}'",
            span=Span(offset, offset + 1),
            found=char,
            code="L001",
            help_text=help_text,
        )
        self.char = char


class ErrorRecovery:
    """
    Helpers for producing hints alongside errors.
    """

    @staticmethod
    def suggest_keyword_corrections(invalid_word: str, candidates: Optional[Iterable[str]] = None) -> List[str]:
        """Suggest corrections for misspelled keywords using edit distance."""
        if candidates is None:
            candidates = KEYWORDS.keys()

        suggestions = []
        for keyword in candidates:
            distance = ErrorRecovery._edit_distance(invalid_word, keyword)
            if 0 < distance <= 2:
                suggestions.append(keyword)

        return sorted(suggestions, key=lambda k: ErrorRecovery._edit_distance(invalid_word, k))[:3]

    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery._edit_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated block comment",
    "L003": "Integer literal out of range",
}


# Helper functions for creating common errors
def create_invalid_character_error(char: str, offset: int) -> UnexpectedChar:
    """Create an error for a character that starts no token."""
    if char == "!":
        help_text = "'!' is only valid as part of '!='."
    elif char.isprintable():
        help_text = f"The character '{char}' is not valid in miniC source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return UnexpectedChar(char, offset, help_text=help_text)


def create_unterminated_comment_error(offset: int) -> LexerError:
    """Create an error for a block comment that never ends."""
    return LexerError(
        message=ERROR_CODES["L002"],
        span=Span(offset, offset + 2),
        reason=ErrorReason.CUSTOM,
        code="L002",
        help_text="Block comments must be closed with '*/'.",
        suggestions=["Add a closing '*/'"]
    )


def create_literal_range_error(lexeme: str, span: Span, kind: str, low: int, high: int) -> LexerError:
    """Create an error for an integer literal that does not fit its type."""
    return LexerError(
        message=f"{ERROR_CODES['L003']}: '{lexeme}'",
        span=span,
        reason=ErrorReason.CUSTOM,
        code="L003",
        help_text=f"{kind} literals must lie between {low} and {high}."
    )
