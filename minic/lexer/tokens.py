"""
Token definitions for the miniC lexer.

This module defines all token types supported by miniC:
- Keywords (if, else, return) and type names (int, unsigned)
- Identifiers
- Literals (signed and unsigned 32-bit integers)
- Punctuation and operators
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types in miniC.

    Organized by category for clarity.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input (never produced by the lexer)

    # ========================================================================
    # Literals
    # ========================================================================
    INT_NUM = auto()                # 42, -7, +3
    UINT_NUM = auto()               # 42u, 7U

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # main, x_1

    IF = auto()                     # if
    ELSE = auto()                   # else
    RETURN = auto()                 # return

    # Type names
    INT = auto()                    # int
    UNSIGNED = auto()               # unsigned

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    ASSIGN = auto()                 # =

    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # ========================================================================
    # Punctuation
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    SEMICOLON = auto()              # ;


@dataclass(frozen=True)
class Span:
    """
    Half-open range of character offsets into the source text.
    """
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the miniC language.

    Contains the token type, lexeme (raw text), semantic value
    and source span.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # int for literals, str for identifiers
    span: Span

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return "end of input"
        return self.lexeme

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.value!r}, {self.span})"


# Reserved words. A word only becomes a keyword when the whole identifier
# matches, so `ifx` stays an identifier.
KEYWORDS = {
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
    "int": TokenType.INT,
    "unsigned": TokenType.UNSIGNED,
}

# Two-character operators must be tried before their one-character prefixes.
OPERATORS = {
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
}

PUNCTUATION = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
}

# How each token kind is named in "expected ..." lists.
TOKEN_DESCRIPTIONS = {
    TokenType.EOF: "end of input",
    TokenType.INT_NUM: "literal",
    TokenType.UINT_NUM: "literal",
    TokenType.IDENTIFIER: "identifier",
    **{token_type: text for text, token_type in KEYWORDS.items()},
    **{token_type: text for text, token_type in OPERATORS.items()},
    **{token_type: text for text, token_type in PUNCTUATION.items()},
}

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
UINT_MAX = 2 ** 32 - 1

# Digits in the longest literal that can still be in range
MAX_LITERAL_DIGITS = len(str(UINT_MAX))


def describe(token_type: TokenType) -> str:
    """Return the human-readable name of a token kind."""
    return TOKEN_DESCRIPTIONS[token_type]
