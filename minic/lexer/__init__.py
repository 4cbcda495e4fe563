"""
miniC Lexer Package

Implements the tokenizer for the miniC language: keywords and type names
with whole-word matching, identifiers, signed and unsigned 32-bit integer
literals, punctuation and operators, with `//` and `/* */` comments
skipped.

Errors are collected rather than raised: `tokenize()` returns either the
full token list or every lexical error found in the input.
"""

from .tokens import Token, TokenType, Span
from .lexer import Lexer, TokenizeResult, tokenize, tokenize_file
from .errors import ErrorReason, FrontendError, LexerError, UnexpectedChar

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "Span",
    "TokenizeResult",
    "tokenize",
    "tokenize_file",
    "ErrorReason",
    "FrontendError",
    "LexerError",
    "UnexpectedChar",
]
