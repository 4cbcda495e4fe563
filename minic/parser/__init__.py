"""
miniC Parser Package

Implements a recursive descent parser for the miniC language, producing
immutable Abstract Syntax Trees.

Key Features:
- One-token lookahead dispatch for statements and atoms
- Operator precedence parsing with left-associative folding
- Expected-token sets on every syntax error
- Optional resynchronization at statement boundaries
"""

from .ast_nodes import *
from .parser import Parser, ParseResult, parse
from .errors import ParseError, UnexpectedToken, UnclosedDelimiter
from .printer import AstPrinter, format_program

__all__ = [
    # Core parser
    "Parser", "ParseResult", "parse",

    # AST nodes
    "ASTNode", "ASTVisitor",
    "Program", "FunctionDef", "Parameter", "Variable",
    "Statement", "Assignment", "IfStatement", "ReturnStatement", "CompoundStatement",
    "RelExp", "Expression", "BinaryOp", "FunctionCall", "Identifier",
    "Literal", "IntNum", "UintNum",
    "Type", "Arop", "Relop",

    # Printing
    "AstPrinter", "format_program",

    # Error handling
    "ParseError", "UnexpectedToken", "UnclosedDelimiter",
]
