"""
miniC Recursive Descent Parser

One method per grammar rule, choosing between alternatives on a single
token of lookahead. Arithmetic expressions use top-down operator
precedence: `*` and `/` bind tighter than `+` and `-`, and chains of the
same level fold to the left.

The parser remembers every token kind it tested at the current position,
so an error can report everything that would have been accepted there.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Sequence, Set

from ..lexer.tokens import Token, TokenType, Span
from .ast_nodes import (
    Program, FunctionDef, Parameter, Variable, Statement, Assignment,
    IfStatement, ReturnStatement, CompoundStatement, RelExp, Expression,
    BinaryOp, FunctionCall, Identifier, IntNum, UintNum, Type, Arop, Relop
)
from .errors import (
    ParseError, create_unexpected_token_error, create_unclosed_delimiter_error,
    create_nesting_error, SyntaxErrorRecovery
)

logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    """Operator precedence levels."""
    TERM = 1            # +, -
    FACTOR = 2          # *, /
    PRIMARY = 3         # literals, identifiers, calls, parentheses


TYPE_NAMES = {
    TokenType.INT: Type.INT,
    TokenType.UNSIGNED: Type.UNSIGNED,
}

ARITHMETIC_OPERATORS = {
    TokenType.PLUS: Arop.ADD,
    TokenType.MINUS: Arop.SUB,
    TokenType.MULTIPLY: Arop.MUL,
    TokenType.DIVIDE: Arop.DIV,
}

RELATIONAL_OPERATORS = {
    TokenType.LESS_THAN: Relop.LT,
    TokenType.GREATER_THAN: Relop.GT,
    TokenType.LESS_EQUAL: Relop.LE,
    TokenType.GREATER_EQUAL: Relop.GE,
    TokenType.EQUAL: Relop.EQ,
    TokenType.NOT_EQUAL: Relop.NE,
}


@dataclass
class ParseResult:
    """Outcome of parsing. Either a complete program or only errors."""
    program: Optional[Program]
    errors: List[ParseError]

    def has_errors(self) -> bool:
        """Check if parsing failed."""
        return len(self.errors) > 0


class Parser:
    """
    miniC parser.

    Without recovery the first mismatch ends the parse with exactly one
    error. With ``recover=True`` a broken statement is skipped up to the
    next statement boundary and parsing continues, so later errors are
    reported as well; a tree is still only produced for error-free input.
    """

    def __init__(self, tokens: Sequence[Token], end: int, recover: bool = False):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the lexer, without an end-of-input token
            end: Offset of the end of the source text
            recover: Resynchronize at statement boundaries after an error
        """
        self.tokens = list(tokens)
        self.eof = Token(TokenType.EOF, "", None, Span(end, end + 1))
        self.recover = recover
        self.current = 0
        self.errors: List[ParseError] = []

        # Token kinds tested at position _expected_at
        self._expected: Set[TokenType] = set()
        self._expected_at = 0

        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize operator precedence and parsing function tables."""

        # Prefix parsing functions (tokens that can start an atom)
        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            TokenType.IDENTIFIER: self._parse_identifier_or_call,
            TokenType.INT_NUM: self._parse_integer_literal,
            TokenType.UINT_NUM: self._parse_integer_literal,
            TokenType.LEFT_PAREN: self._parse_grouping,
        }

        # Statement parsers, chosen by the first token
        self.statement_parsers: Dict[TokenType, Callable[[], Statement]] = {
            TokenType.IDENTIFIER: self._parse_assignment,
            TokenType.IF: self._parse_if_statement,
            TokenType.RETURN: self._parse_return_statement,
            TokenType.LEFT_BRACE: self._parse_compound_statement,
        }

        self.precedences: Dict[TokenType, Precedence] = {
            TokenType.PLUS: Precedence.TERM,
            TokenType.MINUS: Precedence.TERM,
            TokenType.MULTIPLY: Precedence.FACTOR,
            TokenType.DIVIDE: Precedence.FACTOR,
        }

    def parse(self) -> Optional[Program]:
        """
        Parse the token stream into an AST.

        Returns:
            Program AST node, or None when errors were recorded in
            ``self.errors``
        """
        self.current = 0
        self.errors.clear()
        self._expected = set()
        self._expected_at = 0

        functions = []
        try:
            functions.append(self._parse_function())
            while self._check_any(TYPE_NAMES):
                functions.append(self._parse_function())

            if not self._check(TokenType.EOF):
                raise self._error()

        except ParseError as e:
            self.errors.append(e)
        except RecursionError:
            # Every nesting level costs a few Python frames
            self.errors.append(create_nesting_error(self._peek()))

        if self.errors:
            logger.debug("parse failed with %d errors", len(self.errors))
            return None

        logger.debug("parsed %d functions", len(functions))
        return Program(functions)

    def _parse_function(self) -> FunctionDef:
        """Parse a function definition."""
        return_type = self._parse_type()
        name = self._consume(TokenType.IDENTIFIER).lexeme

        open_paren = self._consume(TokenType.LEFT_PAREN)
        parameter = None
        if self._check_any(TYPE_NAMES):
            parameter = self._parse_parameter()
        self._consume_closing(open_paren, TokenType.RIGHT_PAREN)

        open_brace = self._consume(TokenType.LEFT_BRACE)

        # Declarations come before any statement
        variables = []
        while self._check_any(TYPE_NAMES):
            variables.append(self._parse_variable())

        statements = self._parse_statement_list()
        self._consume_closing(open_brace, TokenType.RIGHT_BRACE)

        return FunctionDef(
            return_type=return_type,
            name=name,
            parameter=parameter,
            variables=variables,
            statements=statements
        )

    def _parse_parameter(self) -> Parameter:
        """Parse the single function parameter."""
        kind = self._parse_type()
        name = self._consume(TokenType.IDENTIFIER).lexeme
        return Parameter(kind, name)

    def _parse_variable(self) -> Variable:
        """Parse a local variable declaration."""
        kind = self._parse_type()
        name = self._consume(TokenType.IDENTIFIER).lexeme
        self._consume(TokenType.SEMICOLON)
        return Variable(kind, name)

    def _parse_type(self) -> Type:
        """Parse a type name."""
        for token_type, kind in TYPE_NAMES.items():
            if self._match(token_type):
                return kind
        raise self._error()

    # Statements

    def _parse_statement_list(self) -> List[Statement]:
        """Parse statements up to (not including) the closing brace."""
        statements = []

        while self._check_any(self.statement_parsers):
            statement_start = self.current
            try:
                statements.append(self._parse_statement())
            except ParseError as e:
                if not self.recover:
                    raise
                self.errors.append(e)
                self.current = SyntaxErrorRecovery.synchronize_to_statement_boundary(
                    self.tokens, self.current, statement_start
                )
                logger.debug("recovered from %s, resuming at token %d", e.diagnostic.code, self.current)

        return statements

    def _parse_statement(self) -> Statement:
        """Parse a statement."""
        statement_parser = self.statement_parsers.get(self._peek().type)
        if statement_parser is None:
            self._check_any(self.statement_parsers)
            raise self._error()
        return statement_parser()

    def _parse_assignment(self) -> Assignment:
        """Parse an assignment statement."""
        name = self._consume(TokenType.IDENTIFIER).lexeme
        self._consume(TokenType.ASSIGN)
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON)
        return Assignment(name, value)

    def _parse_if_statement(self) -> IfStatement:
        """Parse an if statement. An else binds to the nearest if."""
        self._consume(TokenType.IF)

        open_paren = self._consume(TokenType.LEFT_PAREN)
        condition = self._parse_rel_exp()
        self._consume_closing(open_paren, TokenType.RIGHT_PAREN)

        then_branch = self._parse_statement()

        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._parse_statement()

        return IfStatement(condition, then_branch, else_branch)

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse a return statement."""
        self._consume(TokenType.RETURN)
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON)
        return ReturnStatement(value)

    def _parse_compound_statement(self) -> CompoundStatement:
        """Parse a block statement."""
        open_brace = self._consume(TokenType.LEFT_BRACE)
        statements = self._parse_statement_list()
        self._consume_closing(open_brace, TokenType.RIGHT_BRACE)
        return CompoundStatement(statements)

    # Expressions

    def _parse_rel_exp(self) -> RelExp:
        """Parse a single comparison; comparisons do not chain."""
        left = self._parse_expression()

        for token_type, operator in RELATIONAL_OPERATORS.items():
            if self._match(token_type):
                break
        else:
            raise self._error()

        right = self._parse_expression()
        return RelExp(left, operator, right)

    def _parse_expression(self) -> Expression:
        """Parse an arithmetic expression."""
        return self._parse_precedence(Precedence.TERM)

    def _parse_precedence(self, precedence: Precedence) -> Expression:
        """Parse expression with given minimum precedence."""
        left = self._parse_atom()

        while True:
            operator_token = self._match_operator(precedence)
            if operator_token is None:
                break
            # Left associative: the right operand only takes tighter operators
            right = self._parse_precedence(Precedence(self.precedences[operator_token.type] + 1))
            left = BinaryOp(left, ARITHMETIC_OPERATORS[operator_token.type], right)

        return left

    def _match_operator(self, precedence: Precedence) -> Optional[Token]:
        """Consume an arithmetic operator binding at least as tight as ``precedence``."""
        for token_type, operator_precedence in self.precedences.items():
            if operator_precedence >= precedence and self._check(token_type):
                return self._advance()
        return None

    def _parse_atom(self) -> Expression:
        """Parse a literal, identifier, call or parenthesized expression."""
        prefix_parser = self.prefix_parsers.get(self._peek().type)
        if prefix_parser is None:
            self._check_any(self.prefix_parsers)
            raise self._error()
        return prefix_parser()

    def _parse_identifier_or_call(self) -> Expression:
        """An identifier directly followed by '(' is always a call."""
        name = self._consume(TokenType.IDENTIFIER).lexeme

        if not self._check(TokenType.LEFT_PAREN):
            return Identifier(name)

        open_paren = self._advance()
        arg = None
        if self._check_any(self.prefix_parsers):
            arg = self._parse_expression()
        self._consume_closing(open_paren, TokenType.RIGHT_PAREN)

        return FunctionCall(name, arg)

    def _parse_integer_literal(self) -> Expression:
        """Parse integer literal."""
        token = self._advance()
        if token.type == TokenType.UINT_NUM:
            return UintNum(token.value)
        return IntNum(token.value)

    def _parse_grouping(self) -> Expression:
        """Parse parenthesized expression."""
        open_paren = self._consume(TokenType.LEFT_PAREN)
        expr = self._parse_expression()
        self._consume_closing(open_paren, TokenType.RIGHT_PAREN)
        return expr

    # Utility methods

    def _note_expected(self, token_type: TokenType):
        """Record that ``token_type`` would be accepted at the current position."""
        if self._expected_at != self.current:
            self._expected = set()
            self._expected_at = self.current
        self._expected.add(token_type)

    def _expected_here(self) -> Set[TokenType]:
        if self._expected_at != self.current:
            return set()
        return set(self._expected)

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        self._note_expected(token_type)
        return self._peek().type == token_type

    def _check_any(self, token_types) -> bool:
        """Check against several types, recording all of them as expected."""
        matches = [self._check(token_type) for token_type in token_types]
        return any(matches)

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._peek()
        if not self._is_at_end():
            self.current += 1
        return token

    def _is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self.current >= len(self.tokens)

    def _peek(self) -> Token:
        """Return current token without consuming."""
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return self.eof

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise self._error()

    def _consume_closing(self, opening: Token, token_type: TokenType) -> Token:
        """Consume the closing partner of ``opening`` or report it unclosed."""
        if self._check(token_type):
            return self._advance()
        raise create_unclosed_delimiter_error(opening, token_type, self._peek(), self._expected_here())

    def _error(self) -> ParseError:
        """Build an error for the current token from everything tested here."""
        return create_unexpected_token_error(self._expected_here(), self._peek())


def parse(tokens: Sequence[Token], end: int, recover: bool = False) -> ParseResult:
    """
    Parse a token sequence.

    Args:
        tokens: Tokens from the lexer
        end: Offset of the end of the source; the end-of-input marker
            spans ``end..end+1``
        recover: Resynchronize at statement boundaries to report more errors

    Returns:
        ParseResult holding either the program or the errors
    """
    parser = Parser(tokens, end, recover=recover)
    program = parser.parse()
    return ParseResult(program, list(parser.errors))
