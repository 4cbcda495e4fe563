"""
Abstract Syntax Tree node definitions for miniC.

Nodes are immutable value objects: two trees compare equal when they have
the same shape and contents. They hold no tokens or source spans. Every
node supports the visitor pattern and exposes its direct children.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any, Tuple
from dataclasses import dataclass
from enum import Enum


class Type(Enum):
    """Declared type of a function, parameter or variable."""
    INT = "int"
    UNSIGNED = "unsigned"


class Arop(Enum):
    """Arithmetic operators."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class Relop(Enum):
    """Relational operators."""
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    EQ = "=="
    NE = "!="


class ASTVisitor(ABC):
    """Abstract visitor interface for traversing AST nodes."""

    @abstractmethod
    def visit(self, node: 'ASTNode') -> Any:
        """Visit a generic AST node."""
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass


def _freeze(node: ASTNode, field: str):
    # Sequences are stored as tuples so a finished tree cannot be mutated.
    object.__setattr__(node, field, tuple(getattr(node, field)))


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""


@dataclass(frozen=True)
class Literal(Expression):
    """Integer literal. Signed and unsigned literals are distinct node types."""
    value: int

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class IntNum(Literal):
    """Signed 32-bit literal: 5, -5."""


@dataclass(frozen=True)
class UintNum(Literal):
    """Unsigned 32-bit literal: 5u, 5U."""


@dataclass(frozen=True)
class Identifier(Expression):
    """Identifier expression."""
    name: str

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class FunctionCall(Expression):
    """Function call with at most one argument."""
    name: str
    arg: Optional[Expression] = None

    def children(self) -> List[ASTNode]:
        return [self.arg] if self.arg is not None else []


@dataclass(frozen=True)
class BinaryOp(Expression):
    """Binary arithmetic expression."""
    left: Expression
    operator: Arop
    right: Expression

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


@dataclass(frozen=True)
class RelExp(ASTNode):
    """A single comparison, used as the condition of an if statement."""
    left: Expression
    operator: Relop
    right: Expression

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""


@dataclass(frozen=True)
class Assignment(Statement):
    """name = value;"""
    name: str
    value: Expression

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass(frozen=True)
class IfStatement(Statement):
    """If statement with optional else clause."""
    condition: RelExp
    then_branch: Statement
    else_branch: Optional[Statement] = None

    def children(self) -> List[ASTNode]:
        children = [self.condition, self.then_branch]
        if self.else_branch is not None:
            children.append(self.else_branch)
        return children


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """Return statement. The value is required."""
    value: Expression

    def children(self) -> List[ASTNode]:
        return [self.value]


@dataclass(frozen=True)
class CompoundStatement(Statement):
    """Brace-delimited statement list."""
    statements: Tuple[Statement, ...] = ()

    def __post_init__(self):
        _freeze(self, "statements")

    def children(self) -> List[ASTNode]:
        return list(self.statements)


# ============================================================================
# Declarations
# ============================================================================

@dataclass(frozen=True)
class Parameter(ASTNode):
    """Function parameter."""
    type: Type
    name: str

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class Variable(ASTNode):
    """Local variable declaration at the top of a function body."""
    type: Type
    name: str

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True)
class FunctionDef(ASTNode):
    """Function definition."""
    return_type: Type
    name: str
    parameter: Optional[Parameter] = None
    variables: Tuple[Variable, ...] = ()
    statements: Tuple[Statement, ...] = ()

    def __post_init__(self):
        _freeze(self, "variables")
        _freeze(self, "statements")

    def children(self) -> List[ASTNode]:
        children: List[ASTNode] = []
        if self.parameter is not None:
            children.append(self.parameter)
        return children + list(self.variables) + list(self.statements)


@dataclass(frozen=True)
class Program(ASTNode):
    """Root AST node representing a complete program."""
    functions: Tuple[FunctionDef, ...]

    def __post_init__(self):
        _freeze(self, "functions")
        if not self.functions:
            raise ValueError("a program needs at least one function")

    def children(self) -> List[ASTNode]:
        return list(self.functions)
