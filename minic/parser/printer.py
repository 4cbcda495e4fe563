"""
Structured text rendering of miniC syntax trees.

One node per line, children indented below their parent:

    Program
      FunctionDef main -> int
        ReturnStatement
          IntNum 0
"""

from typing import List, Tuple

from .ast_nodes import (
    ASTNode, ASTVisitor, Program, FunctionDef, Parameter, Variable,
    Assignment, IfStatement, ReturnStatement, CompoundStatement, RelExp,
    BinaryOp, FunctionCall, Identifier, IntNum, UintNum
)


class AstPrinter(ASTVisitor):
    """Visitor that collects an indented line for every node."""

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self.lines: List[str] = []

    def visit(self, node: ASTNode):
        # Explicit stack: long operator chains nest deeper than the recursion limit
        pending: List[Tuple[ASTNode, int]] = [(node, 0)]
        while pending:
            current, depth = pending.pop()
            self.lines.append(self.indent * depth + self.label(current))
            for child in reversed(current.children()):
                pending.append((child, depth + 1))

    def label(self, node: ASTNode) -> str:
        """One-line description of a node, without its children."""
        if isinstance(node, Program):
            return "Program"
        if isinstance(node, FunctionDef):
            return f"FunctionDef {node.name} -> {node.return_type.value}"
        if isinstance(node, (Parameter, Variable)):
            return f"{type(node).__name__} {node.type.value} {node.name}"
        if isinstance(node, Assignment):
            return f"Assignment {node.name}"
        if isinstance(node, IfStatement):
            return "IfStatement" if node.else_branch is None else "IfStatement with else"
        if isinstance(node, ReturnStatement):
            return "ReturnStatement"
        if isinstance(node, CompoundStatement):
            return "CompoundStatement"
        if isinstance(node, (RelExp, BinaryOp)):
            return f"{type(node).__name__} {node.operator.value}"
        if isinstance(node, FunctionCall):
            return f"FunctionCall {node.name}"
        if isinstance(node, Identifier):
            return f"Identifier {node.name}"
        if isinstance(node, UintNum):
            return f"UintNum {node.value}u"
        if isinstance(node, IntNum):
            return f"IntNum {node.value}"
        raise TypeError(f"cannot print {type(node).__name__}")


def format_program(program: Program, indent: str = "  ") -> str:
    """Render a whole tree as indented text."""
    printer = AstPrinter(indent)
    program.accept(printer)
    return "\n".join(printer.lines)
