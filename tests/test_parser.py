"""
Tests for the miniC parser.

Tests cover:
- Expression precedence and associativity
- Calls, identifiers and literals
- Statements and declarations
- Whole programs
- Immutability and structural equality of the tree
"""

import unittest
import sys
import os
from dataclasses import FrozenInstanceError

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from minic.lexer import tokenize
from minic.parser import (
    Parser, parse, Program, FunctionDef, Parameter, Variable, Assignment,
    IfStatement, ReturnStatement, CompoundStatement, RelExp, BinaryOp,
    FunctionCall, Identifier, IntNum, UintNum, Type, Arop, Relop
)


def parse_code(code: str):
    """Tokenize and parse, returning the ParseResult."""
    lexed = tokenize(code)
    assert not lexed.has_errors(), lexed.errors
    return parse(lexed.tokens, lexed.end)


class TestExpressionParsing(unittest.TestCase):
    """Test cases for arithmetic expressions."""

    def _parse_expr(self, expr: str):
        """Parse an expression through a return statement."""
        result = parse_code(f"int main() {{ return {expr}; }}")
        self.assertFalse(result.has_errors(), f"Unexpected errors: {result.errors}")
        statement = result.program.functions[0].statements[0]
        self.assertIsInstance(statement, ReturnStatement)
        return statement.value

    def test_multiplication_binds_tighter(self):
        expr = self._parse_expr("1 + 2 * 3")

        self.assertEqual(
            expr,
            BinaryOp(IntNum(1), Arop.ADD, BinaryOp(IntNum(2), Arop.MUL, IntNum(3)))
        )

    def test_subtraction_is_left_associative(self):
        expr = self._parse_expr("10 - 3 - 2")

        self.assertEqual(
            expr,
            BinaryOp(BinaryOp(IntNum(10), Arop.SUB, IntNum(3)), Arop.SUB, IntNum(2))
        )

    def test_division_chain_is_left_associative(self):
        expr = self._parse_expr("a / b * c")

        self.assertEqual(
            expr,
            BinaryOp(
                BinaryOp(Identifier("a"), Arop.DIV, Identifier("b")),
                Arop.MUL,
                Identifier("c")
            )
        )

    def test_mixed_levels(self):
        expr = self._parse_expr("a * b + c * d - e")

        product_ab = BinaryOp(Identifier("a"), Arop.MUL, Identifier("b"))
        product_cd = BinaryOp(Identifier("c"), Arop.MUL, Identifier("d"))
        self.assertEqual(
            expr,
            BinaryOp(BinaryOp(product_ab, Arop.ADD, product_cd), Arop.SUB, Identifier("e"))
        )

    def test_parentheses_group(self):
        expr = self._parse_expr("(1 + 2) * 3")

        self.assertEqual(
            expr,
            BinaryOp(BinaryOp(IntNum(1), Arop.ADD, IntNum(2)), Arop.MUL, IntNum(3))
        )

    def test_nested_parentheses(self):
        self.assertEqual(self._parse_expr("((x))"), Identifier("x"))

    def test_call_without_argument(self):
        self.assertEqual(self._parse_expr("f()"), FunctionCall("f", None))

    def test_call_with_argument(self):
        self.assertEqual(self._parse_expr("f(x)"), FunctionCall("f", Identifier("x")))

    def test_call_with_expression_argument(self):
        expr = self._parse_expr("f(g(1) + 2)")

        self.assertEqual(
            expr,
            FunctionCall("f", BinaryOp(FunctionCall("g", IntNum(1)), Arop.ADD, IntNum(2)))
        )

    def test_identifier_without_parentheses(self):
        self.assertEqual(self._parse_expr("f"), Identifier("f"))

    def test_literal_kinds(self):
        self.assertEqual(self._parse_expr("5u"), UintNum(5))
        self.assertEqual(self._parse_expr("5U"), UintNum(5))
        self.assertEqual(self._parse_expr("5"), IntNum(5))
        self.assertEqual(self._parse_expr("-5"), IntNum(-5))

    def test_signed_and_unsigned_literals_differ(self):
        self.assertNotEqual(IntNum(5), UintNum(5))

    def test_negative_literal_operand(self):
        expr = self._parse_expr("x * -1")

        self.assertEqual(expr, BinaryOp(Identifier("x"), Arop.MUL, IntNum(-1)))


class TestStatementParsing(unittest.TestCase):
    """Test cases for statements and declarations."""

    def _parse_body(self, body: str) -> FunctionDef:
        result = parse_code(f"int main() {{ {body} }}")
        self.assertFalse(result.has_errors(), f"Unexpected errors: {result.errors}")
        return result.program.functions[0]

    def test_assignment(self):
        function = self._parse_body("x = y * 2;")

        self.assertEqual(
            function.statements,
            (Assignment("x", BinaryOp(Identifier("y"), Arop.MUL, IntNum(2))),)
        )

    def test_keyword_prefixed_identifier_is_assigned(self):
        function = self._parse_body("ifx = 1;")

        self.assertEqual(function.statements, (Assignment("ifx", IntNum(1)),))

    def test_variables_precede_statements(self):
        function = self._parse_body("int a; unsigned b; a = 1; return a;")

        self.assertEqual(function.variables, (Variable(Type.INT, "a"), Variable(Type.UNSIGNED, "b")))
        self.assertEqual(len(function.statements), 2)

    def test_every_relational_operator(self):
        operators = {
            "<": Relop.LT, ">": Relop.GT, "<=": Relop.LE,
            ">=": Relop.GE, "==": Relop.EQ, "!=": Relop.NE,
        }
        for text, operator in operators.items():
            with self.subTest(operator=text):
                function = self._parse_body(f"if (a {text} b) return 1;")
                condition = function.statements[0].condition
                self.assertEqual(condition, RelExp(Identifier("a"), operator, Identifier("b")))

    def test_condition_sides_are_expressions(self):
        function = self._parse_body("if (a + 1 <= f(b)) return 1;")

        self.assertEqual(
            function.statements[0].condition,
            RelExp(BinaryOp(Identifier("a"), Arop.ADD, IntNum(1)), Relop.LE,
                   FunctionCall("f", Identifier("b")))
        )

    def test_if_without_else(self):
        statement = self._parse_body("if (x > 0) x = 0;").statements[0]

        self.assertIsInstance(statement, IfStatement)
        self.assertEqual(statement.then_branch, Assignment("x", IntNum(0)))
        self.assertIsNone(statement.else_branch)

    def test_else_binds_to_nearest_if(self):
        statement = self._parse_body("if (a > 0) if (b > 0) return 1; else return 2;").statements[0]

        self.assertIsNone(statement.else_branch)
        inner = statement.then_branch
        self.assertIsInstance(inner, IfStatement)
        self.assertEqual(inner.else_branch, ReturnStatement(IntNum(2)))

    def test_compound_statement(self):
        function = self._parse_body("{ x = 1; { } return x; }")

        self.assertEqual(
            function.statements,
            (CompoundStatement([
                Assignment("x", IntNum(1)),
                CompoundStatement([]),
                ReturnStatement(Identifier("x")),
            ]),)
        )

    def test_if_with_compound_branches(self):
        statement = self._parse_body("if (x == 0) { return 1; } else { x = x - 1; }").statements[0]

        self.assertEqual(statement.then_branch, CompoundStatement([ReturnStatement(IntNum(1))]))
        self.assertEqual(
            statement.else_branch,
            CompoundStatement([Assignment("x", BinaryOp(Identifier("x"), Arop.SUB, IntNum(1)))])
        )

    def test_empty_body(self):
        function = self._parse_body("")

        self.assertEqual(function.variables, ())
        self.assertEqual(function.statements, ())


class TestProgramParsing(unittest.TestCase):
    """Test cases for whole programs."""

    def test_minimal_program(self):
        result = parse_code("int main() { return 0; }")

        self.assertFalse(result.has_errors())
        self.assertEqual(
            result.program,
            Program([
                FunctionDef(
                    return_type=Type.INT,
                    name="main",
                    parameter=None,
                    variables=[],
                    statements=[ReturnStatement(IntNum(0))]
                )
            ])
        )

    def test_function_with_parameter_and_condition(self):
        result = parse_code("unsigned f(int x) { if (x > 0) return x; else return 0; }")

        self.assertFalse(result.has_errors())
        self.assertEqual(
            result.program,
            Program([
                FunctionDef(
                    return_type=Type.UNSIGNED,
                    name="f",
                    parameter=Parameter(Type.INT, "x"),
                    statements=[
                        IfStatement(
                            RelExp(Identifier("x"), Relop.GT, IntNum(0)),
                            ReturnStatement(Identifier("x")),
                            ReturnStatement(IntNum(0))
                        )
                    ]
                )
            ])
        )

    def test_multiple_functions_keep_order(self):
        code = """
        int square(int n) { return n * n; }
        unsigned zero() { return 0u; }
        int main() { int r; r = square(3); return r; }
        """
        result = parse_code(code)

        self.assertFalse(result.has_errors())
        self.assertEqual([f.name for f in result.program.functions], ["square", "zero", "main"])
        self.assertEqual(result.program.functions[1].return_type, Type.UNSIGNED)

    def test_parser_class_directly(self):
        lexed = tokenize("int main() { return 0; }")
        parser = Parser(lexed.tokens, lexed.end)

        program = parser.parse()

        self.assertIsInstance(program, Program)
        self.assertEqual(parser.errors, [])

    def test_parser_can_be_rerun(self):
        lexed = tokenize("int main() { return 0; }")
        parser = Parser(lexed.tokens, lexed.end)

        self.assertEqual(parser.parse(), parser.parse())

    def test_same_source_gives_equal_trees(self):
        code = "int main() { int x; x = 1 + 2 * 3; if (x != 7) return 1; return 0; }"

        self.assertEqual(parse_code(code).program, parse_code(code).program)


class TestASTNodes(unittest.TestCase):
    """Test cases for the syntax tree types themselves."""

    def test_program_needs_a_function(self):
        with self.assertRaises(ValueError):
            Program([])

    def test_nodes_are_immutable(self):
        node = Identifier("x")
        with self.assertRaises(FrozenInstanceError):
            node.name = "y"

    def test_sequences_are_stored_as_tuples(self):
        function = FunctionDef(Type.INT, "main", statements=[ReturnStatement(IntNum(0))])

        self.assertIsInstance(function.statements, tuple)
        self.assertIsInstance(function.variables, tuple)

    def test_nodes_are_hashable(self):
        self.assertEqual(len({IntNum(1), IntNum(1), UintNum(1)}), 2)

    def test_children(self):
        parameter = Parameter(Type.INT, "x")
        variable = Variable(Type.INT, "y")
        statement = ReturnStatement(Identifier("x"))
        function = FunctionDef(Type.INT, "f", parameter, [variable], [statement])

        self.assertEqual(function.children(), [parameter, variable, statement])
        self.assertEqual(statement.children(), [Identifier("x")])
        self.assertEqual(FunctionCall("f").children(), [])
        self.assertEqual(IntNum(3).children(), [])

    def test_if_children_include_else_only_when_present(self):
        condition = RelExp(Identifier("x"), Relop.LT, IntNum(1))
        then_branch = ReturnStatement(IntNum(1))

        self.assertEqual(len(IfStatement(condition, then_branch).children()), 2)
        self.assertEqual(len(IfStatement(condition, then_branch, then_branch).children()), 3)


if __name__ == '__main__':
    unittest.main()
