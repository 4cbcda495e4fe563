#!/usr/bin/env python3
"""
Main test runner for the miniC front end.

Runs a smoke test of the lexer/parser pipeline, then every test module
under tests/.
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_smoke_test() -> bool:
    """Parse one small program end to end."""
    try:
        from minic import parse_source
        from minic.parser import format_program

        print("✅ All front-end modules imported successfully")
    except ImportError as e:
        print(f"❌ Failed to import front-end modules: {e}")
        return False

    code = """
    int square(int n) { return n * n; }

    int main() {
        int r;
        r = square(3);
        if (r != 9) return 1;
        return 0;
    }
    """

    print("Testing simple pipeline...")
    result = parse_source(code, "<smoke>")
    if result.has_errors():
        print(f"  ❌ {len(result.errors)} {result.stage} error(s)")
        for error in result.errors:
            print(f"     {error.message}")
        return False

    print(f"  🔧 Generated {len(result.tokens)} tokens")
    print(f"  🌳 Generated AST with {len(result.program.functions)} functions")
    print()
    print(format_program(result.program))
    print()
    return True


def run_all_tests() -> bool:
    """Run the smoke test and the unit test suite."""

    print("🚀 miniC Front End Test Suite")
    print("=" * 60)

    if not run_smoke_test():
        return False

    suite = unittest.defaultTestLoader.discover(os.path.join(project_root, "tests"))
    result = unittest.TextTestRunner(verbosity=2).run(suite)

    print("=" * 60)
    if result.wasSuccessful():
        print("🎉 All tests PASSED!")
    else:
        print(f"❌ {len(result.failures)} failures, {len(result.errors)} errors")
    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
