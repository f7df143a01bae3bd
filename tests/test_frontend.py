"""
Test suite for the Kolang front-end entry points.

Tests cover:
- parse_string / parse_file results and raise_for_errors
- FrontendConfig validation
- DiagnosticSink and Diagnostic rendering
- Parser input handling (generators, foreign items, shared sinks)
- Independent parses running concurrently
"""

import os
import sys
import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor

import pytest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import kolang
from kolang import (
    parse_string, parse_file, tokenize_string, FrontendConfig, DEFAULT_CONFIG,
    Diagnostic, DiagnosticSink, Severity, Lexer, Parser, TokenType, SourceLocation,
    LexErrorKind, ParseErrorKind, LexerError, ParseError, KolangError, dump,
)
from kolang.parser import parse_tokens


PROGRAM = """
// Sum of the first n squares
fn squares(n: int): int {
    let total: int = 0;
    for i = 1 to n {
        total = total + i * i;
    }
    return total;
}
"""


class TestParseResult(unittest.TestCase):
    """parse_string and the result object."""

    def test_clean_parse(self):
        result = parse_string(PROGRAM)

        self.assertTrue(result.ok)
        self.assertFalse(result.has_errors())
        self.assertEqual(len(result.diagnostics), 0)
        self.assertEqual(result.program.functions[0].name, "squares")
        self.assertEqual(result.tokens[-1].type, TokenType.EOF)
        self.assertEqual(result.tokens[0].lexeme, "fn")
        result.raise_for_errors()

    def test_tokens_match_lexer(self):
        result = parse_string(PROGRAM)
        self.assertEqual(result.tokens, tokenize_string(PROGRAM))

    def test_raise_for_syntax_errors(self):
        result = parse_string("fn f() { let x: int = ; return 1 }")
        self.assertFalse(result.ok)

        with self.assertRaises(ParseError) as ctx:
            result.raise_for_errors()
        error = ctx.exception
        self.assertEqual(error.diagnostic.kind, ParseErrorKind.EXPECTED_EXPRESSION)
        self.assertEqual(len(error.diagnostics), 2)
        self.assertEqual(error.location.column, 23)
        self.assertIn("(1 more diagnostic)", str(error))

    def test_raise_for_lexical_errors(self):
        result = parse_string("fn f() { return 'ab'; }")
        with self.assertRaises(LexerError) as ctx:
            result.raise_for_errors()
        self.assertIsInstance(ctx.exception, KolangError)
        self.assertIsInstance(ctx.exception.diagnostic.kind, LexErrorKind)

    def test_filename_in_locations(self):
        result = parse_string("fn f() { $ }", filename="demo.ko")
        self.assertEqual(str(result.diagnostics[0].location), "demo.ko:1:10")

    def test_parse_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "squares.ko")
            with open(path, "w", encoding="utf-8") as f:
                f.write(PROGRAM)

            result = parse_file(path)

        self.assertTrue(result.ok)
        self.assertEqual(result.program.functions[0].span.start.filename, path)

    def test_parse_missing_file(self):
        with self.assertRaises(OSError):
            parse_file(os.path.join(tempfile.gettempdir(), "does-not-exist.ko"))

    def test_comments_kept_in_tokens_only(self):
        config = FrontendConfig(keep_comments=True)
        result = parse_string(PROGRAM, config=config)

        self.assertTrue(result.ok)
        self.assertEqual(result.tokens[0].type, TokenType.LINE_COMMENT)
        self.assertEqual(dump(result.program), dump(parse_string(PROGRAM).program))

    def test_version(self):
        self.assertEqual(kolang.__version__, "0.1.0")


class TestFrontendConfig(unittest.TestCase):
    """Settings validation."""

    def test_defaults(self):
        self.assertEqual(DEFAULT_CONFIG.max_nesting_depth, 64)
        self.assertFalse(DEFAULT_CONFIG.keep_comments)

    def test_replace(self):
        config = DEFAULT_CONFIG.replace(max_nesting_depth=8)
        self.assertEqual(config.max_nesting_depth, 8)
        self.assertEqual(DEFAULT_CONFIG.max_nesting_depth, 64)

    def test_frozen(self):
        with self.assertRaises(AttributeError):
            DEFAULT_CONFIG.max_nesting_depth = 1

    def test_invalid_depth(self):
        with self.assertRaises(ValueError):
            FrontendConfig(max_nesting_depth=0)
        with self.assertRaises(TypeError):
            FrontendConfig(max_nesting_depth="64")
        with self.assertRaises(TypeError):
            FrontendConfig(max_nesting_depth=True)


class TestDiagnostics(unittest.TestCase):
    """Diagnostic records and the sink."""

    def _diagnostic(self, offset: int, severity=Severity.ERROR) -> Diagnostic:
        location = SourceLocation("<string>", 1, offset + 1, offset)
        return Diagnostic(ParseErrorKind.UNEXPECTED_TOKEN, "msg", location, severity, "P001")

    def test_rendering(self):
        result = parse_string("fn f() { let x: int = ; }")
        text = str(result.diagnostics[0])
        self.assertTrue(text.startswith(
            "error[P003]: expected expression, found ';'\n  --> <string>:1:23\n"
        ))
        self.assertIn("  help: ", text)

    def test_suggestions_rendered(self):
        result = parse_string("fn f() { return a | b; }")
        self.assertIn("    - Use 'or' for logical or\n", str(result.diagnostics[0]))

    def test_sink_collects_in_order(self):
        sink = DiagnosticSink()
        sink.report(self._diagnostic(5))
        sink.report(self._diagnostic(2, Severity.WARNING))
        sink.extend([self._diagnostic(9)])

        self.assertEqual(len(sink), 3)
        self.assertTrue(sink.has_errors())
        self.assertEqual([d.location.offset for d in sink], [5, 2, 9])
        self.assertEqual([d.location.offset for d in sink.sorted()], [2, 5, 9])
        self.assertEqual(len(sink.errors), 2)
        self.assertEqual(len(sink.warnings), 1)
        self.assertEqual(sink[1].severity, Severity.WARNING)
        self.assertFalse(sink[1].is_error)
        self.assertTrue(sink[0].is_error)

        sink.clear()
        self.assertEqual(len(sink), 0)
        self.assertFalse(sink.has_errors())

    def test_warnings_are_not_errors(self):
        sink = DiagnosticSink()
        sink.report(self._diagnostic(0, Severity.WARNING))
        self.assertFalse(sink.has_errors())

    def test_sink_rejects_other_objects(self):
        with self.assertRaises(TypeError):
            DiagnosticSink().report("oops")

    def test_lexer_and_parser_share_sink(self):
        sink = DiagnosticSink()
        lexer = Lexer("fn f() { $ } fn (", diagnostics=sink)
        Parser(lexer).parse()

        self.assertEqual([d.kind for d in sink],
                         [LexErrorKind.INVALID_CHARACTER, ParseErrorKind.MISSING_TOKEN])


class TestParserInput(unittest.TestCase):
    """Token sources other than a Lexer."""

    def test_token_list(self):
        tokens = tokenize_string("fn f() {}")
        program = parse_tokens(tokens)
        self.assertEqual(dump(program), "Program[Fn(f(), Block[])]")

    def test_generator_without_eof(self):
        tokens = (t for t in tokenize_string("fn f() {}") if t.type != TokenType.EOF)
        parser = Parser(tokens)
        program = parser.parse()
        self.assertFalse(parser.has_errors())
        self.assertEqual(program.function("f").name, "f")

    def test_truncated_stream_reports_end_of_input(self):
        tokens = [t for t in tokenize_string("fn f() { return 1; }") if t.type != TokenType.EOF][:-1]
        parser = Parser(tokens)
        parser.parse()
        self.assertEqual(parser.errors[0].message, "expected '}', found end of input")

    def test_rejects_non_tokens(self):
        with self.assertRaises(TypeError):
            Parser(["fn", "f"]).parse()

    def test_private_sink(self):
        parser = Parser(tokenize_string("fn f( {}"))
        parser.parse()
        self.assertEqual(list(parser.diagnostics), parser.errors)
        self.assertTrue(parser.has_errors())

    def test_lexer_rejects_bytes(self):
        with self.assertRaises(TypeError):
            Lexer(b"fn f() {}")


class TestConcurrency:
    """Independent source units share no state."""

    @pytest.mark.parametrize("workers", [2, 8])
    def test_parallel_parses_are_identical(self, workers):
        sources = [PROGRAM, "fn f() { let x: int = ; }", "fn g(a: int[]) return a[0];"] * 10
        expected = [(dump(parse_string(s).program), len(parse_string(s).diagnostics))
                    for s in sources]

        def run(source):
            result = parse_string(source)
            return dump(result.program), len(result.diagnostics)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            assert list(pool.map(run, sources)) == expected


if __name__ == "__main__":
    unittest.main()
