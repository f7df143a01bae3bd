"""
Kolang Front End Package

Lexer, AST model and parser for the Kolang language: a small, statically
typed, imperative language with functions, fixed-size arrays and
C-like control flow.

Architecture:
    kolang/
    ├── lexer/           # Tokenization and lexical diagnostics
    ├── parser/          # Syntax analysis and AST generation
    ├── diagnostics.py   # Diagnostic records and the shared sink
    └── config.py        # Front-end settings

Malformed input never raises: every lexical and syntax error of a source
unit is collected in one pass and returned with the (partial) tree.
"""

import logging
from typing import List, Optional

__version__ = "0.1.0"

from .config import FrontendConfig, DEFAULT_CONFIG
from .diagnostics import Diagnostic, DiagnosticSink, Severity
from .lexer import (
    Lexer, Token, TokenType, SourceLocation, LexErrorKind, LexerError, KolangError,
    tokenize_string
)
from .parser import Parser, Program, ParseErrorKind, ParseError, dump

logging.getLogger(__name__).addHandler(logging.NullHandler())


class ParseResult:
    """
    Outcome of parsing one source unit.

    Attributes:
        program: The parsed tree; partial when there were errors
        diagnostics: Every lexical and syntax diagnostic, in the order found
        tokens: The tokens the lexer produced, ending with EOF
    """

    def __init__(self, program: Program, diagnostics: DiagnosticSink, tokens: List[Token]):
        self.program = program
        self.diagnostics = diagnostics
        self.tokens = tokens

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_errors()

    def has_errors(self) -> bool:
        return self.diagnostics.has_errors()

    def raise_for_errors(self):
        """
        Raise if any error was reported.

        Raises:
            LexerError: If the first error is lexical
            ParseError: If the first error is syntactic

        The exception carries every error, the first one as ``diagnostic``.
        """
        errors = self.diagnostics.errors
        if not errors:
            return
        first, rest = errors[0], errors[1:]
        if isinstance(first.kind, LexErrorKind):
            raise LexerError(first, rest)
        raise ParseError(first, rest)

    def __repr__(self) -> str:
        return (f"ParseResult({len(self.program.functions)} functions, "
                f"{len(self.diagnostics)} diagnostics)")


class _RecordingLexer:
    """Token iterable that keeps every token it hands to the parser."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.tokens: List[Token] = []

    def __iter__(self):
        for token in self.lexer:
            self.tokens.append(token)
            yield token


def parse_string(source: str, filename: str = "<string>",
                 config: Optional[FrontendConfig] = None) -> ParseResult:
    """
    Parse a source string.

    Args:
        source: Source code string
        filename: Filename for diagnostics
        config: Front-end settings

    Returns:
        ParseResult with the program, diagnostics and tokens
    """
    diagnostics = DiagnosticSink()
    lexer = Lexer(source, filename, diagnostics, config)
    recorder = _RecordingLexer(lexer)
    program = Parser(recorder, diagnostics, config).parse()

    return ParseResult(program, diagnostics, recorder.tokens)


def parse_file(filepath: str, config: Optional[FrontendConfig] = None) -> ParseResult:
    """
    Parse a source file read as UTF-8.

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return parse_string(source, str(filepath), config)


__all__ = [
    "__version__",
    "FrontendConfig", "DEFAULT_CONFIG",
    "Diagnostic", "DiagnosticSink", "Severity",
    "Lexer", "Token", "TokenType", "SourceLocation",
    "Parser", "Program", "ParseResult", "dump",
    "LexErrorKind", "ParseErrorKind",
    "KolangError", "LexerError", "ParseError",
    "tokenize_string", "parse_string", "parse_file",
]
