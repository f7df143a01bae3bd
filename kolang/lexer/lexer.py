"""
Kolang Lexer - turns source text into positioned tokens.

The lexer is pull-based: next_token() scans exactly one token, and iterating
a Lexer yields tokens up to and including EOF. Lexical errors never stop the
scan. Each one is reported to the diagnostic sink, the offending text is
wrapped in an INVALID token, and scanning resumes after it.
"""

import logging
import re
from typing import Iterator, List, Optional

from ..config import DEFAULT_CONFIG, FrontendConfig
from ..diagnostics import Diagnostic, DiagnosticSink
from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, OPERATORS, MAX_OPERATOR_LENGTH,
    ESCAPE_SEQUENCES
)
from .errors import (
    LexerError, create_invalid_character_error, create_unterminated_string_error,
    create_unterminated_char_error, create_empty_char_error, create_char_too_long_error,
    create_invalid_escape_error, create_malformed_number_error,
    create_unterminated_block_comment_error
)

logger = logging.getLogger(__name__)


# Patterns are compiled once and only ever read.
IDENTIFIER_PATTERN = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
BINARY_PATTERN = re.compile(r'0[bB]([01]*)')
OCTAL_PATTERN = re.compile(r'0[oO]([0-7]*)')
HEX_PATTERN = re.compile(r'0[xX]([0-9a-fA-F]*)')
DECIMAL_PATTERN = re.compile(r'[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?')
LEADING_DOT_FLOAT_PATTERN = re.compile(r'\.[0-9]+(?:[eE][+-]?[0-9]+)?')

WHITESPACE = frozenset(" \t\n\r\f\v")

# (prefix characters, pattern, token type, base, digit description)
_PREFIXED_INTEGERS = (
    ("bB", BINARY_PATTERN, TokenType.LITERAL_INT_BIN, 2, "binary digits (0-1)"),
    ("oO", OCTAL_PATTERN, TokenType.LITERAL_INT_OCT, 8, "octal digits (0-7)"),
    ("xX", HEX_PATTERN, TokenType.LITERAL_INT_HEX, 16, "hexadecimal digits (0-9, a-f)"),
)


class Lexer:
    """
    Kolang lexical analyzer.

    A Lexer scans its source once. Call tokenize() for the whole token list,
    or pull tokens one at a time with next_token() / iteration.
    """

    def __init__(self, source: str, filename: str = "<string>",
                 diagnostics: Optional[DiagnosticSink] = None,
                 config: Optional[FrontendConfig] = None):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
            diagnostics: Sink shared with the parser; a private one is created if omitted
            config: Front-end settings (comment retention)
        """
        if not isinstance(source, str):
            raise TypeError(f"source must be str, got {type(source).__name__}")
        self.source = source
        self.filename = filename
        self.config = config or DEFAULT_CONFIG
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticSink()
        self.pos = 0
        self.byte_pos = 0
        self.line = 1
        self.column = 1
        self.errors: List[Diagnostic] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the rest of the source.

        Returns:
            List of tokens ending with exactly one EOF token
        """
        tokens = list(self)
        logger.debug("tokenized %s: %d tokens, %d lexical errors",
                     self.filename, len(tokens), len(self.errors))
        return tokens

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """Scan and return the next token. Returns EOF repeatedly at end of input."""
        while True:
            self._skip_whitespace()

            if self.pos >= len(self.source):
                location = self._location()
                return Token(TokenType.EOF, "", None, location, location)

            if self.source.startswith("//", self.pos):
                comment = self._tokenize_line_comment()
                if self.config.keep_comments:
                    return comment
                continue

            if self.source.startswith("/*", self.pos):
                comment = self._tokenize_block_comment()
                if comment is not None and self.config.keep_comments:
                    return comment
                continue

            return self._next_token()

    def _next_token(self) -> Token:
        """Scan one non-comment token starting at the current position."""
        start_pos = self.pos
        start = self._location()
        current_char = self.source[self.pos]

        # Identifiers and keywords
        if current_char.isascii() and (current_char.isalpha() or current_char == "_"):
            return self._tokenize_identifier_or_keyword(start_pos, start)

        # Numbers (integers and floats)
        if current_char.isdigit() and current_char.isascii():
            return self._tokenize_number(start_pos, start)
        if current_char == "." and self._peek().isdigit() and self._peek().isascii():
            return self._tokenize_leading_dot_float(start_pos, start)

        # Character and string literals
        if current_char == "'":
            return self._tokenize_character(start_pos, start)
        if current_char == '"':
            return self._tokenize_string(start_pos, start)

        # Operators and punctuation (longest first)
        for op_len in range(MAX_OPERATOR_LENGTH, 0, -1):
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                self._advance_by(op_len)
                return self._make_token(OPERATORS[potential_op], start_pos, start)

        # Anything else is skipped and reported
        self._report(create_invalid_character_error(current_char, start))
        self._advance()
        return self._make_token(TokenType.INVALID, start_pos, start)

    def _tokenize_identifier_or_keyword(self, start_pos: int, start: SourceLocation) -> Token:
        match = IDENTIFIER_PATTERN.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        token_type = KEYWORDS.get(lexeme, TokenType.IDEN)
        if token_type == TokenType.IDEN:
            value = lexeme
        elif token_type in (TokenType.KW_TRUE, TokenType.KW_FALSE):
            value = token_type == TokenType.KW_TRUE
        else:
            value = None
        return self._make_token(token_type, start_pos, start, value)

    def _tokenize_number(self, start_pos: int, start: SourceLocation) -> Token:
        """Tokenize integer or float literals."""
        if self.source[self.pos] == "0":
            prefix = self._peek()
            for prefix_chars, pattern, token_type, base, digits in _PREFIXED_INTEGERS:
                if prefix and prefix in prefix_chars:
                    return self._tokenize_prefixed_integer(
                        pattern, token_type, base, digits, start_pos, start
                    )

        match = DECIMAL_PATTERN.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        if match.group(1) or match.group(2):
            return self._make_token(TokenType.LITERAL_FLOAT, start_pos, start, float(lexeme))
        # No octal-style leading zero semantics: 007 is seven.
        return self._make_token(TokenType.LITERAL_INT_DEC, start_pos, start, int(lexeme, 10))

    def _tokenize_prefixed_integer(self, pattern, token_type: TokenType, base: int, digits: str,
                                   start_pos: int, start: SourceLocation) -> Token:
        match = pattern.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        if not match.group(1):
            self._report(create_malformed_number_error(
                lexeme, start, f"The prefix '{lexeme}' must be followed by {digits}."
            ))
            return self._make_token(TokenType.INVALID, start_pos, start)

        return self._make_token(token_type, start_pos, start, int(match.group(1), base))

    def _tokenize_leading_dot_float(self, start_pos: int, start: SourceLocation) -> Token:
        match = LEADING_DOT_FLOAT_PATTERN.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))
        return self._make_token(TokenType.LITERAL_FLOAT, start_pos, start, float(lexeme))

    def _tokenize_character(self, start_pos: int, start: SourceLocation) -> Token:
        """Tokenize a character literal: one character or escape between single quotes."""
        self._advance()  # Skip opening quote

        chars: List[str] = []
        failed = False

        while True:
            if self.pos >= len(self.source) or self.source[self.pos] in "\r\n":
                # Resynchronize at the end of the line
                self._report(create_unterminated_char_error(start))
                return self._make_token(TokenType.INVALID, start_pos, start)

            current_char = self.source[self.pos]
            if current_char == "'":
                self._advance()
                break

            if current_char == "\\":
                escaped = self._tokenize_escape()
                if escaped is None:
                    failed = True
                    if self.pos >= len(self.source) or self.source[self.pos] in "\r\n":
                        continue
                    escaped = self.source[self.pos]
                    self._advance()
                chars.append(escaped)
            else:
                chars.append(current_char)
                self._advance()

        if not chars:
            self._report(create_empty_char_error(start))
            failed = True
        elif len(chars) > 1:
            self._report(create_char_too_long_error(self.source[start_pos + 1:self.pos - 1], start))
            failed = True

        if failed:
            return self._make_token(TokenType.INVALID, start_pos, start)
        return self._make_token(TokenType.LITERAL_CHAR, start_pos, start, chars[0])

    def _tokenize_string(self, start_pos: int, start: SourceLocation) -> Token:
        """Tokenize a string literal. Literal newlines are part of the string."""
        self._advance()  # Skip opening quote

        value_parts: List[str] = []
        failed = False

        while self.pos < len(self.source) and self.source[self.pos] != '"':
            if self.source[self.pos] == "\\":
                escaped = self._tokenize_escape()
                if escaped is None:
                    failed = True
                    if self.pos < len(self.source):
                        value_parts.append(self.source[self.pos])
                        self._advance()
                    continue
                value_parts.append(escaped)
            else:
                value_parts.append(self.source[self.pos])
                self._advance()

        if self.pos >= len(self.source):
            # Nothing can close it any more: the rest of the input is consumed
            self._report(create_unterminated_string_error(start))
            return self._make_token(TokenType.INVALID, start_pos, start)

        self._advance()  # Skip closing quote

        if failed:
            return self._make_token(TokenType.INVALID, start_pos, start)
        return self._make_token(TokenType.LITERAL_STR, start_pos, start, "".join(value_parts))

    def _tokenize_escape(self) -> Optional[str]:
        """
        Decode the escape sequence at the current backslash.

        Consumes the backslash and, when valid, the escape character. Returns
        None after reporting an invalid escape; the character after the
        backslash is then left for the caller.
        """
        location = self._location()
        self._advance()  # Skip backslash

        escape_char = self.source[self.pos] if self.pos < len(self.source) else ""
        if escape_char in ESCAPE_SEQUENCES:
            self._advance()
            return ESCAPE_SEQUENCES[escape_char]

        if escape_char:
            self._report(create_invalid_escape_error(escape_char, location))
        return None

    def _tokenize_line_comment(self) -> Token:
        start_pos = self.pos
        start = self._location()
        while self.pos < len(self.source) and self.source[self.pos] not in "\r\n":
            self._advance()
        return self._make_token(TokenType.LINE_COMMENT, start_pos, start)

    def _tokenize_block_comment(self) -> Optional[Token]:
        """Skip a block comment. Comments do not nest: the first */ closes it."""
        start_pos = self.pos
        start = self._location()

        close = self.source.find("*/", self.pos + 2)
        if close == -1:
            self._advance_by(len(self.source) - self.pos)
            self._report(create_unterminated_block_comment_error(self._location(), start))
            return None

        self._advance_by(close + 2 - self.pos)
        return self._make_token(TokenType.BLOCK_COMMENT, start_pos, start)

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self._advance()

    def _make_token(self, token_type: TokenType, start_pos: int, start: SourceLocation,
                    value=None) -> Token:
        lexeme = self.source[start_pos:self.pos]
        return Token(token_type, lexeme, value, start, self._location())

    def _report(self, diagnostic: Diagnostic):
        self.errors.append(diagnostic)
        self.diagnostics.report(diagnostic)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos, self.byte_pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            char = self.source[self.pos]
            if char == "\n":
                self.line += 1
                self.column = 1
            elif char == "\r":
                # \r\n is a single line break, counted at the \n
                if self._peek() != "\n":
                    self.line += 1
                    self.column = 1
            else:
                self.column += 1
            self.pos += 1
            self.byte_pos += 1 if char < "\x80" else len(char.encode("utf-8", "surrogatepass"))

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return ""

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0


def tokenize_string(source: str, filename: str = "<string>",
                    diagnostics: Optional[DiagnosticSink] = None,
                    config: Optional[FrontendConfig] = None,
                    strict: bool = False) -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting
        diagnostics: Sink receiving lexical errors
        config: Front-end settings
        strict: Raise LexerError if any lexical error was reported

    Returns:
        List of tokens
    """
    lexer = Lexer(source, filename, diagnostics, config)
    tokens = lexer.tokenize()

    if strict and lexer.has_errors():
        raise LexerError(lexer.errors[0], lexer.errors[1:])

    return tokens


def tokenize_file(filepath: str, diagnostics: Optional[DiagnosticSink] = None,
                  config: Optional[FrontendConfig] = None,
                  strict: bool = False) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, str(filepath), diagnostics, config, strict)
