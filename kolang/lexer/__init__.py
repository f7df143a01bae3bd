"""
Kolang Lexer Package

Implements the lexical analyzer (tokenizer) for the Kolang language.

Key Features:
- Integer literals in four bases, floats with exponents, chars and strings
- Maximal-munch operator recognition
- Read-only keyword and operator tables built once at import
- Error recovery: every lexical error is reported and scanning continues
- Source location tracking (line, column, offset) for every token
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import LexErrorKind, LexerError, KolangError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "OPERATORS",
    "LexErrorKind",
    "LexerError",
    "KolangError",
    "tokenize_string",
    "tokenize_file",
]
