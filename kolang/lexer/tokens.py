"""
Token definitions for the Kolang lexer.

This module defines every token kind Kolang source can produce:
- Keywords
- Operators and punctuation
- Literals (integers in four bases, floats, characters, strings)
- Identifiers
- Comment, error and end-of-input tokens

The lookup tables at the bottom are built once at import time and exposed
as read-only mappings.
"""

from enum import Enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional


class TokenType(Enum):
    """
    Enumeration of all token kinds in Kolang.

    Member values are the stable kind names used in diagnostics and dumps.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = "eof"                             # End of input
    INVALID = "invalid"                     # Text consumed by a lexical error
    LINE_COMMENT = "line_comment"           # // comment (only when comments are kept)
    BLOCK_COMMENT = "block_comment"         # /* comment */ (only when comments are kept)

    # ========================================================================
    # Literals
    # ========================================================================

    # Integer literals
    LITERAL_INT_DEC = "literal_int_dec"     # 123, 007
    LITERAL_INT_BIN = "literal_int_bin"     # 0b1101, 0B1
    LITERAL_INT_OCT = "literal_int_oct"     # 0o7231, 0O44
    LITERAL_INT_HEX = "literal_int_hex"     # 0xff, 0XA1

    # Floating-point literals
    LITERAL_FLOAT = "literal_float"         # 9.1, 2e3, .05

    # Character and string literals
    LITERAL_CHAR = "literal_char"           # 'a', '\0'
    LITERAL_STR = "literal_str"             # "Hello\tworld!"

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDEN = "iden"                           # variable or function name

    # Control flow keywords
    KW_FOR = "kw_for"
    KW_TO = "kw_to"
    KW_WHILE = "kw_while"
    KW_IF = "kw_if"
    KW_ELSE = "kw_else"
    KW_RETURN = "kw_return"

    # Boolean and logical keywords
    KW_TRUE = "kw_true"
    KW_FALSE = "kw_false"
    KW_OR = "kw_or"
    KW_AND = "kw_and"
    KW_NOT = "kw_not"

    # Declaration keywords
    KW_LET = "kw_let"
    KW_FN = "kw_fn"

    # Type keywords
    KW_INT = "kw_int"
    KW_CHAR = "kw_char"
    KW_BOOL = "kw_bool"
    KW_FLOAT = "kw_float"
    KW_STR = "kw_str"

    # ========================================================================
    # Operators
    # ========================================================================

    # Comparison operators
    LT = "lt"                               # <
    GT = "gt"                               # >
    LEQ = "leq"                             # <=
    GEQ = "geq"                             # >=
    EQ = "eq"                               # ==
    NEQ = "neq"                             # !=

    # Assignment
    ASSIGN = "assign"                       # =

    # Arithmetic operators
    PLUS = "plus"                           # +
    MINUS = "minus"                         # -
    ASTERISK = "asterisk"                   # *
    SLASH = "slash"                         # /
    PERCENT = "percent"                     # %

    # Bitwise operators (lexed, not part of any expression tier)
    PIPE = "pipe"                           # |
    AMP = "amp"                             # &
    TILDE = "tilde"                         # ~ (also unary bitwise not)

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LPAR = "lpar"                           # (
    RPAR = "rpar"                           # )
    LBRACKET = "lbracket"                   # [
    RBRACKET = "rbracket"                   # ]
    LBRACE = "lbrace"                       # {
    RBRACE = "rbrace"                       # }

    SEMICOLON = "semicolon"                 # ;
    COLON = "colon"                         # :
    COMMA = "comma"                         # ,
    PERIOD = "period"                       # .


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Lines and columns are 1-based. ``offset`` is the index of the character
    in the source string and ``byte_offset`` its position in the UTF-8
    encoding of that string. ``byte_offset`` is None for locations built
    outside the lexer.
    """
    filename: str
    line: int
    column: int
    offset: int
    byte_offset: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return (f"SourceLocation({self.filename!r}, {self.line}, {self.column}, "
                f"{self.offset}, {self.byte_offset})")


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Kolang language.

    Contains the token kind, lexeme (raw text), semantic value, and the
    start and end-exclusive source locations.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Decoded value (int for integer literals, etc.)
    location: SourceLocation        # Where the lexeme starts
    end: SourceLocation             # Just past the last character of the lexeme

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.value}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.value}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    def describe(self) -> str:
        """Human-readable form used in diagnostics ("found ...")."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.IDEN:
            return f"identifier '{self.lexeme}'"
        if self.is_keyword:
            return f"keyword '{self.lexeme}'"
        if self.is_literal:
            return f"literal {self.lexeme}"
        return f"'{self.lexeme}'"

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERAL_TYPES

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORD_TYPES

    @property
    def is_operator(self) -> bool:
        """Check if this token is an operator or punctuation."""
        return self.type in OPERATOR_TYPES

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDEN

    @property
    def is_comment(self) -> bool:
        return self.type in (TokenType.LINE_COMMENT, TokenType.BLOCK_COMMENT)


# Lookup tables for token recognition. Read-only views over dicts built once.

KEYWORDS = MappingProxyType({
    "for": TokenType.KW_FOR,
    "to": TokenType.KW_TO,
    "while": TokenType.KW_WHILE,
    "if": TokenType.KW_IF,
    "else": TokenType.KW_ELSE,
    "true": TokenType.KW_TRUE,
    "false": TokenType.KW_FALSE,
    "or": TokenType.KW_OR,
    "and": TokenType.KW_AND,
    "not": TokenType.KW_NOT,
    "let": TokenType.KW_LET,
    "fn": TokenType.KW_FN,
    "return": TokenType.KW_RETURN,
    "int": TokenType.KW_INT,
    "char": TokenType.KW_CHAR,
    "bool": TokenType.KW_BOOL,
    "float": TokenType.KW_FLOAT,
    "str": TokenType.KW_STR,
})

# Longest lexemes are tried first by the lexer.
OPERATORS = MappingProxyType({
    # Comparison
    "<=": TokenType.LEQ,
    ">=": TokenType.GEQ,
    "==": TokenType.EQ,
    "!=": TokenType.NEQ,
    "<": TokenType.LT,
    ">": TokenType.GT,

    # Assignment
    "=": TokenType.ASSIGN,

    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,

    # Bitwise
    "|": TokenType.PIPE,
    "&": TokenType.AMP,
    "~": TokenType.TILDE,

    # Punctuation
    "(": TokenType.LPAR,
    ")": TokenType.RPAR,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ".": TokenType.PERIOD,
})

MAX_OPERATOR_LENGTH = max(len(op) for op in OPERATORS)

# Escape sequences valid inside character and string literals
ESCAPE_SEQUENCES = MappingProxyType({
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
})

KEYWORD_TYPES = frozenset(KEYWORDS.values())
OPERATOR_TYPES = frozenset(OPERATORS.values())

INTEGER_TYPES = frozenset({
    TokenType.LITERAL_INT_DEC,
    TokenType.LITERAL_INT_BIN,
    TokenType.LITERAL_INT_OCT,
    TokenType.LITERAL_INT_HEX,
})

LITERAL_TYPES = INTEGER_TYPES | {
    TokenType.LITERAL_FLOAT,
    TokenType.LITERAL_CHAR,
    TokenType.LITERAL_STR,
    TokenType.KW_TRUE,
    TokenType.KW_FALSE,
}
