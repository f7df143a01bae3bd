"""
Error handling for the Kolang lexer.

Defines the lexical error taxonomy, the helpers that build diagnostics for
each kind, and the LexerError exception drivers can use to surface them.
"""

from enum import Enum
from typing import List, Optional, Sequence

from ..diagnostics import Diagnostic, Severity
from .tokens import SourceLocation


class LexErrorKind(Enum):
    """Stable kinds of lexical error."""
    INVALID_CHARACTER = "L001"
    UNTERMINATED_STRING = "L002"
    MALFORMED_NUMBER = "L003"
    UNTERMINATED_CHAR = "L004"
    EMPTY_CHAR = "L005"
    INVALID_ESCAPE = "L006"
    CHAR_TOO_LONG = "L007"
    UNTERMINATED_BLOCK_COMMENT = "L008"

    @property
    def code(self) -> str:
        return self.value


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L003": "Malformed numeric literal",
    "L004": "Unterminated character literal",
    "L005": "Empty character literal",
    "L006": "Invalid escape sequence",
    "L007": "Character literal holds more than one character",
    "L008": "Unterminated block comment",
}


class KolangError(Exception):
    """Base class for front-end exceptions that carry a diagnostic."""

    def __init__(self, diagnostic: Diagnostic, others: Sequence[Diagnostic] = ()):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic
        self.diagnostics: List[Diagnostic] = [diagnostic, *others]

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    def __str__(self) -> str:
        text = str(self.diagnostic)
        extra = len(self.diagnostics) - 1
        if extra:
            text += f"  ({extra} more diagnostic{'s' if extra > 1 else ''})\n"
        return text


class LexerError(KolangError):
    """
    Exception raised on request when lexing produced errors.

    The lexer itself never raises for malformed input; it reports
    diagnostics and keeps scanning.
    """


class ErrorRecovery:
    """Hints attached to lexical diagnostics."""

    # Characters people commonly type from other C-like languages
    _CHARACTER_HINTS = {
        "!": ["Use 'not' for logical negation", "Use '!=' for inequality"],
        "#": ["Use '//' or '/* */' for comments"],
        "^": ["Kolang has no exclusive-or operator"],
        "?": ["Kolang has no conditional operator; use an if statement"],
        "@": ["Kolang has no attributes or decorators"],
        "$": ["Identifiers may only contain letters, digits and '_'"],
        "`": ["Use '\"' for string literals"],
    }

    @staticmethod
    def suggest_for_character(char: str) -> List[str]:
        """Suggest alternatives for a character that starts no token."""
        return list(ErrorRecovery._CHARACTER_HINTS.get(char, []))


# Helper functions for creating common lexical diagnostics

def _diagnostic(kind: LexErrorKind, message: str, location: SourceLocation,
                help_text: Optional[str] = None,
                suggestions: Sequence[str] = ()) -> Diagnostic:
    return Diagnostic(
        kind=kind,
        message=message,
        location=location,
        severity=Severity.ERROR,
        code=kind.code,
        help_text=help_text,
        suggestions=tuple(suggestions),
    )


def create_invalid_character_error(char: str, location: SourceLocation) -> Diagnostic:
    """Create an error for a character that starts no token."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in Kolang source code."
        shown = char
    else:
        help_text = f"Non-printable character (U+{ord(char):04X}) is not allowed."
        shown = f"\\u{ord(char):04x}"

    return _diagnostic(
        LexErrorKind.INVALID_CHARACTER,
        f"invalid character '{shown}'",
        location,
        help_text,
        ErrorRecovery.suggest_for_character(char),
    )


def create_unterminated_string_error(location: SourceLocation) -> Diagnostic:
    """Create an error for a string literal that reaches end of input."""
    return _diagnostic(
        LexErrorKind.UNTERMINATED_STRING,
        "unterminated string literal",
        location,
        "String literals must be closed with a matching '\"' before end of input.",
        ["Add a closing '\"'", "Escape embedded quotes as '\\\"'"],
    )


def create_unterminated_char_error(location: SourceLocation) -> Diagnostic:
    """Create an error for a character literal missing its closing quote."""
    return _diagnostic(
        LexErrorKind.UNTERMINATED_CHAR,
        "unterminated character literal",
        location,
        "Character literals must be closed with \"'\" on the same line.",
        ["Add a closing \"'\""],
    )


def create_empty_char_error(location: SourceLocation) -> Diagnostic:
    return _diagnostic(
        LexErrorKind.EMPTY_CHAR,
        "empty character literal",
        location,
        "A character literal holds exactly one character or escape sequence.",
        ["Use '\\0' for the null character"],
    )


def create_char_too_long_error(body: str, location: SourceLocation) -> Diagnostic:
    return _diagnostic(
        LexErrorKind.CHAR_TOO_LONG,
        f"character literal '{body}' holds more than one character",
        location,
        "A character literal holds exactly one character or escape sequence.",
        ["Use a string literal (\"...\") for text"],
    )


def create_invalid_escape_error(char: str, location: SourceLocation) -> Diagnostic:
    """Create an error for a backslash followed by an unsupported character."""
    shown = char if char else "end of input"
    return _diagnostic(
        LexErrorKind.INVALID_ESCAPE,
        f"invalid escape sequence '\\{shown}'",
        location,
        "Valid escapes are \\n \\t \\r \\0 \\\\ \\' and \\\".",
    )


def create_malformed_number_error(lexeme: str, location: SourceLocation, reason: str) -> Diagnostic:
    """Create an error for a malformed numeric literal."""
    return _diagnostic(
        LexErrorKind.MALFORMED_NUMBER,
        f"malformed numeric literal '{lexeme}'",
        location,
        reason,
    )


def create_unterminated_block_comment_error(location: SourceLocation,
                                            opened_at: SourceLocation) -> Diagnostic:
    """Create an error for a block comment still open at end of input."""
    return _diagnostic(
        LexErrorKind.UNTERMINATED_BLOCK_COMMENT,
        "unterminated block comment",
        location,
        f"The comment opened at {opened_at} was never closed with '*/'.",
    )
