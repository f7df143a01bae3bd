"""
Error handling for the Kolang parser.

Provides the syntax error taxonomy, recovery boundary sets, and helpers that
build diagnostics with source location information and suggestions.
"""

from enum import Enum
from typing import List, Optional, Sequence

from ..diagnostics import Diagnostic, Severity
from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import KolangError


class ParseErrorKind(Enum):
    """Stable kinds of syntax error."""
    UNEXPECTED_TOKEN = "P001"
    MISSING_TOKEN = "P002"
    EXPECTED_EXPRESSION = "P003"
    INVALID_TYPE = "P004"
    INVALID_ASSIGNMENT_TARGET = "P005"
    DUPLICATE_PARAMETER = "P006"
    NESTING_TOO_DEEP = "P007"

    @property
    def code(self) -> str:
        return self.value


class ParseError(KolangError):
    """
    Exception raised on request when parsing produced errors.

    The parser reports into a DiagnosticSink and never raises for malformed
    input; drivers that prefer exceptions use ParseResult.raise_for_errors().
    """


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    Panic-mode recovery skips tokens until a statement boundary so that
    several independent errors can be collected in a single pass.
    """

    # Keywords that begin a statement; recovery stops in front of them
    STATEMENT_STARTS = frozenset({
        TokenType.KW_LET,
        TokenType.KW_IF,
        TokenType.KW_WHILE,
        TokenType.KW_FOR,
        TokenType.KW_RETURN,
    })

    # Tokens recovery never skips: the enclosing block or program loop owns them
    HARD_BOUNDARIES = frozenset({
        TokenType.RBRACE,
        TokenType.KW_FN,
        TokenType.EOF,
    })

    STATEMENT_BOUNDARIES = STATEMENT_STARTS | HARD_BOUNDARIES

    _TOKEN_SUGGESTIONS = {
        TokenType.SEMICOLON: ["Add a semicolon ';' to end the statement"],
        TokenType.RPAR: ["Add a closing parenthesis ')'"],
        TokenType.RBRACKET: ["Add a closing bracket ']'"],
        TokenType.RBRACE: ["Add a closing brace '}'"],
        TokenType.LPAR: ["Add '(' to start the parameter list"],
        TokenType.COLON: ["Add ':' followed by a type, e.g. 'x: int'"],
        TokenType.ASSIGN: ["Add an assignment operator '='"],
        TokenType.KW_TO: ["A for loop reads 'for i = lower to upper'"],
        TokenType.IDEN: ["Add a name"],
    }

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        return list(SyntaxErrorRecovery._TOKEN_SUGGESTIONS.get(expected, []))

    @staticmethod
    def suggest_operator_corrections(found: Token) -> List[str]:
        """Suggest corrections for operators Kolang lexes but does not parse."""
        corrections = {
            TokenType.PIPE: ["Use 'or' for logical or"],
            TokenType.AMP: ["Use 'and' for logical and"],
            TokenType.PERIOD: ["Kolang has no member access; floats need digits after '.'"],
        }
        return list(corrections.get(found.type, []))


# Human-readable names for tokens the parser expects
EXPECTED_NAMES = {
    TokenType.IDEN: "identifier",
    TokenType.LPAR: "'('",
    TokenType.RPAR: "')'",
    TokenType.LBRACKET: "'['",
    TokenType.RBRACKET: "']'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.SEMICOLON: "';'",
    TokenType.COLON: "':'",
    TokenType.COMMA: "','",
    TokenType.ASSIGN: "'='",
    TokenType.KW_TO: "'to'",
    TokenType.KW_FN: "'fn'",
}


def describe_expected(expected: TokenType) -> str:
    return EXPECTED_NAMES.get(expected, expected.value)


# Helper functions for creating common parser diagnostics

def _diagnostic(kind: ParseErrorKind, message: str, location: SourceLocation,
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


def create_unexpected_token_error(expected: str, found: Token) -> Diagnostic:
    """Create an error for a token that cannot start or continue a construct."""
    return _diagnostic(
        ParseErrorKind.UNEXPECTED_TOKEN,
        f"expected {expected}, found {found.describe()}",
        found.location,
        f"The parser expected {expected} at this position.",
        SyntaxErrorRecovery.suggest_operator_corrections(found),
    )


def create_missing_token_error(expected: TokenType, found: Token,
                               context: Optional[str] = None) -> Diagnostic:
    """Create an error for a required token that is absent."""
    expected_str = describe_expected(expected)
    help_text = f"{expected_str} is required {context}." if context else None
    return _diagnostic(
        ParseErrorKind.MISSING_TOKEN,
        f"expected {expected_str}, found {found.describe()}",
        found.location,
        help_text,
        SyntaxErrorRecovery.suggest_missing_token(expected),
    )


def create_expected_expression_error(found: Token) -> Diagnostic:
    return _diagnostic(
        ParseErrorKind.EXPECTED_EXPRESSION,
        f"expected expression, found {found.describe()}",
        found.location,
        "An expression is a literal, a name, a call, an index, "
        "a parenthesized expression or an operator applied to expressions.",
    )


def create_invalid_type_error(reason: str, location: SourceLocation) -> Diagnostic:
    """Create an error for a malformed type annotation."""
    return _diagnostic(
        ParseErrorKind.INVALID_TYPE,
        reason,
        location,
        "Types are int, float, char, bool or str, optionally followed by '[size]'.",
    )


def create_invalid_assignment_target_error(location: SourceLocation) -> Diagnostic:
    return _diagnostic(
        ParseErrorKind.INVALID_ASSIGNMENT_TARGET,
        "invalid assignment target",
        location,
        "Only a plain variable name may appear on the left of '='.",
        ["Use '==' for comparison"],
    )


def create_duplicate_parameter_error(name: str, location: SourceLocation,
                                     first: SourceLocation) -> Diagnostic:
    return _diagnostic(
        ParseErrorKind.DUPLICATE_PARAMETER,
        f"duplicate parameter '{name}'",
        location,
        f"'{name}' was already declared at {first}.",
        ["Rename one of the parameters"],
    )


def create_nesting_too_deep_error(limit: int, location: SourceLocation) -> Diagnostic:
    return _diagnostic(
        ParseErrorKind.NESTING_TOO_DEEP,
        f"nesting too deep (limit is {limit})",
        location,
        "Split deeply nested statements or expressions, "
        "or raise FrontendConfig.max_nesting_depth.",
    )
