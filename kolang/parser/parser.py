"""
Kolang Recursive Descent Parser

Implements a recursive descent parser with precedence climbing for Kolang
expressions. Tokens are pulled lazily from any iterable, so a Lexer can feed
the parser directly without materializing the token list.

Syntax errors are handled in panic mode: the first error in a statement is
reported, further reports are suppressed, and the statement loop skips to a
statement boundary before parsing resumes. The parser never raises for
malformed input.
"""

import logging
import sys
from collections import deque
from enum import IntEnum
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from ..config import DEFAULT_CONFIG, FrontendConfig
from ..diagnostics import Diagnostic, DiagnosticSink
from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType, SourceLocation, INTEGER_TYPES
from .ast_nodes import (
    SourceSpan, BaseType, BinaryOperator, UnaryOperator, LiteralKind,
    Program, FunctionDecl, Parameter, TypeRef,
    Stmt, LetStatement, ExpressionStatement, IfStatement, WhileStatement,
    ForStatement, ReturnStatement, BlockStatement, ErrorStatement,
    Expr, Assign, BinaryOp, UnaryOp, Identifier, Literal, ArrayLiteral,
    Call, Index, Grouping, ErrorExpression
)
from .errors import (
    SyntaxErrorRecovery, create_unexpected_token_error, create_missing_token_error,
    create_expected_expression_error, create_invalid_type_error,
    create_invalid_assignment_target_error, create_duplicate_parameter_error,
    create_nesting_too_deep_error, describe_expected
)

logger = logging.getLogger(__name__)


class Precedence(IntEnum):
    """Binding power of the expression tiers, loosest first."""
    NONE = 0
    ASSIGNMENT = 1      # =
    OR = 2              # or
    AND = 3             # and
    EQUALITY = 4        # == !=
    COMPARISON = 5      # < > <= >=
    TERM = 6            # + -
    FACTOR = 7          # * / %
    UNARY = 8           # not ~ -


# Deepest Python call chain one counted nesting level can produce
# (expression, assignment, seven precedence tiers, unary, primary, call
# arguments), and the frames kept free for callers and logging.
FRAMES_PER_NESTING_LEVEL = 13
RESERVED_FRAMES = 150


def recursion_safe_depth() -> int:
    """Deepest nesting the current interpreter recursion limit can parse."""
    return max(1, (sys.getrecursionlimit() - RESERVED_FRAMES) // FRAMES_PER_NESTING_LEVEL)


UNPARSED_OPERATORS = frozenset({TokenType.PIPE, TokenType.AMP, TokenType.PERIOD})

BASE_TYPES = {
    TokenType.KW_INT: BaseType.INT,
    TokenType.KW_FLOAT: BaseType.FLOAT,
    TokenType.KW_CHAR: BaseType.CHAR,
    TokenType.KW_BOOL: BaseType.BOOL,
    TokenType.KW_STR: BaseType.STR,
}


class TokenCursor:
    """
    Lazy view over a token iterable with bounded lookahead.

    Comment tokens are skipped. If the iterable ends without an EOF token,
    one is synthesized just past the last token, and EOF is returned for
    every read after that.
    """

    def __init__(self, tokens: Iterable[Token]):
        self._source = iter(tokens)
        self._buffer: Deque[Token] = deque()
        self._eof: Optional[Token] = None
        self._last_end = SourceLocation("<input>", 1, 1, 0, 0)
        self.previous: Optional[Token] = None
        self.consumed = 0

    def peek(self, offset: int = 0) -> Token:
        while len(self._buffer) <= offset:
            self._buffer.append(self._pull())
        return self._buffer[offset]

    def advance(self) -> Token:
        """Consume the current token. EOF is never consumed."""
        token = self.peek()
        if token.type != TokenType.EOF:
            self._buffer.popleft()
            self.previous = token
            self.consumed += 1
        return token

    def _pull(self) -> Token:
        if self._eof is not None:
            return self._eof

        for item in self._source:
            if not isinstance(item, Token):
                raise TypeError(f"token stream yielded {type(item).__name__}, expected Token")
            if item.is_comment:
                continue
            if item.type == TokenType.EOF:
                self._eof = item
                return item
            self._last_end = item.end
            return item

        self._eof = Token(TokenType.EOF, "", None, self._last_end, self._last_end)
        return self._eof


class Parser:
    """
    Kolang parser.

    Builds a Program from a token stream, reporting syntax errors to a
    DiagnosticSink shared with the lexer.
    """

    def __init__(self, tokens: Iterable[Token],
                 diagnostics: Optional[DiagnosticSink] = None,
                 config: Optional[FrontendConfig] = None):
        """
        Initialize parser with a token source.

        Args:
            tokens: Lexer, list or any other iterable of tokens
            diagnostics: Sink for syntax errors; defaults to the lexer's sink
                when ``tokens`` is a Lexer
            config: Front-end settings (nesting limit)
        """
        if diagnostics is None:
            diagnostics = tokens.diagnostics if isinstance(tokens, Lexer) else DiagnosticSink()
        self.diagnostics = diagnostics
        self.config = config or DEFAULT_CONFIG
        self.errors: List[Diagnostic] = []
        self.panic_mode = False

        self._cursor = TokenCursor(tokens)
        self._depth = 0
        self.max_nesting_depth = min(self.config.max_nesting_depth, recursion_safe_depth())
        if self.max_nesting_depth < self.config.max_nesting_depth:
            logger.warning("max_nesting_depth %d exceeds the interpreter recursion limit; using %d",
                           self.config.max_nesting_depth, self.max_nesting_depth)

        # Initialize parsing tables
        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize statement, prefix and operator tables."""

        # Statements introduced by a keyword or delimiter
        self.statement_parsers: Dict[TokenType, Callable[[], Stmt]] = {
            TokenType.KW_LET: self._parse_let_statement,
            TokenType.KW_IF: self._parse_if_statement,
            TokenType.KW_WHILE: self._parse_while_statement,
            TokenType.KW_FOR: self._parse_for_statement,
            TokenType.KW_RETURN: self._parse_return_statement,
            TokenType.LBRACE: self._parse_block_statement,
        }

        # Tokens that can start a primary expression
        self.prefix_parsers: Dict[TokenType, Callable[[], Expr]] = {
            TokenType.LITERAL_INT_DEC: self._parse_integer_literal,
            TokenType.LITERAL_INT_BIN: self._parse_integer_literal,
            TokenType.LITERAL_INT_OCT: self._parse_integer_literal,
            TokenType.LITERAL_INT_HEX: self._parse_integer_literal,
            TokenType.LITERAL_FLOAT: self._parse_float_literal,
            TokenType.LITERAL_CHAR: self._parse_character_literal,
            TokenType.LITERAL_STR: self._parse_string_literal,
            TokenType.KW_TRUE: self._parse_boolean_literal,
            TokenType.KW_FALSE: self._parse_boolean_literal,
            TokenType.IDEN: self._parse_identifier,
            TokenType.LPAR: self._parse_grouping,
            TokenType.LBRACKET: self._parse_array_literal,
        }

        # Binary operators: precedence and AST operator
        self.binary_operators: Dict[TokenType, Tuple[Precedence, BinaryOperator]] = {
            TokenType.KW_OR: (Precedence.OR, BinaryOperator.OR),
            TokenType.KW_AND: (Precedence.AND, BinaryOperator.AND),
            TokenType.EQ: (Precedence.EQUALITY, BinaryOperator.EQ),
            TokenType.NEQ: (Precedence.EQUALITY, BinaryOperator.NEQ),
            TokenType.LT: (Precedence.COMPARISON, BinaryOperator.LT),
            TokenType.GT: (Precedence.COMPARISON, BinaryOperator.GT),
            TokenType.LEQ: (Precedence.COMPARISON, BinaryOperator.LEQ),
            TokenType.GEQ: (Precedence.COMPARISON, BinaryOperator.GEQ),
            TokenType.PLUS: (Precedence.TERM, BinaryOperator.ADD),
            TokenType.MINUS: (Precedence.TERM, BinaryOperator.SUB),
            TokenType.ASTERISK: (Precedence.FACTOR, BinaryOperator.MUL),
            TokenType.SLASH: (Precedence.FACTOR, BinaryOperator.DIV),
            TokenType.PERCENT: (Precedence.FACTOR, BinaryOperator.MOD),
        }

        self.unary_operators: Dict[TokenType, UnaryOperator] = {
            TokenType.KW_NOT: UnaryOperator.NOT,
            TokenType.TILDE: UnaryOperator.BIT_NOT,
            TokenType.MINUS: UnaryOperator.NEG,
        }

    # ========================================================================
    # Entry points
    # ========================================================================

    def parse(self) -> Program:
        """
        Parse the token stream into an AST.

        Returns:
            Program holding every function that could be parsed. Syntax
            errors are available through ``errors`` and the diagnostic sink.
        """
        logger.debug("parsing started")
        functions: List[FunctionDecl] = []

        while not self._check(TokenType.EOF):
            if self._check(TokenType.KW_FN):
                function = self._parse_function()
                if function is not None:
                    functions.append(function)
                if self.panic_mode:
                    self._skip_to_function()
            else:
                self._error_at_current(
                    create_unexpected_token_error("function declaration", self._current)
                )
                self._skip_to_function()

        if functions:
            span = SourceSpan(functions[0].span.start, functions[-1].span.end)
        else:
            eof = self._current.location
            span = SourceSpan(eof, eof)

        logger.debug("parsed %d functions, %d syntax errors", len(functions), len(self.errors))
        return Program(functions, span)

    def parse_statement(self) -> Stmt:
        """Parse a single statement that must span the whole token stream."""
        statement = self._parse_statement()
        self._expect_end()
        return statement

    def parse_expression(self) -> Expr:
        """Parse a single expression that must span the whole token stream."""
        expression = self._parse_expression()
        self._expect_end()
        return expression

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    # ========================================================================
    # Declarations
    # ========================================================================

    def _parse_function(self) -> Optional[FunctionDecl]:
        """Parse a function definition. Returns None if the header is malformed."""
        fn_token = self._advance()  # Consume 'fn'

        name_token = self._consume(TokenType.IDEN, "after 'fn'")
        if name_token is None:
            return None

        if self._consume(TokenType.LPAR, "after the function name") is None:
            return None

        params = self._parse_parameter_list()
        if params is None:
            return None

        return_type = None
        if self._match(TokenType.COLON):
            return_type = self._parse_type()
            if return_type is None:
                return None

        body = self._parse_statement()

        span = self._span_from(fn_token)
        return FunctionDecl(name_token.lexeme, params, return_type, body, span)

    def _parse_parameter_list(self) -> Optional[List[Parameter]]:
        """Parse parameters up to and including ')'. A trailing comma is allowed."""
        params: List[Parameter] = []
        seen: Dict[str, SourceLocation] = {}

        if not self._check(TokenType.RPAR):
            while True:
                param = self._parse_parameter()
                if param is None:
                    return None

                if param.name in seen:
                    self._error(create_duplicate_parameter_error(
                        param.name, param.span.start, seen[param.name]
                    ), panic=False)
                else:
                    seen[param.name] = param.span.start
                params.append(param)

                if not self._match(TokenType.COMMA) or self._check(TokenType.RPAR):
                    break

        if self._consume(TokenType.RPAR, "to close the parameter list") is None:
            return None
        return params

    def _parse_parameter(self) -> Optional[Parameter]:
        name_token = self._consume(TokenType.IDEN, "as parameter name")
        if name_token is None:
            return None
        if self._consume(TokenType.COLON, "after the parameter name") is None:
            return None

        param_type = self._parse_type()
        if param_type is None:
            return None

        return Parameter(name_token.lexeme, param_type, self._span_from(name_token))

    def _parse_type(self) -> Optional[TypeRef]:
        """
        Parse a type annotation: a base type with an optional array suffix.

        Unsized arrays (``int[]``) are accepted here; callers that need a
        size check for it themselves.
        """
        type_token = self._current
        base = BASE_TYPES.get(type_token.type)
        if base is None:
            self._error_at_current(create_invalid_type_error(
                f"expected type, found {type_token.describe()}", type_token.location
            ))
            return None
        self._advance()

        if not self._match(TokenType.LBRACKET):
            return TypeRef(base, span=self._span_from(type_token))

        size = None
        if self._current.type in INTEGER_TYPES:
            size = self._advance().value
        elif not self._check(TokenType.RBRACKET):
            self._error_at_current(create_invalid_type_error(
                f"array size must be an integer literal, found {self._current.describe()}",
                self._current.location
            ))
            return None

        if self._consume(TokenType.RBRACKET, "to close the array type") is None:
            return None

        return TypeRef(base, size, True, self._span_from(type_token))

    # ========================================================================
    # Statements
    # ========================================================================

    def _parse_statement(self) -> Stmt:
        """Parse one statement, bounded by the nesting limit."""
        if not self._enter_nesting():
            return ErrorStatement(self._span_at_current())
        try:
            parser = self.statement_parsers.get(self._current.type)
            if parser is not None:
                return parser()
            return self._parse_expression_statement()
        finally:
            self._depth -= 1

    def _parse_block_statement(self) -> BlockStatement:
        """Parse '{' { stmt } '}'."""
        start_token = self._advance()  # Consume {
        statements: List[Stmt] = []

        while not self._check_any(TokenType.RBRACE, TokenType.KW_FN, TokenType.EOF):
            before = self._cursor.consumed
            statements.append(self._parse_statement())
            if self.panic_mode:
                self._synchronize(progressed=self._cursor.consumed > before)

        self._consume(TokenType.RBRACE, "to close the block")
        return BlockStatement(statements, self._span_from(start_token))

    def _parse_let_statement(self) -> Stmt:
        """Parse a variable declaration: let name: type [= expr];"""
        let_token = self._advance()  # Consume 'let'

        name_token = self._consume(TokenType.IDEN, "after 'let'")
        if name_token is None:
            return ErrorStatement(self._span_from(let_token))
        if self._consume(TokenType.COLON, "after the variable name") is None:
            return ErrorStatement(self._span_from(let_token))

        var_type = self._parse_type()
        if var_type is None:
            return ErrorStatement(self._span_from(let_token))

        initializer = None
        if self._match(TokenType.ASSIGN):
            initializer = self._parse_expression()
        elif var_type.is_array and var_type.size is None:
            # The size can only be left out when an initializer provides it
            self._error(create_invalid_type_error(
                f"array size required in '{var_type}' without an initializer",
                var_type.span.start
            ), panic=False)

        self._expect_semicolon("after the variable declaration")
        return LetStatement(name_token.lexeme, var_type, initializer, self._span_from(let_token))

    def _parse_if_statement(self) -> Stmt:
        if_token = self._advance()  # Consume 'if'

        condition = self._parse_expression()
        if self.panic_mode:
            return ErrorStatement(self._span_from(if_token))

        then_branch = self._parse_statement()

        # A dangling else binds to the nearest if
        else_branch = None
        if self._match(TokenType.KW_ELSE):
            else_branch = self._parse_statement()

        return IfStatement(condition, then_branch, else_branch, self._span_from(if_token))

    def _parse_while_statement(self) -> Stmt:
        while_token = self._advance()  # Consume 'while'

        condition = self._parse_expression()
        if self.panic_mode:
            return ErrorStatement(self._span_from(while_token))

        body = self._parse_statement()
        return WhileStatement(condition, body, self._span_from(while_token))

    def _parse_for_statement(self) -> Stmt:
        """Parse for name = lower to upper stmt."""
        for_token = self._advance()  # Consume 'for'

        variable = self._consume(TokenType.IDEN, "after 'for'")
        if variable is None:
            return ErrorStatement(self._span_from(for_token))
        if self._consume(TokenType.ASSIGN, "after the loop variable") is None:
            return ErrorStatement(self._span_from(for_token))

        lower = self._parse_expression()
        if self.panic_mode:
            return ErrorStatement(self._span_from(for_token))
        if self._consume(TokenType.KW_TO, "between the loop bounds") is None:
            return ErrorStatement(self._span_from(for_token))

        upper = self._parse_expression()
        if self.panic_mode:
            return ErrorStatement(self._span_from(for_token))

        body = self._parse_statement()
        return ForStatement(variable.lexeme, lower, upper, body, self._span_from(for_token))

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse a return statement."""
        return_token = self._advance()  # Consume 'return'

        # Return value (optional)
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._parse_expression()

        self._expect_semicolon("after the return statement")
        return ReturnStatement(value, self._span_from(return_token))

    def _parse_expression_statement(self) -> ExpressionStatement:
        start_token = self._current
        expression = self._parse_expression()
        self._expect_semicolon("after the expression")
        return ExpressionStatement(expression, self._span_from(start_token))

    # ========================================================================
    # Expressions
    # ========================================================================

    def _parse_expression(self) -> Expr:
        """Parse an expression, bounded by the nesting limit."""
        if not self._enter_nesting():
            return ErrorExpression(self._span_at_current())
        try:
            return self._parse_assignment()
        finally:
            self._depth -= 1

    def _parse_assignment(self) -> Expr:
        """
        Parse assignment (right associative) or fall through to 'or'.

        Only a bare identifier may be assigned to; that is decided with two
        tokens of lookahead before any expression is built.
        """
        if self._check(TokenType.IDEN) and self._cursor.peek(1).type == TokenType.ASSIGN:
            name_token = self._advance()
            self._advance()  # Consume =
            target = Identifier(name_token.lexeme, SourceSpan.from_token(name_token))
            value = self._parse_expression()
            return Assign(target, value, SourceSpan(target.span.start, value.span.end))

        expression = self._parse_precedence(Precedence.OR)

        if self._check(TokenType.ASSIGN) and not self.panic_mode:
            equals = self._advance()
            self._error(create_invalid_assignment_target_error(equals.location), panic=False)
            value = self._parse_expression()
            return ErrorExpression(SourceSpan(expression.span.start, value.span.end))

        return expression

    def _parse_precedence(self, precedence: Precedence) -> Expr:
        """Precedence climbing over the binary tiers at or above ``precedence``."""
        left = self._parse_unary()

        while not self.panic_mode:
            entry = self.binary_operators.get(self._current.type)
            if entry is None or entry[0] < precedence:
                break
            operator_precedence, operator = entry
            self._advance()

            # Left associative: the right operand binds one tier tighter
            right = self._parse_precedence(Precedence(operator_precedence + 1))
            left = BinaryOp(operator, left, right, SourceSpan(left.span.start, right.span.end))

        return left

    def _parse_unary(self) -> Expr:
        operator = self.unary_operators.get(self._current.type)
        if operator is None:
            return self._parse_primary()

        if not self._enter_nesting():
            return ErrorExpression(self._span_at_current())
        try:
            operator_token = self._advance()
            operand = self._parse_unary()
            return UnaryOp(operator, operand, SourceSpan(operator_token.location, operand.span.end))
        finally:
            self._depth -= 1

    def _parse_primary(self) -> Expr:
        prefix_parser = self.prefix_parsers.get(self._current.type)
        if prefix_parser is None:
            self._error_at_current(create_expected_expression_error(self._current))
            return ErrorExpression(self._span_at_current())
        return prefix_parser()

    # Prefix parsers (tokens that can start expressions)

    def _parse_integer_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, LiteralKind.INT, SourceSpan.from_token(token))

    def _parse_float_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, LiteralKind.FLOAT, SourceSpan.from_token(token))

    def _parse_character_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, LiteralKind.CHAR, SourceSpan.from_token(token))

    def _parse_string_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, LiteralKind.STR, SourceSpan.from_token(token))

    def _parse_boolean_literal(self) -> Literal:
        token = self._advance()
        return Literal(token.value, LiteralKind.BOOL, SourceSpan.from_token(token))

    def _parse_identifier(self) -> Expr:
        """Parse a name, a call f(...) or an index a[...]."""
        token = self._advance()
        identifier = Identifier(token.lexeme, SourceSpan.from_token(token))

        if self._match(TokenType.LPAR):
            args = self._parse_expression_list(TokenType.RPAR, "to close the argument list")
            return Call(identifier, args, self._span_from(token))

        if self._match(TokenType.LBRACKET):
            index = self._parse_expression()
            if not self.panic_mode:
                self._consume(TokenType.RBRACKET, "to close the index")
            return Index(identifier, index, self._span_from(token))

        return identifier

    def _parse_grouping(self) -> Grouping:
        """Parse parenthesized expression."""
        start_token = self._advance()  # Consume (
        expression = self._parse_expression()
        if not self.panic_mode:
            self._consume(TokenType.RPAR, "to close the parenthesized expression")
        return Grouping(expression, self._span_from(start_token))

    def _parse_array_literal(self) -> ArrayLiteral:
        """Parse array literal [a, b, c]. Its length is not checked against any type."""
        start_token = self._advance()  # Consume [
        elements = self._parse_expression_list(TokenType.RBRACKET, "to close the array literal")
        return ArrayLiteral(elements, self._span_from(start_token))

    def _parse_expression_list(self, closing: TokenType, context: str) -> List[Expr]:
        """Parse comma-separated expressions and the closing token. A trailing comma is allowed."""
        items: List[Expr] = []

        if not self._check(closing):
            items.append(self._parse_expression())
            while not self.panic_mode and self._match(TokenType.COMMA):
                if self._check(closing):
                    break
                items.append(self._parse_expression())

        if not self.panic_mode:
            self._consume(closing, context)
        return items

    # ========================================================================
    # Error reporting and recovery
    # ========================================================================

    def _error(self, diagnostic: Diagnostic, panic: bool = True):
        """
        Report a syntax error unless one is already being recovered from.

        Errors at INVALID tokens are not reported: the lexer already has.
        """
        if self.panic_mode:
            return
        if panic:
            self.panic_mode = True
        if self._current.type == TokenType.INVALID and panic:
            return
        self.errors.append(diagnostic)
        self.diagnostics.report(diagnostic)

    def _error_at_current(self, diagnostic: Diagnostic):
        self._error(diagnostic, panic=True)

    def _synchronize(self, progressed: bool):
        """
        Leave panic mode and skip to the next statement boundary.

        Recovery stops just after a ';' or '}' that is not followed by 'else',
        or in front of '}', 'fn', end of input, or a keyword that starts a
        statement. Braces opened while skipping are skipped as a whole. At least one token is consumed
        unless the statement already did or the current token is one the
        enclosing loop handles.
        """
        self.panic_mode = False

        previous = self._cursor.previous
        if (progressed and previous is not None and previous.type == TokenType.SEMICOLON
                and not self._check(TokenType.KW_ELSE)):
            return
        if self._current.type in SyntaxErrorRecovery.HARD_BOUNDARIES:
            return
        if progressed and self._current.type in SyntaxErrorRecovery.STATEMENT_STARTS:
            return

        braces = 0
        while True:
            token = self._advance()
            if token.type == TokenType.LBRACE:
                braces += 1
            elif token.type == TokenType.RBRACE:
                braces -= 1
                if braces == 0 and not self._check(TokenType.KW_ELSE):
                    break
            elif token.type == TokenType.SEMICOLON and braces == 0:
                if not self._check(TokenType.KW_ELSE):
                    break

            current = self._current.type
            if current in (TokenType.KW_FN, TokenType.EOF):
                break
            if braces == 0 and current in SyntaxErrorRecovery.STATEMENT_BOUNDARIES:
                break

        logger.debug("resynchronized at %s", self._current.location)

    def _skip_to_function(self):
        """Top-level recovery: skip everything up to the next 'fn'."""
        self.panic_mode = False
        while not self._check_any(TokenType.KW_FN, TokenType.EOF):
            self._advance()
        logger.debug("resynchronized at %s", self._current.location)

    def _enter_nesting(self) -> bool:
        """Count one level of nesting; report and refuse once the limit is hit."""
        limit = self.max_nesting_depth
        if self._depth >= limit:
            if not self.panic_mode:
                logger.warning("nesting depth limit %d exceeded at %s",
                               limit, self._current.location)
            self._error_at_current(create_nesting_too_deep_error(limit, self._current.location))
            return False
        self._depth += 1
        return True

    # ========================================================================
    # Utility methods
    # ========================================================================

    @property
    def _current(self) -> Token:
        return self._cursor.peek()

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._current.type == token_type

    def _check_any(self, *token_types: TokenType) -> bool:
        return self._current.type in token_types

    def _advance(self) -> Token:
        """Consume and return current token."""
        return self._cursor.advance()

    def _consume(self, token_type: TokenType, context: str) -> Optional[Token]:
        """Consume a token of the expected type, or report it missing and return None."""
        if self._check(token_type):
            return self._advance()
        self._report_missing(token_type, context)
        return None

    def _expect_semicolon(self, context: str):
        if not self._match(TokenType.SEMICOLON):
            self._report_missing(TokenType.SEMICOLON, context)

    def _report_missing(self, token_type: TokenType, context: str):
        found = self._current
        if found.type in UNPARSED_OPERATORS:
            # Lexed for completeness, but no expression tier accepts them
            diagnostic = create_unexpected_token_error(describe_expected(token_type), found)
        else:
            diagnostic = create_missing_token_error(token_type, found, context)
        self._error_at_current(diagnostic)

    def _expect_end(self):
        if not self._check(TokenType.EOF):
            self._error_at_current(create_unexpected_token_error("end of input", self._current))

    def _span_from(self, start: Token) -> SourceSpan:
        """Span from ``start`` to the end of the last consumed token."""
        previous = self._cursor.previous
        if previous is None or previous.end.offset < start.location.offset:
            return SourceSpan(start.location, start.location)
        return SourceSpan(start.location, previous.end)

    def _span_at_current(self) -> SourceSpan:
        """Empty span in front of the current token."""
        location = self._current.location
        return SourceSpan(location, location)


def parse_tokens(tokens: Iterable[Token], diagnostics: Optional[DiagnosticSink] = None,
                 config: Optional[FrontendConfig] = None) -> Program:
    """Convenience function to parse an already tokenized program."""
    return Parser(tokens, diagnostics, config).parse()
