"""
Kolang Parser Package

Implements a recursive descent parser for the Kolang language.
Produces Abstract Syntax Trees with exact source spans on every node.

Key Features:
- Precedence climbing over eight expression tiers
- Lazy token consumption from any token iterable
- Panic-mode error recovery and synchronization
- Configurable nesting limit instead of stack exhaustion
- Exhaustive visitor dispatch and compact tree dumps
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, ASTWalker, SourceSpan,
    BaseType, BinaryOperator, UnaryOperator, LiteralKind,
    Program, FunctionDecl, Parameter, TypeRef,
    Stmt, LetStatement, ExpressionStatement, IfStatement, WhileStatement,
    ForStatement, ReturnStatement, BlockStatement, ErrorStatement,
    Expr, Assign, BinaryOp, UnaryOp, Identifier, Literal, ArrayLiteral,
    Call, Index, Grouping, ErrorExpression,
    iter_children, walk, dump,
)
from .parser import Parser, Precedence, parse_tokens
from .errors import ParseErrorKind, ParseError

__all__ = [
    # Core parser
    "Parser", "Precedence", "parse_tokens",

    # AST nodes
    "ASTNode", "ASTNodeType", "SourceSpan",
    "BaseType", "BinaryOperator", "UnaryOperator", "LiteralKind",
    "Program", "FunctionDecl", "Parameter", "TypeRef",
    "Stmt", "LetStatement", "ExpressionStatement", "IfStatement", "WhileStatement",
    "ForStatement", "ReturnStatement", "BlockStatement", "ErrorStatement",
    "Expr", "Assign", "BinaryOp", "UnaryOp", "Identifier", "Literal", "ArrayLiteral",
    "Call", "Index", "Grouping", "ErrorExpression",

    # Traversal
    "ASTVisitor", "ASTWalker", "iter_children", "walk", "dump",

    # Error handling
    "ParseErrorKind", "ParseError",
]
