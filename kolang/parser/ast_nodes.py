"""
Abstract Syntax Tree node definitions for Kolang.

Nodes are plain dataclasses. Each one carries a source span that is left out
of equality, so trees built by hand compare equal to parsed trees. A node is
owned by exactly one parent and holds no reference back to it.

The statement and expression node sets are closed: ``Stmt`` and ``Expr`` are
unions of the concrete classes, and ASTVisitor dispatch is exhaustive.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Iterator, List, Optional, Union

from ..lexer.tokens import SourceLocation, Token


class ASTNodeType(Enum):
    """Enumeration of all AST node types. Values name the visitor methods."""

    # Top-level
    PROGRAM = "program"
    FUNCTION_DECL = "function_decl"
    PARAMETER = "parameter"
    TYPE_REF = "type_ref"

    # Statements
    LET_STATEMENT = "let_statement"
    EXPRESSION_STATEMENT = "expression_statement"
    IF_STATEMENT = "if_statement"
    WHILE_STATEMENT = "while_statement"
    FOR_STATEMENT = "for_statement"
    RETURN_STATEMENT = "return_statement"
    BLOCK_STATEMENT = "block_statement"
    ERROR_STATEMENT = "error_statement"

    # Expressions
    ASSIGN = "assign"
    BINARY_OP = "binary_op"
    UNARY_OP = "unary_op"
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    ARRAY_LITERAL = "array_literal"
    CALL = "call"
    INDEX = "index"
    GROUPING = "grouping"
    ERROR_EXPRESSION = "error_expression"


class BinaryOperator(str, Enum):
    """Binary operators, valued by their source symbol."""
    OR = "or"
    AND = "and"
    EQ = "=="
    NEQ = "!="
    LT = "<"
    GT = ">"
    LEQ = "<="
    GEQ = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"

    def __str__(self) -> str:
        return self.value


class UnaryOperator(str, Enum):
    """Prefix operators, valued by their source symbol."""
    NOT = "not"
    BIT_NOT = "~"
    NEG = "-"

    def __str__(self) -> str:
        return self.value


class BaseType(str, Enum):
    INT = "int"
    FLOAT = "float"
    CHAR = "char"
    BOOL = "bool"
    STR = "str"

    def __str__(self) -> str:
        return self.value


class LiteralKind(Enum):
    INT = "Int"
    FLOAT = "Float"
    CHAR = "Char"
    STR = "Str"
    BOOL = "Bool"


@dataclass(frozen=True)
class SourceSpan:
    """
    Represents a span of source code.

    ``end`` is the location just past the last character, so the span's text
    is ``source[start.offset:end.offset]``.
    """
    start: SourceLocation
    end: SourceLocation

    @classmethod
    def from_token(cls, token: Token) -> "SourceSpan":
        return cls(token.location, token.end)

    @classmethod
    def between(cls, first: Token, last: Token) -> "SourceSpan":
        """Span from the start of ``first`` to the end of ``last``."""
        return cls(first.location, last.end)

    def text(self, source: str) -> str:
        """The exact source text this span covers."""
        return source[self.start.offset:self.end.offset]

    def __str__(self) -> str:
        return (f"{self.start.filename}:{self.start.line}:{self.start.column}"
                f"-{self.end.line}:{self.end.column}")


def _span_field():
    return field(default=None, compare=False, repr=False)


class ASTNode:
    """Base class for all AST nodes."""

    node_type: ClassVar[ASTNodeType]
    span: Optional[SourceSpan]

    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    def children(self) -> List["ASTNode"]:
        """Get all child nodes."""
        return list(iter_children(self))


# ============================================================================
# Types and declarations
# ============================================================================

@dataclass
class TypeRef(ASTNode):
    """
    A type annotation: a base type, optionally an array of it.

    ``size`` is the declared element count, or None for an unsized array
    (``int[]``) and for scalars.
    """
    node_type: ClassVar[ASTNodeType] = ASTNodeType.TYPE_REF

    base: BaseType
    size: Optional[int] = None
    is_array: bool = False
    span: Optional[SourceSpan] = _span_field()

    def __str__(self) -> str:
        if not self.is_array:
            return str(self.base)
        return f"{self.base}[{'' if self.size is None else self.size}]"


@dataclass
class Parameter(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PARAMETER

    name: str
    type: TypeRef
    span: Optional[SourceSpan] = _span_field()


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class Identifier(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IDENTIFIER

    name: str
    span: Optional[SourceSpan] = _span_field()


@dataclass
class Literal(ASTNode):
    """A scalar literal: int, float, char, str or bool."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.LITERAL

    value: Any
    kind: LiteralKind
    span: Optional[SourceSpan] = _span_field()


@dataclass
class ArrayLiteral(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.ARRAY_LITERAL

    elements: List["Expr"] = field(default_factory=list)
    span: Optional[SourceSpan] = _span_field()


@dataclass
class Assign(ASTNode):
    """Assignment to a plain variable. Right-associative."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.ASSIGN

    target: Identifier
    value: "Expr"
    span: Optional[SourceSpan] = _span_field()


@dataclass
class BinaryOp(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BINARY_OP

    operator: BinaryOperator
    left: "Expr"
    right: "Expr"
    span: Optional[SourceSpan] = _span_field()


@dataclass
class UnaryOp(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.UNARY_OP

    operator: UnaryOperator
    operand: "Expr"
    span: Optional[SourceSpan] = _span_field()


@dataclass
class Call(ASTNode):
    """Function call. The callee is always a name."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.CALL

    callee: Identifier
    args: List["Expr"] = field(default_factory=list)
    span: Optional[SourceSpan] = _span_field()


@dataclass
class Index(ASTNode):
    """Array element access. The indexed array is always a name."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.INDEX

    array: Identifier
    index: "Expr"
    span: Optional[SourceSpan] = _span_field()


@dataclass
class Grouping(ASTNode):
    """A parenthesized expression."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.GROUPING

    expression: "Expr"
    span: Optional[SourceSpan] = _span_field()


@dataclass
class ErrorExpression(ASTNode):
    """Placeholder for an expression that failed to parse."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.ERROR_EXPRESSION

    span: Optional[SourceSpan] = _span_field()


Expr = Union[
    Assign, BinaryOp, UnaryOp, Identifier, Literal, ArrayLiteral,
    Call, Index, Grouping, ErrorExpression,
]


# ============================================================================
# Statements
# ============================================================================

@dataclass
class LetStatement(ASTNode):
    """Variable declaration. The type annotation is mandatory."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.LET_STATEMENT

    name: str
    type: TypeRef
    initializer: Optional[Expr] = None
    span: Optional[SourceSpan] = _span_field()


@dataclass
class ExpressionStatement(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.EXPRESSION_STATEMENT

    expression: Expr
    span: Optional[SourceSpan] = _span_field()


@dataclass
class IfStatement(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IF_STATEMENT

    condition: Expr
    then_branch: "Stmt"
    else_branch: Optional["Stmt"] = None
    span: Optional[SourceSpan] = _span_field()


@dataclass
class WhileStatement(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.WHILE_STATEMENT

    condition: Expr
    body: "Stmt"
    span: Optional[SourceSpan] = _span_field()


@dataclass
class ForStatement(ASTNode):
    """``for variable = lower to upper body``; the variable is scoped to the body."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FOR_STATEMENT

    variable: str
    lower: Expr
    upper: Expr
    body: "Stmt"
    span: Optional[SourceSpan] = _span_field()


@dataclass
class ReturnStatement(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.RETURN_STATEMENT

    value: Optional[Expr] = None
    span: Optional[SourceSpan] = _span_field()


@dataclass
class BlockStatement(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BLOCK_STATEMENT

    statements: List["Stmt"] = field(default_factory=list)
    span: Optional[SourceSpan] = _span_field()


@dataclass
class ErrorStatement(ASTNode):
    """Placeholder left where error recovery discarded tokens."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.ERROR_STATEMENT

    span: Optional[SourceSpan] = _span_field()


Stmt = Union[
    LetStatement, ExpressionStatement, IfStatement, WhileStatement,
    ForStatement, ReturnStatement, BlockStatement, ErrorStatement,
]


@dataclass
class FunctionDecl(ASTNode):
    """Function definition. The body is a single statement, usually a block."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNCTION_DECL

    name: str
    params: List[Parameter]
    return_type: Optional[TypeRef]
    body: Stmt
    span: Optional[SourceSpan] = _span_field()


@dataclass
class Program(ASTNode):
    """Root node: the functions of one source unit in declaration order."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PROGRAM

    functions: List[FunctionDecl] = field(default_factory=list)
    span: Optional[SourceSpan] = _span_field()

    def function(self, name: str) -> Optional[FunctionDecl]:
        """First function declared with the given name, if any."""
        for function in self.functions:
            if function.name == name:
                return function
        return None


# ============================================================================
# Traversal
# ============================================================================

def iter_children(node: ASTNode) -> Iterator[ASTNode]:
    """Yield the direct child nodes of ``node`` in field order."""
    for node_field in fields(node):
        if node_field.name == "span":
            continue
        value = getattr(node, node_field.name)
        if isinstance(value, ASTNode):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, ASTNode):
                    yield item


def walk(node: ASTNode) -> Iterator[ASTNode]:
    """Pre-order traversal of ``node`` and all its descendants."""
    # Explicit stack so arbitrarily deep trees do not hit the recursion limit
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))


class ASTVisitor:
    """
    Visitor dispatching on ``node_type`` to ``visit_<type>`` methods.

    Dispatch is exhaustive: a node type with no visit method reaches
    generic_visit, which raises TypeError. Subclasses that only care about
    some node types should derive from ASTWalker instead.
    """

    def visit(self, node: ASTNode) -> Any:
        if not isinstance(node, ASTNode):
            raise TypeError(f"cannot visit {type(node).__name__}: not an AST node")
        method = getattr(self, f"visit_{node.node_type.value}", None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    def generic_visit(self, node: ASTNode) -> Any:
        raise TypeError(
            f"{type(self).__name__} has no visit_{node.node_type.value} "
            f"for {type(node).__name__}"
        )


class ASTWalker(ASTVisitor):
    """Visitor whose default action is to visit every child."""

    def generic_visit(self, node: ASTNode) -> Any:
        for child in iter_children(node):
            self.visit(child)
        return None


class _Dumper(ASTVisitor):
    """Renders the compact textual form used by dump()."""

    def _list(self, nodes) -> str:
        return ", ".join(self.visit(node) for node in nodes)

    def visit_program(self, node: Program) -> str:
        return f"Program[{self._list(node.functions)}]"

    def visit_function_decl(self, node: FunctionDecl) -> str:
        signature = f"{node.name}({self._list(node.params)})"
        if node.return_type is not None:
            signature += f": {self.visit(node.return_type)}"
        return f"Fn({signature}, {self.visit(node.body)})"

    def visit_parameter(self, node: Parameter) -> str:
        return f"{node.name}: {self.visit(node.type)}"

    def visit_type_ref(self, node: TypeRef) -> str:
        return str(node)

    def visit_let_statement(self, node: LetStatement) -> str:
        text = f"Let({node.name}: {self.visit(node.type)}"
        if node.initializer is not None:
            text += f" = {self.visit(node.initializer)}"
        return text + ")"

    def visit_expression_statement(self, node: ExpressionStatement) -> str:
        return f"Expr({self.visit(node.expression)})"

    def visit_if_statement(self, node: IfStatement) -> str:
        parts = [self.visit(node.condition), self.visit(node.then_branch)]
        if node.else_branch is not None:
            parts.append(self.visit(node.else_branch))
        return f"If({', '.join(parts)})"

    def visit_while_statement(self, node: WhileStatement) -> str:
        return f"While({self.visit(node.condition)}, {self.visit(node.body)})"

    def visit_for_statement(self, node: ForStatement) -> str:
        return (f"For({node.variable}, {self.visit(node.lower)}, "
                f"{self.visit(node.upper)}, {self.visit(node.body)})")

    def visit_return_statement(self, node: ReturnStatement) -> str:
        if node.value is None:
            return "Return"
        return f"Return({self.visit(node.value)})"

    def visit_block_statement(self, node: BlockStatement) -> str:
        return f"Block[{self._list(node.statements)}]"

    def visit_error_statement(self, node: ErrorStatement) -> str:
        return "<error>"

    def visit_assign(self, node: Assign) -> str:
        return f"Assign({self.visit(node.target)}, {self.visit(node.value)})"

    def visit_binary_op(self, node: BinaryOp) -> str:
        return f"BinaryOp({node.operator}, {self.visit(node.left)}, {self.visit(node.right)})"

    def visit_unary_op(self, node: UnaryOp) -> str:
        return f"UnaryOp({node.operator}, {self.visit(node.operand)})"

    def visit_identifier(self, node: Identifier) -> str:
        return f"Ident({node.name})"

    def visit_literal(self, node: Literal) -> str:
        if node.kind == LiteralKind.BOOL:
            shown = "true" if node.value else "false"
        elif node.kind in (LiteralKind.CHAR, LiteralKind.STR):
            shown = repr(node.value)
        else:
            shown = str(node.value)
        return f"{node.kind.value}({shown})"

    def visit_array_literal(self, node: ArrayLiteral) -> str:
        return f"Array[{self._list(node.elements)}]"

    def visit_call(self, node: Call) -> str:
        if not node.args:
            return f"Call({self.visit(node.callee)})"
        return f"Call({self.visit(node.callee)}, {self._list(node.args)})"

    def visit_index(self, node: Index) -> str:
        return f"Index({self.visit(node.array)}, {self.visit(node.index)})"

    def visit_grouping(self, node: Grouping) -> str:
        return f"Group({self.visit(node.expression)})"

    def visit_error_expression(self, node: ErrorExpression) -> str:
        return "<error>"


def dump(node: ASTNode) -> str:
    """
    Compact single-line rendering of a tree.

    >>> dump(BinaryOp(BinaryOperator.ADD, Literal(1, LiteralKind.INT), Identifier("x")))
    'BinaryOp(+, Int(1), Ident(x))'
    """
    return _Dumper().visit(node)
