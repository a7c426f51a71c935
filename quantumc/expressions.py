"""Syntax tree nodes, type descriptions and a visitor over them."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum, IntFlag, auto
from typing import Any, ClassVar, Iterator, List, Optional


class Operator(Enum):
    """Operators an expression node can apply."""

    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    MOD = auto()

    SHL = auto()
    SHR = auto()

    TER = auto()

    EQEQ = auto()
    AND = auto()
    OR = auto()
    ANDAND = auto()
    OROR = auto()

    XOR = auto()

    ASSIGN = auto()

    ADDR = auto()
    DEREF = auto()

    MEM = auto()
    MEMP = auto()
    MEMA = auto()

    NOT = auto()
    NEG = auto()
    INCB = auto()
    INCA = auto()
    DECB = auto()
    DECA = auto()
    FUNCALL = auto()
    TYPECAST = auto()

    COMMA = auto()


class LiteralKind(IntEnum):
    """Kind of a literal expression."""

    NUMBER = 0
    CHAR = 1
    STRING = 2


class VarType(IntEnum):
    """Kind of a type description node.

    The order matters: ``long`` widens INT, LONG and DOUBLE to the next value.
    """

    UNDEFINED = 0
    ANGLE = auto()
    BIT = auto()
    BOOL = auto()
    CHAR = auto()
    SHORT = auto()
    FLOAT = auto()
    DOUBLE = auto()
    LDOUBLE = auto()
    INT = auto()
    LONG = auto()
    LLONG = auto()
    VOID = auto()
    POINTER = auto()
    ARRAY = auto()
    FUN = auto()
    DEC = auto()


class Specifier(IntFlag):
    """Qualifiers attached to a type."""

    QUANTUM = 1 << 0
    CONST = 1 << 1
    INLINE = 1 << 2
    EXTERN = 1 << 3
    VOLATILE = 1 << 4


class Expression:
    """Base of every expression node."""

    _visit_name: ClassVar[str] = "expression"

    def accept(self, visitor: "ExpressionVisitor") -> Any:
        """Hand this node to the visitor and return its result."""
        return visitor.visit(self)


class Statement:
    """Base of every statement node."""

    _visit_name: ClassVar[str] = "statement"

    def accept(self, visitor: "ExpressionVisitor") -> Any:
        """Hand this node to the visitor and return its result."""
        return visitor.visit(self)


@dataclass
class Typer:
    """One link of a type description chain.

    ``respect_typer`` is the type this one applies to: the pointee of a
    pointer, the element of an array, the result of a function, or the
    type of a declared name.
    """

    var_name: str = ""
    sizer: Optional[Expression] = None
    vtype: VarType = VarType.UNDEFINED
    spec: Specifier = Specifier(0)
    respect_typer: Optional["Typer"] = None
    func_params: List[Statement] = field(default_factory=list)
    initializer: Optional[Statement] = None


@dataclass
class BinaryExpression(Expression):
    left: Optional[Expression]
    op: Operator
    right: Optional[Expression]

    _visit_name: ClassVar[str] = "binary"


@dataclass
class TupleExpression(Expression):
    expressions: List[Expression] = field(default_factory=list)

    _visit_name: ClassVar[str] = "tuple"


@dataclass
class UnaryExpression(Expression):
    operand: Optional[Expression]
    op: Operator
    tuple: Optional[TupleExpression] = None
    param: Optional[Expression] = None

    _visit_name: ClassVar[str] = "unary"


@dataclass
class LiteralExpression(Expression):
    kind: LiteralKind
    value: str

    _visit_name: ClassVar[str] = "literal"


@dataclass
class VariableExpression(Expression):
    name: str

    _visit_name: ClassVar[str] = "variable"


@dataclass
class DeclarationStatement(Statement):
    type_spec: Optional[Typer] = None

    _visit_name: ClassVar[str] = "declaration"


@dataclass
class BlockStatement(Statement):
    children: List[Statement] = field(default_factory=list)

    _visit_name: ClassVar[str] = "block"


@dataclass
class ExpressionStatement(Statement):
    expr: Optional[Expression] = None

    _visit_name: ClassVar[str] = "expression_statement"


@dataclass
class IfStatement(Statement):
    condition: Optional[Expression] = None
    body: Optional[Statement] = None

    _visit_name: ClassVar[str] = "if"


@dataclass
class WhileStatement(IfStatement):
    at_least_once: bool = False  # behaves as do-while when set

    _visit_name: ClassVar[str] = "while"


@dataclass
class ForStatement(Statement):
    init: Optional[Statement] = None
    condition: Optional[Expression] = None
    update: Optional[Statement] = None
    body: Optional[Statement] = None

    _visit_name: ClassVar[str] = "for"


@dataclass
class ReturnStatement(Statement):
    expr: Optional[Expression] = None

    _visit_name: ClassVar[str] = "return"


def _nodes_in(value: Any) -> Iterator[Any]:
    if isinstance(value, (Expression, Statement)):
        yield value
    elif isinstance(value, Typer):
        yield from _child_nodes(value)
    elif isinstance(value, list):
        for item in value:
            yield from _nodes_in(item)


def _child_nodes(node: Any) -> Iterator[Any]:
    for item in fields(node):
        yield from _nodes_in(getattr(node, item.name))


class ExpressionVisitor:
    """Dispatches each node to ``visit_<kind>``.

    Kinds are binary, tuple, unary, literal, variable, declaration, block,
    expression_statement, if, while, for and return. Nodes without a
    matching method go to ``generic_visit``, which visits their children,
    including those reachable through a declaration's type description.
    """

    def visit(self, node: Any) -> Any:
        method = getattr(self, f"visit_{node._visit_name}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: Any) -> None:
        for child in _child_nodes(node):
            self.visit(child)