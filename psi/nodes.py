"""Syntax tree nodes and the runtime values they evaluate to."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, List, Optional

from .tokens import Token, TokenType


@dataclass(eq=False)
class Node:
    """Base class of every syntax tree node."""


@dataclass
class Value(Node):
    """A literal or computed value."""

    value: Any

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class Num(Value):
    """A numeric value."""

    value: float
    is_real: ClassVar[bool] = False


@dataclass
class Integer(Num):
    """A whole number."""

    value: int

    def __post_init__(self) -> None:
        self.value = int(self.value)

    def __str__(self) -> str:
        return str(int(self.value))


@dataclass
class Real(Num):
    """A floating point number."""

    value: float
    is_real: ClassVar[bool] = True

    def __post_init__(self) -> None:
        self.value = float(self.value)

    def __str__(self) -> str:
        return f"{self.value:f}"


@dataclass
class Boolean(Value):
    """A truth value."""

    value: bool

    def __post_init__(self) -> None:
        self.value = bool(self.value)

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass
class Char(Value):
    """A single character."""

    value: str


@dataclass
class String(Value):
    """A string of characters."""

    value: str


@dataclass(eq=False)
class Op(Node):
    """An operator, held as its text."""

    value: str


@dataclass(eq=False)
class BinaryOp(Node):
    """An operator applied to two operands."""

    left: Node
    op: Op
    right: Node


@dataclass(eq=False)
class UnaryOp(Node):
    """An operator applied to one operand."""

    op: Op
    expr: Node


@dataclass(eq=False)
class Compound(Node):
    """A sequence of statements between BEGIN and END."""

    children: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class Block(Node):
    """Declarations followed by a compound statement."""

    declarations: List[Node]
    compound_statement: Compound


@dataclass(eq=False)
class Program(Node):
    """A whole program."""

    program_name: str
    block: Block


@dataclass(eq=False)
class Var(Node):
    """A reference to a variable; its type is filled in by the semantic analyzer."""

    token: Token
    type: str = ""


@dataclass(eq=False)
class Type(Node):
    """A type specification."""

    type: TokenType


@dataclass(eq=False)
class VarDecl(Node):
    """A variable declaration."""

    var: Var
    type: Type


@dataclass(eq=False)
class Assign(Node):
    """An assignment of an expression to a variable."""

    left: Node
    token: Token
    right: Node


@dataclass(eq=False)
class Param(Node):
    """A formal parameter of a procedure or function."""

    var: Var
    type: Type


@dataclass(eq=False)
class ProcedureDeclaration(Node):
    """A procedure declaration."""

    name: str
    formal_params: List[Param]
    block: Block


@dataclass(eq=False)
class FunctionDeclaration(Node):
    """A function declaration with its return type."""

    name: str
    formal_params: List[Param]
    block: Block
    return_type: str


@dataclass(eq=False)
class FunctionCall(Node):
    """A call of a function; its symbol is filled in by the semantic analyzer."""

    name: str
    given_params: List[Node]
    function_symbol: Optional[Any] = None
    return_type: str = ""


@dataclass(eq=False)
class ProcedureCall(Node):
    """A call of a procedure; its symbol is filled in by the semantic analyzer."""

    name: str
    given_params: List[Node]
    token: Token
    procedure_symbol: Optional[Any] = None


@dataclass(eq=False)
class IfStatement(Node):
    """A conditional with a branch for each outcome."""

    conditional: Node
    if_statement: Node
    else_statement: Node


@dataclass(eq=False)
class WhileLoop(Node):
    """A loop that runs while its condition holds."""

    conditional: Node
    statement: Node


@dataclass(eq=False)
class ForLoop(Node):
    """A counting loop; an increment of 1 counts up, any other counts down."""

    assignment: Assign
    target: Node
    increment: Integer
    body: Node

    @property
    def statements(self) -> List[Node]:
        """The statements of the body, unpacked from a compound statement."""
        if isinstance(self.body, Compound):
            return list(self.body.children)
        return [self.body]


@dataclass(eq=False)
class RepeatUntil(Node):
    """A loop that runs its statements until its condition holds."""

    conditional: Node
    statements: List[Node]


@dataclass(eq=False)
class NoOp(Node):
    """An empty statement."""