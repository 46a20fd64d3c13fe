"""Runs a checked syntax tree, reading from and writing to text streams."""

from __future__ import annotations

import operator
import re
import sys
from typing import Callable, Dict, List, Optional, TextIO

from .errors import InterpreterError
from .nodes import (
    Assign,
    BinaryOp,
    Block,
    Boolean,
    Char,
    Compound,
    ForLoop,
    FunctionCall,
    FunctionDeclaration,
    IfStatement,
    Integer,
    Node,
    NoOp,
    Num,
    Param,
    ProcedureCall,
    ProcedureDeclaration,
    Program,
    Real,
    RepeatUntil,
    String,
    Type,
    UnaryOp,
    Value,
    Var,
    VarDecl,
    WhileLoop,
)
from .records import ActivationRecord, ARType, CallStack
from .tokens import TokenType

_INT_PATTERN = re.compile(r"[+-]?\d+")
_REAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_NUM_ARITHMETIC = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}

_COMPARISONS = {
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}

_BOOL_OPERATIONS = {
    "AND": lambda left, right: left and right,
    "OR": lambda left, right: left or right,
    "XOR": operator.ne,
    **_COMPARISONS,
}


def default_value(type_name: str) -> Value:
    """Return the value a variable of the named type starts with."""
    defaults: Dict[str, Callable[[], Value]] = {
        "INTEGER": lambda: Integer(0),
        "REAL": lambda: Real(0.0),
        "CHAR": lambda: Char("\0"),
        "STRING": lambda: String(""),
        "BOOLEAN": lambda: Boolean(False),
    }
    try:
        return defaults[type_name]()
    except KeyError:
        raise InterpreterError(f"Type '{type_name}' not recognized") from None


class _InputReader:
    """Reads whitespace-separated words and whole lines from a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._pushed = ""

    def _read_char(self) -> str:
        if self._pushed:
            char, self._pushed = self._pushed, ""
            return char
        return self._stream.read(1)

    def word(self) -> str:
        char = self._read_char()
        while char and char.isspace():
            char = self._read_char()
        chars = []
        while char and not char.isspace():
            chars.append(char)
            char = self._read_char()
        if char:
            self._pushed = char
        return "".join(chars)

    def line(self) -> str:
        chars = []
        char = self._read_char()
        while char and char != "\n":
            chars.append(char)
            char = self._read_char()
        return "".join(chars)


class Interpreter:
    """Evaluates a syntax tree that has passed semantic analysis."""

    def __init__(
        self,
        tree: Node,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.tree = tree
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.call_stack = CallStack()
        self.functions: List[FunctionDeclaration] = []
        self._input = _InputReader(self.stdin)

    def interpret(self) -> None:
        """Run the whole tree."""
        self.visit(self.tree)

    # -- helpers -------------------------------------------------------

    @property
    def _frame(self) -> ActivationRecord:
        if not len(self.call_stack):
            raise InterpreterError("No activation record is active")
        return self.call_stack.peek()

    def _evaluate(self, node: Node, message: str) -> Value:
        result = self.visit(node)
        if not isinstance(result, Value):
            raise InterpreterError(message)
        return result

    def _condition(self, node: Node) -> bool:
        result = self.visit(node)
        if not isinstance(result, Boolean):
            raise InterpreterError("Boolean expected in conditional")
        return result.value

    def _bind_arguments(
        self, record: ActivationRecord, formal: List[Param], given: List[Node]
    ) -> None:
        if len(formal) != len(given):
            raise InterpreterError(
                f"'{record.name}' expects {len(formal)} arguments, got {len(given)}"
            )
        for param, argument in zip(formal, given):
            record.members[param.var.token.value] = self._evaluate(
                argument, "Given argument couldn't be converted to a value"
            )

    # -- dispatch ------------------------------------------------------

    def visit(self, node: Optional[Node]) -> Node:
        """Evaluate a node and return its value, or a NoOp for statements."""
        if node is None:
            raise InterpreterError("visit() received no node")
        for cls in type(node).__mro__:
            handler = self._DISPATCH.get(cls)
            if handler is not None:
                return handler(self, node)
        raise InterpreterError("unsupported node type in 'visit'.")

    # -- expressions ---------------------------------------------------

    def _visit_literal(self, node: Value) -> Value:
        return type(node)(node.value)

    def _visit_binary_op(self, node: BinaryOp) -> Value:
        left = self.visit(node.left)
        right = self.visit(node.right)
        if isinstance(left, Num) and isinstance(right, Num):
            return self._num_binary_op(left, node.op.value, right)
        if isinstance(left, Boolean) and isinstance(right, Boolean):
            operation = _BOOL_OPERATIONS.get(node.op.value)
            if operation is None:
                raise InterpreterError("Invalid operator type for type 'Boolean'")
            return Boolean(operation(left.value, right.value))
        if isinstance(left, String) and isinstance(right, String):
            if node.op.value != "+":
                raise InterpreterError("Invalid operator type for type 'String'")
            return String(left.value + right.value)
        raise InterpreterError("Unsupported type in 'visitBinaryOp'")

    @staticmethod
    def _num_binary_op(left: Num, op: str, right: Num) -> Value:
        if op in _NUM_ARITHMETIC:
            result = _NUM_ARITHMETIC[op](left.value, right.value)
            if isinstance(left, Real) or isinstance(right, Real):
                return Real(result)
            return Integer(int(result))
        if op == "/":
            if right.value == 0:
                raise InterpreterError("Division by zero")
            return Real(left.value / right.value)
        if op == "DIV":
            dividend, divisor = int(left.value), int(right.value)
            if divisor == 0:
                raise InterpreterError("Division by zero")
            quotient = abs(dividend) // abs(divisor)
            return Integer(-quotient if (dividend < 0) != (divisor < 0) else quotient)
        if op in _COMPARISONS:
            return Boolean(_COMPARISONS[op](left.value, right.value))
        raise InterpreterError("Invalid operator type for type 'Num'")

    def _visit_unary_op(self, node: UnaryOp) -> Value:
        operand = self.visit(node.expr)
        if not isinstance(operand, Num):
            raise InterpreterError("Non Num expression passed into UnaryOp")
        op = node.op.value
        if op in ("+", "-"):
            result = operand.value if op == "+" else -operand.value
            return Real(result) if isinstance(operand, Real) else Integer(int(result))
        if op == "NOT":
            return Boolean(not bool(operand.value))
        raise InterpreterError("Received unsupported unary operation type")

    def _visit_var(self, node: Var) -> Value:
        name = node.token.value
        members = self._frame.members
        value = members.get(name)
        if value is None:
            raise InterpreterError(f"Variable '{name}' has no value")
        return value

    # -- structure -----------------------------------------------------

    def _visit_program(self, node: Program) -> Node:
        self.call_stack.push(ActivationRecord(node.program_name, ARType.PROGRAM, 1))
        try:
            return self.visit(node.block)
        finally:
            self.call_stack.pop()

    def _visit_block(self, node: Block) -> Node:
        for declaration in node.declarations:
            self.visit(declaration)
        self.visit(node.compound_statement)
        return NoOp()

    def _visit_compound(self, node: Compound) -> Node:
        for child in node.children:
            self.visit(child)
        return NoOp()

    def _visit_nothing(self, node: Node) -> Node:
        return NoOp()

    def _visit_function_declaration(self, node: FunctionDeclaration) -> Node:
        self.functions.append(node)
        return NoOp()

    # -- statements ----------------------------------------------------

    def _visit_assign(self, node: Assign) -> Node:
        if not isinstance(node.left, Var):
            raise InterpreterError("Invalid node given to the left of the Assign node")
        value = self._evaluate(
            node.right, "Invalid node given to the right of the Assign node"
        )
        self._frame.members[node.left.token.value] = value
        return NoOp()

    def _visit_if_statement(self, node: IfStatement) -> Node:
        if self._condition(node.conditional):
            self.visit(node.if_statement)
        else:
            self.visit(node.else_statement)
        return NoOp()

    def _visit_while_loop(self, node: WhileLoop) -> Node:
        while self._condition(node.conditional):
            self.visit(node.statement)
        return NoOp()

    def _visit_for_loop(self, node: ForLoop) -> Node:
        self.visit(node.assignment)
        counter = node.assignment.left
        if not isinstance(counter, Var):
            raise InterpreterError("Loop counter must be a variable")
        name = counter.token.value
        start = self._frame.members.get(name)
        if not isinstance(start, Integer):
            raise InterpreterError("Start value must evaluate to type 'Integer'")
        end = self.visit(node.target)
        if not isinstance(end, Integer):
            raise InterpreterError("End value must evaluate to type 'Integer'")
        if node.increment.value == 1:
            values = range(start.value, end.value + 1)
        else:
            values = range(start.value, end.value - 1, -1)
        for value in values:
            self._frame.members[name] = Integer(value)
            self.visit(node.body)
        return NoOp()

    def _visit_repeat_until(self, node: RepeatUntil) -> Node:
        while True:
            for statement in node.statements:
                self.visit(statement)
            if self._condition(node.conditional):
                return NoOp()

    # -- calls ---------------------------------------------------------

    def _visit_procedure_call(self, node: ProcedureCall) -> Node:
        upper = node.name.upper()
        if upper == "LENGTH":
            return self._length(node.given_params)
        builtin = self._BUILTIN_PROCEDURES.get(upper)
        if builtin is not None:
            builtin(self, node.given_params)
            return NoOp()

        symbol = node.procedure_symbol
        if symbol is None or symbol.block is None:
            raise InterpreterError(f"Procedure '{node.name}' not resolved")
        record = ActivationRecord(node.name, ARType.PROCEDURE, self._frame.level + 1)
        self._bind_arguments(record, symbol.params, node.given_params)
        self.call_stack.push(record)
        try:
            self.visit(symbol.block)
        finally:
            self.call_stack.pop()
        return NoOp()

    def _visit_function_call(self, node: FunctionCall) -> Value:
        declaration = next(
            (f for f in reversed(self.functions) if f.name == node.name), None
        )
        if declaration is None:
            if node.name.upper() == "LENGTH":
                return self._length(node.given_params)
            raise InterpreterError(f"Function '{node.name}' not defined")

        symbol = node.function_symbol
        formal = symbol.params if symbol is not None else declaration.formal_params
        record = ActivationRecord(
            declaration.name, ARType.FUNCTION, self._frame.level + 1
        )
        self._bind_arguments(record, formal, node.given_params)
        self.call_stack.push(record)
        try:
            record.members[declaration.name] = default_value(declaration.return_type)
            self.visit(declaration.block)
            result = record.members[declaration.name]
        finally:
            self.call_stack.pop()
        if result is None:
            raise InterpreterError(f"Function '{declaration.name}' returned no value")
        return result

    # -- builtins ------------------------------------------------------

    def _write(self, params: List[Node]) -> None:
        for param in params:
            result = self.visit(param)
            if isinstance(result, Value):
                self.stdout.write(str(result))

    def _writeln(self, params: List[Node]) -> None:
        self._write(params)
        self.stdout.write("\n")

    def _read(self, params: List[Node]) -> None:
        for param in params:
            target = self._read_target(param)
            self._store_input(target, self._input.word())

    def _readln(self, params: List[Node]) -> None:
        if not params:
            self._input.word()
            return
        last = len(params) - 1
        for index, param in enumerate(params):
            target = self._read_target(param)
            if target.type == "STRING" and index == last:
                text = self._input.line()
            else:
                text = self._input.word()
            self._store_input(target, text)

    @staticmethod
    def _read_target(param: Node) -> Var:
        if not isinstance(param, Var):
            raise InterpreterError(
                "Valid variable must be given as argument for function 'read'"
            )
        return param

    def _store_input(self, target: Var, text: str) -> None:
        self._frame.members[target.token.value] = self._convert_input(target.type, text)

    @staticmethod
    def _convert_input(type_name: str, text: str) -> Value:
        if type_name == "INTEGER":
            match = _INT_PATTERN.match(text)
            if match is None:
                raise InterpreterError(f"Cannot read '{text}' as INTEGER")
            return Integer(int(match.group()))
        if type_name == "REAL":
            match = _REAL_PATTERN.match(text)
            if match is None:
                raise InterpreterError(f"Cannot read '{text}' as REAL")
            return Real(float(match.group()))
        if type_name == "CHAR":
            return Char(text[0] if text else "\0")
        if type_name == "STRING":
            return String(text)
        raise InterpreterError(f"Can't read variables of type {type_name}")

    def _length(self, params: List[Node]) -> Integer:
        if len(params) != 1:
            raise InterpreterError(
                "Incorrect number of arguments for function 'length'. "
                f"Expected 1 argument Received: {len(params)} arguments"
            )
        target = params[0]
        if isinstance(target, Param):
            if target.type.type is not TokenType.STRING_LITERAL:
                raise InterpreterError(
                    "Parameter for function 'length' must be of type 'STRING'"
                )
            target = target.var
        value = self.visit(target)
        if not isinstance(value, String):
            raise InterpreterError(
                "Parameter for function 'length' must be of type 'STRING'"
            )
        return Integer(len(value.value))

    _BUILTIN_PROCEDURES: Dict[str, Callable[["Interpreter", List[Node]], None]] = {
        "WRITELN": _writeln,
        "WRITE": _write,
        "READ": _read,
        "READLN": _readln,
    }

    _DISPATCH: Dict[type, Callable[["Interpreter", Node], Node]] = {
        Integer: _visit_literal,
        Real: _visit_literal,
        Boolean: _visit_literal,
        Char: _visit_literal,
        String: _visit_literal,
        BinaryOp: _visit_binary_op,
        UnaryOp: _visit_unary_op,
        Program: _visit_program,
        Compound: _visit_compound,
        Assign: _visit_assign,
        Var: _visit_var,
        NoOp: _visit_nothing,
        Block: _visit_block,
        VarDecl: _visit_nothing,
        Type: _visit_nothing,
        ProcedureDeclaration: _visit_nothing,
        ProcedureCall: _visit_procedure_call,
        IfStatement: _visit_if_statement,
        WhileLoop: _visit_while_loop,
        ForLoop: _visit_for_loop,
        RepeatUntil: _visit_repeat_until,
        FunctionDeclaration: _visit_function_declaration,
        FunctionCall: _visit_function_call,
    }