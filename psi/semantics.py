"""Symbols, scoped symbol tables and the semantic checks run before a program executes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, NoReturn, Optional

from .errors import ErrorCode, SemanticError, error_message
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
    Param,
    ProcedureCall,
    ProcedureDeclaration,
    Program,
    Real,
    RepeatUntil,
    String,
    UnaryOp,
    Value,
    Var,
    VarDecl,
    WhileLoop,
)
from .tokens import Token, token_symbol

_COMPARISONS = frozenset({"=", "!=", ">", ">=", "<", "<=", "AND", "OR"})
_BUILTIN_PROCEDURES = frozenset({"WRITELN", "WRITE", "READ", "READLN"})
_BUILTIN_NAMES = (
    "NUM", "INTEGER", "REAL", "BOOLEAN", "CHAR", "STRING", "WRITELN", "WRITE",
)


@dataclass(eq=False)
class Symbol:
    """A named entry of a symbol table; the type defaults to the name."""

    name: str
    type: str = ""

    def __post_init__(self) -> None:
        if not self.type:
            self.type = self.name

    def __str__(self) -> str:
        return f"<{self.name}, {self.type}>"


@dataclass(eq=False)
class BuiltInSymbol(Symbol):
    """A type or routine the language provides."""


@dataclass(eq=False)
class VarSymbol(Symbol):
    """A declared variable or parameter."""


@dataclass(eq=False)
class ProcedureSymbol(Symbol):
    """A declared procedure with its parameters and body."""

    params: List[Param] = field(default_factory=list)
    block: Optional[Block] = None


@dataclass(eq=False)
class FunctionSymbol(Symbol):
    """A declared function with its return type, parameters and body."""

    params: List[Param] = field(default_factory=list)
    block: Optional[Block] = None


class EmptySymbol(Symbol):
    """The symbol of a construct that has no type."""

    def __init__(self) -> None:
        super().__init__("NONE")


class ScopedSymbolTable:
    """Symbols of one scope, falling back to the scope that encloses it."""

    def __init__(
        self,
        name: str,
        level: int,
        enclosing_scope: Optional["ScopedSymbolTable"] = None,
    ) -> None:
        self.name = name
        self.level = level
        self.enclosing_scope = enclosing_scope
        self.symbols: Dict[str, Symbol] = {}
        if enclosing_scope is None and level == 0:
            self.add_builtins()

    def add_builtins(self) -> None:
        """Define the built-in types and routines."""
        for builtin in _BUILTIN_NAMES:
            self.define(BuiltInSymbol(builtin))

    def define(self, symbol: Symbol) -> None:
        """Add a symbol, replacing any of the same name in this scope."""
        self.symbols[symbol.name] = symbol

    def lookup(self, name: str) -> Symbol:
        """Find a symbol in this scope or an enclosing one."""
        scope: Optional[ScopedSymbolTable] = self
        while scope is not None:
            if name in scope.symbols:
                return scope.symbols[name]
            scope = scope.enclosing_scope
        raise SemanticError(f"Symbol '{name}' not found.", ErrorCode.ID_NOT_FOUND)

    def __contains__(self, name: str) -> bool:
        return name in self.symbols

    def __str__(self) -> str:
        enclosing = self.enclosing_scope.name if self.enclosing_scope else "None"
        lines = [
            f"Name: {self.name}",
            f"Level: {self.level}",
            f"Enclosing Scope: {enclosing}",
        ]
        lines.extend(f"{name}: {symbol}" for name, symbol in self.symbols.items())
        return "".join(line + "\n" for line in lines)


class SemanticAnalyzer:
    """Walks a syntax tree, resolving names and checking types."""

    def __init__(self) -> None:
        self.current_scope = ScopedSymbolTable("Builtins", 0)

    # -- error helpers -------------------------------------------------

    @staticmethod
    def _error(code: ErrorCode, token: Token) -> NoReturn:
        raise SemanticError(f"{error_message(code)} -> {token}", code, token)

    @staticmethod
    def _incorrect_type(expected: str, received: str, symbol: Symbol) -> NoReturn:
        raise SemanticError(
            f"Expected type of: {expected} for symbol {symbol} "
            f"Received type of: {received}",
            ErrorCode.INCORRECT_TYPE,
        )

    def _enter_scope(self, name: str) -> ScopedSymbolTable:
        scope = ScopedSymbolTable(name, self.current_scope.level + 1, self.current_scope)
        self.current_scope = scope
        return scope

    def _leave_scope(self) -> None:
        enclosing = self.current_scope.enclosing_scope
        if enclosing is not None:
            self.current_scope = enclosing

    def _define_params(self, params: List[Param], owner: List[Param]) -> None:
        for param in params:
            name = param.var.token.value
            self.current_scope.define(VarSymbol(name, token_symbol(param.type.type)))
            owner.append(param)

    def _visit_all(self, nodes: List[Node]) -> None:
        for node in nodes:
            self.visit(node)

    def _check_boolean(self, node: Node) -> None:
        if self.visit(node).type != "BOOLEAN":
            raise SemanticError(
                "Expected a 'BOOLEAN' conditional", ErrorCode.INCORRECT_TYPE
            )

    # -- dispatch ------------------------------------------------------

    def visit(self, node: Optional[Node]) -> Symbol:
        """Check a node and return the symbol describing its type."""
        if node is None:
            raise SemanticError("visit() received no node")
        for cls in type(node).__mro__:
            handler = self._DISPATCH.get(cls)
            if handler is not None:
                return handler(self, node)
        raise SemanticError("unsupported node type in 'visit'.")

    # -- visitors ------------------------------------------------------

    def _visit_program(self, node: Program) -> Symbol:
        self.current_scope = ScopedSymbolTable("Global", 1, self.current_scope)
        self.visit(node.block)
        self._leave_scope()
        return EmptySymbol()

    def _visit_block(self, node: Block) -> Symbol:
        self._visit_all(node.declarations)
        self.visit(node.compound_statement)
        return EmptySymbol()

    def _visit_var_decl(self, node: VarDecl) -> Symbol:
        token = node.var.token
        name = token.value
        if name in self.current_scope:
            self._error(ErrorCode.DUPLICATE_ID, token)
        self.current_scope.define(VarSymbol(name, token_symbol(node.type.type)))
        return EmptySymbol()

    def _visit_assign(self, node: Assign) -> Symbol:
        var_symbol = self.visit(node.left)
        given = self.visit(node.right)
        if var_symbol.type in ("INTEGER", "REAL") and given.name == "NUM":
            return EmptySymbol()
        if var_symbol.type != given.type:
            self._incorrect_type(var_symbol.type, given.type, var_symbol)
        return EmptySymbol()

    def _visit_var(self, node: Var) -> Symbol:
        symbol = self.current_scope.lookup(node.token.value)
        node.type = symbol.type
        return symbol

    def _visit_no_op(self, node: NoOp) -> Symbol:
        return EmptySymbol()

    def _visit_binary_op(self, node: BinaryOp) -> Symbol:
        left = self.visit(node.left)
        right = self.visit(node.right)
        op = node.op.value
        numeric = (left.type == "INTEGER" and right.type == "INTEGER") or (
            left.type == "REAL" or right.type == "REAL"
        )
        if numeric:
            return BuiltInSymbol("BOOLEAN" if op in _COMPARISONS else "NUM")
        for kind in ("BOOLEAN", "CHAR", "STRING"):
            if left.type == kind and right.type == kind:
                return BuiltInSymbol(kind)
        self._incorrect_type(left.type, right.type, left)

    def _visit_unary_op(self, node: UnaryOp) -> Symbol:
        self.visit(node.expr)
        return EmptySymbol()

    def _visit_compound(self, node: Compound) -> Symbol:
        self._visit_all(node.children)
        return EmptySymbol()

    def _visit_procedure_declaration(self, node: ProcedureDeclaration) -> Symbol:
        symbol = ProcedureSymbol(node.name)
        self.current_scope.define(symbol)
        self._enter_scope(node.name)
        self._define_params(node.formal_params, symbol.params)
        symbol.block = node.block
        self.visit(node.block)
        self._leave_scope()
        return EmptySymbol()

    def _visit_procedure_call(self, node: ProcedureCall) -> Symbol:
        if node.name.upper() in _BUILTIN_PROCEDURES:
            self._visit_all(node.given_params)
            return EmptySymbol()
        symbol = self.current_scope.lookup(node.name)
        if not isinstance(symbol, ProcedureSymbol):
            self._error(ErrorCode.ID_NOT_FOUND, node.token)
        node.procedure_symbol = symbol
        if len(symbol.params) != len(node.given_params):
            self._error(ErrorCode.INCORRECT_NUMBER_OF_ARGUMENTS, node.token)
        self._visit_all(node.given_params)
        return EmptySymbol()

    def _visit_function_declaration(self, node: FunctionDeclaration) -> Symbol:
        symbol = FunctionSymbol(node.name, node.return_type)
        self.current_scope.define(symbol)
        scope = self._enter_scope(node.name)
        scope.define(VarSymbol(node.name, node.return_type))
        self._define_params(node.formal_params, symbol.params)
        symbol.block = node.block
        self.visit(node.block)
        self._leave_scope()
        return symbol

    def _visit_function_call(self, node: FunctionCall) -> Symbol:
        if node.name.upper() == "LENGTH":
            self._visit_all(node.given_params)
            return EmptySymbol()
        symbol = self.current_scope.lookup(node.name)
        if not isinstance(symbol, FunctionSymbol):
            raise SemanticError(
                f"Function definition for function '{node.name}' not found",
                ErrorCode.ID_NOT_FOUND,
            )
        node.function_symbol = symbol
        expected, given = len(symbol.params), len(node.given_params)
        if expected != given:
            raise SemanticError(
                f"Incorrect number of arguments for function '{node.name}'. "
                f"Expected {expected} arguments, got {given} arguments",
                ErrorCode.INCORRECT_NUMBER_OF_ARGUMENTS,
            )
        self._visit_all(node.given_params)
        return self.current_scope.lookup(symbol.name)

    def _visit_integer(self, node: Integer) -> Symbol:
        return BuiltInSymbol("INTEGER")

    def _visit_real(self, node: Real) -> Symbol:
        return BuiltInSymbol("REAL")

    def _visit_boolean(self, node: Boolean) -> Symbol:
        return BuiltInSymbol("BOOLEAN")

    def _visit_char(self, node: Char) -> Symbol:
        return BuiltInSymbol("CHAR")

    def _visit_string(self, node: String) -> Symbol:
        return BuiltInSymbol("STRING")

    def _visit_unrecognized_value(self, node: Value) -> Symbol:
        raise SemanticError("Unrecognized type given", ErrorCode.INCORRECT_TYPE)

    def _visit_if_statement(self, node: IfStatement) -> Symbol:
        self._check_boolean(node.conditional)
        self.visit(node.if_statement)
        self.visit(node.else_statement)
        return EmptySymbol()

    def _visit_while_loop(self, node: WhileLoop) -> Symbol:
        self._check_boolean(node.conditional)
        self.visit(node.statement)
        return EmptySymbol()

    def _visit_for_loop(self, node: ForLoop) -> Symbol:
        counter = node.assignment.left
        counter_name = counter.token.value if isinstance(counter, Var) else ""
        self.visit(node.assignment)
        self.visit(node.target)
        for child in node.statements:
            if (
                isinstance(child, Assign)
                and isinstance(child.left, Var)
                and child.left.token.value == counter_name
            ):
                raise SemanticError(
                    f"Cannot assign to loop variable '{counter_name}' inside a for loop"
                )
        return EmptySymbol()

    def _visit_repeat_until(self, node: RepeatUntil) -> Symbol:
        self._check_boolean(node.conditional)
        self._visit_all(node.statements)
        return EmptySymbol()

    _DISPATCH: Dict[type, Callable[["SemanticAnalyzer", Node], Symbol]] = {
        BinaryOp: _visit_binary_op,
        UnaryOp: _visit_unary_op,
        Program: _visit_program,
        Compound: _visit_compound,
        Assign: _visit_assign,
        NoOp: _visit_no_op,
        Block: _visit_block,
        VarDecl: _visit_var_decl,
        Var: _visit_var,
        ProcedureDeclaration: _visit_procedure_declaration,
        ProcedureCall: _visit_procedure_call,
        Integer: _visit_integer,
        Real: _visit_real,
        Boolean: _visit_boolean,
        Char: _visit_char,
        String: _visit_string,
        Value: _visit_unrecognized_value,
        IfStatement: _visit_if_statement,
        WhileLoop: _visit_while_loop,
        ForLoop: _visit_for_loop,
        RepeatUntil: _visit_repeat_until,
        FunctionDeclaration: _visit_function_declaration,
        FunctionCall: _visit_function_call,
    }