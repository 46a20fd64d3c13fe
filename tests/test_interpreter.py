import io

import pytest

from psi.errors import InterpreterError
from psi.interpreter import Interpreter, default_value
from psi.nodes import (
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
    NoOp,
    Op,
    Param,
    ProcedureCall,
    ProcedureDeclaration,
    Program,
    Real,
    RepeatUntil,
    String,
    Type,
    UnaryOp,
    Var,
    VarDecl,
    WhileLoop,
)
from psi.semantics import SemanticAnalyzer
from psi.tokens import Token, TokenType


def ident(name):
    return Token(TokenType.ID, name, 1, 1)


def var(name):
    return Var(ident(name))


def assign(name, expr):
    return Assign(var(name), Token(TokenType.ASSIGN, ":=", 1, 1), expr)


def call(name, *args):
    return ProcedureCall(name, list(args), ident(name))


def decl(name, token_type):
    return VarDecl(var(name), Type(token_type))


def binop(left, op, right):
    return BinaryOp(left, Op(op), right)


def program(statements, declarations=()):
    return Program("test", Block(list(declarations), Compound(list(statements))))


def run(tree, stdin=""):
    SemanticAnalyzer().visit(tree)
    out = io.StringIO()
    Interpreter(tree, io.StringIO(stdin), out).interpret()
    return out.getvalue()


def evaluate(node):
    return Interpreter(NoOp(), io.StringIO(), io.StringIO()).visit(node)


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("INTEGER", Integer(0)),
        ("REAL", Real(0.0)),
        ("CHAR", Char("\0")),
        ("STRING", String("")),
        ("BOOLEAN", Boolean(False)),
    ],
)
def test_default_value(type_name, expected):
    assert default_value(type_name) == expected


def test_default_value_unknown_type():
    with pytest.raises(InterpreterError, match="not recognized"):
        default_value("ARRAY")


def test_literal_is_copied():
    node = String("abc")
    result = evaluate(node)
    assert result == node
    assert result is not node


def test_integer_arithmetic_identities():
    assert evaluate(binop(Integer(7), "+", Integer(0))) == Integer(7)
    assert evaluate(binop(Integer(7), "*", Integer(1))) == Integer(7)
    assert evaluate(binop(Integer(7), "-", Integer(7))) == Integer(0)


def test_mixing_real_gives_real():
    assert evaluate(binop(Integer(4), "+", Real(0.0))) == Real(4.0)


def test_slash_always_gives_real():
    assert evaluate(binop(Integer(6), "/", Integer(1))) == Real(6.0)


def test_div_truncates_toward_zero():
    assert evaluate(binop(Integer(7), "DIV", Integer(1))) == Integer(7)
    assert evaluate(binop(Integer(-7), "DIV", Integer(2))) == Integer(-3)


def test_division_by_zero_raises():
    with pytest.raises(InterpreterError):
        evaluate(binop(Integer(1), "DIV", Integer(0)))
    with pytest.raises(InterpreterError):
        evaluate(binop(Integer(1), "/", Integer(0)))


def test_number_comparisons():
    assert evaluate(binop(Integer(1), "<", Integer(2))) == Boolean(True)
    assert evaluate(binop(Integer(1), ">=", Integer(2))) == Boolean(False)
    assert evaluate(binop(Real(1.0), "=", Integer(1))) == Boolean(True)


@pytest.mark.parametrize("op", ["AND", "OR", "XOR", "=", "!="])
def test_boolean_operation_symmetric(op):
    forward = evaluate(binop(Boolean(True), op, Boolean(False)))
    backward = evaluate(binop(Boolean(False), op, Boolean(True)))
    assert forward == backward


def test_boolean_xor_of_equal_values_is_false():
    assert evaluate(binop(Boolean(True), "XOR", Boolean(True))) == Boolean(False)


def test_string_concatenation():
    result = evaluate(binop(String("ab"), "+", String("cd")))
    assert result.value.startswith("ab")
    assert result.value.endswith("cd")
    assert evaluate(binop(String("ab"), "+", String(""))) == String("ab")


def test_string_subtraction_raises():
    with pytest.raises(InterpreterError, match="String"):
        evaluate(binop(String("a"), "-", String("b")))


def test_mixed_operand_types_raise():
    with pytest.raises(InterpreterError, match="Unsupported type"):
        evaluate(binop(Integer(1), "+", String("b")))
    with pytest.raises(InterpreterError):
        evaluate(binop(Char("a"), "+", Char("b")))


def test_unary_minus_twice_restores_value():
    node = UnaryOp(Op("-"), UnaryOp(Op("-"), Integer(5)))
    assert evaluate(node) == Integer(5)


def test_unary_plus_keeps_real():
    assert evaluate(UnaryOp(Op("+"), Real(2.5))) == Real(2.5)


def test_unary_not_of_number():
    assert evaluate(UnaryOp(Op("NOT"), Integer(0))) == Boolean(True)


def test_unary_on_boolean_raises():
    with pytest.raises(InterpreterError, match="Non Num"):
        evaluate(UnaryOp(Op("NOT"), Boolean(True)))


def test_visit_none_raises():
    with pytest.raises(InterpreterError):
        evaluate(None)


def test_if_requires_boolean():
    with pytest.raises(InterpreterError, match="Boolean expected"):
        evaluate(IfStatement(Integer(1), NoOp(), NoOp()))


def test_undefined_function_raises():
    with pytest.raises(InterpreterError, match="not defined"):
        evaluate(FunctionCall("nope", []))


def test_length_builtin():
    assert evaluate(FunctionCall("length", [String("hello")])) == Integer(5)


def test_length_argument_errors():
    with pytest.raises(InterpreterError, match="Incorrect number"):
        evaluate(FunctionCall("length", [String("a"), String("b")]))
    with pytest.raises(InterpreterError, match="STRING"):
        evaluate(FunctionCall("length", [Integer(3)]))


def test_assign_and_writeln():
    tree = program(
        [assign("x", Integer(3)), call("writeln", var("x"))],
        [decl("x", TokenType.INTEGER)],
    )
    assert run(tree) == "3\n"


def test_write_has_no_newline():
    tree = program([call("write", String("a")), call("write", String("b"))])
    assert run(tree) == "ab"


def test_writeln_boolean():
    assert run(program([call("writeln", Boolean(True))])) == "true\n"


def test_call_stack_empty_after_run():
    tree = program([call("write", String("a"))])
    interpreter = Interpreter(tree, io.StringIO(), io.StringIO())
    interpreter.interpret()
    assert len(interpreter.call_stack) == 0


def test_unassigned_variable_raises():
    tree = program([call("writeln", var("x"))], [decl("x", TokenType.INTEGER)])
    with pytest.raises(InterpreterError, match="no value"):
        run(tree)


def test_procedure_call_binds_arguments():
    procedure = ProcedureDeclaration(
        "show",
        [Param(var("n"), Type(TokenType.INTEGER))],
        Block([], Compound([call("writeln", var("n"))])),
    )
    tree = program([call("show", Integer(4))], [procedure])
    assert run(tree) == "4\n"


def test_procedure_does_not_see_globals():
    procedure = ProcedureDeclaration(
        "peek", [], Block([], Compound([call("writeln", var("x"))]))
    )
    tree = program(
        [assign("x", Integer(1)), call("peek")],
        [decl("x", TokenType.INTEGER), procedure],
    )
    with pytest.raises(InterpreterError):
        run(tree)


def test_function_returns_assigned_value():
    function = FunctionDeclaration(
        "same",
        [Param(var("n"), Type(TokenType.INTEGER))],
        Block([], Compound([assign("same", var("n"))])),
        "INTEGER",
    )
    tree = program(
        [assign("x", FunctionCall("same", [Integer(21)])), call("writeln", var("x"))],
        [decl("x", TokenType.INTEGER), function],
    )
    assert run(tree) == "21\n"


def test_function_without_assignment_returns_default():
    function = FunctionDeclaration("zero", [], Block([], Compound([])), "INTEGER")
    tree = program([call("writeln", FunctionCall("zero", []))], [function])
    assert run(tree) == "0\n"


def test_if_statement_branches():
    taken = program(
        [IfStatement(Boolean(True), call("write", String("yes")), call("write", String("no")))]
    )
    other = program(
        [IfStatement(Boolean(False), call("write", String("yes")), call("write", String("no")))]
    )
    assert run(taken) == "yes"
    assert run(other) == "no"


def test_while_loop():
    tree = program(
        [
            assign("i", Integer(0)),
            WhileLoop(
                binop(var("i"), "<", Integer(3)),
                Compound(
                    [call("write", var("i")), assign("i", binop(var("i"), "+", Integer(1)))]
                ),
            ),
        ],
        [decl("i", TokenType.INTEGER)],
    )
    assert run(tree) == "012"


def _for_program(start, end, increment):
    loop = ForLoop(
        assign("i", Integer(start)),
        Integer(end),
        Integer(increment),
        call("write", var("i")),
    )
    return program([loop], [decl("i", TokenType.INTEGER)])


def test_for_loop_up_and_down():
    up = run(_for_program(1, 3, 1))
    down = run(_for_program(3, 1, -1))
    assert up == "123"
    assert down == up[::-1]


def test_for_loop_with_empty_range_runs_nothing():
    assert run(_for_program(3, 1, 1)) == ""


def test_repeat_runs_at_least_once():
    tree = program([RepeatUntil(Boolean(True), [call("write", String("x"))])])
    assert run(tree) == "x"


def test_read_words():
    tree = program(
        [
            call("read", var("x"), var("s")),
            call("writeln", var("x")),
            call("writeln", var("s")),
        ],
        [decl("x", TokenType.INTEGER), decl("s", TokenType.STRING)],
    )
    assert run(tree, "12 hello\n") == "12\nhello\n"


def test_readln_last_string_takes_rest_of_line():
    tree = program(
        [call("readln", var("n"), var("s")), call("write", var("s"))],
        [decl("n", TokenType.INTEGER), decl("s", TokenType.STRING)],
    )
    assert run(tree, "7 rest of line\n") == " rest of line"


def test_read_real():
    tree = program(
        [call("read", var("r")), call("write", var("r"))],
        [decl("r", TokenType.REAL)],
    )
    output = run(tree, "2.5")
    assert output.startswith("2.5")
    assert float(output) == 2.5


def test_read_char_takes_first_character():
    tree = program(
        [call("read", var("c")), call("write", var("c"))],
        [decl("c", TokenType.CHAR)],
    )
    assert run(tree, "xyz") == "x"


def test_read_invalid_integer_raises():
    tree = program([call("read", var("x"))], [decl("x", TokenType.INTEGER)])
    with pytest.raises(InterpreterError):
        run(tree, "abc")


def test_read_boolean_raises():
    tree = program([call("read", var("b"))], [decl("b", TokenType.BOOLEAN)])
    with pytest.raises(InterpreterError, match="Can't read"):
        run(tree, "true")