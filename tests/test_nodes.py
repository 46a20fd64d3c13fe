import pytest

from psi.nodes import (
    Assign,
    Boolean,
    Char,
    Compound,
    ForLoop,
    Integer,
    NoOp,
    Num,
    Real,
    String,
    Value,
    Var,
)
from psi.tokens import Token, TokenType


def _var(name="i"):
    return Var(Token(TokenType.ID, name, 1, 1))


def _assign(name="i", value=1):
    return Assign(_var(name), Token(TokenType.ASSIGN, ":=", 1, 1), Integer(value))


def test_integer_str():
    assert str(Integer(42)) == "42"


def test_integer_truncates():
    assert Integer(3.9).value == 3
    assert str(Integer(-2.7)) == str(Integer(-2))


def test_real_str_six_decimals():
    assert str(Real(2.5)) == "2.500000"


def test_real_holds_float():
    assert Real(2).value == 2.0
    assert isinstance(Real(2).value, float)


def test_boolean_str():
    assert str(Boolean(True)) == "true"
    assert str(Boolean(False)) == "false"


def test_char_and_string_str():
    assert str(Char("a")) == "a"
    assert str(String("hello world")) == "hello world"


def test_is_real_flags():
    assert Real(1.0).is_real is True
    assert Integer(1).is_real is False


def test_numeric_hierarchy():
    integer = Integer(1)
    real = Real(1.0)
    text = String("x")
    assert isinstance(integer, Num) and integer.value == 1
    assert isinstance(real, Num) and real.value == 1.0
    assert not isinstance(Boolean(True), Num)
    assert isinstance(text, Value) and str(text) == "x"


def test_value_equality_depends_on_class():
    assert Integer(1) == Integer(1)
    assert Integer(1) != Real(1.0)


def test_compound_default_children_independent():
    first = Compound()
    second = Compound()
    first.children.append(NoOp())
    assert second.children == []
    assert len(first.children) == 1


def test_var_type_defaults_empty():
    assert _var().type == ""


def test_for_loop_statements_from_compound():
    a, b = _assign("x", 1), _assign("y", 2)
    loop = ForLoop(_assign(), Integer(10), Integer(1), Compound([a, b]))
    statements = loop.statements
    assert len(statements) == 2
    assert statements[0] is a
    assert statements[1] is b


def test_for_loop_statements_single_body():
    body = _assign("x", 5)
    loop = ForLoop(_assign(), Integer(10), Integer(-1), body)
    assert loop.statements == [body]
    assert loop.statements[0] is body


@pytest.mark.parametrize("value", [0, 7, -3])
def test_integer_round_trip_through_str(value):
    assert int(str(Integer(value))) == value