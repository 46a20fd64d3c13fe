"""Token types and tokens produced by the lexer."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Every kind of token the language knows."""

    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    SINGLE_QUOTE = enum.auto()
    DOUBLE_QUOTE = enum.auto()
    AND = enum.auto()
    OR = enum.auto()
    NOT = enum.auto()
    XOR = enum.auto()
    EQUAL = enum.auto()
    NOT_EQUAL = enum.auto()
    LESS_THAN = enum.auto()
    GREATER_THAN = enum.auto()
    LTE = enum.auto()
    GTE = enum.auto()
    END_OF_FILE = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    LBRACKET = enum.auto()
    RBRACKET = enum.auto()
    DOT = enum.auto()
    ID = enum.auto()
    ASSIGN = enum.auto()
    SEMI = enum.auto()
    COLON = enum.auto()
    COMMA = enum.auto()
    INTEGER_CONST = enum.auto()
    REAL_CONST = enum.auto()
    STRING_LITERAL = enum.auto()
    PROGRAM = enum.auto()
    INTEGER = enum.auto()
    REAL = enum.auto()
    BOOLEAN = enum.auto()
    CHAR = enum.auto()
    STRING = enum.auto()
    ARRAY = enum.auto()
    OF = enum.auto()
    TRUE = enum.auto()
    FALSE = enum.auto()
    INT_DIV = enum.auto()
    VAR = enum.auto()
    PROCEDURE = enum.auto()
    BEGIN = enum.auto()
    END = enum.auto()
    IF = enum.auto()
    THEN = enum.auto()
    ELSE = enum.auto()
    WHILE = enum.auto()
    DO = enum.auto()
    FOR = enum.auto()
    TO = enum.auto()
    DOWNTO = enum.auto()
    REPEAT = enum.auto()
    UNTIL = enum.auto()
    FUNCTION = enum.auto()
    UNKNOWN = enum.auto()


_OPERATOR_NAMES = {
    TokenType.GREATER_THAN: ">",
    TokenType.EQUAL: "=",
    TokenType.NOT_EQUAL: "!=",
    TokenType.LESS_THAN: "<",
    TokenType.LTE: "<=",
    TokenType.GTE: ">=",
}

_SYMBOLS = {
    **_OPERATOR_NAMES,
    TokenType.ADD: "+",
    TokenType.SUB: "-",
    TokenType.MUL: "*",
    TokenType.DIV: "/",
    TokenType.SINGLE_QUOTE: "'",
    TokenType.DOUBLE_QUOTE: '"',
    TokenType.END_OF_FILE: "EOF",
    TokenType.LPAREN: "(",
    TokenType.RPAREN: ")",
    TokenType.LBRACKET: "{",
    TokenType.RBRACKET: "}",
    TokenType.DOT: ".",
    TokenType.ASSIGN: ":=",
    TokenType.SEMI: ";",
    TokenType.COLON: ":",
    TokenType.COMMA: ",",
}

_KEYWORDS = {
    word: TokenType[word]
    for word in (
        "PROGRAM", "INTEGER", "REAL", "BOOLEAN", "CHAR", "STRING", "ARRAY",
        "OF", "AND", "NOT", "OR", "XOR", "TRUE", "FALSE", "VAR", "PROCEDURE",
        "BEGIN", "END", "IF", "THEN", "ELSE", "WHILE", "DO", "FOR", "TO",
        "DOWNTO", "REPEAT", "UNTIL", "FUNCTION",
    )
}
# The DIV keyword shares its token type with the "/" operator.
_KEYWORDS["DIV"] = TokenType.DIV


def token_symbol(token_type: TokenType) -> str:
    """Return the text a token type stands for, or its name for word-like types."""
    return _SYMBOLS.get(token_type, token_type.name)


def token_type_name(token_type: TokenType) -> str:
    """Return the display name of a token type; comparison operators show as symbols."""
    return _OPERATOR_NAMES.get(token_type, token_type.name)


def keyword_type(word: str) -> TokenType:
    """Return the token type of an upper-case reserved word."""
    try:
        return _KEYWORDS[word]
    except KeyError:
        raise ValueError(f"{word!r} is not a reserved keyword") from None


@dataclass(frozen=True)
class Token:
    """A token with its text and the position where it starts."""

    type: TokenType = TokenType.UNKNOWN
    value: str = "UNKNOWN"
    lineno: int = 0
    column: int = 0

    def __str__(self) -> str:
        return (
            f"<TokenType.{token_type_name(self.type)}, {self.value}, "
            f"{self.lineno}:{self.column}>"
        )