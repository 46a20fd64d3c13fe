"""Turns program text into a stream of tokens."""

from __future__ import annotations

from typing import Iterator, List, Optional

from .errors import LexerError
from .tokens import Token, TokenType, keyword_type

_WHITESPACE = frozenset(" \t\n\r\v\f")
_DIGITS = frozenset("0123456789")

_SINGLE_CHAR = {
    "+": TokenType.ADD,
    "-": TokenType.SUB,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ".": TokenType.DOT,
    ";": TokenType.SEMI,
    ",": TokenType.COMMA,
    "=": TokenType.EQUAL,
    "'": TokenType.SINGLE_QUOTE,
}

# Characters that form a two-character token when followed by "=".
_WITH_EQUALS = {
    ":": (TokenType.COLON, TokenType.ASSIGN),
    ">": (TokenType.GREATER_THAN, TokenType.GTE),
    "<": (TokenType.LESS_THAN, TokenType.LTE),
}


def _is_digit(char: Optional[str]) -> bool:
    return char is not None and char in _DIGITS


def _is_alpha(char: Optional[str]) -> bool:
    return char is not None and char.isascii() and char.isalpha()


def _is_alnum(char: Optional[str]) -> bool:
    return _is_alpha(char) or _is_digit(char)


class Lexer:
    """Reads tokens one at a time from program text."""

    RESERVED_KEYWORDS = (
        "PROGRAM", "INTEGER", "REAL", "BOOLEAN", "CHAR", "STRING", "ARRAY",
        "OF", "TRUE", "FALSE", "AND", "OR", "NOT", "XOR", "DIV", "VAR",
        "PROCEDURE", "BEGIN", "END", "IF", "THEN", "ELSE", "WHILE", "DO",
        "FOR", "TO", "DOWNTO", "REPEAT", "UNTIL", "FUNCTION",
    )

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.lineno = 1
        self.column = 1
        self.current_char: Optional[str] = text[0] if text else None

    def _error(self) -> LexerError:
        return LexerError(self.current_char, self.lineno, self.column)

    def advance(self) -> None:
        """Move to the next character, keeping line and column up to date."""
        self.pos += 1
        if self.pos < len(self.text):
            if self.current_char == "\n":
                self.lineno += 1
                self.column = 1
            else:
                self.column += 1
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek(self) -> Optional[str]:
        """Return the character after the current one without moving."""
        if self.pos + 1 < len(self.text):
            return self.text[self.pos + 1]
        return None

    def identifier(self) -> Token:
        """Read an identifier or a reserved keyword."""
        lineno, column = self.lineno, self.column
        chars = []
        while _is_alnum(self.current_char):
            chars.append(self.current_char)
            self.advance()
        value = "".join(chars)
        upper = value.upper()
        if upper in self.RESERVED_KEYWORDS:
            return Token(keyword_type(upper), upper, lineno, column)
        return Token(TokenType.ID, value, lineno, column)

    def _number(self) -> Token:
        lineno, column = self.lineno, self.column
        chars = []
        while _is_digit(self.current_char):
            chars.append(self.current_char)
            self.advance()
        if self.current_char != ".":
            return Token(TokenType.INTEGER_CONST, "".join(chars), lineno, column)
        chars.append(".")
        self.advance()
        while _is_digit(self.current_char):
            chars.append(self.current_char)
            self.advance()
        return Token(TokenType.REAL_CONST, "".join(chars), lineno, column)

    def _skip_comment(self) -> None:
        lineno, column = self.lineno, self.column
        while self.current_char != "}":
            if self.current_char is None:
                raise LexerError(
                    "{", lineno, column,
                    message=f"Unterminated comment starting line: {lineno} column: {column}",
                )
            self.advance()
        self.advance()

    def _string(self) -> Token:
        lineno, column = self.lineno, self.column
        self.advance()
        chars = []
        while self.current_char != '"':
            if self.current_char is None:
                raise LexerError(
                    '"', lineno, column,
                    message=f"Unterminated string starting line: {lineno} column: {column}",
                )
            chars.append(self.current_char)
            self.advance()
        self.advance()
        return Token(TokenType.STRING_LITERAL, "".join(chars), lineno, column)

    def get_next_token(self) -> Token:
        """Return the next token, or an END_OF_FILE token once the text is used up."""
        while self.current_char is not None:
            char = self.current_char
            if char in _WHITESPACE:
                self.advance()
                continue
            if char == "{":
                self._skip_comment()
                continue
            if _is_alpha(char):
                return self.identifier()
            if _is_digit(char):
                return self._number()

            lineno, column = self.lineno, self.column
            if char in _WITH_EQUALS:
                plain, with_equals = _WITH_EQUALS[char]
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(with_equals, char + "=", lineno, column)
                self.advance()
                return Token(plain, char, lineno, column)
            if char in _SINGLE_CHAR:
                self.advance()
                return Token(_SINGLE_CHAR[char], char, lineno, column)
            if char == "!":
                self.advance()
                if self.current_char == "=":
                    self.advance()
                    return Token(TokenType.NOT_EQUAL, "!=", lineno, column)
                raise self._error()
            if char == '"':
                return self._string()
            raise self._error()

        return Token(TokenType.END_OF_FILE, "END_OF_FILE", self.lineno, self.column)

    def __iter__(self) -> Iterator[Token]:
        """Yield the remaining tokens, ending with the END_OF_FILE token."""
        while True:
            token = self.get_next_token()
            yield token
            if token.type is TokenType.END_OF_FILE:
                return


def tokenize(text: str) -> List[Token]:
    """Return every token of a text, the END_OF_FILE token last."""
    return list(Lexer(text))