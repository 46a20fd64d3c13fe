"""Error codes and the exceptions raised while lexing, checking and running programs."""

from __future__ import annotations

import enum
from typing import Any, Optional


class ErrorCode(enum.Enum):
    """Kinds of errors reported while processing a program."""

    UNEXPECTED_TOKEN = enum.auto()
    ID_NOT_FOUND = enum.auto()
    DUPLICATE_ID = enum.auto()
    INCORRECT_NUMBER_OF_ARGUMENTS = enum.auto()
    INCORRECT_TYPE = enum.auto()
    UNSUPPORTED_OPERATION = enum.auto()
    NONE = enum.auto()


_MESSAGES = {
    ErrorCode.UNEXPECTED_TOKEN: "Unexpected Token",
    ErrorCode.ID_NOT_FOUND: "Identifier Not Found",
    ErrorCode.DUPLICATE_ID: "Duplicate Identifier",
    ErrorCode.INCORRECT_NUMBER_OF_ARGUMENTS: "Incorrect Number of Arguments",
    ErrorCode.INCORRECT_TYPE: "Incorrect Type",
    ErrorCode.UNSUPPORTED_OPERATION: "Unsupported Operation",
}


def error_message(code: ErrorCode) -> str:
    """Return the human-readable description of an error code."""
    return _MESSAGES.get(code, "Unknown Error Code")


class PsiError(Exception):
    """Base class of every error the package raises."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NONE,
        token: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.token = token


class LexerError(PsiError):
    """Raised when the source text holds a character that starts no token."""

    def __init__(
        self,
        char: Optional[str],
        lineno: int,
        column: int,
        message: Optional[str] = None,
    ) -> None:
        shown = char if char is not None else ""
        if message is None:
            message = f"Lexer error on '{shown}' line: {lineno} column: {column}"
        super().__init__(message)
        self.char = char
        self.lineno = lineno
        self.column = column


class SemanticError(PsiError):
    """Raised when a program is well formed but meaningless."""


class InterpreterError(PsiError):
    """Raised when a program fails while running."""