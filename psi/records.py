"""Activation records and the call stack used while running a program."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .nodes import Value


class ARType(enum.Enum):
    """Kinds of activation records."""

    PROGRAM = enum.auto()
    PROCEDURE = enum.auto()
    FUNCTION = enum.auto()
    LOOP = enum.auto()


@dataclass
class ActivationRecord:
    """The variables of one running program, procedure or function."""

    name: str
    type: ARType
    level: int
    members: Dict[str, Optional[Value]] = field(default_factory=dict)

    def __str__(self) -> str:
        return "".join(
            f"{name}: {value}\n"
            for name, value in self.members.items()
            if value is not None
        )


class CallStack:
    """A stack of activation records, innermost last."""

    def __init__(self) -> None:
        self._records: List[ActivationRecord] = []

    def push(self, record: ActivationRecord) -> None:
        """Put a record on top of the stack."""
        self._records.append(record)

    def pop(self) -> ActivationRecord:
        """Remove and return the top record."""
        if not self._records:
            raise IndexError("pop from an empty call stack")
        return self._records.pop()

    def peek(self) -> ActivationRecord:
        """Return the top record without removing it."""
        if not self._records:
            raise IndexError("peek at an empty call stack")
        return self._records[-1]

    def __len__(self) -> int:
        return len(self._records)