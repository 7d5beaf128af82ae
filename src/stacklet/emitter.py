"""
Instruction Sinks
=================

The parser does not build an instruction list of its own. It writes each
stack-machine instruction, as a line of text, to an InstructionSink the
moment the matching grammar rule completes.

Instruction Forms
-----------------
| Line          | Meaning                                    |
|---------------|--------------------------------------------|
| push <value>  | push a literal or named value              |
| add           | pop two, push their sum                    |
| sub           | pop two, push their difference             |
| pop <name>    | pop one value and store it under <name>    |

Two sinks are provided: ListSink collects lines in memory (used by the
compiler and the tests) and StreamSink writes them straight to a text
stream such as sys.stdout.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, TextIO

logger = logging.getLogger(__name__)


class InstructionSink(ABC):
    """Append-only destination for emitted instruction lines."""

    @abstractmethod
    def emit(self, line: str) -> None:
        """Append one instruction line."""

    def push(self, value: str) -> None:
        self.emit(f"push {value}")

    def add(self) -> None:
        self.emit("add")

    def sub(self) -> None:
        self.emit("sub")

    def pop(self, name: str) -> None:
        self.emit(f"pop {name}")


class ListSink(InstructionSink):
    """
    Collects emitted lines in memory.

    Lines already emitted are never removed, so after a failed parse
    `lines` holds whatever was produced before the error.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []

    def emit(self, line: str) -> None:
        logger.debug(f"Emit: {line}")
        self.lines.append(line)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def text(self) -> str:
        """Return all lines joined, one instruction per line."""
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


class StreamSink(InstructionSink):
    """Writes each line to a text stream as soon as it is emitted."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def emit(self, line: str) -> None:
        logger.debug(f"Emit: {line}")
        self.stream.write(line + "\n")
