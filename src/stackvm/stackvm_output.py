"""StackVM output watcher implementations.

PRINT instructions and step tracing are reported through watchers so callers
decide where output goes.
"""

import logging
from pathlib import Path
import sys
from types import TracebackType
from typing import IO, List, Optional

from stackvm.stackvm_bytecode import Instruction


class StackVMStdoutWatcher:
    """Watcher that writes each PRINT value as a line on a text stream."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        """
        Initialize stream watcher.

        Args:
            stream: Stream to write to (defaults to whatever sys.stdout is at print time)
        """
        self.stream = stream

    def on_print(self, line: str) -> None:
        """
        Write an output line.

        Args:
            line: Decimal representation of the value on top of the stack
        """
        print(line, file=self.stream if self.stream is not None else sys.stdout)


class StackVMFileWatcher(StackVMStdoutWatcher):
    """
    Watcher that writes PRINT output to a file, one value per line.

    The file is truncated when the with block is entered and each line is
    flushed as it is printed, so a run that aborts leaves exactly the values
    printed before the failing instruction.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)

    def __enter__(self) -> 'StackVMFileWatcher':
        self.stream = self.path.open('w', encoding='utf-8')
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None
    ) -> None:
        if self.stream is not None:
            self.stream.close()
            self.stream = None

    def on_print(self, line: str) -> None:
        if self.stream is None:
            raise RuntimeError(f"Output file '{self.path}' is not open; use the watcher in a with block")

        super().on_print(line)
        self.stream.flush()


class StackVMLoggingStepWatcher:
    """Step watcher that logs every executed instruction at DEBUG level."""

    def __init__(self) -> None:
        self._logger = logging.getLogger("StackVMTrace")

    def on_step(self, instruction: Instruction, stack: List[int]) -> None:
        """Log the instruction with the stack after it."""
        self._logger.debug("%6d: %-17r stack=%s", instruction.offset, instruction, stack)


class StackVMBufferingStepWatcher:
    """Step watcher that records every executed instruction with the stack after it."""

    def __init__(self) -> None:
        self.steps: List[tuple[Instruction, List[int]]] = []

    def on_step(self, instruction: Instruction, stack: List[int]) -> None:
        """Record a step; the stack is copied so later changes don't alias it."""
        self.steps.append((instruction, list(stack)))
