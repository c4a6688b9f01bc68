"""StackVM Virtual Machine - executes integer-encoded programs."""

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from stackvm.stackvm_bytecode import Instruction, Opcode, format_register
from stackvm.stackvm_error import (
    StackVMError, StackVMDivisionByZeroError, StackVMMissingOperandError, StackVMStackUnderflowError,
    StackVMUnknownRegisterError,
)
from stackvm.stackvm_output import StackVMStdoutWatcher


class StackVMOutputWatcher(Protocol):
    """Protocol for receiving PRINT output."""
    def on_print(self, line: str) -> None:
        """
        Called once for each PRINT instruction executed.

        Args:
            line: Decimal representation of the value on top of the stack
        """


class StackVMStepWatcher(Protocol):
    """Protocol for observing execution one instruction at a time."""
    def on_step(self, instruction: Instruction, stack: List[int]) -> None:
        """
        Called after each instruction has executed.

        Args:
            instruction: The instruction that just executed
            stack: The evaluation stack after execution (must not be modified)
        """


@dataclass
class Frame:
    """
    Execution state for a single run.

    A new frame is created by every call to execute(), so runs never share a
    stack or register table.
    """
    program: Tuple[int, ...]
    pc: int = 0  # Program counter
    stack: List[int] = field(default_factory=list)
    registers: Dict[int, int] = field(default_factory=dict)
    output: List[str] = field(default_factory=list)
    steps: int = 0
    skipped: int = 0


@dataclass
class ExecutionResult:
    """Outcome of a completed run."""
    stack: List[int]
    registers: Dict[int, int]
    output: List[str]
    steps: int
    skipped: int

    @property
    def top(self) -> int | None:
        """Value on top of the final stack, or None if the stack is empty."""
        return self.stack[-1] if self.stack else None


def _truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


class StackVM:
    """
    Virtual machine for executing StackVM programs.

    Uses a stack-based architecture with a side table of named registers.
    Values in opcode position that are not known opcodes are skipped.
    """

    def __init__(
        self,
        output_watcher: Optional[StackVMOutputWatcher] = None,
        step_watcher: Optional[StackVMStepWatcher] = None
    ) -> None:
        """
        Initialize the VM.

        Args:
            output_watcher: Receives PRINT output (defaults to stdout)
            step_watcher: Optional observer called after every executed instruction
        """
        self._logger = logging.getLogger("StackVM")
        self.output_watcher: StackVMOutputWatcher = (
            output_watcher if output_watcher is not None else StackVMStdoutWatcher()
        )
        self.step_watcher = step_watcher
        self._dispatch_table = self._build_dispatch_table()

    def set_step_watcher(self, watcher: Optional[StackVMStepWatcher]) -> None:
        """
        Set the step watcher (replaces any existing watcher).

        Args:
            watcher: StackVMStepWatcher instance or None to disable step reporting
        """
        self.step_watcher = watcher

    def _build_dispatch_table(self) -> Dict[int, Callable[[Frame, int], None]]:
        """Build the opcode dispatch table."""
        return {
            Opcode.ADD: self._op_add,
            Opcode.SUB: self._op_sub,
            Opcode.MUL: self._op_mul,
            Opcode.DIV: self._op_div,
            Opcode.PUSH: self._op_push,
            Opcode.POP: self._op_pop,
            Opcode.PRINT: self._op_print,
            Opcode.SAVE: self._op_save,
            Opcode.LOAD: self._op_load,
        }

    def execute(self, program: Sequence[int]) -> ExecutionResult:
        """
        Execute a program to completion.

        Args:
            program: Sequence of opcodes and operands

        Returns:
            Final stack, registers, and output of the run

        Raises:
            TypeError: If the program contains anything other than integers
            StackVMError: If an instruction's precondition fails; execution stops
                at the failing instruction
        """
        frame = Frame(self._snapshot(program))
        dispatch = self._dispatch_table

        while frame.pc < len(frame.program):
            offset = frame.pc
            value = frame.program[offset]
            frame.pc += 1

            handler = dispatch.get(value)
            if handler is None:
                self._logger.debug("Skipping unknown opcode %d at offset %d", value, offset)
                frame.skipped += 1
                continue

            try:
                handler(frame, offset)

            except StackVMError as e:
                self._logger.debug("Execution aborted at offset %d: %s", offset, e.message)
                raise

            frame.steps += 1
            if self.step_watcher is not None:
                # The handler advanced pc past any operand it consumed
                operand = frame.program[offset + 1] if frame.pc > offset + 1 else None
                self.step_watcher.on_step(Instruction(Opcode(value), operand, offset=offset, raw=value), frame.stack)

        return ExecutionResult(
            stack=frame.stack,
            registers=frame.registers,
            output=frame.output,
            steps=frame.steps,
            skipped=frame.skipped
        )

    def _snapshot(self, program: Sequence[int]) -> Tuple[int, ...]:
        """Copy the program, rejecting anything that is not an integer."""
        snapshot = tuple(program)
        for i, value in enumerate(snapshot):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Program element {i} must be an int, got {type(value).__name__}")

        return snapshot

    def _require_depth(self, frame: Frame, opcode: Opcode, offset: int, depth: int) -> None:
        """Raise a stack underflow error unless the stack holds at least depth values."""
        if len(frame.stack) >= depth:
            return

        value_word = "value" if depth == 1 else "values"
        raise StackVMStackUnderflowError(
            message=f"Stack underflow: {opcode.name} needs {depth} {value_word} on the stack",
            received=f"Stack depth {len(frame.stack)}",
            expected=f"Stack depth of at least {depth}",
            position=offset
        )

    def _read_operand(self, frame: Frame, opcode: Opcode, offset: int) -> int:
        """Consume the operand that follows an opcode."""
        if frame.pc >= len(frame.program):
            what = "register operand" if opcode in (Opcode.SAVE, Opcode.LOAD) else "value operand"
            raise StackVMMissingOperandError(
                message=f"Missing {what}: {opcode.name} is the last value in the program",
                expected=f"{opcode.name} followed by an operand",
                suggestion="Check that the program was not truncated",
                position=offset
            )

        operand = frame.program[frame.pc]
        frame.pc += 1
        return operand

    def _binary(self, frame: Frame, opcode: Opcode, offset: int) -> Tuple[int, int]:
        """Pop two values, returning them in push order (a below b)."""
        self._require_depth(frame, opcode, offset, 2)
        b = frame.stack.pop()
        a = frame.stack.pop()
        return a, b

    def _op_add(self, frame: Frame, offset: int) -> None:
        """ADD: Replace the top two values with a + b."""
        a, b = self._binary(frame, Opcode.ADD, offset)
        frame.stack.append(a + b)

    def _op_sub(self, frame: Frame, offset: int) -> None:
        """SUB: Replace the top two values with a - b, where b was pushed last."""
        a, b = self._binary(frame, Opcode.SUB, offset)
        frame.stack.append(a - b)

    def _op_mul(self, frame: Frame, offset: int) -> None:
        """MUL: Replace the top two values with a * b."""
        a, b = self._binary(frame, Opcode.MUL, offset)
        frame.stack.append(a * b)

    def _op_div(self, frame: Frame, offset: int) -> None:
        """DIV: Replace the top two values with a / b, truncated toward zero."""
        self._require_depth(frame, Opcode.DIV, offset, 2)
        if frame.stack[-1] == 0:
            raise StackVMDivisionByZeroError(
                message="Division by zero",
                received=f"Dividend {frame.stack[-2]}, divisor 0",
                expected="Non-zero divisor",
                position=offset
            )

        a, b = self._binary(frame, Opcode.DIV, offset)
        frame.stack.append(_truncating_div(a, b))

    def _op_push(self, frame: Frame, offset: int) -> None:
        """PUSH: Push the operand onto the stack."""
        frame.stack.append(self._read_operand(frame, Opcode.PUSH, offset))

    def _op_pop(self, frame: Frame, offset: int) -> None:
        """POP: Discard the top of the stack."""
        self._require_depth(frame, Opcode.POP, offset, 1)
        frame.stack.pop()

    def _op_print(self, frame: Frame, offset: int) -> None:
        """PRINT: Emit the top of the stack without removing it."""
        self._require_depth(frame, Opcode.PRINT, offset, 1)
        line = str(frame.stack[-1])
        frame.output.append(line)
        self.output_watcher.on_print(line)

    def _op_save(self, frame: Frame, offset: int) -> None:
        """SAVE: Copy the top of the stack into a register."""
        register = self._read_operand(frame, Opcode.SAVE, offset)
        self._require_depth(frame, Opcode.SAVE, offset, 1)
        frame.registers[register] = frame.stack[-1]

    def _op_load(self, frame: Frame, offset: int) -> None:
        """LOAD: Push the value held in a register."""
        register = self._read_operand(frame, Opcode.LOAD, offset)
        if register in frame.registers:
            frame.stack.append(frame.registers[register])
            return

        saved = ", ".join(format_register(r) for r in sorted(frame.registers)) or "none"
        raise StackVMUnknownRegisterError(
            message=f"Unknown register: {format_register(register)}",
            context=f"Registers saved so far: {saved}",
            suggestion="SAVE a value to the register before loading it",
            position=offset
        )


def run(program: Sequence[int], watcher: Optional[StackVMOutputWatcher] = None, **kwargs: Any) -> ExecutionResult:
    """
    Execute a program on a fresh VM.

    Args:
        program: Sequence of opcodes and operands
        watcher: Receives PRINT output (defaults to stdout)
        **kwargs: Further StackVM constructor arguments

    Returns:
        Final stack, registers, and output of the run
    """
    return StackVM(output_watcher=watcher, **kwargs).execute(program)
