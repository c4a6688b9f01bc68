"""Bytecode definitions for the StackVM interpreter."""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple


def _op(n: int, arg_count: int = 0) -> Tuple[int, int]:
    """Helper to construct an Opcode value: (integer_value, instruction_stream_arg_count).

    arg_count is the number of program elements that follow the opcode and are
    consumed by it:
      0 - all operands come from the evaluation stack
      1 - one operand (a literal value or a register identifier) follows the opcode
    """
    return (n, arg_count)


class Opcode(IntEnum):
    """Bytecode operation codes.

    Each member's value is a (integer_value, instruction_stream_arg_count) tuple.
    The integer value is what appears in a program; the arg_count property
    returns the number of operands that follow it in the program.
    """

    _arg_count: int  # Set in __new__; declared here so mypy knows the attribute exists

    def __new__(cls, int_value: int, arg_count: int = 0) -> 'Opcode':
        obj = int.__new__(cls, int_value)
        obj._value_ = int_value
        obj._arg_count = arg_count
        return obj

    @property
    def arg_count(self) -> int:
        """Number of operands following the opcode in the program (0 or 1)."""
        return self._arg_count

    # Arithmetic: pop b then a, push a <op> b
    ADD = _op(0, 0)
    SUB = _op(1, 0)
    MUL = _op(2, 0)
    DIV = _op(3, 0)                     # Truncating integer division

    # Stack
    PUSH = _op(4, 1)                    # PUSH value
    POP = _op(5, 0)
    PRINT = _op(6, 0)                   # Print top of stack without removing it

    # Registers
    SAVE = _op(7, 1)                    # SAVE register  (top of stack is kept)
    LOAD = _op(8, 1)                    # LOAD register


ARITHMETIC_OPCODES = frozenset({Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV})
REGISTER_OPCODES = frozenset({Opcode.SAVE, Opcode.LOAD})


def lookup_opcode(value: int) -> Opcode | None:
    """Return the opcode for a program value, or None if the value is not a known opcode."""
    try:
        return Opcode(value)

    except ValueError:
        return None


def format_register(register: int) -> str:
    """Format a register identifier as its character where it has one."""
    try:
        char = chr(register)

    except (ValueError, OverflowError):
        return f"#{register}"

    if not char.isprintable() or char.isspace():
        return f"#{register}"

    return repr(char)


@dataclass(frozen=True)
class Instruction:
    """Single decoded instruction.

    Programs are flat integer sequences; this is the structured view used to
    build programs, disassemble them and report execution steps.

    An opcode of None marks a value that does not decode to any known opcode.
    An operand of None on an opcode with arg_count 1 means the program ended
    before the operand.
    """
    opcode: Opcode | None
    operand: int | None = None
    offset: int = 0
    raw: int | None = None

    def arg_count(self) -> int:
        """Return the number of operands this instruction takes (0 or 1)."""
        if self.opcode is None:
            return 0

        return self.opcode.arg_count

    def encode(self) -> List[int]:
        """Return the program values for this instruction."""
        if self.opcode is None:
            if self.raw is None:
                raise ValueError("Unknown instruction has no raw value to encode")

            return [self.raw]

        if self.arg_count() == 0:
            return [int(self.opcode)]

        if self.operand is None:
            raise ValueError(f"{self.opcode.name} requires an operand")

        return [int(self.opcode), self.operand]

    def __repr__(self) -> str:
        """Human-readable representation."""
        if self.opcode is None:
            return f"UNKNOWN {self.raw}"

        if self.arg_count() == 0:
            return f"{self.opcode.name}"

        if self.operand is None:
            return f"{self.opcode.name} <missing>"

        if self.opcode in REGISTER_OPCODES:
            return f"{self.opcode.name} {format_register(self.operand)}"

        return f"{self.opcode.name} {self.operand}"


def encode_program(instructions: Sequence[Instruction]) -> List[int]:
    """
    Flatten instructions into a program.

    Args:
        instructions: Instructions in program order

    Returns:
        The integer program
    """
    program: List[int] = []
    for instr in instructions:
        program.extend(instr.encode())

    return program


def decode_program(program: Sequence[int]) -> List[Instruction]:
    """
    Decode a program into instructions.

    Decoding is permissive: values that are not known opcodes become
    Instruction(opcode=None) and a trailing opcode with a missing operand
    decodes with operand None.  It never raises.

    Args:
        program: The integer program

    Returns:
        Decoded instructions in program order
    """
    instructions: List[Instruction] = []
    pc = 0
    while pc < len(program):
        offset = pc
        value = program[pc]
        pc += 1

        opcode = lookup_opcode(value)
        if opcode is None:
            instructions.append(Instruction(None, offset=offset, raw=value))
            continue

        operand: Optional[int] = None
        if opcode.arg_count == 1 and pc < len(program):
            operand = program[pc]
            pc += 1

        instructions.append(Instruction(opcode, operand, offset=offset, raw=value))

    return instructions
