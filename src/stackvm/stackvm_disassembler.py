"""
StackVM disassembler - annotated listings of integer programs.

Listings show one decoded instruction per line:

     0: PUSH 33           ; Push 33
     4: ADD               ; Replace top two values with a + b
    21: SAVE 'А'          ; Copy top of stack to register 'А'
"""

from typing import List, Sequence

from stackvm.stackvm_bytecode import Instruction, Opcode, decode_program, format_register


_ANNOTATIONS = {
    Opcode.ADD: "Replace top two values with a + b",
    Opcode.SUB: "Replace top two values with a - b",
    Opcode.MUL: "Replace top two values with a * b",
    Opcode.DIV: "Replace top two values with a / b (truncating)",
    Opcode.POP: "Discard top of stack",
    Opcode.PRINT: "Print top of stack",
}


def annotate_instruction(instr: Instruction) -> str:
    """Describe what an instruction does."""
    if instr.opcode is None:
        return "Unknown opcode, skipped"

    if instr.arg_count() and instr.operand is None:
        return "Missing operand, execution fails here"

    if instr.opcode == Opcode.PUSH:
        return f"Push {instr.operand}"

    if instr.opcode == Opcode.SAVE:
        assert instr.operand is not None
        return f"Copy top of stack to register {format_register(instr.operand)}"

    if instr.opcode == Opcode.LOAD:
        assert instr.operand is not None
        return f"Push value of register {format_register(instr.operand)}"

    return _ANNOTATIONS[instr.opcode]


def disassemble_lines(program: Sequence[int]) -> List[str]:
    """Disassemble a program into annotated lines."""
    lines = []
    for instr in decode_program(program):
        lines.append(f"{instr.offset:6d}: {instr!r:<17} ; {annotate_instruction(instr)}")

    return lines


def disassemble(program: Sequence[int]) -> str:
    """
    Return an annotated listing of a program.

    Malformed programs are listed as far as they decode; this never raises.

    Args:
        program: The integer program

    Returns:
        Listing with one instruction per line
    """
    return "\n".join(disassemble_lines(program))
