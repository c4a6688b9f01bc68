"""Sample StackVM programs."""

from typing import Tuple

from stackvm.stackvm_bytecode import Opcode


# Register names are single characters, stored as their code points
REGISTER_A = ord('А')  # Cyrillic A
REGISTER_B = ord('Б')  # Cyrillic Be


# Prints 84084, 504504, 578., stored as plain ints like any caller-built program
DEMO_PROGRAM: Tuple[int, ...] = tuple(int(value) for value in (
    Opcode.PUSH, 33, Opcode.PUSH, 44, Opcode.ADD, Opcode.PUSH, 567, Opcode.SUB, Opcode.PUSH,
    -13, Opcode.MUL, Opcode.PUSH, 5, Opcode.DIV, Opcode.PUSH, 45, Opcode.PUSH, 21, Opcode.ADD, Opcode.MUL,
    Opcode.PRINT, Opcode.SAVE, REGISTER_A, Opcode.POP, Opcode.PUSH, 3, Opcode.PUSH, 9, Opcode.PUSH, 7,
    Opcode.SUB, Opcode.MUL, Opcode.LOAD, REGISTER_A, Opcode.MUL, Opcode.PRINT, Opcode.SAVE, REGISTER_B,
    Opcode.LOAD, REGISTER_A, Opcode.PUSH, 10230, Opcode.LOAD, REGISTER_B, Opcode.SUB, Opcode.SUB,
    Opcode.PUSH, 1000, Opcode.DIV, Opcode.PRINT,
))
