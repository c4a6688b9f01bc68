"""StackVM - a stack-based bytecode interpreter with named registers."""

# Main API
from stackvm.stackvm_vm import StackVM, ExecutionResult, run

# Exceptions
from stackvm.stackvm_error import (
    StackVMError, StackVMErrorKind, StackVMStackUnderflowError, StackVMMissingOperandError,
    StackVMUnknownRegisterError, StackVMDivisionByZeroError
)

# Bytecode
from stackvm.stackvm_bytecode import Opcode, Instruction, encode_program, decode_program
from stackvm.stackvm_disassembler import disassemble

# Output watchers
from stackvm.stackvm_output import StackVMStdoutWatcher, StackVMFileWatcher

# Sample programs
from stackvm.stackvm_programs import DEMO_PROGRAM


__all__ = [
    # Main API
    "StackVM", "ExecutionResult", "run",

    # Exceptions
    "StackVMError", "StackVMErrorKind", "StackVMStackUnderflowError", "StackVMMissingOperandError",
    "StackVMUnknownRegisterError", "StackVMDivisionByZeroError",

    # Bytecode
    "Opcode", "Instruction", "encode_program", "decode_program", "disassemble",

    # Output watchers
    "StackVMStdoutWatcher", "StackVMFileWatcher",

    # Sample programs
    "DEMO_PROGRAM",
]
