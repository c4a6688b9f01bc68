"""Exception classes for the StackVM interpreter with detailed context."""

from enum import Enum
from typing import Optional


class StackVMErrorKind(Enum):
    """Kinds of fatal execution errors."""
    STACK_UNDERFLOW = "stack_underflow"
    MISSING_OPERAND = "missing_operand"
    UNKNOWN_REGISTER = "unknown_register"
    DIVISION_BY_ZERO = "division_by_zero"


class StackVMError(Exception):
    """Base exception for StackVM errors with detailed context information."""

    kind: Optional[StackVMErrorKind] = None

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        position: Optional[int] = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            position: Program offset of the instruction that failed
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.position = position

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.position is not None:
            parts.append(f"Position: {self.position}")

        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return "\n".join(parts)


class StackVMStackUnderflowError(StackVMError):
    """An instruction needed more values than the stack holds."""

    kind = StackVMErrorKind.STACK_UNDERFLOW


class StackVMMissingOperandError(StackVMError):
    """PUSH, SAVE or LOAD was the last value in the program."""

    kind = StackVMErrorKind.MISSING_OPERAND


class StackVMUnknownRegisterError(StackVMError):
    """LOAD referenced a register that was never saved."""

    kind = StackVMErrorKind.UNKNOWN_REGISTER


class StackVMDivisionByZeroError(StackVMError):
    """DIV with a zero divisor."""

    kind = StackVMErrorKind.DIVISION_BY_ZERO
