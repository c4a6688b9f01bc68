"""Shared fixtures and utilities for StackVM tests."""

import io
from typing import List, Sequence

import pytest

from stackvm import ExecutionResult, StackVM, StackVMStdoutWatcher


@pytest.fixture
def watcher():
    """Create an output watcher that writes to an in-memory stream."""
    return StackVMStdoutWatcher(io.StringIO())


@pytest.fixture
def vm(watcher):
    """Create a fresh VM whose PRINT output goes to the watcher fixture."""
    return StackVM(output_watcher=watcher)


class StackVMTestHelpers:
    """Helper utilities for StackVM testing."""

    @staticmethod
    def printed(watcher: StackVMStdoutWatcher) -> List[str]:
        """Lines written to an in-memory watcher stream."""
        return watcher.stream.getvalue().splitlines()

    @staticmethod
    def run(program: Sequence[int]) -> ExecutionResult:
        """Run a program with output kept off stdout."""
        return StackVM(output_watcher=StackVMStdoutWatcher(io.StringIO())).execute(program)

    @staticmethod
    def assert_output(program: Sequence[int], expected: List[str]) -> None:
        """Assert that a program prints exactly the expected lines."""
        result = StackVMTestHelpers.run(program)
        assert result.output == expected, f"Expected output {expected!r}, got {result.output!r}"

    @staticmethod
    def assert_top(program: Sequence[int], expected: int) -> None:
        """Assert that a program finishes with expected on top of the stack."""
        result = StackVMTestHelpers.run(program)
        assert result.top == expected, f"Expected top of stack {expected!r}, got {result.top!r}"


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return StackVMTestHelpers
