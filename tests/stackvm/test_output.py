"""Tests for output and step watchers."""

import io
import logging

import pytest

from stackvm import Opcode, StackVM, StackVMError, StackVMFileWatcher, StackVMStdoutWatcher
from stackvm.stackvm_output import StackVMBufferingStepWatcher, StackVMLoggingStepWatcher


class TestFileWatcher:
    """Test writing PRINT output to a file."""

    def test_writes_lines(self, tmp_path):
        path = tmp_path / "out.txt"
        with StackVMFileWatcher(str(path)) as file_watcher:
            StackVM(output_watcher=file_watcher).execute([Opcode.PUSH, 1, Opcode.PRINT, Opcode.PUSH, 2, Opcode.PRINT])

        assert path.read_text(encoding="utf-8") == "1\n2\n"

    def test_aborted_run_keeps_lines_printed_before_failure(self, tmp_path):
        path = tmp_path / "out.txt"
        with StackVMFileWatcher(path) as file_watcher:
            with pytest.raises(StackVMError):
                StackVM(output_watcher=file_watcher).execute([Opcode.PUSH, 3, Opcode.PRINT, Opcode.PUSH, 0, Opcode.DIV])

        assert path.read_text(encoding="utf-8") == "3\n"

    def test_reopening_truncates(self, tmp_path):
        path = tmp_path / "out.txt"
        path.write_text("stale\n", encoding="utf-8")
        with StackVMFileWatcher(path) as file_watcher:
            file_watcher.on_print("1")

        assert path.read_text(encoding="utf-8") == "1\n"

    def test_print_outside_with_block_fails(self, tmp_path):
        file_watcher = StackVMFileWatcher(tmp_path / "out.txt")
        with pytest.raises(RuntimeError, match="not open"):
            file_watcher.on_print("1")

        with file_watcher:
            pass

        with pytest.raises(RuntimeError, match="not open"):
            file_watcher.on_print("1")


class TestStepWatchers:
    """Test observing execution step by step."""

    def test_buffering_step_watcher(self):
        steps = StackVMBufferingStepWatcher()
        vm = StackVM(output_watcher=StackVMStdoutWatcher(io.StringIO()), step_watcher=steps)
        vm.execute([Opcode.PUSH, 2, 99, Opcode.PUSH, 3, Opcode.MUL, Opcode.SAVE, ord('r')])

        assert [repr(instr) for instr, _ in steps.steps] == ["PUSH 2", "PUSH 3", "MUL", "SAVE 'r'"]
        assert [instr.offset for instr, _ in steps.steps] == [0, 3, 5, 6]
        assert [stack for _, stack in steps.steps] == [[2], [2, 3], [6], [6]]

    def test_set_step_watcher(self):
        vm = StackVM(output_watcher=StackVMStdoutWatcher(io.StringIO()))
        steps = StackVMBufferingStepWatcher()
        vm.set_step_watcher(steps)
        vm.execute([Opcode.PUSH, 1])
        vm.set_step_watcher(None)
        vm.execute([Opcode.PUSH, 1])
        assert len(steps.steps) == 1

    def test_logging_step_watcher(self, caplog):
        vm = StackVM(output_watcher=StackVMStdoutWatcher(io.StringIO()), step_watcher=StackVMLoggingStepWatcher())
        with caplog.at_level(logging.DEBUG, logger="StackVMTrace"):
            vm.execute([Opcode.PUSH, 4, Opcode.PRINT])

        assert "PUSH 4" in caplog.text
        assert "stack=[4]" in caplog.text
