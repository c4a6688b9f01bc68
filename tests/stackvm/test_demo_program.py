"""Tests running the demo program end to end."""

from stackvm import DEMO_PROGRAM, Opcode
from stackvm.stackvm_programs import REGISTER_A, REGISTER_B


class TestDemoProgram:
    """Test the reference program."""

    def test_demo_output(self, helpers):
        helpers.assert_output(DEMO_PROGRAM, ["84084", "504504", "578"])

    def test_demo_final_state(self, helpers):
        result = helpers.run(DEMO_PROGRAM)
        assert result.stack == [504504, 578]
        assert result.registers == {REGISTER_A: 84084, REGISTER_B: 504504}
        assert result.steps == 33
        assert result.skipped == 0

    def test_demo_program_holds_plain_ints(self):
        """No Opcode members leak into the program tuple."""
        assert all(type(value) is int for value in DEMO_PROGRAM)  # pylint: disable=unidiomatic-typecheck
        assert DEMO_PROGRAM[:5] == (int(Opcode.PUSH), 33, int(Opcode.PUSH), 44, int(Opcode.ADD))
