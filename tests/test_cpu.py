"""
Tests for the CPU6502 engine: reset, state machine, stack and error paths.
"""
import unittest
from cycle6502.cpu.bus import MemoryBus
from cycle6502.cpu.cpu import CPU6502, InstructionState
from cycle6502.cpu.errors import AddressOutOfBoundsError, UnknownOpcodeError
from cycle6502.cpu.instruction_table import InstructionTable
from cycle6502.cpu.registers import Registers

class TestRegisters(unittest.TestCase):
    """
    Test cases for the Registers class.
    """

    def test_masking(self):
        """Test that assignments are masked to register width."""
        registers = Registers()
        registers.A = 0x1FF
        registers.X = -1
        registers.SP = 0x100
        registers.PC = 0x10005
        self.assertEqual(registers.A, 0xFF)
        self.assertEqual(registers.X, 0xFF)
        self.assertEqual(registers.SP, 0x00)
        self.assertEqual(registers.PC, 0x0005)

    def test_as_dict(self):
        """Test exporting registers."""
        self.assertEqual(Registers().as_dict(),
                         {"A": 0, "X": 0, "Y": 0, "SP": 0xFF, "PC": 0, "P": 0x20})

class TestCPU6502(unittest.TestCase):
    """
    Test cases for the CPU6502 class.
    """

    def setUp(self):
        """Set up test fixtures."""
        self.cpu = CPU6502()

    def test_initial_state(self):
        """Test power-on defaults."""
        self.assertEqual(self.cpu.registers.as_dict(),
                         {"A": 0, "X": 0, "Y": 0, "SP": 0xFF, "PC": 0, "P": 0x20})
        self.assertEqual(self.cpu.state, InstructionState.FETCH)
        self.assertEqual(self.cpu.cycles, 0)
        self.assertIsNone(self.cpu.current_instruction)

    def test_reset(self):
        """Test that reset restores registers, memory and the state machine."""
        self.cpu.load_program([0xAD, 0x34, 0x12])
        self.cpu.registers.A = 0x12
        self.cpu.registers.SP = 0x80
        self.cpu.registers.P = 0xFF
        self.cpu.tick()
        self.cpu.tick()

        self.cpu.reset()

        self.assertEqual(self.cpu.registers.as_dict(),
                         {"A": 0, "X": 0, "Y": 0, "SP": 0xFF, "PC": 0, "P": 0x20})
        self.assertEqual(self.cpu.state, InstructionState.FETCH)
        self.assertEqual(self.cpu.cycles, 0)
        self.assertIsNone(self.cpu.current_instruction)
        self.assertEqual(self.cpu.total_cycles, 0)
        self.assertEqual(self.cpu.memory.dump(0x0600, 3), [0, 0, 0])
        self.assertEqual(self.cpu.resolver.state.low_byte, 0)

    def test_state_transitions(self):
        """Test FETCH -> DECODE -> EXECUTE -> FETCH for LDA #$42."""
        self.cpu.load_program([0xA9, 0x42])

        self.cpu.tick()
        self.assertEqual(self.cpu.state, InstructionState.DECODE)
        self.assertEqual(self.cpu.current_instruction.mnemonic, "LDA")
        self.assertEqual(self.cpu.registers.PC, 0x0601)

        self.cpu.tick()
        self.assertEqual(self.cpu.state, InstructionState.EXECUTE)
        self.assertEqual(self.cpu.operand_address, 0x0601)

        self.cpu.tick()
        self.assertEqual(self.cpu.state, InstructionState.FETCH)
        self.assertEqual(self.cpu.registers.A, 0x42)
        self.assertEqual(self.cpu.total_cycles, 3)
        self.assertEqual(self.cpu.instructions_executed, 1)

    def test_decode_cycle_counter(self):
        """Test the per-phase cycle counter during a multi-cycle DECODE."""
        self.cpu.load_program([0xAD, 0x34, 0x12])
        self.cpu.tick()
        self.assertEqual(self.cpu.cycles, 0)
        self.cpu.tick()
        self.assertEqual(self.cpu.state, InstructionState.DECODE)
        self.assertEqual(self.cpu.cycles, 1)
        self.cpu.tick()
        self.assertEqual(self.cpu.state, InstructionState.EXECUTE)
        self.assertEqual(self.cpu.cycles, 0)

    def test_unknown_opcode(self):
        """Test that an illegal opcode raises without touching registers."""
        self.cpu.load_program([0xFF])
        self.cpu.registers.A = 0x12
        before = self.cpu.registers.as_dict()

        with self.assertRaises(UnknownOpcodeError) as ctx:
            self.cpu.tick()

        self.assertEqual(ctx.exception.opcode, 0xFF)
        self.assertEqual(ctx.exception.address, 0x0600)
        self.assertEqual(str(ctx.exception), "Unknown opcode: $FF at $0600")
        self.assertEqual(self.cpu.registers.as_dict(), before)
        self.assertEqual(self.cpu.state, InstructionState.FETCH)

    def test_empty_instruction_table(self):
        """Test that an empty table is used as given, not replaced by the default."""
        cpu = CPU6502(instruction_table=InstructionTable({}))
        self.assertEqual(len(cpu.instruction_table), 0)

        cpu.load_program([0xA9, 0x42])
        with self.assertRaises(UnknownOpcodeError) as ctx:
            cpu.tick()
        self.assertEqual(ctx.exception.opcode, 0xA9)
        self.assertEqual(cpu.registers.A, 0)

    def test_push_pop(self):
        """Test stack push and pop symmetry."""
        self.cpu.push(0x12)
        self.cpu.push(0x34)
        self.assertEqual(self.cpu.registers.SP, 0xFD)
        self.assertEqual(self.cpu.read(0x01FF), 0x12)
        self.assertEqual(self.cpu.read(0x01FE), 0x34)

        self.assertEqual(self.cpu.pop(), 0x34)
        self.assertEqual(self.cpu.pop(), 0x12)
        self.assertEqual(self.cpu.registers.SP, 0xFF)

    def test_stack_wraps(self):
        """Test that 256 pushes bring SP back to $FF."""
        for i in range(256):
            self.cpu.push(i)
        self.assertEqual(self.cpu.registers.SP, 0xFF)
        self.assertEqual(self.cpu.read(0x0100), 0xFF)

        self.cpu.registers.SP = 0xFF
        self.cpu.pop()
        self.assertEqual(self.cpu.registers.SP, 0x00)

    def test_load_program(self):
        """Test loading a program sets PC."""
        self.cpu.load_program([0xEA, 0xEA], 0x0200)
        self.assertEqual(self.cpu.registers.PC, 0x0200)
        self.assertEqual(self.cpu.read(0x0201), 0xEA)

    def test_load_program_out_of_bounds(self):
        """Test that an oversized program fails before anything changes."""
        with self.assertRaises(AddressOutOfBoundsError):
            self.cpu.load_program([0xEA] * 4, 0xFFFE)
        self.assertEqual(self.cpu.registers.PC, 0x0000)

    def test_small_memory_fault(self):
        """Test that running off a small memory raises a memory error."""
        cpu = CPU6502(MemoryBus(0x0700))
        cpu.load_program([0xAD, 0x00, 0x80])  # LDA $8000
        with self.assertRaises(AddressOutOfBoundsError) as ctx:
            cpu.step_instruction()
        self.assertEqual(ctx.exception.address, 0x8000)

    def test_run(self):
        """Test running with a tick budget and a stop predicate."""
        self.cpu.load_program([0xE8] * 10)
        self.assertEqual(self.cpu.run(7), 7)
        self.assertEqual(self.cpu.registers.X, 2)

        self.cpu.reset()
        self.cpu.load_program([0xE8] * 10)
        ticks = self.cpu.run(100, stop=lambda cpu: cpu.registers.X == 4)
        self.assertEqual(ticks, 12)
        self.assertEqual(self.cpu.state, InstructionState.FETCH)

    def test_get_state(self):
        """Test the state snapshot."""
        self.cpu.load_program([0xBD, 0xFF, 0x01])
        self.cpu.registers.X = 1
        self.cpu.step_instruction()

        state = self.cpu.get_state()
        self.assertEqual(state["cycle"], 5)
        self.assertEqual(state["state"], "FETCH")
        self.assertEqual(state["instruction"], "LDA")
        self.assertEqual(state["mode"], "absolute_x")
        self.assertEqual(state["operand_address"], 0x0200)
        self.assertTrue(state["page_crossed"])
        self.assertEqual(state["instructions_executed"], 1)
        self.assertEqual(state["registers"]["X"], 1)

    def test_independent_engines(self):
        """Test that two CPUs stepped in lockstep do not interfere."""
        first = CPU6502()
        second = CPU6502()
        first.load_program([0xBD, 0xFF, 0x01])  # LDA $01FF,X (page cross)
        second.load_program([0xAD, 0x34, 0x12])  # LDA $1234
        first.registers.X = 1
        first.write(0x0200, 0x11)
        second.write(0x1234, 0x22)

        for _ in range(4):
            first.tick()
            second.tick()

        self.assertEqual(second.state, InstructionState.FETCH)
        self.assertEqual(second.registers.A, 0x22)
        self.assertFalse(second.page_crossed)
        self.assertEqual(first.state, InstructionState.EXECUTE)

        first.tick()
        self.assertEqual(first.registers.A, 0x11)
        self.assertTrue(first.page_crossed)
        self.assertIsNot(first.resolver, second.resolver)

if __name__ == '__main__':
    unittest.main()
