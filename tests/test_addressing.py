"""
Tests for addressing-mode resolution.

Each mode is driven through the CPU so the resolver sees the real cycle
counter, and the number of DECODE cycles is counted directly.
"""
import unittest
from cycle6502.cpu.addressing import AddressingMode, AddressingState, AddressResolver
from cycle6502.cpu.cpu import CPU6502, InstructionState
from cycle6502.cpu.results import Done, Pending

def decode(cpu):
    """Run FETCH and DECODE of the next instruction; return the DECODE cycle count."""
    cpu.tick()
    assert cpu.state == InstructionState.DECODE
    decode_ticks = 0
    while cpu.state == InstructionState.DECODE:
        cpu.tick()
        decode_ticks += 1
    return decode_ticks

class TestAddressingMode(unittest.TestCase):
    """
    Test cases for the AddressingMode enum.
    """

    def test_all_modes_distinct(self):
        """Test that every mode is its own member."""
        self.assertEqual(len(AddressingMode), 12)

    def test_sizes_and_cycles(self):
        """Test the documented size and baseline cycle values."""
        expected = {
            AddressingMode.IMPLIED: (1, 2),
            AddressingMode.IMMEDIATE: (2, 2),
            AddressingMode.ACCUMULATOR: (1, 2),
            AddressingMode.ZERO_PAGE: (2, 3),
            AddressingMode.ZERO_PAGE_X: (2, 4),
            AddressingMode.ZERO_PAGE_Y: (2, 4),
            AddressingMode.ABSOLUTE: (3, 4),
            AddressingMode.ABSOLUTE_X: (3, 4),
            AddressingMode.ABSOLUTE_Y: (3, 4),
            AddressingMode.INDIRECT: (3, 5),
            AddressingMode.INDEXED_INDIRECT: (2, 6),
            AddressingMode.INDIRECT_INDEXED: (2, 5),
        }
        for mode, (size, cycles) in expected.items():
            self.assertEqual(mode.size, size, mode)
            self.assertEqual(mode.cycles, cycles, mode)

class TestAddressingState(unittest.TestCase):
    """
    Test cases for the AddressingState latches.
    """

    def test_calculate_address(self):
        """Test index addition and page-cross detection."""
        state = AddressingState()

        self.assertEqual(state.calculate_address(0x0100, 0x01), 0x0101)
        self.assertFalse(state.page_crossed)

        self.assertEqual(state.calculate_address(0x01FF, 0x01), 0x0200)
        self.assertTrue(state.page_crossed)

        self.assertEqual(state.calculate_address(0xFFFF, 0x02), 0x0001)
        self.assertTrue(state.page_crossed)

    def test_reset(self):
        """Test clearing the latches."""
        state = AddressingState()
        state.low_byte = 0x12
        state.page_crossed = True
        state.reset()
        self.assertEqual(state.low_byte, 0)
        self.assertFalse(state.page_crossed)

class TestAddressResolver(unittest.TestCase):
    """
    Test cases for resolving each addressing mode through the CPU.
    """

    def setUp(self):
        """Set up test fixtures."""
        self.cpu = CPU6502()

    def test_implied(self):
        """Test implied mode resolves to PC without consuming bytes."""
        self.cpu.load_program([0xEA])  # NOP
        self.assertEqual(decode(self.cpu), 1)
        self.assertEqual(self.cpu.operand_address, 0x0601)
        self.assertEqual(self.cpu.registers.PC, 0x0601)

    def test_immediate(self):
        """Test immediate mode points at the operand byte."""
        self.cpu.load_program([0xA9, 0x42])
        self.assertEqual(decode(self.cpu), 1)
        self.assertEqual(self.cpu.operand_address, 0x0601)
        self.assertEqual(self.cpu.registers.PC, 0x0602)

    def test_zero_page(self):
        """Test zero page mode."""
        self.cpu.load_program([0xA5, 0x10])
        self.assertEqual(decode(self.cpu), 1)
        self.assertEqual(self.cpu.operand_address, 0x0010)

    def test_zero_page_x_wraps(self):
        """Test zero page indexing wraps within page zero."""
        self.cpu.load_program([0xB5, 0xF0])
        self.cpu.registers.X = 0x20
        self.assertEqual(decode(self.cpu), 1)
        self.assertEqual(self.cpu.operand_address, 0x0010)

    def test_zero_page_y(self):
        """Test zero page Y indexing."""
        self.cpu.load_program([0xB6, 0x10])  # LDX $10,Y
        self.cpu.registers.Y = 0x05
        self.assertEqual(decode(self.cpu), 1)
        self.assertEqual(self.cpu.operand_address, 0x0015)

    def test_absolute(self):
        """Test absolute mode takes two cycles."""
        self.cpu.load_program([0xAD, 0x34, 0x12])
        self.assertEqual(decode(self.cpu), 2)
        self.assertEqual(self.cpu.operand_address, 0x1234)
        self.assertEqual(self.cpu.registers.PC, 0x0603)

    def test_absolute_x_same_page(self):
        """Test absolute X indexing without a page crossing."""
        self.cpu.load_program([0xBD, 0x00, 0x01])
        self.cpu.registers.X = 0x01
        self.assertEqual(decode(self.cpu), 2)
        self.assertEqual(self.cpu.operand_address, 0x0101)
        self.assertFalse(self.cpu.page_crossed)

    def test_absolute_x_page_cross(self):
        """Test absolute X indexing across a page takes one more cycle."""
        self.cpu.load_program([0xBD, 0xFF, 0x01])
        self.cpu.registers.X = 0x01
        self.assertEqual(decode(self.cpu), 3)
        self.assertEqual(self.cpu.operand_address, 0x0200)
        self.assertTrue(self.cpu.page_crossed)

    def test_absolute_y_page_cross(self):
        """Test absolute Y indexing across a page takes one more cycle."""
        self.cpu.load_program([0xB9, 0x80, 0x12])
        self.cpu.registers.Y = 0x90
        self.assertEqual(decode(self.cpu), 3)
        self.assertEqual(self.cpu.operand_address, 0x1310)

    def test_absolute_x_wraps_address_space(self):
        """Test that indexed addresses are masked to 16 bits."""
        self.cpu.load_program([0xBD, 0xFF, 0xFF])
        self.cpu.registers.X = 0x02
        self.assertEqual(decode(self.cpu), 3)
        self.assertEqual(self.cpu.operand_address, 0x0001)

    def test_indirect(self):
        """Test indirect mode dereferences a 16-bit pointer."""
        self.cpu.load_program([0x6C, 0x20, 0x01])  # JMP ($0120)
        self.cpu.write(0x0120, 0x34)
        self.cpu.write(0x0121, 0x12)
        self.assertEqual(decode(self.cpu), 3)
        self.assertEqual(self.cpu.operand_address, 0x1234)

    def test_indirect_page_end(self):
        """Test that the pointer high byte comes from the next linear address."""
        self.cpu.load_program([0x6C, 0xFF, 0x02])
        self.cpu.write(0x02FF, 0x00)
        self.cpu.write(0x0300, 0x80)
        decode(self.cpu)
        self.assertEqual(self.cpu.operand_address, 0x8000)

    def test_indexed_indirect(self):
        """Test (zp,X) mode."""
        self.cpu.load_program([0xA1, 0x20])
        self.cpu.registers.X = 0x04
        self.cpu.write(0x24, 0x74)
        self.cpu.write(0x25, 0x20)
        self.assertEqual(decode(self.cpu), 3)
        self.assertEqual(self.cpu.operand_address, 0x2074)

    def test_indexed_indirect_wraps(self):
        """Test (zp,X) pointer bytes stay in page zero."""
        self.cpu.load_program([0xA1, 0xFE])
        self.cpu.registers.X = 0x01
        self.cpu.write(0xFF, 0x34)
        self.cpu.write(0x00, 0x12)
        decode(self.cpu)
        self.assertEqual(self.cpu.operand_address, 0x1234)

    def test_indirect_indexed(self):
        """Test (zp),Y mode."""
        self.cpu.load_program([0xB1, 0x86])
        self.cpu.registers.Y = 0x10
        self.cpu.write(0x86, 0x28)
        self.cpu.write(0x87, 0x40)
        self.assertEqual(decode(self.cpu), 3)
        self.assertEqual(self.cpu.operand_address, 0x4038)
        self.assertFalse(self.cpu.page_crossed)

    def test_indirect_indexed_page_cross(self):
        """Test (zp),Y tracks page crossing without an extra cycle."""
        self.cpu.load_program([0xB1, 0xFF])
        self.cpu.registers.Y = 0x01
        self.cpu.write(0xFF, 0xFF)
        self.cpu.write(0x00, 0x40)
        self.assertEqual(decode(self.cpu), 3)
        self.assertEqual(self.cpu.operand_address, 0x4100)
        self.assertTrue(self.cpu.page_crossed)

    def test_page_cross_cleared_between_instructions(self):
        """Test that each instruction starts with fresh latches."""
        self.cpu.load_program([0xBD, 0xFF, 0x01, 0xEA])
        self.cpu.registers.X = 0x01
        self.cpu.step_instruction()
        self.assertTrue(self.cpu.page_crossed)
        self.cpu.step_instruction()
        self.assertFalse(self.cpu.page_crossed)

    def test_resolver_direct(self):
        """Test polling a resolver by hand."""
        resolver = AddressResolver()
        self.cpu.load_program([0x34, 0x12])
        self.cpu.cycles = 0

        result = resolver.resolve(AddressingMode.ABSOLUTE, self.cpu)
        self.assertIsInstance(result, Pending)
        self.assertFalse(result)

        self.cpu.cycles = 1
        result = resolver.resolve(AddressingMode.ABSOLUTE, self.cpu)
        self.assertEqual(result, Done(0x1234))

    def test_resolved_zero_is_done(self):
        """Test that address zero is a completed resolution."""
        self.cpu.load_program([0xA5, 0x00])
        decode(self.cpu)
        self.assertEqual(self.cpu.state, InstructionState.EXECUTE)
        self.assertEqual(self.cpu.operand_address, 0x0000)

if __name__ == '__main__':
    unittest.main()
