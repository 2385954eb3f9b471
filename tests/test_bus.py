"""
Tests for the MemoryBus module.
"""
import unittest
from cycle6502.cpu.bus import MemoryBus
from cycle6502.cpu.errors import AddressOutOfBoundsError, InvalidValueError, MemoryAccessError

class TestMemoryBus(unittest.TestCase):
    """
    Test cases for the MemoryBus class.
    """

    def setUp(self):
        """Set up test fixtures."""
        self.bus = MemoryBus()

    def test_default_size(self):
        """Test that the default bus covers the full 64KB space."""
        self.assertEqual(self.bus.size, 0x10000)
        self.assertEqual(self.bus.read(0xFFFF), 0)

    def test_invalid_size(self):
        """Test that a non-positive size is rejected."""
        with self.assertRaises(ValueError):
            MemoryBus(0)

    def test_read_write(self):
        """Test write/read round trip."""
        self.bus.write(0x0000, 0x00)
        self.bus.write(0x1234, 0xAB)
        self.bus.write(0xFFFF, 0xFF)

        self.assertEqual(self.bus.read(0x1234), 0xAB)
        self.assertEqual(self.bus.read(0xFFFF), 0xFF)
        self.assertIsInstance(self.bus.read(0x1234), int)

    def test_read_out_of_bounds(self):
        """Test reading outside memory."""
        with self.assertRaises(AddressOutOfBoundsError) as ctx:
            self.bus.read(0x10000)
        self.assertEqual(ctx.exception.address, 0x10000)

        with self.assertRaises(AddressOutOfBoundsError):
            self.bus.read(-1)

    def test_write_out_of_bounds(self):
        """Test writing outside memory."""
        with self.assertRaises(AddressOutOfBoundsError) as ctx:
            self.bus.write(0x10000, 0x01)
        self.assertEqual(ctx.exception.address, 0x10000)
        self.assertEqual(ctx.exception.value, 0x01)

    def test_write_invalid_value(self):
        """Test writing values that are not bytes."""
        for value in (-1, 256, 0x1FF):
            with self.assertRaises(InvalidValueError) as ctx:
                self.bus.write(0x0200, value)
            self.assertEqual(ctx.exception.address, 0x0200)
            self.assertEqual(ctx.exception.value, value)

        self.assertEqual(self.bus.read(0x0200), 0)

    def test_error_hierarchy(self):
        """Test that bus errors share a common base."""
        self.assertTrue(issubclass(AddressOutOfBoundsError, MemoryAccessError))
        self.assertTrue(issubclass(InvalidValueError, MemoryAccessError))

    def test_load(self):
        """Test loading a block of bytes."""
        self.bus.load([0xA9, 0x42, 0x00], 0x0600)
        self.assertEqual(self.bus.dump(0x0600, 3), [0xA9, 0x42, 0x00])

        self.bus.load(b"\x01\x02", 0xFFFE)
        self.assertEqual(self.bus.dump(0xFFFE), [0x01, 0x02])

    def test_load_out_of_bounds(self):
        """Test that an overflowing load fails without writing anything."""
        with self.assertRaises(AddressOutOfBoundsError):
            self.bus.load([0x01, 0x02, 0x03], 0xFFFE)
        self.assertEqual(self.bus.dump(0xFFFE), [0, 0])

        with self.assertRaises(AddressOutOfBoundsError):
            self.bus.load([0x01], 0x10000)

    def test_load_invalid_value(self):
        """Test that a bad byte anywhere in the block prevents the whole load."""
        with self.assertRaises(InvalidValueError) as ctx:
            self.bus.load([0x01, 0x02, 0x300], 0x0600)
        self.assertEqual(ctx.exception.address, 0x0602)
        self.assertEqual(self.bus.dump(0x0600, 3), [0, 0, 0])

    def test_dump(self):
        """Test dumping ranges."""
        self.bus.write(0x10, 0x77)
        self.assertEqual(self.bus.dump(0x10, 1), [0x77])
        self.assertEqual(len(self.bus.dump()), 0x10000)
        self.assertEqual(self.bus.dump(0x10, 0), [])

        with self.assertRaises(AddressOutOfBoundsError):
            self.bus.dump(0xFFFF, 2)
        with self.assertRaises(AddressOutOfBoundsError):
            self.bus.dump(0x10000)

    def test_dump_is_a_copy(self):
        """Test that dumped data is detached from memory."""
        data = self.bus.dump(0, 4)
        data[0] = 0xFF
        self.assertEqual(self.bus.read(0), 0)

    def test_reset(self):
        """Test zero-filling memory."""
        self.bus.load([0xFF] * 16, 0x0100)
        self.bus.reset()
        self.assertEqual(self.bus.dump(0x0100, 16), [0] * 16)

    def test_small_bus(self):
        """Test a bus smaller than the address space."""
        bus = MemoryBus(0x100)
        bus.write(0xFF, 0x12)
        self.assertEqual(bus.read(0xFF), 0x12)
        with self.assertRaises(AddressOutOfBoundsError):
            bus.read(0x100)

if __name__ == '__main__':
    unittest.main()
