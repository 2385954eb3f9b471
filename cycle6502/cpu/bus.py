"""
Flat, bounds-checked memory bus.

The 6502 sees a single 64KB address space. This bus backs it with one
contiguous byte array and checks every access against the configured size.
"""

from ..common.interfaces import Memory
from .errors import AddressOutOfBoundsError, InvalidValueError
from ..constants import DEFAULT_MEMORY_SIZE
import numpy as np
import logging
from typing import List, Optional, Sequence

logger = logging.getLogger("Cycle6502.Bus")

class MemoryBus(Memory):
    """
    Byte-addressable memory with read, write, bulk load and range dump.

    All failures raise a MemoryAccessError subclass and leave memory
    untouched.
    """

    def __init__(self, size: int = DEFAULT_MEMORY_SIZE):
        """
        Initialize the memory bus.

        Args:
            size: Total memory size in bytes
        """
        if size <= 0:
            raise ValueError(f"Memory size must be positive, got {size}")

        self.memory = np.zeros(size, dtype=np.uint8)

        logger.info(f"Memory bus initialized with {size} bytes")

    @property
    def size(self) -> int:
        return len(self.memory)

    def reset(self) -> None:
        """Zero-fill the whole memory array."""
        self.memory.fill(0)
        logger.debug("Memory bus reset")

    def read(self, address: int) -> int:
        """
        Read a byte from the specified address.

        Args:
            address: Memory address

        Returns:
            Byte value at address
        """
        if address < 0 or address >= self.size:
            raise AddressOutOfBoundsError(
                f"Memory read access violation: address ${address:04X} is out of bounds",
                address)

        return int(self.memory[address])

    def write(self, address: int, value: int) -> None:
        """
        Write a byte to the specified address.

        Args:
            address: Memory address
            value: Byte value to write
        """
        if address < 0 or address >= self.size:
            raise AddressOutOfBoundsError(
                f"Memory write access violation: address ${address:04X} is out of bounds",
                address, value)

        if value < 0 or value > 0xFF:
            raise InvalidValueError(
                f"Invalid byte value {value} at ${address:04X}. Must be between 0 and 255",
                address, value)

        self.memory[address] = value

    def load(self, data: Sequence[int], start_address: int) -> None:
        """
        Copy a contiguous block of bytes into memory.

        The whole block is validated before anything is written.

        Args:
            data: Bytes to load
            start_address: First address to write
        """
        if start_address < 0 or start_address >= self.size:
            raise AddressOutOfBoundsError(
                f"Invalid load start address: ${start_address:04X}",
                start_address)

        if start_address + len(data) > self.size:
            raise AddressOutOfBoundsError(
                f"Load would exceed memory bounds. Start: ${start_address:04X}, "
                f"Data length: {len(data)}",
                start_address + len(data) - 1)

        for offset, value in enumerate(data):
            if value < 0 or value > 0xFF:
                raise InvalidValueError(
                    f"Invalid byte value {value} at offset {offset} of load block",
                    start_address + offset, value)

        self.memory[start_address:start_address + len(data)] = np.array(list(data), dtype=np.uint8)
        logger.debug(f"Loaded {len(data)} bytes at ${start_address:04X}")

    def dump(self, start_address: int = 0, length: Optional[int] = None) -> List[int]:
        """
        Return a copy of a range of memory.

        Args:
            start_address: First address of the range
            length: Number of bytes (None for everything up to the end)

        Returns:
            List of byte values
        """
        if start_address < 0 or start_address >= self.size:
            raise AddressOutOfBoundsError(
                f"Invalid dump start address: ${start_address:04X}",
                start_address)

        if length is None:
            length = self.size - start_address

        if length < 0 or start_address + length > self.size:
            raise AddressOutOfBoundsError(
                f"Dump would exceed memory bounds. Start: ${start_address:04X}, Length: {length}",
                start_address + max(length, 0) - 1)

        return self.memory[start_address:start_address + length].tolist()
