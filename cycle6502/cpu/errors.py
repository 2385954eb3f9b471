"""
Exception types raised by the emulator core.

Memory faults carry the offending address (and value, for writes) so the
host can report exactly what went wrong. None of these are recovered
internally; after any of them the host must reset the CPU.
"""

from typing import Optional


class EmulatorError(Exception):
    """Base class for all emulator errors."""


class MemoryAccessError(EmulatorError):
    """Raised by the memory bus on an invalid access."""

    def __init__(self, message: str, address: int, value: Optional[int] = None):
        super().__init__(message)
        self.address = address
        self.value = value


class AddressOutOfBoundsError(MemoryAccessError):
    """Address (or address range) falls outside the memory array."""


class InvalidValueError(MemoryAccessError):
    """Value written to memory is not a byte."""


class UnknownOpcodeError(EmulatorError):
    """FETCH found no instruction table entry for an opcode."""

    def __init__(self, opcode: int, address: int):
        super().__init__(f"Unknown opcode: ${opcode:02X} at ${address:04X}")
        self.opcode = opcode
        self.address = address
