"""
MOS 6502 CPU core components.
"""
# Import main classes for external use
from .cpu import CPU6502, InstructionState
from .bus import MemoryBus
from .registers import Registers
from .addressing import AddressingMode, AddressResolver, AddressingState
from .instruction_table import InstructionTable, InstructionDefinition, DEFAULT_INSTRUCTION_TABLE
from .results import PENDING, DONE, Pending, Done
from .errors import (
    EmulatorError, MemoryAccessError, AddressOutOfBoundsError,
    InvalidValueError, UnknownOpcodeError,
)
