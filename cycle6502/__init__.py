"""
cycle6502: a cycle-stepped MOS 6502 emulator

The CPU advances one clock cycle per tick() through a FETCH -> DECODE ->
EXECUTE state machine, so instruction timing falls out of the addressing
modes and instruction commands rather than a lookup of cycle counts.
"""

__version__ = "0.1.0"

from .cpu import CPU6502, InstructionState, MemoryBus
