"""
Global constants for the cycle6502 emulator.
"""

# Memory layout
DEFAULT_MEMORY_SIZE = 0x10000
DEFAULT_LOAD_ADDRESS = 0x0600
STACK_BASE = 0x0100

# Interrupt vectors
IRQ_BRK_VECTOR_LOW = 0xFFFE
IRQ_BRK_VECTOR_HIGH = 0xFFFF

# Status register bits
FLAG_CARRY     = 0x01
FLAG_ZERO      = 0x02
FLAG_INTERRUPT = 0x04
FLAG_DECIMAL   = 0x08
FLAG_BREAK     = 0x10
FLAG_UNUSED    = 0x20
FLAG_OVERFLOW  = 0x40
FLAG_NEGATIVE  = 0x80

# Register defaults applied on reset
RESET_REGISTERS = {
    "A": 0x00,
    "X": 0x00,
    "Y": 0x00,
    "SP": 0xFF,
    "PC": 0x0000,
    "P": FLAG_UNUSED,
}

REGISTER_NAMES = ["A", "X", "Y", "SP", "PC", "P"]

# Trace constants
MAX_HISTORY_SIZE = 100000
TRACE_FORMATS = ['json', 'csv']

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
