"""
Configuration data for supported machine layouts.
"""

SYSTEM_CONFIGS = {
    "mos6502": {
        "cpu_type": "6502",
        "memory_size": 0x10000,
        "load_address": 0x0600,
        "memory_map": {
            "zero_page": {"start": 0x0000, "end": 0x00FF},
            "stack": {"start": 0x0100, "end": 0x01FF},
            "program": {"start": 0x0200, "end": 0xFFF9},
            "vectors": {"start": 0xFFFA, "end": 0xFFFF},
        },
        "vectors": {
            "nmi": 0xFFFA,
            "reset": 0xFFFC,
            "irq_brk": 0xFFFE,
        },
        "registers": ["A", "X", "Y", "SP", "PC", "P"],
    },
    "easy6502": {
        # Layout used by the browser-based "easy6502" tutorial machine
        "cpu_type": "6502",
        "memory_size": 0x10000,
        "load_address": 0x0600,
        "memory_map": {
            "zero_page": {"start": 0x0000, "end": 0x00FF},
            "stack": {"start": 0x0100, "end": 0x01FF},
            "display": {"start": 0x0200, "end": 0x05FF},
            "program": {"start": 0x0600, "end": 0xFFF9},
            "vectors": {"start": 0xFFFA, "end": 0xFFFF},
        },
        "vectors": {
            "nmi": 0xFFFA,
            "reset": 0xFFFC,
            "irq_brk": 0xFFFE,
        },
        "registers": ["A", "X", "Y", "SP", "PC", "P"],
    },
}
