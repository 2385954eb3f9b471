"""
Opcode dispatch table.

Maps each legal opcode to its mnemonic, command and addressing mode. The
table is a 256-slot tuple built once, so lookup during FETCH is a plain
index and unassigned opcodes come back as None.
"""

import logging
import typing as t

from .addressing import AddressingMode
from .instructions import (
    InstructionCommand, Load, Store, Transfer, Increment,
    SetFlag, Jump, NoOperation, Break,
)
from ..constants import (
    FLAG_CARRY, FLAG_DECIMAL, FLAG_INTERRUPT, FLAG_OVERFLOW,
)

logger = logging.getLogger("Cycle6502.InstructionTable")

class InstructionDefinition(t.NamedTuple):
    mnemonic: str
    command: InstructionCommand
    mode: AddressingMode


def _build_definitions() -> t.Dict[int, InstructionDefinition]:
    """Create the opcode -> definition mapping for all supported instructions."""
    M = AddressingMode
    definitions = {}

    def add(opcode: int, mnemonic: str, command: InstructionCommand, mode: AddressingMode) -> None:
        if opcode in definitions:
            raise ValueError(f"Duplicate opcode ${opcode:02X} ({mnemonic})")
        definitions[opcode] = InstructionDefinition(mnemonic, command, mode)

    # LDA - Load Accumulator
    lda = Load("A")
    add(0xA9, "LDA", lda, M.IMMEDIATE)
    add(0xA5, "LDA", lda, M.ZERO_PAGE)
    add(0xB5, "LDA", lda, M.ZERO_PAGE_X)
    add(0xAD, "LDA", lda, M.ABSOLUTE)
    add(0xBD, "LDA", lda, M.ABSOLUTE_X)
    add(0xB9, "LDA", lda, M.ABSOLUTE_Y)
    add(0xA1, "LDA", lda, M.INDEXED_INDIRECT)
    add(0xB1, "LDA", lda, M.INDIRECT_INDEXED)

    # LDX - Load X Register
    ldx = Load("X")
    add(0xA2, "LDX", ldx, M.IMMEDIATE)
    add(0xA6, "LDX", ldx, M.ZERO_PAGE)
    add(0xB6, "LDX", ldx, M.ZERO_PAGE_Y)
    add(0xAE, "LDX", ldx, M.ABSOLUTE)
    add(0xBE, "LDX", ldx, M.ABSOLUTE_Y)

    # LDY - Load Y Register
    ldy = Load("Y")
    add(0xA0, "LDY", ldy, M.IMMEDIATE)
    add(0xA4, "LDY", ldy, M.ZERO_PAGE)
    add(0xB4, "LDY", ldy, M.ZERO_PAGE_X)
    add(0xAC, "LDY", ldy, M.ABSOLUTE)
    add(0xBC, "LDY", ldy, M.ABSOLUTE_X)

    # STA - Store Accumulator
    sta = Store("A")
    add(0x85, "STA", sta, M.ZERO_PAGE)
    add(0x95, "STA", sta, M.ZERO_PAGE_X)
    add(0x8D, "STA", sta, M.ABSOLUTE)
    add(0x9D, "STA", sta, M.ABSOLUTE_X)
    add(0x99, "STA", sta, M.ABSOLUTE_Y)
    add(0x81, "STA", sta, M.INDEXED_INDIRECT)
    add(0x91, "STA", sta, M.INDIRECT_INDEXED)

    # STX - Store X Register
    stx = Store("X")
    add(0x86, "STX", stx, M.ZERO_PAGE)
    add(0x96, "STX", stx, M.ZERO_PAGE_Y)
    add(0x8E, "STX", stx, M.ABSOLUTE)

    # STY - Store Y Register
    sty = Store("Y")
    add(0x84, "STY", sty, M.ZERO_PAGE)
    add(0x94, "STY", sty, M.ZERO_PAGE_X)
    add(0x8C, "STY", sty, M.ABSOLUTE)

    # Register transfers
    add(0xAA, "TAX", Transfer("A", "X"), M.IMPLIED)
    add(0xA8, "TAY", Transfer("A", "Y"), M.IMPLIED)
    add(0xBA, "TSX", Transfer("SP", "X"), M.IMPLIED)
    add(0x8A, "TXA", Transfer("X", "A"), M.IMPLIED)
    add(0x9A, "TXS", Transfer("X", "SP"), M.IMPLIED)
    add(0x98, "TYA", Transfer("Y", "A"), M.IMPLIED)

    # Increment / decrement index registers
    add(0xE8, "INX", Increment("X", 1), M.IMPLIED)
    add(0xC8, "INY", Increment("Y", 1), M.IMPLIED)
    add(0xCA, "DEX", Increment("X", -1), M.IMPLIED)
    add(0x88, "DEY", Increment("Y", -1), M.IMPLIED)

    # Flag operations
    add(0x18, "CLC", SetFlag(FLAG_CARRY, False), M.IMPLIED)
    add(0xD8, "CLD", SetFlag(FLAG_DECIMAL, False), M.IMPLIED)
    add(0x58, "CLI", SetFlag(FLAG_INTERRUPT, False), M.IMPLIED)
    add(0xB8, "CLV", SetFlag(FLAG_OVERFLOW, False), M.IMPLIED)
    add(0x38, "SEC", SetFlag(FLAG_CARRY, True), M.IMPLIED)
    add(0xF8, "SED", SetFlag(FLAG_DECIMAL, True), M.IMPLIED)
    add(0x78, "SEI", SetFlag(FLAG_INTERRUPT, True), M.IMPLIED)

    # JMP - Jump
    jmp = Jump()
    add(0x4C, "JMP", jmp, M.ABSOLUTE)
    add(0x6C, "JMP", jmp, M.INDIRECT)

    # NOP - No Operation
    add(0xEA, "NOP", NoOperation(), M.IMPLIED)

    # BRK - Force Interrupt
    add(0x00, "BRK", Break(), M.IMPLIED)

    return definitions


class InstructionTable:
    """
    Immutable opcode lookup table.

    Args:
        definitions: Optional opcode -> definition mapping (defaults to the
            full supported instruction set)
    """

    def __init__(self, definitions: t.Optional[t.Mapping[int, InstructionDefinition]] = None):
        if definitions is None:
            definitions = _build_definitions()

        slots: t.List[t.Optional[InstructionDefinition]] = [None] * 256
        for opcode, definition in definitions.items():
            if not 0 <= opcode <= 0xFF:
                raise ValueError(f"Opcode out of range: {opcode}")
            slots[opcode] = definition

        self._slots: t.Tuple[t.Optional[InstructionDefinition], ...] = tuple(slots)
        self._count = len(definitions)

        logger.debug(f"Instruction table built with {self._count} opcodes")

    def lookup(self, opcode: int) -> t.Optional[InstructionDefinition]:
        """Return the definition for `opcode`, or None if it is illegal."""
        return self._slots[opcode & 0xFF]

    def opcodes(self) -> t.List[int]:
        return [opcode for opcode, definition in enumerate(self._slots) if definition is not None]

    def __contains__(self, opcode: int) -> bool:
        return self.lookup(opcode) is not None

    def __len__(self) -> int:
        return self._count


# Built once at import and shared by every CPU
DEFAULT_INSTRUCTION_TABLE = InstructionTable()
