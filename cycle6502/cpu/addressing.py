"""
Addressing-mode resolution for the 6502.

Each addressing mode is resolved over one or more cycles during the DECODE
phase. The resolver is polled once per cycle with the CPU's current cycle
counter (0 on the first DECODE cycle) and either consumes an operand byte,
dereferences a pointer, or finishes with the effective address. Indexed
modes that cross a page boundary take an extra cycle, just like the real
chip re-reading with the corrected high byte.

Scratch latches (operand bytes, pointer bytes, page-crossed flag) live in an
AddressingState owned by one resolver, and every CPU owns its own resolver.
"""

from enum import Enum
import logging
import typing as t

from .results import PENDING, Done, StepResult

logger = logging.getLogger("Cycle6502.Addressing")

class AddressingMode(Enum):
    """Addressing-mode tags."""
    IMPLIED = "implied"
    IMMEDIATE = "immediate"
    ACCUMULATOR = "accumulator"
    ZERO_PAGE = "zero_page"
    ZERO_PAGE_X = "zero_page_x"
    ZERO_PAGE_Y = "zero_page_y"
    ABSOLUTE = "absolute"
    ABSOLUTE_X = "absolute_x"
    ABSOLUTE_Y = "absolute_y"
    INDIRECT = "indirect"
    INDEXED_INDIRECT = "indexed_indirect"
    INDIRECT_INDEXED = "indirect_indexed"

    @property
    def size(self) -> int:
        """Instruction size in bytes (opcode included)."""
        return _MODE_TIMING[self][0]

    @property
    def cycles(self) -> int:
        """Baseline cycle count of an instruction using this mode."""
        return _MODE_TIMING[self][1]

# (size in bytes, baseline cycles)
_MODE_TIMING = {
    AddressingMode.IMPLIED: (1, 2),
    AddressingMode.IMMEDIATE: (2, 2),
    AddressingMode.ACCUMULATOR: (1, 2),
    AddressingMode.ZERO_PAGE: (2, 3),
    AddressingMode.ZERO_PAGE_X: (2, 4),
    AddressingMode.ZERO_PAGE_Y: (2, 4),
    AddressingMode.ABSOLUTE: (3, 4),
    AddressingMode.ABSOLUTE_X: (3, 4),  # +1 if page crossed
    AddressingMode.ABSOLUTE_Y: (3, 4),  # +1 if page crossed
    AddressingMode.INDIRECT: (3, 5),
    AddressingMode.INDEXED_INDIRECT: (2, 6),
    AddressingMode.INDIRECT_INDEXED: (2, 5),  # +1 if page crossed
}


class AddressingState:
    """Transient latches used while resolving a single instruction."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.low_byte = 0
        self.high_byte = 0
        self.indirect_low_byte = 0
        self.indirect_high_byte = 0
        self.zero_page_byte = 0
        self.page_crossed = False

    def calculate_address(self, base: int, offset: int) -> int:
        """
        Add an index to a base address, latching whether a page was crossed.

        Args:
            base: 16-bit base address
            offset: Index register value

        Returns:
            Effective 16-bit address
        """
        full_address = base + offset
        self.page_crossed = (base & 0xFF00) != (full_address & 0xFF00)
        return full_address & 0xFFFF

    def absolute_base(self) -> int:
        return (self.high_byte << 8) | self.low_byte

    def indirect_target(self) -> int:
        return (self.indirect_high_byte << 8) | self.indirect_low_byte


class AddressResolver:
    """
    Multi-cycle effective address computation.

    One resolver per CPU. `resolve` is called once per DECODE cycle and
    returns PENDING until the address is known.
    """

    def __init__(self):
        self.state = AddressingState()

        self._strategies: t.Dict[AddressingMode, t.Callable[[t.Any, int], StepResult]] = {
            AddressingMode.IMPLIED: self._resolve_implied,
            AddressingMode.ACCUMULATOR: self._resolve_implied,
            AddressingMode.IMMEDIATE: self._resolve_immediate,
            AddressingMode.ZERO_PAGE: self._resolve_zero_page,
            AddressingMode.ZERO_PAGE_X: lambda cpu, cycle: self._resolve_zero_page_indexed(cpu, cpu.registers.X),
            AddressingMode.ZERO_PAGE_Y: lambda cpu, cycle: self._resolve_zero_page_indexed(cpu, cpu.registers.Y),
            AddressingMode.ABSOLUTE: self._resolve_absolute,
            AddressingMode.ABSOLUTE_X: lambda cpu, cycle: self._resolve_absolute_indexed(cpu, cycle, cpu.registers.X),
            AddressingMode.ABSOLUTE_Y: lambda cpu, cycle: self._resolve_absolute_indexed(cpu, cycle, cpu.registers.Y),
            AddressingMode.INDIRECT: self._resolve_indirect,
            AddressingMode.INDEXED_INDIRECT: self._resolve_indexed_indirect,
            AddressingMode.INDIRECT_INDEXED: self._resolve_indirect_indexed,
        }

    @property
    def page_crossed(self) -> bool:
        return self.state.page_crossed

    def reset(self) -> None:
        """Clear the scratch latches before a new instruction."""
        self.state.reset()

    def resolve(self, mode: AddressingMode, cpu) -> StepResult:
        """
        Advance resolution of `mode` by one cycle.

        Args:
            mode: Addressing mode of the current instruction
            cpu: CPU providing registers, read() and the cycle counter

        Returns:
            PENDING, or Done(address) once the effective address is known
        """
        return self._strategies[mode](cpu, cpu.cycles)

    # Operand fetch
    def _next_byte(self, cpu) -> int:
        value = cpu.read(cpu.registers.PC)
        cpu.registers.PC += 1
        return value

    # Strategies
    def _resolve_implied(self, cpu, cycle: int) -> StepResult:
        return Done(cpu.registers.PC)

    def _resolve_immediate(self, cpu, cycle: int) -> StepResult:
        address = cpu.registers.PC
        cpu.registers.PC += 1
        return Done(address)

    def _resolve_zero_page(self, cpu, cycle: int) -> StepResult:
        self.state.zero_page_byte = self._next_byte(cpu)
        return Done(self.state.zero_page_byte)

    def _resolve_zero_page_indexed(self, cpu, index: int) -> StepResult:
        # Indexed zero page never leaves page 0
        self.state.zero_page_byte = self._next_byte(cpu)
        return Done((self.state.zero_page_byte + index) & 0xFF)

    def _resolve_absolute(self, cpu, cycle: int) -> StepResult:
        if cycle == 0:
            self.state.low_byte = self._next_byte(cpu)
            return PENDING

        self.state.high_byte = self._next_byte(cpu)
        return Done(self.state.absolute_base())

    def _resolve_absolute_indexed(self, cpu, cycle: int, index: int) -> StepResult:
        if cycle == 0:
            self.state.low_byte = self._next_byte(cpu)
            return PENDING

        if cycle == 1:
            self.state.high_byte = self._next_byte(cpu)
            address = self.state.calculate_address(self.state.absolute_base(), index)
            if not self.state.page_crossed:
                return Done(address)
            # Page crossed: the chip spends one more cycle fixing the high byte
            return PENDING

        return Done(self.state.calculate_address(self.state.absolute_base(), index))

    def _resolve_indirect(self, cpu, cycle: int) -> StepResult:
        if cycle == 0:
            self.state.low_byte = self._next_byte(cpu)
            return PENDING

        if cycle == 1:
            self.state.high_byte = self._next_byte(cpu)
            self.state.indirect_low_byte = cpu.read(self.state.absolute_base())
            return PENDING

        pointer = (self.state.absolute_base() + 1) & 0xFFFF
        self.state.indirect_high_byte = cpu.read(pointer)
        return Done(self.state.indirect_target())

    def _resolve_indexed_indirect(self, cpu, cycle: int) -> StepResult:
        if cycle == 0:
            self.state.zero_page_byte = self._next_byte(cpu)
            return PENDING

        pointer = (self.state.zero_page_byte + cpu.registers.X) & 0xFF

        if cycle == 1:
            self.state.indirect_low_byte = cpu.read(pointer)
            return PENDING

        self.state.indirect_high_byte = cpu.read((pointer + 1) & 0xFF)
        return Done(self.state.indirect_target())

    def _resolve_indirect_indexed(self, cpu, cycle: int) -> StepResult:
        if cycle == 0:
            self.state.zero_page_byte = self._next_byte(cpu)
            return PENDING

        if cycle == 1:
            self.state.indirect_low_byte = cpu.read(self.state.zero_page_byte)
            return PENDING

        self.state.indirect_high_byte = cpu.read((self.state.zero_page_byte + 1) & 0xFF)
        return Done(self.state.calculate_address(self.state.indirect_target(), cpu.registers.Y))
