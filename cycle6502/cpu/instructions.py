"""
Executable instruction commands.

A command implements one instruction family (loads, stores, transfers, ...)
parameterised by the registers or flag it works on. Commands are polled once
per EXECUTE cycle and return PENDING until their work is done, which lets
multi-cycle instructions such as BRK spread their side effects over the
exact cycles the hardware uses. Commands hold no per-execution state, so a
single instance can back every opcode of its family on any number of CPUs.
"""

from abc import ABC, abstractmethod
import logging

from .results import PENDING, DONE, StepResult
from ..constants import (
    FLAG_NEGATIVE, FLAG_ZERO, FLAG_BREAK,
    IRQ_BRK_VECTOR_LOW, IRQ_BRK_VECTOR_HIGH,
)

logger = logging.getLogger("Cycle6502.Instructions")

class InstructionCommand(ABC):
    """Base class for all instruction families."""

    __slots__ = ()

    @abstractmethod
    def execute(self, cpu) -> StepResult:
        """
        Run one EXECUTE cycle of the instruction.

        Args:
            cpu: CPU whose operand_address has already been resolved

        Returns:
            PENDING if another cycle is required, DONE when finished
        """

    @staticmethod
    def update_nz(cpu, value: int) -> None:
        """Set the Negative and Zero flags from an 8-bit result."""
        value &= 0xFF
        cpu.registers.P &= ~(FLAG_NEGATIVE | FLAG_ZERO)
        cpu.registers.P |= (value & FLAG_NEGATIVE) | (FLAG_ZERO if value == 0 else 0)

    def __repr__(self) -> str:
        return self.__class__.__name__


# Instruction: LDA / LDX / LDY
# Function:    R = M
# Flags Out:   N, Z
class Load(InstructionCommand):
    """Load a register from memory."""

    __slots__ = ("register",)

    def __init__(self, register: str):
        self.register = register

    def execute(self, cpu) -> StepResult:
        value = cpu.read(cpu.operand_address)
        setattr(cpu.registers, self.register, value)
        self.update_nz(cpu, value)
        return DONE

    def __repr__(self) -> str:
        return f"Load({self.register})"


# Instruction: STA / STX / STY
# Function:    M = R
# Flags Out:   none
class Store(InstructionCommand):
    """Store a register to memory."""

    __slots__ = ("register",)

    def __init__(self, register: str):
        self.register = register

    def execute(self, cpu) -> StepResult:
        cpu.write(cpu.operand_address, getattr(cpu.registers, self.register))
        return DONE

    def __repr__(self) -> str:
        return f"Store({self.register})"


# Instruction: TAX / TAY / TSX / TXA / TXS / TYA
# Function:    D = S
# Flags Out:   N, Z (except TXS)
class Transfer(InstructionCommand):
    """Copy one register into another."""

    __slots__ = ("source", "destination")

    def __init__(self, source: str, destination: str):
        self.source = source
        self.destination = destination

    def execute(self, cpu) -> StepResult:
        value = getattr(cpu.registers, self.source)
        setattr(cpu.registers, self.destination, value)
        if self.destination != "SP":
            self.update_nz(cpu, value)
        return DONE

    def __repr__(self) -> str:
        return f"Transfer({self.source}->{self.destination})"


# Instruction: INX / INY / DEX / DEY
# Function:    R = R +/- 1
# Flags Out:   N, Z
class Increment(InstructionCommand):
    """Add a signed step to an index register, wrapping at 8 bits."""

    __slots__ = ("register", "step")

    def __init__(self, register: str, step: int):
        self.register = register
        self.step = step

    def execute(self, cpu) -> StepResult:
        value = (getattr(cpu.registers, self.register) + self.step) & 0xFF
        setattr(cpu.registers, self.register, value)
        self.update_nz(cpu, value)
        return DONE

    def __repr__(self) -> str:
        return f"Increment({self.register}, {self.step:+d})"


# Instruction: CLC / CLD / CLI / CLV / SEC / SED / SEI
class SetFlag(InstructionCommand):
    """Set or clear a single status flag."""

    __slots__ = ("flag", "value")

    def __init__(self, flag: int, value: bool):
        self.flag = flag
        self.value = value

    def execute(self, cpu) -> StepResult:
        if self.value:
            cpu.registers.P |= self.flag
        else:
            cpu.registers.P &= ~self.flag
        return DONE

    def __repr__(self) -> str:
        return f"SetFlag(0x{self.flag:02X}, {self.value})"


# Instruction: JMP
# Function:    PC = address
class Jump(InstructionCommand):
    __slots__ = ()

    def execute(self, cpu) -> StepResult:
        cpu.registers.PC = cpu.operand_address
        return DONE


class NoOperation(InstructionCommand):
    __slots__ = ()

    def execute(self, cpu) -> StepResult:
        return DONE


# Instruction: BRK
# Function:    Software interrupt
# Description: Pushes PC+2 and the status register (with B set) and jumps
#              through the IRQ/BRK vector. Interrupt-disable is left as is.
class Break(InstructionCommand):
    """Seven-cycle software interrupt."""

    __slots__ = ()

    def execute(self, cpu) -> StepResult:
        step = cpu.cycles + 1

        if step == 1:
            # Skip the break mark byte
            cpu.registers.PC += 1
        elif step == 2:
            cpu.registers.P |= FLAG_BREAK
        elif step == 3:
            cpu.push((cpu.registers.PC >> 8) & 0xFF)
        elif step == 4:
            cpu.push(cpu.registers.PC & 0xFF)
        elif step == 5:
            cpu.push(cpu.registers.P)
        elif step == 6:
            cpu.registers.PC = cpu.read(IRQ_BRK_VECTOR_LOW)
        else:
            cpu.registers.PC |= cpu.read(IRQ_BRK_VECTOR_HIGH) << 8
            logger.debug(f"BRK vectored to ${cpu.registers.PC:04X}")
            return DONE

        return PENDING
