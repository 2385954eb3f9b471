"""
Cycle-stepped MOS 6502 CPU engine.

Instructions move through a FETCH -> DECODE -> EXECUTE state machine, one
state transition per call to tick(). DECODE polls the addressing-mode
resolver until the effective address is known and EXECUTE polls the
instruction command until it reports completion, so every instruction
consumes exactly the cycles its addressing mode and command require.
"""

from enum import IntEnum
import logging
import typing as t

from ..common.interfaces import CPU
from ..constants import DEFAULT_LOAD_ADDRESS, DEFAULT_MEMORY_SIZE, STACK_BASE
from .addressing import AddressResolver
from .bus import MemoryBus
from .errors import UnknownOpcodeError
from .instruction_table import DEFAULT_INSTRUCTION_TABLE, InstructionDefinition, InstructionTable
from .registers import Registers
from .results import Pending

logger = logging.getLogger("Cycle6502.CPU")

class InstructionState(IntEnum):
    FETCH = 0
    DECODE = 1
    EXECUTE = 2

class CPU6502(CPU):
    """
    Emulates the MOS Technology 6502 at cycle granularity.

    The host drives the CPU by calling tick() at whatever cadence it needs;
    the CPU never paces itself. Registers are exposed on `registers` for
    inspection and seeding.

    Args:
        memory: Memory bus to attach (a fresh 64KB bus if omitted)
        instruction_table: Opcode table (the full default table if omitted)
    """

    def __init__(self, memory: t.Optional[MemoryBus] = None,
                 instruction_table: t.Optional[InstructionTable] = None):
        self.registers = Registers()
        self.memory = memory if memory is not None else MemoryBus(DEFAULT_MEMORY_SIZE)
        self.instruction_table = instruction_table if instruction_table is not None else DEFAULT_INSTRUCTION_TABLE

        # Owned per CPU so two engines never share in-flight resolution
        self.resolver = AddressResolver()

        # State machine
        self.state = InstructionState.FETCH
        self.cycles = 0
        self.current_instruction: t.Optional[InstructionDefinition] = None
        self.operand_address = 0

        # Counters
        self.total_cycles = 0
        self.instructions_executed = 0

        logger.info("6502 CPU initialized")

    @property
    def page_crossed(self) -> bool:
        """Whether the last address resolution crossed a page boundary."""
        return self.resolver.page_crossed

    def reset(self) -> None:
        """
        Reset registers to their power-on defaults and clear memory.

        Any instruction in flight is abandoned.
        """
        self.registers.reset()
        self.memory.reset()
        self.resolver.reset()

        self.state = InstructionState.FETCH
        self.cycles = 0
        self.current_instruction = None
        self.operand_address = 0
        self.total_cycles = 0
        self.instructions_executed = 0

        logger.info("CPU reset")

    def tick(self) -> None:
        """Advance the state machine by one cycle."""
        if self.state == InstructionState.FETCH:
            self._fetch_cycle()
        elif self.state == InstructionState.DECODE:
            self._decode_cycle()
        else:
            self._execute_cycle()

        self.total_cycles += 1

    def _fetch_cycle(self) -> None:
        address = self.registers.PC
        opcode = self.read(address)
        instruction = self.instruction_table.lookup(opcode)

        if instruction is None:
            raise UnknownOpcodeError(opcode, address)

        self.registers.PC += 1
        self.current_instruction = instruction
        self.resolver.reset()

        self.cycles = 0
        self.state = InstructionState.DECODE

        logger.debug(f"${address:04X}: {instruction.mnemonic} ({instruction.mode.value})")

    def _decode_cycle(self) -> None:
        result = self.resolver.resolve(self.current_instruction.mode, self)

        if isinstance(result, Pending):
            self.cycles += 1
            return

        self.operand_address = result.value
        self.cycles = 0
        self.state = InstructionState.EXECUTE

    def _execute_cycle(self) -> None:
        result = self.current_instruction.command.execute(self)

        if isinstance(result, Pending):
            self.cycles += 1
            return

        self.instructions_executed += 1
        self.state = InstructionState.FETCH

    def step_instruction(self) -> int:
        """
        Tick until the current (or next) instruction completes.

        Returns:
            Number of cycles consumed
        """
        ticks = 0
        while True:
            self.tick()
            ticks += 1
            if self.state == InstructionState.FETCH:
                return ticks

    def run(self, max_ticks: int, stop: t.Optional[t.Callable[['CPU6502'], bool]] = None) -> int:
        """
        Tick repeatedly.

        Args:
            max_ticks: Upper bound on the number of cycles to run
            stop: Optional predicate checked at each instruction boundary;
                running stops as soon as it returns True

        Returns:
            Number of cycles consumed
        """
        ticks = 0
        while ticks < max_ticks:
            self.tick()
            ticks += 1
            if stop is not None and self.state == InstructionState.FETCH and stop(self):
                break
        return ticks

    def load_program(self, program: t.Sequence[int], start_address: int = DEFAULT_LOAD_ADDRESS) -> None:
        """
        Load a program into memory and point PC at it.

        Args:
            program: Program bytes
            start_address: Load address
        """
        self.memory.load(program, start_address)
        self.registers.PC = start_address
        logger.info(f"Loaded {len(program)} byte program at ${start_address:04X}")

    def read(self, address: int) -> int:
        return self.memory.read(address)

    def write(self, address: int, value: int) -> None:
        self.memory.write(address, value)

    def push(self, value: int) -> None:
        """Push a byte onto the stack page; SP wraps without error."""
        self.write(STACK_BASE + self.registers.SP, value)
        self.registers.SP -= 1

    def pop(self) -> int:
        """Pop a byte from the stack page; SP wraps without error."""
        self.registers.SP += 1
        return self.read(STACK_BASE + self.registers.SP)

    def get_state(self) -> dict:
        """
        Get the current CPU state.

        Returns:
            Dictionary with CPU state
        """
        instruction = self.current_instruction
        return {
            "cycle": self.total_cycles,
            "state": self.state.name,
            "phase_cycle": self.cycles,
            "instruction": instruction.mnemonic if instruction else None,
            "mode": instruction.mode.value if instruction else None,
            "operand_address": self.operand_address,
            "page_crossed": self.page_crossed,
            "instructions_executed": self.instructions_executed,
            "registers": self.registers.as_dict(),
        }
