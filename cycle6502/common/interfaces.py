# common/interfaces.py
from abc import ABC, abstractmethod
import typing as t

class CPU(ABC):
    @abstractmethod
    def reset(self) -> None:
        """Reset the CPU to initial state."""
        pass

    @abstractmethod
    def tick(self) -> None:
        """Advance the CPU by exactly one cycle."""
        pass

    @abstractmethod
    def get_state(self) -> dict:
        """Return the current CPU state as a dictionary."""
        pass

    @abstractmethod
    def read(self, address: int) -> int:
        """Read a byte through the CPU's memory bus."""
        pass

    @abstractmethod
    def write(self, address: int, value: int) -> None:
        """Write a byte through the CPU's memory bus."""
        pass

class Memory(ABC):
    @abstractmethod
    def read(self, address: int) -> int:
        """Read a byte from the specified address."""
        pass

    @abstractmethod
    def write(self, address: int, value: int) -> None:
        """Write a byte to the specified address."""
        pass

    @abstractmethod
    def load(self, data: t.Sequence[int], start_address: int) -> None:
        """Copy a block of bytes into memory."""
        pass

    @abstractmethod
    def dump(self, start_address: int = 0, length: t.Optional[int] = None) -> t.List[int]:
        """Return a copy of a range of memory."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Zero-fill the memory."""
        pass
