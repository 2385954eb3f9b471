"""
6502 register file.
"""

from ..constants import RESET_REGISTERS, REGISTER_NAMES

class Registers:
    """
    The six programmer-visible registers.

    Every assignment is masked: A, X, Y, SP and P to 8 bits, PC to 16 bits.
    Hosts and tests may read and write the attributes directly.
    """

    __slots__ = ("_A", "_X", "_Y", "_SP", "_PC", "_P")

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        for name in REGISTER_NAMES:
            setattr(self, name, RESET_REGISTERS[name])

    @property
    def A(self) -> int:
        return self._A

    @A.setter
    def A(self, value: int) -> None:
        self._A = value & 0xFF

    @property
    def X(self) -> int:
        return self._X

    @X.setter
    def X(self, value: int) -> None:
        self._X = value & 0xFF

    @property
    def Y(self) -> int:
        return self._Y

    @Y.setter
    def Y(self, value: int) -> None:
        self._Y = value & 0xFF

    @property
    def SP(self) -> int:
        return self._SP

    @SP.setter
    def SP(self, value: int) -> None:
        self._SP = value & 0xFF

    @property
    def PC(self) -> int:
        return self._PC

    @PC.setter
    def PC(self, value: int) -> None:
        self._PC = value & 0xFFFF

    @property
    def P(self) -> int:
        return self._P

    @P.setter
    def P(self, value: int) -> None:
        self._P = value & 0xFF

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in REGISTER_NAMES}

    def __repr__(self) -> str:
        return (f"Registers(A=${self.A:02X}, X=${self.X:02X}, Y=${self.Y:02X}, "
                f"SP=${self.SP:02X}, PC=${self.PC:04X}, P=${self.P:02X})")
