"""
Step results for the resumable DECODE and EXECUTE phases.

Both the addressing-mode resolver and the instruction commands are polled
once per cycle. They answer with either PENDING (call me again next cycle)
or a Done carrying the final value. Keeping the two cases as distinct types
means a resolved address of 0 can never be mistaken for "not finished".
"""

from typing import Any, Union


class Pending:
    """More cycles are required."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "PENDING"

    def __bool__(self) -> bool:
        return False


class Done:
    """The step finished; `value` holds its result (if any)."""

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    def __repr__(self) -> str:
        return f"Done({self.value!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Done) and other.value == self.value

    def __hash__(self) -> int:
        return hash(("Done", self.value))


PENDING = Pending()
DONE = Done()

StepResult = Union[Pending, Done]
