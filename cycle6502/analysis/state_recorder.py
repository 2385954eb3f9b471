"""
State recording module for capturing per-cycle CPU state.
"""

import numpy as np
import logging
import json
import os
import time
from typing import Dict, List, Optional, Any
from collections import deque

from ..constants import MAX_HISTORY_SIZE

logger = logging.getLogger("Cycle6502.StateRecorder")

class StateRecorder:
    """
    Records and queries CPU state snapshots taken during emulation.

    Snapshots are the dictionaries produced by CPU6502.get_state(); the
    history is a bounded ring buffer so long runs do not grow without limit.
    """

    def __init__(self, max_history: int = MAX_HISTORY_SIZE,
                record_filter: Optional[List[str]] = None):
        """
        Initialize the state recorder.

        Args:
            max_history: Maximum number of states to keep in memory
            record_filter: List of register names to include (None for all)

        Raises:
            ValueError: If max_history is less than 1
        """
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")

        self.max_history = max_history
        self.record_filter = record_filter

        # State storage (circular buffer)
        self.state_history = deque(maxlen=max_history)

        # Cycle -> snapshot, kept in step with the buffer
        self.cycle_index = {}

        self.stats = {
            "total_records": 0,
            "start_time": time.time(),
            "start_cycle": None,
            "current_cycle": None,
            "unique_registers": set(),
        }

        logger.info(f"Initialized state recorder with max history {max_history}")

    def record_cpu(self, cpu) -> None:
        """Record a snapshot of `cpu`."""
        self.record_state(cpu.get_state())

    def record_state(self, state: Dict[str, Any]) -> None:
        """
        Record a state snapshot.

        Args:
            state: CPU state dictionary
        """
        if self.record_filter is not None and "registers" in state:
            state = dict(state)
            state["registers"] = {
                name: value for name, value in state["registers"].items()
                if name in self.record_filter
            }

        self.stats["total_records"] += 1

        # Drop the index entry of the snapshot about to fall off the buffer
        if len(self.state_history) == self.max_history:
            evicted = self.state_history[0]
            if "cycle" in evicted and self.cycle_index.get(evicted["cycle"]) is evicted:
                del self.cycle_index[evicted["cycle"]]

        if "cycle" in state:
            cycle = state["cycle"]

            if self.stats["start_cycle"] is None:
                self.stats["start_cycle"] = cycle

            self.stats["current_cycle"] = cycle
            self.cycle_index[cycle] = state

        if "registers" in state:
            self.stats["unique_registers"].update(state["registers"].keys())

        self.state_history.append(state)

    def clear(self) -> None:
        """Discard all recorded history."""
        self.state_history.clear()
        self.cycle_index = {}
        self.stats["total_records"] = 0
        self.stats["start_cycle"] = None
        self.stats["current_cycle"] = None
        self.stats["unique_registers"] = set()
        self.stats["start_time"] = time.time()

    def get_state_history(self, start_idx: Optional[int] = None,
                       end_idx: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Get a slice of the state history.

        Args:
            start_idx: Starting index (None for beginning)
            end_idx: Ending index (None for end)

        Returns:
            List of state snapshots
        """
        history_list = list(self.state_history)

        if start_idx is not None or end_idx is not None:
            return history_list[start_idx:end_idx]
        return history_list

    def get_state_by_cycle(self, cycle: int) -> Optional[Dict[str, Any]]:
        """
        Get the snapshot recorded at a specific cycle.

        Args:
            cycle: Cycle number to retrieve

        Returns:
            State snapshot if found, None otherwise
        """
        return self.cycle_index.get(cycle)

    def get_register_history(self, register_name: str) -> Dict[str, np.ndarray]:
        """
        Get history for a specific register.

        Args:
            register_name: Name of register to retrieve

        Returns:
            Dictionary with cycle numbers and register values
        """
        cycles = []
        values = []

        for i, state in enumerate(self.state_history):
            if "registers" in state and register_name in state["registers"]:
                cycles.append(state.get("cycle", i))
                values.append(state["registers"][register_name])

        return {
            "cycles": np.array(cycles, dtype=np.int64),
            "values": np.array(values, dtype=np.int64)
        }

    def find_register_value_changes(self, register_name: str,
                                 start_cycle: Optional[int] = None,
                                 end_cycle: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Find all instances where a register changes value.

        Args:
            register_name: Register name to track
            start_cycle: Starting cycle (None for beginning)
            end_cycle: Ending cycle (None for end)

        Returns:
            List of change events with cycle and value information
        """
        changes = []
        last_value = None

        for state in self.state_history:
            if "registers" not in state or register_name not in state["registers"]:
                continue

            current_value = state["registers"][register_name]
            current_cycle = state.get("cycle")

            if start_cycle is not None and current_cycle is not None and current_cycle < start_cycle:
                last_value = current_value
                continue

            if end_cycle is not None and current_cycle is not None and current_cycle > end_cycle:
                break

            if last_value is not None and current_value != last_value:
                changes.append({
                    "cycle": current_cycle,
                    "instruction": state.get("instruction"),
                    "old_value": last_value,
                    "new_value": current_value
                })

            last_value = current_value

        return changes

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get recorder statistics.

        Returns:
            Dictionary with statistics
        """
        elapsed_time = time.time() - self.stats["start_time"]

        if self.stats["start_cycle"] is not None and self.stats["current_cycle"] is not None:
            total_cycles = self.stats["current_cycle"] - self.stats["start_cycle"]
        else:
            total_cycles = 0

        return {
            "total_records": self.stats["total_records"],
            "elapsed_time": elapsed_time,
            "total_cycles": total_cycles,
            "cycles_per_second": total_cycles / elapsed_time if elapsed_time > 0 else 0,
            "current_history_size": len(self.state_history),
            "max_history_size": self.max_history,
            "unique_registers": sorted(self.stats["unique_registers"]),
        }

    def save_history(self, filename: str, format: str = 'json') -> bool:
        """
        Save state history to a file.

        Args:
            filename: Output filename
            format: File format ('json' or 'csv')

        Returns:
            True if successful, False otherwise
        """
        try:
            output_dir = os.path.dirname(filename)
            if output_dir and not os.path.exists(output_dir):
                os.makedirs(output_dir)

            if format == 'json':
                data = {
                    "history": list(self.state_history),
                    "statistics": self.get_statistics()
                }
                with open(filename, 'w') as f:
                    json.dump(data, f, indent=2)

            elif format == 'csv':
                register_names = sorted(self.stats["unique_registers"])
                with open(filename, 'w') as f:
                    headers = ["record_idx", "cycle", "state", "instruction", "operand_address"]
                    headers.extend(f"reg_{name}" for name in register_names)
                    f.write(",".join(headers) + "\n")

                    for i, state in enumerate(self.state_history):
                        row = [
                            str(i),
                            str(state.get("cycle", "")),
                            str(state.get("state", "")),
                            str(state.get("instruction") or ""),
                            str(state.get("operand_address", ""))
                        ]
                        registers = state.get("registers", {})
                        row.extend(str(registers.get(name, "")) for name in register_names)
                        f.write(",".join(row) + "\n")
            else:
                logger.error(f"Unsupported format: {format}")
                return False

            logger.info(f"Saved state history to {filename} in {format} format")
            return True

        except OSError as e:
            logger.error(f"Error saving history: {e}")
            return False

    def load_history(self, filename: str) -> bool:
        """
        Load state history from a JSON file written by save_history.

        Args:
            filename: Input filename

        Returns:
            True if successful, False otherwise
        """
        _, ext = os.path.splitext(filename)
        if ext.lower() != '.json':
            logger.error(f"Unsupported file format: {ext}")
            return False

        try:
            with open(filename, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading history: {e}")
            return False

        self.clear()
        for state in data.get("history", []):
            self.record_state(state)

        logger.info(f"Loaded state history from {filename}")
        return True
