"""
Cycle-accurate analysis tools for instruction timing inspection.
Extracts per-instruction cycle counts from recorded CPU state history.
"""

import numpy as np
import logging
from typing import Dict, List, Tuple, Optional, Any
import matplotlib.pyplot as plt
from collections import defaultdict

logger = logging.getLogger("Cycle6502.CycleAnalyzer")

class CycleAnalyzer:
    """
    Analyzes per-cycle CPU snapshots (as produced by CPU6502.get_state()).

    The history is expected to be recorded one snapshot per tick, starting at
    an instruction boundary. A snapshot whose state is FETCH marks the cycle on
    which an instruction completed.
    """

    def __init__(self):
        logger.info("Initialized cycle analyzer")

    def extract_instruction_timings(self, state_history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Split a per-tick history into completed instructions.

        Args:
            state_history: List of CPU state snapshots

        Returns:
            One entry per completed instruction with its mnemonic, mode,
            cycle count and whether its address resolution crossed a page
        """
        if not state_history:
            return []

        timings = []
        # The first snapshot is taken after the first tick
        last_boundary = state_history[0].get("cycle", 1) - 1

        for i, state in enumerate(state_history):
            if state.get("state") != "FETCH":
                continue

            cycle = state.get("cycle", i + 1)
            timings.append({
                "instruction": state.get("instruction"),
                "mode": state.get("mode"),
                "cycles": cycle - last_boundary,
                "end_cycle": cycle,
                "page_crossed": bool(state.get("page_crossed", False))
            })
            last_boundary = cycle

        return timings

    def analyze_timing_patterns(self, state_history: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Analyze instruction timing in a recorded history.

        Args:
            state_history: List of CPU state snapshots

        Returns:
            Dictionary with timing analysis results
        """
        if not state_history:
            logger.warning("No state history to analyze timing patterns")
            return {"error": "No state history available"}

        timings = self.extract_instruction_timings(state_history)
        instruction_cycles = np.array([t["cycles"] for t in timings], dtype=np.int64)

        by_instruction = defaultdict(list)
        for timing in timings:
            by_instruction[timing["instruction"]].append(timing["cycles"])

        cycles = [state.get("cycle", i + 1) for i, state in enumerate(state_history)]

        return {
            "instruction_timings": timings,
            "cycle_patterns": self._find_cycle_patterns(instruction_cycles.tolist()),
            "per_instruction": {
                mnemonic: {
                    "count": len(counts),
                    "min_cycles": int(np.min(counts)),
                    "max_cycles": int(np.max(counts)),
                    "avg_cycles": float(np.mean(counts))
                }
                for mnemonic, counts in by_instruction.items()
            },
            "statistics": {
                "total_cycles": cycles[-1] - cycles[0] + 1,
                "instruction_count": len(timings),
                "page_crossings": sum(1 for t in timings if t["page_crossed"]),
                "min_instruction_cycles": int(instruction_cycles.min()) if len(timings) else 0,
                "max_instruction_cycles": int(instruction_cycles.max()) if len(timings) else 0,
                "avg_instruction_cycles": float(instruction_cycles.mean()) if len(timings) else 0.0
            }
        }

    def _find_cycle_patterns(self, cycle_counts: List[int]) -> List[Dict[str, Any]]:
        """
        Find repeating sequences of instruction cycle counts.

        Args:
            cycle_counts: Cycle count of each instruction, in execution order

        Returns:
            List of identified patterns
        """
        if not cycle_counts:
            return []

        patterns = []

        for pattern_length in range(1, min(9, len(cycle_counts) // 3 + 1)):
            pattern_counts = defaultdict(int)

            for i in range(len(cycle_counts) - pattern_length + 1):
                segment = tuple(cycle_counts[i:i+pattern_length])
                pattern_counts[segment] += 1

            # Patterns that repeat at least 3 times, most frequent first
            common_patterns = {
                pattern: count for pattern, count in pattern_counts.items()
                if count >= 3
            }

            for pattern, count in sorted(common_patterns.items(), key=lambda x: x[1], reverse=True)[:3]:
                patterns.append({
                    "pattern": list(pattern),
                    "length": pattern_length,
                    "occurrences": count
                })

        return patterns

    def analyze_register_activity(self, state_history: List[Dict[str, Any]],
                                register_names: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Analyze register activity patterns.

        Args:
            state_history: List of CPU state snapshots
            register_names: Specific registers to analyze (all if None)

        Returns:
            Dictionary with register activity analysis
        """
        if not state_history:
            logger.warning("No state history to analyze register activity")
            return {"error": "No state history available"}

        if register_names is None:
            names = set()
            for state in state_history:
                if "registers" in state:
                    names.update(state["registers"].keys())
            register_names = sorted(names)

        if not register_names:
            logger.warning("No registers found in state history")
            return {"error": "No register data available"}

        register_analysis = {}

        for reg_name in register_names:
            values = []
            for state in state_history:
                if "registers" in state and reg_name in state["registers"]:
                    values.append(state["registers"][reg_name])
                else:
                    values.append(values[-1] if values else 0)

            changes = sum(1 for i in range(1, len(values)) if values[i] != values[i-1])

            value_counts = defaultdict(int)
            for v in values:
                value_counts[v] += 1

            register_analysis[reg_name] = {
                "change_frequency": changes / (len(values) - 1) if len(values) > 1 else 0,
                "total_changes": changes,
                "min_value": min(values),
                "max_value": max(values),
                "mean_value": float(np.mean(values)),
                "most_common_values": sorted(value_counts.items(), key=lambda x: x[1], reverse=True)[:3],
                "value_entropy": self._calculate_entropy(value_counts)
            }

        return register_analysis

    def _calculate_entropy(self, value_counts: Dict[int, int]) -> float:
        """
        Calculate Shannon entropy of a value distribution.

        Args:
            value_counts: Dictionary of value frequencies

        Returns:
            Entropy in bits
        """
        counts = np.array(list(value_counts.values()), dtype=np.float64)
        probabilities = counts / counts.sum()
        return float(-np.sum(probabilities * np.log2(probabilities)))

    def plot_cycle_histogram(self, state_history: List[Dict[str, Any]],
                           output_path: Optional[str] = None,
                           figsize: Tuple[int, int] = (10, 6)) -> bool:
        """
        Plot the distribution of cycles per instruction.

        Args:
            state_history: List of CPU state snapshots
            output_path: File to save the figure to (None to show it)
            figsize: Figure size (width, height) in inches

        Returns:
            True if a plot was produced
        """
        timings = self.extract_instruction_timings(state_history)
        if not timings:
            logger.warning("Not enough cycle data to plot histogram")
            return False

        counts = np.array([t["cycles"] for t in timings])
        bins = np.arange(counts.min(), counts.max() + 2) - 0.5

        fig = plt.figure(figsize=figsize)
        plt.hist(counts, bins=bins, alpha=0.7, color='blue')
        plt.xlabel('Cycles per instruction')
        plt.ylabel('Frequency')
        plt.title('Instruction Cycle Distribution')
        plt.grid(True, alpha=0.3)

        stats_text = f"Mean: {counts.mean():.2f}\nMin: {counts.min()}\nMax: {counts.max()}"
        plt.annotate(stats_text, xy=(0.95, 0.95), xycoords='axes fraction',
                    fontsize=10, ha='right', va='top',
                    bbox=dict(boxstyle="round,pad=0.3", fc="white", alpha=0.8))

        plt.tight_layout()
        if output_path:
            fig.savefig(output_path)
            plt.close(fig)
            logger.info(f"Saved cycle histogram to {output_path}")
        else:
            plt.show()
        return True
