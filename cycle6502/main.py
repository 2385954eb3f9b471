"""
Main entry point for cycle6502.

This module provides the command-line host driver: it loads a program,
ticks the CPU until BRK completes or the tick budget runs out, and reports
registers and per-instruction cycle statistics.
"""

import argparse
import logging
import re
import time
import sys
from typing import List, Optional

from .analysis.cycle_analyzer import CycleAnalyzer
from .analysis.state_recorder import StateRecorder
from .constants import LOG_LEVELS, TRACE_FORMATS
from .cpu.bus import MemoryBus
from .cpu.cpu import CPU6502, InstructionState
from .cpu.errors import EmulatorError
from .utils.config_manager import ConfigManager
from .utils.error_handler import ErrorCategory, ErrorHandler

logger = logging.getLogger("Cycle6502")

def parse_hex_bytes(text: str) -> bytes:
    """
    Parse a hex byte string such as "A9 01 00", "a9,01,00", "$A9 $01" or "A90100".

    Raises:
        ValueError: If the text is not a sequence of hex bytes
    """
    data = bytearray()
    for token in re.split(r"[\s,]+", text.strip()):
        if not token:
            continue
        if token.lower().startswith("0x"):
            token = token[2:]
        elif token.startswith("$"):
            token = token[1:]

        if len(token) > 2:
            data.extend(bytes.fromhex(token))
        else:
            data.append(int(token, 16))

    if not data:
        raise ValueError("No program bytes given")
    return bytes(data)

def parse_address(text: str) -> int:
    """Parse an address given as decimal, 0x-prefixed or $-prefixed hex."""
    if text.startswith("$"):
        value = int(text[1:], 16)
    else:
        value = int(text, 0)
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"Address out of range: {text}")
    return value

def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"Must be a positive integer: {text}")
    return value

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cycle6502",
                                     description="Cycle-stepped MOS 6502 emulator")
    parser.add_argument('program', nargs='?', help='Path to a raw binary program')
    parser.add_argument('--hex', type=str, help='Program bytes as a hex string, e.g. "A9 01 00"')
    parser.add_argument('--start', type=parse_address, help='Load address (default from configuration)')
    parser.add_argument('--max-ticks', type=positive_int, help='Maximum number of cycles to run')
    parser.add_argument('--config', type=str, help='Path to a JSON or YAML configuration file')
    parser.add_argument('--trace', type=str, help='Save the per-cycle trace to this path')
    parser.add_argument('--trace-format', type=str, choices=TRACE_FORMATS,
                        help='Trace output format')
    parser.add_argument('--plot', type=str, help='Save a cycles-per-instruction histogram to this path')
    parser.add_argument('--log-level', type=str, choices=LOG_LEVELS, help='Logging level')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and run a program.

    Returns:
        Process exit status (0 on success, 1 on any error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    error_handler = ErrorHandler()

    config = ConfigManager()
    if args.config and not config.load_config(args.config):
        error_handler.handle_error(message=f"Could not load configuration from {args.config}",
                                   category=ErrorCategory.CONFIGURATION)
        return 1

    # Command-line options win over configuration
    if args.log_level:
        config.set("logging.level", args.log_level)
    if args.debug:
        config.set("logging.level", "DEBUG")
    if args.max_ticks is not None:
        config.set("run.max_ticks", args.max_ticks)
    if args.start is not None:
        config.set("load_address", args.start)
    if args.trace:
        config.set("trace.enabled", True)
        config.set("trace.output", args.trace)
    if args.trace_format:
        config.set("trace.format", args.trace_format)

    log_level = getattr(logging, config.get("logging.level", "INFO"))
    error_handler.set_log_levels(log_level if config.get("logging.console", True) else logging.CRITICAL + 1)
    if config.get("logging.file"):
        error_handler.set_log_file(config.get("logging.file"))

    # Load program bytes
    try:
        if args.hex:
            program = parse_hex_bytes(args.hex)
        elif args.program:
            with open(args.program, 'rb') as f:
                program = f.read()
        else:
            error_handler.log_exception(ValueError("No program given; pass a file or --hex"))
            return 1
    except (OSError, ValueError) as e:
        error_handler.log_exception(e, message=f"Error loading program: {e}", category=ErrorCategory.INPUT)
        return 1

    max_ticks = config.get("run.max_ticks")
    stop_on_brk = config.get("run.stop_on_brk", True)
    start_address = config.get("load_address")

    print("="*80)
    print(f"  cycle6502")
    print(f"  Machine: {config.get('machine')}")
    print(f"  Program: {len(program)} bytes at ${start_address:04X}")
    print(f"  Max ticks: {max_ticks}")
    print("="*80)

    state_recorder = StateRecorder(max_history=config.get("trace.max_history"))
    cycle_analyzer = CycleAnalyzer()

    try:
        cpu = CPU6502(MemoryBus(config.get("memory_size")))
        cpu.load_program(program, start_address)
    except (EmulatorError, ValueError) as e:
        error_handler.log_exception(e, message=f"Error loading program: {e}")
        return 1

    # Run
    start_time = time.time()
    ticks = 0
    try:
        while ticks < max_ticks:
            cpu.tick()
            ticks += 1
            state_recorder.record_cpu(cpu)

            if stop_on_brk and cpu.state == InstructionState.FETCH \
                    and cpu.current_instruction.mnemonic == "BRK":
                logger.info(f"BRK completed after {ticks} cycles")
                break
        else:
            logger.warning(f"Tick budget of {max_ticks} cycles exhausted")
    except EmulatorError as e:
        error_handler.log_exception(e, context=cpu.get_state())
        return 1

    execution_time = time.time() - start_time
    cycles_per_second = ticks / execution_time if execution_time > 0 else 0

    if config.get("trace.enabled") and config.get("trace.output"):
        if not state_recorder.save_history(config.get("trace.output"), format=config.get("trace.format")):
            return 1

    state_history = state_recorder.get_state_history()

    # Print summary of registers
    print("\nRegisters:")
    for name, value in cpu.registers.as_dict().items():
        width = 4 if name == "PC" else 2
        print(f"  {name:<2} = ${value:0{width}X}")

    timing_analysis = cycle_analyzer.analyze_timing_patterns(state_history)
    if "statistics" in timing_analysis:
        stats = timing_analysis["statistics"]
        print("\nTiming Analysis Summary:")
        print(f"Instructions executed: {stats['instruction_count']}")
        print(f"Min cycles per instruction: {stats['min_instruction_cycles']}")
        print(f"Max cycles per instruction: {stats['max_instruction_cycles']}")
        print(f"Avg cycles per instruction: {stats['avg_instruction_cycles']:.2f}")
        print(f"Page crossings: {stats['page_crossings']}")

        print("\nPer-instruction cycles:")
        for mnemonic, info in sorted(timing_analysis["per_instruction"].items()):
            print(f"  {mnemonic}: {info['count']} x, {info['min_cycles']}-{info['max_cycles']} cycles")

    if args.plot:
        cycle_analyzer.plot_cycle_histogram(state_history, output_path=args.plot)

    print("\nRun Summary:")
    print(f"Cycles simulated: {ticks}")
    print(f"Execution time: {execution_time:.4f} seconds")
    print(f"Performance: {cycles_per_second:.2f} cycles/second")

    logger.info("cycle6502 run complete")
    return 0

if __name__ == "__main__":
    sys.exit(main())
