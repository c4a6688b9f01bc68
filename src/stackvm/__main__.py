#!/usr/bin/env python3
"""
StackVM command line - run or disassemble a program.

Usage:
    python -m stackvm                      # Run the demo program
    python -m stackvm 4 33 4 44 0 6        # Run PUSH 33, PUSH 44, ADD, PRINT
    python -m stackvm --disassemble        # List the demo program
    python -m stackvm --trace              # Log every executed instruction
    python -m stackvm --output out.txt     # Write PRINT output to a file
"""

import argparse
import logging
import sys
from typing import List, Optional

from stackvm.stackvm_disassembler import disassemble
from stackvm.stackvm_error import StackVMError
from stackvm.stackvm_output import StackVMFileWatcher, StackVMLoggingStepWatcher
from stackvm.stackvm_programs import DEMO_PROGRAM
from stackvm.stackvm_vm import StackVM, StackVMOutputWatcher


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="stackvm",
        description="Run a stack-based bytecode program with named registers"
    )
    parser.add_argument(
        "values",
        nargs="*",
        type=int,
        help="Program as integer opcodes and operands (default: the demo program)"
    )
    parser.add_argument("--disassemble", action="store_true", help="List the program instead of running it")
    parser.add_argument("--output", metavar="FILE", help="Write PRINT output to FILE instead of stdout")
    parser.add_argument("--trace", action="store_true", help="Log each executed instruction (implies DEBUG logging)")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit status."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or args.trace else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    program = args.values if args.values else list(DEMO_PROGRAM)

    if args.disassemble:
        print(disassemble(program))
        return 0

    if args.output is None:
        return _execute(program, None, args.trace)

    try:
        with StackVMFileWatcher(args.output) as watcher:
            return _execute(program, watcher, args.trace)

    except OSError as e:
        print(f"Error: cannot write output file '{args.output}': {e.strerror}", file=sys.stderr)
        return 1


def _execute(program: List[int], watcher: Optional[StackVMOutputWatcher], trace: bool) -> int:
    """Run a program, reporting any failure on stderr; returns the exit status."""
    vm = StackVM(output_watcher=watcher, step_watcher=StackVMLoggingStepWatcher() if trace else None)
    try:
        vm.execute(program)

    except StackVMError as e:
        print(str(e), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
