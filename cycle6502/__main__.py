"""
Main entry point for the cycle6502 package.

This module allows the package to be run as a module using:
python -m cycle6502 [args]
"""

import sys

from cycle6502.main import main

if __name__ == "__main__":
    sys.exit(main())
