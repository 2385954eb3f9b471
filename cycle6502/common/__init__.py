"""
Common functionality shared across emulator components.
"""
from .interfaces import CPU, Memory
