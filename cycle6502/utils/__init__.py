"""
Host-side utilities: configuration and error reporting.
"""
from .config_manager import ConfigManager
from .error_handler import ErrorHandler, ErrorCategory, ErrorLevel
