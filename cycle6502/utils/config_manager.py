"""
Configuration management for cycle6502.

Loads, validates and provides access to the settings used by the host
driver: machine layout, program load address, run limits, tracing and
logging. JSON and YAML files are supported.
"""

import os
import json
import logging
import copy
from typing import Dict, Any, Optional, List
import yaml

from ..constants import DEFAULT_LOAD_ADDRESS, DEFAULT_MEMORY_SIZE, MAX_HISTORY_SIZE, TRACE_FORMATS, LOG_LEVELS
from ..system_configs import SYSTEM_CONFIGS

logger = logging.getLogger("Cycle6502.ConfigManager")

class ConfigManager:
    """
    Configuration management for cycle6502.

    Args:
        config_path: Path to configuration file (None for default values)
    """

    def __init__(self, config_path: Optional[str] = None):
        self.defaults = {
            "machine": "mos6502",
            "memory_size": DEFAULT_MEMORY_SIZE,
            "load_address": DEFAULT_LOAD_ADDRESS,
            "run": {
                "max_ticks": 100000,
                "stop_on_brk": True
            },
            "trace": {
                "enabled": False,
                "max_history": MAX_HISTORY_SIZE,
                "output": None,
                "format": "json"
            },
            "logging": {
                "level": "INFO",
                "file": None,
                "console": True
            }
        }

        self.config = copy.deepcopy(self.defaults)

        # Dotted key paths changed from defaults
        self.modified_keys = set()

        if config_path:
            self.load_config(config_path)

        logger.debug("ConfigManager initialized")

    def load_config(self, config_path: str) -> bool:
        """
        Load configuration from file.

        Args:
            config_path: Path to configuration file

        Returns:
            True if configuration loaded successfully, False otherwise
        """
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found: {config_path}")
            return False

        _, ext = os.path.splitext(config_path)
        ext = ext.lower()

        try:
            if ext == '.json':
                with open(config_path, 'r') as f:
                    user_config = json.load(f)
            elif ext in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    user_config = yaml.safe_load(f) or {}
            else:
                logger.error(f"Unsupported configuration format: {ext}")
                return False
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading configuration: {e}")
            return False

        if not self.load_from_dict(user_config):
            return False

        logger.info(f"Configuration loaded from {config_path}")
        return True

    def _merge_config(self, user_config: Dict[str, Any], target: Optional[Dict[str, Any]] = None,
                      path: str = "") -> None:
        """
        Deep-merge user configuration into the current one, tracking modified keys.

        Args:
            user_config: User configuration dictionary
            target: Dictionary being merged into (internal use)
            path: Current key path for tracking (internal use)
        """
        if target is None:
            target = self.config

        for key, value in user_config.items():
            current_path = f"{path}.{key}" if path else key

            if isinstance(value, dict) and isinstance(target.get(key), dict):
                self._merge_config(value, target[key], current_path)
            else:
                target[key] = value
                self.modified_keys.add(current_path)

    def validate_config(self, config: Dict[str, Any]) -> List[str]:
        """
        Validate configuration values.

        Args:
            config: Configuration dictionary to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not isinstance(config, dict):
            return [f"Configuration must be a mapping, got {type(config).__name__}"]

        if "machine" in config and config["machine"] not in SYSTEM_CONFIGS:
            valid_machines = ", ".join(SYSTEM_CONFIGS.keys())
            errors.append(f"Invalid machine: {config['machine']}. Valid options: {valid_machines}")

        memory_size = config.get("memory_size", self.config["memory_size"])
        if "memory_size" in config:
            if not isinstance(memory_size, int) or isinstance(memory_size, bool) \
                    or memory_size < 1 or memory_size > 0x10000:
                errors.append(f"Invalid memory_size: {memory_size}. Must be an integer between 1 and 65536")

        if "load_address" in config:
            address = config["load_address"]
            if not isinstance(address, int) or isinstance(address, bool) or address < 0 or address > 0xFFFF:
                errors.append(f"Invalid load_address: {address}. Must be an integer between 0 and 0xFFFF")

        if "run" in config:
            run_config = config["run"]
            if "max_ticks" in run_config:
                max_ticks = run_config["max_ticks"]
                if not isinstance(max_ticks, int) or isinstance(max_ticks, bool) or max_ticks < 1:
                    errors.append(f"Invalid run.max_ticks: {max_ticks}. Must be a positive integer")
            if "stop_on_brk" in run_config and not isinstance(run_config["stop_on_brk"], bool):
                errors.append(f"Invalid run.stop_on_brk: {run_config['stop_on_brk']}. Must be a boolean")

        if "trace" in config:
            trace_config = config["trace"]
            if "enabled" in trace_config and not isinstance(trace_config["enabled"], bool):
                errors.append(f"Invalid trace.enabled: {trace_config['enabled']}. Must be a boolean")
            if "format" in trace_config and trace_config["format"] not in TRACE_FORMATS:
                valid_formats = ", ".join(TRACE_FORMATS)
                errors.append(f"Invalid trace.format: {trace_config['format']}. Valid options: {valid_formats}")
            if "max_history" in trace_config:
                max_history = trace_config["max_history"]
                if not isinstance(max_history, int) or isinstance(max_history, bool) or max_history < 1:
                    errors.append(f"Invalid trace.max_history: {max_history}. Must be a positive integer")

        if "logging" in config:
            log_config = config["logging"]
            if "level" in log_config and log_config["level"] not in LOG_LEVELS:
                valid_levels = ", ".join(LOG_LEVELS)
                errors.append(f"Invalid logging.level: {log_config['level']}. Valid options: {valid_levels}")

        return errors

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key path.

        Args:
            key: Configuration key path (e.g., 'run.max_ticks')
            default: Default value if key not found

        Returns:
            Configuration value or default if not found
        """
        value = self.config
        try:
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value by key path.

        Args:
            key: Configuration key path (e.g., 'trace.enabled')
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        self.modified_keys.add(key)

        logger.debug(f"Configuration updated: {key} = {value}")

    def reset(self, key: Optional[str] = None) -> None:
        """
        Reset configuration to defaults.

        Args:
            key: Key path to reset (None for all)
        """
        if key is None:
            self.config = copy.deepcopy(self.defaults)
            self.modified_keys.clear()
            logger.info("Configuration reset to defaults")
            return

        keys = key.split('.')
        default_value = self._get_default_value(keys)

        config = self.config
        for k in keys[:-1]:
            if k not in config:
                return
            config = config[k]

        config[keys[-1]] = default_value
        self.modified_keys.discard(key)
        logger.info(f"Configuration key reset to default: {key}")

    def _get_default_value(self, keys: List[str]) -> Any:
        value = self.defaults
        for k in keys:
            if k not in value:
                return None
            value = value[k]
        return copy.deepcopy(value)

    def save_config(self, config_path: str, format: str = 'json') -> bool:
        """
        Save current configuration to file.

        Args:
            config_path: Path to output file
            format: Output format ('json' or 'yaml')

        Returns:
            True if saved successfully, False otherwise
        """
        if format.lower() not in ['json', 'yaml', 'yml']:
            logger.error(f"Unsupported configuration format: {format}")
            return False

        try:
            directory = os.path.dirname(config_path)
            if directory and not os.path.exists(directory):
                os.makedirs(directory)

            with open(config_path, 'w') as f:
                if format.lower() == 'json':
                    json.dump(self.config, f, indent=2)
                else:
                    yaml.dump(self.config, f, default_flow_style=False)

            logger.info(f"Configuration saved to {config_path}")
            return True

        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
            return False

    def load_from_dict(self, config_dict: Dict[str, Any]) -> bool:
        """
        Load configuration from dictionary.

        Args:
            config_dict: Configuration dictionary

        Returns:
            True if loaded successfully, False otherwise
        """
        validation_errors = self.validate_config(config_dict)
        if validation_errors:
            for error in validation_errors:
                logger.error(f"Configuration validation error: {error}")
            return False

        # Picking a machine brings in its layout unless overridden explicitly
        if "machine" in config_dict:
            machine = SYSTEM_CONFIGS[config_dict["machine"]]
            for key in ("memory_size", "load_address"):
                if key not in config_dict:
                    self.config[key] = machine[key]

        self._merge_config(config_dict)

        logger.debug("Configuration loaded from dictionary")
        return True

    def get_machine_config(self) -> Dict[str, Any]:
        """Get the preset for the configured machine."""
        return SYSTEM_CONFIGS.get(self.get("machine", "mos6502"), {})

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)
