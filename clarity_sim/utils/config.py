"""
Clarity Utils - Configuration Management
========================================

Configuration loading, validation, and merging utilities.

Features:
---------
1. YAML Loading
   - Load configuration from YAML files
   - Packaged defaults (clarity_sim/config/default.yaml)
   - Environment variable substitution

2. Validation
   - Required section checking
   - Type and bounds checking

3. Merging
   - Override defaults with custom configs
   - Deep merge capabilities

Configuration Structure:
-----------------------
simulation:
  seed: null              # null = OS entropy
  history_days: 30

filter:
  install_days_ago: 45
  filter_id: "filter-001"
  device_id: "device-clarity-001"

live:
  interval_seconds: 120
  startup_delay_seconds: 0.5

logging:
  level: "INFO"
  log_dir: "logs"
  console_output: true
  file_output: false

Example:
--------
>>> from clarity_sim.utils import load_default_config, load_config, merge_configs
>>>
>>> config = load_default_config()
>>> custom = load_config("my_run.yaml")
>>> merged = merge_configs(config, custom)
>>> validate_config(merged)

Author: Clarity Simulation Team
"""

import yaml
import os
import re
from pathlib import Path
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_ENV_PATTERN = re.compile(r'\$\{(\w+)(?::([^}]*))?\}')


class ConfigError(Exception):
    """Configuration error."""
    pass


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file not found, empty, or invalid YAML
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Error loading config: {e}")

    if config is None:
        raise ConfigError(f"Empty config file: {config_path}")
    if not isinstance(config, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    config = _substitute_env_vars(config)

    logger.info(f"Loaded config from {config_path}")

    return config


def load_default_config() -> Dict[str, Any]:
    """Load the packaged default configuration."""
    return load_config(DEFAULT_CONFIG_PATH)


def _substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in config.

    Supports format: ${VAR_NAME:default_value}. A string that is exactly one
    reference is re-parsed as a YAML scalar so numbers and null survive.
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        def replace_var(match):
            var_name = match.group(1)
            default = match.group(2) or ""
            return os.environ.get(var_name, default)

        substituted = _ENV_PATTERN.sub(replace_var, obj)
        if substituted != obj and _ENV_PATTERN.fullmatch(obj):
            return yaml.safe_load(substituted) if substituted else None
        return substituted
    else:
        return obj


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid

    Raises:
        ConfigError: If validation fails
    """
    required_keys = ["simulation", "filter", "live"]

    for key in required_keys:
        if key not in config:
            raise ConfigError(f"Missing required key: {key}")
        if not isinstance(config[key], dict):
            raise ConfigError(f"{key} config must be a dictionary")

    _validate_simulation(config["simulation"])
    _validate_filter(config["filter"])
    _validate_live(config["live"])
    _validate_logging(config.get("logging", {}))

    logger.info("Configuration validation passed")
    return True


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_simulation(simulation: Dict[str, Any]) -> None:
    seed = simulation.get("seed")
    if seed is not None and not _is_int(seed):
        raise ConfigError(f"simulation.seed must be an integer or null, got {seed!r}")

    days = simulation.get("history_days", 30)
    if not _is_int(days) or days <= 0:
        raise ConfigError(f"simulation.history_days must be a positive integer, got {days!r}")


def _validate_filter(filter_config: Dict[str, Any]) -> None:
    days = filter_config.get("install_days_ago", 45)
    if not _is_int(days) or days < 0:
        raise ConfigError(f"filter.install_days_ago must be a non-negative integer, got {days!r}")

    for key in ("filter_id", "device_id"):
        if key in filter_config and not isinstance(filter_config[key], str):
            raise ConfigError(f"filter.{key} must be a string")


def _validate_live(live: Dict[str, Any]) -> None:
    interval = live.get("interval_seconds", 120)
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
        raise ConfigError(f"live.interval_seconds must be positive, got {interval!r}")

    delay = live.get("startup_delay_seconds", 0.5)
    if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
        raise ConfigError(f"live.startup_delay_seconds must be non-negative, got {delay!r}")


def _validate_logging(logging_config: Dict[str, Any]) -> None:
    if not logging_config:
        return

    if not isinstance(logging_config, dict):
        raise ConfigError("Logging config must be a dictionary")

    level = str(logging_config.get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level: {level}. "
            f"Must be one of {VALID_LOG_LEVELS}"
        )


def merge_configs(base: Dict[str, Any],
                 override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override config into base config.

    Args:
        base: Base configuration
        override: Configuration to merge in (overrides base)

    Returns:
        Merged configuration

    Example:
        >>> merge_configs({"live": {"interval_seconds": 120}},
        ...               {"live": {"startup_delay_seconds": 0}})
        {'live': {'interval_seconds': 120, 'startup_delay_seconds': 0}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    logger.debug(f"Merged {len(override)} config keys")
    return result


def get_config_value(config: Dict[str, Any],
                    key_path: str,
                    default: Any = None) -> Any:
    """
    Get nested config value using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "live.interval_seconds")
        default: Default value if not found

    Returns:
        Config value or default
    """
    keys = key_path.split(".")
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
