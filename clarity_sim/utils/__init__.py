"""
Clarity Utils Module - Initialization
=====================================

Utility functions and helpers for the Clarity simulator.

Submodules:
-----------
1. config.py  - Configuration loading and validation
2. logging.py - Logging setup and diagnostics
3. io.py      - Series JSON persistence

Usage:
------
from clarity_sim.utils import (
    load_default_config,
    setup_logging,
    get_logger,
    save_series,
)

config = load_default_config()
setup_logging("logs/", level="INFO")
logger = get_logger(__name__)

Author: Clarity Simulation Team
"""

from .config import (
    load_config,
    load_default_config,
    validate_config,
    merge_configs,
    get_config_value,
    ConfigError,
    DEFAULT_CONFIG_PATH,
)

from .logging import (
    setup_logging,
    get_logger,
    log_reading,
    log_filter_state,
    log_statistics,
    StructuredFormatter,
)

from .io import (
    save_series,
    load_series,
    series_to_records,
    records_to_series,
)

__all__ = [
    # Config functions
    "load_config",
    "load_default_config",
    "validate_config",
    "merge_configs",
    "get_config_value",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    # Logging functions
    "setup_logging",
    "get_logger",
    "log_reading",
    "log_filter_state",
    "log_statistics",
    "StructuredFormatter",
    # I/O
    "save_series",
    "load_series",
    "series_to_records",
    "records_to_series",
]
