"""
Clarity Utils - Logging & Diagnostics
=====================================

Logging setup and telemetry-aware log helpers.

Features:
---------
1. Logging Setup
   - Console and rotating file handlers
   - Structured log format

2. Module Loggers
   - Hierarchical loggers named after modules

3. Telemetry Logging
   - Reading snapshots
   - Filter state snapshots
   - Statistics summaries

Log Format:
-----------
[2025-12-24 12:30:45.123] [INFO    ] [clarity_sim.pipeline.session] Message here
[TIMESTAMP] [LEVEL] [MODULE] Message

Example:
--------
>>> from clarity_sim.utils import setup_logging, get_logger
>>>
>>> setup_logging("logs/", level="INFO", file_output=False)
>>> logger = get_logger(__name__)
>>> logger.info("Session started")

Author: Clarity Simulation Team
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any
from datetime import datetime

from ..core import FilterState, Reading


_loggers = {}


class StructuredFormatter(logging.Formatter):
    """Structured logging formatter."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(
            "%Y-%m-%d %H:%M:%S.%f"
        )[:-3]

        message = (
            f"[{timestamp}] [{record.levelname:8}] "
            f"[{record.name}] {record.getMessage()}"
        )
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(log_dir: str = "logs",
                 level: str = "INFO",
                 console_output: bool = True,
                 file_output: bool = True) -> None:
    """
    Set up logging configuration.

    Args:
        log_dir: Directory for log files
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Enable console output
        file_output: Enable file output (creates log_dir)
    """
    numeric_level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"clarity_sim_{timestamp}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5,
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Logging configured: level={level}, dir={log_dir}")


def get_logger(name: str) -> logging.Logger:
    """
    Get logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def log_reading(reading: Reading) -> None:
    """
    Log a single reading snapshot.

    Example:
        >>> log_reading(session.current_reading)
    """
    logger = get_logger(__name__)

    breakdown = reading.particle_breakdown
    logger.info(
        f"Reading {reading.timestamp.isoformat()}: "
        f"score={reading.quality_score}, "
        f"particles={reading.particle_count} "
        f"(S={breakdown.small}/M={breakdown.medium}/L={breakdown.large}), "
        f"ppm={reading.ppm_level:.2f}, "
        f"filtering={reading.is_filtering}"
    )


def log_filter_state(state: FilterState) -> None:
    """Log a filter state snapshot."""
    logger = get_logger(__name__)

    logger.info(
        f"Filter {state.filter_id} on {state.device_id}: "
        f"life={state.life_remaining:.1f}%, "
        f"activations={state.activation_count}, "
        f"status={state.status.value}"
    )


def log_statistics(stats: Dict[str, Any]) -> None:
    """
    Log statistics summary.

    Args:
        stats: Statistics dictionary (e.g. StatsSummary.to_dict())
    """
    logger = get_logger(__name__)

    logger.info("=== Statistics Summary ===")
    for key, value in stats.items():
        if isinstance(value, float):
            logger.info(f"{key}: {value:.4f}")
        else:
            logger.info(f"{key}: {value}")
