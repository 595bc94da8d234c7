"""
Clarity Utils - Series I/O
==========================

JSON persistence of reading series in the wire record format.

A series file is a JSON array of Reading records, oldest first.

Example:
--------
>>> from clarity_sim.utils import save_series, load_series
>>> save_series(series, "results/history.json")
>>> restored = load_series("results/history.json")

Author: Clarity Simulation Team
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List
import logging

from ..core import ContractViolation, Reading

logger = logging.getLogger(__name__)


def series_to_records(series: Iterable[Reading]) -> List[Dict[str, Any]]:
    """Encode a series as wire records."""
    return [reading.to_dict() for reading in series]


def records_to_series(records: Iterable[Dict[str, Any]]) -> List[Reading]:
    """
    Decode wire records into a series.

    Raises:
        ContractViolation: On a malformed record or out-of-order timestamps
    """
    series = [Reading.from_dict(record) for record in records]
    for previous, current in zip(series, series[1:]):
        if current.timestamp < previous.timestamp:
            raise ContractViolation(
                f"series out of order at {current.timestamp.isoformat()}"
            )
    return series


def save_series(series: Iterable[Reading], output_path: str) -> None:
    """
    Save a series to a JSON file.

    Args:
        series: Reading series
        output_path: Output file path (parent directories are created)
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = series_to_records(series)
    with open(output_path, 'w') as f:
        json.dump(records, f, indent=2)

    logger.info(f"Saved {len(records)} readings to {output_path}")


def load_series(input_path: str) -> List[Reading]:
    """
    Load a series from a JSON file.

    Raises:
        ContractViolation: If the file does not hold a valid series
    """
    input_path = Path(input_path)

    with open(input_path, 'r') as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as e:
            raise ContractViolation(f"Invalid JSON in {input_path}: {e}") from e

    if not isinstance(records, list):
        raise ContractViolation(f"Series file must hold a JSON array: {input_path}")

    series = records_to_series(records)
    logger.info(f"Loaded {len(series)} readings from {input_path}")
    return series
