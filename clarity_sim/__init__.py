"""
Clarity Water Quality Simulator
===============================

Synthetic telemetry engine for a water quality sensing device.

Modules:
--------
- core: Random source, data model and wire codec
- telemetry: Reading generation, history series, live updates
- filtration: Consumable filter wear
- analytics: Daily / weekly / monthly rollups
- pipeline: Session state owner (history + filter + live driver)
- utils: Configuration, logging and series I/O

Features:
---------
- Banded quality scoring from particle counts
- Small-biased particle size breakdown
- Contamination event spikes
- Linear 180-day filter life model
- Rolling and calendar-day statistics
- Seedable, reproducible randomness
- Cancelable live update timer

Quick Start:
-----------
from clarity_sim.core import RandomVariate
from clarity_sim.telemetry import ReadingGenerator, HistoricalSeriesBuilder
from clarity_sim.analytics import aggregate

rv = RandomVariate(seed=42)
series = HistoricalSeriesBuilder(ReadingGenerator(rv)).build(days=30)
month = aggregate(series, "month", series[-1].timestamp)

Version: 1.0.0
Author: Clarity Simulation Team
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Clarity Simulation Team"
__all__ = [
    "core",
    "telemetry",
    "filtration",
    "analytics",
    "pipeline",
    "utils",
]
