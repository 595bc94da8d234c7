"""
Clarity Telemetry Module - Initialization
=========================================

Synthetic reading generation for the water quality sensor.

Components:
-----------
1. scoring.py   - Particle count -> quality score (QualityScorer)
2. breakdown.py - Particle size split (ParticleBreakdownModel)
3. simulator.py - Reading and series generation
4. live.py      - Periodic live reading driver

Telemetry Flow:
---------------
RandomVariate
    ↓
[Particle count sample] → normal mixture or contamination event
    ↓
[Quality score] + [Size breakdown] + [ppm noise]
    ↓
Reading → series (history build or live append)

Usage:
------
from clarity_sim.core import RandomVariate
from clarity_sim.telemetry import ReadingGenerator, HistoricalSeriesBuilder

rv = RandomVariate(seed=42)
generator = ReadingGenerator(rv)
series = HistoricalSeriesBuilder(generator).build(days=30)

Author: Clarity Simulation Team
"""

from .scoring import (
    QualityScorer,
    QualityStatus,
    classify_quality,
    score_band,
)

from .breakdown import ParticleBreakdownModel

from .simulator import (
    ReadingGenerator,
    HistoricalSeriesBuilder,
    READINGS_PER_DAY,
    READING_INTERVAL,
    CONTAMINATION_EVENT_PROBABILITY,
)

from .live import LiveUpdateDriver

__all__ = [
    # Scoring
    "QualityScorer",
    "QualityStatus",
    "classify_quality",
    "score_band",
    # Breakdown
    "ParticleBreakdownModel",
    # Simulator
    "ReadingGenerator",
    "HistoricalSeriesBuilder",
    "READINGS_PER_DAY",
    "READING_INTERVAL",
    "CONTAMINATION_EVENT_PROBABILITY",
    # Live
    "LiveUpdateDriver",
]
