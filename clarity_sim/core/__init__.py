"""
Clarity Simulator Core Module - Initialization
==============================================

Foundational pieces shared by every generator and rollup.

Components:
-----------
1. random_variate.py - Seedable bounded uniform sampling (RandomVariate)
2. models.py         - Reading, FilterState, StatsSummary and the wire codec

Usage:
------
from clarity_sim.core import RandomVariate, Reading, StatsWindow

rv = RandomVariate(seed=42)
window = StatsWindow.parse("week")

Author: Clarity Simulation Team
"""

from .models import (
    ContractViolation,
    ParticleBreakdown,
    Reading,
    FilterStatus,
    FilterState,
    StatsWindow,
    StatsSummary,
    FILTERING_THRESHOLD,
    utc_now,
    ensure_aware,
    format_timestamp,
    parse_timestamp,
    require_count,
    require_record,
)

from .random_variate import RandomVariate

__all__ = [
    # Errors
    "ContractViolation",
    # Data model
    "ParticleBreakdown",
    "Reading",
    "FilterStatus",
    "FilterState",
    "StatsWindow",
    "StatsSummary",
    "FILTERING_THRESHOLD",
    # Timestamps
    "utc_now",
    "ensure_aware",
    "format_timestamp",
    "parse_timestamp",
    "require_count",
    "require_record",
    # Randomness
    "RandomVariate",
]
