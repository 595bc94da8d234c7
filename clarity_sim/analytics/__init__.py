"""
Clarity Analytics Module - Initialization
=========================================

Time-window rollups of reading series.

Components:
-----------
1. aggregation.py - Rolling (day/week/month) and same-calendar-day stats,
                    particle size totals, quality trend points

Usage:
------
from clarity_sim.analytics import aggregate, same_day_stats

week = aggregate(series, "week", now)
today = same_day_stats(series, now)

Author: Clarity Simulation Team
"""

from .aggregation import (
    StatsAggregator,
    aggregate,
    summarize,
    window_readings,
    same_day_readings,
    same_day_stats,
    weekly_stats,
    monthly_stats,
    breakdown_totals,
    quality_trend,
    round_half_up,
    EMPTY_WINDOW_SCORE,
    LITERS_PER_FILTRATION_EVENT,
)

__all__ = [
    "StatsAggregator",
    "aggregate",
    "summarize",
    "window_readings",
    "same_day_readings",
    "same_day_stats",
    "weekly_stats",
    "monthly_stats",
    "breakdown_totals",
    "quality_trend",
    "round_half_up",
    "EMPTY_WINDOW_SCORE",
    "LITERS_PER_FILTRATION_EVENT",
]
