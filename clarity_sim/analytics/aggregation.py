"""
Clarity Analytics - Reading Series Rollups
==========================================

Reduces a reading series to summary statistics over a time window.

Window Policies:
----------------
1. Rolling window (day = 24h, week = 7d, month = 30d)
       cutoff = now - duration
       keep readings with timestamp >= cutoff

2. Same calendar day
       keep readings whose timestamp falls on now's calendar date,
       evaluated in now's timezone (midnight-aligned, not rolling)

The two policies are distinct and are not unified.

Reduction:
----------
    totalParticles  = sum(particleCount)
    avgQualityScore = round_half_up(mean(qualityScore)), 100 if no readings
    readingsCount   = number of readings kept
    litersFiltered  = count(isFiltering) x 2      (monthly window only)

An empty window is not an error: it reports a clean device
(avgQualityScore = 100, zero counts).

All functions are pure; the same series, window and now always give the
same result.

Example:
--------
>>> from clarity_sim.analytics import aggregate
>>> summary = aggregate(series, "week", now)
>>> summary.to_dict()
{'totalParticles': 412, 'avgQualityScore': 91, 'readingsCount': 84}

Author: Clarity Simulation Team
"""

import numpy as np
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
import logging

from ..core import (
    ParticleBreakdown,
    Reading,
    StatsSummary,
    StatsWindow,
    ensure_aware,
    utc_now,
)

logger = logging.getLogger(__name__)


EMPTY_WINDOW_SCORE = 100
LITERS_PER_FILTRATION_EVENT = 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(np.floor(value + 0.5))


def window_readings(series: Iterable[Reading],
                    window,
                    now: datetime) -> List[Reading]:
    """
    Readings inside a rolling window.

    Args:
        series: Reading series
        window: StatsWindow or its name ("day", "week", "month")
        now: Aware reference instant

    Returns:
        Readings with timestamp >= now - window duration, in input order
    """
    window = StatsWindow.parse(window)
    cutoff = ensure_aware(now) - window.duration
    return [r for r in series if r.timestamp >= cutoff]


def same_day_readings(series: Iterable[Reading],
                      now: datetime) -> List[Reading]:
    """
    Readings on now's calendar day.

    Args:
        series: Reading series
        now: Aware reference instant; its timezone defines the day

    Returns:
        Readings whose local date equals now's date
    """
    tz = ensure_aware(now).tzinfo
    today = now.date()
    return [r for r in series if r.timestamp.astimezone(tz).date() == today]


def summarize(readings: Sequence[Reading],
              include_liters: bool = False) -> StatsSummary:
    """
    Reduce already-windowed readings.

    Args:
        readings: Readings to reduce
        include_liters: Also compute litersFiltered

    Returns:
        StatsSummary (empty input gives the clean default)
    """
    count = len(readings)

    if count:
        particles = np.fromiter((r.particle_count for r in readings), dtype=np.int64, count=count)
        scores = np.fromiter((r.quality_score for r in readings), dtype=np.float64, count=count)
        total_particles = int(particles.sum())
        avg_score = round_half_up(float(scores.mean()))
    else:
        total_particles = 0
        avg_score = EMPTY_WINDOW_SCORE

    liters = None
    if include_liters:
        liters = sum(1 for r in readings if r.is_filtering) * LITERS_PER_FILTRATION_EVENT

    return StatsSummary(
        total_particles=total_particles,
        avg_quality_score=avg_score,
        readings_count=count,
        liters_filtered=liters,
    )


def aggregate(series: Iterable[Reading],
              window,
              now: datetime) -> StatsSummary:
    """
    Rolling-window rollup.

    Args:
        series: Reading series
        window: StatsWindow or its name
        now: Aware reference instant

    Returns:
        StatsSummary; litersFiltered is set for the monthly window only
    """
    window = StatsWindow.parse(window)
    readings = window_readings(series, window, now)
    summary = summarize(readings, include_liters=window is StatsWindow.MONTH)
    logger.debug(f"{window.value} rollup: {summary.to_dict()}")
    return summary


def same_day_stats(series: Iterable[Reading], now: datetime) -> StatsSummary:
    """Calendar-day rollup ("today so far")."""
    return summarize(same_day_readings(series, now))


def weekly_stats(series: Iterable[Reading], now: datetime) -> StatsSummary:
    return aggregate(series, StatsWindow.WEEK, now)


def monthly_stats(series: Iterable[Reading], now: datetime) -> StatsSummary:
    return aggregate(series, StatsWindow.MONTH, now)


def breakdown_totals(series: Iterable[Reading],
                     window,
                     now: datetime) -> ParticleBreakdown:
    """
    Summed particle size classes over a rolling window.

    Returns:
        ParticleBreakdown of the windowed totals
    """
    totals = ParticleBreakdown()
    for reading in window_readings(series, window, now):
        totals = totals + reading.particle_breakdown
    return totals


def quality_trend(series: Iterable[Reading],
                  window,
                  now: datetime) -> List[Tuple[datetime, int]]:
    """
    (timestamp, qualityScore) points for charting a rolling window.

    Returns:
        Points in series order (oldest first for an ordered series)
    """
    return [(r.timestamp, r.quality_score) for r in window_readings(series, window, now)]


class StatsAggregator:
    """
    Clock-bound facade over the rollup functions.

    Holds no series; every call reduces the series it is given.

    Example:
    --------
    >>> stats = StatsAggregator()
    >>> stats.aggregate(series, "month").liters_filtered
    36
    >>> stats.same_day(series).readings_count
    7
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_aware(now) if now is not None else self.clock()

    def aggregate(self, series, window, now: Optional[datetime] = None) -> StatsSummary:
        return aggregate(series, window, self._now(now))

    def same_day(self, series, now: Optional[datetime] = None) -> StatsSummary:
        return same_day_stats(series, self._now(now))

    def breakdown(self, series, window, now: Optional[datetime] = None) -> ParticleBreakdown:
        return breakdown_totals(series, window, self._now(now))

    def trend(self, series, window, now: Optional[datetime] = None) -> List[Tuple[datetime, int]]:
        return quality_trend(series, window, self._now(now))
