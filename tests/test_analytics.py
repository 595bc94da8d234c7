"""
Clarity Tests - Series Rollups
==============================

Unit tests for:
- Rolling day / week / month windows
- Same-calendar-day policy (distinct from the rolling day)
- Empty-window clean default
- Half-up mean rounding
- Particle size totals and trend points
- End-to-end scenario on generated readings

Author: Clarity Simulation Team
"""

import unittest
from datetime import datetime, timedelta, timezone
import logging

from clarity_sim.analytics import (
    StatsAggregator,
    aggregate,
    breakdown_totals,
    monthly_stats,
    quality_trend,
    round_half_up,
    same_day_stats,
    weekly_stats,
)
from clarity_sim.core import (
    ContractViolation,
    ParticleBreakdown,
    RandomVariate,
    Reading,
    StatsSummary,
    StatsWindow,
)
from clarity_sim.telemetry import HistoricalSeriesBuilder, ReadingGenerator

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def reading_at(timestamp, score, count=0, small=None, filtering=None):
    small = count if small is None else small
    return Reading(
        timestamp=timestamp,
        quality_score=score,
        particle_count=count,
        particle_breakdown=ParticleBreakdown(small, count - small, 0),
        ppm_level=float(count),
        is_filtering=score < 75 if filtering is None else filtering,
    )


class TestEmptyWindows(unittest.TestCase):
    """Test the clean default for empty windows."""

    def test_empty_series_every_window(self):
        for window in ("day", "week"):
            self.assertEqual(aggregate([], window, NOW), StatsSummary(0, 100, 0))

        month = aggregate([], "month", NOW)
        self.assertEqual(month.to_dict(), {
            "totalParticles": 0,
            "avgQualityScore": 100,
            "readingsCount": 0,
            "litersFiltered": 0,
        })

    def test_empty_same_day(self):
        self.assertEqual(same_day_stats([], NOW).to_dict(), {
            "totalParticles": 0,
            "avgQualityScore": 100,
            "readingsCount": 0,
        })

    def test_all_readings_outside_window(self):
        series = [reading_at(NOW - timedelta(days=40), 20, 60)]
        self.assertEqual(aggregate(series, "month", NOW).avg_quality_score, 100)


class TestRollingWindows(unittest.TestCase):
    """Test rolling window filtering and reduction."""

    def setUp(self):
        self.series = [
            reading_at(NOW - timedelta(days=29), 40, 35),
            reading_at(NOW - timedelta(days=6), 80, 6),
            reading_at(NOW - timedelta(hours=24), 95, 2),
            reading_at(NOW - timedelta(hours=1), 70, 20),
        ]

    def test_day_window_includes_cutoff(self):
        summary = aggregate(self.series, StatsWindow.DAY, NOW)

        self.assertEqual(summary.readings_count, 2)
        self.assertEqual(summary.total_particles, 22)
        self.assertEqual(summary.avg_quality_score, round_half_up((95 + 70) / 2))
        self.assertIsNone(summary.liters_filtered)

    def test_week_window(self):
        summary = weekly_stats(self.series, NOW)

        self.assertEqual(summary.readings_count, 3)
        self.assertEqual(summary.total_particles, 28)
        self.assertEqual(summary.avg_quality_score, 82)

    def test_month_window_liters(self):
        summary = monthly_stats(self.series, NOW)

        self.assertEqual(summary.readings_count, 4)
        self.assertEqual(summary.total_particles, 63)
        self.assertEqual(summary.avg_quality_score, 71)
        self.assertEqual(summary.liters_filtered, 4)

    def test_unknown_window(self):
        with self.assertRaises(ContractViolation):
            aggregate(self.series, "fortnight", NOW)

    def test_naive_now_rejected(self):
        with self.assertRaises(ContractViolation):
            aggregate(self.series, "day", datetime(2025, 6, 15))

    def test_idempotent(self):
        series = tuple(self.series)
        for window in StatsWindow:
            self.assertEqual(aggregate(series, window, NOW), aggregate(series, window, NOW))


class TestRounding(unittest.TestCase):
    """Test half-up mean rounding."""

    def test_round_half_up(self):
        self.assertEqual(round_half_up(90.5), 91)
        self.assertEqual(round_half_up(92.5), 93)
        self.assertEqual(round_half_up(92.49), 92)

    def test_mean_of_two_rounds_up(self):
        series = [
            reading_at(NOW - timedelta(hours=2), 90, 1),
            reading_at(NOW - timedelta(hours=1), 91, 1),
        ]
        self.assertEqual(aggregate(series, "day", NOW).avg_quality_score, 91)


class TestSameDay(unittest.TestCase):
    """Test the same-calendar-day policy."""

    def test_calendar_day_differs_from_rolling_day(self):
        now = datetime(2025, 6, 15, 1, 0, tzinfo=timezone.utc)
        series = [
            reading_at(datetime(2025, 6, 14, 23, 0, tzinfo=timezone.utc), 60, 20),
            reading_at(datetime(2025, 6, 15, 0, 0, tzinfo=timezone.utc), 96, 1),
            reading_at(datetime(2025, 6, 15, 0, 30, tzinfo=timezone.utc), 92, 2),
        ]

        today = same_day_stats(series, now)
        rolling = aggregate(series, "day", now)

        self.assertEqual(today.readings_count, 2)
        self.assertEqual(today.total_particles, 3)
        self.assertEqual(today.avg_quality_score, 94)
        self.assertIsNone(today.liters_filtered)
        self.assertEqual(rolling.readings_count, 3)

    def test_calendar_day_uses_now_timezone(self):
        minus_five = timezone(timedelta(hours=-5))
        now = datetime(2025, 6, 14, 22, 0, tzinfo=minus_five)
        # 02:00 UTC on the 15th is 21:00 on the 14th at UTC-5
        series = [reading_at(datetime(2025, 6, 15, 2, 0, tzinfo=timezone.utc), 99, 1)]

        self.assertEqual(same_day_stats(series, now).readings_count, 1)
        self.assertEqual(same_day_stats(series, now.astimezone(timezone.utc)).readings_count, 1)
        self.assertEqual(
            same_day_stats(series, datetime(2025, 6, 14, 20, 0, tzinfo=timezone.utc)).readings_count,
            0,
        )


class TestBreakdownAndTrend(unittest.TestCase):
    """Test size totals and chart points."""

    def setUp(self):
        self.series = [
            reading_at(NOW - timedelta(days=10), 60, 20, small=12),
            reading_at(NOW - timedelta(hours=5), 85, 10, small=7),
            reading_at(NOW - timedelta(hours=3), 95, 4, small=3),
        ]

    def test_breakdown_totals(self):
        totals = breakdown_totals(self.series, "week", NOW)
        self.assertEqual(totals.to_dict(), {"small": 10, "medium": 4, "large": 0})

        month = breakdown_totals(self.series, "month", NOW)
        self.assertEqual(month.total, 34)

    def test_quality_trend(self):
        points = quality_trend(self.series, "day", NOW)
        self.assertEqual(points, [
            (NOW - timedelta(hours=5), 85),
            (NOW - timedelta(hours=3), 95),
        ])


class TestStatsAggregator(unittest.TestCase):
    """Test the clock-bound facade and an end-to-end scenario."""

    def setUp(self):
        rv = RandomVariate(seed=17)
        self.generator = ReadingGenerator(rv)
        self.builder = HistoricalSeriesBuilder(self.generator, rv, clock=lambda: NOW)
        self.stats = StatsAggregator(clock=lambda: NOW)

    def test_three_reading_scenario(self):
        series = [
            self.generator.from_particle_count(NOW - timedelta(hours=3), 0),
            self.generator.from_particle_count(NOW - timedelta(hours=2), 3),
            self.generator.from_particle_count(NOW - timedelta(hours=1), 40),
        ]
        summary = self.stats.aggregate(series, "day")

        expected_avg = round_half_up(sum(r.quality_score for r in series) / 3)
        self.assertEqual(summary.total_particles, 43)
        self.assertEqual(summary.readings_count, 3)
        self.assertEqual(summary.avg_quality_score, expected_avg)
        self.assertEqual(series[0].quality_score, 100)

    def test_generated_history_windows(self):
        series = self.builder.build(30)

        day = self.stats.aggregate(series, "day")
        week = self.stats.aggregate(series, "week")
        month = self.stats.aggregate(series, "month")

        self.assertEqual(day.readings_count, 13)
        self.assertEqual(week.readings_count, 7 * 12 + 1)
        self.assertEqual(month.readings_count, 360)
        self.assertEqual(month.total_particles, sum(r.particle_count for r in series))
        self.assertEqual(month.liters_filtered, 2 * sum(1 for r in series if r.is_filtering))
        self.assertTrue(0 <= month.avg_quality_score <= 100)

    def test_same_day_facade(self):
        series = self.builder.build(2)
        # NOW is 12:00, so today holds the 00:00 .. 12:00 slots
        self.assertEqual(self.stats.same_day(series).readings_count, 7)

    def test_facade_breakdown_and_trend(self):
        series = self.builder.build(1)
        self.assertEqual(self.stats.breakdown(series, "day").total,
                         sum(r.particle_count for r in series))
        self.assertEqual(len(self.stats.trend(series, "day")), 12)


if __name__ == "__main__":
    unittest.main()
