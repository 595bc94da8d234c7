"""
Clarity Telemetry - Synthetic Reading Simulator
===============================================

Generates realistic synthetic water quality telemetry.

Simulation Components:
----------------------
1. ReadingGenerator        - One Reading for a timestamp
2. HistoricalSeriesBuilder - Look-back series at a fixed 2 hour cadence

Particle Count Model:
---------------------
Normal sample, one uniform draw u over [0, 1):

    u < 0.70         particles ~ U{0, ..., 4}      clean water
    0.70 <= u < 0.90 particles ~ U{5, ..., 14}     low contamination
    u >= 0.90        particles ~ U{15, ..., 29}    moderate contamination

Contamination event:

    particles ~ U{30, ..., 80}

Derived Metrics:
----------------
    qualityScore      = banded score of particle count (QualityScorer)
    particleBreakdown = size split of particle count (ParticleBreakdownModel)
    ppmLevel          = round(particles x U(0.8, 1.2), 2)
    isFiltering       = qualityScore < 75

Series Cadence:
---------------
- 12 readings per day (one every 2 hours), oldest first, ending at "now"
- Each slot is a contamination event with probability 0.05

Example:
--------
>>> from clarity_sim.core import RandomVariate
>>> from clarity_sim.telemetry import ReadingGenerator, HistoricalSeriesBuilder
>>>
>>> rv = RandomVariate(seed=42)
>>> generator = ReadingGenerator(rv)
>>> builder = HistoricalSeriesBuilder(generator, rv)
>>>
>>> # 30 days of history
>>> series = builder.build(days=30)
>>> len(series)
360

Author: Clarity Simulation Team
"""

from datetime import datetime, timedelta
from typing import Callable, Iterator, List, Optional
import logging

from ..core import (
    ContractViolation,
    RandomVariate,
    Reading,
    FILTERING_THRESHOLD,
    ensure_aware,
    require_count,
    utc_now,
)
from .breakdown import ParticleBreakdownModel
from .scoring import QualityScorer

logger = logging.getLogger(__name__)


# Normal-sample mixture: (cumulative probability cut, low, high exclusive)
CLEAN_CUT = 0.7
LOW_CONTAMINATION_CUT = 0.9
CLEAN_RANGE = (0, 5)
LOW_CONTAMINATION_RANGE = (5, 15)
MODERATE_CONTAMINATION_RANGE = (15, 30)

# Contamination event (closed range)
CONTAMINATION_EVENT_RANGE = (30, 80)

PPM_NOISE_RANGE = (0.8, 1.2)

READINGS_PER_DAY = 12
READING_INTERVAL = timedelta(hours=2)
CONTAMINATION_EVENT_PROBABILITY = 0.05


class ReadingGenerator:
    """
    Composes scoring and breakdown models into complete Readings.

    Example:
    --------
    >>> generator = ReadingGenerator(RandomVariate(seed=3))
    >>> spike = generator.generate(utc_now(), is_contamination_event=True)
    >>> 30 <= spike.particle_count <= 80
    True
    """

    def __init__(self,
                 variate: RandomVariate,
                 scorer: Optional[QualityScorer] = None,
                 breakdown_model: Optional[ParticleBreakdownModel] = None):
        """
        Initialize reading generator.

        Args:
            variate: Random source for particle counts and ppm noise
            scorer: Quality scorer (defaults to one sharing the variate)
            breakdown_model: Size splitter (defaults to one sharing the variate)
        """
        self.variate = variate
        self.scorer = scorer or QualityScorer(variate)
        self.breakdown_model = breakdown_model or ParticleBreakdownModel(variate)

    def sample_particle_count(self, is_contamination_event: bool = False) -> int:
        """
        Draw a particle count.

        Args:
            is_contamination_event: Force the high-contamination branch

        Returns:
            Non-negative particle count
        """
        if is_contamination_event:
            return self.variate.integer(*CONTAMINATION_EVENT_RANGE)

        u = self.variate.random()
        if u < CLEAN_CUT:
            return self.variate.integer_below(*CLEAN_RANGE)
        if u < LOW_CONTAMINATION_CUT:
            return self.variate.integer_below(*LOW_CONTAMINATION_RANGE)
        return self.variate.integer_below(*MODERATE_CONTAMINATION_RANGE)

    def generate(self,
                 timestamp: datetime,
                 is_contamination_event: bool = False) -> Reading:
        """
        Generate one Reading.

        Args:
            timestamp: Aware instant of the sample
            is_contamination_event: Force the high-contamination branch

        Returns:
            Reading for the timestamp
        """
        ensure_aware(timestamp)
        particle_count = self.sample_particle_count(is_contamination_event)
        return self.from_particle_count(timestamp, particle_count)

    def from_particle_count(self, timestamp: datetime, particle_count: int) -> Reading:
        """
        Derive a Reading from a known particle count.

        Args:
            timestamp: Aware instant of the sample
            particle_count: Non-negative particle total

        Returns:
            Reading with score, breakdown and ppm derived from the count
        """
        particle_count = require_count("particle_count", particle_count)
        quality_score = self.scorer.score(particle_count)
        breakdown = self.breakdown_model.breakdown(particle_count)
        ppm_level = round(particle_count * self.variate.uniform(*PPM_NOISE_RANGE), 2)

        reading = Reading(
            timestamp=timestamp,
            quality_score=quality_score,
            particle_count=particle_count,
            particle_breakdown=breakdown,
            ppm_level=ppm_level,
            is_filtering=quality_score < FILTERING_THRESHOLD,
        )
        logger.debug(
            f"Reading at {timestamp.isoformat()}: "
            f"particles={particle_count}, score={quality_score}, ppm={ppm_level:.2f}"
        )
        return reading


class HistoricalSeriesBuilder:
    """
    Builds a look-back reading series at a fixed 2 hour cadence.

    Every call samples a fresh series; nothing is replayed.

    Example:
    --------
    >>> builder = HistoricalSeriesBuilder(ReadingGenerator(rv), rv)
    >>> week = builder.build(days=7)
    >>> len(week)
    84
    """

    def __init__(self,
                 generator: ReadingGenerator,
                 variate: Optional[RandomVariate] = None,
                 clock: Callable[[], datetime] = utc_now,
                 contamination_probability: float = CONTAMINATION_EVENT_PROBABILITY):
        """
        Initialize series builder.

        Args:
            generator: Reading generator driven for every slot
            variate: Random source for contamination flags (defaults to generator's)
            clock: Returns the aware "now" the series ends at
            contamination_probability: Per-slot contamination event probability
        """
        self.generator = generator
        self.variate = variate or generator.variate
        self.clock = clock
        self.contamination_probability = contamination_probability

    def iter_series(self,
                    days: int,
                    now: Optional[datetime] = None) -> Iterator[Reading]:
        """
        Lazily yield a series, oldest first.

        Args:
            days: Positive look-back length in days
            now: Instant of the final reading (defaults to the clock)

        Yields:
            Readings in ascending timestamp order
        """
        days = require_count("days", days)
        if days == 0:
            raise ContractViolation("days must be positive")
        end = ensure_aware(now) if now is not None else self.clock()
        total_readings = days * READINGS_PER_DAY

        for slot in range(total_readings - 1, -1, -1):
            timestamp = end - slot * READING_INTERVAL
            is_event = self.variate.chance(self.contamination_probability)
            yield self.generator.generate(timestamp, is_event)

    def build(self,
              days: int,
              now: Optional[datetime] = None) -> List[Reading]:
        """
        Build a complete series.

        Args:
            days: Positive look-back length in days
            now: Instant of the final reading (defaults to the clock)

        Returns:
            List of days x 12 Readings, ascending by timestamp
        """
        series = list(self.iter_series(days, now))
        events = sum(1 for r in series if r.particle_count >= CONTAMINATION_EVENT_RANGE[0])
        logger.info(
            f"Built {len(series)} readings over {days} days "
            f"({events} at contamination level)"
        )
        return series

    def latest(self, now: Optional[datetime] = None) -> Reading:
        """Most recent reading of a fresh one-day series."""
        return self.build(1, now)[-1]
