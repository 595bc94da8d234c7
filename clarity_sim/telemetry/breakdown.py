"""
Clarity Telemetry - Particle Size Breakdown
===========================================

Splits a particle total into small / medium / large sub-counts.

Algorithm:
----------
    small  = floor(total x U(0.6, 0.7))
    medium = floor(total x U(0.2, 0.3))
    large  = max(0, total - small - medium)

The two fractions are sampled independently, so rounding slack is absorbed
by the large class. The clamp on large is kept as is; proportions are not
rebalanced.

Author: Clarity Simulation Team
"""

import math
import logging

from ..core import ParticleBreakdown, RandomVariate, require_count

logger = logging.getLogger(__name__)


SMALL_FRACTION_RANGE = (0.6, 0.7)
MEDIUM_FRACTION_RANGE = (0.2, 0.3)


class ParticleBreakdownModel:
    """Small-biased particle size splitter."""

    def __init__(self, variate: RandomVariate):
        self.variate = variate

    def breakdown(self, total: int) -> ParticleBreakdown:
        """
        Split a particle total.

        Args:
            total: Non-negative particle count

        Returns:
            ParticleBreakdown whose parts sum to total
        """
        total = require_count("total", total)
        if total == 0:
            return ParticleBreakdown(0, 0, 0)

        small = math.floor(total * self.variate.uniform(*SMALL_FRACTION_RANGE))
        medium = math.floor(total * self.variate.uniform(*MEDIUM_FRACTION_RANGE))
        large = max(0, total - small - medium)

        return ParticleBreakdown(small=small, medium=medium, large=large)
