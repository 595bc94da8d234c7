"""
Clarity Telemetry - Quality Scoring
===================================

Maps a particle count to a 0-100 water quality score.

Banded Mapping:
---------------
    particles   score (uniform integer, closed range)
    ---------   ------------------------------------
    0           100 (exact)
    1 - 4       90 - 99
    5 - 14      75 - 89
    15 - 29     60 - 74
    30 - 49     40 - 59
    >= 50       20 - 39

The band is deterministic; the score within a band is drawn uniformly.
Expected score is non-increasing across bands.

Quality Status:
---------------
    score >= 90        safe
    75 <= score < 90   monitor
    score < 75         filtering

Author: Clarity Simulation Team
"""

from enum import Enum
from typing import Optional, Tuple
import logging

from ..core import RandomVariate, FILTERING_THRESHOLD, require_count

logger = logging.getLogger(__name__)


PERFECT_SCORE = 100

# (exclusive particle upper bound, score low, score high)
SCORE_BANDS: Tuple[Tuple[Optional[int], int, int], ...] = (
    (5, 90, 99),
    (15, 75, 89),
    (30, 60, 74),
    (50, 40, 59),
    (None, 20, 39),
)

SAFE_SCORE = 90


class QualityStatus(str, Enum):
    """Presentation-level verdict for a quality score."""

    SAFE = "safe"
    MONITOR = "monitor"
    FILTERING = "filtering"


def classify_quality(score: int) -> QualityStatus:
    """
    Classify a quality score.

    Args:
        score: Quality score in [0, 100]

    Returns:
        QualityStatus for the score
    """
    if score >= SAFE_SCORE:
        return QualityStatus.SAFE
    if score >= FILTERING_THRESHOLD:
        return QualityStatus.MONITOR
    return QualityStatus.FILTERING


def score_band(particle_count: int) -> Tuple[int, int]:
    """
    Closed score range for a particle count.

    Raises:
        ContractViolation: For negative or non-integer counts
    """
    count = require_count("particle_count", particle_count)
    if count == 0:
        return PERFECT_SCORE, PERFECT_SCORE
    for upper, low, high in SCORE_BANDS:
        if upper is None or count < upper:
            return low, high
    raise AssertionError("unreachable: last band is open-ended")


class QualityScorer:
    """
    Banded, randomized-within-band quality scorer.

    Example:
    --------
    >>> scorer = QualityScorer(RandomVariate(seed=1))
    >>> scorer.score(0)
    100
    >>> 90 <= scorer.score(3) <= 99
    True
    """

    def __init__(self, variate: RandomVariate):
        self.variate = variate

    def score(self, particle_count: int) -> int:
        """
        Score one particle count.

        Args:
            particle_count: Non-negative particle total

        Returns:
            Integer quality score in [0, 100]
        """
        low, high = score_band(particle_count)
        if low == high:
            return low
        return self.variate.integer(low, high)
