"""
Clarity Simulator Core - Random Variate Source
==============================================

Bounded uniform sampling primitive shared by every generator.

All randomness in the engine flows through a RandomVariate instance so that
callers can seed it and reproduce a run exactly. No module draws from an
ambient generator.

Sampling Primitives:
--------------------
1. uniform(low, high)        - real in [low, high)
2. integer(low, high)        - integer in the closed range [low, high]
3. integer_below(low, high)  - integer in the half-open range [low, high)
4. chance(p)                 - Bernoulli trial, True with probability p
5. random()                  - real in [0, 1)

Example:
--------
>>> from clarity_sim.core import RandomVariate
>>> rv = RandomVariate(seed=42)
>>> rv.integer(90, 99)
>>> rv.chance(0.05)

Author: Clarity Simulation Team
"""

import numpy as np
from typing import Optional
import logging

from .models import ContractViolation

logger = logging.getLogger(__name__)


class RandomVariate:
    """
    Seedable bounded uniform sampler backed by numpy's Generator.

    Example:
    --------
    >>> rv = RandomVariate(seed=7)
    >>> small_fraction = rv.uniform(0.6, 0.7)
    """

    def __init__(self,
                 seed: Optional[int] = None,
                 generator: Optional[np.random.Generator] = None):
        """
        Initialize random source.

        Args:
            seed: Seed for a fresh generator (None = OS entropy)
            generator: Existing numpy Generator to wrap (overrides seed)
        """
        self.seed = seed
        self._rng = generator if generator is not None else np.random.default_rng(seed)

    def random(self) -> float:
        """Draw a real from [0, 1)."""
        return float(self._rng.random())

    def uniform(self, low: float, high: float) -> float:
        """
        Draw a real uniformly from [low, high).

        Raises:
            ContractViolation: If low > high
        """
        if low > high:
            raise ContractViolation(f"uniform bounds reversed: low={low}, high={high}")
        return float(self._rng.uniform(low, high))

    def integer(self, low: int, high: int) -> int:
        """
        Draw an integer uniformly from the closed range [low, high].

        Raises:
            ContractViolation: If low > high
        """
        if low > high:
            raise ContractViolation(f"integer bounds reversed: low={low}, high={high}")
        return int(self._rng.integers(low, high, endpoint=True))

    def integer_below(self, low: int, high: int) -> int:
        """
        Draw an integer uniformly from the half-open range [low, high).

        Raises:
            ContractViolation: If the range is empty
        """
        if low >= high:
            raise ContractViolation(f"empty integer range: [{low}, {high})")
        return int(self._rng.integers(low, high))

    def chance(self, probability: float) -> bool:
        """
        Bernoulli trial.

        Args:
            probability: Success probability in [0, 1]

        Returns:
            True with the given probability
        """
        if not 0.0 <= probability <= 1.0:
            raise ContractViolation(f"probability out of range: {probability}")
        return self.random() < probability

    def __repr__(self) -> str:
        return f"RandomVariate(seed={self.seed})"
