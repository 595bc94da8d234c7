# ============================================================================
# CLARITY SIMULATOR - FILTRATION MODULE: CONSUMABLE FILTER LIFECYCLE
# ============================================================================
# lifecycle.py
# Linear filter wear against a fixed nominal lifespan
# ============================================================================

"""
Clarity Filtration - Filter Life Model

Computes consumable filter wear from days elapsed since installation.

Wear Model:
- Nominal lifespan: 180 days
- lifeRemaining = clamp((180 - days) / 180 x 100, 0, 100), 1 decimal place
- activationCount = floor(days x 0.3) (~30% of days see a filtration event)

Status (pure function of lifeRemaining):
- lifeRemaining > 20          good
- 10 < lifeRemaining <= 20    replace-soon
- lifeRemaining <= 10         replace-now

Replacement:
A replaced filter is compute(0): a brand new FilterState that supersedes
the old one. States are never patched in place.

Service Figures:
- days_used(state, now)   = whole days since installDate
- days_remaining(state)   = round(180 x lifeRemaining / 100)

Author: Clarity Simulation Team
"""

import math
import numpy as np
from datetime import datetime, timedelta
from typing import Callable, Optional
import logging

from ..core import FilterState, ensure_aware, require_count, utc_now

logger = logging.getLogger(__name__)


NOMINAL_LIFESPAN_DAYS = 180
ACTIVATIONS_PER_DAY = 0.3

DEFAULT_FILTER_ID = "filter-001"
DEFAULT_DEVICE_ID = "device-clarity-001"


class FilterLifeModel:
    """
    Linear wear model for the consumable filter.

    Example:
    --------
    >>> model = FilterLifeModel()
    >>> model.compute(45).life_remaining
    75.0
    >>> model.compute(0).status.value
    'good'
    """

    def __init__(self,
                 filter_id: str = DEFAULT_FILTER_ID,
                 device_id: str = DEFAULT_DEVICE_ID,
                 lifespan_days: int = NOMINAL_LIFESPAN_DAYS,
                 clock: Callable[[], datetime] = utc_now):
        """
        Initialize filter life model.

        Args:
            filter_id: Identifier stamped on produced states
            device_id: Identifier of the owning device
            lifespan_days: Nominal filter lifespan [days]
            clock: Returns the aware "now" install dates are measured from
        """
        if lifespan_days <= 0:
            raise ValueError(f"lifespan_days must be positive, got {lifespan_days}")

        self.filter_id = filter_id
        self.device_id = device_id
        self.lifespan_days = lifespan_days
        self.clock = clock

    def life_remaining(self, install_date_days_ago: int) -> float:
        """
        Remaining life [%] after a number of days in service.

        Args:
            install_date_days_ago: Non-negative days since installation

        Returns:
            Percentage in [0, 100], rounded to one decimal
        """
        days = require_count("install_date_days_ago", install_date_days_ago)
        fraction = (self.lifespan_days - days) / self.lifespan_days
        return round(float(np.clip(fraction * 100, 0.0, 100.0)), 1)

    def compute(self,
                install_date_days_ago: int,
                now: Optional[datetime] = None) -> FilterState:
        """
        Compute a filter state.

        Args:
            install_date_days_ago: Non-negative days since installation
            now: Reference instant (defaults to the clock)

        Returns:
            FilterState for the elapsed time
        """
        days = require_count("install_date_days_ago", install_date_days_ago)
        reference = ensure_aware(now) if now is not None else self.clock()

        state = FilterState(
            filter_id=self.filter_id,
            device_id=self.device_id,
            install_date=reference - timedelta(days=days),
            life_remaining=self.life_remaining(days),
            activation_count=math.floor(days * ACTIVATIONS_PER_DAY),
        )
        logger.debug(
            f"Filter {self.filter_id}: {days} days in service, "
            f"life={state.life_remaining:.1f}%, status={state.status.value}"
        )
        return state

    def replace(self, now: Optional[datetime] = None) -> FilterState:
        """Fresh filter state for a filter installed at now."""
        state = self.compute(0, now)
        logger.info(f"Filter {self.filter_id} replaced on device {self.device_id}")
        return state

    def days_remaining(self, state: FilterState) -> int:
        """Whole days of nominal life left for this model's lifespan."""
        return days_remaining(state, self.lifespan_days)


def days_used(state: FilterState, now: Optional[datetime] = None) -> int:
    """
    Whole days elapsed since the filter was installed.

    Args:
        state: Filter state
        now: Reference instant (defaults to current UTC time)

    Returns:
        Non-negative day count
    """
    reference = ensure_aware(now) if now is not None else utc_now()
    elapsed = reference - state.install_date
    return max(0, elapsed // timedelta(days=1))


def days_remaining(state: FilterState,
                   lifespan_days: int = NOMINAL_LIFESPAN_DAYS) -> int:
    """Whole days of nominal life left for a state (half-up rounding)."""
    return int(math.floor(lifespan_days * state.life_remaining / 100 + 0.5))
