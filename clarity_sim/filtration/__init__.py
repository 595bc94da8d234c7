"""
Clarity Filtration Module - Initialization
==========================================

Consumable filter wear modelling.

Components:
-----------
1. lifecycle.py - FilterLifeModel and service-day helpers

Usage:
------
from clarity_sim.filtration import FilterLifeModel

model = FilterLifeModel()
state = model.compute(install_date_days_ago=45)
fresh = model.replace()

Author: Clarity Simulation Team
"""

from .lifecycle import (
    FilterLifeModel,
    days_used,
    days_remaining,
    NOMINAL_LIFESPAN_DAYS,
    DEFAULT_FILTER_ID,
    DEFAULT_DEVICE_ID,
)

__all__ = [
    "FilterLifeModel",
    "days_used",
    "days_remaining",
    "NOMINAL_LIFESPAN_DAYS",
    "DEFAULT_FILTER_ID",
    "DEFAULT_DEVICE_ID",
]
