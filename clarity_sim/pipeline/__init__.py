"""
Clarity Pipeline Module - Initialization
========================================

Session orchestration: wires the generators, filter model and rollups to
one externally visible state owner.

Components:
-----------
1. session.py - MonitorSession (history + filter + live updates)

Usage:
------
from clarity_sim.pipeline import MonitorSession

session = MonitorSession(config)
session.initialize()
week = session.stats("week")

Author: Clarity Simulation Team
"""

from .session import MonitorSession

__all__ = [
    "MonitorSession",
]
