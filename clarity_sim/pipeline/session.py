"""
Clarity Pipeline - Monitor Session
==================================

Reference owner of the mutable simulator state a presentation layer reads.

The engine functions are pure; somebody has to hold "the current series"
and "the current filter" and serialize writes to them. MonitorSession is
that owner.

Session Lifecycle:
------------------
start()
    ↓  (one-shot startup delay, cancelable)
[initialize] → history series (N days) + filter state (M days in service)
    ↓
[LiveUpdateDriver] → one new reading appended every interval
    ↓
stop() → cancels the pending startup timer and the live driver

Derived Views (computed per call, never cached):
------------------------------------------------
- current_reading      newest reading of the series
- daily_stats()        same-calendar-day rollup
- stats(window)        rolling day/week/month rollup
- snapshot()           wire-format dictionary of the whole state

Example:
--------
>>> from clarity_sim.pipeline import MonitorSession
>>> from clarity_sim.utils import load_default_config
>>>
>>> with MonitorSession(load_default_config()) as session:
...     session.wait_until_ready(timeout=2.0)
...     print(session.daily_stats().to_dict())

Author: Clarity Simulation Team
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple
import threading
import logging

from ..analytics import StatsAggregator
from ..core import (
    ContractViolation,
    FilterState,
    RandomVariate,
    Reading,
    StatsSummary,
    utc_now,
)
from ..filtration import FilterLifeModel, DEFAULT_DEVICE_ID, DEFAULT_FILTER_ID
from ..telemetry import HistoricalSeriesBuilder, LiveUpdateDriver, ReadingGenerator
from ..utils.config import get_config_value
from ..utils.logging import log_filter_state, log_reading

logger = logging.getLogger(__name__)


class MonitorSession:
    """
    Holds the live reading series and filter state for one device.

    Features:
    ---------
    1. Seedable: a single RandomVariate feeds every generator
    2. Thread-safe appends (the live driver runs on its own thread)
    3. Append-only, time-ordered series
    4. Wholesale filter replacement
    """

    def __init__(self,
                 config: Optional[Dict[str, Any]] = None,
                 variate: Optional[RandomVariate] = None,
                 clock: Callable[[], datetime] = utc_now):
        """
        Initialize monitor session.

        Args:
            config: Configuration dictionary (from YAML); missing keys use defaults
            variate: Random source (defaults to one seeded from simulation.seed)
            clock: Returns the aware current instant
        """
        self.config = config or {}
        self.clock = clock

        self.history_days = get_config_value(self.config, "simulation.history_days", 30)
        self.install_days_ago = get_config_value(self.config, "filter.install_days_ago", 45)
        self.interval_seconds = float(get_config_value(self.config, "live.interval_seconds", 120))
        self.startup_delay_seconds = float(
            get_config_value(self.config, "live.startup_delay_seconds", 0.5)
        )

        seed = get_config_value(self.config, "simulation.seed")
        self.variate = variate or RandomVariate(seed=seed)

        self.generator = ReadingGenerator(self.variate)
        self.series_builder = HistoricalSeriesBuilder(self.generator, self.variate, clock=clock)
        self.filter_model = FilterLifeModel(
            filter_id=get_config_value(self.config, "filter.filter_id", DEFAULT_FILTER_ID),
            device_id=get_config_value(self.config, "filter.device_id", DEFAULT_DEVICE_ID),
            clock=clock,
        )
        self.aggregator = StatsAggregator(clock=clock)
        self.driver = LiveUpdateDriver(
            self.generator,
            sink=self.append_reading,
            interval_seconds=self.interval_seconds,
            clock=clock,
        )

        self._lock = threading.Lock()
        self._series: List[Reading] = []
        self._filter_state: Optional[FilterState] = None
        self._ready = threading.Event()
        self._startup_timer: Optional[threading.Timer] = None

        logger.info(
            f"MonitorSession created: history={self.history_days}d, "
            f"filter_age={self.install_days_ago}d, interval={self.interval_seconds:.0f}s"
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    @property
    def readings(self) -> Tuple[Reading, ...]:
        """Immutable snapshot of the series, oldest first."""
        with self._lock:
            return tuple(self._series)

    @property
    def current_reading(self) -> Optional[Reading]:
        with self._lock:
            return self._series[-1] if self._series else None

    @property
    def filter_state(self) -> Optional[FilterState]:
        with self._lock:
            return self._filter_state

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Build the history series and the initial filter state."""
        series = self.series_builder.build(self.history_days)
        filter_state = self.filter_model.compute(self.install_days_ago)

        with self._lock:
            self._series = series
            self._filter_state = filter_state
        self._ready.set()

        logger.info(
            f"Session initialized with {len(series)} readings, "
            f"filter life {filter_state.life_remaining:.1f}%"
        )
        log_reading(series[-1])
        log_filter_state(filter_state)

    def append_reading(self, reading: Reading) -> None:
        """
        Append a reading to the series.

        Raises:
            ContractViolation: If the reading is older than the newest one
        """
        with self._lock:
            if self._series and reading.timestamp < self._series[-1].timestamp:
                raise ContractViolation(
                    f"reading at {reading.timestamp.isoformat()} precedes "
                    f"series end {self._series[-1].timestamp.isoformat()}"
                )
            self._series.append(reading)

    def replace_filter(self) -> FilterState:
        """Swap in a brand new filter (zero days in service)."""
        fresh = self.filter_model.replace()
        with self._lock:
            self._filter_state = fresh
        return fresh

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def daily_stats(self) -> Optional[StatsSummary]:
        """Same-calendar-day rollup, or None before initialization."""
        series = self.readings
        if not series:
            return None
        return self.aggregator.same_day(series)

    def stats(self, window) -> StatsSummary:
        """Rolling window rollup ("day", "week" or "month")."""
        return self.aggregator.aggregate(self.readings, window)

    def snapshot(self) -> Dict[str, Any]:
        """Wire-format view of the whole session state."""
        series = self.readings
        filter_state = self.filter_state
        daily = self.daily_stats()
        return {
            "historicalData": [r.to_dict() for r in series],
            "currentReading": series[-1].to_dict() if series else None,
            "filterData": filter_state.to_dict() if filter_state else None,
            "dailyStats": daily.to_dict() if daily else None,
            "isLoading": not self.is_ready,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Schedule initialization after the startup delay, then go live."""
        if self._startup_timer is not None or self.driver.is_running:
            return

        self._startup_timer = threading.Timer(self.startup_delay_seconds, self._on_startup)
        self._startup_timer.daemon = True
        self._startup_timer.start()
        logger.info(f"Session starting in {self.startup_delay_seconds:.2f}s")

    def _on_startup(self) -> None:
        self.initialize()
        self.driver.start()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until initialized; returns False on timeout."""
        return self._ready.wait(timeout)

    def stop(self) -> None:
        """Cancel the pending startup and the live driver. Idempotent."""
        if self._startup_timer is not None:
            self._startup_timer.cancel()
            if self._startup_timer is not threading.current_thread():
                self._startup_timer.join()
            self._startup_timer = None
        self.driver.stop()
        logger.info("Session stopped")

    def __enter__(self) -> "MonitorSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
