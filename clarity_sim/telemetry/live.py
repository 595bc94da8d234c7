"""
Clarity Telemetry - Live Update Driver
======================================

Appends one fresh reading to a live series on a fixed wall-clock interval.

The driver owns no series of its own. Every tick it asks the generator for
a normal (non contamination event) reading stamped with the clock's "now"
and hands it to a sink supplied by the state owner. It performs no
aggregation.

Lifecycle:
----------
    driver = LiveUpdateDriver(generator, sink=series.append)
    driver.start()     # background timer thread, first tick after one interval
    ...
    driver.stop()      # cancel; no further ticks reach the sink

The driver is also a context manager, stopping on exit.

Author: Clarity Simulation Team
"""

from datetime import datetime
from typing import Callable, Optional
import threading
import logging

from ..core import Reading, utc_now
from .simulator import ReadingGenerator

logger = logging.getLogger(__name__)


DEFAULT_INTERVAL_SECONDS = 120.0


class LiveUpdateDriver:
    """
    Cancelable periodic reading producer.

    Example:
    --------
    >>> live = []
    >>> with LiveUpdateDriver(generator, sink=live.append, interval_seconds=120):
    ...     run_ui()
    """

    def __init__(self,
                 generator: ReadingGenerator,
                 sink: Callable[[Reading], None],
                 interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
                 clock: Callable[[], datetime] = utc_now):
        """
        Initialize live driver.

        Args:
            generator: Reading generator
            sink: Receives each new reading (e.g. a series append)
            interval_seconds: Wall-clock period between readings
            clock: Returns the aware instant stamped on each reading
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        self.generator = generator
        self.sink = sink
        self.interval_seconds = interval_seconds
        self.clock = clock

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.ticks = 0
        self.failures = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> Reading:
        """
        Produce one reading for the current instant and deliver it.

        Returns:
            The delivered reading
        """
        reading = self.generator.generate(self.clock(), is_contamination_event=False)
        self.sink(reading)
        self.ticks += 1
        logger.debug(f"Live tick {self.ticks}: score={reading.quality_score}")
        return reading

    def start(self) -> None:
        """Start the periodic timer thread (no-op if a loop thread is still alive)."""
        if self.is_running:
            if self._stop_event.is_set():
                logger.warning("LiveUpdateDriver previous loop still exiting; not restarted")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="clarity-live-driver",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"LiveUpdateDriver started with interval={self.interval_seconds:.1f}s")

    def stop(self, timeout: float = 5.0) -> None:
        """
        Cancel the timer. Safe to call repeatedly.

        Args:
            timeout: Seconds to wait for the thread to exit
        """
        self._stop_event.set()

        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                # Still inside a tick; keep the handle so start() cannot spawn a second loop
                logger.warning(f"LiveUpdateDriver did not stop within {timeout:.1f}s")
                return
            self._thread = None
            logger.info(f"LiveUpdateDriver stopped after {self.ticks} ticks")

    def _run_loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.tick()
            except Exception as e:
                self.failures += 1
                logger.error(f"Live tick failed: {e}")

    def __enter__(self) -> "LiveUpdateDriver":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
