"""
Clarity Simulator Core - Data Model
===================================

Value objects exchanged between the engine and its consumers.

Data Shapes:
------------
1. ParticleBreakdown - small/medium/large sub-counts of one sample
2. Reading          - one synthetic telemetry sample (immutable)
3. FilterState      - consumable filter wear snapshot (replaced wholesale)
4. StatsSummary     - rollup of a reading series over a time window
5. StatsWindow      - rolling window selector (day, week, month)

Wire Format:
------------
Every shape serializes to a plain record with camelCase keys:

    Reading:      {timestamp, qualityScore, particleCount,
                   particleBreakdown: {small, medium, large},
                   ppmLevel, isFiltering}
    FilterState:  {filterId, deviceId, installDate, lifeRemaining,
                   activationCount, status}
    StatsSummary: {totalParticles, avgQualityScore, readingsCount,
                   litersFiltered?}

Timestamps are encoded as UTC ISO-8601 with millisecond precision and a
trailing "Z" (2025-12-24T12:30:45.123Z).

Invariants:
-----------
- small + medium + large == particleCount
- isFiltering == (qualityScore < 75)
- FilterState.status is a pure function of lifeRemaining

Author: Clarity Simulation Team
"""

import numbers
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional


# Quality score below which the device is considered to be filtering
FILTERING_THRESHOLD = 75

# Filter status thresholds on lifeRemaining [%] (strictly greater than)
FILTER_GOOD_ABOVE = 20.0
FILTER_REPLACE_SOON_ABOVE = 10.0

# Fractional seconds, normalized to microseconds before fromisoformat
_FRACTION = re.compile(r"([T ]\d{2}:\d{2}:\d{2})\.(\d+)")


class ContractViolation(ValueError):
    """Caller broke a documented precondition (negative count, bad timestamp, ...)."""
    pass


# ----------------------------------------------------------------------------
# Timestamp codec
# ----------------------------------------------------------------------------

def utc_now() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_aware(timestamp: datetime) -> datetime:
    """
    Validate that a timestamp is a timezone-aware datetime.

    Raises:
        ContractViolation: For naive datetimes or non-datetime values
    """
    if not isinstance(timestamp, datetime):
        raise ContractViolation(f"timestamp must be a datetime, got {type(timestamp).__name__}")
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        raise ContractViolation(f"timestamp must be timezone-aware: {timestamp!r}")
    return timestamp


def format_timestamp(timestamp: datetime) -> str:
    """
    Encode an instant as UTC ISO-8601 with milliseconds.

    Example:
        >>> format_timestamp(datetime(2025, 1, 1, tzinfo=timezone.utc))
        '2025-01-01T00:00:00.000Z'
    """
    utc = ensure_aware(timestamp).astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Decode an ISO-8601 string into an aware datetime.

    Strings without an offset are read as UTC. Fractional seconds of any
    length are accepted and truncated to microseconds.

    Raises:
        ContractViolation: If the string is not valid ISO-8601
    """
    if not isinstance(value, str):
        raise ContractViolation(f"timestamp must be an ISO-8601 string, got {value!r}")
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ContractViolation(f"malformed timestamp {value!r}: {e}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def require_record(name: str, data: Any) -> Dict[str, Any]:
    """
    Validate that a decoded wire record is a JSON object.

    Raises:
        ContractViolation: If data is not a mapping
    """
    if not isinstance(data, dict):
        raise ContractViolation(f"{name} record must be an object, got {type(data).__name__}")
    return data


def require_count(name: str, value: Any) -> int:
    """
    Validate a non-negative integer count.

    Raises:
        ContractViolation: If value is not a non-negative integer
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ContractViolation(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < 0:
        raise ContractViolation(f"{name} must be non-negative, got {value}")
    return value


# ----------------------------------------------------------------------------
# Reading
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class ParticleBreakdown:
    """Particle sub-counts by size class."""

    small: int = 0
    medium: int = 0
    large: int = 0

    def __post_init__(self):
        for name in ("small", "medium", "large"):
            require_count(name, getattr(self, name))

    @property
    def total(self) -> int:
        return self.small + self.medium + self.large

    def __add__(self, other: "ParticleBreakdown") -> "ParticleBreakdown":
        return ParticleBreakdown(
            small=self.small + other.small,
            medium=self.medium + other.medium,
            large=self.large + other.large,
        )

    def to_dict(self) -> Dict[str, int]:
        return {"small": self.small, "medium": self.medium, "large": self.large}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParticleBreakdown":
        data = require_record("particleBreakdown", data)
        try:
            return cls(small=data["small"], medium=data["medium"], large=data["large"])
        except KeyError as e:
            raise ContractViolation(f"particleBreakdown record missing key {e}") from e


@dataclass(frozen=True)
class Reading:
    """
    One synthetic telemetry sample.

    Readings are produced once by the ReadingGenerator and never mutated.
    Construction validates every cross-field invariant so a Reading that
    exists is always consistent.

    Attributes:
        timestamp: Aware instant of the sample
        quality_score: Integer in [0, 100], 100 = no contamination
        particle_count: Total particles detected
        particle_breakdown: Sub-counts summing to particle_count
        ppm_level: Concentration estimate, ~particle_count x noise
        is_filtering: True iff quality_score < 75
    """

    timestamp: datetime
    quality_score: int
    particle_count: int
    particle_breakdown: ParticleBreakdown
    ppm_level: float
    is_filtering: bool

    def __post_init__(self):
        ensure_aware(self.timestamp)
        require_count("particle_count", self.particle_count)
        score = require_count("quality_score", self.quality_score)
        if score > 100:
            raise ContractViolation(f"quality_score must be <= 100, got {score}")
        if self.particle_breakdown.total != self.particle_count:
            raise ContractViolation(
                f"breakdown total {self.particle_breakdown.total} != "
                f"particle_count {self.particle_count}"
            )
        if self.ppm_level < 0:
            raise ContractViolation(f"ppm_level must be non-negative, got {self.ppm_level}")
        if self.is_filtering != (score < FILTERING_THRESHOLD):
            raise ContractViolation(
                f"is_filtering={self.is_filtering} inconsistent with quality_score={score}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire record."""
        return {
            "timestamp": format_timestamp(self.timestamp),
            "qualityScore": self.quality_score,
            "particleCount": self.particle_count,
            "particleBreakdown": self.particle_breakdown.to_dict(),
            "ppmLevel": self.ppm_level,
            "isFiltering": self.is_filtering,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reading":
        """
        Deserialize from the wire record.

        Raises:
            ContractViolation: On missing keys or inconsistent fields
        """
        data = require_record("reading", data)
        try:
            return cls(
                timestamp=parse_timestamp(data["timestamp"]),
                quality_score=data["qualityScore"],
                particle_count=data["particleCount"],
                particle_breakdown=ParticleBreakdown.from_dict(data["particleBreakdown"]),
                ppm_level=float(data["ppmLevel"]),
                is_filtering=bool(data["isFiltering"]),
            )
        except KeyError as e:
            raise ContractViolation(f"reading record missing key {e}") from e
        except ContractViolation:
            raise
        except (TypeError, ValueError) as e:
            raise ContractViolation(f"malformed reading record: {e}") from e


# ----------------------------------------------------------------------------
# Filter
# ----------------------------------------------------------------------------

class FilterStatus(str, Enum):
    """Replacement urgency of the consumable filter."""

    GOOD = "good"
    REPLACE_SOON = "replace-soon"
    REPLACE_NOW = "replace-now"

    @classmethod
    def from_life_remaining(cls, life_remaining: float) -> "FilterStatus":
        """Map remaining life [%] to a status (> 20 good, > 10 replace soon)."""
        if life_remaining > FILTER_GOOD_ABOVE:
            return cls.GOOD
        if life_remaining > FILTER_REPLACE_SOON_ABOVE:
            return cls.REPLACE_SOON
        return cls.REPLACE_NOW


@dataclass(frozen=True)
class FilterState:
    """
    Consumable filter wear snapshot.

    Status is not stored; it is always derived from life_remaining.
    """

    filter_id: str
    device_id: str
    install_date: datetime
    life_remaining: float
    activation_count: int

    def __post_init__(self):
        ensure_aware(self.install_date)
        require_count("activation_count", self.activation_count)
        if not 0.0 <= self.life_remaining <= 100.0:
            raise ContractViolation(f"life_remaining out of [0, 100]: {self.life_remaining}")

    @property
    def status(self) -> FilterStatus:
        return FilterStatus.from_life_remaining(self.life_remaining)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filterId": self.filter_id,
            "deviceId": self.device_id,
            "installDate": format_timestamp(self.install_date),
            "lifeRemaining": self.life_remaining,
            "activationCount": self.activation_count,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterState":
        """
        Deserialize from the wire record.

        A "status" key, if present, must agree with lifeRemaining.
        """
        data = require_record("filter", data)
        try:
            state = cls(
                filter_id=str(data["filterId"]),
                device_id=str(data["deviceId"]),
                install_date=parse_timestamp(data["installDate"]),
                life_remaining=float(data["lifeRemaining"]),
                activation_count=data["activationCount"],
            )
        except KeyError as e:
            raise ContractViolation(f"filter record missing key {e}") from e
        except ContractViolation:
            raise
        except (TypeError, ValueError) as e:
            raise ContractViolation(f"malformed filter record: {e}") from e
        status = data.get("status")
        if status is not None and status != state.status.value:
            raise ContractViolation(
                f"status {status!r} inconsistent with lifeRemaining={state.life_remaining}"
            )
        return state


# ----------------------------------------------------------------------------
# Statistics
# ----------------------------------------------------------------------------

class StatsWindow(str, Enum):
    """Rolling rollup window."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def duration(self) -> timedelta:
        return _WINDOW_DURATIONS[self]

    @classmethod
    def parse(cls, value: Any) -> "StatsWindow":
        """
        Coerce a window name or member.

        Raises:
            ContractViolation: For unknown window names
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as e:
            raise ContractViolation(
                f"unknown window {value!r}; expected one of {[w.value for w in cls]}"
            ) from e


_WINDOW_DURATIONS = {
    StatsWindow.DAY: timedelta(hours=24),
    StatsWindow.WEEK: timedelta(days=7),
    StatsWindow.MONTH: timedelta(days=30),
}


@dataclass(frozen=True)
class StatsSummary:
    """Rollup of a windowed reading series. liters_filtered is set for monthly rollups only."""

    total_particles: int
    avg_quality_score: int
    readings_count: int
    liters_filtered: Optional[int] = None

    def to_dict(self) -> Dict[str, int]:
        record = {
            "totalParticles": self.total_particles,
            "avgQualityScore": self.avg_quality_score,
            "readingsCount": self.readings_count,
        }
        if self.liters_filtered is not None:
            record["litersFiltered"] = self.liters_filtered
        return record
