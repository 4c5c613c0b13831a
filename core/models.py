"""Value types shared by the bearing, solar and seat-decision modules."""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class GeoCoordinate:
    """A point on the globe in decimal degrees. Ranges are not validated."""

    lat: float  # -90..90
    lon: float  # -180..180


@dataclass(frozen=True)
class CivilDateTime:
    """Wall-clock time at a location, with a fixed whole-hour UTC offset."""

    year: int
    month: int  # 1-12
    day: int
    hour: int  # 0-23
    minute: int = 0
    utc_offset: int = 0  # hours east of UTC, e.g. -5 for EST

    @classmethod
    def from_datetime(cls, dt: datetime, utc_offset: int = 0) -> "CivilDateTime":
        """Build from a naive wall-clock datetime; seconds are dropped."""
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, utc_offset)

    def to_utc(self) -> datetime:
        """
        Naive UTC datetime.

        Fields are lenient: out-of-range values roll over into the next
        larger field, so February 30 is March 1 (or 2) and hour 24 is
        midnight of the following day.
        """
        year = self.year + (self.month - 1) // 12
        month = (self.month - 1) % 12 + 1
        return datetime(year, month, 1) + timedelta(
            days=self.day - 1,
            hours=self.hour - self.utc_offset,
            minutes=self.minute,
        )


@dataclass(frozen=True)
class SolarPosition:
    azimuth: float  # 0-360, 0 = north, clockwise
    altitude: float  # -90-90, negative when below the horizon


@dataclass(frozen=True)
class WeatherObservation:
    """Snapshot of current conditions at the destination."""

    main_condition: str  # "Rain", "Clouds", "Clear", ...
    description: str  # "light rain", "scattered clouds", ...
    cloud_cover_percentage: int  # 0-100
    temperature: float
    feels_like: float


class SeatChoice(str, Enum):
    SIT_LEFT = "SitLeft"
    SIT_RIGHT = "SitRight"
    NEUTRAL = "Neutral"


@dataclass(frozen=True)
class Recommendation:
    """
    Seat advice for one journey segment.

    ``reason`` is the full human-readable line, including the triggering
    condition and, for neutral outcomes, any transport-specific view hint.
    ``view_hint`` repeats that hint on its own (None when nothing was added).
    """

    category: SeatChoice
    reason: str
    view_hint: Optional[str] = None

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True)
class JourneyAdvice:
    travel_bearing: float
    sun: SolarPosition
    recommendation: Recommendation

    @property
    def sun_is_up(self) -> bool:
        return self.sun.altitude > 0

