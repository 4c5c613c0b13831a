"""Seat decision: which side of the vehicle to sit on, given sun and weather."""
from enum import Enum
from typing import Optional

from core.models import Recommendation, SeatChoice, WeatherObservation

# Above this cloud cover (percent) the sun is treated as irrelevant.
CLOUD_COVER_THRESHOLD = 75

# Degrees either side of straight ahead / straight behind counted as neutral.
_AHEAD_BUFFER = 15.0
_BEHIND_BUFFER = 15.0

_NEUTRAL_PREFIX = "Neutral / Either Side"


class TransportMode(str, Enum):
    TRAIN = "Train"
    BUS = "Bus"
    FLIGHT = "Flight"
    OTHER = "Other"

    @classmethod
    def parse(cls, label: Optional[str]) -> "TransportMode":
        """
        Case-insensitive lookup that also ignores surrounding whitespace,
        so " train " is TRAIN. Unknown or empty labels map to OTHER.
        """
        normalised = (label or "").strip().casefold()
        for mode in cls:
            if mode.value.casefold() == normalised:
                return mode
        return cls.OTHER


class ObscuringCondition(str, Enum):
    """Weather categories that hide the sun regardless of cloud cover."""

    RAIN = "Rain"
    SNOW = "Snow"
    DRIZZLE = "Drizzle"
    THUNDERSTORM = "Thunderstorm"
    FOG = "Fog"
    MIST = "Mist"
    HAZE = "Haze"
    SQUALL = "Squall"

    @classmethod
    def lookup(cls, label: Optional[str]) -> Optional["ObscuringCondition"]:
        normalised = (label or "").strip().casefold()
        for cond in cls:
            if cond.value.casefold() == normalised:
                return cond
        return None


def _normalise(angle: float) -> float:
    return ((angle % 360) + 360) % 360


def _weather_gate(weather: Optional[WeatherObservation]) -> Optional[str]:
    """Neutral reason when weather makes the sun irrelevant, else None."""
    if weather is None:
        return None
    if weather.cloud_cover_percentage > CLOUD_COVER_THRESHOLD:
        return f"{_NEUTRAL_PREFIX} (Overcast: {weather.cloud_cover_percentage}% clouds)"
    if ObscuringCondition.lookup(weather.main_condition) is not None:
        return f"{_NEUTRAL_PREFIX} (Weather: {weather.main_condition})"
    return None


def _view_hint(mode: TransportMode) -> Optional[str]:
    if mode in (TransportMode.TRAIN, TransportMode.BUS):
        return (
            f"For potentially better views on a {mode.value.lower()}, "
            "some prefer the right side."
        )
    if mode is TransportMode.FLIGHT:
        return "Views on flights are variable; check seat maps and flight path."
    return None


def sun_side(sun_azimuth: float, travel_bearing: float) -> SeatChoice:
    """
    Geometry only: which seat keeps the sun off you.

    The sun's angle relative to the direction of travel is split into a
    right-hand arc (15°, 165°), a left-hand arc (195°, 345°) and the two
    30°-wide ahead/behind wedges, which are neutral.
    """
    relative = (_normalise(sun_azimuth) - _normalise(travel_bearing) + 360) % 360

    if _AHEAD_BUFFER < relative < 180 - _BEHIND_BUFFER:
        return SeatChoice.SIT_LEFT
    if 180 + _BEHIND_BUFFER < relative < 360 - _AHEAD_BUFFER:
        return SeatChoice.SIT_RIGHT
    return SeatChoice.NEUTRAL


def recommend(
    sun_azimuth: float,
    travel_bearing: float,
    weather: Optional[WeatherObservation] = None,
    transport_mode: Optional[str] = None,
) -> Recommendation:
    """
    Combine sun direction, travel direction, weather and transport mode
    into a seat recommendation.

    Args:
        sun_azimuth:    Sun azimuth in degrees (0 = north, clockwise).
        travel_bearing: Direction of travel in degrees (0 = north, clockwise).
        weather:        Conditions at the destination, or None to assume
                        clear skies.
        transport_mode: Free-text mode label ("Train", "Bus", "Flight", ...).
                        Only affects the wording of neutral outcomes.

    Returns:
        Recommendation whose ``reason`` reads e.g.
        "Sit Left (Sun on Right) (Clear Skies)" or
        "Neutral / Either Side (Weather: Rain). For potentially better
        views on a bus, some prefer the right side."
    """
    reason = _weather_gate(weather)

    if reason is not None:
        category = SeatChoice.NEUTRAL
    else:
        if weather is None:
            conditions = "(Clear Skies)"
        else:
            conditions = (
                f"(Weather: {weather.description}, "
                f"{weather.cloud_cover_percentage}% clouds)"
            )
        category = sun_side(sun_azimuth, travel_bearing)
        if category is SeatChoice.SIT_LEFT:
            reason = f"Sit Left (Sun on Right) {conditions}"
        elif category is SeatChoice.SIT_RIGHT:
            reason = f"Sit Right (Sun on Left) {conditions}"
        else:
            reason = f"{_NEUTRAL_PREFIX} (Sun Ahead/Behind) {conditions}"

    hint = None
    if category is SeatChoice.NEUTRAL:
        hint = _view_hint(TransportMode.parse(transport_mode))
        if hint is not None:
            reason = f"{reason}. {hint}"

    return Recommendation(category=category, reason=reason, view_hint=hint)
