"""Weather: current conditions from OpenWeatherMap for a coordinate."""
import logging
import os
from typing import Optional

import httpx
from dotenv import load_dotenv

from core.models import GeoCoordinate, WeatherObservation

load_dotenv()

_log = logging.getLogger(__name__)

_CURRENT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
_PLACEHOLDER_KEY = "YOUR_DEFAULT_API_KEY_IF_NOT_FOUND"


class WeatherUnavailable(RuntimeError):
    """
    Current conditions could not be obtained.

    ``reason`` is one of "missing_api_key", "http_error",
    "connection_error" or "bad_response"; any detail only goes into the
    message.
    """

    def __init__(self, reason: str, detail: str = ""):
        super().__init__(f"{reason}: {detail}" if detail else reason)
        self.reason = reason


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _parse_observation(data: dict) -> WeatherObservation:
    """Map an OpenWeatherMap /weather payload onto a WeatherObservation."""
    conditions = data.get("weather") or [{}]
    first = conditions[0]
    try:
        return WeatherObservation(
            main_condition=first.get("main", "Unknown"),
            description=first.get("description", "No description"),
            cloud_cover_percentage=int(data["clouds"]["all"]),
            temperature=float(data["main"]["temp"]),
            feels_like=float(data["main"]["feels_like"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise WeatherUnavailable("bad_response", f"missing field {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def fetch_current_conditions(
    coordinate: GeoCoordinate,
    api_key: Optional[str] = None,
) -> WeatherObservation:
    """
    Fetch current conditions at a coordinate.

    Args:
        coordinate: Where to observe (usually the journey's destination).
        api_key:    OpenWeatherMap key. Falls back to the
                    OPENWEATHERMAP_API_KEY environment variable / .env file.

    Raises:
        WeatherUnavailable: With ``reason`` naming the failure cause.
    """
    api_key = api_key or os.getenv("OPENWEATHERMAP_API_KEY")
    if not api_key or api_key == _PLACEHOLDER_KEY:
        raise WeatherUnavailable(
            "missing_api_key",
            "Set OPENWEATHERMAP_API_KEY in .env or pass api_key=.",
        )

    params = {
        "lat": coordinate.lat,
        "lon": coordinate.lon,
        "appid": api_key,
        "units": "metric",
    }

    try:
        async with httpx.AsyncClient(timeout=30) as client:
            response = await client.get(_CURRENT_WEATHER_URL, params=params)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as exc:
        raise WeatherUnavailable(
            "http_error", f"status {exc.response.status_code}"
        ) from exc
    except httpx.RequestError as exc:
        raise WeatherUnavailable("connection_error", str(exc)) from exc
    except ValueError as exc:
        raise WeatherUnavailable("bad_response", "body is not JSON") from exc

    if not isinstance(data, dict):
        raise WeatherUnavailable("bad_response", "empty body")
    return _parse_observation(data)


async def current_conditions_at(
    coordinate: GeoCoordinate,
    api_key: Optional[str] = None,
) -> Optional[WeatherObservation]:
    """
    Like ``fetch_current_conditions`` but returns None on any failure,
    which the seat decision treats as clear skies.
    """
    try:
        return await fetch_current_conditions(coordinate, api_key=api_key)
    except WeatherUnavailable as exc:
        _log.warning(
            "Weather unavailable for (%.4f, %.4f): %s",
            coordinate.lat, coordinate.lon, exc,
        )
        return None
