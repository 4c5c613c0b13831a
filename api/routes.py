"""API route definitions."""
import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from core.geocoding import Geocoder, StaticGazetteer
from core.geodesy import bearing
from core.journey import plan_journey
from core.models import CivilDateTime, GeoCoordinate, SeatChoice
from core.scoring import recommend
from core.solar import reference_solar_position, solar_position
from core.weather import WeatherUnavailable, fetch_current_conditions

router = APIRouter()

_log = logging.getLogger(__name__)

_gazetteer: Geocoder = StaticGazetteer()

_DEFAULT_ORIGIN = "London"
_DEFAULT_DESTINATION = "Paris"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class RecommendRequest(BaseModel):
    origin: str = Field(..., min_length=1, description="Origin city name")
    destination: str = Field(..., min_length=1, description="Destination city name")
    when: datetime = Field(
        ..., description="Local wall-clock departure time, ISO 8601; an explicit offset overrides utc_offset"
    )
    utc_offset: int = Field(0, ge=-12, le=14, description="Local UTC offset in whole hours")
    transport_mode: str = Field("Train", description="Train, Bus, Flight or other")
    use_weather: bool = Field(True, description="Fetch current weather at the destination")


class RecommendResponse(BaseModel):
    category: SeatChoice
    recommendation: str
    view_hint: Optional[str] = None
    origin: str
    destination: str
    sun_azimuth: float
    sun_altitude: float
    travel_bearing: float
    weather_status: str
    notices: list[str] = []


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

_WEATHER_MESSAGES = {
    "missing_api_key": "Weather: Not fetched (no API key configured).",
    "http_error": "Weather: Could not fetch data (API error).",
    "connection_error": "Weather: No connection to the weather service. Data unavailable.",
    "bad_response": "Weather: Could not fetch data (empty or malformed response).",
}


def _civil_time(when: datetime, utc_offset: int) -> CivilDateTime:
    if when.tzinfo is not None:
        # An explicit offset wins over utc_offset and may be fractional.
        when = when.astimezone(timezone.utc).replace(tzinfo=None)
        utc_offset = 0
    return CivilDateTime.from_datetime(when, utc_offset)


def _resolve_route(
    geocoder: Geocoder,
    origin_name: str,
    dest_name: str,
    notices: list[str],
) -> tuple[str, GeoCoordinate, str, GeoCoordinate]:
    """
    Geocode both ends; if either is unknown, use the default route and
    record a notice. Returns (origin_name, origin, dest_name, destination).
    """
    origin = geocoder.lookup(origin_name)
    destination = geocoder.lookup(dest_name)
    if origin is not None and destination is not None:
        return origin_name, origin, dest_name, destination

    _log.warning("Unknown city in %r → %r; using default route.", origin_name, dest_name)
    notices.append(
        "One or both cities not recognized. "
        f"Using default route ({_DEFAULT_ORIGIN} to {_DEFAULT_DESTINATION})."
    )
    origin = geocoder.lookup(_DEFAULT_ORIGIN)
    destination = geocoder.lookup(_DEFAULT_DESTINATION)
    if origin is None or destination is None:
        raise HTTPException(
            status_code=422,
            detail="Cities not recognized and no default route is available.",
        )
    return _DEFAULT_ORIGIN, origin, _DEFAULT_DESTINATION, destination


async def _resolve_weather(destination: GeoCoordinate):
    """
    Current weather at the destination plus a user-facing status line.

    Every failure cause yields None for the seat decision; only the
    status line tells them apart.
    """
    try:
        weather = await fetch_current_conditions(destination)
    except WeatherUnavailable as exc:
        _log.warning("Weather fetch failed (%s); assuming clear skies.", exc)
        return None, _WEATHER_MESSAGES.get(exc.reason, "Weather: Data unavailable.")
    return weather, f"Weather: {weather.description}, {weather.cloud_cover_percentage}% clouds"


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/cities")
def cities():
    return {"cities": _gazetteer.names()}


@router.get("/bearing")
def travel_bearing(
    origin_lat: float = Query(..., description="Origin latitude"),
    origin_lon: float = Query(..., description="Origin longitude"),
    dest_lat: float = Query(..., description="Destination latitude"),
    dest_lon: float = Query(..., description="Destination longitude"),
):
    return {
        "bearing": bearing(
            GeoCoordinate(origin_lat, origin_lon), GeoCoordinate(dest_lat, dest_lon)
        )
    }


@router.get("/sun-position")
def sun_position(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
    when: datetime = Query(..., description="Local ISO datetime"),
    utc_offset: int = Query(0, description="Local UTC offset in whole hours"),
    model: Literal["approximate", "reference"] = Query(
        "approximate", description="approximate = built-in formula; reference = pvlib SPA"
    ),
):
    observer = GeoCoordinate(lat, lon)
    local_time = _civil_time(when, utc_offset)
    if model == "reference":
        pos = reference_solar_position(observer, local_time)
    else:
        pos = solar_position(observer, local_time)
    return {"azimuth": pos.azimuth, "altitude": pos.altitude, "model": model}


@router.get("/seat-side")
def seat_side(
    sun_azimuth: float = Query(..., description="Sun azimuth in degrees (0=North, clockwise)"),
    travel_bearing: float = Query(..., description="Travel bearing in degrees (0=North, clockwise)"),
    transport_mode: str = Query("Train", description="Train, Bus, Flight or other"),
):
    rec = recommend(sun_azimuth, travel_bearing, None, transport_mode)
    return {"category": rec.category, "recommendation": rec.reason, "view_hint": rec.view_hint}


# ---------------------------------------------------------------------------
# POST /recommend
# ---------------------------------------------------------------------------

@router.post("/recommend", response_model=RecommendResponse)
async def recommend_seat(body: RecommendRequest) -> RecommendResponse:
    """
    Full seat-recommendation pipeline:
      1. Geocode origin and destination (London → Paris if either is unknown)
      2. Fetch current weather at the destination (optional)
      3. Compute travel bearing and sun position at the destination
      4. Return the seat recommendation with the angles behind it
    """
    notices: list[str] = []

    # --- Step 1: geocoding ---
    origin_name, origin, dest_name, destination = _resolve_route(
        _gazetteer, body.origin, body.destination, notices
    )

    # --- Step 2: weather ---
    if body.use_weather:
        weather, weather_status = await _resolve_weather(destination)
    else:
        weather, weather_status = None, "Weather: Not requested."

    # --- Step 3: geometry + decision ---
    local_time = _civil_time(body.when, body.utc_offset)
    advice = plan_journey(origin, destination, local_time, body.transport_mode, weather)
    _log.debug(
        "bearing=%.1f sun_az=%.1f sun_alt=%.1f → %s",
        advice.travel_bearing, advice.sun.azimuth, advice.sun.altitude,
        advice.recommendation.category.value,
    )
    if not advice.sun_is_up:
        notices.append("The sun is below the horizon at this time.")

    # --- Step 4: response assembly ---
    rec = advice.recommendation
    return RecommendResponse(
        category=rec.category,
        recommendation=rec.reason,
        view_hint=rec.view_hint,
        origin=origin_name,
        destination=dest_name,
        sun_azimuth=round(advice.sun.azimuth, 1),
        sun_altitude=round(advice.sun.altitude, 1),
        travel_bearing=round(advice.travel_bearing, 1),
        weather_status=weather_status,
        notices=notices,
    )
