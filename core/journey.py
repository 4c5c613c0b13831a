"""Journey: bearing + sun position + weather → seat advice for one segment."""
from typing import Optional

from core.geodesy import bearing
from core.models import CivilDateTime, GeoCoordinate, JourneyAdvice, WeatherObservation
from core.scoring import recommend
from core.solar import solar_position


def plan_journey(
    origin: GeoCoordinate,
    destination: GeoCoordinate,
    local_time: CivilDateTime,
    transport_mode: Optional[str] = None,
    weather: Optional[WeatherObservation] = None,
) -> JourneyAdvice:
    """
    Seat advice for travelling from origin to destination at local_time.

    The sun is evaluated at the destination. ``weather`` must already be
    resolved by the caller; None means clear skies.
    """
    travel_bearing = bearing(origin, destination)
    sun = solar_position(destination, local_time)
    return JourneyAdvice(
        travel_bearing=travel_bearing,
        sun=sun,
        recommendation=recommend(sun.azimuth, travel_bearing, weather, transport_mode),
    )
