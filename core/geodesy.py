"""Great-circle bearing between two coordinates."""
import math

from core.models import GeoCoordinate


def bearing(origin: GeoCoordinate, destination: GeoCoordinate) -> float:
    """
    Initial great-circle bearing (0–360°, clockwise from north) from
    origin to destination.

        θ = atan2(sin Δλ · cos φ2, cos φ1 · sin φ2 − sin φ1 · cos φ2 · cos Δλ)

    Identical points give 0.0. Coordinates outside the usual ranges are
    used as-is.
    """
    lat1_r = math.radians(origin.lat)
    lat2_r = math.radians(destination.lat)
    dlon_r = math.radians(destination.lon - origin.lon)

    x = math.sin(dlon_r) * math.cos(lat2_r)
    y = (math.cos(lat1_r) * math.sin(lat2_r)
         - math.sin(lat1_r) * math.cos(lat2_r) * math.cos(dlon_r))

    return (math.degrees(math.atan2(x, y)) + 360) % 360
