"""City-name geocoding behind a small pluggable interface."""
from typing import Mapping, Optional, Protocol

from core.models import GeoCoordinate

CITY_COORDINATES: dict[str, GeoCoordinate] = {
    "NEW YORK": GeoCoordinate(40.7128, -74.0060),
    "LONDON": GeoCoordinate(51.5074, -0.1278),
    "TOKYO": GeoCoordinate(35.6895, 139.6917),
    "PARIS": GeoCoordinate(48.8566, 2.3522),
    "LOS ANGELES": GeoCoordinate(34.0522, -118.2437),
    "BERLIN": GeoCoordinate(52.5200, 13.4050),
    "MADRID": GeoCoordinate(40.4168, -3.7038),
}


class Geocoder(Protocol):
    def lookup(self, city_name: str) -> Optional[GeoCoordinate]:
        ...

    def names(self) -> list[str]:
        ...


class StaticGazetteer:
    """Geocoder over a fixed name → coordinate table; names match case-insensitively."""

    def __init__(self, table: Optional[Mapping[str, GeoCoordinate]] = None):
        source = CITY_COORDINATES if table is None else table
        self._table = {name.strip().upper(): coord for name, coord in source.items()}

    def lookup(self, city_name: str) -> Optional[GeoCoordinate]:
        return self._table.get(city_name.strip().upper())

    def names(self) -> list[str]:
        return sorted(self._table)
