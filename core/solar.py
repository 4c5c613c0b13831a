"""Solar position: a low-order ephemeris approximation and a pvlib reference."""
import math

import pandas as pd
import pvlib

from core.models import CivilDateTime, GeoCoordinate, SolarPosition

# Julian Day of the J2000.0 epoch (2000-01-01 12:00 UT).
_J2000 = 2451545.0

# Sidereal days per solar day.
_SIDEREAL_RATE = 1.00273790935


def julian_day(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> float:
    """
    Julian Day for a UT civil date/time (Meeus, "Astronomical Algorithms",
    ch. 7, Gregorian calendar).
    """
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    day_fraction = (hour + minute / 60 + second / 3600) / 24
    return (math.floor(365.25 * (year + 4716))
            + math.floor(30.6001 * (month + 1))
            + day + day_fraction + b - 1524.5)


def solar_position(observer: GeoCoordinate, local_time: CivilDateTime) -> SolarPosition:
    """
    Approximate sun azimuth and altitude for an observer at a local time.

    This is a simplified model good to roughly a degree in altitude; it is
    not a substitute for a full ephemeris (see ``reference_solar_position``).

    Args:
        observer:   Observer location.
        local_time: Wall-clock time at the observer with its UTC offset.

    Returns:
        SolarPosition with azimuth in [0, 360) and altitude in [-90, 90].
    """
    utc = local_time.to_utc()
    n = julian_day(utc.year, utc.month, utc.day, utc.hour, utc.minute) - _J2000

    # Orbital elements, radians.
    omega = 2.1429 - 0.0010394594 * n          # longitude of ascending node
    mean_lon = 4.8950630 + 0.017202791698 * n  # mean longitude
    mean_anom = 6.2400600 + 0.0172019699 * n   # mean anomaly

    ecl_lon = (mean_lon
               + 0.03341607 * math.sin(mean_anom)
               + 0.00034894 * math.sin(2 * mean_anom)
               - 0.0001134 * math.sin(omega)
               - 0.0000203 * math.sin(mean_lon - omega))
    obliquity = 0.4090928 - 6.2140e-9 * n + 0.0000396 * math.cos(omega)

    right_asc = math.atan2(math.cos(obliquity) * math.sin(ecl_lon), math.cos(ecl_lon))
    decl = math.asin(math.sin(obliquity) * math.sin(ecl_lon))

    # Sidereal time in hours, then local hour angle in radians.
    gmst0 = (mean_lon + math.pi) % (2 * math.pi) / (2 * math.pi) * 24
    lst = gmst0 + (utc.hour + utc.minute / 60) * _SIDEREAL_RATE + observer.lon / 15
    hour_angle = math.radians(lst * 15) - right_asc

    lat_r = math.radians(observer.lat)
    sin_alt = (math.sin(lat_r) * math.sin(decl)
               + math.cos(lat_r) * math.cos(decl) * math.cos(hour_angle))
    # Guard asin against rounding just past ±1.
    alt_r = math.asin(max(-1.0, min(1.0, sin_alt)))

    # Near the poles the denominator vanishes; clamping keeps acos finite.
    denom = math.cos(lat_r) * math.cos(alt_r)
    if denom == 0:
        cos_az = 1.0
    else:
        cos_az = (math.sin(decl) - math.sin(lat_r) * sin_alt) / denom
    azimuth = math.degrees(math.acos(max(-1.0, min(1.0, cos_az))))

    if math.sin(hour_angle) > 0:
        azimuth = 360.0 - azimuth
    # Rebase from south-origin to north-origin.
    azimuth = (azimuth + 180) % 360

    return SolarPosition(azimuth=azimuth, altitude=math.degrees(alt_r))


def reference_solar_position(observer: GeoCoordinate, local_time: CivilDateTime) -> SolarPosition:
    """
    Solar position from pvlib's NREL SPA implementation, for comparison
    with ``solar_position``. Altitude is geometric (no refraction).
    """
    times = pd.DatetimeIndex([pd.Timestamp(local_time.to_utc(), tz="UTC")])
    location = pvlib.location.Location(latitude=observer.lat, longitude=observer.lon)
    solar_pos = location.get_solarposition(times)
    return SolarPosition(
        azimuth=round(float(solar_pos["azimuth"].iloc[0]), 4),
        altitude=round(float(solar_pos["elevation"].iloc[0]), 4),
    )
