"""
satellitekit.utils — Constants, Time and Angle Utilities
==========================================================

WGS-84 constants (kilometre units), Julian Date and Greenwich Mean
Sidereal Time, and the angle normalizers shared by the frame modules.
"""

import math
from datetime import datetime, timezone

import numpy as np

# ── Physical Constants ──────────────────────────────────────────────────────
R_EARTH_KM = 6378.137                 # WGS-84 equatorial radius       [km]
R_EARTH_POLAR_KM = 6356.752           # WGS-84 polar radius            [km]
F_EARTH = 1.0 / 298.257223563         # WGS-84 flattening
E2_EARTH = 0.00669437999014           # First eccentricity squared
OMEGA_EARTH = 7.29211514670698e-5     # Earth rotation rate            [rad/s]
MU_EARTH_KM = 398_600.4418             # Earth gravitational parameter  [km³/s²]

MINUTES_PER_DAY = 1440.0
SECONDS_PER_DAY = 86400.0
SIDEREAL_DAY_SECONDS = 86164.1

JD_J2000 = 2_451_545.0
DAYS_PER_CENTURY = 36_525.0

TWO_PI = 2.0 * np.pi
DEG2RAD = np.pi / 180.0
RAD2DEG = 180.0 / np.pi


# ── Time Utilities ──────────────────────────────────────────────────────────

def to_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime (naive input is UTC)."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _day_number(year: int, month: int, day: float) -> float:
    """Julian Date at 0h UT of a Gregorian calendar date (Meeus)."""
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return (math.floor(365.25 * (year + 4716))
            + math.floor(30.6001 * (month + 1))
            + day + b - 1524.5)


def calendar_julian_date(year: int, month: int, day: int,
                         hour: float = 0.0, minute: float = 0.0,
                         second: float = 0.0) -> float:
    """Compute Julian Date from calendar date (UTC)."""
    jd = _day_number(year, month, day)
    return jd + (hour + minute / 60.0 + second / 3600.0) / 24.0


def _hours_of_day(t: datetime) -> float:
    return (t.hour + t.minute / 60.0
            + (t.second + t.microsecond * 1e-6) / 3600.0)


def julian_date(instant: datetime) -> float:
    """Julian Date of a datetime (naive values are taken as UTC)."""
    t = to_utc(instant)
    return _day_number(t.year, t.month, t.day) + _hours_of_day(t) / 24.0


def gmst(instant: datetime) -> float:
    """Greenwich Mean Sidereal Time [rad] in [0, 2π).

    IAU polynomial referenced to J2000.0, evaluated from the Julian Date
    at 0h UT plus the UT fraction of the day.  No range checking: any
    representable datetime yields a number.
    """
    t = to_utc(instant)
    jd0 = _day_number(t.year, t.month, t.day)
    ut = _hours_of_day(t)

    days = jd0 - JD_J2000 + ut / 24.0
    T = days / DAYS_PER_CENTURY

    theta_deg = (280.46061837
                 + 360.98564736629 * days
                 + 0.000387933 * T**2
                 - T**3 / 38_710_000.0)

    theta_deg = math.fmod(theta_deg, 360.0)
    if theta_deg < 0.0:
        theta_deg += 360.0
    if theta_deg >= 360.0:
        # -1e-14 + 360.0 rounds up to exactly 360.0
        theta_deg = 0.0
    return theta_deg * DEG2RAD


# ── Angle Normalization ─────────────────────────────────────────────────────

def normalize_longitude(lon_deg: float) -> float:
    """Wrap a longitude into (-180°, 180°] by repeated ±360° steps."""
    lon = float(lon_deg)
    if not math.isfinite(lon):
        return lon
    if abs(lon) > 1.0e6:
        # stepping by 360 no longer changes a double of this size
        lon = math.fmod(lon, 360.0)
    while lon > 180.0:
        lon -= 360.0
    while lon <= -180.0:
        lon += 360.0
    return lon


def normalize_azimuth(az_deg: float) -> float:
    """Map an ``atan2`` azimuth in (-180°, 180°] onto [0°, 360°)."""
    az = float(az_deg)
    if az < 0.0:
        az += 360.0
    if az >= 360.0:
        az = 0.0
    return az


def angle_difference(a: float, b: float) -> float:
    """Smallest signed difference ``a - b`` between two angles [rad]."""
    return (a - b + np.pi) % TWO_PI - np.pi
