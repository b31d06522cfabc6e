"""
satellitekit.frames — ECI / ECEF / Geodetic Transforms
========================================================

Frame Definitions
-----------------

**ECI (Earth-Centered Inertial)**
  - X: Vernal equinox direction
  - Z: Celestial pole
  - Y: Completes right-hand system
  - The frame the SGP4 propagator reports positions in.

**ECEF (Earth-Centered Earth-Fixed)**
  - X: Greenwich meridian
  - Z: Geographic pole
  - Y: Completes right-hand system
  - Rotates with the Earth; related to ECI by a z-rotation through GMST.

**Geodetic**
  - Latitude / longitude [deg] and altitude [km] above the WGS-84 ellipsoid.

Transform Graph
---------------
::

    ECI  ──R_z(θ)──▶  ECEF  ──iterative solve──▶  Geodetic
    ECI  ◀──R_z(θ)ᵀ── ECEF  ◀──closed form──────  Geodetic

where θ = GMST at the instant of the position.  The two rotations are
exact transposes, so ECI → ECEF → ECI is the identity to rounding.
"""

from dataclasses import dataclass
from datetime import datetime

import numpy as np
from numpy.typing import NDArray

from .utils import (
    R_EARTH_KM, E2_EARTH, RAD2DEG, DEG2RAD,
    gmst, normalize_longitude,
)


GEODETIC_ITERATIONS = 10


# ════════════════════════════════════════════════════════════════════════════
#  Position Types
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InertialPosition:
    """Position in the Earth-centered inertial frame [km]."""
    x: float
    y: float
    z: float
    timestamp: datetime

    @property
    def magnitude(self) -> float:
        """Distance from Earth center [km]."""
        return float(np.sqrt(self.x**2 + self.y**2 + self.z**2))

    def as_array(self) -> NDArray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class GeodeticPosition:
    """Sub-satellite point on the WGS-84 ellipsoid.

    latitude : float — degrees in [-90, 90]
    longitude : float — degrees in (-180, 180]
    altitude : float — height above the ellipsoid [km]
    """
    latitude: float
    longitude: float
    altitude: float
    timestamp: datetime


# ════════════════════════════════════════════════════════════════════════════
#  Internal Helpers
# ════════════════════════════════════════════════════════════════════════════

def _apply_dcm(R: NDArray, vec: NDArray) -> NDArray:
    """Apply 3×3 DCM to a single (3,) or batch (N,3) of vectors."""
    vec = np.asarray(vec, dtype=np.float64)
    if vec.ndim == 1:
        return R @ vec
    return (R @ vec.T).T


def _resolve_theta(at: datetime | None, theta: float | None) -> float:
    if theta is not None:
        return float(theta)
    if at is None:
        raise ValueError("either an instant or a GMST angle is required")
    return gmst(at)


# ════════════════════════════════════════════════════════════════════════════
#  ECI ↔ ECEF
# ════════════════════════════════════════════════════════════════════════════
#
#  Position :  r_ecef = R_z(θ) · r_eci
#              r_eci  = R_z(θ)ᵀ · r_ecef
#
#  where θ = GMST(t).  Z is common to both frames.
# ════════════════════════════════════════════════════════════════════════════

def eci_to_ecef_matrix(theta: float) -> NDArray:
    """ECI→ECEF 3×3 rotation matrix for a GMST angle [rad].

    Returns
    -------
    R : (3,3) ndarray — DCM such that r_ecef = R @ r_eci
    """
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [ c,  s, 0.0],
        [-s,  c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def ecef_to_eci_matrix(theta: float) -> NDArray:
    """ECEF→ECI 3×3 rotation matrix (transpose of ECI→ECEF)."""
    return eci_to_ecef_matrix(theta).T


def eci_to_ecef(vec_eci: NDArray, at: datetime | None = None,
                theta: float | None = None) -> NDArray:
    """Rotate position vector(s) from ECI to ECEF.

    Parameters
    ----------
    vec_eci : (3,) or (N,3) — position(s) in ECI [km]
    at : datetime — instant used to evaluate GMST
    theta : float — precomputed GMST [rad]; overrides ``at``

    Returns
    -------
    vec_ecef : same shape — position(s) in ECEF [km]
    """
    return _apply_dcm(eci_to_ecef_matrix(_resolve_theta(at, theta)), vec_eci)


def ecef_to_eci(vec_ecef: NDArray, at: datetime | None = None,
                theta: float | None = None) -> NDArray:
    """Rotate position vector(s) from ECEF to ECI."""
    return _apply_dcm(ecef_to_eci_matrix(_resolve_theta(at, theta)), vec_ecef)


# ════════════════════════════════════════════════════════════════════════════
#  ECEF ↔ Geodetic
# ════════════════════════════════════════════════════════════════════════════

def prime_vertical_radius(sin_lat: float) -> float:
    """Ellipsoid normal radius N(φ) [km]."""
    return R_EARTH_KM / np.sqrt(1.0 - E2_EARTH * sin_lat**2)


def ecef_to_geodetic(r_ecef: NDArray) -> tuple[float, float, float]:
    """ECEF [km] → geodetic latitude [deg], longitude [deg], altitude [km].

    Fixed-point iteration on the WGS-84 ellipsoid, run for exactly
    ``GEODETIC_ITERATIONS`` steps (no convergence test).  Longitude is
    wrapped into (-180°, 180°].

    A zero vector has no defined latitude; the result is unspecified.
    """
    x, y, z = (float(c) for c in np.asarray(r_ecef, dtype=np.float64))
    p = np.sqrt(x**2 + y**2)

    lat = np.arctan2(z, p * (1.0 - E2_EARTH))
    for _ in range(GEODETIC_ITERATIONS):
        sin_lat = np.sin(lat)
        n_phi = prime_vertical_radius(sin_lat)
        lat = np.arctan2(z + E2_EARTH * n_phi * sin_lat, p)

    cos_lat = np.cos(lat)
    n_phi = prime_vertical_radius(np.sin(lat))
    if abs(cos_lat) < 1e-10:
        # On the polar axis p / cos(lat) is 0/0
        alt = abs(z) - R_EARTH_KM * np.sqrt(1.0 - E2_EARTH)
    else:
        alt = p / cos_lat - n_phi

    lon = normalize_longitude(np.arctan2(y, x) * RAD2DEG)
    return float(lat * RAD2DEG), lon, float(alt)


def geodetic_to_ecef(lat: float, lon: float, alt: float = 0.0) -> NDArray:
    """Geodetic → ECEF [km].

    Parameters
    ----------
    lat, lon : float — geodetic latitude / longitude [deg]
    alt : float — altitude above WGS-84 ellipsoid [km]
    """
    phi, lam = lat * DEG2RAD, lon * DEG2RAD
    sin_lat, cos_lat = np.sin(phi), np.cos(phi)
    sin_lon, cos_lon = np.sin(lam), np.cos(lam)
    N = prime_vertical_radius(sin_lat)
    x = (N + alt) * cos_lat * cos_lon
    y = (N + alt) * cos_lat * sin_lon
    z = (N * (1.0 - E2_EARTH) + alt) * sin_lat
    return np.array([x, y, z])


# ════════════════════════════════════════════════════════════════════════════
#  ECI → Geodetic
# ════════════════════════════════════════════════════════════════════════════

def eci_to_geodetic(position: InertialPosition, at: datetime | None = None,
                    theta: float | None = None) -> GeodeticPosition:
    """Sub-satellite point of an inertial position.

    Parameters
    ----------
    position : InertialPosition — satellite position [km]
    at : datetime — instant of the position (default ``position.timestamp``)
    theta : float — GMST [rad] already evaluated for ``at``

    Returns
    -------
    GeodeticPosition stamped with ``at``
    """
    at = position.timestamp if at is None else at
    r_ecef = eci_to_ecef(position.as_array(), at=at, theta=theta)
    lat, lon, alt = ecef_to_geodetic(r_ecef)
    return GeodeticPosition(latitude=lat, longitude=lon, altitude=alt,
                            timestamp=at)
