"""
satellitekit.topocentric — Observer-Relative Geometry
=======================================================

Ground observer model and the inertial → topocentric solver producing
azimuth, elevation and slant range as seen from the observer.

The range vector is formed in ECI, rotated to ECEF with the same GMST
rotation used for the sub-satellite point, then projected onto the
observer's local South-East-Zenith (SEZ) frame::

    S =  sinφ cosλ ρx + sinφ sinλ ρy − cosφ ρz
    E = −sinλ ρx      + cosλ ρy
    Z =  cosφ cosλ ρx + cosφ sinλ ρy + sinφ ρz

    az = atan2(E, −S)        (0 = North, 90 = East)
    el = asin(Z / |ρ|)
"""

from dataclasses import dataclass
from datetime import datetime

import numpy as np
from numpy.typing import NDArray

from .exceptions import DegenerateGeometryError
from .frames import (
    InertialPosition, geodetic_to_ecef,
    ecef_to_eci_matrix, eci_to_ecef_matrix, _resolve_theta,
)
from .utils import DEG2RAD, RAD2DEG, normalize_azimuth


# ════════════════════════════════════════════════════════════════════════════
#  Observer & Result Types
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ObserverLocation:
    """Ground observer.

    Parameters
    ----------
    name : str — display label
    latitude, longitude : float — geodetic coordinates [deg]
    altitude_meters : float — height above the WGS-84 ellipsoid [m]
    """
    name: str = "Observer"
    latitude: float = 0.0
    longitude: float = 0.0
    altitude_meters: float = 0.0

    @property
    def altitude_km(self) -> float:
        return self.altitude_meters / 1000.0

    def ecef(self) -> NDArray:
        """Observer position in ECEF [km]."""
        return geodetic_to_ecef(self.latitude, self.longitude, self.altitude_km)

    def eci(self, at: datetime | None = None,
            theta: float | None = None) -> NDArray:
        """Observer position in ECI at an instant [km]."""
        return ecef_to_eci_matrix(_resolve_theta(at, theta)) @ self.ecef()


SAN_FRANCISCO = ObserverLocation(
    name="San Francisco",
    latitude=37.7749,
    longitude=-122.4194,
    altitude_meters=16.0,
)


@dataclass(frozen=True)
class TopocentricPosition:
    """Satellite as seen from an observer.

    azimuth : float — degrees in [0, 360), 0 = North, 90 = East
    elevation : float — degrees in [-90, 90], 0 = horizon
    range : float — slant range [km]
    range_rate : float — always 0.0; relative velocity is not computed
    """
    azimuth: float
    elevation: float
    range: float
    range_rate: float
    timestamp: datetime

    @property
    def is_visible(self) -> bool:
        """True when the satellite is above the observer's horizon."""
        return self.elevation > 0.0


# ════════════════════════════════════════════════════════════════════════════
#  Topocentric Geometry
# ════════════════════════════════════════════════════════════════════════════

def ecef_to_sez_matrix(lat: float, lon: float) -> NDArray:
    """ECEF→SEZ rotation for an observer at geodetic ``lat``/``lon`` [deg]."""
    phi, lam = lat * DEG2RAD, lon * DEG2RAD
    sin_lat, cos_lat = np.sin(phi), np.cos(phi)
    sin_lon, cos_lon = np.sin(lam), np.cos(lam)
    return np.array([
        [sin_lat * cos_lon, sin_lat * sin_lon, -cos_lat],
        [-sin_lon,          cos_lon,            0.0],
        [cos_lat * cos_lon, cos_lat * sin_lon,  sin_lat],
    ])


def sez_to_azel(sez: NDArray, rng: float) -> tuple[float, float]:
    """Azimuth and elevation [deg] of an SEZ vector of length ``rng``."""
    south, east, zenith = sez
    az = normalize_azimuth(np.arctan2(east, -south) * RAD2DEG)
    # |zenith| can exceed rng by an ulp straight overhead
    el = np.arcsin(np.clip(zenith / rng, -1.0, 1.0)) * RAD2DEG
    return float(az), float(el)


def eci_to_topocentric(position: InertialPosition,
                       observer: ObserverLocation,
                       at: datetime | None = None,
                       theta: float | None = None) -> TopocentricPosition:
    """Azimuth / elevation / range of a satellite from a ground observer.

    Parameters
    ----------
    position : InertialPosition — satellite position in ECI [km]
    observer : ObserverLocation
    at : datetime — observation instant (default ``position.timestamp``)
    theta : float — GMST [rad] already evaluated for ``at``

    Returns
    -------
    TopocentricPosition stamped with ``at``

    Raises
    ------
    DegenerateGeometryError
        If the observer coincides with the satellite or the geometry is
        not finite.
    """
    at = position.timestamp if at is None else at
    theta = _resolve_theta(at, theta)

    r_obs_eci = ecef_to_eci_matrix(theta) @ observer.ecef()
    rho_eci = position.as_array() - r_obs_eci
    rng = float(np.linalg.norm(rho_eci))
    if not np.isfinite(rng) or rng == 0.0:
        raise DegenerateGeometryError(
            f"no line of sight from {observer.name!r}: range={rng}")

    rho_ecef = eci_to_ecef_matrix(theta) @ rho_eci
    sez = ecef_to_sez_matrix(observer.latitude, observer.longitude) @ rho_ecef
    az, el = sez_to_azel(sez, rng)

    return TopocentricPosition(
        azimuth=az,
        elevation=el,
        range=rng,
        range_rate=0.0,
        timestamp=at,
    )
