"""
satellitekit — Satellite Position & Tracking Session Library
==============================================================

Where is a satellite, relative to the Earth and relative to a ground
observer, at any instant?  Given an SGP4 propagator (inertial positions
for a time offset from the element-set epoch) and an observer location,
satellitekit provides the frame math and the session machinery around it::

    TLE ──parse──▶ elements ──SGP4──▶ ECI ──GMST──▶ ECEF ──▶ Geodetic
                                       │                     (lat/lon/alt)
                                       └──observer, SEZ──▶ Topocentric
                                                           (az/el/range)

Coordinate Frames
-----------------

**ECI (Earth-Centered Inertial)**
  - Non-rotating; the frame the propagator reports in.

**ECEF (Earth-Centered Earth-Fixed)**
  - Rotates with the Earth; ECI rotated about Z by GMST.

**Geodetic**
  - WGS-84 latitude/longitude [deg] and altitude [km].

**SEZ (South-East-Zenith)**
  - Observer's local horizon frame; azimuth from North through East.

Units: kilometres, degrees, UTC datetimes.
"""

import logging

from .exceptions import (
    SatelliteKitError, ParseError, PropagationError,
    DegenerateGeometryError, SessionStateError,
)

from .utils import (
    julian_date, calendar_julian_date, gmst,
    normalize_longitude, normalize_azimuth,
    R_EARTH_KM, E2_EARTH, F_EARTH, MU_EARTH_KM, OMEGA_EARTH,
)

from .frames import (
    InertialPosition, GeodeticPosition,
    eci_to_ecef_matrix, ecef_to_eci_matrix,
    eci_to_ecef, ecef_to_eci,
    ecef_to_geodetic, geodetic_to_ecef,
    eci_to_geodetic,
)

from .topocentric import (
    ObserverLocation, TopocentricPosition, SAN_FRANCISCO,
    eci_to_topocentric,
)

from .ground_track import (
    GroundTrackSegment,
    iter_ground_track, sample_ground_track, segment_ground_track,
)

from .tle import TLE, parse_tle, tle_checksum, verify_checksum
from .propagator import Propagator, SGP4Propagator
from .catalog import TrackedSatellite, DEFAULT_SATELLITES, USA_247, ISS, find_satellite
from .tracker import SatelliteTracker
from .config import TrackingConfig, configure_logging
from .session import TrackingSession, TrackingUpdate, SessionState

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    # ── Errors ──
    "SatelliteKitError", "ParseError", "PropagationError",
    "DegenerateGeometryError", "SessionStateError",
    # ── Constants ──
    "R_EARTH_KM", "E2_EARTH", "F_EARTH", "MU_EARTH_KM", "OMEGA_EARTH",
    # ── Time ──
    "julian_date", "calendar_julian_date", "gmst",
    "normalize_longitude", "normalize_azimuth",
    # ── Frames ──
    "InertialPosition", "GeodeticPosition",
    "eci_to_ecef_matrix", "ecef_to_eci_matrix",
    "eci_to_ecef", "ecef_to_eci",
    "ecef_to_geodetic", "geodetic_to_ecef", "eci_to_geodetic",
    # ── Topocentric ──
    "ObserverLocation", "TopocentricPosition", "SAN_FRANCISCO",
    "eci_to_topocentric",
    # ── Ground track ──
    "GroundTrackSegment",
    "iter_ground_track", "sample_ground_track", "segment_ground_track",
    # ── Elements & propagation ──
    "TLE", "parse_tle", "tle_checksum", "verify_checksum",
    "Propagator", "SGP4Propagator",
    # ── Catalog & tracking ──
    "TrackedSatellite", "DEFAULT_SATELLITES", "USA_247", "ISS", "find_satellite",
    "SatelliteTracker",
    "TrackingConfig", "configure_logging",
    "TrackingSession", "TrackingUpdate", "SessionState",
]
