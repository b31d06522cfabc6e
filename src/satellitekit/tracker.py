"""
satellitekit.tracker — Single-Satellite Position Queries
==========================================================

:class:`SatelliteTracker` binds one satellite's element set to a
propagator and answers "where is it at time t" in inertial, geodetic and
topocentric terms, plus ground tracks over a span.
"""

import logging
from datetime import datetime, timedelta

import numpy as np

from .catalog import TrackedSatellite
from .exceptions import PropagationError, SatelliteKitError
from .frames import InertialPosition, GeodeticPosition, eci_to_geodetic
from .ground_track import (
    GroundTrackSegment, sample_ground_track, segment_ground_track,
)
from .propagator import Propagator, SGP4Propagator
from .tle import TLE, parse_tle
from .topocentric import ObserverLocation, TopocentricPosition, eci_to_topocentric
from .utils import RAD2DEG, to_utc

logger = logging.getLogger(__name__)


class SatelliteTracker:
    """Tracks satellite position using SGP4/SDP4 propagation.

    Parameters
    ----------
    satellite : TrackedSatellite — name, catalog number and TLE lines
    propagator : Propagator — defaults to a private :class:`SGP4Propagator`
    verify_checksums : bool — enforce TLE line checksums while parsing

    Raises
    ------
    ParseError
        If the element set cannot be parsed.
    """

    def __init__(self, satellite: TrackedSatellite,
                 propagator: Propagator | None = None,
                 verify_checksums: bool = False):
        self.satellite = satellite
        self.elements: TLE = parse_tle(*satellite.lines,
                                       verify_checksums=verify_checksums)
        self.propagator = propagator if propagator is not None else SGP4Propagator()
        logger.debug("tracking %s (%05d), epoch %s", satellite.name,
                     satellite.norad_id, self.elements.epoch)

    # ── Element-derived quantities ──

    @property
    def name(self) -> str:
        return self.satellite.name

    @property
    def norad_id(self) -> int:
        return self.satellite.norad_id

    @property
    def epoch(self) -> datetime:
        return self.elements.epoch

    @property
    def orbital_period_minutes(self) -> float:
        return 2.0 * np.pi / self.elements.mean_motion

    @property
    def inclination(self) -> float:
        """Inclination [deg]."""
        return float(self.elements.inclination * RAD2DEG)

    @property
    def eccentricity(self) -> float:
        return float(self.elements.eccentricity)

    def minutes_since_epoch(self, at: datetime) -> float:
        return (to_utc(at) - self.epoch).total_seconds() / 60.0

    # ── Per-instant queries ──

    def position(self, at: datetime) -> InertialPosition:
        """ECI position at ``at`` [km].

        Raises
        ------
        PropagationError
            Any failure inside the propagator that is not already a
            :class:`SatelliteKitError` is wrapped in one.
        ParseError
            The propagator rejected the element set on first use.
        """
        minutes = self.minutes_since_epoch(at)
        try:
            r = self.propagator.propagate(self.elements, minutes)
        except SatelliteKitError:
            raise
        except Exception as ex:
            raise PropagationError(
                f"propagation failed for {self.norad_id:05d}: {ex}",
                minutes_after_epoch=minutes,
            ) from ex
        return InertialPosition(x=float(r[0]), y=float(r[1]), z=float(r[2]),
                                timestamp=at)

    def geodetic_position(self, at: datetime,
                          theta: float | None = None) -> GeodeticPosition:
        return eci_to_geodetic(self.position(at), at, theta=theta)

    def topocentric_position(self, at: datetime, observer: ObserverLocation,
                             theta: float | None = None) -> TopocentricPosition:
        return eci_to_topocentric(self.position(at), observer, at, theta=theta)

    # ── Spans ──

    def ground_track(self, start: datetime,
                     duration: float | timedelta,
                     interval: float | timedelta = 60.0) -> list[GeodeticPosition]:
        """Sub-satellite points from ``start`` over ``duration``.

        Samples that fail to propagate are left out.
        """
        return sample_ground_track(self.geodetic_position, start, duration, interval)

    def ground_track_segments(self, start: datetime,
                              duration: float | timedelta,
                              interval: float | timedelta = 60.0,
                              ) -> list[GroundTrackSegment]:
        return segment_ground_track(self.ground_track(start, duration, interval))

    def __repr__(self) -> str:
        return (f"SatelliteTracker({self.name!r}, norad_id={self.norad_id}, "
                f"period={self.orbital_period_minutes:.1f} min)")
