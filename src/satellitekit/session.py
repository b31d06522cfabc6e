"""
satellitekit.session — Tracking Session
=========================================

A :class:`TrackingSession` owns one loaded satellite and one observer and
turns on-demand or periodic computation into a stream of
:class:`TrackingUpdate` values delivered to subscribers.

State Machine
-------------
::

    UNINITIALIZED ──load──▶ LOADED ──start_tracking──▶ TRACKING
                                         ▲                 │
                                         └─start_tracking──┤
                               IDLE ◀────stop_tracking─────┘

A failed ``load`` leaves the session exactly as it was.

Periodic Ticks
--------------
``start_tracking`` runs a single daemon thread that calls the same
computation as ``compute_now`` at a fixed rate.  The first tick fires one
interval after the start; ticks never overlap (an overrunning tick skips
the slots it missed).  Each schedule carries a generation number;
``stop_tracking`` bumps it under the session lock, so a tick that was
already running when tracking stopped has its result discarded and no
update is delivered after ``stop_tracking`` returns.

A tick that fails is reported through ``on_error`` and the schedule
carries on.

Ordering
--------
Every computation (tick, ``compute_now``, ``set_observer`` refresh) takes
a request number when it snapshots the tracker and observer.  A result is
published only if no later request has been published already and the
observer it was computed for is still current, so a slow tick can never
overwrite a newer position.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from .catalog import TrackedSatellite
from .config import TrackingConfig
from .exceptions import ParseError, SatelliteKitError, SessionStateError
from .frames import GeodeticPosition, eci_to_geodetic
from .ground_track import GroundTrackSegment
from .propagator import Propagator, SGP4Propagator
from .topocentric import ObserverLocation, TopocentricPosition, eci_to_topocentric
from .tracker import SatelliteTracker
from .utils import gmst, utc_now

logger = logging.getLogger(__name__)

_JOIN_TIMEOUT = 5.0


class SessionState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"
    TRACKING = "tracking"
    IDLE = "idle"


@dataclass(frozen=True)
class TrackingUpdate:
    """Positions computed for one instant."""
    geodetic: GeodeticPosition
    topocentric: TopocentricPosition

    @property
    def timestamp(self) -> datetime:
        return self.geodetic.timestamp


class TrackingSession:
    """One tracked satellite seen from one observer.

    Parameters
    ----------
    config : TrackingConfig — intervals, observer, checksum policy
    propagator : Propagator — shared by every satellite the session loads;
        defaults to :class:`SGP4Propagator`
    clock : callable — returns the current UTC datetime
    """

    def __init__(self, config: TrackingConfig | None = None,
                 propagator: Propagator | None = None,
                 clock: Callable[[], datetime] | None = None):
        self.config = config if config is not None else TrackingConfig()
        self._propagator = propagator if propagator is not None else SGP4Propagator()
        self._clock = clock if clock is not None else utc_now

        self._lock = threading.RLock()
        self._state = SessionState.UNINITIALIZED
        self._tracker: SatelliteTracker | None = None
        self._observer = self.config.observer
        self._current_position: GeodeticPosition | None = None
        self._topocentric_position: TopocentricPosition | None = None
        self._last_error: Exception | None = None

        self._subscribers: list[Callable[[TrackingUpdate], None]] = []
        self.on_error: Callable[[Exception], None] | None = None

        self._generation = 0
        self._sequence = 0
        self._published_sequence = 0
        self._stop_event: threading.Event | None = None
        self._worker: threading.Thread | None = None

    # ════════════════════════════════════════════════════════════════════
    #  Read-only state
    # ════════════════════════════════════════════════════════════════════

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state is SessionState.TRACKING

    @property
    def tracker(self) -> SatelliteTracker | None:
        return self._tracker

    @property
    def norad_id(self) -> int | None:
        """Session identity: catalog number of the loaded satellite."""
        return self._tracker.norad_id if self._tracker else None

    @property
    def satellite_name(self) -> str | None:
        return self._tracker.name if self._tracker else None

    @property
    def observer(self) -> ObserverLocation:
        return self._observer

    @property
    def current_position(self) -> GeodeticPosition | None:
        return self._current_position

    @property
    def topocentric_position(self) -> TopocentricPosition | None:
        return self._topocentric_position

    @property
    def is_above_horizon(self) -> bool:
        topo = self._topocentric_position
        return topo is not None and topo.is_visible

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def orbital_period_minutes(self) -> float:
        return self._require_tracker().orbital_period_minutes

    @property
    def inclination(self) -> float:
        """Inclination of the loaded satellite [deg]."""
        return self._require_tracker().inclination

    @property
    def eccentricity(self) -> float:
        return self._require_tracker().eccentricity

    def _require_tracker(self) -> SatelliteTracker:
        tracker = self._tracker
        if tracker is None:
            raise SessionStateError("no satellite loaded")
        return tracker

    # ════════════════════════════════════════════════════════════════════
    #  Subscribers
    # ════════════════════════════════════════════════════════════════════

    def subscribe(self, callback: Callable[[TrackingUpdate], None]) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[TrackingUpdate], None]) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    # ════════════════════════════════════════════════════════════════════
    #  Loading
    # ════════════════════════════════════════════════════════════════════

    def load(self, satellite: TrackedSatellite) -> SatelliteTracker:
        """Parse and activate a satellite.

        Raises
        ------
        ParseError
            The element set is malformed; the session is left unchanged
            apart from ``last_error``.
        """
        try:
            tracker = SatelliteTracker(satellite, propagator=self._propagator,
                                       verify_checksums=self.config.verify_checksums)
        except ParseError as ex:
            logger.warning("failed to load %s (%s): %s",
                           satellite.name, satellite.norad_id, ex)
            with self._lock:
                self._last_error = ex
            raise

        with self._lock:
            self._tracker = tracker
            self._current_position = None
            self._topocentric_position = None
            self._last_error = None
            if self._state is not SessionState.TRACKING:
                self._state = SessionState.LOADED
        logger.info("loaded %s (%05d): period %.1f min, inclination %.2f deg",
                    tracker.name, tracker.norad_id,
                    tracker.orbital_period_minutes, tracker.inclination)
        return tracker

    # ════════════════════════════════════════════════════════════════════
    #  Computation
    # ════════════════════════════════════════════════════════════════════

    def _claim(self) -> tuple[SatelliteTracker, ObserverLocation, int]:
        """Snapshot tracker and observer and number the request (lock held)."""
        tracker = self._require_tracker()
        self._sequence += 1
        return tracker, self._observer, self._sequence

    def _compute(self, tracker: SatelliteTracker, observer: ObserverLocation,
                 at: datetime) -> TrackingUpdate:
        theta = gmst(at)
        try:
            position = tracker.position(at)
            update = TrackingUpdate(
                geodetic=eci_to_geodetic(position, at, theta=theta),
                topocentric=eci_to_topocentric(position, observer, at, theta=theta),
            )
        except SatelliteKitError as ex:
            with self._lock:
                if self._tracker is tracker:
                    self._last_error = ex
            raise
        logger.debug("%05d at %s: lat %.4f lon %.4f alt %.1f km, az %.1f el %.1f",
                     tracker.norad_id, at,
                     update.geodetic.latitude, update.geodetic.longitude,
                     update.geodetic.altitude, update.topocentric.azimuth,
                     update.topocentric.elevation)
        return update

    def _publish(self, update: TrackingUpdate, tracker: SatelliteTracker,
                 observer: ObserverLocation, sequence: int,
                 generation: int | None) -> bool:
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            if (self._tracker is not tracker or self._observer != observer
                    or sequence < self._published_sequence):
                logger.debug("discarding stale update #%d for %05d at %s",
                             sequence, tracker.norad_id, update.timestamp)
                return False
            self._published_sequence = sequence
            self._current_position = update.geodetic
            self._topocentric_position = update.topocentric
            self._last_error = None
            for callback in list(self._subscribers):
                try:
                    callback(update)
                except Exception:
                    logger.exception("tracking subscriber %r failed", callback)
        return True

    def compute_now(self, at: datetime | None = None) -> TrackingUpdate:
        """Compute and publish positions for ``at`` (default: now).

        The update is returned even when a later request has already
        published, in which case it is not published.

        Raises
        ------
        SessionStateError
            No satellite has been loaded.
        PropagationError, DegenerateGeometryError, ParseError
            The previous positions are kept and ``last_error`` is set.
        """
        with self._lock:
            tracker, observer, sequence = self._claim()
        at = self._clock() if at is None else at
        update = self._compute(tracker, observer, at)
        self._publish(update, tracker, observer, sequence, generation=None)
        return update

    def set_observer(self, observer: ObserverLocation) -> None:
        """Replace the observer and refresh positions if a satellite is loaded."""
        with self._lock:
            self._observer = observer
            loaded = self._tracker is not None
        if loaded:
            try:
                self.compute_now()
            except SatelliteKitError as ex:
                logger.warning("position refresh for new observer %r failed: %s",
                               observer.name, ex)

    def ground_track(self, start: datetime | None = None,
                     duration: float | timedelta | None = None,
                     interval: float | timedelta | None = None,
                     ) -> list[GroundTrackSegment]:
        """Antimeridian-split ground track of the loaded satellite.

        Defaults: from now, over ``config.ground_track_duration`` (one
        orbital period when unset), every ``config.ground_track_interval``.
        """
        tracker = self._require_tracker()
        start = self._clock() if start is None else start
        if duration is None:
            duration = self.config.ground_track_duration
        if duration is None:
            duration = tracker.orbital_period_minutes * 60.0
        if interval is None:
            interval = self.config.ground_track_interval
        return tracker.ground_track_segments(start, duration, interval)

    # ════════════════════════════════════════════════════════════════════
    #  Periodic tracking
    # ════════════════════════════════════════════════════════════════════

    def start_tracking(self, interval_seconds: float | None = None) -> None:
        """Begin periodic ``compute_now`` ticks.  No-op while tracking.

        Raises
        ------
        SessionStateError
            No satellite has been loaded.
        """
        interval = self.config.update_interval if interval_seconds is None else interval_seconds
        if not interval > 0:
            raise ValueError(f"interval must be positive, got {interval}")

        with self._lock:
            tracker = self._require_tracker()
            if self._state is SessionState.TRACKING:
                return
            self._generation += 1
            stop_event = threading.Event()
            worker = threading.Thread(
                target=self._run,
                args=(self._generation, stop_event, float(interval)),
                name=f"satellitekit-tick-{tracker.norad_id}",
                daemon=True,
            )
            self._stop_event = stop_event
            self._worker = worker
            self._state = SessionState.TRACKING
            worker.start()
        logger.info("tracking %05d every %.3f s", tracker.norad_id, interval)

    def stop_tracking(self) -> None:
        """Cancel periodic ticks.  Idempotent."""
        with self._lock:
            if self._state is not SessionState.TRACKING:
                return
            self._generation += 1
            self._stop_event.set()
            worker = self._worker
            self._worker = None
            self._stop_event = None
            self._state = SessionState.IDLE
        if worker is not None and worker is not threading.current_thread():
            worker.join(_JOIN_TIMEOUT)
        logger.info("tracking stopped")

    def _run(self, generation: int, stop_event: threading.Event,
             interval: float) -> None:
        next_tick = time.monotonic() + interval
        while not stop_event.wait(max(0.0, next_tick - time.monotonic())):
            self._tick(generation)
            next_tick += interval
            now = time.monotonic()
            if now > next_tick:
                next_tick += (int((now - next_tick) // interval) + 1) * interval

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            tracker, observer, sequence = self._claim()
        at = None
        try:
            at = self._clock()
            update = self._compute(tracker, observer, at)
        except SatelliteKitError as ex:
            logger.warning("tick for %05d at %s failed: %s", tracker.norad_id, at, ex)
            self._report_error(ex, generation)
            return
        except Exception as ex:
            logger.exception("tick for %05d at %s raised", tracker.norad_id, at)
            with self._lock:
                if self._tracker is tracker:
                    self._last_error = ex
            self._report_error(ex, generation)
            return
        self._publish(update, tracker, observer, sequence, generation)

    def _report_error(self, ex: Exception, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self.on_error is None:
                return
            try:
                self.on_error(ex)
            except Exception:
                logger.exception("tracking error handler failed")

    # ── Context manager ──

    def close(self) -> None:
        self.stop_tracking()

    def __enter__(self) -> "TrackingSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
