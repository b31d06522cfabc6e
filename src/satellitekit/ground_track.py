"""
satellitekit.ground_track — Ground Track Sampling & Segmentation
==================================================================

Sub-satellite points sampled at a fixed step over a time span, and the
split of that point sequence into polylines that never cross the
antimeridian (±180° longitude).
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from datetime import datetime, timedelta

from .exceptions import PropagationError
from .frames import GeodeticPosition

logger = logging.getLogger(__name__)

ANTIMERIDIAN_JUMP = 180.0

GroundTrackSegment = list[GeodeticPosition]


def _as_timedelta(value: float | timedelta) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=float(value))


# ════════════════════════════════════════════════════════════════════════════
#  Sampling
# ════════════════════════════════════════════════════════════════════════════

def iter_ground_track(
    position_fn: Callable[[datetime], GeodeticPosition],
    start: datetime,
    duration: float | timedelta,
    interval: float | timedelta = 60.0,
) -> Iterator[GeodeticPosition]:
    """Lazily sample ``position_fn`` at ``start + k·interval``.

    Sampling continues while the sample time is ``<= start + duration``.
    A sample whose propagation fails is skipped, so the sequence may be
    shorter than the nominal count.

    Parameters
    ----------
    position_fn : callable — instant → GeodeticPosition, may raise
        PropagationError
    start : datetime — first sample time
    duration : float [s] or timedelta — span to cover (inclusive)
    interval : float [s] or timedelta — step between samples, > 0
    """
    duration = _as_timedelta(duration)
    interval = _as_timedelta(interval)
    if interval <= timedelta(0):
        raise ValueError(f"interval must be positive, got {interval}")

    end = start + duration
    k = 0
    t = start
    while t <= end:
        try:
            yield position_fn(t)
        except PropagationError as ex:
            logger.debug("dropping ground track sample at %s: %s", t, ex)
        k += 1
        t = start + k * interval


def sample_ground_track(
    position_fn: Callable[[datetime], GeodeticPosition],
    start: datetime,
    duration: float | timedelta,
    interval: float | timedelta = 60.0,
) -> list[GeodeticPosition]:
    """Materialized :func:`iter_ground_track`."""
    return list(iter_ground_track(position_fn, start, duration, interval))


# ════════════════════════════════════════════════════════════════════════════
#  Antimeridian Segmentation
# ════════════════════════════════════════════════════════════════════════════

def segment_ground_track(
    track: Sequence[GeodeticPosition],
) -> list[GroundTrackSegment]:
    """Split a ground track wherever consecutive longitudes jump > 180°.

    A jump of exactly 180° stays in the current segment.  The segments
    partition ``track``: concatenated in order they reproduce it, and none
    is empty.
    """
    segments: list[GroundTrackSegment] = []
    current: GroundTrackSegment = []

    for point in track:
        if current and abs(point.longitude - current[-1].longitude) > ANTIMERIDIAN_JUMP:
            segments.append(current)
            current = []
        current.append(point)

    if current:
        segments.append(current)
    return segments
