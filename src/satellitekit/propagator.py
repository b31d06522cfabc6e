"""
satellitekit.propagator — Orbital Propagator Interface
=======================================================

The frame and session code only needs ``propagate(elements, minutes)``
returning an inertial position.  :class:`SGP4Propagator` provides it on
top of the ``sgp4`` library (SGP4 near-Earth / SDP4 deep-space, selected
by the library from the mean motion).  Any object with the same method
can be substituted, e.g. a canned-ephemeris fake in tests.
"""

import logging
from typing import Protocol

import numpy as np
from numpy.typing import NDArray
from sgp4.api import Satrec

from .exceptions import ParseError, PropagationError
from .tle import TLE

logger = logging.getLogger(__name__)


# SGP4 error code meanings
SGP4_ERROR_CODES = {
    0: "No error",
    1: "Mean eccentricity < 0.0 or > 1.0",
    2: "Mean motion < 0.0",
    3: "Perturbed eccentricity < 0.0 or > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Epoch elements are sub-orbital",
    6: "Satellite has decayed",
}


class Propagator(Protocol):
    """Anything that maps (elements, minutes after epoch) → ECI [km]."""

    def propagate(self, elements: TLE, minutes_after_epoch: float) -> NDArray:
        ...


class SGP4Propagator:
    """SGP4/SDP4 propagation through ``sgp4.api.Satrec``.

    One ``Satrec`` is initialized per distinct element set and reused for
    every later call with the same lines.
    """

    def __init__(self):
        self._satrecs: dict[tuple[str, str], Satrec] = {}

    def _satrec(self, elements: TLE) -> Satrec:
        key = (elements.line1, elements.line2)
        sat = self._satrecs.get(key)
        if sat is None:
            try:
                sat = Satrec.twoline2rv(elements.line1, elements.line2)
            except ValueError as ex:
                raise ParseError(f"sgp4 rejected element set "
                                 f"{elements.norad_id:05d}: {ex}") from ex
            self._satrecs[key] = sat
            logger.debug("initialized SGP4 for %05d", elements.norad_id)
        return sat

    def propagate(self, elements: TLE, minutes_after_epoch: float) -> NDArray:
        """Position in the TEME inertial frame [km].

        Raises
        ------
        PropagationError
            On any non-zero SGP4 error code or a non-finite result.
        """
        sat = self._satrec(elements)
        error, r, _v = sat.sgp4_tsince(float(minutes_after_epoch))
        if error != 0:
            reason = SGP4_ERROR_CODES.get(error, "Unknown SGP4 error")
            raise PropagationError(
                f"SGP4 propagation failed for {elements.norad_id:05d} at "
                f"{minutes_after_epoch:+.3f} min: {reason} (code {error})",
                error_code=error,
                minutes_after_epoch=minutes_after_epoch,
            )
        r = np.asarray(r, dtype=np.float64)
        if not np.all(np.isfinite(r)):
            raise PropagationError(
                f"SGP4 returned a non-finite position for {elements.norad_id:05d}",
                minutes_after_epoch=minutes_after_epoch,
            )
        return r
