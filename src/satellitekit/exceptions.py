"""
satellitekit.exceptions — Error Taxonomy
=========================================

Every failure raised by the package derives from :class:`SatelliteKitError`,
so callers can guard a tracking loop with a single ``except`` clause.
"""


class SatelliteKitError(Exception):
    """Base class for all satellitekit errors."""


class ParseError(SatelliteKitError, ValueError):
    """Malformed two-line element input."""


class PropagationError(SatelliteKitError):
    """The orbital propagator could not produce a state for a given time.

    Parameters
    ----------
    message : str
    error_code : int — propagator error code (0 when not applicable)
    minutes_after_epoch : float or None — requested time offset [min]
    """

    def __init__(self, message: str, error_code: int = 0,
                 minutes_after_epoch: float | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.minutes_after_epoch = minutes_after_epoch


class DegenerateGeometryError(SatelliteKitError, ArithmeticError):
    """Observer/satellite geometry has no defined azimuth or elevation."""


class SessionStateError(SatelliteKitError, RuntimeError):
    """Operation is not valid in the session's current state."""
