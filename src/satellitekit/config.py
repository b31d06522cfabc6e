"""
satellitekit.config — Tracking Configuration
=============================================

Defaults for the tracking session, overridable from the environment::

    SATELLITEKIT_UPDATE_INTERVAL         tick period [s]            (1.0)
    SATELLITEKIT_GROUND_TRACK_INTERVAL   ground-track step [s]      (60.0)
    SATELLITEKIT_GROUND_TRACK_DURATION   ground-track span [s]      (one orbit)
    SATELLITEKIT_VERIFY_CHECKSUMS        reject bad TLE checksums   (false)
    SATELLITEKIT_OBSERVER_LAT / _LON     observer location [deg]    (San Francisco)
    SATELLITEKIT_OBSERVER_ALT            observer altitude [m]
    SATELLITEKIT_OBSERVER_NAME           observer label
    SATELLITEKIT_LOG_LEVEL               logging level name         (WARNING)
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Mapping

from .topocentric import ObserverLocation, SAN_FRANCISCO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class TrackingConfig:
    """Session defaults.

    Parameters
    ----------
    update_interval : float — periodic tick period [s]
    ground_track_interval : float — step between ground-track samples [s]
    ground_track_duration : float or None — ground-track span [s];
        None means one orbital period of the loaded satellite
    verify_checksums : bool — reject TLE lines with a bad mod-10 checksum
    observer : ObserverLocation — initial observer
    log_level : str — level applied by :func:`configure_logging`
    """
    update_interval: float = 1.0
    ground_track_interval: float = 60.0
    ground_track_duration: float | None = None
    verify_checksums: bool = False
    observer: ObserverLocation = field(default=SAN_FRANCISCO)
    log_level: str = "WARNING"

    def __post_init__(self):
        if not self.update_interval > 0:
            raise ValueError(f"update_interval must be positive, got {self.update_interval}")
        if not self.ground_track_interval > 0:
            raise ValueError(
                f"ground_track_interval must be positive, got {self.ground_track_interval}")
        if self.ground_track_duration is not None and self.ground_track_duration < 0:
            raise ValueError(
                f"ground_track_duration must be >= 0, got {self.ground_track_duration}")
        if logging.getLevelName(self.log_level.upper()) not in (
                logging.DEBUG, logging.INFO, logging.WARNING,
                logging.ERROR, logging.CRITICAL):
            raise ValueError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None,
                 prefix: str = "SATELLITEKIT_") -> "TrackingConfig":
        """Build a config from defaults plus ``{prefix}*`` variables."""
        env = os.environ if environ is None else environ

        def get(name):
            return env.get(prefix + name)

        def number(name, value):
            try:
                return float(value)
            except ValueError:
                raise ValueError(f"{prefix}{name}: not a number: {value!r}") from None

        overrides = {}
        for name, key in (("UPDATE_INTERVAL", "update_interval"),
                          ("GROUND_TRACK_INTERVAL", "ground_track_interval"),
                          ("GROUND_TRACK_DURATION", "ground_track_duration")):
            raw = get(name)
            if raw is not None:
                overrides[key] = number(name, raw)

        raw = get("VERIFY_CHECKSUMS")
        if raw is not None:
            flag = raw.strip().lower()
            if flag in _TRUE:
                overrides["verify_checksums"] = True
            elif flag in _FALSE:
                overrides["verify_checksums"] = False
            else:
                raise ValueError(f"{prefix}VERIFY_CHECKSUMS: not a boolean: {raw!r}")

        raw = get("LOG_LEVEL")
        if raw is not None:
            overrides["log_level"] = raw.strip().upper()

        observer = SAN_FRANCISCO
        obs_fields = {}
        for name, key in (("OBSERVER_LAT", "latitude"),
                          ("OBSERVER_LON", "longitude"),
                          ("OBSERVER_ALT", "altitude_meters")):
            raw = get(name)
            if raw is not None:
                obs_fields[key] = number(name, raw)
        raw = get("OBSERVER_NAME")
        if raw is not None:
            obs_fields["name"] = raw
        if obs_fields:
            if "name" not in obs_fields and ("latitude" in obs_fields
                                             or "longitude" in obs_fields):
                obs_fields["name"] = "Observer"
            observer = replace(observer, **obs_fields)
        if not -90.0 <= observer.latitude <= 90.0:
            raise ValueError(f"{prefix}OBSERVER_LAT out of range: {observer.latitude}")
        overrides["observer"] = observer

        return cls(**overrides)


def configure_logging(level: str | int = "WARNING",
                      stream=None) -> logging.Logger:
    """Attach a stream handler to the ``satellitekit`` logger.

    Calling it again replaces the handler installed by the previous call.
    """
    pkg_logger = logging.getLogger("satellitekit")
    for handler in list(pkg_logger.handlers):
        if getattr(handler, "_satellitekit_handler", False):
            pkg_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler._satellitekit_handler = True
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level.upper() if isinstance(level, str) else level)
    return pkg_logger
