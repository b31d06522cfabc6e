"""
satellitekit.catalog — Satellite Descriptors
=============================================

A :class:`TrackedSatellite` names a satellite and carries its raw element
set; it is what a tracking session loads.  A handful of well-known
satellites ship with the package so a session has something to track
before any element sets are fetched.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TrackedSatellite:
    """Display name, NORAD catalog number and three-line element set."""
    name: str
    norad_id: int
    line0: str
    line1: str
    line2: str

    @property
    def lines(self) -> tuple[str, str, str]:
        return self.line0, self.line1, self.line2


USA_247 = TrackedSatellite(
    name="USA-247 (NROL-39)",
    norad_id=39462,
    line0="USA 247 (NROL-39)",
    line1="1 39462U 13072A   26041.16551075  .00000000  00000-0  00000-0 0    03",
    line2="2 39462 122.9989 351.0180 0003790 117.2045 242.8260 13.41447760    04",
)

ISS = TrackedSatellite(
    name="ISS (ZARYA)",
    norad_id=25544,
    line0="ISS (ZARYA)",
    line1="1 25544U 98067A   24056.54791667  .00016717  00000-0  30000-3 0  9993",
    line2="2 25544  51.6400 247.4627 0006703  55.0000 305.1234 15.49815432440000",
)

DEFAULT_SATELLITES: tuple[TrackedSatellite, ...] = (
    USA_247,
    ISS,
    TrackedSatellite(
        name="Hubble Space Telescope",
        norad_id=20580,
        line0="HST",
        line1="1 20580U 90037B   24056.50000000  .00001200  00000-0  60000-4 0  9990",
        line2="2 20580  28.4700 120.0000 0002500  90.0000 270.0000 15.09000000400000",
    ),
    TrackedSatellite(
        name="NOAA-19",
        norad_id=33591,
        line0="NOAA 19",
        line1="1 33591U 09005A   24056.50000000  .00000100  00000-0  80000-4 0  9990",
        line2="2 33591  99.1900  60.0000 0014000  90.0000 270.0000 14.12500000700000",
    ),
    TrackedSatellite(
        name="Terra (EOS AM-1)",
        norad_id=25994,
        line0="TERRA",
        line1="1 25994U 99068A   24056.50000000  .00000100  00000-0  50000-4 0  9990",
        line2="2 25994  98.2100  90.0000 0001200 100.0000 260.0000 14.57100000100000",
    ),
    TrackedSatellite(
        name="Landsat 9",
        norad_id=49260,
        line0="LANDSAT 9",
        line1="1 49260U 21088A   24056.50000000  .00000100  00000-0  40000-4 0  9990",
        line2="2 49260  98.2200  45.0000 0001500  85.0000 275.0000 14.57200000100000",
    ),
    TrackedSatellite(
        name="GOES-16",
        norad_id=41866,
        line0="GOES 16",
        line1="1 41866U 16071A   24056.50000000  .00000010  00000-0  00000-0 0  9990",
        line2="2 41866   0.0400 270.0000 0001000  90.0000 270.0000  1.00270000500000",
    ),
    TrackedSatellite(
        name="Starlink-1007",
        norad_id=44713,
        line0="STARLINK-1007",
        line1="1 44713U 19074A   24056.50000000  .00010000  00000-0  70000-3 0  9990",
        line2="2 44713  53.0000 200.0000 0001500  80.0000 280.0000 15.06000000200000",
    ),
)


def find_satellite(norad_id: int) -> TrackedSatellite | None:
    """Bundled satellite with the given catalog number, if any."""
    for sat in DEFAULT_SATELLITES:
        if sat.norad_id == norad_id:
            return sat
    return None
