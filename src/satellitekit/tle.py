"""
satellitekit.tle — Two-Line Element Set Parser
================================================

Parses NORAD Two-Line Element sets into an immutable :class:`TLE` record
holding the mean elements, epoch and a few derived quantities.  The raw
lines are kept on the record because the SGP4 propagator re-reads them.

Structural problems (wrong line numbers, short lines, unparseable numeric
columns, mismatched catalog numbers, unphysical elements) raise
:class:`~satellitekit.exceptions.ParseError`.  Checksum verification is
optional since hand-edited element sets often carry placeholder checksums.

Reference
---------
Hoots, F.R. & Roehrich, R.L. (1980). SPACETRACK Report No. 3.
CelesTrak, "NORAD Two-Line Element Set Format".
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np

from .exceptions import ParseError
from .utils import MINUTES_PER_DAY, julian_date

logger = logging.getLogger(__name__)

MIN_LINE_LENGTH = 69


@dataclass(frozen=True)
class TLE:
    """Parsed Two-Line Element set with derived quantities."""
    # ── Raw TLE fields ──
    name: str = ""
    norad_id: int = 0
    classification: str = "U"
    intl_designator: str = ""
    epoch_year: int = 2000
    epoch_day: float = 1.0
    ndot: float = 0.0           # 1st derivative of mean motion [rev/day²]
    nddot: float = 0.0          # 2nd derivative of mean motion [rev/day³]
    bstar: float = 0.0          # B* drag term [1/R_earth]
    element_set: int = 0
    inclination: float = 0.0    # [rad]
    raan: float = 0.0           # [rad]
    eccentricity: float = 0.0
    argp: float = 0.0           # [rad]
    mean_anomaly: float = 0.0   # [rad]
    mean_motion: float = 0.0    # [rad/min]
    rev_number: int = 0
    line1: str = ""
    line2: str = ""

    @property
    def epoch(self) -> datetime:
        """TLE epoch as an aware UTC datetime."""
        jan1 = datetime(self.epoch_year, 1, 1, tzinfo=timezone.utc)
        return jan1 + timedelta(days=self.epoch_day - 1.0)

    @property
    def epoch_jd(self) -> float:
        return julian_date(self.epoch)

    @property
    def period(self) -> float:
        """Full orbit period in minutes"""
        return 2.0 * np.pi / self.mean_motion


# ════════════════════════════════════════════════════════════════════════════
#  Field Decoding
# ════════════════════════════════════════════════════════════════════════════

def _parse_exp_field(field: str) -> float:
    """Decode TLE's assumed-decimal exponent notation.

    ``±NNNNN±E`` means ±0.NNNNN × 10^±E, e.g. `` 10270-3`` → 1.027e-4.
    """
    s = field.strip()
    if not s:
        return 0.0
    sign = -1.0 if s[0] == "-" else 1.0
    s = s.lstrip("+-").replace(" ", "0")
    mantissa, exponent = s[:5], s[5:]
    value = float("0." + mantissa)
    if exponent:
        value *= 10.0 ** int(exponent)
    return sign * value


def _field(line: str, start: int, stop: int, label: str, kind=float):
    raw = line[start:stop].strip()
    try:
        return kind(raw)
    except ValueError:
        raise ParseError(f"{label}: cannot read {raw!r} "
                         f"(columns {start + 1}-{stop})") from None


# ════════════════════════════════════════════════════════════════════════════
#  Parsing
# ════════════════════════════════════════════════════════════════════════════

def parse_tle(*lines, verify_checksums: bool = False) -> TLE:
    """Parse a three-line TLE (name + line 1 + line 2).

    Parameters
    ----------
    lines: TLE lines, either (name, line1, line2) or (line1, line2)
    verify_checksums : bool — reject lines whose mod-10 checksum is wrong

    Returns
    -------
    tle : TLE dataclass

    Raises
    ------
    ParseError
        If the element set is malformed.
    """
    line0 = ''
    if len(lines) == 3:
        line0, line1, line2 = lines
    elif len(lines) == 2:
        line1, line2 = lines
    else:
        raise ParseError(f"expected 2 or 3 TLE lines, got {len(lines)}")

    line0 = (line0 or '').strip()
    line1 = (line1 or '').rstrip()
    line2 = (line2 or '').rstrip()

    if not line1.startswith("1 "):
        raise ParseError("line1 does not start with '1 '")
    if not line2.startswith("2 "):
        raise ParseError("line2 does not start with '2 '")
    for i, line in ((1, line1), (2, line2)):
        if len(line) < MIN_LINE_LENGTH:
            raise ParseError(f"line{i} has {len(line)} characters, "
                             f"expected at least {MIN_LINE_LENGTH}")
        if verify_checksums and not verify_checksum(line):
            raise ParseError(f"line{i} checksum: expected {tle_checksum(line)}, "
                             f"got {line[68]}")

    # ── Line 1 ──
    norad_id = _field(line1, 2, 7, "catalog number", int)
    yr = _field(line1, 18, 20, "epoch year", int)
    epoch_day = _field(line1, 20, 32, "epoch day")
    ndot = _field(line1, 33, 43, "mean motion derivative")
    try:
        nddot = _parse_exp_field(line1[44:52])
        bstar = _parse_exp_field(line1[53:61])
    except ValueError:
        raise ParseError("malformed exponent field in line1") from None
    element_set = _field(line1, 64, 68, "element set", int) if line1[64:68].strip() else 0

    # ── Line 2 ──
    norad_id2 = _field(line2, 2, 7, "catalog number", int)
    if norad_id2 != norad_id:
        raise ParseError(f"NORAD ID mismatch: line1={norad_id}, line2={norad_id2}")

    inclination = _field(line2, 8, 16, "inclination")
    raan = _field(line2, 17, 25, "right ascension")
    eccentricity = _field(line2, 26, 33, "eccentricity", lambda s: float("0." + s))
    argp = _field(line2, 34, 42, "argument of perigee")
    mean_anomaly = _field(line2, 43, 51, "mean anomaly")
    mm_rev_day = _field(line2, 52, 63, "mean motion")
    rev_number = _field(line2, 63, 68, "revolution number", int) if line2[63:68].strip() else 0

    if not 0.0 <= eccentricity < 1.0:
        raise ParseError(f"eccentricity {eccentricity} outside [0, 1)")
    if mm_rev_day <= 0.0:
        raise ParseError(f"mean motion must be positive, got {mm_rev_day}")

    tle = TLE(
        name=line0,
        norad_id=norad_id,
        classification=line1[7],
        intl_designator=line1[9:17].strip(),
        epoch_year=yr + (1900 if yr >= 57 else 2000),
        epoch_day=epoch_day,
        ndot=ndot,
        nddot=nddot,
        bstar=bstar,
        element_set=element_set,
        inclination=np.deg2rad(inclination),
        raan=np.deg2rad(raan),
        eccentricity=eccentricity,
        argp=np.deg2rad(argp),
        mean_anomaly=np.deg2rad(mean_anomaly),
        # [rev/day] → [rad/min]
        mean_motion=mm_rev_day * 2.0 * np.pi / MINUTES_PER_DAY,
        rev_number=rev_number,
        line1=line1,
        line2=line2,
    )
    logger.debug("parsed TLE %05d %r epoch %s", tle.norad_id, tle.name, tle.epoch)
    return tle


# ════════════════════════════════════════════════════════════════════════════
#  TLE Checksum
# ════════════════════════════════════════════════════════════════════════════

def tle_checksum(line: str) -> int:
    """Compute the modulo-10 checksum for a TLE line.

    Each digit contributes its face value, '-' counts as 1,
    all other characters count as 0.  The result is sum mod 10.

    Parameters
    ----------
    line : str — a TLE line (characters 0..67; column 69 is the checksum)

    Returns
    -------
    checksum : int — single digit 0-9
    """
    s = 0
    for ch in line[:68]:
        if ch.isdigit():
            s += int(ch)
        elif ch == '-':
            s += 1
    return s % 10


def verify_checksum(line: str) -> bool:
    """Verify the modulo-10 checksum of a TLE line.

    Parameters
    ----------
    line : str — a complete TLE line (69 characters with checksum at column 69)

    Returns
    -------
    valid : bool — True if the last digit matches the computed checksum
    """
    if len(line) < MIN_LINE_LENGTH or not line[68].isdigit():
        return False
    return tle_checksum(line) == int(line[68])
