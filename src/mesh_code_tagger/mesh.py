"""
Mesh Code Tagger — Mesh Code Encoder
=====================================
Maps a WGS84 coordinate to a Japanese regional grid ("mesh") code.

The base cell is the standard ~1 km mesh: a 40'×1° primary band, split
8×8 into 5'×7.5' secondary cells, then 10×10 into 30"×45" standard cells.
Each finer level halves the remaining cell along both axes and appends a
single quadrant digit::

    3 | 4        1 = low lat,  low lon     2 = low lat,  high lon
    --+--        3 = high lat, low lon     4 = high lat, high lon
    1 | 2

so a half-level code is the standard code plus one digit, a quarter-level
code the half code plus one digit, and so on.

Group indices are rendered as plain integers without zero padding, which
keeps codes byte-identical to those produced by earlier releases of the
tool.

Usage::

    from src.mesh_code_tagger.mesh import ResolutionLevel, encode

    encode(35.681236, 139.767125)                          # '53394611'
    encode(35.681236, 139.767125, ResolutionLevel.EIGHTH)  # '53394611323'
"""

from __future__ import annotations

import math
from enum import Enum

# (latitude, longitude) split widths in seconds for the half, quarter and
# eighth refinement stages, in that order.
_REFINEMENT_SPLITS: tuple[tuple[float, float], ...] = (
    (15.0, 22.5),
    (7.5, 11.25),
    (3.75, 5.625),
)

# Longitude of the western edge of primary band 0.
_REFERENCE_MERIDIAN = 100


class ResolutionLevel(str, Enum):
    """Mesh resolution, ordered from coarsest to finest."""

    STANDARD = "standard"
    HALF = "half"
    QUARTER = "quarter"
    EIGHTH = "eighth"

    @property
    def refinement_digits(self) -> int:
        """Number of quadrant digits appended to the standard code."""
        return list(ResolutionLevel).index(self)


def encode(
    latitude: float,
    longitude: float,
    level: ResolutionLevel = ResolutionLevel.STANDARD,
) -> str:
    """Return the mesh code of the cell containing (*latitude*, *longitude*).

    Args:
        latitude: WGS84 latitude in decimal degrees.
        longitude: WGS84 longitude in decimal degrees.
        level: Resolution of the returned code.

    Returns:
        Six concatenated group indices ``p u q v r w`` followed by
        ``level.refinement_digits`` quadrant digits.

    Raises:
        ValueError: If either coordinate is NaN or infinite.
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValueError(
            f"Cannot encode non-finite coordinate ({latitude}, {longitude})"
        )
    level = ResolutionLevel(level)

    # Latitude: minutes → 40' primary, 5' secondary, 30" standard.
    p, rem = _split(latitude * 60.0, 40.0)
    q, rem = _split(rem, 5.0)
    r, lat_rem = _split(rem * 60.0, 30.0)

    # Longitude: whole degrees → primary, 7.5' secondary, 45" standard.
    lon_deg = math.floor(longitude)
    u = lon_deg - _REFERENCE_MERIDIAN
    v, rem = _split((longitude - lon_deg) * 60.0, 7.5)
    w, lon_rem = _split(rem * 60.0, 45.0)

    code = "".join(_render(index) for index in (p, u, q, v, r, w))

    for lat_width, lon_width in _REFINEMENT_SPLITS[: level.refinement_digits]:
        s, lat_rem = _split(lat_rem, lat_width)
        x, lon_rem = _split(lon_rem, lon_width)
        code += _render(s * 2 + x + 1)

    return code


def _split(value: float, width: float) -> tuple[int, float]:
    """Return the band index of *value* and its truncated remainder."""
    return math.floor(value / width), math.fmod(value, width)


def _render(index: int) -> str:
    # Indices below zero only occur south of the equator or west of the
    # reference meridian; they render as 0.
    return str(max(index, 0))
