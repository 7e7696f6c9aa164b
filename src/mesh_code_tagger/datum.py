"""
Mesh Code Tagger — Datum Transformer
=====================================
Normalises input coordinates to WGS84, the frame the mesh encoder expects.

Architecture:
    ``DatumConverter`` is an abstract strategy for the geodetic engine — it
    speaks (longitude, latitude) order only.  ``PyprojConverter`` is the
    production implementation.  ``DatumTransformer`` owns one converter and
    decides, per :class:`Datum`, whether to call it at all.

Classes:
    Datum               Closed set of supported input datums.
    Coordinate          Immutable (latitude, longitude) pair.
    DatumConverter      Abstract (lon, lat) → (lon, lat) converter.
    PyprojConverter     Tokyo Datum → WGS84 via pyproj.
    DatumTransformer    Datum-aware front end used by the pipeline.

Usage::

    from src.mesh_code_tagger.datum import Coordinate, Datum, DatumTransformer

    transformer = DatumTransformer.for_datum(Datum.LEGACY)
    transformer.to_global(Coordinate(35.6895, 139.6917), Datum.LEGACY)
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import pyproj
from pyproj.exceptions import ProjError

from shared.python.exceptions import CRSError, DatumTransformError
from shared.python.validators import Validators

logger = logging.getLogger("meshtagger.datum")


# ---------------------------------------------------------------------------
# Enums & data classes
# ---------------------------------------------------------------------------


class Datum(str, Enum):
    """Geodetic datum of the input coordinates."""

    GLOBAL = "global"
    LEGACY = "legacy"

    @property
    def epsg(self) -> str:
        """EPSG identifier of the datum's geographic CRS."""
        return "EPSG:4326" if self is Datum.GLOBAL else "EPSG:4301"


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


# ---------------------------------------------------------------------------
# Converter strategies
# ---------------------------------------------------------------------------


class DatumConverter(ABC):
    """Abstract strategy wrapping an external geodetic conversion engine.

    Implementations must be safe to call repeatedly from a single thread
    and must not mutate shared state between calls.
    """

    @abstractmethod
    def convert(self, longitude: float, latitude: float) -> tuple[float, float]:
        """Convert one point, returning ``(longitude, latitude)``.

        Raises:
            DatumTransformError: If the engine cannot produce a result.
        """


class PyprojConverter(DatumConverter):
    """Tokyo Datum (EPSG:4301) → WGS84 (EPSG:4326) converter backed by pyproj.

    The ``pyproj.Transformer`` is built once, here, and reused for every
    call.  ``always_xy=True`` pins the axis order to (longitude, latitude)
    regardless of the CRS definitions.

    Args:
        from_crs: Source CRS identifier.
        to_crs: Target CRS identifier.

    Raises:
        CRSError: If either CRS cannot be parsed, or PROJ cannot build a
            transformation between them.
    """

    def __init__(
        self,
        from_crs: str = Datum.LEGACY.epsg,
        to_crs: str = Datum.GLOBAL.epsg,
    ) -> None:
        Validators.assert_crs_valid(from_crs)
        Validators.assert_crs_valid(to_crs)
        self.from_crs = from_crs
        self.to_crs = to_crs
        try:
            self._transformer = pyproj.Transformer.from_crs(
                from_crs, to_crs, always_xy=True
            )
        except ProjError as exc:
            raise CRSError(f"{from_crs} -> {to_crs}") from exc
        logger.debug("Using PROJ operation: %s", self._transformer.description)

    def convert(self, longitude: float, latitude: float) -> tuple[float, float]:
        try:
            new_lon, new_lat = self._transformer.transform(
                longitude, latitude, errcheck=True
            )
        except ProjError as exc:
            raise DatumTransformError(longitude, latitude, str(exc)) from exc

        if not (math.isfinite(new_lon) and math.isfinite(new_lat)):
            raise DatumTransformError(
                longitude, latitude, "PROJ returned a non-finite coordinate"
            )
        return new_lon, new_lat

    def __repr__(self) -> str:
        return f"PyprojConverter({self.from_crs!r} -> {self.to_crs!r})"


# ---------------------------------------------------------------------------
# Front end
# ---------------------------------------------------------------------------


class DatumTransformer:
    """Bring coordinates into the global (WGS84) frame.

    ``Datum.GLOBAL`` input passes through untouched.  ``Datum.LEGACY`` input
    is sent through the configured :class:`DatumConverter`.

    Args:
        converter: Converter used for legacy-datum input.  ``None`` is
                   fine for runs that only ever see global coordinates.
    """

    def __init__(self, converter: DatumConverter | None = None) -> None:
        self.converter = converter

    @classmethod
    def for_datum(cls, datum: Datum) -> DatumTransformer:
        """Build a transformer for a run whose input is in *datum*.

        The pyproj converter is only constructed when it will be used.

        Raises:
            CRSError: If the pyproj transformation cannot be built.
        """
        if Datum(datum) is Datum.LEGACY:
            return cls(PyprojConverter())
        return cls()

    def transform(
        self, longitude: float, latitude: float, datum: Datum
    ) -> tuple[float, float]:
        """Return ``(longitude, latitude)`` expressed in the global datum.

        Raises:
            DatumTransformError: If *datum* is legacy and no converter is
                configured, or the converter fails.
        """
        if Datum(datum) is Datum.GLOBAL:
            return longitude, latitude

        if self.converter is None:
            raise DatumTransformError(
                longitude, latitude, "no converter configured for legacy datum"
            )
        return self.converter.convert(longitude, latitude)

    def to_global(self, coordinate: Coordinate, datum: Datum) -> Coordinate:
        """Convenience wrapper over :meth:`transform` for a :class:`Coordinate`."""
        longitude, latitude = self.transform(
            coordinate.longitude, coordinate.latitude, datum
        )
        return Coordinate(latitude=latitude, longitude=longitude)
