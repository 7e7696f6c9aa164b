"""
Tests — Datum Transformer
==========================
Unit tests for :class:`~src.mesh_code_tagger.datum.DatumTransformer` and
:class:`~src.mesh_code_tagger.datum.PyprojConverter`.

Axis-order and failure handling are tested with in-memory fake converters;
the pyproj tests use the real Tokyo Datum → WGS84 transformation.
"""

from __future__ import annotations

import pytest

from src.mesh_code_tagger.datum import (
    Coordinate,
    Datum,
    DatumConverter,
    DatumTransformer,
    PyprojConverter,
)
from shared.python.exceptions import CRSError, DatumTransformError


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class RecordingConverter(DatumConverter):
    """Shift lon by +1 and lat by +2, remembering every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, float]] = []

    def convert(self, longitude: float, latitude: float) -> tuple[float, float]:
        self.calls.append((longitude, latitude))
        return longitude + 1.0, latitude + 2.0


class FailingConverter(DatumConverter):
    def convert(self, longitude: float, latitude: float) -> tuple[float, float]:
        raise DatumTransformError(longitude, latitude, "grid file missing")


# ---------------------------------------------------------------------------
# DatumTransformer
# ---------------------------------------------------------------------------


class TestDatumTransformer:
    def test_global_is_identity(self) -> None:
        converter = RecordingConverter()
        transformer = DatumTransformer(converter)
        assert transformer.transform(139.6917, 35.6895, Datum.GLOBAL) == (139.6917, 35.6895)
        assert converter.calls == []

    def test_global_needs_no_converter(self) -> None:
        transformer = DatumTransformer.for_datum(Datum.GLOBAL)
        assert transformer.converter is None
        point = Coordinate(35.6895, 139.6917)
        assert transformer.to_global(point, Datum.GLOBAL) == point

    def test_legacy_passes_lon_lat_order(self) -> None:
        converter = RecordingConverter()
        transformer = DatumTransformer(converter)
        assert transformer.transform(139.0, 35.0, Datum.LEGACY) == (140.0, 37.0)
        assert converter.calls == [(139.0, 35.0)]

    def test_to_global_restores_lat_lon_order(self) -> None:
        converter = RecordingConverter()
        transformer = DatumTransformer(converter)
        result = transformer.to_global(Coordinate(latitude=35.0, longitude=139.0), Datum.LEGACY)
        assert converter.calls == [(139.0, 35.0)]
        assert result == Coordinate(latitude=37.0, longitude=140.0)

    def test_datum_accepts_string_value(self) -> None:
        converter = RecordingConverter()
        transformer = DatumTransformer(converter)
        transformer.transform(139.0, 35.0, "legacy")  # type: ignore[arg-type]
        assert converter.calls == [(139.0, 35.0)]

    def test_legacy_without_converter_raises(self) -> None:
        with pytest.raises(DatumTransformError):
            DatumTransformer().transform(139.0, 35.0, Datum.LEGACY)

    def test_converter_failure_propagates(self) -> None:
        transformer = DatumTransformer(FailingConverter())
        with pytest.raises(DatumTransformError, match="grid file missing"):
            transformer.to_global(Coordinate(35.0, 139.0), Datum.LEGACY)


# ---------------------------------------------------------------------------
# PyprojConverter
# ---------------------------------------------------------------------------


class TestPyprojConverter:
    def test_for_legacy_builds_pyproj_converter(self) -> None:
        transformer = DatumTransformer.for_datum(Datum.LEGACY)
        assert isinstance(transformer.converter, PyprojConverter)

    def test_tokyo_datum_shift(self) -> None:
        """In Tokyo, WGS84 is roughly 12" north and 12" west of Tokyo Datum."""
        converter = PyprojConverter()
        lon, lat = converter.convert(139.6917, 35.6895)
        assert 0.002 < lat - 35.6895 < 0.0045
        assert -0.0045 < lon - 139.6917 < -0.002

    def test_converter_is_reusable(self) -> None:
        converter = PyprojConverter()
        first = converter.convert(135.5, 34.7)
        second = converter.convert(135.5, 34.7)
        assert first == second

    def test_invalid_crs_raises(self) -> None:
        with pytest.raises(CRSError):
            PyprojConverter(from_crs="EPSG:99999")

    def test_epsg_codes(self) -> None:
        assert Datum.GLOBAL.epsg == "EPSG:4326"
        assert Datum.LEGACY.epsg == "EPSG:4301"
