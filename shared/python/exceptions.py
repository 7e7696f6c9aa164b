"""
Mesh Code Tagger — Custom Exception Hierarchy
==============================================
Every module in the project raises exceptions from this module so callers
can catch them at the right level of granularity.

Hierarchy::

    MeshTaggerError                      ← catch-all base
    ├── InputValidationError             ← bad files, missing columns, etc.
    │   ├── ColumnNotFoundError          ← CSV header column missing
    │   └── MalformedInputError          ← unreadable / ragged CSV record
    ├── CRSError                         ← invalid / unknown CRS string
    ├── DatumTransformError              ← pyproj could not convert a point
    └── OutputWriteError                 ← cannot write to output path

Every exception here is fatal for a run.  The only recoverable condition
(an unparseable coordinate in one row) is logged, never raised.

Usage::

    from shared.python.exceptions import CRSError

    raise CRSError("EPSG:99999")
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class MeshTaggerError(Exception):
    """Base exception for the mesh code tagger.

    Args:
        message: Human-readable description of the error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class InputValidationError(MeshTaggerError):
    """Raised when the input file or configuration fails validation."""


class ColumnNotFoundError(InputValidationError):
    """Raised when a configured column is absent from the CSV header.

    Args:
        column: The name of the missing column.
        available: Column names that ARE present, used to build a helpful
                   error message.

    Example::

        raise ColumnNotFoundError("lat", ["id", "latitude", "longitude"])
    """

    def __init__(self, column: str, available: list[str]) -> None:
        available_str = ", ".join(f"'{c}'" for c in available)
        super().__init__(
            f"Column '{column}' not found. Available columns: {available_str}"
        )
        self.column: str = column
        self.available: list[str] = available


class MalformedInputError(InputValidationError):
    """Raised when a CSV record cannot be read at all.

    Distinct from an unparseable coordinate: this covers ragged records,
    undecodable bytes and csv-module errors, all of which abort the run.

    Args:
        line_number: 1-based line where the problem was detected.
        reason: Short explanation.
    """

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(f"Malformed input at line {line_number}: {reason}")
        self.line_number: int = line_number
        self.reason: str = reason


# ---------------------------------------------------------------------------
# CRS / datum
# ---------------------------------------------------------------------------


class CRSError(MeshTaggerError):
    """Raised when a CRS identifier cannot be parsed by pyproj.

    Args:
        crs_string: The raw CRS string that caused the error
                    (e.g. ``"EPSG:99999"``).
    """

    def __init__(self, crs_string: str) -> None:
        super().__init__(
            f"Invalid or unrecognised CRS: '{crs_string}'. "
            "Use an EPSG code (e.g. 'EPSG:4326') or a valid WKT/PROJ string."
        )
        self.crs_string: str = crs_string


class DatumTransformError(MeshTaggerError):
    """Raised when a coordinate cannot be converted to the global datum.

    A failure here usually means missing PROJ data or a broken install
    rather than bad input, so the whole run is aborted.

    Args:
        longitude: Longitude that was being converted.
        latitude: Latitude that was being converted.
        reason: Underlying pyproj error message.
    """

    def __init__(self, longitude: float, latitude: float, reason: str) -> None:
        super().__init__(
            f"Datum transform failed for (lon={longitude}, lat={latitude}): {reason}"
        )
        self.longitude: float = longitude
        self.latitude: float = latitude
        self.reason: str = reason


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class OutputWriteError(MeshTaggerError):
    """Raised when the tool cannot write its output to disk.

    Args:
        output_path: String representation of the path that failed.
        reason: Underlying OS error message.
    """

    def __init__(self, output_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write output to '{output_path}': {reason}"
        )
        self.output_path: str = output_path
        self.reason: str = reason
