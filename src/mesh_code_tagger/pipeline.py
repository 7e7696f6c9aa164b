"""
Mesh Code Tagger — Row Pipeline
================================
Provides :class:`MeshCodeTagger`, which streams a CSV file row by row,
converts each row's coordinate to WGS84 when required, and appends the
row's mesh code as a new trailing column.

Rows are never buffered: each input record is read, tagged, and written
before the next one is read, so arbitrarily large files run in constant
memory.  A row whose latitude or longitude cannot be parsed is logged and
left out of the output; every other problem aborts the run.

Classes:
    TaggerConfig        Column names, datum, and resolution for a run.
    SkippedRow          One row dropped for an unparseable coordinate.
    TagResult           Immutable summary of a completed run.
    MeshCodeTagger      Primary tool class (inherits GeoTool).

Typical usage::

    from pathlib import Path
    from src.mesh_code_tagger.pipeline import MeshCodeTagger, TaggerConfig

    tool = MeshCodeTagger(
        input_path=Path("data/stations.csv"),
        output_path=Path("output/stations_mesh.csv"),
        config=TaggerConfig(lat_col="lat", lon_col="lon", level="quarter"),
    )
    tool.run()
"""

from __future__ import annotations

import csv
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Sequence, TextIO

import pandas as pd

from shared.python.base_tool import GeoTool
from shared.python.exceptions import (
    ColumnNotFoundError,
    InputValidationError,
    MalformedInputError,
    OutputWriteError,
)
from shared.python.validators import Validators
from src.mesh_code_tagger.datum import Coordinate, Datum, DatumTransformer
from src.mesh_code_tagger.mesh import ResolutionLevel, encode

logger = logging.getLogger("meshtagger.pipeline")

MESH_COLUMN = "mesh_code"

# Plain ASCII decimal notation with an optional exponent.  Rejects the extras
# ``float()`` would accept: "nan", "inf", "1_000", full-width and other
# non-ASCII digits.
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class TaggerConfig:
    """Configuration bundle for :class:`MeshCodeTagger`.

    Attributes:
        lat_col: Header name of the latitude column.
        lon_col: Header name of the longitude column.
        datum: Datum of the input coordinates.  Accepts a :class:`Datum`
               or its value (``"global"`` / ``"legacy"``).
        level: Resolution of the appended code.  Accepts a
               :class:`ResolutionLevel` or its value.
        mesh_col: Name of the appended column.
    """

    lat_col: str
    lon_col: str
    datum: Datum = Datum.GLOBAL
    level: ResolutionLevel = ResolutionLevel.STANDARD
    mesh_col: str = MESH_COLUMN

    def __post_init__(self) -> None:
        try:
            self.datum = Datum(self.datum)
            self.level = ResolutionLevel(self.level)
        except ValueError as exc:
            raise InputValidationError(str(exc)) from exc


@dataclass(frozen=True)
class SkippedRow:
    """A data row dropped because a coordinate field was not a number.

    Attributes:
        line_number: 1-based source line on which the record starts.
        role: ``"latitude"`` or ``"longitude"``.
        raw: The offending field text, untrimmed.
    """

    line_number: int
    role: str
    raw: str


@dataclass(frozen=True)
class TagResult:
    """Immutable container for a completed tagging run.

    Attributes:
        rows_read: Data rows read from the input (blank lines excluded).
        rows_written: Data rows written to the output.
        skipped: One entry per dropped row, in input order.
        datum: Datum the input was interpreted in.
        level: Resolution of the appended codes.
        output_path: Where the output was written, if it was a file.
    """

    rows_read: int
    rows_written: int
    skipped: list[SkippedRow] = field(default_factory=list)
    datum: Datum = Datum.GLOBAL
    level: ResolutionLevel = ResolutionLevel.STANDARD
    output_path: Path | None = None

    @property
    def rows_skipped(self) -> int:
        return len(self.skipped)

    def summary(self) -> str:
        """Return a human-readable summary string for logging or display."""
        return (
            f"Tagged {self.rows_written} rows "
            f"({self.rows_skipped} skipped) | "
            f"datum={self.datum.value} level={self.level.value} | "
            f"Output: {self.output_path}"
        )


# ---------------------------------------------------------------------------
# Streaming core
# ---------------------------------------------------------------------------


def parse_degrees(raw: str) -> float | None:
    """Parse *raw* as a finite decimal number of degrees.

    Surrounding whitespace is ignored.  Returns ``None`` when the text is
    empty, not a plain decimal, or overflows to infinity.
    """
    text = raw.strip()
    if not _DECIMAL_RE.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def resolve_columns(
    header: Sequence[str], lat_col: str, lon_col: str
) -> tuple[int, int]:
    """Return the positions of *lat_col* and *lon_col* in *header*.

    The first occurrence wins when a name is repeated.

    Raises:
        ColumnNotFoundError: If either name is missing.
    """
    available = list(header)
    positions = []
    for name in (lat_col, lon_col):
        if name not in available:
            raise ColumnNotFoundError(name, available)
        positions.append(available.index(name))
    return positions[0], positions[1]


def default_output_path(input_path: Path) -> Path:
    """Return ``<input-stem>_mesh.csv`` in the input's directory."""
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}_mesh.csv")


def stream_rows(
    source: TextIO,
    sink: TextIO,
    config: TaggerConfig,
    transformer: DatumTransformer,
    *,
    output_path: Path | None = None,
) -> TagResult:
    """Copy *source* to *sink*, appending a mesh code to every valid row.

    Args:
        source: Open text stream of CSV data (header first).  Should be
                opened with ``newline=""``.
        sink: Open text stream the augmented CSV is written to.
        config: Column names, datum, and level for the run.
        transformer: Shared, read-only datum transformer.
        output_path: Path of *sink*, used in results and error messages.

    Returns:
        A :class:`TagResult` describing the run.

    Raises:
        InputValidationError: If the source has no header row.
        ColumnNotFoundError: If a configured column is not in the header.
            Raised before any data row is read.
        MalformedInputError: If a record cannot be read or has the wrong
            number of fields.
        DatumTransformError: If a legacy-datum coordinate cannot be converted.
        OutputWriteError: If writing or flushing the sink fails.
    """
    sink_name = str(output_path or getattr(sink, "name", "<output>"))
    reader = csv.reader(source)
    writer = csv.writer(sink, lineterminator="\n")
    records = _records(reader)

    header = next(records, None)
    if header is None:
        raise InputValidationError("Input has no header row.")
    lat_idx, lon_idx = resolve_columns(header, config.lat_col, config.lon_col)
    logger.debug(
        "Resolved columns: %s → %d, %s → %d",
        config.lat_col, lat_idx, config.lon_col, lon_idx,
    )
    _write(writer, [*header, config.mesh_col], sink_name)

    rows_read = 0
    rows_written = 0
    skipped: list[SkippedRow] = []

    for row in records:
        rows_read += 1
        line_number = _record_start_line(reader, row)
        if len(row) != len(header):
            raise MalformedInputError(
                line_number,
                f"expected {len(header)} fields, found {len(row)}",
            )

        lat = parse_degrees(row[lat_idx])
        if lat is None:
            skipped.append(_skip_row(line_number, "latitude", row[lat_idx]))
            continue
        lon = parse_degrees(row[lon_idx])
        if lon is None:
            skipped.append(_skip_row(line_number, "longitude", row[lon_idx]))
            continue

        point = transformer.to_global(Coordinate(lat, lon), config.datum)
        code = encode(point.latitude, point.longitude, config.level)
        logger.debug("line %d: (%s, %s) → %s", line_number, lat, lon, code)

        _write(writer, [*row, code], sink_name)
        rows_written += 1

    try:
        sink.flush()
    except OSError as exc:
        raise OutputWriteError(sink_name, str(exc)) from exc

    return TagResult(
        rows_read=rows_read,
        rows_written=rows_written,
        skipped=skipped,
        datum=config.datum,
        level=config.level,
        output_path=output_path,
    )


def _records(reader: Any) -> Iterator[list[str]]:
    """Yield non-blank records, mapping read failures to project errors."""
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except (csv.Error, UnicodeDecodeError) as exc:
            raise MalformedInputError(reader.line_num, str(exc)) from exc
        except OSError as exc:
            raise InputValidationError(f"Failed to read input: {exc}") from exc
        if row:
            yield row


def _record_start_line(reader: Any, row: list[str]) -> int:
    # line_num points at the record's last physical line; quoted fields may
    # span several.
    return reader.line_num - sum(value.count("\n") for value in row)


def _skip_row(line_number: int, role: str, raw: str) -> SkippedRow:
    logger.warning("line %d: invalid %s value '%s'; row skipped", line_number, role, raw)
    return SkippedRow(line_number=line_number, role=role, raw=raw)


def _write(writer: Any, row: list[str], sink_name: str) -> None:
    try:
        writer.writerow(row)
    except OSError as exc:
        raise OutputWriteError(sink_name, str(exc)) from exc


# ---------------------------------------------------------------------------
# Main tool class
# ---------------------------------------------------------------------------


class MeshCodeTagger(GeoTool[TagResult]):
    """Append a mesh code column to every row of a CSV file.

    Inherits the Template Method pipeline from :class:`~shared.python.GeoTool`:
    ``validate_inputs`` → ``process`` → ``_report_success``.  The
    :class:`TagResult` returned by :meth:`process` is what :meth:`run`
    returns and what :attr:`result` holds afterwards.

    Args:
        input_path: Path to the input CSV file (any extension).
        output_path: Path where the tagged CSV will be written.  Defaults to
                     ``<input-stem>_mesh.csv`` beside the input.
        config: A :class:`TaggerConfig` naming the coordinate columns, the
                input datum, and the mesh resolution.
        verbose: Enable DEBUG-level logging.  Defaults to ``False``.

    Example::

        cfg = TaggerConfig(lat_col="lat", lon_col="lon", datum="legacy")
        result = MeshCodeTagger(Path("data/points.csv"), None, cfg).run()
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path | None,
        config: TaggerConfig,
        *,
        verbose: bool = False,
    ) -> None:
        if output_path is None:
            output_path = default_output_path(input_path)
        super().__init__(input_path, output_path, verbose=verbose)
        self.config: TaggerConfig = config

        # Built in validate_inputs(), reused for every row in process()
        self._transformer: DatumTransformer | None = None

    # ------------------------------------------------------------------
    # GeoTool abstract method implementations
    # ------------------------------------------------------------------

    def validate_inputs(self) -> None:
        """Validate the input file and configuration before processing.

        Checks:
        - Input file exists.
        - Output path differs from the input and its directory is writable
          (created if absent).
        - ``lat_col`` and ``lon_col`` are present in the CSV header, matched
          against the raw header text.
        - The datum transformer can be built (legacy datum only).

        Raises:
            InputValidationError: On any input precondition failure.
            ColumnNotFoundError: If a coordinate column is missing.
            CRSError: If the pyproj transformation cannot be built.
            OutputWriteError: If the output directory cannot be created.
        """
        Validators.assert_file_exists(self.input_path)
        Validators.assert_distinct_paths(self.input_path, self.output_path)
        Validators.assert_output_dir_writable(self.output_path)

        Validators.assert_columns_exist(
            self._read_header(), [self.config.lat_col, self.config.lon_col]
        )

        self._transformer = DatumTransformer.for_datum(self.config.datum)
        logger.debug("Inputs validated successfully.")

    def process(self) -> TagResult:
        """Stream the input CSV through the tagger into the output file.

        Raises:
            InputValidationError: If the input cannot be opened or read.
            MalformedInputError: On a ragged or undecodable record.
            DatumTransformError: If a coordinate cannot be converted.
            OutputWriteError: If the output cannot be opened or written.
        """
        transformer = self._transformer or DatumTransformer.for_datum(self.config.datum)

        try:
            source = open(self.input_path, newline="", encoding="utf-8-sig")
        except OSError as exc:
            raise InputValidationError(
                f"Cannot open input file '{self.input_path}': {exc}"
            ) from exc

        with source:
            try:
                sink = open(self.output_path, "w", newline="", encoding="utf-8")
            except OSError as exc:
                raise OutputWriteError(str(self.output_path), str(exc)) from exc
            with sink:
                result = stream_rows(
                    source, sink, self.config, transformer,
                    output_path=self.output_path,
                )

        if result.rows_skipped:
            logger.warning(
                "Dropped %d row(s) with unparseable coordinate values.",
                result.rows_skipped,
            )
        return result

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _read_header(self) -> list[str]:
        """Return the first non-blank record of the input, exactly as written.

        Read with ``header=None`` so pandas neither renames repeated names
        (``lat``, ``lat.1``) nor converts them; the list matches what
        :func:`stream_rows` will see.
        """
        try:
            peek = pd.read_csv(
                self.input_path,
                header=None,
                nrows=1,
                dtype=str,
                keep_default_na=False,
                encoding="utf-8-sig",
            )
        except pd.errors.EmptyDataError as exc:
            raise InputValidationError(
                f"Input file has no header row: '{self.input_path}'."
            ) from exc
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
            raise InputValidationError(
                f"Cannot read header of '{self.input_path}': {exc}"
            ) from exc
        return peek.iloc[0].tolist()
