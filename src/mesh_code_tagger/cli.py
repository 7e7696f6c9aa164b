"""
Mesh Code Tagger — CLI Entry Point
===================================
Command-line interface built with Click.  Installed as the ``geo-meshcode``
command via ``pyproject.toml``.

Usage:
    geo-meshcode --lat lat --lon lon data/stations.csv
    geo-meshcode --lat y --lon x --datum legacy --level quarter \\
                 --output out/stations_mesh.csv data/stations.csv

Run ``geo-meshcode --help`` for a full list of options.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from shared.python.exceptions import MeshTaggerError
from src.mesh_code_tagger import __version__
from src.mesh_code_tagger.datum import Datum
from src.mesh_code_tagger.mesh import ResolutionLevel
from src.mesh_code_tagger.pipeline import MeshCodeTagger, TaggerConfig


@click.command(
    name="geo-meshcode",
    help=(
        "Append a regional mesh code column to a CSV of coordinates.\n\n"
        "Reads INPUT_FILE, computes the mesh code of every row's LAT/LON "
        "pair, and writes the rows with a trailing 'mesh_code' column. "
        "Rows whose coordinates are not numbers are reported and skipped."
    ),
)
@click.version_option(__version__, prog_name="geo-meshcode")
# ---------------------------------------------------------------------------
# Required arguments
# ---------------------------------------------------------------------------
@click.argument(
    "input_path",
    metavar="INPUT_FILE",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--lat",
    "lat_col",
    required=True,
    help="Column name containing latitude values.",
)
@click.option(
    "--lon",
    "lon_col",
    required=True,
    help="Column name containing longitude values.",
)
# ---------------------------------------------------------------------------
# Optional arguments
# ---------------------------------------------------------------------------
@click.option(
    "--datum", "-d",
    type=click.Choice([d.value for d in Datum], case_sensitive=False),
    default=Datum.GLOBAL.value,
    show_default=True,
    help="Datum of the input coordinates: 'global' (WGS84) or "
         "'legacy' (Tokyo Datum, converted to WGS84 before encoding).",
)
@click.option(
    "--level", "-l",
    type=click.Choice([lv.value for lv in ResolutionLevel], case_sensitive=False),
    default=ResolutionLevel.STANDARD.value,
    show_default=True,
    help="Mesh resolution to compute.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path for the output CSV.  Defaults to <input-stem>_mesh.csv "
         "beside the input.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug-level logging output.",
)
def main(
    input_path: Path,
    lat_col: str,
    lon_col: str,
    datum: str,
    level: str,
    output_path: Path | None,
    verbose: bool,
) -> None:
    """CLI entry point — wires Click options into MeshCodeTagger."""
    try:
        config = TaggerConfig(
            lat_col=lat_col,
            lon_col=lon_col,
            datum=Datum(datum.lower()),
            level=ResolutionLevel(level.lower()),
        )
        tool = MeshCodeTagger(
            input_path=input_path,
            output_path=output_path,
            config=config,
            verbose=verbose,
        )
        tool.run()
    except MeshTaggerError as exc:
        # User-facing errors: print a clean message, no stack trace
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
