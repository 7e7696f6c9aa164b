"""
Tests — CLI
============
Smoke tests for the ``geo-meshcode`` Click command using ``CliRunner``.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from src.mesh_code_tagger.cli import main


@pytest.fixture()
def points_csv(tmp_path: Path) -> Path:
    path = tmp_path / "points.csv"
    path.write_text("id,lat,lon\n1,35.6895,139.6917\n2,abc,139.0\n", encoding="utf-8")
    return path


class TestCli:
    def test_default_output(self, points_csv: Path) -> None:
        result = CliRunner().invoke(main, ["--lat", "lat", "--lon", "lon", str(points_csv)])
        assert result.exit_code == 0, result.output
        output = points_csv.with_name("points_mesh.csv")
        assert output.read_text(encoding="utf-8") == (
            "id,lat,lon,mesh_code\n1,35.6895,139.6917,53394525\n"
        )

    def test_options(self, tmp_path: Path, points_csv: Path) -> None:
        output = tmp_path / "out" / "tagged.csv"
        result = CliRunner().invoke(
            main,
            [
                "--lat", "lat", "--lon", "lon",
                "--level", "HALF",
                "--datum", "global",
                "-o", str(output),
                str(points_csv),
            ],
        )
        assert result.exit_code == 0, result.output
        assert output.read_text(encoding="utf-8").splitlines()[1].endswith(",533945253")

    def test_skipped_row_diagnostic_line(self, points_csv: Path) -> None:
        """Skipped rows are reported on stderr as ``warning: line <n>: ...``."""
        result = CliRunner().invoke(main, ["--lat", "lat", "--lon", "lon", str(points_csv)])
        assert result.exit_code == 0, result.output
        assert "warning: line 3: invalid latitude value 'abc'; row skipped" in (
            result.output.splitlines()
        )

    def test_txt_input_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "points.txt"
        path.write_text("lat,lon\n35.6895,139.6917\n", encoding="utf-8")
        result = CliRunner().invoke(main, ["--lat", "lat", "--lon", "lon", str(path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "points_mesh.csv").exists()

    def test_missing_column_exits_1(self, points_csv: Path) -> None:
        result = CliRunner().invoke(main, ["--lat", "nope", "--lon", "lon", str(points_csv)])
        assert result.exit_code == 1
        assert "Error: Column 'nope' not found" in result.output

    def test_missing_input_file_is_usage_error(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            main, ["--lat", "lat", "--lon", "lon", str(tmp_path / "missing.csv")]
        )
        assert result.exit_code == 2

    def test_lat_lon_required(self, points_csv: Path) -> None:
        result = CliRunner().invoke(main, [str(points_csv)])
        assert result.exit_code == 2

    def test_invalid_level_rejected(self, points_csv: Path) -> None:
        result = CliRunner().invoke(
            main, ["--lat", "lat", "--lon", "lon", "--level", "tiny", str(points_csv)]
        )
        assert result.exit_code == 2

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output
