"""
Mesh Code Tagger — Shared Input Validators
===========================================
Static precondition checks used by :class:`~shared.python.base_tool.GeoTool`
subclasses before any processing begins.

All methods raise an exception from :mod:`shared.python.exceptions` rather
than returning booleans, so ``validate_inputs`` implementations stay flat::

    class MyTool(GeoTool):
        def validate_inputs(self) -> None:
            Validators.assert_file_exists(self.input_path)
            Validators.assert_columns_exist(header, ["lat", "lon"])
            Validators.assert_crs_valid("EPSG:4301")
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

# pyproj is imported inside assert_crs_valid so the other checks stay
# usable without it.

from shared.python.exceptions import (
    ColumnNotFoundError,
    CRSError,
    InputValidationError,
    OutputWriteError,
)


class Validators:
    """Collection of static precondition checks.

    All methods are ``@staticmethod`` — this class is never instantiated.
    """

    # ------------------------------------------------------------------
    # File-system checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_file_exists(path: Path) -> None:
        """Assert that *path* points to an existing regular file.

        Raises:
            InputValidationError: If *path* does not exist or is a directory.
        """
        path = Path(path)
        if not path.exists():
            raise InputValidationError(
                f"Input file not found: '{path}'. "
                "Check that the path is correct and the file exists."
            )
        if path.is_dir():
            raise InputValidationError(
                f"Expected a file but got a directory: '{path}'."
            )

    @staticmethod
    def assert_output_dir_writable(output_path: Path) -> None:
        """Assert that the parent directory of *output_path* is usable.

        Creates the parent directory (and any missing parents) if it does
        not yet exist.

        Raises:
            OutputWriteError: If the parent directory cannot be created.
        """
        parent = Path(output_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(str(output_path), str(exc)) from exc

    @staticmethod
    def assert_distinct_paths(input_path: Path, output_path: Path) -> None:
        """Assert that the output would not overwrite the input being streamed.

        Raises:
            InputValidationError: If both paths resolve to the same file.
        """
        if Path(input_path).resolve() == Path(output_path).resolve():
            raise InputValidationError(
                f"Output path '{output_path}' is the same file as the input."
            )

    # ------------------------------------------------------------------
    # CRS checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_crs_valid(crs_string: str) -> None:
        """Assert that *crs_string* can be parsed as a CRS by pyproj.

        Raises:
            CRSError: If *crs_string* is not recognised by pyproj.

        Example::

            Validators.assert_crs_valid("EPSG:4301")
        """
        from pyproj import CRS  # noqa: PLC0415
        from pyproj.exceptions import CRSError as ProjCRSError  # noqa: PLC0415

        try:
            CRS.from_user_input(crs_string)
        except ProjCRSError as exc:
            raise CRSError(crs_string) from exc

    # ------------------------------------------------------------------
    # Tabular data checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_columns_exist(
        header: Sequence[str],
        required_columns: Sequence[str],
    ) -> None:
        """Assert that all *required_columns* appear in *header*.

        Args:
            header: Column names exactly as they appear in the file, with
                    repeated names left as-is.
            required_columns: Column names that must be present.

        Raises:
            ColumnNotFoundError: On the first missing column found.

        Example::

            Validators.assert_columns_exist(["id", "lat", "lon"], ["lat", "lon"])
        """
        available = [str(c) for c in header]
        for col in required_columns:
            if col not in available:
                raise ColumnNotFoundError(col, available)
