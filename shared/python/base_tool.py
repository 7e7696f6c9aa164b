"""
Mesh Code Tagger — Shared Base Tool
====================================
Abstract base class for file-to-file tools in this project.

Design Pattern:
    Template Method — the public ``run()`` method defines a fixed
    pipeline (validate → process → report) that subclasses fill in
    by implementing ``validate_inputs`` and ``process``.  Whatever
    ``process`` returns becomes the tool's :attr:`~GeoTool.result` and,
    when it offers a ``summary()``, is logged at the end of the run.

Console output:
    Diagnostics go to stderr as ``<level>: <message>``, e.g.::

        warning: line 3: invalid latitude value 'abc'; row skipped

Usage::

    from shared.python.base_tool import GeoTool

    class MyTool(GeoTool[MyResult]):
        def validate_inputs(self) -> None:
            ...
        def process(self) -> MyResult:
            ...
"""

from __future__ import annotations

import logging
import sys
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar

# ---------------------------------------------------------------------------
# Project logger; modules get a child via logging.getLogger("meshtagger.<x>").
# ---------------------------------------------------------------------------
logger = logging.getLogger("meshtagger")

ResultT = TypeVar("ResultT")


class DiagnosticFormatter(logging.Formatter):
    """Render records as ``<levelname in lower case>: <message>``."""

    def __init__(self) -> None:
        super().__init__(fmt="%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        return f"{record.levelname.lower()}: {super().format(record)}"


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time.

    Test runners and ``click.testing.CliRunner`` swap ``sys.stderr``; a
    handler that captured the stream once would keep writing to the old one.
    """

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property  # type: ignore[override]
    def stream(self):  # noqa: ANN201
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:  # noqa: ANN001
        pass


class GeoTool(ABC, Generic[ResultT]):
    """Abstract base class for the project's file-to-file tools.

    Attributes:
        input_path: Path to the primary input file.
        output_path: Path where output will be written.
        verbose: When ``True`` the tool logs DEBUG-level messages in
            addition to INFO/WARNING/ERROR.

    Example::

        tool = MeshCodeTagger(
            input_path=Path("stations.csv"),
            output_path=Path("stations_mesh.csv"),
            config=TaggerConfig(lat_col="lat", lon_col="lon"),
        )
        result = tool.run()
        print(result.rows_written)
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path,
        *,
        verbose: bool = False,
    ) -> None:
        self.input_path: Path = Path(input_path)
        self.output_path: Path = Path(output_path)
        self.verbose: bool = verbose
        self._result: ResultT | None = None

        self._configure_logging()

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    def validate_inputs(self) -> None:
        """Check every precondition before any output is created.

        Raises:
            InputValidationError: If the input file is missing, a
                configured column does not exist, and so on.
        """

    @abstractmethod
    def process(self) -> ResultT:
        """Do the work and return a result object describing it."""

    # ------------------------------------------------------------------
    # Template method
    # ------------------------------------------------------------------

    def run(self) -> ResultT:
        """Validate, process, and report.

        Returns:
            The value returned by :meth:`process`, also kept in
            :attr:`result`.

        Raises:
            Any exception raised by ``validate_inputs`` or ``process``
            propagates unchanged; :attr:`result` is left untouched.
        """
        logger.info("Starting %s", self.__class__.__name__)
        start = time.perf_counter()

        self.validate_inputs()
        result = self.process()
        self._result = result

        self._report_success(result, time.perf_counter() - start)
        return result

    @property
    def result(self) -> ResultT | None:
        """Result of the last successful :meth:`run`, or ``None``."""
        return self._result

    # ------------------------------------------------------------------
    # Protected helpers
    # ------------------------------------------------------------------

    def _report_success(self, result: ResultT, elapsed: float) -> None:
        summary = getattr(result, "summary", None)
        if callable(summary):
            logger.info("%s", summary())
        logger.info(
            "%s completed in %.2fs → %s",
            self.__class__.__name__,
            elapsed,
            self.output_path,
        )

    def _configure_logging(self) -> None:
        """Attach the stderr diagnostic handler to the ``meshtagger`` logger.

        Only one handler is ever attached.  Uses DEBUG level when
        ``self.verbose`` is ``True``, otherwise INFO.
        """
        if not logger.handlers:
            handler = StderrHandler()
            handler.setFormatter(DiagnosticFormatter())
            logger.addHandler(handler)

        logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"input_path={self.input_path!r}, "
            f"output_path={self.output_path!r})"
        )
