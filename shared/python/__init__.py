"""
Mesh Code Tagger — Shared Python Package
=========================================
Re-exports the base tool class, exception hierarchy, and validator
utilities so tool modules can import from a single location::

    from shared.python import GeoTool, Validators
    from shared.python.exceptions import CRSError
"""

from shared.python.base_tool import GeoTool
from shared.python.exceptions import (
    ColumnNotFoundError,
    CRSError,
    DatumTransformError,
    InputValidationError,
    MalformedInputError,
    MeshTaggerError,
    OutputWriteError,
)
from shared.python.validators import Validators

__all__ = [
    "GeoTool",
    "Validators",
    "MeshTaggerError",
    "InputValidationError",
    "ColumnNotFoundError",
    "MalformedInputError",
    "CRSError",
    "DatumTransformError",
    "OutputWriteError",
]
