"""
Mesh Code Tagger
================
Appends a Japanese regional mesh code column to CSV coordinate data,
optionally converting Tokyo Datum coordinates to WGS84 first.

Public API::

    from src.mesh_code_tagger import MeshCodeTagger, TaggerConfig, encode
"""

from src.mesh_code_tagger.datum import Coordinate, Datum, DatumTransformer
from src.mesh_code_tagger.mesh import ResolutionLevel, encode
from src.mesh_code_tagger.pipeline import MeshCodeTagger, TaggerConfig, TagResult

__all__ = [
    "Coordinate",
    "Datum",
    "DatumTransformer",
    "MeshCodeTagger",
    "ResolutionLevel",
    "TagResult",
    "TaggerConfig",
    "encode",
]
__version__ = "1.0.0"
