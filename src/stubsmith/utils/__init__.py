"""Response parsing and file materialization utilities."""

from stubsmith.utils.exceptions import MaterializationError, NoFilesProducedError
from stubsmith.utils.file_materializer import materialize_files, materialize_response
from stubsmith.utils.path_normalizer import normalize_path
from stubsmith.utils.response_parser import parse_response, strip_code_fence

__all__ = [
    "MaterializationError",
    "NoFilesProducedError",
    "materialize_files",
    "materialize_response",
    "normalize_path",
    "parse_response",
    "strip_code_fence",
]
