"""Stub marker catalog and detection engine."""

from stubsmith.rules.marker_engine import (
    StubMarker,
    detect_stub_markers,
    detect_stubs,
    is_source_file,
    language_for_path,
    list_stubs,
    markers_for_language,
)
from stubsmith.rules.stub_markers import ALL_STUB_MARKERS, STUB_MARKER_REGISTRY

__all__ = [
    "ALL_STUB_MARKERS",
    "STUB_MARKER_REGISTRY",
    "StubMarker",
    "detect_stub_markers",
    "detect_stubs",
    "is_source_file",
    "language_for_path",
    "list_stubs",
    "markers_for_language",
]
