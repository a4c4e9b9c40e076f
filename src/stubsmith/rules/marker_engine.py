"""Lexical detection of "not yet implemented" markers in source files."""

import re
from pathlib import Path

from pydantic import BaseModel

from stubsmith.models.stub_models import DetectedStub, StubListing

EXTENSION_LANGUAGES = {
    ".go": "go",
    ".rs": "rust",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".py": "python",
    ".java": "java",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".c": "c",
    ".h": "c",
}

# Extensions scanned by list_stubs
SOURCE_EXTENSIONS = frozenset(EXTENSION_LANGUAGES)


class StubMarker(BaseModel):
    """A single lexical pattern denoting an unimplemented unit of code.

    The pattern's first capture group must hold the unit name.
    """

    marker_id: str
    family: str  # "todo_comment" | "unimplemented_macro" | "not_implemented_error"
    description: str
    pattern: re.Pattern

    def extract(self, content: str) -> list[DetectedStub]:
        """Return a stub for every occurrence of this marker, in file order."""
        return [
            DetectedStub(
                name=match.group(1),
                line=content.count("\n", 0, match.start()) + 1,
                implemented=False,
            )
            for match in self.pattern.finditer(content)
        ]


def language_for_path(file_path: str | Path) -> str | None:
    """Map a file's extension to a language tag, or None if unknown."""
    return EXTENSION_LANGUAGES.get(Path(file_path).suffix.lower())


def is_source_file(file_name: str | Path) -> bool:
    return Path(file_name).suffix.lower() in SOURCE_EXTENSIONS


def markers_for_language(
    language: str | None,
    registry: dict[str, list[StubMarker]] | None = None,
) -> list[StubMarker]:
    """Return the ordered marker list for a language.

    Unknown or missing languages get every marker family.
    """
    if registry is None:
        from stubsmith.rules.stub_markers import STUB_MARKER_REGISTRY

        registry = STUB_MARKER_REGISTRY

    if language:
        markers = registry.get(language.lower())
        if markers is not None:
            return markers

    from stubsmith.rules.stub_markers import ALL_STUB_MARKERS

    return ALL_STUB_MARKERS


def detect_stub_markers(content: str, language: str | None = None) -> list[DetectedStub]:
    """Find every stub marker in content, in file order.

    Marker families are applied independently, so one line may yield more
    than one stub. Repeated names are kept as separate stubs.

    Args:
        content: Full text of a source file.
        language: Language tag selecting the marker set (None for all).

    Returns:
        DetectedStub list ordered by line.
    """
    found: list[DetectedStub] = []
    for marker in markers_for_language(language):
        found.extend(marker.extract(content))
    # Stable sort: stubs sharing a line keep registry order
    found.sort(key=lambda stub: stub.line)
    return found


def detect_stubs(file_path: str | Path) -> list[DetectedStub]:
    """Read a file and detect stubs using its extension-implied language."""
    path = Path(file_path)
    content = path.read_text(encoding="utf-8")
    return detect_stub_markers(content, language_for_path(path))


def list_stubs(dir_path: str | Path) -> list[StubListing]:
    """Recursively scan a directory for source files containing stubs.

    Hidden directories are skipped. Only files with at least one stub
    are reported.
    """
    results: list[StubListing] = []

    def _scan(directory: Path) -> None:
        for entry in sorted(directory.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                if not entry.name.startswith("."):
                    _scan(entry)
            elif entry.is_file() and is_source_file(entry.name):
                stubs = detect_stubs(entry)
                if stubs:
                    results.append(StubListing(file=str(entry), stubs=stubs))

    _scan(Path(dir_path))
    return results
