"""Split a delimiter-separated AI response into individual files."""

import re

from stubsmith.models.stub_models import GeneratedFile

# "=== FILE: <path> ===" on a line of its own
FILE_DELIMITER = re.compile(r"^=== FILE: (?P<path>\S+) ===[ \t]*\r?$", re.MULTILINE)

_LEADING_FENCE = re.compile(r"\A```[\w.+#-]*[ \t]*\r?\n")
_TRAILING_FENCE = re.compile(r"\r?\n```[ \t]*\Z")


def strip_code_fence(content: str) -> str:
    """Remove one wrapping fenced-code-block from content.

    Only a fence line at the very start and, when that one was present, a
    closing fence line at the very end are removed. Fences inside the
    content are left alone.
    """
    stripped = content.strip()
    stripped, opened = _LEADING_FENCE.subn("", stripped, count=1)
    if opened:
        stripped = _TRAILING_FENCE.sub("", stripped, count=1)
    if stripped == "```":
        return ""
    return stripped.strip()


def parse_response(text: str) -> list[GeneratedFile]:
    """Parse an AI response into files, in the order they appear.

    Everything between one delimiter and the next (or the end of the text)
    is that file's content. A response without delimiters yields no files.

    Args:
        text: Raw response from the AI collaborator.

    Returns:
        List of GeneratedFile, possibly empty.
    """
    matches = list(FILE_DELIMITER.finditer(text))
    files: list[GeneratedFile] = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        raw = text[match.end():end]
        files.append(
            GeneratedFile(
                relative_path=match.group("path"),
                content=strip_code_fence(raw),
            )
        )
    return files
