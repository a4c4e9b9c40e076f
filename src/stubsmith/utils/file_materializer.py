"""Write parsed files to disk and report the stubs they contain."""

import logging
from pathlib import Path

from stubsmith.models.stub_models import GeneratedFile, MaterializedFile
from stubsmith.rules.marker_engine import detect_stubs
from stubsmith.utils.exceptions import NoFilesProducedError
from stubsmith.utils.path_normalizer import normalize_path
from stubsmith.utils.response_parser import parse_response

logger = logging.getLogger(__name__)


def materialize_files(
    files: list[GeneratedFile],
    module_dir: str | Path,
) -> list[MaterializedFile]:
    """Write each file under module_dir and detect its stubs.

    Paths are normalized against the module directory's basename. Existing
    files are overwritten. OSErrors propagate to the caller.

    Args:
        files: Parsed files, in response order.
        module_dir: Root directory of the module being generated.

    Returns:
        One MaterializedFile per input file, in the same order.

    Raises:
        NoFilesProducedError: If files is empty. Nothing is written.
    """
    if not files:
        raise NoFilesProducedError(
            "AI did not generate any files. Check response format."
        )

    root = Path(module_dir)
    written: list[MaterializedFile] = []
    for generated in files:
        relative_path = normalize_path(generated.relative_path, root.name)
        target = (root / relative_path).absolute()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generated.content, encoding="utf-8")

        # Re-read from disk so stubs reflect what was actually written
        stubs = detect_stubs(target)
        logger.debug("Wrote %s (%d stubs)", target, len(stubs))
        written.append(
            MaterializedFile(
                path=str(target),
                name=target.name,
                relative_path=relative_path,
                stubs=stubs,
            )
        )
    return written


def materialize_response(text: str, module_dir: str | Path) -> list[MaterializedFile]:
    """Parse an AI response and write its files under module_dir."""
    return materialize_files(parse_response(text), module_dir)
