"""JSON persistence for the module/task document."""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from stubsmith.models import TaskStoreDocument
from stubsmith.tracker.exceptions import CorruptTaskStoreError

logger = logging.getLogger(__name__)

DEFAULT_TASKS_FILENAME = ".stubsmith-tasks.json"


class TaskStore:
    """Loads and saves the whole task document as a single JSON file.

    Reads accept the legacy shape (a bare list of tasks). Writes always use
    the current ``{"modules": [...], "tasks": [...]}`` shape and replace the
    file atomically. There is no locking: concurrent writers can lose
    updates.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def for_project(cls, project_path: str | Path = ".") -> "TaskStore":
        return cls(Path(project_path) / DEFAULT_TASKS_FILENAME)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> TaskStoreDocument:
        """Read the document, recovering from a missing or corrupt file.

        Returns:
            The stored document, or an empty one if the file is absent or
            cannot be parsed. Corruption is logged at WARNING level.
        """
        if not self.path.exists():
            return TaskStoreDocument()
        try:
            return self._parse(self.path.read_text(encoding="utf-8"))
        except CorruptTaskStoreError as exc:
            logger.warning(
                "Task store %s is corrupt, starting from an empty document: %s",
                self.path,
                exc,
            )
            return TaskStoreDocument()

    def save(self, document: TaskStoreDocument) -> None:
        """Overwrite the persisted document with the full current state."""
        payload = json.dumps(
            document.model_dump(mode="json", by_alias=True),
            indent=2,
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _parse(self, raw: str) -> TaskStoreDocument:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptTaskStoreError(f"invalid JSON: {exc}") from exc

        if isinstance(data, list):
            # Legacy flat task list, no module wrapper
            data = {"modules": [], "tasks": data}
        if not isinstance(data, dict):
            raise CorruptTaskStoreError(
                f"unexpected document root: {type(data).__name__}"
            )

        tasks = data.get("tasks") or []
        if isinstance(tasks, list):
            tasks = [_with_legacy_id(record, index) for index, record in enumerate(tasks)]
        try:
            return TaskStoreDocument.model_validate(
                {"modules": data.get("modules") or [], "tasks": tasks}
            )
        except ValidationError as exc:
            raise CorruptTaskStoreError(f"invalid records: {exc}") from exc


def _with_legacy_id(record, index: int):
    """Give an id-less record a stable id derived from its position."""
    if isinstance(record, dict) and record.get("id") in (None, ""):
        return {**record, "id": f"legacy-{index}"}
    return record
