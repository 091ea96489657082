# storage.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Sequence

from models import Task

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The task file could not be written."""


def read_tasks(path: Path) -> List[Task]:
    """
    Loads the task list from `path`.
    A missing, empty or unreadable file yields an empty list; failures are logged.
    """
    if not path.exists():
        return []
    try:
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return []
        data = json.loads(raw)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return [Task.model_validate(record) for record in data]
    except (OSError, ValueError) as e:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors.
        logger.error("Error loading tasks from %s: %s", path, e)
        return []


def write_tasks(tasks: Sequence[Task], path: Path) -> None:
    """
    Replaces `path` with the full task list.

    The data goes to a temp file in the same directory, is fsynced, and is
    then renamed over the target, so a crash leaves either the old or the
    new file intact. Raises PersistenceError on any OS-level failure.
    """
    records = [task.to_record() for task in tasks]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=4, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
            temp_path = None
        finally:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.unlink(temp_path)
                except OSError as cleanup_error:
                    logger.warning("Could not remove temp file %s: %s", temp_path, cleanup_error)
    except OSError as e:
        logger.error("Error saving tasks to %s: %s", path, e)
        raise PersistenceError(f"Could not save tasks to {path}: {e}") from e
