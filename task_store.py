# task_store.py
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from models import Task
from storage import read_tasks, write_tasks

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Owns the in-memory task list and mirrors it to a JSON file.

    Every mutation runs read-modify-write-persist under one lock. If the
    write fails, the in-memory change is undone and PersistenceError is
    raised, so memory and disk never disagree.
    """

    def __init__(self, tasks_file: Path):
        self.tasks_file = Path(tasks_file)
        self._lock = threading.Lock()
        self._tasks: List[Task] = []
        self._next_id = 1
        self.reload()

    def reload(self) -> None:
        """Hydrates the list and the id counter from the task file."""
        loaded = read_tasks(self.tasks_file)
        tasks: List[Task] = []
        seen = set()
        for task in loaded:
            if task.id in seen:
                logger.warning("Skipping duplicate task id %s in %s", task.id, self.tasks_file)
                continue
            seen.add(task.id)
            tasks.append(task)

        with self._lock:
            self._tasks = tasks
            self._next_id = max(seen, default=0) + 1
        logger.info("Loaded %d tasks from %s", len(tasks), self.tasks_file)

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def list_tasks(self) -> List[Task]:
        with self._lock:
            return list(self._tasks)

    def get_task(self, task_id: int) -> Optional[Task]:
        with self._lock:
            return self._find(task_id)

    def create_task(self, title: str, description: str) -> Task:
        with self._lock:
            task = Task.new(self._next_id, title, description)
            self._tasks.append(task)
            self._next_id += 1
            try:
                self._save()
            except Exception:
                self._tasks.pop()
                self._next_id -= 1
                raise
        logger.info("Created task %s", task.id)
        return task

    def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Optional[Task]:
        """Applies only the fields that are not None. Returns None if the id is unknown."""
        changes: Dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if completed is not None:
            changes["completed"] = completed

        with self._lock:
            index = self._index_of(task_id)
            if index is None:
                return None
            previous = self._tasks[index]
            updated = previous.with_changes(**changes)
            self._tasks[index] = updated
            try:
                self._save()
            except Exception:
                self._tasks[index] = previous
                raise
        logger.info("Updated task %s (%s)", task_id, ", ".join(changes) or "no changes")
        return updated

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            index = self._index_of(task_id)
            if index is None:
                return False
            removed = self._tasks.pop(index)
            try:
                self._save()
            except Exception:
                self._tasks.insert(index, removed)
                raise
        logger.info("Deleted task %s", task_id)
        return True

    # --- helpers (caller holds the lock) ---
    def _index_of(self, task_id: int) -> Optional[int]:
        return next((i for i, t in enumerate(self._tasks) if t.id == task_id), None)

    def _find(self, task_id: int) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def _save(self) -> None:
        write_tasks(self._tasks, self.tasks_file)
