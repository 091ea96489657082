# dependencies.py
from fastapi import HTTPException, Request
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_503_SERVICE_UNAVAILABLE

from task_store import TaskStore


def get_task_store(request: Request) -> TaskStore:
    """
    Returns the TaskStore created during application startup.
    Tests can swap it with `app.dependency_overrides`.
    """
    store = getattr(request.app.state, "task_store", None)
    if store is None:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail="Task store is not initialized.",
        )
    return store


def parse_task_id(task_id: str) -> int:
    """Path segment -> task id; anything non-numeric is a 400, not a 422."""
    try:
        return int(task_id)
    except ValueError:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid task ID") from None
