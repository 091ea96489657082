# routers/tasks.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from starlette.status import HTTP_201_CREATED, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from dependencies import get_task_store, parse_task_id
from models import Task, TaskCreate, TaskUpdate
from task_store import TaskStore

# --- Router Setup ---
router = APIRouter(
    prefix="/api/tasks",
    tags=["Task Management"],
)

# --- Endpoints ---

@router.get("", response_model=List[Task])
@router.get("/", response_model=List[Task], include_in_schema=False)
async def list_tasks(store: TaskStore = Depends(get_task_store)):
    """Get the list of all tasks in insertion order."""
    return store.list_tasks()

@router.post("", response_model=Task, status_code=HTTP_201_CREATED)
@router.post("/", response_model=Task, status_code=HTTP_201_CREATED, include_in_schema=False)
async def create_task(payload: TaskCreate, store: TaskStore = Depends(get_task_store)):
    """Creates a new task; `title` and `description` are required."""
    return store.create_task(payload.title, payload.description)

@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int = Depends(parse_task_id), store: TaskStore = Depends(get_task_store)):
    task = store.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Task not found")
    return task

@router.put("/{task_id}", response_model=Task)
async def update_task(
    payload: Optional[TaskUpdate] = None,
    task_id: int = Depends(parse_task_id),
    store: TaskStore = Depends(get_task_store),
):
    """Updates only the fields present in the body; a missing body changes nothing."""
    changes = payload.supplied() if payload is not None else {}
    task = store.update_task(task_id, **changes)
    if task is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Task not found")
    return task

@router.delete("/{task_id}")
async def delete_task(task_id: int = Depends(parse_task_id), store: TaskStore = Depends(get_task_store)):
    if not store.delete_task(task_id):
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Task not found")
    return JSONResponse(content={"message": f"Task {task_id} deleted"})

# PUT/DELETE against the collection itself carry no id.
@router.put("", include_in_schema=False)
@router.put("/", include_in_schema=False)
@router.delete("", include_in_schema=False)
@router.delete("/", include_in_schema=False)
async def missing_task_id():
    raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid task ID")
