# models.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now() -> datetime:
    # Local wall-clock time, no offset; this is the on-disk format.
    return datetime.now()


class Task(BaseModel):
    """
    A single tracked task. Instances are immutable; changes produce a copy
    via `with_changes`, which lets the store swap the old one back on failure.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    title: str
    description: str
    completed: bool = False
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_local_time(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    @classmethod
    def new(cls, task_id: int, title: str, description: str) -> "Task":
        now = _now()
        return cls(
            id=task_id,
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    def with_changes(self, **changes: Any) -> "Task":
        """Copy with the given fields replaced and `updated_at` refreshed once."""
        if not changes:
            return self
        # Never let a clock step back put updated_at before the previous value.
        changes["updated_at"] = max(_now(), self.updated_at)
        return self.model_copy(update=changes)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# --- Request bodies ---
class TaskCreate(BaseModel):
    title: str
    description: str


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None

    def supplied(self) -> Dict[str, Any]:
        """Only the fields present (and non-null) in the request body."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
