from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.dates import format_local, parse_local
from app.models import Todo

TodoStatus = Literal["pending", "completed"]
TodoPriority = Literal["low", "medium", "high"]

class TodoIn(BaseModel):
    """Body for both create and full-replace update."""
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    status: TodoStatus = "pending"
    priority: TodoPriority = "medium"
    category_id: Optional[int] = None
    # aware UTC once validated; clients send reference-timezone wall clock
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v):
        if v is None or v == "":
            return None
        if not isinstance(v, (str, datetime)):
            raise ValueError("Invalid due_date")
        try:
            return parse_local(v)
        except ValueError:
            raise ValueError("Invalid due_date, expected YYYY-MM-DD HH:MM:SS")

class TodoOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    category_id: Optional[int] = None
    due_date: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, todo: Todo) -> "TodoOut":
        return cls(
            id=todo.id,
            user_id=todo.user_id,
            title=todo.title,
            description=todo.description,
            status=todo.status,
            priority=todo.priority,
            category_id=todo.category_id,
            due_date=format_local(todo.due_date),
            created_at=todo.created_at,
            updated_at=todo.updated_at,
        )
