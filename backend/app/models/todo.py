from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone

class Todo(SQLModel, table=True):
    __tablename__ = "todos"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)

    title: str = Field(max_length=255)
    description: str | None = None
    status: str = Field(default="pending", max_length=16, index=True)
    priority: str = Field(default="medium", max_length=16)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", ondelete="SET NULL")
    # aware UTC
    due_date: Optional[datetime] = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
