from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone

class UserToken(SQLModel, table=True):
    """Ledger of issued bearer tokens; a token is honoured only while its row exists."""
    __tablename__ = "user_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    token: str = Field(index=True, max_length=512)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
