"""Server-side ledger of active bearer tokens."""
from sqlmodel import Session, select, delete

from app.core.database import commit
from app.models import UserToken


def record_token(session: Session, user_id: int, token: str) -> UserToken:
    row = UserToken(user_id=user_id, token=token)
    session.add(row)
    commit(session)
    return row


def is_token_active(session: Session, user_id: int, token: str) -> bool:
    row = session.exec(
        select(UserToken.id).where(UserToken.user_id == user_id, UserToken.token == token)
    ).first()
    return row is not None


def revoke_token(session: Session, user_id: int, token: str) -> int:
    result = session.exec(
        delete(UserToken).where(UserToken.user_id == user_id, UserToken.token == token)
    )
    commit(session)
    return result.rowcount
