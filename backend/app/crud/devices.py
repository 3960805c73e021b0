from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, delete

from app.core.database import commit
from app.core.errors import NotFound
from app.models import DeviceToken


def _claim(device: DeviceToken, user_id: int) -> None:
    device.user_id = user_id
    device.updated_at = datetime.now(timezone.utc)


def register_device_token(session: Session, user_id: int, token: str) -> DeviceToken:
    """Upsert by token string; a token seen before moves to the caller."""
    device = session.exec(select(DeviceToken).where(DeviceToken.token == token)).first()
    if device:
        _claim(device, user_id)
        session.add(device)
        commit(session)
    else:
        device = DeviceToken(user_id=user_id, token=token)
        session.add(device)
        try:
            session.commit()
        except IntegrityError:
            # another request registered the same token first
            session.rollback()
            device = session.exec(select(DeviceToken).where(DeviceToken.token == token)).one()
            _claim(device, user_id)
            session.add(device)
            commit(session)
    session.refresh(device)
    return device


def list_device_tokens(session: Session, user_id: int) -> List[str]:
    return list(session.exec(select(DeviceToken.token).where(DeviceToken.user_id == user_id)).all())


def remove_device_token(session: Session, user_id: int, token: str) -> None:
    result = session.exec(
        delete(DeviceToken).where(DeviceToken.user_id == user_id, DeviceToken.token == token)
    )
    commit(session)
    if result.rowcount == 0:
        raise NotFound("Device not found")


def clear_device_tokens(session: Session, user_id: int) -> int:
    result = session.exec(delete(DeviceToken).where(DeviceToken.user_id == user_id))
    commit(session)
    return result.rowcount
