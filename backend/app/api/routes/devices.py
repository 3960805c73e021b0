import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.deps import AuthContext, get_auth_context
from app.core.database import get_session
from app.core.logging_config import mask
from app.crud.devices import register_device_token, remove_device_token
from app.schemas.device import DeviceIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/devices", tags=["devices"])

@router.post("", status_code=201)
def register_device(data: DeviceIn, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    """Register the calling device for reminders; call again whenever FCM rotates the token."""
    device = register_device_token(session, auth.user_id, data.token)
    logger.info(f"Device token {mask(data.token)} registered for user {auth.user_id}")
    return {"id": device.id, "message": "Device registered"}

@router.delete("/{token}")
def unregister_device(token: str, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    remove_device_token(session, auth.user_id, token)
    logger.info(f"Device token {mask(token)} removed for user {auth.user_id}")
    return {"message": "Device removed"}
