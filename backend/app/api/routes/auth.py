import logging

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.deps import AuthContext, get_auth_context
from app.core.database import get_session
from app.core.errors import AppError
from app.core.logging_config import mask
from app.core.security import verify_password, create_access_token
from app.crud.devices import clear_device_tokens, register_device_token
from app.crud.tokens import record_token, revoke_token
from app.crud.users import create_user, find_by_identifier
from app.schemas.auth import SignupIn, SigninIn, SigninOut, SignupOut, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


@router.post("/signup", response_model=SignupOut, status_code=201)
def signup(payload: SignupIn, session: Session = Depends(get_session)):
    user = create_user(
        session,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        phone=payload.phone,
    )
    logger.info(f"User {user.id} signed up")
    return SignupOut(user=UserOut.model_validate(user))


@router.post("/signin", response_model=SigninOut)
def signin(payload: SigninIn, session: Session = Depends(get_session)):
    user = find_by_identifier(session, payload.identifier)

    if not user or not verify_password(payload.password, user.password_hash):
        raise InvalidCredentials()

    token = create_access_token(user_id=user.id, email=user.email)
    record_token(session, user.id, token)

    if payload.fcm_token:
        register_device_token(session, user.id, payload.fcm_token)
        logger.info(f"Device token {mask(payload.fcm_token)} registered for user {user.id}")

    session.refresh(user)
    return SigninOut(user=UserOut.model_validate(user), token=token)


@router.post("/logout")
def logout(
    auth: AuthContext = Depends(get_auth_context),
    session: Session = Depends(get_session),
):
    revoke_token(session, auth.user_id, auth.token)
    cleared = clear_device_tokens(session, auth.user_id)
    logger.info(f"User {auth.user_id} logged out ({cleared} device tokens cleared)")
    return {"message": "Successfully logged out"}
