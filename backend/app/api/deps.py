import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlmodel import Session

from app.core.database import get_session
from app.core.errors import MalformedAuthHeader, TokenRevoked, Unauthenticated
from app.core.logging_config import mask
from app.core.security import decode_token
from app.crud.tokens import is_token_active

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    user_id: int
    email: str
    token: str


def get_auth_context(
    authorization: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
) -> AuthContext:
    """Gate for protected routes: bearer token, valid signature, live ledger row."""
    if not authorization:
        raise Unauthenticated()

    parts = authorization.strip().split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise MalformedAuthHeader()

    token = parts[1]
    payload = decode_token(token)  # InvalidToken on bad signature/format
    user_id = payload["id"]

    if not is_token_active(session, user_id, token):
        logger.info(f"Rejected revoked token {mask(token)} for user {user_id}")
        raise TokenRevoked()

    return AuthContext(user_id=user_id, email=payload["email"], token=token)
