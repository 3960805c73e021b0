from datetime import datetime, timedelta, timezone
import uuid

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import settings
from .errors import InvalidToken

# Use Argon2 instead of bcrypt (more reliable on Python 3.13)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(user_id: int, email: str, expires_days: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(days=expires_days if expires_days is not None else settings.jwt_expire_days)

    payload = {
        "id": user_id,
        "email": email,
        "iat": now,
        "exp": exp,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Verify the signature and return the claims.

    Expiry is not checked: a token stays usable until its
    ledger row is deleted at logout.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": False},
        )
    except JWTError as exc:
        raise InvalidToken() from exc

    if not isinstance(payload.get("id"), int) or not payload.get("email"):
        raise InvalidToken()
    return payload
