from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, or_

from app.core.errors import Conflict
from app.core.security import hash_password
from app.models import User


def find_by_identifier(session: Session, identifier: str) -> Optional[User]:
    """Look a user up by email or phone."""
    return session.exec(
        select(User).where(or_(User.email == identifier, User.phone == identifier))
    ).first()


def create_user(
    session: Session,
    email: str,
    password: str,
    name: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    clauses = [User.email == email]
    if phone:
        clauses.append(User.phone == phone)
    existing = session.exec(select(User).where(or_(*clauses))).first()
    if existing:
        raise Conflict("Email or phone already registered")

    user = User(name=name, email=email, phone=phone, password_hash=hash_password(password))
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        # Two signups for the same email/phone raced past the lookup above.
        session.rollback()
        raise Conflict("Email or phone already registered") from exc
    session.refresh(user)
    return user
