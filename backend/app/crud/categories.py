from datetime import datetime, timezone
from typing import List, Optional

from sqlmodel import Session, select, update

from app.core.database import commit
from app.core.errors import NotFound
from app.models import Category, Todo


def list_categories(session: Session, user_id: int) -> List[Category]:
    return list(session.exec(
        select(Category).where(Category.user_id == user_id).order_by(Category.id.asc())
    ).all())


def get_category(session: Session, user_id: int, category_id: int) -> Category:
    category = session.exec(
        select(Category).where(Category.id == category_id, Category.user_id == user_id)
    ).first()
    if not category:
        raise NotFound("Category not found")
    return category


def owns_category(session: Session, user_id: int, category_id: Optional[int]) -> bool:
    if category_id is None:
        return True
    found = session.exec(
        select(Category.id).where(Category.id == category_id, Category.user_id == user_id)
    ).first()
    return found is not None


def create_category(session: Session, user_id: int, name: str) -> Category:
    category = Category(user_id=user_id, name=name)
    session.add(category)
    commit(session)
    session.refresh(category)
    return category


def update_category(session: Session, user_id: int, category_id: int, name: str) -> Category:
    category = get_category(session, user_id, category_id)
    category.name = name
    category.updated_at = datetime.now(timezone.utc)
    session.add(category)
    commit(session)
    session.refresh(category)
    return category


def delete_category(session: Session, user_id: int, category_id: int) -> None:
    category = get_category(session, user_id, category_id)
    # Same effect as ON DELETE SET NULL, without relying on the backend enforcing it.
    session.exec(
        update(Todo)
        .where(Todo.user_id == user_id, Todo.category_id == category.id)
        .values(category_id=None)
    )
    session.delete(category)
    commit(session)
