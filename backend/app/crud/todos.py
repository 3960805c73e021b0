"""Todo repository.

Every query carries ``Todo.user_id == user_id``: a todo owned by someone
else is reported exactly like one that does not exist.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlmodel import Session, select, update

from app.core.database import commit
from app.core.dates import local_day_bounds, to_storage, utcnow
from app.core.errors import NotFound, ValidationError
from app.crud.categories import owns_category
from app.models import Category, Todo
from app.schemas.todo import TodoIn


@dataclass
class TodoFilters:
    status: Optional[str] = None
    priority: Optional[str] = None
    category_id: Optional[int] = None
    # a bare date matches the whole local day, a datetime the exact instant
    due_date: Optional[datetime | date] = None


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _owned(user_id: int, todo_id: int):
    return select(Todo).where(Todo.id == todo_id, Todo.user_id == user_id)


def list_todos(session: Session, user_id: int, filters: Optional[TodoFilters] = None) -> List[Todo]:
    flt = filters or TodoFilters()
    q = select(Todo).where(Todo.user_id == user_id)

    if flt.status:
        q = q.where(Todo.status == flt.status)
    if flt.priority:
        q = q.where(Todo.priority == flt.priority)
    if flt.category_id is not None:
        # only the caller's own categories can match
        q = q.join(Category, Category.id == Todo.category_id).where(
            Category.id == flt.category_id, Category.user_id == user_id
        )
    if isinstance(flt.due_date, datetime):
        q = q.where(Todo.due_date == to_storage(flt.due_date))
    elif isinstance(flt.due_date, date):
        start, end = local_day_bounds(flt.due_date)
        q = q.where(Todo.due_date >= start, Todo.due_date < end)

    return list(session.exec(q.order_by(Todo.id.desc())).all())


def search_todos(session: Session, user_id: int, title: str) -> List[Todo]:
    pattern = f"%{_escape_like(title)}%"
    return list(session.exec(
        select(Todo)
        .where(Todo.user_id == user_id, Todo.title.ilike(pattern, escape="\\"))
        .order_by(Todo.id.desc())
    ).all())


def get_todo(session: Session, user_id: int, todo_id: int) -> Todo:
    todo = session.exec(_owned(user_id, todo_id)).first()
    if not todo:
        raise NotFound("Todo not found")
    return todo


def _check_category(session: Session, user_id: int, category_id: Optional[int]) -> None:
    if not owns_category(session, user_id, category_id):
        raise ValidationError("Category not found")


def create_todo(session: Session, user_id: int, data: TodoIn) -> Todo:
    _check_category(session, user_id, data.category_id)
    todo = Todo(
        user_id=user_id,
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
        category_id=data.category_id,
        due_date=to_storage(data.due_date) if data.due_date else None,
    )
    session.add(todo)
    commit(session)
    session.refresh(todo)
    return todo


def update_todo(session: Session, user_id: int, todo_id: int, data: TodoIn) -> Todo:
    todo = get_todo(session, user_id, todo_id)
    _check_category(session, user_id, data.category_id)

    todo.title = data.title
    todo.description = data.description
    todo.status = data.status
    todo.priority = data.priority
    todo.category_id = data.category_id
    todo.due_date = to_storage(data.due_date) if data.due_date else None
    todo.updated_at = datetime.now(timezone.utc)

    session.add(todo)
    commit(session)
    session.refresh(todo)
    return todo


def delete_todo(session: Session, user_id: int, todo_id: int) -> None:
    todo = get_todo(session, user_id, todo_id)
    session.delete(todo)
    commit(session)


def complete_todo(session: Session, user_id: int, todo_id: int) -> None:
    result = session.exec(
        update(Todo)
        .where(Todo.id == todo_id, Todo.user_id == user_id)
        .values(status="completed", updated_at=datetime.now(timezone.utc))
    )
    commit(session)
    if result.rowcount == 0:
        raise NotFound("Todo not found")


def pending_with_future_due_date(session: Session) -> List[Todo]:
    """Todos across all users that still need a reminder."""
    return list(session.exec(
        select(Todo).where(Todo.status == "pending", Todo.due_date > to_storage(utcnow()))
    ).all())
