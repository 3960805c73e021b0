import logging
from datetime import date, datetime
from typing import Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlmodel import Session

from app.api.deps import AuthContext, get_auth_context
from app.core.database import get_session
from app.core.dates import parse_local
from app.core.errors import ValidationError
from app.crud import todos as crud
from app.schemas.todo import TodoIn, TodoOut
from app.services.notifier import notify_user
from app.services.reminders import reminder_scheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


def _parse_due_date_filter(value: Optional[str]) -> Optional[datetime | date]:
    if not value:
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return parse_local(text)
    except ValueError:
        raise ValidationError("Invalid dueDate, expected YYYY-MM-DD or YYYY-MM-DD HH:MM:SS")


@router.get("", response_model=list[TodoOut])
def list_todos(
    status: Optional[Literal["pending", "completed"]] = None,
    category: Optional[int] = None,
    priority: Optional[Literal["low", "medium", "high"]] = None,
    due_date: Optional[str] = Query(default=None, alias="dueDate"),
    auth: AuthContext = Depends(get_auth_context),
    session: Session = Depends(get_session),
):
    filters = crud.TodoFilters(
        status=status,
        priority=priority,
        category_id=category,
        due_date=_parse_due_date_filter(due_date),
    )
    todos = crud.list_todos(session, auth.user_id, filters)
    logger.debug(f"Retrieved {len(todos)} todos for user {auth.user_id}")
    return [TodoOut.from_model(t) for t in todos]


@router.get("/search", response_model=list[TodoOut])
def search_todos(
    title: Optional[str] = None,
    auth: AuthContext = Depends(get_auth_context),
    session: Session = Depends(get_session),
):
    if not title or not title.strip():
        raise ValidationError('Query parameter "title" is required')
    return [TodoOut.from_model(t) for t in crud.search_todos(session, auth.user_id, title.strip())]


@router.get("/{todo_id}", response_model=TodoOut)
def get_todo(todo_id: int, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    return TodoOut.from_model(crud.get_todo(session, auth.user_id, todo_id))


@router.post("", response_model=TodoOut, status_code=201)
def create_todo(
    data: TodoIn,
    background_tasks: BackgroundTasks,
    auth: AuthContext = Depends(get_auth_context),
    session: Session = Depends(get_session),
):
    todo = crud.create_todo(session, auth.user_id, data)
    logger.info(f"Todo {todo.id} created for user {auth.user_id}")

    background_tasks.add_task(notify_user, auth.user_id, "Todo Created", f'Your todo "{todo.title}" has been created.')
    reminder_scheduler.sync_todo(todo)
    return TodoOut.from_model(todo)


@router.put("/{todo_id}", response_model=TodoOut)
def update_todo(
    todo_id: int,
    data: TodoIn,
    background_tasks: BackgroundTasks,
    auth: AuthContext = Depends(get_auth_context),
    session: Session = Depends(get_session),
):
    todo = crud.update_todo(session, auth.user_id, todo_id, data)
    logger.info(f"Todo {todo.id} updated for user {auth.user_id}")

    background_tasks.add_task(notify_user, auth.user_id, "Todo Updated", f'Your todo "{todo.title}" has been updated.')
    reminder_scheduler.sync_todo(todo)
    return TodoOut.from_model(todo)


@router.delete("/{todo_id}")
def delete_todo(todo_id: int, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    crud.delete_todo(session, auth.user_id, todo_id)
    reminder_scheduler.cancel(todo_id)
    return {"message": "Todo deleted"}


@router.post("/{todo_id}/complete")
def complete_todo(todo_id: int, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    crud.complete_todo(session, auth.user_id, todo_id)
    reminder_scheduler.cancel(todo_id)
    return {"message": "Todo marked as complete"}
