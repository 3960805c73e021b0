"""Reminder scheduler - one-shot push reminders for todo due dates.

Design:
- One APScheduler ``BackgroundScheduler`` owns the timers; each reminder is
  a ``DateTrigger`` job that runs once on the scheduler's worker pool
- ``_jobs`` maps todo id to its live job and is only touched under
  ``_lock``, from request threads (schedule/cancel) and from the worker
  thread that fires a reminder
- At most one live job per todo: scheduling again replaces the old job
- Late reminders are sent however late; a job APScheduler still reports
  as missed is dropped from ``_jobs``
- State is process local; ``rehydrate`` rebuilds it from the database at
  startup
"""
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from apscheduler.events import EVENT_JOB_MISSED, JobExecutionEvent
from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from sqlmodel import Session

from app.core.dates import from_storage, utcnow
from app.crud.todos import pending_with_future_due_date
from app.models import Todo
from app.services.notifier import notify_user

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Todo Reminder"


@dataclass
class ReminderJob:
    todo_id: int
    fire_at: datetime
    job: Job


class ReminderScheduler:
    """Process-wide registry of pending todo reminders."""

    def __init__(self):
        self._scheduler: Optional[BackgroundScheduler] = None
        self._jobs: Dict[int, ReminderJob] = {}
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self):
        """Start the scheduler."""
        with self._lock:
            if self.running:
                return
            # A fresh instance each time; a shut down scheduler cannot be restarted
            self._scheduler = BackgroundScheduler(timezone=timezone.utc)
            self._scheduler.add_listener(self._on_missed, EVENT_JOB_MISSED)
            self._scheduler.start()
        logger.info("Reminder scheduler started")

    def stop(self):
        """Stop the scheduler and forget every pending reminder."""
        with self._lock:
            if self._scheduler and self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None
            dropped = len(self._jobs)
            self._jobs.clear()
        logger.info(f"Reminder scheduler stopped ({dropped} pending reminders dropped)")

    def schedule(self, todo_id: int, fire_at: datetime, user_id: int, title: str) -> bool:
        """Schedule a reminder, replacing any existing one for the todo.

        Instants at or before now are ignored. Returns True when a job was
        registered.
        """
        fire_at = from_storage(fire_at)
        if fire_at <= utcnow():
            logger.info(f"Reminder time already passed for todo {todo_id}, skipping scheduling")
            return False

        try:
            with self._lock:
                if not self.running:
                    logger.warning(f"Reminder scheduler not running; todo {todo_id} not scheduled")
                    return False

                existing = self._jobs.pop(todo_id, None)
                if existing:
                    self._remove_job(existing)

                job_id = f"reminder-{todo_id}-{uuid.uuid4().hex[:8]}"
                job = self._scheduler.add_job(
                    self._fire,
                    trigger=DateTrigger(run_date=fire_at),
                    id=job_id,
                    args=[todo_id, job_id, user_id, title],
                    # late reminders still go out, however late
                    misfire_grace_time=None,
                )
                self._jobs[todo_id] = ReminderJob(todo_id=todo_id, fire_at=fire_at, job=job)
        except Exception as e:
            logger.error(f"Error scheduling reminder for todo {todo_id}: {e}")
            return False

        logger.info(f"Scheduled reminder for todo {todo_id} at {fire_at.isoformat()}")
        return True

    def cancel(self, todo_id: int) -> bool:
        """Cancel the todo's reminder. Safe to call when none exists."""
        try:
            with self._lock:
                existing = self._jobs.pop(todo_id, None)
                if existing is None:
                    return False
                self._remove_job(existing)
        except Exception as e:
            logger.error(f"Error cancelling reminder for todo {todo_id}: {e}")
            return False

        logger.info(f"Cancelled reminder for todo {todo_id}")
        return True

    def sync_todo(self, todo: Todo) -> None:
        """Bring the todo's reminder in line with its current state."""
        if todo.status == "pending" and todo.due_date is not None:
            if self.schedule(todo.id, todo.due_date, todo.user_id, todo.title):
                return
        self.cancel(todo.id)

    def rehydrate(self, session: Session) -> int:
        """Schedule every pending todo whose due date is still ahead."""
        count = 0
        for todo in pending_with_future_due_date(session):
            if self.schedule(todo.id, todo.due_date, todo.user_id, todo.title):
                count += 1
        logger.info(f"Rehydrated {count} reminders")
        return count

    def get(self, todo_id: int) -> Optional[ReminderJob]:
        with self._lock:
            return self._jobs.get(todo_id)

    def pending(self) -> Dict[int, datetime]:
        """Snapshot of todo id -> fire instant."""
        with self._lock:
            return {todo_id: entry.fire_at for todo_id, entry in self._jobs.items()}

    def _remove_job(self, entry: ReminderJob) -> None:
        try:
            entry.job.remove()
        except JobLookupError:
            # already fired or removed
            pass

    def _on_missed(self, event: JobExecutionEvent) -> None:
        with self._lock:
            for todo_id, entry in list(self._jobs.items()):
                if entry.job.id == event.job_id:
                    del self._jobs[todo_id]
                    logger.warning(f"Reminder for todo {todo_id} missed its run time, dropped")
                    return

    def _fire(self, todo_id: int, job_id: str, user_id: int, title: str) -> None:
        with self._lock:
            current = self._jobs.get(todo_id)
            if current is None or current.job.id != job_id:
                logger.debug(f"Reminder {job_id} was superseded, not sending")
                return
            del self._jobs[todo_id]

        logger.info(f"Firing reminder for todo {todo_id} (user {user_id})")
        notify_user(user_id, REMINDER_TITLE, title)


# Global instance
reminder_scheduler = ReminderScheduler()
