"""
Task operations against the task store.

Every function takes an open ``Session`` and performs one unit of work:
it commits on success and rolls back on a store failure, which is logged
and re-raised to the caller.  Nothing is cached between calls; the
``tasks`` table is the only source of truth.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..models import Task, utcnow
from .errors import TaskNotFoundError, TaskValidationError

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for an update field that was not supplied."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

# ids outside SQLite's signed 64-bit INTEGER cannot name a row
_ID_RANGE = range(-(2**63), 2**63)


@contextmanager
def _unit_of_work(db: Session, action: str):
    try:
        yield
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Task store failure during %s", action)
        raise


def _validate_title(title: Optional[str]) -> None:
    if not title:
        raise TaskValidationError("title", "Title must not be empty")


def _next_updated_at(previous: Optional[datetime]) -> datetime:
    # updated_at must move forward on every mutation, even within one clock tick
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _find_task(db: Session, task_id: int) -> Optional[Task]:
    if task_id not in _ID_RANGE:
        return None
    return db.get(Task, task_id)


def _get_task(db: Session, task_id: int) -> Task:
    task = _find_task(db, task_id)
    if task is None:
        logger.warning("Task %s not found", task_id)
        raise TaskNotFoundError(task_id)
    return task


def _apply_changes(db: Session, task_id: int, changes: Dict[str, Any], action: str) -> Task:
    with _unit_of_work(db, action):
        task = _get_task(db, task_id)
        for field, value in changes.items():
            setattr(task, field, value)
        task.updated_at = _next_updated_at(task.updated_at)
        db.add(task)
        db.commit()
        db.refresh(task)
    logger.info("Task %s %s: %s", task_id, action, sorted(changes))
    return task


def create_task(db: Session, title: str, description: Optional[str] = None) -> Task:
    """Insert a new, not yet completed task and return it."""
    _validate_title(title)

    now = utcnow()
    task = Task(
        title=title,
        description=description,
        completed=False,
        created_at=now,
        updated_at=now,
    )
    with _unit_of_work(db, "create"):
        db.add(task)
        db.commit()
        db.refresh(task)
    logger.info("Task %s created", task.id)
    return task


def list_tasks(db: Session) -> List[Task]:
    """All tasks in insertion order."""
    with _unit_of_work(db, "list"):
        return list(db.exec(select(Task).order_by(Task.id)).all())


def toggle_task(db: Session, task_id: int, completed: bool) -> Task:
    """Set ``completed`` to the given value.

    The stored value is not consulted: callers pass the state they want.
    """
    return _apply_changes(db, task_id, {"completed": completed}, "toggle")


def update_task(
    db: Session,
    task_id: int,
    *,
    title: Any = UNSET,
    description: Any = UNSET,
    completed: Any = UNSET,
) -> Task:
    """Apply the supplied fields to a task.

    Each keyword left as ``UNSET`` keeps its stored value.  Passing
    ``description=None`` clears the description.  ``updated_at`` moves
    forward even when no field is supplied.
    """
    if title is not UNSET:
        _validate_title(title)
    if completed is None:
        raise TaskValidationError("completed", "Completed must be true or false")

    changes = {
        field: value
        for field, value in (
            ("title", title),
            ("description", description),
            ("completed", completed),
        )
        if value is not UNSET
    }
    return _apply_changes(db, task_id, changes, "update")


def delete_task(db: Session, task_id: int) -> bool:
    """Make sure no task with ``task_id`` exists.

    Deleting an id that is already gone is not an error.
    """
    with _unit_of_work(db, "delete"):
        task = _find_task(db, task_id)
        if task is not None:
            db.delete(task)
            db.commit()
            logger.info("Task %s deleted", task_id)
        else:
            logger.debug("Task %s already absent", task_id)
    return True
