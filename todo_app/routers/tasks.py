from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from ..database import get_db
from ..schemas.task import DeleteResult, Task as TaskSchema, TaskCreate, TaskDelete, TaskToggle, TaskUpdate
from ..services import TaskNotFoundError, TaskValidationError, task_service

router = APIRouter()


def _not_found(error: TaskNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


def _invalid(error: TaskValidationError) -> HTTPException:
    # Same shape as FastAPI's own request validation errors
    return HTTPException(
        status_code=422,
        detail=[{"loc": ["body", error.field], "msg": error.message, "type": "value_error"}],
    )


@router.post("/createTask", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db)):
    """Create a new task."""
    try:
        return task_service.create_task(db, title=task.title, description=task.description)
    except TaskValidationError as e:
        raise _invalid(e)


@router.get("/listTasks", response_model=List[TaskSchema])
def list_tasks(db: Session = Depends(get_db)):
    """Every task, oldest first."""
    return task_service.list_tasks(db)


@router.post("/toggleTask", response_model=TaskSchema)
def toggle_task(payload: TaskToggle, db: Session = Depends(get_db)):
    """Set a task's completion state."""
    try:
        return task_service.toggle_task(db, payload.id, payload.completed)
    except TaskNotFoundError as e:
        raise _not_found(e)


@router.post("/updateTask", response_model=TaskSchema)
def update_task(payload: TaskUpdate, db: Session = Depends(get_db)):
    """Update the fields present in the request; others are left as they are."""
    try:
        return task_service.update_task(db, payload.id, **payload.changes())
    except TaskNotFoundError as e:
        raise _not_found(e)
    except TaskValidationError as e:
        raise _invalid(e)


@router.post("/deleteTask", response_model=DeleteResult)
def delete_task(payload: TaskDelete, db: Session = Depends(get_db)):
    """Delete a task.  Succeeds whether or not the task existed."""
    task_service.delete_task(db, payload.id)
    return DeleteResult(success=True)
