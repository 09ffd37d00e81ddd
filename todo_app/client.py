"""
Client side of the task procedures.

``TaskClient`` calls the five procedures over HTTP and returns parsed
``Task`` schemas.  ``TaskListState`` is the list a presentation layer
renders; it is immutable, so each helper below takes the current state
and returns the next one instead of mutating a shared list.

Usage::

    client = TaskClient.connect("http://localhost:8000")
    state = load_tasks(client)
    state = add_task(client, state, "Buy milk")
    state = set_completed(client, state, state.tasks[0].id, True)
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .schemas.task import Task
from .services.errors import TaskNotFoundError, TaskValidationError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"title", "description", "completed"})


class TaskClient:
    """Calls the task procedures exposed under ``/api``."""

    def __init__(self, http: httpx.Client, prefix: str = "/api"):
        self._http = http
        self._prefix = prefix.rstrip("/")

    @classmethod
    def connect(cls, base_url: str, timeout: float = 10.0) -> "TaskClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def close(self) -> None:
        self._http.close()

    def _call(self, method: str, procedure: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        response = self._http.request(method, f"{self._prefix}/{procedure}", json=payload)
        if response.status_code == 404 and payload and "id" in payload:
            raise TaskNotFoundError(payload["id"])
        if response.status_code == 422:
            raise _validation_error(response)
        response.raise_for_status()
        return response.json()

    def create_task(self, title: str, description: Optional[str] = None) -> Task:
        data = self._call("POST", "createTask", {"title": title, "description": description})
        return Task.model_validate(data)

    def list_tasks(self) -> List[Task]:
        return [Task.model_validate(item) for item in self._call("GET", "listTasks")]

    def toggle_task(self, task_id: int, completed: bool) -> Task:
        data = self._call("POST", "toggleTask", {"id": task_id, "completed": completed})
        return Task.model_validate(data)

    def update_task(self, task_id: int, **changes: Any) -> Task:
        """Send only the given fields; ``description=None`` clears the description."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown task fields: {', '.join(sorted(unknown))}")
        data = self._call("POST", "updateTask", {"id": task_id, **changes})
        return Task.model_validate(data)

    def delete_task(self, task_id: int) -> bool:
        return bool(self._call("POST", "deleteTask", {"id": task_id})["success"])


def _validation_error(response: httpx.Response) -> TaskValidationError:
    detail = response.json().get("detail")
    if isinstance(detail, list) and detail:
        first = detail[0]
        loc = first.get("loc") or ["body"]
        return TaskValidationError(str(loc[-1]), first.get("msg", "invalid value"))
    return TaskValidationError("body", str(detail))


@dataclass(frozen=True)
class TaskListState:
    """Snapshot of the task list as last seen by the client."""

    tasks: Tuple[Task, ...] = ()

    @classmethod
    def loaded(cls, tasks: List[Task]) -> "TaskListState":
        return cls(tasks=tuple(tasks))

    def with_created(self, task: Task) -> "TaskListState":
        return replace(self, tasks=self.tasks + (task,))

    def with_updated(self, task: Task) -> "TaskListState":
        return replace(self, tasks=tuple(task if t.id == task.id else t for t in self.tasks))

    def without(self, task_id: int) -> "TaskListState":
        return replace(self, tasks=tuple(t for t in self.tasks if t.id != task_id))

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    @property
    def remaining_count(self) -> int:
        return len(self.tasks) - self.completed_count


def load_tasks(client: TaskClient) -> TaskListState:
    return TaskListState.loaded(client.list_tasks())


def add_task(
    client: TaskClient,
    state: TaskListState,
    title: str,
    description: Optional[str] = None,
) -> TaskListState:
    """Create a task from form input.

    A blank title is ignored and an empty description is sent as no
    description.
    """
    if not title.strip():
        return state
    task = client.create_task(title, description or None)
    logger.debug("Created task %s", task.id)
    return state.with_created(task)


def set_completed(client: TaskClient, state: TaskListState, task_id: int, completed: bool) -> TaskListState:
    return state.with_updated(client.toggle_task(task_id, completed))


def edit_task(client: TaskClient, state: TaskListState, task_id: int, **changes: Any) -> TaskListState:
    return state.with_updated(client.update_task(task_id, **changes))


def remove_task(client: TaskClient, state: TaskListState, task_id: int) -> TaskListState:
    client.delete_task(task_id)
    return state.without(task_id)
