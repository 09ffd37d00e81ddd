class TaskError(Exception):
    """Base class for task operation failures reported to callers."""


class TaskNotFoundError(TaskError, LookupError):
    """No task exists with the requested id."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} not found")


class TaskValidationError(TaskError, ValueError):
    """A request field violates a task constraint."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
