from . import task_service
from .errors import TaskError, TaskNotFoundError, TaskValidationError

__all__ = ["task_service", "TaskError", "TaskNotFoundError", "TaskValidationError"]
