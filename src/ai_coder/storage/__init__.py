"""Storage backends and models."""

from ai_coder.storage.base import TaskStorage
from ai_coder.storage.memory import InMemoryTaskStorage
from ai_coder.storage.models import Task, TaskStatus
from ai_coder.storage.postgres import PostgresTaskStorage

__all__ = [
    "InMemoryTaskStorage",
    "PostgresTaskStorage",
    "Task",
    "TaskStatus",
    "TaskStorage",
]
