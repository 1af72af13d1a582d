"""In-memory storage backend for tests and local runs."""

from __future__ import annotations

from datetime import UTC, datetime

from ai_coder.storage.models import Task, TaskStatus


class InMemoryTaskStorage:
    """Keeps tasks in insertion order, ids assigned from a counter."""

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._next_id = 1

    def migrate(self) -> None:
        return None

    def list_tasks(self, flow_id: int) -> list[Task]:
        return [
            task.model_copy(deep=True)
            for task in self._tasks.values()
            if task.flow_id == flow_id
        ]

    def get_task(self, task_id: int) -> Task | None:
        task = self._tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    def create_task(self, task: Task) -> Task:
        now = datetime.now(UTC)
        record = task.model_copy(
            update={"id": self._next_id, "created_at": now, "updated_at": now},
            deep=True,
        )
        self._tasks[record.id] = record
        self._next_id += 1
        return record.model_copy(deep=True)

    def update_task(
        self,
        task_id: int,
        *,
        status: TaskStatus,
        results: str | None,
    ) -> Task:
        current = self._tasks.get(task_id)
        if current is None:
            raise KeyError(f"Task {task_id} does not exist")
        updated = current.model_copy(
            update={
                "status": status,
                "results": results,
                "updated_at": datetime.now(UTC),
            }
        )
        self._tasks[task_id] = updated
        return updated.model_copy(deep=True)
