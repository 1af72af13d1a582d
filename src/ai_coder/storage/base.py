"""Storage interface for flow task history."""

from __future__ import annotations

from typing import Protocol

from ai_coder.storage.models import Task, TaskStatus


class TaskStorage(Protocol):
    def migrate(self) -> None: ...

    def list_tasks(self, flow_id: int) -> list[Task]: ...

    def get_task(self, task_id: int) -> Task | None: ...

    def create_task(self, task: Task) -> Task: ...

    def update_task(
        self,
        task_id: int,
        *,
        status: TaskStatus,
        results: str | None,
    ) -> Task: ...
