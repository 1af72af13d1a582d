"""PostgreSQL-backed task storage with automatic table migration."""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import Any

from ai_coder.storage.models import Task, TaskStatus


class PostgresTaskStorage:
    """Persist flow tasks in PostgreSQL."""

    def __init__(self, database_url: str) -> None:
        if not database_url:
            raise ValueError("AI_CODER_DATABASE_URL is required")
        self.database_url = database_url
        self._lock = threading.Lock()
        self._psycopg, self._dict_row = self._load_psycopg()

    def migrate(self) -> None:
        with self._lock, self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    id BIGSERIAL PRIMARY KEY,
                    created_at TIMESTAMPTZ,
                    updated_at TIMESTAMPTZ,
                    type TEXT,
                    status TEXT,
                    args TEXT DEFAULT '{}',
                    results TEXT,
                    message TEXT,
                    flow_id BIGINT,
                    tool_call_id TEXT
                )
                """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_tasks_flow_id
                ON tasks(flow_id)
                """)
            conn.commit()

    def list_tasks(self, flow_id: int) -> list[Task]:
        with self._lock, self._connect() as conn:
            rows = conn.execute(
                """
                SELECT *
                FROM tasks
                WHERE flow_id = %s
                ORDER BY id ASC
                """,
                (flow_id,),
            ).fetchall()
        return [self._row_to_task(row) for row in rows]

    def get_task(self, task_id: int) -> Task | None:
        with self._lock, self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = %s",
                (task_id,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    def create_task(self, task: Task) -> Task:
        now = datetime.now(tz=UTC)
        with self._lock, self._connect() as conn:
            row = conn.execute(
                """
                INSERT INTO tasks (
                    created_at,
                    updated_at,
                    type,
                    status,
                    args,
                    results,
                    message,
                    flow_id,
                    tool_call_id
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING *
                """,
                (
                    now,
                    now,
                    task.type,
                    task.status,
                    task.args,
                    task.results,
                    task.message,
                    task.flow_id,
                    task.tool_call_id,
                ),
            ).fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("Failed to persist task")
        return self._row_to_task(row)

    def update_task(
        self,
        task_id: int,
        *,
        status: TaskStatus,
        results: str | None,
    ) -> Task:
        with self._lock, self._connect() as conn:
            row = conn.execute(
                """
                UPDATE tasks
                SET status = %s,
                    results = %s,
                    updated_at = %s
                WHERE id = %s
                RETURNING *
                """,
                (status, results, datetime.now(tz=UTC), task_id),
            ).fetchone()
            conn.commit()
        if row is None:
            raise KeyError(f"Task {task_id} does not exist")
        return self._row_to_task(row)

    def _connect(self) -> Any:
        return self._psycopg.connect(self.database_url, row_factory=self._dict_row)

    @staticmethod
    def _load_psycopg() -> tuple[Any, Any]:
        try:
            import psycopg
            from psycopg.rows import dict_row
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError(
                "PostgreSQL storage requires psycopg. "
                'Install with: python -m pip install "psycopg[binary]>=3.2,<4.0"'
            ) from exc
        return psycopg, dict_row

    @staticmethod
    def _row_to_task(row: Any) -> Task:
        return Task(
            id=int(row["id"]),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            type=row.get("type"),
            status=row.get("status"),
            args=row.get("args"),
            results=row.get("results"),
            message=row.get("message"),
            flow_id=row.get("flow_id"),
            tool_call_id=row.get("tool_call_id"),
        )
