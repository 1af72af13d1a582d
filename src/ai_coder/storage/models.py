"""Storage models shared by providers, API and persistence backends."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

# Lifecycle states. The providers only ever create `in_progress` tasks.
TaskStatus = Literal["in_progress", "done", "error"]


class Task(BaseModel):
    """One agent action inside a flow.

    `type` is the tool name (`terminal`, `browser`, `code`, `ask`, `done`) or
    `input` for a turn submitted by the human. `tool_call_id` is only set when
    the task came from a native model tool call.
    """

    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    type: str | None = None
    status: TaskStatus | None = None
    args: str | None = None
    results: str | None = None
    message: str | None = None
    flow_id: int | None = None
    tool_call_id: str | None = None
