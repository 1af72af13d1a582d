"""Translation of a flow's task history into conversation turns."""

from __future__ import annotations

from typing import Iterable

from ai_coder.llm.types import ChatMessage
from ai_coder.storage.models import Task


def tasks_to_messages(tasks: Iterable[Task], prompt: str) -> list[ChatMessage]:
    """Render `tasks` in order after a single system turn carrying `prompt`.

    - `input` tasks become a user turn. Its content is the system prompt,
      not the task message; kept as is until the intent is settled.
    - tasks with a tool call id become the assistant tool call followed by
      the tool result (empty while the executor has not reported back).
    - `ask` tasks without a tool call id were issued by the agent itself
      after an error and become a plain assistant turn.
    - anything else is skipped.
    """
    messages = [ChatMessage.system(prompt)]

    for task in tasks:
        task_type = task.type or ""

        if task_type == "input":
            messages.append(ChatMessage.user(prompt))

        if task.tool_call_id:
            messages.append(
                ChatMessage.assistant_tool_call(
                    call_id=task.tool_call_id,
                    name=task_type,
                    arguments=task.args or "",
                )
            )
            messages.append(
                ChatMessage.tool_result(
                    call_id=task.tool_call_id,
                    name=task_type,
                    content=task.results or "",
                )
            )

        if task_type == "ask" and not task.tool_call_id:
            messages.append(ChatMessage.assistant(task.message or ""))

    return messages
