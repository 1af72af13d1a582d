"""Construction of new tasks from model output.

Two origins are supported: a call the model embedded in plain text, and a
native tool call from a chat completion. Both produce an `in_progress` task;
failures either raise a `TaskConstructionError` or, through the `safe_*`
wrappers, degrade to a task asking the user what to do next.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from ai_coder.llm.types import CompletionChoice
from ai_coder.providers.calls import decode_tool_args, parse_call
from ai_coder.storage.models import Task
from ai_coder.tools.schemas import LenientAskArgs

logger = logging.getLogger(__name__)

ASK_SUFFIX = "What should I do next?"


class TaskConstructionError(RuntimeError):
    """Model output could not be turned into a task."""


class CallParseError(TaskConstructionError):
    pass


class ArgsSerializationError(TaskConstructionError):
    pass


class NoChoicesError(TaskConstructionError):
    pass


class NoToolCallsError(TaskConstructionError):
    pass


class EmptyToolNameError(TaskConstructionError):
    pass


class ToolArgsDecodeError(TaskConstructionError):
    pass


def default_ask_task(message: str) -> Task:
    """Task the agent issues itself when it cannot determine the next step."""
    return Task(
        type="ask",
        status="in_progress",
        args="{}",
        message=f"{message}. {ASK_SUFFIX}",
    )


def dump_args(args: dict[str, Any]) -> str:
    try:
        return json.dumps(args, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ArgsSerializationError(f"failed to marshal args: {exc}") from exc


def task_from_text(text: str) -> Task:
    call = parse_call(text)
    if call is None:
        raise CallParseError(f"can't unmarshal call {text!r}")

    try:
        args = dump_args(call.input)
    except ArgsSerializationError as exc:
        logger.warning("Failed to marshal call args, asking user: %s", exc)
        return default_ask_task("There was an error running the terminal command")

    # Models sometimes leave the message empty.
    return Task(
        type=call.tool,
        status="in_progress",
        args=args,
        message=call.message or args,
    )


def task_from_tool_calls(choices: Sequence[CompletionChoice]) -> Task:
    """Build a task from the first tool call of the first choice.

    Further choices and tool calls are ignored.
    """
    if not choices:
        raise NoChoicesError("no choices found, asking user")

    tool_calls = choices[0].tool_calls
    if not tool_calls:
        raise NoToolCallsError("no tool calls found, asking user")

    tool_call = tool_calls[0]
    name = tool_call.function.name
    if not name:
        raise EmptyToolNameError("no tool name found, asking user")

    raw_args = tool_call.function.arguments
    decoded = decode_tool_args(raw_args, LenientAskArgs)
    if not decoded.ok:
        raise ToolArgsDecodeError(decoded.error)

    params = decoded.args
    sent = params.model_fields_set | set(params.model_extra or {})
    args = dump_args({key: value for key, value in params.model_dump().items() if key in sent})
    return Task(
        type=name,
        status="in_progress",
        args=args,
        message=params.message or raw_args,
        tool_call_id=tool_call.id,
    )


def safe_task_from_text(text: str) -> Task:
    try:
        return task_from_text(text)
    except TaskConstructionError as exc:
        logger.warning("Falling back to ask task reason=%s", exc)
        return default_ask_task("There was an error parsing the model response")


def safe_task_from_tool_calls(choices: Sequence[CompletionChoice]) -> Task:
    try:
        return task_from_tool_calls(choices)
    except TaskConstructionError as exc:
        logger.warning("Falling back to ask task reason=%s", exc)
        return default_ask_task("There was an error getting the next task")
