"""Decoding of model tool calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, ValidationError

TModel = TypeVar("TModel", bound=BaseModel)
logger = logging.getLogger(__name__)


class Call(BaseModel):
    """A tool call the model embedded in plain text."""

    tool: str = ""
    input: dict[str, str] = Field(default_factory=dict)
    message: str = ""


@dataclass(frozen=True)
class ArgsDecode(Generic[TModel]):
    """Outcome of decoding tool-call arguments: either `args` or `error`."""

    args: TModel | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.args is not None


def parse_call(text: str) -> Call | None:
    """Decode `{"tool": ..., "input": {...}, "message": ...}` from model text.

    Returns None when the text is not such an object or names no tool.
    """
    logger.debug("Unmarshalling tool call: %s", text)
    try:
        call = Call.model_validate_json(text)
    except ValidationError as exc:
        logger.warning("Failed to unmarshal tool call: %s", exc)
        return None

    if not call.tool:
        logger.warning("Tool call has no tool name: %s", text)
        return None

    logger.debug("Unmarshalled tool call tool=%s", call.tool)
    return call


def decode_tool_args(raw: str, model: type[TModel]) -> ArgsDecode[TModel]:
    """Validate a native tool call's JSON argument string against `model`.

    A bare `null` decodes as an empty object.
    """
    if raw.strip() == "null":
        raw = "{}"
    try:
        return ArgsDecode(args=model.model_validate_json(raw))
    except ValidationError as exc:
        return ArgsDecode(error=f"failed to unmarshal args: {exc}")
