"""Strict Pydantic schemas for tool arguments."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MESSAGE_DESCRIPTION = (
    "Short message to the user describing what you are doing and why. "
    "Written in first person."
)


class StrictModel(BaseModel):
    """Base model for strict schema validation."""

    model_config = ConfigDict(extra="forbid")


class TerminalArgs(StrictModel):
    input: str = Field(description="Command to run in the terminal of the container.")
    message: str = Field(description=MESSAGE_DESCRIPTION)


BrowserAction = Literal["read", "url"]


class BrowserArgs(StrictModel):
    url: str = Field(description="URL of the page to open.")
    action: BrowserAction = Field(
        description="'read' returns the page content, 'url' returns the links found on the page."
    )
    message: str = Field(description=MESSAGE_DESCRIPTION)


CodeAction = Literal["read_file", "update_file"]


class CodeArgs(StrictModel):
    action: CodeAction = Field(description="Whether to read a file or replace its content.")
    content: str = Field(description="New file content. Ignored when reading.")
    path: str = Field(description="Path of the file inside the container.")
    message: str = Field(description=MESSAGE_DESCRIPTION)


class AskArgs(StrictModel):
    input: str = Field(description="Question to ask the user.")
    message: str = Field(description=MESSAGE_DESCRIPTION)


class DoneArgs(StrictModel):
    message: str = Field(description=MESSAGE_DESCRIPTION)


class LenientAskArgs(BaseModel):
    """`ask` argument shape used to read any native tool call.

    Models tend to put a `message` next to the real arguments whatever tool
    they call. Both fields are optional and unknown fields are kept, so the
    decoded object re-serializes to the arguments the model sent.
    A `null` field reads as an empty string.
    """

    model_config = ConfigDict(extra="allow")

    input: str = ""
    message: str = ""

    @field_validator("input", "message", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return "" if value is None else value
