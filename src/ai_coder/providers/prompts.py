"""Prompt templates sent to the model."""

from __future__ import annotations

import json

from ai_coder.tools.catalog import TOOLS

AGENT_PROMPT = (
    "You are an autonomous software engineer working inside a Docker container "
    "built from the image '{docker_image}'. The user gives you a task and you "
    "complete it one step at a time. Every step is exactly one tool call: run "
    "terminal commands, read or update code files, browse the web, ask the user "
    "when something is unclear, and call 'done' once everything is finished. "
    "Always explain what you are doing in the 'message' argument. Never repeat "
    "a command that already failed without changing it."
)

EMBEDDED_CALL_PROMPT = (
    "\n\nYou have no native tool calling. Reply with a single JSON object and "
    'nothing else, shaped as {{"tool": "<tool name>", "input": {{"<argument>": '
    '"<string value>"}}, "message": "<message to the user>"}}. Available tools '
    "with their argument schemas:\n{tools}"
)

SUMMARY_PROMPT = (
    "Summarize the following text in at most {n} words. "
    "Return only the summary, without quotes or punctuation at the end.\n\n{query}"
)

DOCKER_IMAGE_PROMPT = (
    "Pick the most suitable Docker image from Docker Hub to complete the task "
    "below. Prefer official images and explicit tags, for example 'node:20' or "
    "'python:3.12'. Return only the image name, nothing else.\n\nTask: {task}"
)


def agent_prompt(*, docker_image: str, embedded_calls: bool = False) -> str:
    prompt = AGENT_PROMPT.format(docker_image=docker_image)
    if embedded_calls:
        prompt += EMBEDDED_CALL_PROMPT.format(tools=_tools_description())
    return prompt


def summary_prompt(*, query: str, n: int) -> str:
    return SUMMARY_PROMPT.format(query=query, n=n)


def docker_image_prompt(*, task: str) -> str:
    return DOCKER_IMAGE_PROMPT.format(task=task)


def _tools_description() -> str:
    lines = []
    for tool in TOOLS:
        schema = json.dumps(tool.parameters.get("properties", {}), ensure_ascii=True)
        lines.append(f"- {tool.name}: {tool.description}. Arguments: {schema}")
    return "\n".join(lines)
