from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Protocol, Sequence
from urllib import error, request

from pydantic import ValidationError

from ai_coder.llm.types import ChatMessage, Completion, CompletionChoice, ToolCall

logger = logging.getLogger(__name__)


class LLMRequestError(RuntimeError):
    """Raised when a completion request cannot produce a usable response."""


class ChatCompletionClient(Protocol):
    """Interface for a single chat completion round-trip."""

    def complete(
        self,
        *,
        messages: Sequence[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> Completion: ...


class OpenAIChatCompletionsClient:
    """Client for the chat completions REST API.

    Works against OpenAI and any server exposing the same `/chat/completions`
    route, such as Ollama. An empty ``api_key`` sends no Authorization header.
    """

    def __init__(
        self,
        *,
        model: str,
        base_url: str = "https://api.openai.com/v1",
        api_key: str = "",
        timeout_s: float = 60.0,
        max_retries: int = 1,
        backoff_s: float = 0.2,
    ) -> None:
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.max_retries = max(0, max_retries)
        self.backoff_s = max(0.0, backoff_s)

    def complete(
        self,
        *,
        messages: Sequence[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> Completion:
        payload: dict[str, Any] = {
            "model": self.model,
            "temperature": 0,
            "messages": [message.to_payload() for message in messages],
        }
        if tools:
            payload["tools"] = tools
            if tool_choice:
                payload["tool_choice"] = tool_choice
        if response_format:
            payload["response_format"] = response_format

        response_json = self._request_with_retry(payload)
        return parse_completion(response_json)

    def _request_with_retry(self, payload: dict[str, Any]) -> dict[str, Any]:
        last_error: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                return self._request(payload)
            except LLMRequestError as exc:
                last_error = exc
                logger.warning(
                    "LLM request failed attempt=%d/%d model=%s reason=%s",
                    attempt + 1,
                    self.max_retries + 1,
                    self.model,
                    exc,
                )
                if attempt < self.max_retries and self.backoff_s > 0:
                    time.sleep(self.backoff_s)
        if last_error is None:
            raise LLMRequestError("LLM request failed with unknown error")
        raise last_error

    def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/chat/completions"
        if _trace_enabled():
            logger.warning(
                "LLM trace request model=%s url=%s messages=%d tools=%d",
                self.model,
                url,
                len(payload["messages"]),
                len(payload.get("tools", [])),
            )
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        req = request.Request(
            url=url,
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
            headers=headers,
        )
        try:
            with request.urlopen(req, timeout=self.timeout_s) as response:
                body = response.read().decode("utf-8")
        except error.HTTPError as exc:
            raw_error = exc.read().decode("utf-8", errors="replace")
            raise LLMRequestError(
                f"LLM request failed with status {exc.code}: {raw_error[:400]}"
            ) from exc
        except error.URLError as exc:
            raise LLMRequestError(f"LLM request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise LLMRequestError(f"LLM request timed out after {self.timeout_s:.1f}s") from exc

        if _trace_enabled():
            logger.warning("LLM trace response model=%s status=ok", self.model)
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise LLMRequestError("LLM returned non-JSON response") from exc


def parse_completion(response_json: Any) -> Completion:
    """Normalize a raw chat completions response.

    Choices without a message still produce an empty choice so callers see
    the same number of choices the server returned.
    """
    if not isinstance(response_json, dict):
        raise LLMRequestError("LLM returned malformed response")
    raw_choices = response_json.get("choices") or []
    if not isinstance(raw_choices, list):
        raise LLMRequestError("LLM returned malformed response")
    choices: list[CompletionChoice] = []
    for raw_choice in raw_choices:
        if not isinstance(raw_choice, dict):
            continue
        message = raw_choice.get("message") or {}
        if not isinstance(message, dict):
            raise LLMRequestError("LLM returned malformed response")
        try:
            tool_calls = [
                ToolCall.model_validate(_normalize_tool_call(item))
                for item in message.get("tool_calls") or []
                if isinstance(item, dict)
            ]
        except ValidationError as exc:
            raise LLMRequestError(f"LLM returned malformed tool calls: {exc}") from exc
        choices.append(
            CompletionChoice(
                content=_content_text(message.get("content")),
                tool_calls=tool_calls,
                finish_reason=raw_choice.get("finish_reason"),
            )
        )
    return Completion(choices=choices)


def _normalize_tool_call(item: dict[str, Any]) -> dict[str, Any]:
    raw_function = item.get("function")
    function = dict(raw_function) if isinstance(raw_function, dict) else {}
    arguments = function.get("arguments")
    # Some OpenAI-compatible servers send decoded arguments.
    if isinstance(arguments, dict):
        function["arguments"] = json.dumps(arguments)
    elif arguments is None:
        function["arguments"] = ""
    return {
        "id": item.get("id") or "",
        "type": "function",
        "function": function,
    }


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        segments: list[str] = []
        for item in content:
            if isinstance(item, dict):
                text = item.get("text")
                if isinstance(text, str):
                    segments.append(text)
        return "".join(segments)
    return ""


def _trace_enabled() -> bool:
    return os.getenv("AI_CODER_LLM_TRACE", "0").strip() == "1"
