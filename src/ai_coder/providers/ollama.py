"""Ollama backend: the model answers with a call embedded in JSON text."""

from __future__ import annotations

from ai_coder.config.settings import Settings
from ai_coder.llm.client import OpenAIChatCompletionsClient
from ai_coder.llm.types import ChatMessage, Completion
from ai_coder.providers.base import ChatProvider
from ai_coder.providers.tasks import safe_task_from_text
from ai_coder.storage.models import Task


class OllamaProvider(ChatProvider):
    name = "ollama"
    embedded_calls = True

    @classmethod
    def from_settings(cls, settings: Settings) -> OllamaProvider:
        # Local server, no API key.
        return cls(
            client=OpenAIChatCompletionsClient(
                model=settings.ollama_model,
                base_url=settings.ollama_base_url,
                timeout_s=settings.llm_timeout_s,
                max_retries=settings.llm_max_retries,
                backoff_s=settings.llm_backoff_s,
            )
        )

    def request_next(self, messages: list[ChatMessage]) -> Completion:
        return self.client.complete(
            messages=messages,
            response_format={"type": "json_object"},
        )

    def task_from_completion(self, completion: Completion) -> Task:
        return safe_task_from_text(completion.text)
