"""Provider interface shared by the LLM backends."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Protocol, Sequence

from ai_coder.llm.client import ChatCompletionClient, LLMRequestError
from ai_coder.llm.types import ChatMessage, Completion
from ai_coder.providers.messages import tasks_to_messages
from ai_coder.providers.prompts import agent_prompt, docker_image_prompt, summary_prompt
from ai_coder.providers.tasks import default_ask_task
from ai_coder.storage.models import Task

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when a provider cannot answer a summary or image request."""


class Provider(Protocol):
    """Capabilities every LLM backend offers to the agent loop."""

    name: str

    def summary(self, query: str, n: int) -> str: ...

    def docker_image_name(self, task: str) -> str: ...

    def next_task(self, *, tasks: Sequence[Task], docker_image: str) -> Task: ...


class ChatProvider(ABC):
    """Provider backed by a chat completions client.

    Subclasses decide how the next step is requested from the model and how
    the completion is turned into a task.
    """

    name = ""
    embedded_calls = False

    def __init__(self, *, client: ChatCompletionClient) -> None:
        self.client = client

    def summary(self, query: str, n: int) -> str:
        return self._complete_text(summary_prompt(query=query, n=n))

    def docker_image_name(self, task: str) -> str:
        text = self._complete_text(docker_image_prompt(task=task))
        return text.strip("`'\" \n").lower()

    def next_task(self, *, tasks: Sequence[Task], docker_image: str) -> Task:
        """Ask the model for the next step of the flow.

        Never raises: any failure yields a task asking the user how to proceed.
        """
        try:
            prompt = agent_prompt(docker_image=docker_image, embedded_calls=self.embedded_calls)
            messages = tasks_to_messages(tasks, prompt)
            completion = self.request_next(messages)
            return self.task_from_completion(completion)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Next task failed provider=%s reason=%s", self.name, exc)
            return default_ask_task("There was an error getting the next task")

    @abstractmethod
    def request_next(self, messages: list[ChatMessage]) -> Completion: ...

    @abstractmethod
    def task_from_completion(self, completion: Completion) -> Task: ...

    def _complete_text(self, prompt: str) -> str:
        try:
            completion = self.client.complete(messages=[ChatMessage.user(prompt)])
        except LLMRequestError as exc:
            raise ProviderError(f"{self.name} request failed: {exc}") from exc

        text = completion.text.strip()
        if not text:
            raise ProviderError(f"{self.name} returned an empty response")
        return text
