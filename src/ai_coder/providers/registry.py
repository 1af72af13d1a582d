"""Provider lookup by identifier."""

from __future__ import annotations

from typing import Callable, Literal

from ai_coder.config.settings import Settings, get_settings
from ai_coder.providers.base import Provider
from ai_coder.providers.ollama import OllamaProvider
from ai_coder.providers.openai import OpenAIProvider

ProviderType = Literal["openai", "ollama"]
ProviderFactory = Callable[[Settings], Provider]


class UnknownProviderError(ValueError):
    """Raised for a provider identifier with no registered backend."""


_PROVIDERS: dict[str, ProviderFactory] = {
    "openai": OpenAIProvider.from_settings,
    "ollama": OllamaProvider.from_settings,
}


def register_provider(name: str, factory: ProviderFactory) -> None:
    _PROVIDERS[name] = factory


def list_providers() -> list[str]:
    return sorted(_PROVIDERS)


def provider_factory(name: str, *, settings: Settings | None = None) -> Provider:
    factory = _PROVIDERS.get(name)
    if factory is None:
        raise UnknownProviderError(f"unknown provider: {name}")
    return factory(settings or get_settings())
