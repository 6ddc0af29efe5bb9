"""Build the configured LLM provider."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheet_flashcards.config import Settings
    from sheet_flashcards.providers.base import LLMProvider

_log = logging.getLogger("sheet_flashcards.llm")

HOSTED_PROVIDERS = ("gemini", "openai", "anthropic")


def get_llm(settings: Settings) -> LLMProvider | None:
    """Return a provider for *settings*, or ``None`` when no API key is set.

    A missing key for a hosted provider is a normal setup (quizzes are then
    generated locally), so it is logged rather than raised.
    """
    provider = settings.llm_provider
    if provider == "ollama":
        from sheet_flashcards.providers.llm_ollama import OllamaProvider
        return OllamaProvider(base_url=settings.ollama_url, model=settings.llm_model)
    if provider not in HOSTED_PROVIDERS:
        raise ValueError(f"Unknown LLM provider: {provider}")

    api_key = settings.api_key()
    if not api_key:
        _log.info("No API key for %s, quizzes will be generated locally", provider)
        return None

    if provider == "gemini":
        from sheet_flashcards.providers.llm_gemini import GeminiProvider
        return GeminiProvider(api_key=api_key, model=settings.llm_model)
    elif provider == "openai":
        from sheet_flashcards.providers.llm_openai import OpenAIProvider
        return OpenAIProvider(api_key=api_key, model=settings.llm_model)
    from sheet_flashcards.providers.llm_anthropic import AnthropicProvider
    return AnthropicProvider(api_key=api_key, model=settings.llm_model)
