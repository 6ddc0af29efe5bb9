from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    @abstractmethod
    async def generate(
        self, prompt: str, temperature: float = 0.7, schema: dict | None = None
    ) -> str:
        """Return the raw response text.

        *schema* is a JSON Schema the response must follow; providers that
        support structured output pass it to the service, the others rely on
        the prompt alone.
        """
        ...

    @abstractmethod
    def name(self) -> str:
        ...
