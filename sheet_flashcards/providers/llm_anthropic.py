from __future__ import annotations

import json

from sheet_flashcards.providers.base import LLMProvider


class AnthropicProvider(LLMProvider):
    def __init__(self, api_key: str, model: str = "claude-sonnet-4-20250514"):
        import anthropic
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model

    async def generate(
        self, prompt: str, temperature: float = 0.7, schema: dict | None = None
    ) -> str:
        if schema is not None:
            prompt = (
                f"{prompt}\n\nRespond with JSON only, matching this schema:\n"
                f"{json.dumps(schema, ensure_ascii=False)}"
            )
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=4096,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return message.content[0].text

    def name(self) -> str:
        return f"anthropic/{self.model}"
