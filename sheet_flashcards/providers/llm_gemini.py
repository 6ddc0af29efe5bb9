from __future__ import annotations

import logging
import time

from sheet_flashcards.providers.base import LLMProvider

log = logging.getLogger("sheet_flashcards.llm")


class GeminiProvider(LLMProvider):
    def __init__(self, api_key: str, model: str = "gemini-3-flash-preview"):
        from google import genai
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def generate(
        self, prompt: str, temperature: float = 0.7, schema: dict | None = None
    ) -> str:
        from google.genai import types

        options: dict = {"temperature": temperature}
        if schema is not None:
            options["response_mime_type"] = "application/json"
            options["response_json_schema"] = schema
        config = types.GenerateContentConfig(**options)

        log.info("── PROMPT (%s) ──\n%s", self.model, prompt)
        t0 = time.monotonic()
        resp = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=config,
        )
        text = resp.text or ""
        log.info("── RESPONSE (%.1fs) ──\n%s", time.monotonic() - t0, text)
        return text

    def name(self) -> str:
        return f"gemini/{self.model}"
