from __future__ import annotations

import logging
import time

import httpx

from sheet_flashcards.providers.base import LLMProvider

log = logging.getLogger("sheet_flashcards.llm")


class OllamaProvider(LLMProvider):
    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "qwen3:8b",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._transport = transport

    async def generate(
        self, prompt: str, temperature: float = 0.7, schema: dict | None = None
    ) -> str:
        log.info("── PROMPT (%s) ──\n%s", self.model, prompt)
        body: dict = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "think": False,
            "options": {"temperature": temperature},
        }
        if schema is not None:
            body["format"] = schema

        t0 = time.monotonic()
        async with httpx.AsyncClient(timeout=120.0, transport=self._transport) as client:
            resp = await client.post(f"{self.base_url}/api/generate", json=body)
            resp.raise_for_status()
            data = resp.json()
        elapsed = time.monotonic() - t0
        response = data["response"]
        tokens = data.get("eval_count", "?")
        log.info("── RESPONSE (%.1fs, %s tokens) ──\n%s", elapsed, tokens, response)
        return response

    def name(self) -> str:
        return f"ollama/{self.model}"
