from __future__ import annotations

from sheet_flashcards.providers.base import LLMProvider


class OpenAIProvider(LLMProvider):
    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        import openai
        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.model = model

    async def generate(
        self, prompt: str, temperature: float = 0.7, schema: dict | None = None
    ) -> str:
        kwargs = {}
        if schema is not None:
            # Structured outputs need an object at the root
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "quiz",
                    "schema": {
                        "type": "object",
                        "properties": {"questions": schema},
                        "required": ["questions"],
                    },
                },
            }
        resp = await self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return resp.choices[0].message.content or ""

    def name(self) -> str:
        return f"openai/{self.model}"
