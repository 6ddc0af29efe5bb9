from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "llm_provider": "gemini",
    "llm_model": "gemini-3-flash-preview",
    "llm_temperature": 0.7,
    "ollama_url": "http://localhost:11434",
    "quiz_size": 10,
    "content_header": "공부내용",
    "summary_header": "뉴스요약",
}

# Environment variables holding each hosted provider's credential, in lookup order.
API_KEY_ENV = {
    "gemini": ("GEMINI_API_KEY", "API_KEY"),
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
}


@dataclass
class Settings:
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    llm_temperature: float = DEFAULTS["llm_temperature"]
    ollama_url: str = DEFAULTS["ollama_url"]
    quiz_size: int = DEFAULTS["quiz_size"]
    content_header: str = DEFAULTS["content_header"]
    summary_header: str = DEFAULTS["summary_header"]

    def api_key(self) -> str | None:
        """Credential for the configured provider, read from the environment.

        Returns ``None`` when no key is set; callers treat that as "no AI",
        not as an error.
        """
        for name in API_KEY_ENV.get(self.llm_provider, ()):
            value = os.environ.get(name, "").strip()
            if value:
                return value
        return None

    def to_dict(self) -> dict:
        return {
            "llm_provider": self.llm_provider,
            "llm_model": self.llm_model,
            "llm_temperature": self.llm_temperature,
            "ollama_url": self.ollama_url,
            "quiz_size": self.quiz_size,
            "content_header": self.content_header,
            "summary_header": self.summary_header,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(
        json.dumps(settings.to_dict(), indent=4, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
