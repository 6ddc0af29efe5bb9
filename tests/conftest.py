"""Shared test fixtures."""
from __future__ import annotations

import json

import pytest

from sheet_flashcards.models import QuizItem, Record


class FakeLLM:
    """Simple fake LLM that avoids AsyncMock's `name` attribute issue."""

    def __init__(self, responses=None, error: Exception | None = None):
        self._responses = responses or [""]
        self._error = error
        self._call_count = 0
        self.prompts: list[str] = []
        self.schemas: list[dict | None] = []

    async def generate(self, prompt: str, temperature: float = 0.7, schema: dict | None = None) -> str:
        self.prompts.append(prompt)
        self.schemas.append(schema)
        idx = min(self._call_count, len(self._responses) - 1)
        self._call_count += 1
        if self._error is not None:
            raise self._error
        return self._responses[idx]

    def name(self) -> str:
        return "fake-llm"

    @property
    def call_count(self):
        return self._call_count


def ai_response(records: list[Record], wrap: str = "") -> str:
    """A well-formed LLM answer covering *records*, optionally fenced."""
    payload = json.dumps([
        {
            "word": r.term,
            "correctAnswer": r.definition,
            "options": [r.definition, f"{r.term}-x", f"{r.term}-y", f"{r.term}-z"],
            "explanation": f"I ate an {r.term}.",
        }
        for r in records
    ], ensure_ascii=False)
    if wrap == "fence":
        return f"```json\n{payload}\n```"
    return payload


@pytest.fixture
def sample_records():
    """A small pool of Records for quiz tests."""
    return [
        Record("r1", "apple", "사과"),
        Record("r2", "banana", "바나나"),
        Record("r3", "grape", "포도"),
        Record("r4", "peach", "복숭아"),
        Record("r5", "pear", "배"),
    ]


@pytest.fixture
def large_pool():
    return [Record(f"r{i}", f"word{i}", f"뜻{i}") for i in range(25)]


@pytest.fixture
def sample_quiz_item():
    return QuizItem(
        id="q1",
        term="apple",
        correct_answer="사과",
        options=["바나나", "사과", "포도", "배"],
        explanation="An apple a day.",
    )


@pytest.fixture
def sheet_csv_content():
    """Minimal export of the study sheet, with extra columns around the targets."""
    return (
        "날짜,분류,공부내용,뉴스요약,메모\r\n"
        "2024-05-01,news,apple,사과,\r\n"
        "2024-05-02,news,banana,\"바나나, 노란 과일\",memo\r\n"
        "\r\n"
        "2024-05-03,news,,빈 단어,\r\n"
        "2024-05-04,news,grape,포도,\r\n"
    )
