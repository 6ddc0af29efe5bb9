"""Assemble multiple-choice quizzes from a card pool.

Questions come from the LLM when one is configured.  Without a provider, or
when the call fails or returns something unusable, the quiz is built locally
from the pool itself: the other cards' definitions serve as distractors.
"""
from __future__ import annotations

import json
import logging
import random
import re
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sheet_flashcards.models import QuizItem
from sheet_flashcards.prompts import QUIZ_SCHEMA, build_quiz_prompt

if TYPE_CHECKING:
    from sheet_flashcards.models import Record
    from sheet_flashcards.providers.base import LLMProvider

_log = logging.getLogger("sheet_flashcards.quiz")

QUIZ_SIZE = 10
OPTION_COUNT = 4
DISTRACTOR_COUNT = OPTION_COUNT - 1

PLACEHOLDER_OPTION = "오답 {n}"
FALLBACK_EXPLANATION = "AI 생성을 불러오지 못했습니다. 카드 데이터로 만든 퀴즈입니다."


def _extract_json(text: str) -> list | dict | None:
    """Extract a JSON array (or object) from an LLM response.

    Strips ``<think>`` blocks and code fences, then tries the whole text.
    Falls back to balanced ``[…]``/``{…}`` blocks, last one first, since
    models sometimes draft partial JSON before the final answer.
    """
    text = re.sub(r"<think>.*?</think>", "", text, flags=re.DOTALL).strip()

    m = re.search(r"```(?:json)?\s*\n?(.*?)\s*\n?```", text, re.DOTALL)
    if m:
        text = m.group(1).strip()

    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        pass

    for candidate in reversed(_find_json_blocks(text)):
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, RecursionError):
            continue
    return None


def _find_json_blocks(text: str) -> list[str]:
    """Find balanced top-level ``[…]`` and ``{…}`` substrings in *text*."""
    closers = {"[": "]", "{": "}"}
    results: list[str] = []
    i = 0
    while i < len(text):
        if text[i] in closers:
            stack: list[str] = []
            in_str = False
            escape = False
            start = i
            for j in range(i, len(text)):
                ch = text[j]
                if escape:
                    escape = False
                    continue
                if ch == "\\":
                    escape = True
                    continue
                if ch == '"':
                    in_str = not in_str
                    continue
                if in_str:
                    continue
                if ch in closers:
                    stack.append(closers[ch])
                elif stack and ch == stack[-1]:
                    stack.pop()
                    if not stack:
                        results.append(text[start : j + 1])
                        i = j + 1
                        break
            else:
                # Unbalanced, skip this opening bracket
                i += 1
        else:
            i += 1
    return results


def _unwrap_items(data: list | dict | None) -> list | None:
    if isinstance(data, dict):
        data = data.get("questions")
    if isinstance(data, list):
        return data
    return None


def _match_record(
    unmatched: list[Record], word: str, answer: str
) -> Record | None:
    """Pick the not-yet-used record for *word*, preferring one whose definition is *answer*."""
    candidates = [r for r in unmatched if r.term == word]
    if not candidates:
        lowered = word.lower()
        candidates = [r for r in unmatched if r.term.lower() == lowered]
    for r in candidates:
        if r.definition == answer:
            return r
    return candidates[0] if candidates else None


def _validate_items(data: list, selected: list[Record]) -> tuple[list[QuizItem] | None, str | None]:
    """Validate generated questions against the cards they were built from.

    Returns ``(items, None)`` on success or ``(None, reason)`` on failure.
    A correct answer that drifted from the card definition is patched when
    the definition is among the options.
    """
    if len(data) != len(selected):
        return None, f"expected {len(selected)} questions, got {len(data)}"

    unmatched = list(selected)
    items: list[QuizItem] = []
    required = {"word", "correctAnswer", "options", "explanation"}
    for i, raw in enumerate(data):
        if not isinstance(raw, dict):
            return None, f"question[{i}]: expected object, got {type(raw).__name__}"
        missing = required - raw.keys()
        if missing:
            return None, f"question[{i}]: missing fields: {', '.join(sorted(missing))}"

        word, answer, explanation = raw["word"], raw["correctAnswer"], raw["explanation"]
        if not all(isinstance(v, str) for v in (word, answer, explanation)):
            return None, f"question[{i}]: word, correctAnswer and explanation must be strings"
        word, answer, explanation = word.strip(), answer.strip(), explanation.strip()
        if not explanation:
            return None, f"question[{i}]: empty explanation"

        options = raw["options"]
        if not isinstance(options, list) or len(options) != OPTION_COUNT:
            n = len(options) if isinstance(options, list) else type(options).__name__
            return None, f"question[{i}]: options must be list of {OPTION_COUNT} (got {n})"
        if not all(isinstance(o, str) and o.strip() for o in options):
            return None, f"question[{i}]: options must be non-empty strings"
        options = [o.strip() for o in options]
        if len(set(options)) != OPTION_COUNT:
            return None, f"question[{i}]: duplicate options"

        record = _match_record(unmatched, word, answer)
        if record is None:
            return None, f"question[{i}]: unknown word {word!r}"
        if record.definition not in options:
            return None, f"question[{i}]: options do not contain the definition of {record.term!r}"
        if answer != record.definition:
            _log.info("  question[%d]: correcting answer for %r", i, record.term)
        unmatched.remove(record)

        items.append(QuizItem(
            id=str(uuid.uuid4()),
            term=record.term,
            correct_answer=record.definition,
            options=options,
            explanation=explanation,
        ))
    return items, None


@dataclass
class QuizAssembler:
    """Build a quiz from a card pool.

    *llm* is ``None`` when no credential is configured; the quiz is then
    always generated locally.  *rng* drives sampling and shuffling.
    """

    llm: LLMProvider | None = None
    rng: random.Random | None = None
    quiz_size: int = QUIZ_SIZE
    temperature: float = 0.7

    def __post_init__(self):
        if self.rng is None:
            self.rng = random.Random()
        self.quiz_size = max(1, int(self.quiz_size))

    def select(self, pool: list[Record]) -> list[Record]:
        shuffled = list(pool)
        self.rng.shuffle(shuffled)
        return shuffled[: self.quiz_size]

    def fallback_item(self, record: Record, pool: list[Record]) -> QuizItem:
        candidates = [r.definition for r in pool if r.id != record.id]
        self.rng.shuffle(candidates)

        seen = {record.definition}
        distractors: list[str] = []
        for definition in candidates:
            if len(distractors) == DISTRACTOR_COUNT:
                break
            if definition not in seen:
                seen.add(definition)
                distractors.append(definition)

        n = 1
        while len(distractors) < DISTRACTOR_COUNT:
            placeholder = PLACEHOLDER_OPTION.format(n=n)
            n += 1
            if placeholder not in seen:
                seen.add(placeholder)
                distractors.append(placeholder)

        options = [record.definition, *distractors]
        self.rng.shuffle(options)
        return QuizItem(
            id=str(uuid.uuid4()),
            term=record.term,
            correct_answer=record.definition,
            options=options,
            explanation=FALLBACK_EXPLANATION,
        )

    def fallback_quiz(self, selected: list[Record], pool: list[Record]) -> list[QuizItem]:
        return [self.fallback_item(r, pool) for r in selected]

    async def generate(self, selected: list[Record]) -> list[QuizItem] | None:
        """Ask the LLM for questions; ``None`` on any failure."""
        if self.llm is None:
            return None
        try:
            _log.info("Generating %d questions with %s", len(selected), self.llm.name())
            response = await self.llm.generate(
                build_quiz_prompt(selected),
                temperature=self.temperature,
                schema=QUIZ_SCHEMA,
            )
        except Exception as e:
            _log.warning("LLM request failed: %s", e)
            return None

        if not response or not response.strip():
            _log.warning("LLM returned an empty response")
            return None
        data = _unwrap_items(_extract_json(response))
        if data is None:
            _log.warning("LLM response is not a JSON array")
            _log.debug("  Raw response: %.300s", response)
            return None
        items, reason = _validate_items(data, selected)
        if reason:
            _log.warning("LLM response rejected: %s", reason)
            return None
        return items

    async def build_quiz(self, pool: list[Record]) -> list[QuizItem]:
        if not pool:
            return []
        selected = self.select(pool)

        if self.llm is not None:
            items = await self.generate(selected)
            if items is not None:
                _log.info("Quiz ready: %d AI questions", len(items))
                return items
            _log.info("Falling back to local quiz generation")
        else:
            _log.info("No LLM configured, generating quiz locally")

        items = self.fallback_quiz(selected, pool)
        _log.info("Quiz ready: %d local questions", len(items))
        return items


class QuizStateError(RuntimeError):
    """An answer arrived for a question that is already answered or finished."""


class QuizSession:
    """Progress through one quiz: one answer per question, then advance."""

    def __init__(self, items: list[QuizItem]):
        self.items = items
        self.index = 0
        self.score = 0
        self.selected_option: str | None = None
        self.finished = not items

    @property
    def current(self) -> QuizItem | None:
        if self.finished:
            return None
        return self.items[self.index]

    @property
    def answered(self) -> bool:
        return self.selected_option is not None

    @property
    def percentage(self) -> int:
        if not self.items:
            return 0
        return round(self.score / len(self.items) * 100)

    def answer(self, option: str) -> bool:
        item = self.current
        if item is None:
            raise QuizStateError("Quiz is finished")
        if self.answered:
            raise QuizStateError("Question already answered")
        if option not in item.options:
            raise ValueError(f"Not an option: {option!r}")
        self.selected_option = option
        correct = option == item.correct_answer
        if correct:
            self.score += 1
        return correct

    def advance(self) -> None:
        if self.finished:
            return
        if self.index + 1 < len(self.items):
            self.index += 1
            self.selected_option = None
        else:
            self.finished = True
