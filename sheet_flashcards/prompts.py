"""Prompt template and response schema for quiz generation."""
from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheet_flashcards.models import Record

QUIZ_PROMPT = """\
Generate a multiple-choice quiz based on these flashcards.
For each word, provide 3 plausible but incorrect distractors in the same \
language as the definition.

Flashcards:
{cards_json}

Rules:
1. Create exactly one question per flashcard, {count} questions in total.
2. "word" is the flashcard word, copied exactly.
3. "correctAnswer" is the flashcard definition, copied exactly.
4. "options" has exactly 4 different entries: the correct answer and 3 distractors, \
in random order.
5. "explanation" is a short sentence using the word.

Return the quiz as a JSON array.
"""

QUIZ_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "word": {"type": "string"},
            "correctAnswer": {"type": "string"},
            "options": {
                "type": "array",
                "items": {"type": "string"},
                "minItems": 4,
                "maxItems": 4,
                "description": "Must include the correct answer and 3 distractors.",
            },
            "explanation": {
                "type": "string",
                "description": "A short sentence using the word.",
            },
        },
        "required": ["word", "correctAnswer", "options", "explanation"],
    },
}


def format_cards(records: list[Record]) -> str:
    return json.dumps(
        [{"word": r.term, "definition": r.definition} for r in records],
        ensure_ascii=False,
        indent=2,
    )


def build_quiz_prompt(records: list[Record]) -> str:
    return QUIZ_PROMPT.format(cards_json=format_cards(records), count=len(records))
