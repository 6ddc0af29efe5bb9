"""Tests for data models."""
from __future__ import annotations

import dataclasses

import pytest

from sheet_flashcards.models import ParseResult, QuizItem, Record


class TestRecord:
    def test_create(self):
        r = Record("r1", "apple", "사과")
        assert r.id == "r1"
        assert r.term == "apple"
        assert r.definition == "사과"

    def test_immutable(self):
        r = Record("r1", "apple", "사과")
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.term = "pear"


class TestQuizItem:
    def test_to_dict(self, sample_quiz_item):
        d = sample_quiz_item.to_dict()
        assert d["term"] == "apple"
        assert d["correct_answer"] == "사과"
        assert d["correct_answer"] in d["options"]
        assert len(d["options"]) == 4


class TestParseResult:
    def test_defaults(self):
        r = ParseResult()
        assert r.records == []
        assert r.skipped_rows == 0
        assert r.used_fallback_columns is False

    def test_records_not_shared(self):
        a, b = ParseResult(), ParseResult()
        a.records.append(Record("r1", "apple", "사과"))
        assert b.records == []
