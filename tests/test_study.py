"""Tests for study deck navigation."""
from __future__ import annotations

import pytest

from sheet_flashcards.study import StudyDeck


class TestStudyDeck:
    def test_starts_at_first(self, sample_records):
        deck = StudyDeck(sample_records)
        assert deck.current.term == "apple"
        assert deck.position == 1
        assert deck.progress == pytest.approx(0.2)

    def test_next_wraps(self, sample_records):
        deck = StudyDeck(sample_records, index=4)
        assert deck.next().term == "apple"

    def test_prev_wraps(self, sample_records):
        deck = StudyDeck(sample_records)
        assert deck.prev().term == "pear"
        assert deck.position == 5
        assert deck.progress == pytest.approx(1.0)

    def test_index_normalized(self, sample_records):
        assert StudyDeck(sample_records, index=7).current.term == "grape"

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            StudyDeck([])

    def test_copy_of_pool(self, sample_records):
        deck = StudyDeck(sample_records)
        sample_records.pop()
        assert len(deck.records) == 5
