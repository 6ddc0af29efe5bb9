"""Card-by-card study navigation."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sheet_flashcards.models import Record


class StudyDeck:
    """Cycle through a card pool; moving past either end wraps around."""

    def __init__(self, records: list[Record], index: int = 0):
        if not records:
            raise ValueError("Cannot study an empty deck")
        self.records = list(records)
        self.index = index % len(self.records)

    @property
    def current(self) -> Record:
        return self.records[self.index]

    @property
    def position(self) -> int:
        return self.index + 1

    @property
    def progress(self) -> float:
        return self.position / len(self.records)

    def next(self) -> Record:
        self.index = (self.index + 1) % len(self.records)
        return self.current

    def prev(self) -> Record:
        self.index = (self.index - 1) % len(self.records)
        return self.current
