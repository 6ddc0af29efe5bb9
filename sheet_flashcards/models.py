from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class Record:
    id: str
    term: str
    definition: str


@dataclass
class QuizItem:
    id: str
    term: str
    correct_answer: str
    options: list[str]
    explanation: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ParseResult:
    records: list[Record] = field(default_factory=list)
    skipped_rows: int = 0
    content_index: int = 2
    summary_index: int = 3
    used_fallback_columns: bool = False
