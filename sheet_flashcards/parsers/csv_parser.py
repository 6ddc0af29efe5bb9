"""Parse CSV exports (uploaded files or Google Sheets) into Record objects.

Expected layout: a header row followed by data rows, e.g.

  날짜,분류,공부내용,뉴스요약
  2024-05-01,news,apple,사과

The word column is found by its header label (``공부내용`` by default) and the
definition column by ``뉴스요약``.  A missing label falls back to its
position (3rd column for the word, 4th for the definition), which is where
the shared study sheet keeps them even after the headers get renamed.

Commas inside double-quoted fields do not split the field.  Doubled quotes
inside a quoted field are NOT unescaped; such fields come through with
their inner quotes intact or may split wrongly.
"""
from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path

from sheet_flashcards.models import ParseResult, Record

_log = logging.getLogger("sheet_flashcards.parser")

DEFAULT_CONTENT_HEADER = "공부내용"
DEFAULT_SUMMARY_HEADER = "뉴스요약"

# Positional fallback (columns C and D of the sheet)
FALLBACK_CONTENT_INDEX = 2
FALLBACK_SUMMARY_INDEX = 3

_LINE_SPLIT = re.compile(r"\r?\n")
# A comma splits only when an even number of quotes follows it on the line
_FIELD_SPLIT = re.compile(r',(?=(?:(?:[^"]*"){2})*[^"]*$)')

EMPTY_MESSAGE = (
    "'{content}' and '{summary}' columns were not found or contained no data."
)


class IngestionEmptyError(ValueError):
    """Raised when ingested text yields no usable records."""


def _clean(field: str) -> str:
    field = field.strip()
    if field.startswith('"'):
        field = field[1:]
    if field.endswith('"'):
        field = field[:-1]
    return field.strip()


def split_row(line: str) -> list[str]:
    """Split a data row on commas that sit outside quoted segments."""
    return [_clean(p) for p in _FIELD_SPLIT.split(line)]


def parse_header(line: str) -> list[str]:
    return [_clean(h) for h in line.split(",")]


def _column_index(headers: list[str], label: str, fallback: int) -> int:
    if label in headers:
        return headers.index(label)
    _log.info("Header '%s' not found in %s, using column %d", label, headers, fallback)
    return fallback


def parse_csv(
    text: str,
    content_header: str = DEFAULT_CONTENT_HEADER,
    summary_header: str = DEFAULT_SUMMARY_HEADER,
) -> ParseResult:
    """Parse *text* and report which columns were used and how many rows were skipped."""
    lines = [line for line in _LINE_SPLIT.split(text) if line.strip()]
    if len(lines) < 2:
        _log.info("Not enough lines to parse (%d non-blank)", len(lines))
        return ParseResult()

    headers = parse_header(lines[0])
    content_idx = _column_index(headers, content_header, FALLBACK_CONTENT_INDEX)
    summary_idx = _column_index(headers, summary_header, FALLBACK_SUMMARY_INDEX)
    fallback = content_header not in headers or summary_header not in headers

    # Labels that mark a header row repeated inside the data
    header_labels = {content_header}
    if content_idx < len(headers) and headers[content_idx]:
        header_labels.add(headers[content_idx])

    records: list[Record] = []
    skipped = 0
    for line in lines[1:]:
        parts = split_row(line)
        term = parts[content_idx] if content_idx < len(parts) else ""
        definition = parts[summary_idx] if summary_idx < len(parts) else ""
        if not term or not definition or term in header_labels:
            skipped += 1
            continue
        records.append(Record(id=str(uuid.uuid4()), term=term, definition=definition))

    if skipped:
        _log.info("Skipped %d of %d data rows", skipped, len(lines) - 1)
    _log.info("Parsed %d records", len(records))

    return ParseResult(
        records=records,
        skipped_rows=skipped,
        content_index=content_idx,
        summary_index=summary_idx,
        used_fallback_columns=fallback,
    )


def parse_csv_text(
    text: str,
    content_header: str = DEFAULT_CONTENT_HEADER,
    summary_header: str = DEFAULT_SUMMARY_HEADER,
) -> list[Record]:
    return parse_csv(text, content_header, summary_header).records


def parse_csv_file(
    path: Path,
    content_header: str = DEFAULT_CONTENT_HEADER,
    summary_header: str = DEFAULT_SUMMARY_HEADER,
) -> list[Record]:
    text = path.read_text(encoding="utf-8-sig")
    return parse_csv_text(text, content_header, summary_header)


def ingest_text(
    text: str,
    content_header: str = DEFAULT_CONTENT_HEADER,
    summary_header: str = DEFAULT_SUMMARY_HEADER,
) -> list[Record]:
    """Parse *text* for a new card pool; raise if nothing usable came out."""
    records = parse_csv_text(text, content_header, summary_header)
    if not records:
        raise IngestionEmptyError(
            EMPTY_MESSAGE.format(content=content_header, summary=summary_header)
        )
    return records
