"""FastAPI application with all routes."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request

from sheet_flashcards.config import Settings, load_settings, save_settings
from sheet_flashcards.llm import get_llm
from sheet_flashcards.models import Record
from sheet_flashcards.parsers.csv_parser import IngestionEmptyError, ingest_text
from sheet_flashcards.quiz import QuizAssembler, QuizSession, QuizStateError
from sheet_flashcards.sheets import SheetFetchError, SheetURLError, fetch_sheet_csv
from sheet_flashcards.study import StudyDeck

app = FastAPI(title="Sheet Flashcards")

_log = logging.getLogger("sheet_flashcards.app")

# Session state: one card pool and at most one running quiz
_settings: Settings | None = None
_cards: list[Record] = []
_quiz: QuizSession | None = None


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def _get_assembler() -> QuizAssembler:
    s = get_settings()
    return QuizAssembler(
        llm=get_llm(s),
        quiz_size=s.quiz_size,
        temperature=s.llm_temperature,
    )


def _replace_cards(text: str) -> list[Record]:
    global _cards, _quiz
    s = get_settings()
    try:
        records = ingest_text(text, s.content_header, s.summary_header)
    except IngestionEmptyError as e:
        raise HTTPException(422, str(e))
    _cards = records
    _quiz = None
    _log.info("Card pool replaced: %d cards", len(records))
    return records


def _card_dict(r: Record) -> dict:
    return {"id": r.id, "term": r.term, "definition": r.definition}


def _require_quiz() -> QuizSession:
    if _quiz is None:
        raise HTTPException(400, "No quiz in progress")
    return _quiz


def _quiz_state(q: QuizSession) -> dict:
    item = q.current
    return {
        "finished": q.finished,
        "index": q.index,
        "total": len(q.items),
        "score": q.score,
        "answered": q.answered,
        "selected_option": q.selected_option,
        "question": {
            "id": item.id,
            "term": item.term,
            "options": item.options,
        } if item else None,
    }


@app.on_event("startup")
async def startup():
    global _settings
    if _settings is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()


# ── API: Cards ────────────────────────────────────────────────────────────

@app.get("/api/cards")
async def api_cards():
    return {"count": len(_cards), "cards": [_card_dict(r) for r in _cards]}


@app.post("/api/cards/upload")
async def api_upload(request: Request):
    raw = await request.body()
    text = raw.decode("utf-8-sig", errors="replace")
    records = _replace_cards(text)
    return {"count": len(records)}


@app.post("/api/cards/sheet")
async def api_sheet(request: Request):
    body = await request.json()
    url = body.get("url")
    if not isinstance(url, str) or not url.strip():
        raise HTTPException(400, "No URL provided")
    try:
        text = await fetch_sheet_csv(url.strip())
    except SheetURLError as e:
        raise HTTPException(400, str(e))
    except SheetFetchError as e:
        raise HTTPException(502, str(e))
    records = _replace_cards(text)
    return {"count": len(records)}


@app.get("/api/cards/study")
async def api_study(index: int = 0):
    if not _cards:
        raise HTTPException(400, "No cards loaded")
    deck = StudyDeck(_cards, index)
    return {
        "card": _card_dict(deck.current),
        "index": deck.index,
        "position": deck.position,
        "total": len(deck.records),
        "progress": deck.progress,
    }


# ── API: Quiz ─────────────────────────────────────────────────────────────

@app.post("/api/quiz/start")
async def api_quiz_start():
    global _quiz
    if not _cards:
        raise HTTPException(400, "No cards loaded")
    items = await _get_assembler().build_quiz(_cards)
    _quiz = QuizSession(items)
    return _quiz_state(_quiz)


@app.get("/api/quiz")
async def api_quiz():
    return _quiz_state(_require_quiz())


@app.post("/api/quiz/answer")
async def api_quiz_answer(request: Request):
    q = _require_quiz()
    body = await request.json()
    option = body.get("option")
    if not isinstance(option, str):
        raise HTTPException(400, "No option provided")
    item = q.current
    try:
        correct = q.answer(option)
    except QuizStateError as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {
        "correct": correct,
        "correct_answer": item.correct_answer,
        "explanation": item.explanation,
        "score": q.score,
    }


@app.post("/api/quiz/next")
async def api_quiz_next():
    q = _require_quiz()
    if not q.finished and not q.answered:
        raise HTTPException(400, "Answer the current question first")
    q.advance()
    return _quiz_state(q)


@app.get("/api/quiz/summary")
async def api_quiz_summary():
    q = _require_quiz()
    return {
        "finished": q.finished,
        "score": q.score,
        "total": len(q.items),
        "percentage": q.percentage,
    }


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    s = get_settings()
    if "quiz_size" in body:
        size = body["quiz_size"]
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise HTTPException(400, "quiz_size must be a positive integer")
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    for k, v in body.items():
        if k in known:
            setattr(s, k, v)
    save_settings(s)
    return s.to_dict()
