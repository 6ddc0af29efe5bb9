"""CLI entry point for sheet-flashcards.

Usage:
  python -m sheet_flashcards serve [--port PORT] [--host HOST]
  python -m sheet_flashcards parse FILE
  python -m sheet_flashcards fetch URL
  python -m sheet_flashcards quiz FILE [--seed N]
"""
from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "parse":
        _parse(args[1:])
    elif command == "fetch":
        _fetch(args[1:])
    elif command == "quiz":
        _quiz(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, parse, fetch, quiz")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str | None) -> str | None:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _positional(args: list[str], usage: str) -> str:
    rest = [a for i, a in enumerate(args)
            if not a.startswith("--") and (i == 0 or not args[i - 1].startswith("--"))]
    if not rest:
        print(f"Usage: python -m sheet_flashcards {usage}")
        sys.exit(1)
    return rest[0]


def _serve(args: list[str]):
    import uvicorn

    port = int(_parse_flag(args, "--port", "8765"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    print(f"Starting Sheet Flashcards on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "sheet_flashcards.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _load_records(text: str):
    from sheet_flashcards.config import load_settings
    from sheet_flashcards.parsers.csv_parser import IngestionEmptyError, ingest_text

    settings = load_settings()
    try:
        return ingest_text(text, settings.content_header, settings.summary_header)
    except IngestionEmptyError as e:
        print(str(e))
        sys.exit(1)


def _print_records(records) -> None:
    for r in records:
        print(f"  {r.term}: {r.definition}")
    print(f"\n{len(records)} cards")


def _parse(args: list[str]):
    path = Path(_positional(args, "parse FILE"))
    if not path.exists():
        print(f"File not found: {path}")
        sys.exit(1)
    _print_records(_load_records(path.read_text(encoding="utf-8-sig")))


def _fetch(args: list[str]):
    from sheet_flashcards.sheets import SheetFetchError, SheetURLError, fetch_sheet_csv

    url = _positional(args, "fetch URL")
    try:
        text = asyncio.run(fetch_sheet_csv(url))
    except (SheetURLError, SheetFetchError) as e:
        print(str(e))
        sys.exit(1)
    _print_records(_load_records(text))


def _quiz(args: list[str]):
    import random

    from sheet_flashcards.config import load_settings
    from sheet_flashcards.llm import get_llm
    from sheet_flashcards.quiz import QuizAssembler

    logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

    path = Path(_positional(args, "quiz FILE [--seed N]"))
    if not path.exists():
        print(f"File not found: {path}")
        sys.exit(1)
    records = _load_records(path.read_text(encoding="utf-8-sig"))

    seed = _parse_flag(args, "--seed", None)
    settings = load_settings()
    assembler = QuizAssembler(
        llm=get_llm(settings),
        rng=random.Random(int(seed)) if seed is not None else None,
        quiz_size=settings.quiz_size,
        temperature=settings.llm_temperature,
    )
    items = asyncio.run(assembler.build_quiz(records))

    labels = "ABCD"
    for n, item in enumerate(items, 1):
        print(f"\n{n}. {item.term}")
        for label, option in zip(labels, item.options):
            mark = "*" if option == item.correct_answer else " "
            print(f"   {mark} {label}) {option}")
        print(f"   {item.explanation}")


if __name__ == "__main__":
    main()
