"""Fetch a published Google Sheet as CSV text."""
from __future__ import annotations

import logging
import re

import httpx

_log = logging.getLogger("sheet_flashcards.sheets")

SHEETS_HOST_MARKER = "docs.google.com/spreadsheets"
CSV_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv"

_SHEET_ID = re.compile(r"/d/(.+?)/")


class SheetURLError(ValueError):
    """The URL is not a Google Sheets document link."""


class SheetFetchError(RuntimeError):
    """The sheet could not be downloaded."""


def extract_sheet_id(url: str) -> str:
    if SHEETS_HOST_MARKER not in url:
        raise SheetURLError("Please enter a valid Google Sheets URL.")
    m = _SHEET_ID.search(url)
    if not m:
        raise SheetURLError("Could not find the sheet ID in the URL.")
    return m.group(1)


def sheet_csv_url(sheet_id: str) -> str:
    return CSV_EXPORT_URL.format(sheet_id=sheet_id)


async def fetch_sheet_csv(url: str, client: httpx.AsyncClient | None = None) -> str:
    """Download the CSV export behind a sheet URL and return the body text.

    The sheet must be shared as "anyone with the link can view"; private
    sheets answer with a redirect to the login page or an error status.
    """
    csv_url = sheet_csv_url(extract_sheet_id(url))
    _log.info("Fetching %s", csv_url)

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=30.0)
    try:
        resp = await client.get(csv_url)
    except httpx.HTTPError as e:
        raise SheetFetchError(f"Failed to load the sheet: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if resp.status_code != 200:
        _log.warning("Sheet fetch returned HTTP %d", resp.status_code)
        raise SheetFetchError(
            "Failed to load the sheet. Make sure it is shared with "
            "'Anyone with the link'."
        )
    _log.info("Fetched %d bytes", len(resp.content))
    return resp.text
