"""Tests for Google Sheets URL handling and CSV fetching."""
from __future__ import annotations

import httpx
import pytest

from sheet_flashcards.sheets import (
    SheetFetchError,
    SheetURLError,
    extract_sheet_id,
    fetch_sheet_csv,
    sheet_csv_url,
)

SHEET_URL = "https://docs.google.com/spreadsheets/d/1AbC-xyz_9/edit#gid=0"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestExtractSheetId:
    def test_edit_url(self):
        assert extract_sheet_id(SHEET_URL) == "1AbC-xyz_9"

    def test_not_google_sheets(self):
        with pytest.raises(SheetURLError):
            extract_sheet_id("https://example.com/d/abc/edit")

    def test_missing_id(self):
        with pytest.raises(SheetURLError):
            extract_sheet_id("https://docs.google.com/spreadsheets/")

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            extract_sheet_id("not a url")


class TestSheetCsvUrl:
    def test_export_url(self):
        assert sheet_csv_url("abc") == (
            "https://docs.google.com/spreadsheets/d/abc/gviz/tq?tqx=out:csv"
        )


class TestFetchSheetCsv:
    @pytest.mark.asyncio
    async def test_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text="공부내용,뉴스요약\napple,사과\n")

        async with _client(handler) as client:
            text = await fetch_sheet_csv(SHEET_URL, client=client)

        assert "apple,사과" in text
        assert seen == ["https://docs.google.com/spreadsheets/d/1AbC-xyz_9/gviz/tq?tqx=out:csv"]

    @pytest.mark.asyncio
    async def test_error_status(self):
        async with _client(lambda request: httpx.Response(403)) as client:
            with pytest.raises(SheetFetchError) as exc:
                await fetch_sheet_csv(SHEET_URL, client=client)
        assert "Anyone with the link" in str(exc.value)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        async with _client(handler) as client:
            with pytest.raises(SheetFetchError):
                await fetch_sheet_csv(SHEET_URL, client=client)

    @pytest.mark.asyncio
    async def test_bad_url_makes_no_request(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="")

        async with _client(handler) as client:
            with pytest.raises(SheetURLError):
                await fetch_sheet_csv("https://example.com", client=client)
        assert calls == []

    @pytest.mark.asyncio
    async def test_passed_client_left_open(self):
        async with _client(lambda request: httpx.Response(200, text="x")) as client:
            await fetch_sheet_csv(SHEET_URL, client=client)
            assert not client.is_closed
