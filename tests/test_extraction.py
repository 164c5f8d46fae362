import asyncio

import pytest

from conftest import USER_ID, make_pdf
from studygenie import config
from studygenie.services import extraction_service, gemini_service, pdf_service
from studygenie.services.errors import ExtractionError, StorageError


def test_gemini_result_is_used_first(monkeypatch):
    async def fake_extract(pdf_bytes):
        return "  Gemini text\x00  "

    monkeypatch.setattr(gemini_service, "extract_pdf_text", fake_extract)
    result = asyncio.run(extraction_service.extract_text(make_pdf()))
    assert result.extractor == "gemini"
    assert result.text == "Gemini text"


def test_falls_back_to_pypdf_when_gemini_fails(monkeypatch):
    async def failing_extract(pdf_bytes):
        raise ExtractionError("Gemini returned no text")

    monkeypatch.setattr(gemini_service, "extract_pdf_text", failing_extract)
    result = asyncio.run(extraction_service.extract_text(make_pdf("Cell membranes")))
    assert result.extractor == "pypdf"
    assert "Cell membranes" in result.text


def test_gemini_is_skipped_without_api_key():
    result = asyncio.run(extraction_service.extract_text(make_pdf("Osmosis")))
    assert result.extractor == "pypdf"


def test_falls_back_to_raw_bytes_when_pypdf_fails(monkeypatch):
    def broken(data, max_pages=25):
        raise ValueError("cannot parse")

    monkeypatch.setattr(pdf_service, "extract_with_pypdf", broken)
    result = asyncio.run(extraction_service.extract_text(b"%PDF-1.4 plain words"))
    assert result.extractor == "raw"
    assert result.text == "%PDF-1.4 plain words"


def test_placeholder_when_nothing_readable(monkeypatch):
    monkeypatch.setattr(pdf_service, "extract_with_pypdf", lambda data, max_pages=25: "")
    result = asyncio.run(extraction_service.extract_text(b"\x00\x01\x02"))
    assert result.extractor == "placeholder"
    assert result.text == pdf_service.PLACEHOLDER_TEXT


def test_text_is_truncated(monkeypatch):
    async def long_extract(pdf_bytes):
        return "a" * (config.MAX_EXTRACTED_CHARS + 10)

    monkeypatch.setattr(gemini_service, "extract_pdf_text", long_extract)
    result = asyncio.run(extraction_service.extract_text(make_pdf()))
    assert len(result.text) == config.MAX_EXTRACTED_CHARS
    assert result.truncated


def test_process_pdf_marks_record_completed(store, fake_db):
    pdf = store.insert_pdf(USER_ID, "cells.pdf", f"{USER_ID}/1.pdf", 100)
    fake_db.storage.from_(config.PDF_BUCKET).upload(pdf["file_path"], make_pdf("Ribosomes build proteins"))

    result = asyncio.run(extraction_service.process_pdf(store, pdf["id"], pdf["file_path"]))

    row = store.get_pdf(pdf["id"])
    assert result.extractor == "pypdf"
    assert row["upload_status"] == "completed"
    assert "Ribosomes" in row["extracted_text"]


def test_process_pdf_marks_record_failed_when_file_missing(store):
    pdf = store.insert_pdf(USER_ID, "gone.pdf", f"{USER_ID}/missing.pdf", 100)

    with pytest.raises(StorageError):
        asyncio.run(extraction_service.process_pdf(store, pdf["id"], pdf["file_path"]))

    assert store.get_pdf(pdf["id"])["upload_status"] == "failed"
