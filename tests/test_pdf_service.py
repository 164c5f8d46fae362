import re

import pytest

from conftest import make_pdf
from studygenie.services import pdf_service
from studygenie.services.errors import InvalidUploadError

MB = 1024 * 1024


def padded_pdf(size: int) -> bytes:
    data = make_pdf()
    return data + b"%" + b"x" * (size - len(data) - 1)


def test_validate_accepts_small_pdf():
    assert pdf_service.validate_pdf_upload("notes.pdf", "application/pdf", make_pdf()) == []


def test_validate_rejects_non_pdf():
    with pytest.raises(InvalidUploadError, match="Please select a PDF file"):
        pdf_service.validate_pdf_upload("notes.txt", "text/plain", b"hello")


def test_validate_rejects_pdf_name_without_pdf_bytes():
    with pytest.raises(InvalidUploadError, match="not a readable PDF"):
        pdf_service.validate_pdf_upload("notes.pdf", "application/pdf", b"just text")


def test_validate_rejects_empty_file():
    with pytest.raises(InvalidUploadError, match="Empty file"):
        pdf_service.validate_pdf_upload("notes.pdf", "application/pdf", b"")


def test_validate_rejects_over_8mb():
    with pytest.raises(InvalidUploadError) as excinfo:
        pdf_service.validate_pdf_upload("big.pdf", "application/pdf", padded_pdf(9 * MB))
    assert "9.00 MB" in excinfo.value.message
    assert "under 8 MB" in excinfo.value.message


def test_validate_warns_over_6mb():
    warnings = pdf_service.validate_pdf_upload("big.pdf", "application/pdf", padded_pdf(7 * MB))
    assert len(warnings) == 1
    assert "7.00 MB" in warnings[0]


def test_storage_path_uses_user_folder_and_extension():
    path = pdf_service.storage_path("user-1", "Chapter 3.PDF")
    assert re.fullmatch(r"user-1/\d{13}\.pdf", path)
    assert pdf_service.storage_path("user-1", None).endswith(".pdf")


def test_clean_text_strips_control_characters():
    assert pdf_service.clean_text("\x00 Hello\x07 world\tok\n\x7f") == "Hello world\tok"


def test_decode_raw_bytes_replaces_invalid_utf8():
    assert pdf_service.decode_raw_bytes(b"\x00abc\xff") == "abc�"


def test_extract_with_pypdf_reads_text():
    text = pdf_service.extract_with_pypdf(make_pdf("Mitochondria are the powerhouse"))
    assert "Mitochondria" in text


def test_compress_pdf_never_grows_the_file():
    data = make_pdf()
    compressed = pdf_service.compress_pdf(data)
    assert compressed.startswith(b"%PDF")
    assert len(compressed) <= len(data)


def test_compress_pdf_keeps_unparseable_input():
    assert pdf_service.compress_pdf(b"%PDF-garbage") == b"%PDF-garbage"
