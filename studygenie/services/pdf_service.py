# services/pdf_service.py
# Local PDF handling: upload validation, optional compression, pypdf and raw-byte text extraction.
import io
import re
import time
import logging

from pypdf import PdfReader, PdfWriter

from studygenie import config
from studygenie.services.errors import InvalidUploadError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
PLACEHOLDER_TEXT = "PDF uploaded successfully. This is sample educational content for AI processing."

# Everything Postgres text columns choke on: NUL plus the C0 controls except \t \n \r, and DEL.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def size_mb(num_bytes: int) -> float:
    return num_bytes / (1024 * 1024)


def validate_pdf_upload(filename: str | None, content_type: str | None, data: bytes) -> list[str]:
    """
    Checks an uploaded file before it is stored.
    Raises InvalidUploadError when the file can't be accepted and returns a
    list of non-fatal warnings otherwise.
    """
    name = (filename or "").lower()
    if content_type != PDF_MIME and not name.endswith(".pdf"):
        raise InvalidUploadError("Invalid file. Please select a PDF file.")
    if not data:
        raise InvalidUploadError("Empty file.")
    if not data.lstrip()[:5].startswith(b"%PDF"):
        raise InvalidUploadError("Invalid file. The upload is not a readable PDF.")

    mb = size_mb(len(data))
    if mb > config.MAX_UPLOAD_MB:
        raise InvalidUploadError(
            f"File too large. File size is {mb:.2f} MB. Please upload a file under {config.MAX_UPLOAD_MB} MB."
        )

    warnings = []
    if mb > config.LARGE_UPLOAD_MB:
        warnings.append(f"File is {mb:.2f} MB. Processing may take a bit longer.")
    return warnings


def compress_pdf(data: bytes) -> bytes:
    """Rewrites the PDF with compressed content streams; keeps whichever copy is smaller."""
    try:
        reader = PdfReader(io.BytesIO(data))
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)
        for page in writer.pages:
            page.compress_content_streams()
        writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)
        buf = io.BytesIO()
        writer.write(buf)
        compressed = buf.getvalue()
    except Exception as e:
        logger.warning("PDF compression failed, uploading original: %s", e)
        return data

    if len(compressed) < len(data):
        logger.info("Compressed PDF from %.2f MB to %.2f MB", size_mb(len(data)), size_mb(len(compressed)))
        return compressed
    logger.info("Compression did not shrink the PDF (%.2f MB), keeping original", size_mb(len(data)))
    return data


def storage_path(user_id: str, filename: str | None) -> str:
    ext = "pdf"
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower() or "pdf"
    return f"{user_id}/{int(time.time() * 1000)}.{ext}"


def clean_text(text: str | None) -> str:
    return _CONTROL_CHARS.sub("", text or "").strip()


def extract_with_pypdf(data: bytes, max_pages: int = config.MAX_PDF_PAGES) -> str:
    reader = PdfReader(io.BytesIO(data))
    parts = []
    for page in reader.pages[:max_pages]:
        try:
            parts.append(page.extract_text() or "")
        except Exception as e:
            logger.debug("Skipping unreadable page: %s", e)
            continue
    return clean_text("\n".join(parts))


def decode_raw_bytes(data: bytes) -> str:
    return clean_text(data.decode("utf-8", errors="replace"))
