# services/extraction_service.py
# The process-pdf step: download the stored PDF, pull text out of it, write it back to the record.
import logging
from dataclasses import dataclass

from studygenie import config
from studygenie.services import gemini_service, pdf_service
from studygenie.services.errors import StudyGenieError
from studygenie.services.supabase_service import SupabaseStore

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    text: str
    extractor: str
    truncated: bool = False


async def extract_text(pdf_bytes: bytes) -> ExtractionResult:
    """
    Tries each extractor in turn and keeps the first non-blank result:
    Gemini (multimodal) -> pypdf -> raw byte decoding -> placeholder text.
    The result is cleaned and truncated to MAX_EXTRACTED_CHARS.
    """
    text = ""
    extractor = "placeholder"

    try:
        text = pdf_service.clean_text(await gemini_service.extract_pdf_text(pdf_bytes))
        extractor = "gemini"
    except StudyGenieError as e:
        logger.warning("Gemini extraction unavailable, falling back to pypdf: %s", e.message)

    if not text:
        try:
            text = pdf_service.extract_with_pypdf(pdf_bytes)
            extractor = "pypdf"
        except Exception as e:
            logger.warning("pypdf extraction failed, falling back to raw decoding: %s", e)

    if not text:
        text = pdf_service.decode_raw_bytes(pdf_bytes)
        extractor = "raw"

    if not text:
        logger.warning("No readable text in PDF, storing placeholder")
        return ExtractionResult(text=pdf_service.PLACEHOLDER_TEXT, extractor="placeholder")

    truncated = len(text) > config.MAX_EXTRACTED_CHARS
    return ExtractionResult(text=text[:config.MAX_EXTRACTED_CHARS], extractor=extractor, truncated=truncated)


async def process_pdf(store: SupabaseStore, pdf_id: str, file_path: str) -> ExtractionResult:
    """Extracts text for a PDF record and marks it completed, or failed if anything goes wrong."""
    try:
        pdf_bytes = store.download_file(config.PDF_BUCKET, file_path)
        result = await extract_text(pdf_bytes)
        store.update_pdf(pdf_id, {
            "extracted_text": result.text,
            "upload_status": "completed",
        })
    except Exception as e:
        logger.error("Error processing PDF %s: %s", pdf_id, e)
        try:
            store.update_pdf(pdf_id, {"upload_status": "failed"})
        except Exception as update_error:
            logger.error("Could not mark PDF %s as failed: %s", pdf_id, update_error)
        raise

    logger.info(
        "PDF processed successfully: %s (extractor=%s, chars=%d, truncated=%s)",
        pdf_id, result.extractor, len(result.text), result.truncated,
    )
    return result
