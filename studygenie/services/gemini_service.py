import logging
import google.generativeai as genai

from studygenie import config
from studygenie.services.errors import ConfigurationError, ExtractionError

logger = logging.getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = """You are a text extraction engine for study materials.
Return the full readable text of the attached PDF, in reading order.
Keep headings, lists and paragraph breaks as plain text.
DO NOT summarize, translate, comment on the document or wrap the output in markdown."""

EXTRACTION_PROMPT = "Extract all of the text from this PDF."


async def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Sends the raw PDF to Gemini as inline data and returns the extracted text."""
    if not config.GEMINI_API_KEY:
        raise ConfigurationError("Gemini service not configured.")

    genai.configure(api_key=config.GEMINI_API_KEY)

    logger.info("Extracting PDF text with Gemini (%s), %d bytes", config.GEMINI_MODEL_NAME, len(pdf_bytes))
    model = genai.GenerativeModel(
        config.GEMINI_MODEL_NAME,
        system_instruction=EXTRACTION_SYSTEM_PROMPT,
    )
    try:
        response = await model.generate_content_async(
            [{"mime_type": "application/pdf", "data": pdf_bytes}, EXTRACTION_PROMPT]
        )
        text = response.text
    except ValueError as e:
        # Blocked or empty candidates leave response.text inaccessible
        raise ExtractionError(f"Gemini returned no text: {e}") from e
    except Exception as e:
        raise ExtractionError(f"Gemini extraction failed: {e}") from e

    return text.strip()
