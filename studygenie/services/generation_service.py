# services/generation_service.py
# The generate-ai-content step: prompt the gateway with a PDF's text and store the study material.
import logging

from pydantic import ValidationError

from studygenie import config
from studygenie.prompts.prompts import PROMPTS
from studygenie.prompts.schemas import OUTPUT_SCHEMAS
from studygenie.services.errors import GenerationError, InvalidRequestError
from studygenie.services.gateway_service import GatewayClient
from studygenie.services.supabase_service import SupabaseStore

logger = logging.getLogger(__name__)

OUTPUT_TYPES = tuple(PROMPTS)
NO_TEXT_MESSAGE = (
    "No extracted text found for this PDF. "
    "Please wait for processing to finish or re-upload the file."
)


def check_output_type(output_type: str) -> str:
    if output_type not in PROMPTS:
        raise InvalidRequestError("Invalid output type")
    return output_type


def build_prompts(output_type: str, extracted_text: str) -> tuple[str, str]:
    """Returns (system_prompt, user_prompt) for an output type, seeing only the head of the text."""
    system_prompt, template = PROMPTS[check_output_type(output_type)]
    user_prompt = template.format(text=extracted_text[:config.PROMPT_TEXT_CHARS])
    return system_prompt, user_prompt


def validate_content(output_type: str, content: dict):
    """Checks the gateway's JSON against the output type's schema.

    Returns what gets stored: the validated object, or the bare card list for flashcards.
    """
    schema = OUTPUT_SCHEMAS[output_type]
    try:
        parsed = schema.model_validate(content)
    except ValidationError as e:
        logger.error("AI %s content did not match the expected shape: %s", output_type, e)
        raise GenerationError(f"AI returned an incomplete {output_type}. Please try again.") from e

    data = parsed.model_dump()
    if output_type == "flashcards":
        return data["flashcards"]
    return data


async def generate_content(
    store: SupabaseStore,
    gateway: GatewayClient,
    pdf_id: str,
    output_type: str,
    user_id: str | None = None,
    regenerate: bool = False,
):
    """
    Generates one study material for a PDF and stores it as an AI output row.

    With regenerate=False an already stored output of the same type is
    returned as is and the gateway is not called.
    """
    check_output_type(output_type)
    pdf = store.get_pdf(pdf_id, user_id)

    if not regenerate:
        for output in store.list_outputs(pdf_id):
            if output.get("output_type") == output_type:
                return output.get("content")

    extracted_text = pdf.get("extracted_text") or ""
    if not extracted_text.strip():
        raise InvalidRequestError(NO_TEXT_MESSAGE)

    system_prompt, user_prompt = build_prompts(output_type, extracted_text)
    logger.info("Generating %s for PDF %s", output_type, pdf_id)
    raw = await gateway.complete_json(system_prompt, user_prompt)
    content = validate_content(output_type, raw)

    # Only the newest output of each type is kept, so regenerating replaces it.
    store.delete_outputs(pdf_id, output_type)
    store.insert_output(pdf_id, pdf["user_id"], output_type, content)
    logger.info("AI content generated successfully: %s", output_type)
    return content
