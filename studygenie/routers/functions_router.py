# routers/functions_router.py
# The two edge functions, callable over HTTP: process-pdf and generate-ai-content.
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from studygenie.auth.auth import CurrentUser, get_current_user
from studygenie.routers.common import to_http_exception
from studygenie.services.errors import InvalidRequestError, StudyGenieError
from studygenie.services.extraction_service import process_pdf
from studygenie.services.gateway_service import GatewayClient, get_gateway
from studygenie.services.generation_service import generate_content
from studygenie.services.supabase_service import SupabaseStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


class ProcessPdfRequest(BaseModel):
    pdfId: str
    filePath: str | None = None


class GenerateRequest(BaseModel):
    pdfId: str
    outputType: str


@router.post("/process-pdf")
async def process_pdf_function(
    body: ProcessPdfRequest,
    user: CurrentUser = Depends(get_current_user),
    store: SupabaseStore = Depends(get_store),
):
    try:
        pdf = store.get_pdf(body.pdfId, user.id)
        if body.filePath and body.filePath != pdf["file_path"]:
            raise InvalidRequestError("filePath does not match the stored file for this PDF")
        result = await process_pdf(store, body.pdfId, pdf["file_path"])
    except StudyGenieError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Error processing PDF: %s", e)
        raise HTTPException(status_code=500, detail=str(e) or "Unknown error")
    return {"success": True, "message": "PDF processed successfully", "extractor": result.extractor}


@router.post("/generate-ai-content")
async def generate_ai_content_function(
    body: GenerateRequest,
    user: CurrentUser = Depends(get_current_user),
    store: SupabaseStore = Depends(get_store),
    gateway: GatewayClient = Depends(get_gateway),
):
    try:
        content = await generate_content(store, gateway, body.pdfId, body.outputType, user_id=user.id, regenerate=True)
    except StudyGenieError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Error generating AI content: %s", e)
        raise HTTPException(status_code=500, detail=str(e) or "Unknown error")
    return {"success": True, "content": content}
