import time

from fastapi import APIRouter, Depends

from studygenie.auth.auth import CurrentUser, get_current_user
from studygenie.routers.common import to_http_exception
from studygenie.services.errors import StudyGenieError
from studygenie.services.supabase_service import SupabaseStore, get_store

router = APIRouter()


@router.get("/health")
async def health():
    return {"ok": True, "time": int(time.time())}


@router.get("/api/pdfs/{pdf_id}/status")
async def get_pdf_status(pdf_id: str, user: CurrentUser = Depends(get_current_user), store: SupabaseStore = Depends(get_store)):
    """Upload status of a PDF record: processing, completed or failed."""
    try:
        pdf = store.get_pdf(pdf_id, user.id)
    except StudyGenieError as e:
        raise to_http_exception(e)
    return {"status": pdf.get("upload_status", "processing"), "has_text": bool(pdf.get("extracted_text"))}
