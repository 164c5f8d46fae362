import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from studygenie import config
from studygenie.auth.auth import CurrentUser, get_current_user
from studygenie.routers.common import to_http_exception, without_text
from studygenie.services import pdf_service
from studygenie.services.errors import StudyGenieError
from studygenie.services.extraction_service import process_pdf
from studygenie.services.supabase_service import SupabaseStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Dashboard ---
@router.get("/pdfs")
async def list_pdfs(user: CurrentUser = Depends(get_current_user), store: SupabaseStore = Depends(get_store)):
    try:
        return {"pdfs": [without_text(pdf) for pdf in store.list_pdfs(user.id)]}
    except StudyGenieError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Error loading PDFs for %s: %s", user.id, e)
        raise HTTPException(status_code=500, detail="Error loading PDFs")


@router.delete("/pdfs/{pdf_id}")
async def delete_pdf(pdf_id: str, user: CurrentUser = Depends(get_current_user), store: SupabaseStore = Depends(get_store)):
    try:
        store.delete_pdf(pdf_id, user.id)
    except StudyGenieError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Error deleting PDF %s: %s", pdf_id, e)
        raise HTTPException(status_code=500, detail="Failed to delete PDF")
    return {"success": True, "message": "Your file has been removed."}


# --- Upload ---
def _discard_upload(store: SupabaseStore, file_path: str):
    # No record points at the stored file, so take it back out of the bucket.
    try:
        store.remove_files(config.PDF_BUCKET, [file_path])
    except StudyGenieError as e:
        logger.error("Could not remove orphaned upload %s: %s", file_path, e.message)


@router.post("/pdfs/upload")
async def upload_pdf(
    file: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    store: SupabaseStore = Depends(get_store),
):
    """
    size check -> optional compression -> storage upload -> insert record -> process-pdf.
    `stages` lists the steps completed, which the client shows as upload progress.
    """
    data = await file.read()
    try:
        warnings = pdf_service.validate_pdf_upload(file.filename, file.content_type, data)
    except StudyGenieError as e:
        raise to_http_exception(e)

    logger.info("Upload accepted from user %s: %s (%.2f MB)", user.id, file.filename, pdf_service.size_mb(len(data)))
    if pdf_service.size_mb(len(data)) > config.LARGE_UPLOAD_MB:
        data = pdf_service.compress_pdf(data)

    stages = []
    file_path = pdf_service.storage_path(user.id, file.filename)
    try:
        store.upload_file(config.PDF_BUCKET, file_path, data, pdf_service.PDF_MIME)
        stages.append("uploaded")
        pdf = store.insert_pdf(user.id, file.filename or "document.pdf", file_path, len(data))
        stages.append("recorded")
    except StudyGenieError as e:
        if "uploaded" in stages:
            _discard_upload(store, file_path)
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Error recording upload %s: %s", file_path, e)
        if "uploaded" in stages:
            _discard_upload(store, file_path)
        raise HTTPException(status_code=500, detail="Failed to save PDF record")

    try:
        result = await process_pdf(store, pdf["id"], file_path)
    except Exception as e:
        raise HTTPException(
            status_code=502,
            detail=f"PDF {pdf['id']} was uploaded but processing failed: {getattr(e, 'message', e)}",
        )
    stages.append("processed")

    return {
        "success": True,
        "message": "Your PDF is ready for AI study materials",
        "pdf": without_text(store.get_pdf(pdf["id"], user.id)),
        "extractor": result.extractor,
        "warnings": warnings,
        "stages": stages,
    }
