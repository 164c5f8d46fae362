import logging
import re
import urllib.parse

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from studygenie.auth.auth import CurrentUser, get_current_user
from studygenie.routers.common import to_http_exception
from studygenie.services.errors import StudyGenieError
from studygenie.services.export_service import render_output
from studygenie.services.gateway_service import GatewayClient, get_gateway
from studygenie.services.generation_service import check_output_type, generate_content
from studygenie.services.quiz_service import grade_quiz
from studygenie.services.supabase_service import SupabaseStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


class QuizAnswers(BaseModel):
    answers: dict[str, str | bool] = {}


def _content_disposition(file_name: str | None, output_type: str) -> str:
    stem = (file_name or "studygenie").rsplit(".", 1)[0]
    # Header values go out as latin-1; the plain filename keeps printable ASCII only.
    fallback = re.sub(r'[^\x20-\x7e]|["\\]', "_", stem).strip() or "studygenie"
    return (
        f'attachment; filename="{fallback}-{output_type}.txt"; '
        f"filename*=UTF-8''{urllib.parse.quote(stem, safe='')}-{output_type}.txt"
    )


def _outputs_by_type(store: SupabaseStore, pdf_id: str) -> dict:
    # Rows come back oldest first, so a newer row of the same type wins.
    return {row["output_type"]: row["content"] for row in store.list_outputs(pdf_id)}


@router.get("/pdfs/{pdf_id}/outputs")
async def get_outputs(pdf_id: str, user: CurrentUser = Depends(get_current_user), store: SupabaseStore = Depends(get_store)):
    try:
        pdf = store.get_pdf(pdf_id, user.id)
        return {"pdf": pdf, "outputs": _outputs_by_type(store, pdf_id)}
    except StudyGenieError as e:
        raise to_http_exception(e)


@router.post("/pdfs/{pdf_id}/outputs/{output_type}")
async def create_output(
    pdf_id: str,
    output_type: str,
    regenerate: bool = False,
    user: CurrentUser = Depends(get_current_user),
    store: SupabaseStore = Depends(get_store),
    gateway: GatewayClient = Depends(get_gateway),
):
    try:
        content = await generate_content(store, gateway, pdf_id, output_type, user_id=user.id, regenerate=regenerate)
    except StudyGenieError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Error generating %s for %s: %s", output_type, pdf_id, e)
        raise HTTPException(status_code=500, detail="Generation failed")
    return {"success": True, "message": f"{output_type} has been created", "content": content}


@router.get("/pdfs/{pdf_id}/outputs/{output_type}/export", response_class=PlainTextResponse)
async def export_output(
    pdf_id: str,
    output_type: str,
    user: CurrentUser = Depends(get_current_user),
    store: SupabaseStore = Depends(get_store),
):
    try:
        check_output_type(output_type)
        pdf = store.get_pdf(pdf_id, user.id)
        outputs = _outputs_by_type(store, pdf_id)
    except StudyGenieError as e:
        raise to_http_exception(e)

    if output_type not in outputs:
        raise HTTPException(status_code=404, detail=f"No {output_type} generated for this PDF yet.")

    return PlainTextResponse(
        render_output(output_type, outputs[output_type]),
        headers={"Content-Disposition": _content_disposition(pdf.get("file_name"), output_type)},
    )


@router.post("/pdfs/{pdf_id}/quiz/grade")
async def grade(
    pdf_id: str,
    body: QuizAnswers,
    user: CurrentUser = Depends(get_current_user),
    store: SupabaseStore = Depends(get_store),
):
    try:
        store.get_pdf(pdf_id, user.id)
        quiz = _outputs_by_type(store, pdf_id).get("quiz")
    except StudyGenieError as e:
        raise to_http_exception(e)

    if not quiz:
        raise HTTPException(status_code=404, detail="No quiz generated for this PDF yet.")
    return grade_quiz(quiz, body.answers)
