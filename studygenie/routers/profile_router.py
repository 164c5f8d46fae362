import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from studygenie import config
from studygenie.auth.auth import CurrentUser, get_current_user
from studygenie.routers.common import to_http_exception
from studygenie.services.errors import StudyGenieError
from studygenie.services.pdf_service import size_mb
from studygenie.services.supabase_service import SupabaseStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


class ProfileUpdate(BaseModel):
    full_name: str = ""
    avatar_url: str | None = None


def initials(full_name: str | None) -> str:
    """Up to two upper-cased initials from the name, "U" when there is no name."""
    words = (full_name or "").split()
    if not words:
        return "U"
    return "".join(word[0] for word in words).upper()[:2]


def _profile_view(user: CurrentUser, profile: dict | None) -> dict:
    profile = profile or {}
    full_name = profile.get("full_name") or user.full_name or ""
    return {
        "id": user.id,
        "email": profile.get("email") or user.email,
        "full_name": full_name,
        "avatar_url": profile.get("avatar_url") or "",
        "initials": initials(full_name),
    }


@router.get("/userinfo")
async def get_user_info(user: CurrentUser = Depends(get_current_user)):
    return {"user_id": user.id, "email": user.email, "full_name": user.full_name or "Student"}


@router.get("/profile")
async def get_profile(user: CurrentUser = Depends(get_current_user), store: SupabaseStore = Depends(get_store)):
    try:
        return _profile_view(user, store.get_profile(user.id))
    except StudyGenieError as e:
        raise to_http_exception(e)


@router.put("/profile")
async def update_profile(body: ProfileUpdate, user: CurrentUser = Depends(get_current_user), store: SupabaseStore = Depends(get_store)):
    try:
        current = store.get_profile(user.id) or {}
        avatar_url = body.avatar_url if body.avatar_url is not None else current.get("avatar_url")
        saved = store.upsert_profile(user.id, user.email, body.full_name, avatar_url)
    except StudyGenieError as e:
        raise to_http_exception(e)
    return _profile_view(user, saved)


@router.post("/profile/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    store: SupabaseStore = Depends(get_store),
):
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Invalid file type. Please upload an image file.")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file.")
    if size_mb(len(data)) > config.MAX_AVATAR_MB:
        raise HTTPException(status_code=400, detail=f"File too large. Please upload an image smaller than {config.MAX_AVATAR_MB}MB.")

    ext = file.filename.rsplit(".", 1)[1].lower() if file.filename and "." in file.filename else "png"
    path = f"{user.id}/avatar.{ext}"
    try:
        store.upload_file(config.AVATAR_BUCKET, path, data, file.content_type, upsert=True)
        avatar_url = store.public_url(config.AVATAR_BUCKET, path)
        current = store.get_profile(user.id) or {}
        saved = store.upsert_profile(user.id, user.email, current.get("full_name") or user.full_name, avatar_url)
    except StudyGenieError as e:
        raise to_http_exception(e)

    logger.info("Avatar updated for user %s", user.id)
    return _profile_view(user, saved)
