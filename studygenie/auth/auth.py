import logging
from dataclasses import dataclass

from fastapi import APIRouter, Request, HTTPException, status, Depends
from pydantic import BaseModel
from supabase import Client

from studygenie.services.supabase_service import get_supabase, new_auth_client

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class CurrentUser:
    id: str
    email: str | None
    full_name: str | None
    access_token: str


class Credentials(BaseModel):
    email: str
    password: str


class SignupRequest(Credentials):
    full_name: str | None = None


def get_supabase_client() -> Client:
    return get_supabase()


def get_auth_client() -> Client:
    return new_auth_client()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split("Bearer ", 1)[1].strip() or None
    # Browser sessions created by /auth/login
    return request.session.get("access_token")


# --- Token Verification Dependency ---
async def get_current_user(request: Request, client: Client = Depends(get_supabase_client)) -> CurrentUser:
    """
    Verifies the Supabase access token from the Authorization header (or the session).
    Returns the authenticated user, raises 401 otherwise.
    """
    token = _bearer_token(request)
    if not token:
        raise _unauthorized("Missing or invalid Authorization header")

    try:
        user_response = client.auth.get_user(token)
    except Exception as e:
        logger.info("Token validation failed: %s", e)
        raise _unauthorized("Invalid or expired token")

    user = user_response.user if user_response else None
    if not user:
        raise _unauthorized("Invalid or expired token")

    metadata = user.user_metadata or {}
    return CurrentUser(
        id=user.id,
        email=user.email,
        full_name=metadata.get("full_name"),
        access_token=token,
    )


# --- Auth Routes ---
@router.post("/signup")
async def signup(body: SignupRequest, client: Client = Depends(get_auth_client)):
    try:
        response = client.auth.sign_up({
            "email": body.email,
            "password": body.password,
            "options": {"data": {"full_name": body.full_name or ""}},
        })
    except Exception as e:
        logger.info("Sign up failed for %s: %s", body.email, e)
        raise HTTPException(status_code=400, detail=str(e))

    if not response.user:
        raise HTTPException(status_code=400, detail="Sign up failed.")
    return {
        "user_id": response.user.id,
        "email": response.user.email,
        # No session means the project requires email confirmation first
        "confirmation_required": response.session is None,
    }


@router.post("/login")
async def login(request: Request, body: Credentials, client: Client = Depends(get_auth_client)):
    try:
        response = client.auth.sign_in_with_password({"email": body.email, "password": body.password})
    except Exception as e:
        logger.info("Login failed for %s: %s", body.email, e)
        raise _unauthorized("Invalid email or password")

    if not response.session or not response.user:
        raise _unauthorized("Invalid email or password")

    request.session["access_token"] = response.session.access_token
    request.session["user_id"] = response.user.id
    logger.info("Session created for user %s", response.user.id)
    return {
        "access_token": response.session.access_token,
        "user_id": response.user.id,
        "email": response.user.email,
    }


@router.post("/logout")
async def logout(request: Request, client: Client = Depends(get_auth_client)):
    token = _bearer_token(request)
    if token:
        try:
            client.auth.admin.sign_out(token)
        except Exception as e:
            # The session is cleared locally either way
            logger.info("Remote sign out failed: %s", e)
    request.session.clear()
    return {"message": "Successfully logged out"}
