import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from studygenie import config
from studygenie.auth.auth import router as auth_router
from studygenie.routers import functions_router, output_router, pdf_router, profile_router, status_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# --- App Setup ---
app = FastAPI(title="StudyGenie")

# --- Session Middleware ---
app.add_middleware(
    SessionMiddleware,
    secret_key=config.SESSION_SECRET_KEY,
    max_age=7 * 24 * 60 * 60,
    https_only=False,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.FRONTEND_URLS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Include Routers ---
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(pdf_router.router, prefix="/api", tags=["pdfs"])
app.include_router(output_router.router, prefix="/api", tags=["outputs"])
app.include_router(profile_router.router, prefix="/api", tags=["profile"])
app.include_router(functions_router.router, prefix="/functions/v1", tags=["functions"])
app.include_router(status_router.router)


# --- Root endpoint ---
@app.get("/")
async def root():
    return {"message": "StudyGenie Backend is running!"}


def run():
    uvicorn.run("studygenie.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
