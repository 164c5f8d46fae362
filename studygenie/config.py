import os
import logging
from dotenv import load_dotenv

# Load variables from the .env file in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), '..', '.env')
load_dotenv(dotenv_path=dotenv_path)

logger = logging.getLogger(__name__)

# --- Supabase ---
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

PDF_BUCKET = "pdfs"
AVATAR_BUCKET = "avatars"
PDF_TABLE = "uploaded_pdfs"
OUTPUT_TABLE = "ai_outputs"
PROFILE_TABLE = "profiles"

# --- Gemini (text extraction) ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME", "gemini-2.5-flash")

# --- LLM gateway (study material generation) ---
LLM_GATEWAY_URL = os.getenv("LLM_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
LLM_GATEWAY_API_KEY = os.getenv("LLM_GATEWAY_API_KEY") or os.getenv("LOVABLE_API_KEY")
LLM_MODEL_NAME = os.getenv("LLM_MODEL_NAME", "google/gemini-2.5-flash")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

# --- App ---
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "a_default_secret_key")
FRONTEND_URLS = [
    url.strip()
    for url in os.getenv("FRONTEND_URLS", "http://localhost:5173,http://localhost:8080").split(",")
    if url.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Limits ---
MAX_UPLOAD_MB = 8
LARGE_UPLOAD_MB = 6
MAX_AVATAR_MB = 2
MAX_EXTRACTED_CHARS = 5000
PROMPT_TEXT_CHARS = 3000
MAX_PDF_PAGES = 25

if not SUPABASE_URL or not (SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY):
    logger.warning("SUPABASE_URL / SUPABASE keys not found in environment. Database features will not work.")
if not GEMINI_API_KEY:
    logger.warning("GEMINI_API_KEY not found in environment. Extraction will fall back to local parsing.")
if not LLM_GATEWAY_API_KEY:
    logger.warning("LLM_GATEWAY_API_KEY not found in environment. Content generation will not work.")
