# services/supabase_service.py
# Thin CRUD layer over the Supabase tables and storage buckets used by StudyGenie.
import logging
from datetime import datetime, timezone
from functools import lru_cache

from supabase import create_client, Client

from studygenie import config
from studygenie.services.errors import ConfigurationError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

PDF_LIST_COLUMNS = "id, user_id, file_name, file_path, file_size, upload_status, created_at"


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Service-role client shared by the API; it bypasses row level security,
    so every query below scopes by user id itself."""
    key = config.SUPABASE_SERVICE_ROLE_KEY or config.SUPABASE_ANON_KEY
    if not config.SUPABASE_URL or not key:
        raise ConfigurationError("Supabase URL and Key must be set in the environment variables.")
    return create_client(config.SUPABASE_URL, key)


def new_auth_client() -> Client:
    """Fresh anon-key client for sign in / sign up so user sessions never leak
    into the shared service client."""
    key = config.SUPABASE_ANON_KEY or config.SUPABASE_SERVICE_ROLE_KEY
    if not config.SUPABASE_URL or not key:
        raise ConfigurationError("Supabase URL and Key must be set in the environment variables.")
    return create_client(config.SUPABASE_URL, key)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SupabaseStore:
    def __init__(self, client: Client):
        self.client = client

    # --- PDF records ---

    def list_pdfs(self, user_id: str) -> list[dict]:
        resp = (
            self.client.table(config.PDF_TABLE)
            .select(PDF_LIST_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return resp.data or []

    def get_pdf(self, pdf_id: str, user_id: str | None = None) -> dict:
        query = self.client.table(config.PDF_TABLE).select("*").eq("id", pdf_id)
        if user_id:
            query = query.eq("user_id", user_id)
        resp = query.limit(1).execute()
        if not resp.data:
            raise NotFoundError(f"PDF {pdf_id} not found.")
        return resp.data[0]

    def insert_pdf(self, user_id: str, file_name: str, file_path: str, file_size: int) -> dict:
        payload = {
            "user_id": user_id,
            "file_name": file_name,
            "file_path": file_path,
            "file_size": file_size,
            "upload_status": "processing",
        }
        resp = self.client.table(config.PDF_TABLE).insert(payload).execute()
        if not resp.data:
            raise StorageError("Failed to create PDF record.")
        logger.info("Inserted PDF record %s for user %s", resp.data[0].get("id"), user_id)
        return resp.data[0]

    def update_pdf(self, pdf_id: str, fields: dict) -> None:
        self.client.table(config.PDF_TABLE).update(fields).eq("id", pdf_id).execute()

    def delete_pdf(self, pdf_id: str, user_id: str) -> dict:
        """Removes the record, its AI outputs and the stored file."""
        pdf = self.get_pdf(pdf_id, user_id)
        self.delete_outputs(pdf_id)
        self.client.table(config.PDF_TABLE).delete().eq("id", pdf_id).eq("user_id", user_id).execute()
        if pdf.get("file_path"):
            try:
                self.remove_files(config.PDF_BUCKET, [pdf["file_path"]])
            except StorageError as e:
                # The row is gone already; an orphaned object is only logged.
                logger.warning("Could not remove stored file %s: %s", pdf["file_path"], e)
        logger.info("Deleted PDF %s for user %s", pdf_id, user_id)
        return pdf

    # --- AI outputs ---

    def list_outputs(self, pdf_id: str) -> list[dict]:
        resp = (
            self.client.table(config.OUTPUT_TABLE)
            .select("*")
            .eq("pdf_id", pdf_id)
            .order("created_at", desc=False)
            .execute()
        )
        return resp.data or []

    def insert_output(self, pdf_id: str, user_id: str, output_type: str, content) -> dict:
        payload = {
            "pdf_id": pdf_id,
            "user_id": user_id,
            "output_type": output_type,
            "content": content,
        }
        resp = self.client.table(config.OUTPUT_TABLE).insert(payload).execute()
        if not resp.data:
            raise StorageError(f"Failed to store {output_type} output.")
        return resp.data[0]

    def delete_outputs(self, pdf_id: str, output_type: str | None = None) -> None:
        query = self.client.table(config.OUTPUT_TABLE).delete().eq("pdf_id", pdf_id)
        if output_type:
            query = query.eq("output_type", output_type)
        query.execute()

    # --- Profiles ---

    def get_profile(self, user_id: str) -> dict | None:
        resp = self.client.table(config.PROFILE_TABLE).select("*").eq("id", user_id).limit(1).execute()
        return resp.data[0] if resp.data else None

    def upsert_profile(self, user_id: str, email: str | None, full_name: str | None, avatar_url: str | None) -> dict:
        payload = {
            "id": user_id,
            "email": email,
            "full_name": full_name,
            "avatar_url": avatar_url,
            "updated_at": _now_iso(),
        }
        resp = self.client.table(config.PROFILE_TABLE).upsert(payload).execute()
        return resp.data[0] if resp.data else payload

    # --- Storage ---

    def upload_file(self, bucket: str, path: str, data: bytes, content_type: str, upsert: bool = False) -> None:
        try:
            self.client.storage.from_(bucket).upload(
                path=path,
                file=data,
                file_options={"content-type": content_type, "upsert": "true" if upsert else "false"},
            )
        except Exception as e:
            logger.error("Upload to %s/%s failed: %s", bucket, path, e)
            raise StorageError(f"Upload failed: {e}") from e

    def download_file(self, bucket: str, path: str) -> bytes:
        try:
            return self.client.storage.from_(bucket).download(path)
        except Exception as e:
            logger.error("Download of %s/%s failed: %s", bucket, path, e)
            raise StorageError(f"Download failed: {e}") from e

    def remove_files(self, bucket: str, paths: list[str]) -> None:
        try:
            self.client.storage.from_(bucket).remove(paths)
        except Exception as e:
            raise StorageError(f"Remove failed: {e}") from e

    def public_url(self, bucket: str, path: str) -> str:
        return self.client.storage.from_(bucket).get_public_url(path)


def get_store() -> SupabaseStore:
    """FastAPI dependency; tests override it with a store over a fake client."""
    return SupabaseStore(get_supabase())
