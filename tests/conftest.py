import json

import httpx
import pytest
from fastapi.testclient import TestClient

from fake_supabase import FakeSupabase
from studygenie import config
from studygenie.auth.auth import get_auth_client, get_supabase_client
from studygenie.main import app
from studygenie.services.gateway_service import GatewayClient, get_gateway
from studygenie.services.supabase_service import SupabaseStore, get_store

USER_TOKEN = "test-token"
USER_ID = "user-1"
OTHER_TOKEN = "other-token"
OTHER_ID = "user-2"


def make_pdf(text: str = "Photosynthesis converts light energy into chemical energy") -> bytes:
    """Builds a one-page PDF with a single line of Helvetica text."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


class FakeGateway:
    """Queues chat/completions replies and records the requests it receives."""

    def __init__(self):
        self.replies = []
        self.requests = []

    def reply(self, content, status_code=200):
        if not isinstance(content, str):
            content = json.dumps(content)
        self.replies.append((status_code, content))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        status_code, content = self.replies.pop(0)
        if status_code != 200:
            return httpx.Response(status_code, text=content)
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})

    def client(self) -> GatewayClient:
        return GatewayClient(
            api_key="test-key",
            url="https://gateway.test/v1/chat/completions",
            model="test-model",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture(autouse=True)
def no_gemini(monkeypatch):
    # Gemini is never called from tests; extraction falls through to pypdf.
    monkeypatch.setattr(config, "GEMINI_API_KEY", None)


@pytest.fixture
def fake_db():
    db = FakeSupabase()
    db.auth.add_user(USER_TOKEN, USER_ID, "ada@example.com", "Ada Lovelace")
    db.auth.add_user(OTHER_TOKEN, OTHER_ID, "bob@example.com")
    return db


@pytest.fixture
def store(fake_db):
    return SupabaseStore(fake_db)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def client(fake_db, store, fake_gateway):
    app.dependency_overrides[get_supabase_client] = lambda: fake_db
    app.dependency_overrides[get_auth_client] = lambda: fake_db
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_gateway] = fake_gateway.client
    with TestClient(app) as test_client:
        test_client.headers["Authorization"] = f"Bearer {USER_TOKEN}"
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def pdf_record(store, fake_db):
    """A processed PDF owned by USER_ID."""
    pdf = store.insert_pdf(USER_ID, "biology.pdf", f"{USER_ID}/1700000000000.pdf", 1234)
    fake_db.storage.from_(config.PDF_BUCKET).upload(pdf["file_path"], make_pdf())
    store.update_pdf(pdf["id"], {
        "upload_status": "completed",
        "extracted_text": "Photosynthesis converts light energy into chemical energy. " * 100,
    })
    return store.get_pdf(pdf["id"])
