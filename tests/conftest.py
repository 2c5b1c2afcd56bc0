import pytest
from fastapi.testclient import TestClient

from interview_coach.config import Settings
from interview_coach.main import create_app
from interview_coach.services.ai_client import AIClient


class FakeAIClient(AIClient):
    """AIClient that replays canned replies and records every prompt."""

    model_name = "fake-model"

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.prompts = []
        self.options = []
        self.closed = False

    async def _complete(self, prompt, **options):
        self.prompts.append(prompt)
        self.options.append(options)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""

    async def close(self):
        self.closed = True


def make_pdf(text: str) -> bytes:
    """Build a one-page PDF showing `text` in Helvetica."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(out)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Isolated settings backed by a temporary SQLite file."""
    return Settings(
        _env_file=None,
        ai_backend="gemini",
        gemini_api_key="test-key",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'sessions.db'}",
    )


@pytest.fixture
def fake_ai() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture
def api_client(settings, fake_ai):
    """TestClient running the full lifespan against the fake AI client."""
    app = create_app(settings, ai_client=fake_ai)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def resume_pdf() -> bytes:
    return make_pdf("Jane Doe - Senior Python developer - FastAPI and PostgreSQL")
