import asyncio
import os
from types import SimpleNamespace

import pytest

# Set required environment variables before any src imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("GROQ_API_KEY", "test-key")

from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from src.db.session import build_engine, get_session, init_db
from src.main import app
from src.services.generation_client import GenerationClient, get_generation_client
from src.services.staging_store import StagingArena

STUDY_TEXT = (
    "Photosynthesis is the process plants use to convert light energy into chemical energy. "
    "It takes place in the chloroplasts and produces glucose and oxygen from carbon dioxide and water."
)

VALID_PAYLOAD = (
    '{"flashcards": ['
    '{"front": "What is photosynthesis?", "back": "Turning light into chemical energy"},'
    '{"front": "Where does it happen?", "back": "In the chloroplasts"}'
    "]}"
)


class FakeGroq:
    """Substitui o AsyncGroq: registra as chamadas, devolve conteúdo, levanta erro ou demora."""

    def __init__(self, content=VALID_PAYLOAD, error=None, delay=0.0):
        self.content = content
        self.error = error
        self.delay = delay
        self.calls = []
        self.cancelled = False
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))],
            usage=SimpleNamespace(prompt_tokens=12, completion_tokens=30, total_tokens=42),
        )


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def fake_groq():
    return FakeGroq()


@pytest.fixture
def client(engine, fake_groq):
    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_generation_client] = lambda: GenerationClient(client=fake_groq, model="test-model")
    app.state.staging = StagingArena()

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return {"X-User-Id": "alice"}


@pytest.fixture
def bob():
    return {"X-User-Id": "bob"}


@pytest.fixture
def study_text():
    return STUDY_TEXT
