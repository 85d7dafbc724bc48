"""Pytest configuration: isolated settings, a per-test SQLite database, and an LLM client stub.

Settings are read from the environment when ``main`` is first imported, so the
environment is pointed at a throwaway directory before any test module loads.
"""

import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

_TMP = Path(tempfile.mkdtemp(prefix="cardsense-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'cardsense.db'}"
os.environ["LOG_DIR"] = str(_TMP / "logs")
for _var in ("GROQ_API_KEY", "S3_BUCKET"):
    os.environ.pop(_var, None)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from cardsense.api.dependencies import get_pdf_text_extractor  # noqa: E402
from cardsense.core.db import create_db_engine, get_session, init_db  # noqa: E402

USER_ID = "user-1"
HEADERS = {"X-User-Id": USER_ID}


def fake_pdf_to_text(data: bytes) -> str:
    """Treat uploaded "PDF" bytes as already-extracted statement text."""
    return data.decode("utf-8")


class _StubCompletions:
    def __init__(self, replies: list[object]) -> None:
        self.replies = list(replies)
        self.calls: list[dict] = []

    def create(self, **kwargs: object) -> SimpleNamespace:
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class StubLLMClient:
    """Minimal stand-in for the Groq client: replies are returned (or raised) in order."""

    def __init__(self, replies: list[object]) -> None:
        """Queue the replies for successive chat completion calls."""
        self.chat = SimpleNamespace(completions=_StubCompletions(replies))

    @property
    def calls(self) -> list[dict]:
        """Keyword arguments of every completion call made so far."""
        return self.chat.completions.calls


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    """A fresh SQLite database with the service tables."""
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the per-test database."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory: sessionmaker) -> Iterator[Session]:
    """A session on the per-test database."""
    db_session = session_factory()
    yield db_session
    db_session.close()


@pytest.fixture
def client(session_factory: sessionmaker) -> Iterator[TestClient]:
    """API client wired to the per-test database and a text-passthrough PDF extractor."""
    from main import app

    def _session() -> Iterator[Session]:
        db_session = session_factory()
        try:
            yield db_session
        finally:
            db_session.close()

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_pdf_text_extractor] = lambda: fake_pdf_to_text
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
