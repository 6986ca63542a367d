"""
- Spins up a temp in-memory credential DB
- Create tables before tests run
- Provide a credential store bound to that DB, plus a fake score server
- Override FastAPI's dependencies so routes use the test pieces.
- Provide a client fixture (TestClient(app)) that already has the overrides applied.
"""
import os
import pytest
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the app does NOT run dev-only startup hooks, and never calls random.org
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("RANDOM_ORG_ENABLED", "0")

from codebreaker.db import Base
from codebreaker import models  # noqa: F401
from codebreaker import main as app_main
from codebreaker.credentials import CredentialStore
from codebreaker.dispatch import InlineDispatcher
from codebreaker.errors import TransportError
from codebreaker.schemas import HighScoresPayload
from codebreaker.store import GameStore

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"
TEST_ACCOUNT_TYPE = "test.codebreaker"


class FakeRemote:
    """Stands in for RemoteClient; records every call."""

    def __init__(self):
        self.reachable = True
        self.verify_results = []
        self.verify_error = None
        self.submit_error = None
        self.scores = HighScoresPayload()
        self.instructions = None
        self.calls = []

    def is_reachable(self):
        return self.reachable

    def verify_credentials(self, username, password):
        self.calls.append(("verify", username, password))
        if self.verify_error:
            raise self.verify_error
        if self.verify_results:
            return self.verify_results.pop(0)
        return 42

    def submit_score(self, session):
        self.calls.append(("submit", session.auth_token, session.secret_code, session.score))
        if self.submit_error:
            raise self.submit_error
        return '{"result": 1}'

    def get_high_scores(self):
        self.calls.append(("scores",))
        if not self.reachable:
            raise TransportError("offline")
        return self.scores

    def get_instructions(self):
        return self.instructions


@pytest.fixture(scope="session")
def engine():
    # StaticPool + check_same_thread=False: one in-memory DB shared across threads
    engine = create_engine(
        TEST_DATABASE_URL,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(autouse=True)
def _clean_db(engine):
    """Keep tests independent: the store commits, so wipe rows before each test."""
    with engine.begin() as conn:
        conn.execute(text("DELETE FROM accounts"))
    yield


@pytest.fixture
def credential_store(session_factory) -> CredentialStore:
    return CredentialStore(session_factory, TEST_ACCOUNT_TYPE)


@pytest.fixture
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def game_store() -> GameStore:
    return GameStore()


@pytest.fixture(autouse=True)
def override_deps(credential_store, fake_remote, game_store) -> Generator:
    """Force the app to use our test pieces for every request."""
    app_main.app.dependency_overrides[app_main.get_credentials] = lambda: credential_store
    app_main.app.dependency_overrides[app_main.get_remote] = lambda: fake_remote
    app_main.app.dependency_overrides[app_main.get_store] = lambda: game_store
    app_main.app.dependency_overrides[app_main.get_dispatcher] = lambda: InlineDispatcher()
    yield
    app_main.app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app_main.app)
