from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ai_proxy.config import GatewayPolicy, Settings
from ai_proxy.database.base import Base
from ai_proxy.models import UsageLog, UserSubscription

# Ensure all models are imported so they're registered with Base.metadata
__all__ = [
    "UsageLog",
    "UserSubscription",
]

GEMINI_OK_RESPONSE = {
    "candidates": [
        {
            "content": {
                "parts": [{"text": '{"intents": [{"type": "LOG_FOOD", "confidence": 0.93}]}'}],
                "role": "model",
            },
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {"promptTokenCount": 181, "candidatesTokenCount": 42, "totalTokenCount": 223},
    "modelVersion": "gemini-2.5-flash",
}


class FakeGeminiClient:
    """Stands in for GeminiClient; records every body it is asked to send."""

    def __init__(self, response: dict | None = None, error: Exception | None = None):
        self.response = GEMINI_OK_RESPONSE if response is None else response
        self.error = error
        self.calls: list[dict] = []
        self.on_call = None

    async def generate_content(self, body: dict) -> dict:
        self.calls.append(body)
        if self.on_call:
            self.on_call(body)
        if self.error:
            raise self.error
        return self.response


def add_usage_logs(
    session: Session,
    user_id: str,
    count: int,
    created_at: datetime | None = None,
) -> None:
    """Insert `count` usage rows for a user (default: now, UTC)."""
    created_at = created_at or datetime.now(timezone.utc)
    session.add_all(
        UsageLog(user_id=user_id, tokens_used=1, created_at=created_at) for _ in range(count)
    )
    session.commit()


def count_usage_logs(session: Session, user_id: str) -> int:
    session.expire_all()
    return session.query(UsageLog).filter(UsageLog.user_id == user_id).count()


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool to ensure all connections share the same in-memory database.
    Without this, each connection would get a fresh database without tables.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def session(engine) -> Session:
    """Create a test database session."""
    TestSessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )
    session = TestSessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "5b0c1a9e-0000-4000-8000-000000000001"


@pytest.fixture
def policy() -> GatewayPolicy:
    return GatewayPolicy()


@pytest.fixture
def gemini() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def subscribe(session: Session, test_user_id: str):
    """Give the test user a subscription tier."""

    def _subscribe(tier: str, user_id: str | None = None) -> UserSubscription:
        subscription = UserSubscription(user_id=user_id or test_user_id, tier=tier)
        session.add(subscription)
        session.commit()
        return subscription

    return _subscribe


@pytest.fixture
def app(policy: GatewayPolicy):
    from ai_proxy.main import create_app

    return create_app(
        settings=Settings(gemini_api_key="test-gemini-key", database_url="sqlite://"),
        policy=policy,
    )


@pytest.fixture
def client(app, engine, gemini: FakeGeminiClient, test_user_id: str) -> TestClient:
    """
    Create a FastAPI test client with in-memory database.

    Auth is overridden to the test user and Gemini is replaced by a fake.
    """
    from ai_proxy.auth import dependencies as auth_deps
    from ai_proxy.auth.schemas import User
    from ai_proxy.database import session as session_module
    from ai_proxy.dependencies import quota as quota_deps

    TestSessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )

    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    def override_get_current_user() -> User:
        return User(id=test_user_id, email="test@test.com")

    app.dependency_overrides[session_module.get_db] = override_get_db
    app.dependency_overrides[auth_deps.get_current_user] = override_get_current_user
    app.dependency_overrides[quota_deps.get_gemini_client] = lambda: gemini

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
