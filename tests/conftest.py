# FILE: tests/conftest.py
"""
Pytest configuration for RoadmapX test suite.

Provides:
- in-memory SQLite shared across sessions (StaticPool)
- a TestClient on the real app with get_db / require_user overridden
- a switchable test identity so ownership rules can be exercised
"""
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from roadmapx.aws import reset_clients
from roadmapx.db import Base, get_db, import_models
from roadmapx.auth import require_user
from roadmapx.users import service as users_service

TEST_IDENTITY = {
    "cognito_id": "cognito-test-1",
    "email": "learner@example.com",
    "name": "Test Learner",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Tests never see a developer's local AWS / dev-mode settings."""
    for name in (
        "ROADMAPX_DEV_AUTH",
        "DEV_FAKE_COMPREHEND",
        "S3_BUCKET_NAME",
        "S3_REGION",
        "AI_ARTIFACTS_BUCKET",
        "SAGEMAKER_ROLE_ARN",
        "PERSONALIZE_ROLE_ARN",
        "ROADMAPX_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    reset_clients()
    yield
    reset_clients()


@pytest.fixture
def engine():
    import_models()
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def mock_db(session_factory):
    """Database session on the shared in-memory engine."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def test_user(mock_db):
    return users_service.upsert_user(
        mock_db, TEST_IDENTITY["cognito_id"], TEST_IDENTITY["email"], TEST_IDENTITY["name"]
    )


@pytest.fixture
def identity():
    """Identity the overridden require_user resolves. Mutate to switch users."""
    return dict(TEST_IDENTITY)


@pytest.fixture
def client(session_factory, identity):
    from main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def override_require_user(db: Session = Depends(get_db)):
        return users_service.upsert_user(db, identity["cognito_id"], identity["email"], identity["name"])

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[require_user] = override_require_user
    yield TestClient(app)
    app.dependency_overrides.clear()


def switch_user(identity: dict, cognito_id: str = "cognito-other", email: str = "other@example.com"):
    identity.update(cognito_id=cognito_id, email=email, name="Other Learner")


# =============================================================================
# Payload builders
# =============================================================================

def roadmap_payload(**overrides) -> dict:
    data = {
        "title": "Learn FastAPI",
        "description": "Backend development path",
        "skills": ["Python", "FastAPI"],
        "goal": "Build production APIs",
        "time_frame": 8,
        "skill_level": "beginner",
        "preference": "hands-on",
        "phases": [
            {
                "title": "Basics",
                "order": 1,
                "duration": "2 weeks",
                "milestones": [
                    {
                        "title": "Install Python",
                        "order": 1,
                        "estimated_hours": 2,
                        "resources": [
                            {"name": "Tutorial", "url": "https://docs.python.org/3/tutorial/", "type": "document"},
                        ],
                    },
                    {"title": "Hello API", "order": 2},
                ],
            },
            {"title": "Deploy", "order": 2, "duration": "6 weeks", "milestones": []},
        ],
    }
    data.update(overrides)
    return data


def comprehend_result(entities=None, key_phrases=None, sentiment="POSITIVE", language="en") -> dict:
    """Shape returned by roadmapx.ai.comprehend.analyze_text."""
    return {
        "language": [{"LanguageCode": language, "Score": 0.99}] if language else [],
        "sentiment": {
            "Sentiment": sentiment,
            "SentimentScore": {"Positive": 0.8, "Negative": 0.05, "Neutral": 0.1, "Mixed": 0.05},
        },
        "entities": entities or [],
        "key_phrases": key_phrases or [],
    }
