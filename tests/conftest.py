import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from symptomcheck import models  # noqa: F401
from symptomcheck.ai import get_ai_client
from symptomcheck.database import Base, get_db
from symptomcheck.main import app

VALID_ANALYSIS = {
    "analysis": {
        "conditions": [
            {
                "name": "Tension headache",
                "probability": 65,
                "description": "Muscle tension around the head and neck.",
                "severity": "mild",
            },
            {
                "name": "Migraine",
                "probability": 25,
                "description": "Recurring headaches, often one-sided.",
                "severity": "moderate",
            },
        ],
        "summary": "Symptoms are most consistent with a tension headache.",
        "disclaimer": "This is not a medical diagnosis.",
    },
    "recommendations": [
        {
            "type": "self-care",
            "title": "Rest and hydrate",
            "description": "Drink water and rest in a quiet room.",
            "urgency": "low",
        },
        {
            "type": "pharmacy",
            "title": "Pain relief",
            "description": "Ask a pharmacist about over-the-counter pain relief.",
            "urgency": "low",
        },
    ],
    "urgencyLevel": "low",
}

HEADACHE = {
    "name": "Headache",
    "bodyPart": "head",
    "severity": 6,
    "duration": "1-3 days",
    "description": "Dull pressure behind the eyes",
}


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeAIClient:
    """Stands in for openai.OpenAI: only chat.completions.create is used."""

    def __init__(self, content=None, error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def ai_client():
    return FakeAIClient(content=json.dumps(VALID_ANALYSIS))


@pytest.fixture
def client(session_factory, ai_client):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client, email, password="s3cret-pass"):
    resp = client.post("/api/auth/register", json={"email": email, "password": password, "firstName": "Test"})
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client, "alice@healthmail.com")


@pytest.fixture
def other_headers(client):
    return register_and_login(client, "bob@healthmail.com")
