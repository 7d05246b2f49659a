import os
from types import SimpleNamespace

from cryptography.fernet import Fernet

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENCRYPTION_KEY"] = Fernet.generate_key().decode()
os.environ["GROQ_API_KEY"] = ""
os.environ["SEED_DEMO_DATA"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from health_tracker.database import Base, get_db, get_session_factory
from health_tracker.llm_schemas import (
    ExtractedData,
    ExtractedMarker,
    ExtractedRecommendation,
    InteractionCheckResult,
    InteractionFinding,
)
from health_tracker.main import app
from health_tracker.scheduler import get_task_dispatcher
from health_tracker.services.ai_client import get_ai_client

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def sample_extraction() -> ExtractedData:
    return ExtractedData(
        markers=[
            ExtractedMarker(
                name="Vitamin D", value=18, unit="ng/mL",
                normal_min=30, normal_max=100, status="low", category="vitamins",
            ),
            ExtractedMarker(
                name="Hemoglobin", value=14.2, unit="g/dL",
                normal_min=13.5, normal_max=17.5, status="normal", category="blood",
            ),
        ],
        recommendations=[
            ExtractedRecommendation(
                type="supplement", title="Take Vitamin D3",
                description="Your vitamin D level is below the normal range.",
                priority="high", related_marker="Vitamin D",
                action_items=["Take 2000 IU daily", "Retest in 3 months"],
            ),
        ],
    )


class FakeAIClient:
    """Stands in for the Groq-backed client; results can be replaced per test."""

    def __init__(self):
        self.extraction = sample_extraction()
        self.interaction_result = None
        self.interaction_calls = []

    def extract_lab_data(self, text):
        return self.extraction

    def check_interactions(self, medications, supplements):
        self.interaction_calls.append((medications, supplements))
        if self.interaction_result is not None:
            return self.interaction_result
        if not medications or not supplements:
            return InteractionCheckResult()
        # One moderate finding per medication/supplement pair
        return InteractionCheckResult(interactions=[
            InteractionFinding(
                medication_id=m.id, supplement_id=s.id, severity="moderate",
                description=f"{m.name} may interact with {s.name}.",
                recommendation="Take them at least two hours apart.",
                separation_minutes=120,
            )
            for m in medications for s in supplements
        ])


def run_now(func, *args):
    func(*args)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def fake_ai():
    return FakeAIClient()


@pytest.fixture()
def client(fake_ai):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    app.dependency_overrides[get_ai_client] = lambda: fake_ai
    app.dependency_overrides[get_task_dispatcher] = lambda: run_now

    # Not used as a context manager, so the scheduler startup hook does not run
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture()
def other_user(client):
    response = client.post("/api/users", json={"username": "alice", "password": "secret"})
    assert response.status_code == 201
    return {"X-User-ID": str(response.json()["id"])}


def make_medication(client, headers=None, **overrides):
    body = {"name": "Lisinopril", "dosage": "10mg", "frequency": "Once daily"}
    body.update(overrides)
    response = client.post("/api/medications", json=body, headers=headers or {})
    assert response.status_code == 201, response.text
    return response.json()


def make_supplement(client, headers=None, **overrides):
    body = {"name": "Vitamin D3", "dosage": "2000 IU", "frequency": "Once daily"}
    body.update(overrides)
    response = client.post("/api/supplements", json=body, headers=headers or {})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def pill_factory(client):
    return SimpleNamespace(
        medication=lambda **kw: make_medication(client, **kw),
        supplement=lambda **kw: make_supplement(client, **kw),
    )
