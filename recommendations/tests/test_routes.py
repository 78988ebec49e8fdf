"""
API route tests. The app is assembled from the router alone so no real
database or OpenAI key is touched.
"""

from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import FakeLLM, make_full_profile
from db import get_session
from recommendations.logic.contracts import GeneratedRecommendation
from recommendations.logic.persistence import save_recommendations
from recommendations.logic.stage import get_current_academic_year
from recommendations.routes import router

# Always a junior relative to today, so every stage includes general advice
JUNIOR_CLASS = get_current_academic_year(date.today()) + 1

GENERAL_PAYLOAD = {"general_recommendations": [
    {"title": "Build a testing plan", "reasoning": "Scores anchor the college list.", "priority": "high"},
]}


@pytest.fixture
def client(db_override):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_session] = db_override
    with TestClient(app) as client:
        yield client


@pytest.fixture
def profile_id(session_factory):
    session = session_factory()
    try:
        profile = make_full_profile(session, graduation_year=JUNIOR_CLASS)
        save_recommendations(session, profile.id, [
            GeneratedRecommendation(category="general", title="Low item", reasoning="r", priority="low"),
            GeneratedRecommendation(category="school", title="Rice University", reasoning="r", priority="high", fit_score=0.81234),
        ], "v1")
        session.commit()
        return profile.id
    finally:
        session.close()


def _first_item_id(client, profile_id):
    return client.get(f"/recommendations/{profile_id}").json()["recommendations"][0]["id"]


def test_health(client):
    response = client.get("/recommendations/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_recommendations(client, profile_id):
    response = client.get(f"/recommendations/{profile_id}")

    assert response.status_code == 200
    body = response.json()
    assert [r["title"] for r in body["recommendations"]] == ["Rice University", "Low item"]
    assert body["recommendations"][0]["fit_score"] == 0.812
    assert body["recommendations"][0]["status"] == "active"
    assert body["stage"]["graduation_year"] == JUNIOR_CLASS
    assert body["last_generated"] is not None


def test_list_unknown_profile(client):
    assert client.get("/recommendations/missing").status_code == 404


def test_stage(client, profile_id):
    response = client.get(f"/recommendations/{profile_id}/stage")

    assert response.status_code == 200
    assert set(response.json()) >= {"stage", "grade", "season", "recommendation_types"}


def test_dismiss_with_feedback(client, profile_id):
    item_id = _first_item_id(client, profile_id)

    response = client.post(f"/recommendations/items/{item_id}/dismiss", json={"feedback": "Too far from home"})

    assert response.status_code == 200
    assert response.json()["status"] == "dismissed"
    assert response.json()["user_feedback"] == "Too far from home"
    remaining = client.get(f"/recommendations/{profile_id}").json()["recommendations"]
    assert [r["title"] for r in remaining] == ["Low item"]


def test_dismiss_without_body(client, profile_id):
    item_id = _first_item_id(client, profile_id)

    response = client.post(f"/recommendations/items/{item_id}/dismiss")

    assert response.status_code == 200
    assert response.json()["user_feedback"] is None


def test_save_and_act(client, profile_id):
    item_id = _first_item_id(client, profile_id)

    saved = client.post(f"/recommendations/items/{item_id}/save").json()
    acted = client.post(f"/recommendations/items/{item_id}/acted-upon").json()

    assert saved["status"] == "saved"
    assert saved["saved_at"] is not None
    assert acted["status"] == "acted_upon"


def test_status_update_unknown_item(client):
    assert client.post("/recommendations/items/missing/save").status_code == 404
    assert client.post("/recommendations/items/missing/acted-upon").status_code == 404
    assert client.post("/recommendations/items/missing/dismiss").status_code == 404


def test_generate(client, profile_id, monkeypatch):
    llm = FakeLLM({
        "SchoolRecommendationSchema": {"recommendations": []},
        "ProgramRecommendationSchema": {"recommendations": []},
        "MasterRecommendationSchema": GENERAL_PAYLOAD,
    })
    monkeypatch.setattr("recommendations.logic.engine.default_llm", llm)

    response = client.post(f"/recommendations/{profile_id}/generate")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["failed_sources"] == []
    assert [r["title"] for r in body["recommendations"]] == ["Build a testing plan"]
    # Previous batch replaced
    listed = client.get(f"/recommendations/{profile_id}").json()["recommendations"]
    assert [r["title"] for r in listed] == ["Build a testing plan"]


def test_generate_unknown_profile(client, monkeypatch):
    monkeypatch.setattr("recommendations.logic.engine.default_llm", FakeLLM())

    assert client.post("/recommendations/missing/generate").status_code == 404
