import json

import pytest
from fastapi.testclient import TestClient

from resq_sentinel import web_app
from resq_sentinel.advisory import AdvisoryClassifier
from resq_sentinel.system import EmergencyClassificationSystem


class ReplyBackend:
    def complete(self, description: str) -> str:
        return json.dumps(
            {
                "emergencyType": "earthquake",
                "severity": "CRITICAL",
                "explanation": "Ground shaking inside a building strongly indicates an earthquake.",
                "firstAidSteps": ["Drop, cover, and hold on", "Stay away from windows"],
            }
        )


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setattr(web_app, "system", EmergencyClassificationSystem(advisory=AdvisoryClassifier(backend=None)))
    return TestClient(web_app.app)


def test_health_reports_advisory_state(client: TestClient) -> None:
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["advisory_enabled"] is False


def test_classify_returns_outcome_with_resources(client: TestClient) -> None:
    resp = client.post("/api/classify", json={"description": "Fire in building"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["emergency_type"] == "fire"
    assert data["severity"] == "UNKNOWN"
    assert data["advisory_status"] == "unavailable"
    assert data["decision"]["mode"] == "CRITICAL_EMERGENCY_MODE"
    assert data["detected_emergencies"] == ["fire"]
    assert 0 < len(data["nearby_resources"]) <= 6


def test_classify_with_advisory(monkeypatch) -> None:
    monkeypatch.setattr(web_app, "system", EmergencyClassificationSystem(advisory=AdvisoryClassifier(backend=ReplyBackend())))
    client = TestClient(web_app.app)

    data = client.post("/api/classify", json={"description": "Building wobbling"}).json()

    assert data["emergency_type"] == "earthquake"
    assert data["severity"] == "CRITICAL"
    assert data["first_aid_steps"] == ["Drop, cover, and hold on", "Stay away from windows"]
    assert data["decision"]["mode"] == "CRITICAL_EMERGENCY_MODE"


def test_classify_requires_text_or_image(client: TestClient) -> None:
    assert client.post("/api/classify", json={"description": "  "}).status_code == 400

    resp = client.post("/api/classify", json={"description": "", "has_image": True})
    assert resp.status_code == 200
    assert resp.json()["detected_emergencies"] == ["medical"]


def test_decide_endpoint(client: TestClient) -> None:
    resp = client.post("/api/decide", json={"detected_emergencies": ["Flood", "storm"], "has_text": True})

    assert resp.status_code == 200
    data = resp.json()
    assert data["mode"] == "RISK_ACCUMULATION_MODE"
    assert data["combined_severity_score"] == 4
    assert data["contributing_types"] == ["flood", "storm"]

    empty = client.post("/api/decide", json={"detected_emergencies": []}).json()
    assert empty["mode"] == "NONE"
    assert empty["explanation"] == ""


def test_decide_rejects_unknown_types(client: TestClient) -> None:
    resp = client.post("/api/decide", json={"detected_emergencies": ["fire", "volcano"]})

    assert resp.status_code == 422
    assert "volcano" in resp.json()["detail"]


def test_resources_endpoint_sorted_and_falls_back(client: TestClient) -> None:
    fire = client.get("/api/resources/fire").json()
    generic = client.get("/api/resources/volcano").json()

    assert [r["distance_km"] for r in fire] == sorted(r["distance_km"] for r in fire)
    assert {r["category"] for r in generic} == {"Rescue Team", "Hospital", "Police Station"}


def test_catalog_endpoint_lists_definitions(client: TestClient) -> None:
    data = client.get("/api/catalog").json()

    assert [d["type"] for d in data][:3] == ["fire", "flood", "earthquake"]
    assert all(d["severity_level"] in {2, 3} for d in data)
