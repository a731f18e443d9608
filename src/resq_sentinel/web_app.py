from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import List

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from resq_sentinel.catalog import all_definitions, coerce_type
from resq_sentinel.config import CORS_ORIGINS, HOST, PORT
from resq_sentinel.errors import UnknownType
from resq_sentinel.logging_setup import configure_logging
from resq_sentinel.models import ClassificationOutcome, ModeDecision, ResourceCandidate
from resq_sentinel.system import EmergencyClassificationSystem

logger = structlog.get_logger(__name__)

app = FastAPI(title="ResQdrant Sentinel")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

system = EmergencyClassificationSystem()


class ClassifyRequest(BaseModel):
    description: str = ""
    has_image: bool = False


class DecideRequest(BaseModel):
    detected_emergencies: List[str] = Field(default_factory=list)
    has_image: bool = False
    has_text: bool = True


@app.on_event("startup")
def startup() -> None:
    configure_logging()
    logger.info("app.started", advisory_enabled=system.advisory.enabled)


@app.on_event("shutdown")
def shutdown() -> None:
    system.advisory.shutdown()


def resource_payload(resource: ResourceCandidate) -> dict:
    return {
        "category": resource.category,
        "name": resource.name,
        "lat": resource.coordinates.latitude,
        "lng": resource.coordinates.longitude,
        "distance_km": resource.distance_km,
        "eta_minutes": resource.eta_minutes,
        "dispatch_status": resource.dispatch_status,
    }


def decision_payload(decision: ModeDecision) -> dict:
    return {
        "mode": decision.mode.value,
        "explanation": decision.explanation,
        "contributing_types": sorted(t.value for t in decision.contributing_types),
        "combined_severity_score": decision.combined_severity_score,
    }


def outcome_payload(outcome: ClassificationOutcome) -> dict:
    return {
        "emergency_type": outcome.primary_type.value,
        "severity": outcome.severity_label.value,
        "explanation": outcome.explanation,
        "first_aid_steps": list(outcome.first_aid_steps),
        "advisory_status": outcome.advisory.status.value,
        "advisory_type": outcome.advisory.emergency_type.value,
        "keyword_detections": sorted(t.value for t in outcome.keyword_detections),
        "detected_emergencies": sorted(t.value for t in outcome.merged_detections),
        "decision": decision_payload(outcome.decision),
        "nearby_resources": [resource_payload(r) for r in outcome.resources],
    }


@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "advisory_enabled": system.advisory.enabled,
    }


@app.get("/api/catalog")
def catalog():
    out = []
    for definition in all_definitions():
        d = asdict(definition)
        d["type"] = definition.type.value
        d["keywords"] = sorted(definition.keywords)
        out.append(d)
    return out


@app.post("/api/classify")
def classify(body: ClassifyRequest):
    if not body.description.strip() and not body.has_image:
        raise HTTPException(status_code=400, detail="description is required when no image is attached")
    outcome = system.classify(body.description, has_image=body.has_image)
    return outcome_payload(outcome)


@app.post("/api/decide")
def decide(body: DecideRequest):
    try:
        types = {coerce_type(name) for name in body.detected_emergencies}
    except UnknownType as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    decision = system.decide(types, has_image=body.has_image, has_text=body.has_text)
    return decision_payload(decision)


@app.get("/api/resources/{emergency_type}")
def resources(emergency_type: str):
    return [resource_payload(r) for r in system.resources_for(emergency_type)]


def run(host: str = HOST, port: int = PORT) -> None:
    configure_logging()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
