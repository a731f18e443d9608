"""Advisory classifier adapter.

The external classifier offers a natural-language best guess (type, severity
label, explanation, first-aid steps). It is never authoritative: the rule
engine decides the mode, and this adapter only normalizes whatever comes
back into a :class:`ClassificationAdvisory`. Unavailability and failures
become explicit advisory variants instead of exceptions.
"""
from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Optional, Protocol, Tuple

import httpx
import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from resq_sentinel.catalog import coerce_type
from resq_sentinel.config import (
    ADVISORY_ENABLED,
    ADVISORY_TIMEOUT_SECONDS,
    GEMINI_API_KEY,
    GEMINI_MODEL,
)
from resq_sentinel.errors import AdvisoryFailed, AdvisoryUnavailable, UnknownType
from resq_sentinel.models import AdvisoryStatus, ClassificationAdvisory, EmergencyType, SeverityLabel

logger = structlog.get_logger(__name__)

CLASSIFICATION_PROMPT = """You are ResQdrant Sentinel, an emergency intelligence system.

Your task: understand ANY emergency described in natural language and provide clear, actionable guidance.

RULES:
- Never ask questions, provide direct answers
- Be concise and focus on public safety
- Identify the primary emergency type (single most relevant)
- Handle indirect phrasing ("building shaking" = earthquake)

EMERGENCY TYPES:
- fire: flames, burning, smoke, explosion
- flood: water damage, drowning, submerged areas
- earthquake: shaking, ground movement, building collapse
- medical: unconscious, not breathing, heart attack, stroke
- bleeding: severe cuts, hemorrhage, trauma
- electric: shock, electrocution, power lines
- storm: tornado, hurricane, severe weather
- landslide: mudslide, avalanche, debris flow
- gas: gas leak, carbon monoxide smell

SEVERITY:
- CRITICAL: immediate life threat
- MODERATE: serious but not immediately life-threatening
- LOW: minor, can wait for help

Examples:
"Earthquake in the apartment" -> emergencyType: "earthquake", severity: "CRITICAL"
"Person collapsed and not breathing" -> emergencyType: "medical", severity: "CRITICAL"
"Heavy smoke coming from kitchen" -> emergencyType: "fire", severity: "CRITICAL"

Output ONLY this JSON object:
{
  "emergencyType": "earthquake",
  "severity": "CRITICAL",
  "explanation": "Ground shaking inside a building strongly indicates an earthquake.",
  "firstAidSteps": ["Drop, cover, and hold on", "Stay away from windows", "Do not use elevators"]
}"""

_ADVISORY_SEVERITIES = {SeverityLabel.CRITICAL, SeverityLabel.MODERATE, SeverityLabel.LOW}


class AdvisoryBackend(Protocol):
    def complete(self, description: str) -> str:
        """Return the classifier's raw reply text for ``description``."""


class GeminiAdvisoryBackend:
    """Advisory backend on top of the google-genai SDK."""

    def __init__(self, api_key: str = GEMINI_API_KEY, model: str = GEMINI_MODEL, timeout_s: float = ADVISORY_TIMEOUT_SECONDS) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s
        self._client = None

    def _get_client(self):
        """Return configured Gemini client; initializes on first call."""
        if self._client is None:
            if not self.api_key:
                raise AdvisoryUnavailable("GEMINI_API_KEY is not set")
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=genai_types.HttpOptions(timeout=int(self.timeout_s * 1000)),
            )
        return self._client

    def complete(self, description: str) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=description,
                config=genai_types.GenerateContentConfig(
                    system_instruction=CLASSIFICATION_PROMPT,
                    temperature=0.3,
                    max_output_tokens=300,
                    response_mime_type="application/json",
                ),
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            raise AdvisoryFailed(str(exc) or exc.__class__.__name__) from exc
        return response.text or ""


def default_backend() -> Optional[AdvisoryBackend]:
    if not ADVISORY_ENABLED or not GEMINI_API_KEY:
        return None
    return GeminiAdvisoryBackend()


def unavailable_advisory(reason: str) -> ClassificationAdvisory:
    return ClassificationAdvisory(
        emergency_type=EmergencyType.UNKNOWN,
        severity_label=SeverityLabel.UNKNOWN,
        explanation=reason,
        status=AdvisoryStatus.UNAVAILABLE,
    )


def failed_advisory(detail: str) -> ClassificationAdvisory:
    return ClassificationAdvisory(
        emergency_type=EmergencyType.UNKNOWN,
        severity_label=SeverityLabel.ERROR,
        explanation=f"AI classification failed: {detail}",
        status=AdvisoryStatus.FAILED,
    )


def _emergency_type(value: Any) -> EmergencyType:
    if not isinstance(value, str):
        return EmergencyType.UNKNOWN
    try:
        return coerce_type(value)
    except UnknownType:
        return EmergencyType.UNKNOWN


def _severity(value: Any) -> SeverityLabel:
    label = str(value or "").strip().upper()
    for severity in _ADVISORY_SEVERITIES:
        if severity.value == label:
            return severity
    return SeverityLabel.UNKNOWN


def _steps(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(step).strip() for step in value if str(step).strip())


def parse_reply(raw: str) -> ClassificationAdvisory:
    """Normalize the classifier's JSON reply. Raises ValueError when it is not a JSON object."""
    if not isinstance(raw, str):
        raise ValueError(f"reply is {type(raw).__name__}, not text")
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("reply is not a JSON object")
    return ClassificationAdvisory(
        emergency_type=_emergency_type(payload.get("emergencyType")),
        severity_label=_severity(payload.get("severity")),
        explanation=str(payload.get("explanation") or "").strip(),
        first_aid_steps=_steps(payload.get("firstAidSteps")),
        status=AdvisoryStatus.OK,
    )


class AdvisoryClassifier:
    """Single bounded call per request to the advisory backend, never retried."""

    def __init__(self, backend: Optional[AdvisoryBackend] = None, timeout_s: float = ADVISORY_TIMEOUT_SECONDS) -> None:
        self.backend = backend
        self.timeout_s = timeout_s
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="advisory")

    @property
    def enabled(self) -> bool:
        return self.backend is not None

    def classify(self, text: Optional[str]) -> ClassificationAdvisory:
        if self.backend is None:
            return unavailable_advisory("AI classification not available")
        if not text or not text.strip():
            return unavailable_advisory("No description provided")

        future = self._executor.submit(self.backend.complete, text.strip())
        try:
            raw = future.result(timeout=self.timeout_s)
            advisory = parse_reply(raw)
        except AdvisoryUnavailable as exc:
            logger.warning("advisory.unavailable", reason=str(exc))
            return unavailable_advisory(f"AI classification not available: {exc}")
        except FuturesTimeoutError:
            future.cancel()
            logger.warning("advisory.timeout", timeout_s=self.timeout_s)
            return failed_advisory(f"timed out after {self.timeout_s:g}s")
        except AdvisoryFailed as exc:
            logger.warning("advisory.failed", error=str(exc))
            return failed_advisory(str(exc))
        except ValueError as exc:
            logger.warning("advisory.malformed_reply", error=str(exc))
            return failed_advisory(f"malformed reply ({exc})")
        except Exception as exc:
            logger.warning("advisory.failed", error=repr(exc), exc_info=True)
            return failed_advisory(str(exc) or exc.__class__.__name__)

        logger.info(
            "advisory.classified",
            emergency_type=advisory.emergency_type.value,
            severity=advisory.severity_label.value,
        )
        return advisory

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
