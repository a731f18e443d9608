from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class EmergencyType(str, Enum):
    FIRE = "fire"
    FLOOD = "flood"
    EARTHQUAKE = "earthquake"
    MEDICAL = "medical"
    BLEEDING = "bleeding"
    ELECTRIC = "electric"
    STORM = "storm"
    LANDSLIDE = "landslide"
    GAS = "gas"
    UNKNOWN = "unknown"


class SeverityLabel(str, Enum):
    CRITICAL = "CRITICAL"
    MODERATE = "MODERATE"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"
    ERROR = "ERROR"


class AdvisoryStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


class Mode(str, Enum):
    NONE = "NONE"
    CRITICAL_EMERGENCY_MODE = "CRITICAL_EMERGENCY_MODE"
    RISK_ACCUMULATION_MODE = "RISK_ACCUMULATION_MODE"


DetectionSet = FrozenSet[EmergencyType]


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class EmergencyTypeDefinition:
    type: EmergencyType
    keywords: FrozenSet[str]
    severity_level: int
    display_icon: str
    display_label: str


@dataclass(frozen=True)
class ClassificationAdvisory:
    """Best guess from the external classifier. Advisory only, never drives the mode."""

    emergency_type: EmergencyType
    severity_label: SeverityLabel
    explanation: str
    first_aid_steps: Tuple[str, ...] = ()
    status: AdvisoryStatus = AdvisoryStatus.OK


@dataclass(frozen=True)
class ModeDecision:
    mode: Mode
    explanation: str
    contributing_types: DetectionSet = frozenset()
    combined_severity_score: int = 0


@dataclass(frozen=True)
class ResourceCandidate:
    category: str
    name: str
    coordinates: Coordinates
    distance_km: float
    eta_minutes: int
    dispatch_status: Optional[str] = None


@dataclass(frozen=True)
class ClassificationOutcome:
    primary_type: EmergencyType
    severity_label: SeverityLabel
    advisory: ClassificationAdvisory
    decision: ModeDecision
    keyword_detections: DetectionSet = frozenset()
    merged_detections: DetectionSet = frozenset()
    resources: Tuple[ResourceCandidate, ...] = field(default_factory=tuple)

    @property
    def explanation(self) -> str:
        return self.advisory.explanation

    @property
    def first_aid_steps(self) -> Tuple[str, ...]:
        return self.advisory.first_aid_steps
