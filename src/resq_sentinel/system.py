from __future__ import annotations

from typing import Iterable, Optional, Tuple, Union

import structlog

from resq_sentinel.advisory import AdvisoryClassifier, default_backend
from resq_sentinel.catalog import CATALOG_ORDER, severity_of
from resq_sentinel.config import IMAGE_FALLBACK_ENABLED
from resq_sentinel.intelligence import EmergencyIntelligenceEngine
from resq_sentinel.models import (
    ClassificationAdvisory,
    ClassificationOutcome,
    DetectionSet,
    EmergencyType,
    ModeDecision,
    ResourceCandidate,
)
from resq_sentinel.resources import select_resources

logger = structlog.get_logger(__name__)


class EmergencyClassificationSystem:
    def __init__(
        self,
        advisory: Optional[AdvisoryClassifier] = None,
        image_fallback: bool = IMAGE_FALLBACK_ENABLED,
    ) -> None:
        self.engine = EmergencyIntelligenceEngine(image_fallback=image_fallback)
        self.advisory = advisory if advisory is not None else AdvisoryClassifier(default_backend())

    def classify(
        self,
        text: Optional[str],
        has_image: bool = False,
        image_fallback: Optional[bool] = None,
    ) -> ClassificationOutcome:
        has_text = bool(text and text.strip())

        keyword_detections = self.engine.detect(text, has_image=has_image, image_fallback=image_fallback)
        advisory = self.advisory.classify(text)
        merged = self.engine.merge(keyword_detections, advisory.emergency_type)

        decision = self.engine.decide(merged, has_image=has_image, has_text=has_text)
        primary = self.primary_type(merged, advisory)
        resources = select_resources(primary)

        logger.info(
            "classification.completed",
            primary_type=primary.value,
            mode=decision.mode.value,
            advisory_status=advisory.status.value,
            resources=len(resources),
        )
        return ClassificationOutcome(
            primary_type=primary,
            severity_label=advisory.severity_label,
            advisory=advisory,
            decision=decision,
            keyword_detections=keyword_detections,
            merged_detections=merged,
            resources=resources,
        )

    def decide(self, types: Iterable[EmergencyType], has_image: bool, has_text: bool) -> ModeDecision:
        return self.engine.decide(types, has_image=has_image, has_text=has_text)

    @staticmethod
    def resources_for(emergency_type: Union[EmergencyType, str]) -> Tuple[ResourceCandidate, ...]:
        return select_resources(emergency_type)

    @staticmethod
    def primary_type(merged: DetectionSet, advisory: ClassificationAdvisory) -> EmergencyType:
        """Highest-severity detected type; the advisory guess breaks ties, then catalog order."""
        if not merged:
            return EmergencyType.UNKNOWN

        top_severity = max(severity_of(t) for t in merged)
        leaders = sorted((t for t in merged if severity_of(t) == top_severity), key=CATALOG_ORDER.__getitem__)
        if advisory.emergency_type in leaders:
            return advisory.emergency_type
        return leaders[0]
