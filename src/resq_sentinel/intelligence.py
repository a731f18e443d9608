from __future__ import annotations

from typing import Iterable, List, Optional

import structlog

from resq_sentinel.catalog import CRITICAL_SEVERITY, all_definitions, catalog_sorted, coerce_type, definition_of
from resq_sentinel.models import DetectionSet, EmergencyType, Mode, ModeDecision

logger = structlog.get_logger(__name__)

IMAGE_FALLBACK_TYPE = EmergencyType.MEDICAL
NO_EVIDENCE = "No text or photo evidence was supplied."


class EmergencyIntelligenceEngine:
    """Rule-based detection, merging and severity/mode decisions.

    Stateless: every method is a pure function of its arguments and the
    catalog, so one instance can be shared between threads.
    """

    def __init__(self, image_fallback: bool = True) -> None:
        self.image_fallback = image_fallback

    @staticmethod
    def normalize(text: Optional[str]) -> str:
        return (text or "").lower()

    def detect(
        self,
        text: Optional[str],
        has_image: bool = False,
        image_fallback: Optional[bool] = None,
    ) -> DetectionSet:
        """Return every catalogued type with at least one keyword inside ``text``.

        With image evidence and no textual match the result is ``{medical}``
        unless the fallback is suppressed, either per call or on the engine.
        """
        normalized = self.normalize(text)
        detected = {
            definition.type
            for definition in all_definitions()
            if normalized and any(keyword in normalized for keyword in definition.keywords)
        }

        if image_fallback is None:
            image_fallback = self.image_fallback
        if has_image and not detected and image_fallback:
            detected.add(IMAGE_FALLBACK_TYPE)

        logger.debug("detection.keywords", detected=[t.value for t in catalog_sorted(detected)], has_image=has_image)
        return frozenset(detected)

    @staticmethod
    def merge(keyword_set: Iterable[EmergencyType], advisory_type: Optional[EmergencyType]) -> DetectionSet:
        merged = set(keyword_set)
        if advisory_type is not None and advisory_type is not EmergencyType.UNKNOWN:
            merged.add(advisory_type)
        return frozenset(merged)

    def decide(self, types: Iterable[EmergencyType], has_image: bool, has_text: bool) -> ModeDecision:
        ordered = catalog_sorted({coerce_type(t) for t in types})
        if not ordered:
            return ModeDecision(mode=Mode.NONE, explanation="")

        combined_score = sum(definition_of(t).severity_level for t in ordered)
        critical = [t for t in ordered if definition_of(t).severity_level == CRITICAL_SEVERITY]

        if critical:
            decision = ModeDecision(
                mode=Mode.CRITICAL_EMERGENCY_MODE,
                explanation=self._critical_explanation(critical, has_image, has_text),
                contributing_types=frozenset(ordered),
                combined_severity_score=combined_score,
            )
        else:
            decision = ModeDecision(
                mode=Mode.RISK_ACCUMULATION_MODE,
                explanation=self._risk_explanation(ordered, combined_score, has_image, has_text),
                contributing_types=frozenset(ordered),
                combined_severity_score=combined_score,
            )

        logger.info(
            "decision.made",
            mode=decision.mode.value,
            types=[t.value for t in ordered],
            combined_score=combined_score,
        )
        return decision

    @staticmethod
    def display_names(types: Iterable[EmergencyType]) -> str:
        return ", ".join(f"{definition_of(t).display_icon} {t.value.upper()}" for t in types)

    @classmethod
    def _critical_explanation(cls, critical: List[EmergencyType], has_image: bool, has_text: bool) -> str:
        parts = [f"CRITICAL MODE ACTIVATED: You reported {cls.display_names(critical)}."]

        if len(critical) > 1:
            parts.append(
                f"All {len(critical)} of these emergencies are classified as CRITICAL (severity level 3), "
                "meaning they are life-threatening situations requiring immediate professional response."
            )
        else:
            parts.append(
                "This emergency is classified as CRITICAL (severity level 3), meaning it is a "
                "life-threatening situation requiring immediate professional response."
            )

        if has_image and has_text:
            parts.append(
                "Your report included both a written description and a photo, which helps emergency "
                "responders understand the situation better."
            )
        elif has_image:
            parts.append("You uploaded a photo to document the emergency scene.")
        elif has_text:
            parts.append("Your written description has been analyzed to identify the emergency type.")
        else:
            parts.append(NO_EVIDENCE)

        parts.append(
            "All available emergency services have been notified and dispatched to your location "
            "at maximum priority. Resources are being allocated immediately."
        )
        return " ".join(parts)

    @classmethod
    def _risk_explanation(
        cls, ordered: List[EmergencyType], combined_score: int, has_image: bool, has_text: bool
    ) -> str:
        noun = "Emergencies" if len(ordered) > 1 else "Emergency"
        parts = [f"RISK ACCUMULATION MODE: {noun} detected - {cls.display_names(ordered)}."]
        if len(ordered) > 1:
            parts.append(
                "None of these is independently life-threatening, but the combination of "
                f"{len(ordered)} concurrent emergencies increases the overall danger level."
            )
        else:
            parts.append(
                "This emergency is not independently life-threatening, but it still raises "
                "the overall danger level and needs a coordinated response."
            )
        parts.append(f"Combined risk score: {combined_score}.")

        if has_image and has_text:
            parts.append("Both visual and text evidence provided.")
        elif has_image:
            parts.append("Photo evidence uploaded.")
        elif has_text:
            parts.append("Assessment is based on your written description.")
        else:
            parts.append(NO_EVIDENCE)

        if len(ordered) > 1:
            parts.append(
                "Coordinated response teams are being dispatched to handle all situations "
                "simultaneously. Multiple specialized units may be deployed."
            )
        else:
            parts.append("A coordinated response team is being dispatched to handle the situation.")
        return " ".join(parts)
