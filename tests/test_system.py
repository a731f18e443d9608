import json

from resq_sentinel.advisory import AdvisoryClassifier
from resq_sentinel.models import AdvisoryStatus, EmergencyType, Mode, SeverityLabel
from resq_sentinel.system import EmergencyClassificationSystem


class ReplyBackend:
    def __init__(self, **reply) -> None:
        self.reply = json.dumps(reply)

    def complete(self, description: str) -> str:
        return self.reply


def _keywords_only() -> EmergencyClassificationSystem:
    return EmergencyClassificationSystem(advisory=AdvisoryClassifier(backend=None))


def _with_advisory(**reply) -> EmergencyClassificationSystem:
    return EmergencyClassificationSystem(advisory=AdvisoryClassifier(backend=ReplyBackend(**reply)))


def test_fire_report_is_critical_with_fire_resources() -> None:
    outcome = _keywords_only().classify("Fire in building")

    assert outcome.keyword_detections == {EmergencyType.FIRE}
    assert outcome.primary_type is EmergencyType.FIRE
    assert outcome.decision.mode is Mode.CRITICAL_EMERGENCY_MODE
    assert "FIRE" in outcome.decision.explanation
    assert outcome.resources[0].category == "Fire Rescue"


def test_flood_and_storm_accumulate_risk() -> None:
    outcome = _keywords_only().classify("Flood water rising and storm warning")

    assert outcome.decision.mode is Mode.RISK_ACCUMULATION_MODE
    assert outcome.decision.combined_severity_score == 4
    assert outcome.primary_type is EmergencyType.FLOOD


def test_photo_only_report_summons_medical_response() -> None:
    outcome = _keywords_only().classify("", has_image=True)

    assert outcome.merged_detections == {EmergencyType.MEDICAL}
    assert outcome.decision.mode is Mode.CRITICAL_EMERGENCY_MODE
    assert outcome.resources[0].category == "Ambulance"


def test_irrelevant_text_decides_none_and_gets_generic_resources() -> None:
    outcome = _keywords_only().classify("nothing relevant here")

    assert outcome.decision.mode is Mode.NONE
    assert outcome.primary_type is EmergencyType.UNKNOWN
    assert [r.category for r in outcome.resources][0] == "Rescue Team"


def test_unreachable_advisory_does_not_block_critical_mode() -> None:
    outcome = _keywords_only().classify("earthquake shaking")

    assert outcome.advisory.status is AdvisoryStatus.UNAVAILABLE
    assert outcome.severity_label is SeverityLabel.UNKNOWN
    assert outcome.decision.mode is Mode.CRITICAL_EMERGENCY_MODE
    assert outcome.primary_type is EmergencyType.EARTHQUAKE


def test_advisory_type_fills_keyword_gaps() -> None:
    system = _with_advisory(
        emergencyType="earthquake",
        severity="CRITICAL",
        explanation="Walls moving indicates an earthquake.",
        firstAidSteps=["Drop, cover, and hold on"],
    )

    outcome = system.classify("The walls are wobbling badly")

    assert outcome.keyword_detections == frozenset()
    assert outcome.merged_detections == {EmergencyType.EARTHQUAKE}
    assert outcome.decision.mode is Mode.CRITICAL_EMERGENCY_MODE
    assert outcome.first_aid_steps == ("Drop, cover, and hold on",)
    assert outcome.explanation == "Walls moving indicates an earthquake."


def test_advisory_severity_never_sets_the_mode() -> None:
    low_label = _with_advisory(emergencyType="fire", severity="LOW").classify("small fire in bin")
    critical_label = _with_advisory(emergencyType="flood", severity="CRITICAL").classify("storm coming")

    assert low_label.severity_label is SeverityLabel.LOW
    assert low_label.decision.mode is Mode.CRITICAL_EMERGENCY_MODE
    assert critical_label.severity_label is SeverityLabel.CRITICAL
    assert critical_label.decision.mode is Mode.RISK_ACCUMULATION_MODE
    assert critical_label.merged_detections == {EmergencyType.FLOOD, EmergencyType.STORM}


def test_primary_type_prefers_advisory_among_equally_severe_types() -> None:
    text = "fire and a gas leak in the basement"

    assert _keywords_only().classify(text).primary_type is EmergencyType.FIRE
    assert _with_advisory(emergencyType="gas", severity="CRITICAL").classify(text).primary_type is EmergencyType.GAS


def test_primary_type_is_most_severe_even_against_advisory() -> None:
    outcome = _with_advisory(emergencyType="storm", severity="MODERATE").classify("lightning hit, man unconscious")

    assert outcome.primary_type is EmergencyType.MEDICAL


def test_image_fallback_can_be_disabled_per_system() -> None:
    system = EmergencyClassificationSystem(advisory=AdvisoryClassifier(backend=None), image_fallback=False)

    outcome = system.classify("", has_image=True)

    assert outcome.decision.mode is Mode.NONE


class NetworkDownBackend:
    def complete(self, description: str) -> str:
        raise ConnectionError("network unreachable")


class NoReplyBackend:
    def complete(self, description: str):
        return None


def test_advisory_outage_still_returns_decision_and_resources() -> None:
    for backend in (NetworkDownBackend(), NoReplyBackend()):
        system = EmergencyClassificationSystem(advisory=AdvisoryClassifier(backend=backend))

        outcome = system.classify("earthquake shaking")

        assert outcome.severity_label is SeverityLabel.ERROR
        assert outcome.advisory.status is AdvisoryStatus.FAILED
        assert outcome.decision.mode is Mode.CRITICAL_EMERGENCY_MODE
        assert outcome.primary_type is EmergencyType.EARTHQUAKE
        assert outcome.resources
