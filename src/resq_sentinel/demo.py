from __future__ import annotations

from resq_sentinel.logging_setup import configure_logging
from resq_sentinel.system import EmergencyClassificationSystem

SAMPLES = [
    ("Fire in building", False),
    ("Building shaking violently", False),
    ("Person collapsed and not breathing", False),
    ("Flood water rising and storm warning", False),
    ("", True),
]


def main() -> None:
    configure_logging(level="warning")
    system = EmergencyClassificationSystem()

    print("=== ResQdrant Sentinel ===")
    print(f"Advisory classifier: {'enabled' if system.advisory.enabled else 'disabled (keywords only)'}")

    for text, has_image in SAMPLES:
        outcome = system.classify(text, has_image=has_image)
        print(f"\nReport: {text or '<photo only>'}")
        print(f"Primary type: {outcome.primary_type.value}")
        print(f"Advisory severity: {outcome.severity_label.value}")
        print(f"Mode: {outcome.decision.mode.value}")
        print(f"Why: {outcome.decision.explanation or 'None'}")
        for step in outcome.first_aid_steps:
            print(f" * {step}")
        print("Nearby resources:")
        for resource in outcome.resources:
            status = f" [{resource.dispatch_status}]" if resource.dispatch_status else ""
            print(f" - {resource.category}: {resource.name}{status} ({resource.distance_km} km, ETA {resource.eta_minutes} min)")

    system.advisory.shutdown()


if __name__ == "__main__":
    main()
