import pytest

from resq_sentinel.catalog import CATALOG, all_definitions, coerce_type, definition_of, severity_of
from resq_sentinel.errors import UnknownType
from resq_sentinel.models import EmergencyType


def test_every_concrete_type_has_exactly_one_definition() -> None:
    types = [definition.type for definition in all_definitions()]
    concrete = [t for t in EmergencyType if t is not EmergencyType.UNKNOWN]

    assert sorted(types) == sorted(concrete)
    assert len(types) == len(set(types))


def test_severity_levels_are_in_range_and_keywords_are_lower_case() -> None:
    for definition in all_definitions():
        assert definition.severity_level in {1, 2, 3}
        assert definition.keywords
        assert all(keyword == keyword.lower() for keyword in definition.keywords)


def test_reference_severities() -> None:
    critical = {EmergencyType.FIRE, EmergencyType.EARTHQUAKE, EmergencyType.MEDICAL, EmergencyType.BLEEDING, EmergencyType.GAS}
    for emergency_type in CATALOG:
        expected = 3 if emergency_type in critical else 2
        assert severity_of(emergency_type) == expected


def test_unknown_sentinel_is_not_catalogued() -> None:
    with pytest.raises(UnknownType):
        definition_of(EmergencyType.UNKNOWN)


def test_coerce_type_accepts_wire_strings() -> None:
    assert coerce_type(" Fire ") is EmergencyType.FIRE
    assert coerce_type(EmergencyType.GAS) is EmergencyType.GAS

    with pytest.raises(UnknownType):
        coerce_type("volcano")
    with pytest.raises(UnknownType):
        coerce_type("unknown")
