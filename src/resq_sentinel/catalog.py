"""Emergency type catalog: keywords and intrinsic severity per type.

Pure reference data, built once at import time and never mutated. Matching
logic lives in :mod:`resq_sentinel.intelligence`.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple, Union

from resq_sentinel.errors import UnknownType
from resq_sentinel.models import EmergencyType, EmergencyTypeDefinition

CRITICAL_SEVERITY = 3


def _definition(
    emergency_type: EmergencyType,
    severity_level: int,
    icon: str,
    label: str,
    keywords: Tuple[str, ...],
) -> EmergencyTypeDefinition:
    return EmergencyTypeDefinition(
        type=emergency_type,
        keywords=frozenset(k.lower() for k in keywords),
        severity_level=severity_level,
        display_icon=icon,
        display_label=label,
    )


_DEFINITIONS: Tuple[EmergencyTypeDefinition, ...] = (
    _definition(
        EmergencyType.FIRE, 3, "🔥", "Fire",
        ("fire", "flame", "burning", "smoke", "explosion", "blaze"),
    ),
    _definition(
        EmergencyType.FLOOD, 2, "🌊", "Flood",
        ("flood", "water rising", "submerged", "drowning", "overflowing"),
    ),
    _definition(
        EmergencyType.EARTHQUAKE, 3, "🌍", "Earthquake",
        ("earthquake", "quake", "tremor", "shaking", "aftershock", "ground moving"),
    ),
    _definition(
        EmergencyType.MEDICAL, 3, "🚑", "Medical Emergency",
        (
            "unconscious", "not breathing", "heart attack", "stroke", "collapsed",
            "seizure", "cardiac", "chest pain", "choking",
        ),
    ),
    _definition(
        EmergencyType.BLEEDING, 3, "🩸", "Severe Bleeding",
        ("bleeding", "blood", "hemorrhage", "haemorrhage", "deep wound", "laceration"),
    ),
    _definition(
        EmergencyType.ELECTRIC, 2, "⚡", "Electrical Hazard",
        ("electric", "electrocut", "power line", "live wire", "sparking"),
    ),
    _definition(
        EmergencyType.STORM, 2, "🌪️", "Storm",
        ("storm", "tornado", "hurricane", "cyclone", "lightning", "strong wind"),
    ),
    _definition(
        EmergencyType.LANDSLIDE, 2, "⛰️", "Landslide",
        ("landslide", "mudslide", "avalanche", "debris flow", "rockfall"),
    ),
    _definition(
        EmergencyType.GAS, 3, "💨", "Gas Leak",
        ("gas leak", "leaking gas", "smell of gas", "gas smell", "carbon monoxide", "lpg"),
    ),
)

CATALOG: Mapping[EmergencyType, EmergencyTypeDefinition] = MappingProxyType(
    {definition.type: definition for definition in _DEFINITIONS}
)

# Position of each type in the catalog; used to order anything user-visible.
CATALOG_ORDER: Mapping[EmergencyType, int] = MappingProxyType(
    {definition.type: index for index, definition in enumerate(_DEFINITIONS)}
)


def definition_of(emergency_type: EmergencyType) -> EmergencyTypeDefinition:
    try:
        return CATALOG[emergency_type]
    except KeyError:
        raise UnknownType(emergency_type) from None


def all_definitions() -> Tuple[EmergencyTypeDefinition, ...]:
    return _DEFINITIONS


def severity_of(emergency_type: EmergencyType) -> int:
    return definition_of(emergency_type).severity_level


def coerce_type(value: Union[EmergencyType, str]) -> EmergencyType:
    """Turn a wire value (``"Fire"``, ``"flood"``) into a catalogued type.

    Raises :class:`UnknownType` for the ``unknown`` sentinel and anything the
    catalog does not define.
    """
    if isinstance(value, EmergencyType):
        emergency_type = value
    else:
        try:
            emergency_type = EmergencyType(str(value).strip().lower())
        except ValueError:
            raise UnknownType(value) from None
    if emergency_type not in CATALOG:
        raise UnknownType(value)
    return emergency_type


def catalog_sorted(types) -> Tuple[EmergencyType, ...]:
    """Order ``types`` by catalog position. Raises UnknownType for uncatalogued members."""
    for emergency_type in types:
        definition_of(emergency_type)
    return tuple(sorted(types, key=CATALOG_ORDER.__getitem__))
