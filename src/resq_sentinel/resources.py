"""Static responder reference data and the dispatch selector.

Distances and ETAs are curated figures for the Chennai service area; the
selector does no geospatial work of its own.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from resq_sentinel.models import Coordinates, EmergencyType, ResourceCandidate

MAX_RESOURCES = 6
DISPATCHED = "Dispatched"


def _resource(
    category: str,
    name: str,
    lat: float,
    lng: float,
    distance_km: float,
    eta_minutes: int,
    dispatch_status: Optional[str] = None,
) -> ResourceCandidate:
    return ResourceCandidate(
        category=category,
        name=name,
        coordinates=Coordinates(latitude=lat, longitude=lng),
        distance_km=distance_km,
        eta_minutes=eta_minutes,
        dispatch_status=dispatch_status,
    )


HOSPITALS = (
    _resource("Hospital", "Chennai General Hospital", 13.0827, 80.2707, 2.3, 8),
    _resource("Hospital", "Apollo Hospital", 13.0569, 80.2425, 4.1, 15),
)
FIRE_STATIONS = (
    _resource("Fire Station", "Central Fire Station", 13.0878, 80.2785, 1.8, 5),
)
SHELTERS = (
    _resource("Shelter", "Community Center Shelter", 13.0525, 80.2511, 3.8, 12),
    _resource("Shelter", "Emergency Relief Center", 13.0650, 80.2620, 2.5, 9),
)
RESCUE_TEAMS = (
    _resource("Rescue Team", "Emergency Response Unit", 13.0794, 80.2680, 1.5, 4),
)
POLICE = (
    _resource("Police Station", "T Nagar Police", 13.0418, 80.2341, 3.2, 10),
)

AMBULANCE = _resource("Ambulance", "Emergency Ambulance Service", 13.0820, 80.2700, 0.9, 3, DISPATCHED)

GENERIC_RESOURCES: Tuple[ResourceCandidate, ...] = RESCUE_TEAMS + HOSPITALS + POLICE

RESOURCE_TABLE: Mapping[EmergencyType, Tuple[ResourceCandidate, ...]] = MappingProxyType(
    {
        EmergencyType.FIRE: (
            _resource("Fire Rescue", "Rapid Response Fire Team", 13.0750, 80.2650, 1.2, 3, DISPATCHED),
            *FIRE_STATIONS,
            *HOSPITALS,
        ),
        EmergencyType.EARTHQUAKE: (
            _resource("Disaster Response", "Earthquake Response Unit", 13.0780, 80.2700, 1.6, 5, DISPATCHED),
            *SHELTERS,
            *RESCUE_TEAMS,
            HOSPITALS[0],
        ),
        EmergencyType.MEDICAL: (AMBULANCE, *HOSPITALS, *RESCUE_TEAMS),
        EmergencyType.FLOOD: (
            _resource("Water Rescue", "Flood Rescue Team", 13.0600, 80.2500, 2.8, 9, DISPATCHED),
            *SHELTERS,
            *RESCUE_TEAMS,
            HOSPITALS[1],
        ),
        EmergencyType.ELECTRIC: (
            _resource("Power Emergency", "Electricity Emergency Response", 13.0760, 80.2640, 1.7, 6, DISPATCHED),
            AMBULANCE,
            HOSPITALS[0],
        ),
        EmergencyType.BLEEDING: (AMBULANCE, *HOSPITALS),
        EmergencyType.GAS: (
            _resource("Fire Rescue", "Hazmat Response Team", 13.0750, 80.2650, 1.2, 3, DISPATCHED),
            *FIRE_STATIONS,
            HOSPITALS[0],
        ),
        EmergencyType.STORM: (*SHELTERS, *RESCUE_TEAMS, HOSPITALS[0]),
        EmergencyType.LANDSLIDE: (
            _resource("Disaster Response", "Landslide Rescue Team", 13.0780, 80.2700, 1.6, 5, DISPATCHED),
            *RESCUE_TEAMS,
            *SHELTERS,
        ),
    }
)


def _lookup_key(primary_type: Union[EmergencyType, str, None]) -> Optional[EmergencyType]:
    if isinstance(primary_type, EmergencyType):
        return primary_type
    try:
        return EmergencyType(str(primary_type or "").strip().lower())
    except ValueError:
        return None


def select_resources(
    primary_type: Union[EmergencyType, str, None], limit: int = MAX_RESOURCES
) -> Tuple[ResourceCandidate, ...]:
    """Nearest responders for ``primary_type``, closest first, at most ``limit``.

    Types without a curated list (including ``unknown``) get the generic
    rescue, hospital and police list.
    """
    candidates = RESOURCE_TABLE.get(_lookup_key(primary_type), GENERIC_RESOURCES)
    ranked = sorted(candidates, key=lambda item: item.distance_km)
    return tuple(ranked[: min(limit, MAX_RESOURCES)])
