from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.geo import haversine_meters
from ..core.constants import EXACT_LOCATION_TOLERANCE_METERS
from ..core.enums import LocationMode
from ..payroll.model import PayrollSettings


@dataclass(frozen=True)
class LocationCheck:
    allowed: bool
    store_coordinates: bool
    distance_meters: Optional[float] = None
    message: Optional[str] = None


def check_location(settings: PayrollSettings, latitude: Optional[float], longitude: Optional[float]) -> LocationCheck:
    mode = settings.location_mode
    if mode == LocationMode.DISABLED:
        return LocationCheck(allowed=True, store_coordinates=False)

    has_position = latitude is not None and longitude is not None
    if mode == LocationMode.LOG_ONLY:
        return LocationCheck(allowed=True, store_coordinates=has_position)

    if not has_position:
        return LocationCheck(allowed=False, store_coordinates=False, message="Localização obrigatória para registrar o ponto")
    if settings.company_latitude is None or settings.company_longitude is None:
        return LocationCheck(
            allowed=False,
            store_coordinates=False,
            message="Localização da empresa não configurada. Contate o administrador",
        )

    distance = haversine_meters(latitude, longitude, settings.company_latitude, settings.company_longitude)
    limit = EXACT_LOCATION_TOLERANCE_METERS if mode == LocationMode.REQUIRE_EXACT else settings.allowed_radius_meters
    if distance > limit:
        return LocationCheck(
            allowed=False,
            store_coordinates=False,
            distance_meters=distance,
            message=f"Você está a {round(distance)}m da empresa (máximo {limit}m)",
        )
    return LocationCheck(allowed=True, store_coordinates=True, distance_meters=distance)
