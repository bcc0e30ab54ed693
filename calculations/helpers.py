"""
Shared helper functions for propagation calculations.
"""

import math
from typing import Any, Dict, Optional

from .constants import (
    EARTH_RADIUS_KM, SNR_LABELS, SNR_FLOOR_LABEL, STATUS_LABELS, STATUS_FLOOR_LABEL
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great circle distance in km (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) ** 2 +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
         math.sin(d_lon / 2) ** 2)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_daytime(utc_hour: float, longitude: float) -> bool:
    """Check if it's daytime at the given longitude."""
    local_hour = (utc_hour + longitude / 15 + 24) % 24
    return 6 <= local_hour <= 18


def estimate_ssn(sfi: float) -> int:
    """Estimate sunspot number from solar flux: SSN ~ (SFI - 67) / 0.97."""
    return max(0, round_half_up((sfi - 67) / 0.97))


def snr_label(reliability: float) -> str:
    """Convert reliability to an estimated SNR label."""
    for threshold, label in SNR_LABELS:
        if reliability >= threshold:
            return label
    return SNR_FLOOR_LABEL


def status_label(reliability: float) -> str:
    """Get status label from reliability."""
    for threshold, label in STATUS_LABELS:
        if reliability >= threshold:
            return label
    return STATUS_FLOOR_LABEL


def _parse_degrees(value: Any, limit: float) -> Optional[float]:
    try:
        degrees = float(value)
    except (ValueError, TypeError):
        return None
    if not math.isfinite(degrees) or abs(degrees) > limit:
        return None
    return degrees


def parse_coordinate(lat: Any, lon: Any, default: Dict[str, float]) -> Dict[str, float]:
    """Build a {lat, lon} coordinate, using defaults for missing or invalid parts."""
    parsed_lat = _parse_degrees(lat, 90)
    parsed_lon = _parse_degrees(lon, 180)
    return {
        'lat': parsed_lat if parsed_lat is not None else default['lat'],
        'lon': parsed_lon if parsed_lon is not None else default['lon']
    }
