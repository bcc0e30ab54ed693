"""
Propagation calculator for the HamClock data service.

Simplified VOACAP-style band reliability estimate. This is a heuristic built on
rough MUF/LUF proxies, not an ionospheric model.
"""

import math
import logging
from datetime import datetime
from typing import Dict, List, Optional

import pytz

from .constants import (
    BANDS, BAND_FREQUENCIES, MAX_RELIABILITY, K_INDEX_DEGRADATION, DISTANCE_PENALTY,
    HIGH_BAND_SFI_REQUIREMENTS
)
from .helpers import calculate_distance, is_daytime, round_half_up, snr_label, status_label

logger = logging.getLogger(__name__)


def calculate_muf(distance: float, mid_lat: float, hour: int, ssn: float) -> float:
    """Estimate the maximum usable frequency in MHz."""
    # Critical frequency peaks at hour 12 with daytime ionization
    hour_factor = 1 + 0.4 * math.cos((hour - 12) * math.pi / 12)
    fo_f2 = 0.9 * math.sqrt(ssn + 15) * hour_factor

    # Longer paths use lower take-off angles and support higher frequencies
    dist_factor = math.sqrt(1 + distance / 3500)

    # Higher latitudes absorb more
    lat_factor = 1 - abs(mid_lat) / 200

    return fo_f2 * dist_factor * lat_factor * 3.5


def calculate_luf(hour: int, mid_lon: float, sfi: float, k_index: float) -> float:
    """Estimate the lowest usable frequency in MHz (absorption limit)."""
    day_night = 1.5 if is_daytime(hour, mid_lon) else 0.5
    return 2 + (sfi / 100) * day_night + k_index * 0.5


def calculate_band_reliability(freq: float, distance: float, mid_lat: float, hour: int,
                               sfi: float, ssn: float, k_index: float,
                               de: Dict[str, float], dx: Dict[str, float]) -> float:
    """
    Calculate band reliability percentage for one frequency and UTC hour.

    Args:
        freq: Band frequency in MHz
        distance: Great circle path length in km
        mid_lat: Latitude of the path midpoint
        hour: UTC hour (0-23)
        sfi: Solar flux index
        ssn: Sunspot number
        k_index: Planetary K-index
        de: Home station {'lat', 'lon'}
        dx: Far station {'lat', 'lon'}

    Returns:
        Reliability in [0, 99], unrounded
    """
    muf = calculate_muf(distance, mid_lat, hour, ssn)
    luf = calculate_luf(hour, (de['lon'] + dx['lon']) / 2, sfi, k_index)

    if freq > muf:
        reliability = max(0, 50 - (freq - muf) * 10)
    elif freq < luf:
        reliability = max(0, 50 - (luf - freq) * 15)
    else:
        # Best near the middle of the usable window
        mid_freq = (muf + luf) / 2
        optimalness = 1 - abs(freq - mid_freq) / (muf - luf) if muf > luf else 1
        reliability = 50 + optimalness * 45

    for threshold, factor in K_INDEX_DEGRADATION:
        if k_index >= threshold:
            reliability *= factor
            break

    for threshold, factor in DISTANCE_PENALTY:
        if distance > threshold:
            reliability *= factor
            break

    for min_freq, sfi_needed in HIGH_BAND_SFI_REQUIREMENTS:
        if freq >= min_freq and sfi < sfi_needed:
            reliability *= sfi / sfi_needed

    return min(MAX_RELIABILITY, max(0, reliability))


class PropagationCalculator:
    """Builds per-band, per-hour propagation predictions for a DE/DX path."""

    def __init__(self, bands: Optional[List[str]] = None):
        self.bands = bands or list(BANDS)
        self.band_frequencies = {band: BAND_FREQUENCIES[band] for band in self.bands}

    def predict_band(self, freq: float, distance: float, mid_lat: float, solar: Dict,
                     de: Dict[str, float], dx: Dict[str, float]) -> List[Dict]:
        """24 hourly predictions for one band."""
        predictions = []
        for hour in range(24):
            reliability = calculate_band_reliability(
                freq, distance, mid_lat, hour,
                solar['sfi'], solar['ssn'], solar['kIndex'], de, dx
            )
            predictions.append({
                'hour': hour,
                'reliability': round_half_up(reliability),
                'snr': snr_label(reliability)
            })
        return predictions

    def predict(self, de: Dict[str, float], dx: Dict[str, float], solar: Dict,
                current_hour: Optional[int] = None) -> Dict:
        """
        Calculate the full propagation report for a path.

        Args:
            de: Home station {'lat', 'lon'}
            dx: Far station {'lat', 'lon'}
            solar: Space weather snapshot {'sfi', 'ssn', 'kIndex'}
            current_hour: UTC hour used for currentBands, defaults to now

        Returns:
            Dict with solarData, distanceKm, currentHourUTC, currentBands and
            hourlyPredictions
        """
        if current_hour is None:
            current_hour = datetime.now(pytz.utc).hour

        distance = calculate_distance(de['lat'], de['lon'], dx['lat'], dx['lon'])
        mid_lat = (de['lat'] + dx['lat']) / 2

        logger.debug(f"Propagation path: {round_half_up(distance)} km, mid latitude {mid_lat:.1f}")

        hourly = {}
        for band, freq in self.band_frequencies.items():
            hourly[band] = self.predict_band(freq, distance, mid_lat, solar, de, dx)

        current_bands = []
        for band, freq in self.band_frequencies.items():
            now_entry = hourly[band][current_hour]
            current_bands.append({
                'band': band,
                'freqMHz': freq,
                'reliability': now_entry['reliability'],
                'snr': now_entry['snr'],
                'status': status_label(now_entry['reliability'])
            })
        # Stable sort keeps band order for ties
        current_bands.sort(key=lambda b: b['reliability'], reverse=True)

        return {
            'solarData': {
                'sfi': solar['sfi'],
                'ssn': solar['ssn'],
                'kIndex': solar['kIndex']
            },
            'distanceKm': round_half_up(distance),
            'currentHourUTC': current_hour,
            'currentBands': current_bands,
            'hourlyPredictions': hourly
        }
