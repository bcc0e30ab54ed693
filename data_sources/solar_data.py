"""
Space weather provider for the HamClock data service.

Builds the solar snapshot used by the propagation calculator from:
- NOAA SWPC F10.7 cm solar flux series
- NOAA SWPC planetary K-index table

Each feed is fetched concurrently and falls back to its own default.
"""

import math
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from config import Config
from calculations.constants import DEFAULT_SFI, DEFAULT_SSN, DEFAULT_K_INDEX, MAX_K_INDEX
from calculations.helpers import estimate_ssn, round_half_up
from .http_fetch import SourceResult, fetch_source

logger = logging.getLogger(__name__)


def default_snapshot() -> Dict[str, int]:
    """Snapshot used when no live space weather is available."""
    return {'sfi': DEFAULT_SFI, 'ssn': DEFAULT_SSN, 'kIndex': DEFAULT_K_INDEX}


def parse_solar_flux(data: Any) -> Optional[int]:
    """Latest flux value from the NOAA f107_cm_flux series, or None."""
    if not isinstance(data, list) or not data:
        return None

    latest = data[-1]
    if not isinstance(latest, dict):
        return None

    try:
        flux = float(latest.get('flux'))
    except (ValueError, TypeError):
        return None

    if not math.isfinite(flux) or flux <= 0:
        return None
    return round_half_up(flux)


def parse_k_index(data: Any) -> Optional[int]:
    """
    Latest Kp from the NOAA planetary K-index table, or None.

    The table is a list of rows with a header row first, e.g.
    [["time_tag", "Kp", ...], ["2026-01-30 00:00:00.000", "2.33", ...], ...]
    """
    if not isinstance(data, list) or len(data) < 2:
        return None

    latest = data[-1]
    if not isinstance(latest, (list, tuple)) or len(latest) < 2:
        return None

    try:
        k_index = int(float(latest[1]))
    except (ValueError, TypeError, OverflowError):
        return None

    if not 0 <= k_index <= MAX_K_INDEX:
        return None
    return k_index


class SpaceWeatherProvider:
    """Provider for the solar flux / sunspot / K-index snapshot."""

    def __init__(self, fetcher: Callable[..., SourceResult] = fetch_source,
                 flux_url: Optional[str] = None, kindex_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.fetcher = fetcher
        self.flux_url = flux_url or Config.NOAA_FLUX_URL
        self.kindex_url = kindex_url or Config.NOAA_KINDEX_URL
        self.timeout = timeout if timeout is not None else Config.SOURCE_TIMEOUT

    def get_snapshot(self) -> Dict[str, int]:
        """Get {'sfi', 'ssn', 'kIndex'}, falling back per field to defaults."""
        headers = {'User-Agent': Config.USER_AGENT}

        with ThreadPoolExecutor(max_workers=2) as executor:
            flux_future = executor.submit(
                self.fetcher, 'NOAA flux', self.flux_url,
                headers=headers, timeout=self.timeout, as_json=True
            )
            kindex_future = executor.submit(
                self.fetcher, 'NOAA K-index', self.kindex_url,
                headers=headers, timeout=self.timeout, as_json=True
            )
            flux_result = self._settle(flux_future, 'NOAA flux')
            kindex_result = self._settle(kindex_future, 'NOAA K-index')

        sfi = parse_solar_flux(flux_result.payload) if flux_result.ok else None
        k_index = parse_k_index(kindex_result.payload) if kindex_result.ok else None

        if sfi is None and k_index is None:
            logger.info("Using default solar values")
            return default_snapshot()

        if sfi is None:
            logger.info(f"Using default solar flux {DEFAULT_SFI}")
            sfi = DEFAULT_SFI
        if k_index is None:
            logger.info(f"Using default K-index {DEFAULT_K_INDEX}")
            k_index = DEFAULT_K_INDEX

        snapshot = {
            'sfi': sfi,
            'ssn': estimate_ssn(sfi),
            'kIndex': k_index
        }
        logger.info(f"Solar data - SFI: {snapshot['sfi']} SSN: {snapshot['ssn']} K: {snapshot['kIndex']}")
        return snapshot

    def _settle(self, future, source: str) -> SourceResult:
        """Wait for one fetch without letting its failure affect the other."""
        try:
            return future.result()
        except Exception as e:
            logger.error(f"[{source}] unexpected error: {e}")
            return SourceResult(source, SourceResult.FAILURE, reason='unexpected error', error=e)
