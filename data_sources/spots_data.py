"""
Spots data provider for the HamClock data service.

Aggregates DX cluster spots from an ordered list of sources:
- HamQTH ('^'-delimited dump)
- DX Summit (JSON array)
- DXHeat (JSON array or {'spots': [...]})

The first source that yields at least one spot wins; the rest are not called.
"""

import logging
from typing import Callable, Dict, List, Optional

from config import Config
from .errors import SpotParseError
from .http_fetch import SourceResult, fetch_source
from .spot_parsers import parse_hamqth_spots, parse_dxsummit_spots, parse_dxheat_spots

logger = logging.getLogger(__name__)

Spot = Dict[str, str]


class SpotSource:
    """One entry in the fallback chain: where to fetch and how to parse."""

    def __init__(self, name: str, url: str, parser: Callable[[object], List[Spot]],
                 headers: Optional[Dict[str, str]] = None):
        self.name = name
        self.url = url
        self.parser = parser
        self.headers = headers or {}

    def __repr__(self):
        return f"SpotSource({self.name!r}, {self.url!r})"


def default_spot_sources(config=Config) -> List[SpotSource]:
    """Build the standard DX cluster source chain from configuration."""
    user_agent = config.USER_AGENT
    return [
        SpotSource(
            'HamQTH',
            config.HAMQTH_URL,
            parse_hamqth_spots,
            headers={'User-Agent': user_agent}
        ),
        SpotSource(
            'DX Summit',
            config.DXSUMMIT_URL,
            parse_dxsummit_spots,
            headers={
                'User-Agent': f'{user_agent} (Amateur Radio Dashboard)',
                'Accept': 'application/json'
            }
        ),
        SpotSource(
            'DXHeat',
            config.DXHEAT_URL,
            parse_dxheat_spots,
            headers={
                'User-Agent': user_agent,
                'Accept': 'application/json'
            }
        ),
    ]


class SpotsDataProvider:
    """Provider for DX cluster spots with ordered source fallback."""

    def __init__(self, sources: Optional[List[SpotSource]] = None,
                 fetcher: Callable[..., SourceResult] = fetch_source,
                 timeout: Optional[float] = None):
        self.sources = sources if sources is not None else default_spot_sources()
        self.fetcher = fetcher
        self.timeout = timeout if timeout is not None else Config.SOURCE_TIMEOUT

    def get_spots(self) -> List[Spot]:
        """Return spots from the first source that yields any, else []."""
        logger.info("Fetching DX cluster spots")

        for source in self.sources:
            spots = self._try_source(source)
            if spots:
                logger.info(f"[{source.name}] using {len(spots)} spots")
                return spots

        logger.warning("All DX cluster sources failed or returned no spots")
        return []

    def _try_source(self, source: SpotSource) -> List[Spot]:
        """Fetch and parse a single source, returning [] on any failure."""
        try:
            result = self.fetcher(source.name, source.url, headers=source.headers, timeout=self.timeout)
            if not result.ok:
                return []
            spots = source.parser(result.payload)
        except SpotParseError as e:
            logger.warning(f"[{source.name}] parse error: {e}")
            return []
        except Exception as e:
            logger.error(f"[{source.name}] unexpected error: {e}")
            return []

        if not spots:
            logger.info(f"[{source.name}] no usable spots")
        return spots
