"""
Pass-through upstream feeds proxied for the dashboard.

The browser cannot call these services directly because of CORS, so the API
forwards them unchanged: NOAA SWPC indices, POTA/SOTA activator spots and the
HamQSL solar XML.
"""

import logging
from typing import Any, Dict

from config import Config
from .http_fetch import SourceResult, fetch_source

logger = logging.getLogger(__name__)


class Feed:
    """An upstream feed: label for errors, config key for the URL, format."""

    def __init__(self, label: str, url_setting: str, as_json: bool = True):
        self.label = label
        self.url_setting = url_setting
        self.as_json = as_json

    def url(self, config=Config) -> str:
        return getattr(config, self.url_setting)


FEEDS: Dict[str, Feed] = {
    'noaa_flux': Feed('solar flux data', 'NOAA_FLUX_URL'),
    'noaa_kindex': Feed('K-index data', 'NOAA_KINDEX_URL'),
    'noaa_sunspots': Feed('sunspot data', 'NOAA_SUNSPOTS_URL'),
    'noaa_xray': Feed('X-ray data', 'NOAA_XRAY_URL'),
    'pota_spots': Feed('POTA spots', 'POTA_URL'),
    'sota_spots': Feed('SOTA spots', 'SOTA_URL'),
    'hamqsl_conditions': Feed('band conditions', 'HAMQSL_URL', as_json=False),
}


def fetch_feed(name: str, fetcher=fetch_source, config=Config) -> SourceResult:
    """
    Fetch one named feed.

    Raises:
        KeyError: if the feed name is unknown
    """
    feed = FEEDS[name]
    return fetcher(
        name,
        feed.url(config),
        headers={'User-Agent': config.USER_AGENT},
        timeout=config.SOURCE_TIMEOUT,
        as_json=feed.as_json
    )


def feed_error_message(name: str) -> str:
    return f"Failed to fetch {FEEDS[name].label}"
