"""
Data sources module for the HamClock data service.

This module contains classes for fetching data from various sources:
- DX cluster spots (HamQTH, DX Summit, DXHeat)
- Space weather (NOAA SWPC)
- Contest calendar (WA7BNM)
- Pass-through feeds (NOAA, POTA, SOTA, HamQSL)
"""

from .http_fetch import SourceResult, fetch_source
from .spots_data import SpotsDataProvider, SpotSource
from .solar_data import SpaceWeatherProvider
from .contest_data import ContestDataProvider

__all__ = [
    'SourceResult',
    'fetch_source',
    'SpotsDataProvider',
    'SpotSource',
    'SpaceWeatherProvider',
    'ContestDataProvider'
]
