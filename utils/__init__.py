"""
Utility modules for the HamClock data service.
"""

from .logging_config import get_logger, setup_logging
from .cache_manager import cache, init_cache, cache_clear

__all__ = [
    'get_logger',
    'setup_logging',
    'cache',
    'init_cache',
    'cache_clear'
]
