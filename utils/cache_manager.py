"""
Cache Manager for the HamClock data service.

Response caching for pass-through upstream feeds, backed by Flask-Caching.
Spot and propagation responses are computed per request and never cached.
"""

import logging
from typing import Optional

from flask_caching import Cache

logger = logging.getLogger(__name__)

cache = Cache()


def init_cache(app) -> Cache:
    """Bind the shared cache to an application using its CACHE_* settings."""
    cache.init_app(app)
    logger.info(f"Cache initialized ({app.config.get('CACHE_TYPE')})")
    return cache


def cache_clear(path: Optional[str] = None) -> bool:
    """Clear every cached feed, or only the cached response for one request path."""
    if path:
        # Key format used by cache.cached() for views
        deleted = cache.delete(f"view/{path}")
        logger.info(f"Cleared cache entry: {path}")
        return bool(deleted)

    cleared = cache.clear()
    logger.info("Cleared all caches")
    return bool(cleared)
