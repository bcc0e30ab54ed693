"""
Error types raised while talking to upstream data sources.

These never reach the API caller: the fetcher turns transport errors into a
failed SourceResult, and the aggregator treats parse errors as "try the next
source".
"""

from typing import Optional


class SourceError(Exception):
    """Base class for a failed upstream source attempt."""

    reason = 'error'

    def __init__(self, source: str, message: str = ''):
        self.source = source
        super().__init__(message or self.reason)


class SourceTimeoutError(SourceError):
    """No complete response arrived before the deadline."""

    reason = 'timeout'


class HttpStatusError(SourceError):
    """The upstream answered with a non-2xx status."""

    reason = 'http status'

    def __init__(self, source: str, status_code: int, message: str = ''):
        self.status_code = status_code
        super().__init__(source, message or f"HTTP {status_code}")


class NetworkError(SourceError):
    """DNS, connection or other transport failure."""

    reason = 'network error'


class SpotParseError(SourceError):
    """Payload could not be coerced into spots, even with key aliasing."""

    reason = 'parse error'

    def __init__(self, source: str, message: str = '', payload_preview: Optional[str] = None):
        self.payload_preview = payload_preview
        super().__init__(source, message)
