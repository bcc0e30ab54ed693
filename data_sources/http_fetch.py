"""
Single-attempt HTTP fetcher for upstream data sources.

Every upstream call in the service goes through fetch_source(), which performs
exactly one GET bounded by a deadline and classifies the outcome as a
SourceResult instead of raising.
"""

import json
import time
import logging
from typing import Any, Dict, Optional

import requests

from config import Config
from .errors import SourceError, SourceTimeoutError, HttpStatusError, NetworkError, SpotParseError

logger = logging.getLogger(__name__)

# The deadline is checked between reads, so this bounds any overrun
CHUNK_SIZE = 1024


class SourceResult:
    """Tagged outcome of one source attempt: success, empty or failure."""

    SUCCESS = 'success'
    EMPTY = 'empty'
    FAILURE = 'failure'

    def __init__(self, source: str, status: str, payload: Any = None,
                 reason: Optional[str] = None, error: Optional[Exception] = None):
        self.source = source
        self.status = status
        self.payload = payload
        self.reason = reason
        self.error = error

    @classmethod
    def success(cls, source: str, payload: Any) -> 'SourceResult':
        return cls(source, cls.SUCCESS, payload=payload)

    @classmethod
    def empty(cls, source: str) -> 'SourceResult':
        return cls(source, cls.EMPTY, reason='empty')

    @classmethod
    def failure(cls, source: str, error: SourceError) -> 'SourceResult':
        return cls(source, cls.FAILURE, reason=error.reason, error=error)

    @property
    def ok(self) -> bool:
        return self.status == self.SUCCESS

    def __repr__(self):
        if self.ok:
            return f"SourceResult({self.source!r}, success)"
        return f"SourceResult({self.source!r}, {self.status}, reason={self.reason!r})"


def _read_body(source: str, response, deadline: float, clock=time.monotonic) -> bytes:
    """Stream the response body, giving up once the deadline has passed."""
    if clock() > deadline:
        raise SourceTimeoutError(source, "deadline exceeded before reading body")

    chunks = []
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        if chunk:
            chunks.append(chunk)
        if clock() > deadline:
            raise SourceTimeoutError(source, "deadline exceeded while reading body")
    return b''.join(chunks)


def _get(source: str, url: str, headers: Optional[Dict[str, str]], timeout: float) -> str:
    """Issue one GET and return the decoded body, raising SourceError subclasses."""
    deadline = time.monotonic() + timeout

    try:
        response = requests.get(url, headers=headers, timeout=timeout, stream=True)
    except requests.exceptions.Timeout as e:
        raise SourceTimeoutError(source, str(e)) from e
    except requests.exceptions.RequestException as e:
        raise NetworkError(source, str(e)) from e

    try:
        if not 200 <= response.status_code < 300:
            raise HttpStatusError(source, response.status_code)

        try:
            body = _read_body(source, response, deadline)
        except requests.exceptions.Timeout as e:
            raise SourceTimeoutError(source, str(e)) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(source, str(e)) from e

        encoding = response.encoding or 'utf-8'
        try:
            return body.decode(encoding, errors='replace')
        except LookupError:
            logger.warning(f"[{source}] unknown charset {encoding!r}, decoding as utf-8")
            return body.decode('utf-8', errors='replace')
    finally:
        response.close()


def fetch_source(source: str, url: str, headers: Optional[Dict[str, str]] = None,
                 timeout: Optional[float] = None, as_json: bool = False) -> SourceResult:
    """
    Fetch one upstream source once.

    Args:
        source: Source name used in log records and results
        url: URL to GET
        headers: Optional request headers
        timeout: Deadline in seconds, defaults to Config.SOURCE_TIMEOUT
        as_json: Decode the body as JSON before returning it

    Returns:
        SourceResult carrying the body (text or decoded JSON) on success
    """
    if timeout is None:
        timeout = Config.SOURCE_TIMEOUT

    try:
        text = _get(source, url, headers, timeout)

        if not text.strip():
            logger.warning(f"[{source}] empty response")
            return SourceResult.empty(source)

        payload = text
        if as_json:
            try:
                payload = json.loads(text)
            except (ValueError, RecursionError) as e:
                raise SpotParseError(source, f"invalid JSON: {e}", payload_preview=text[:300]) from e

        logger.info(f"[{source}] success ({len(text)} bytes)")
        return SourceResult.success(source, payload)

    except SourceError as e:
        logger.warning(f"[{source}] {e.reason}: {e}")
        return SourceResult.failure(source, e)
