"""
Parsers for DX cluster spot feeds.

Each parser turns one upstream payload into a list of normalized spot dicts:

    {'freq': '7.022', 'call': 'KP5/NP3VI', 'comment': 'Up 2 40M',
     'time': '06:10z', 'spotter': 'F5PAC'}

Parsers are pure. They either return complete spots (possibly none) or raise
SpotParseError when the payload cannot be read at all.
"""

import json
import math
from typing import Any, Dict, List, Optional, Tuple

from .errors import SpotParseError

HAMQTH_LINE_LIMIT = 25
JSON_RECORD_LIMIT = 20

# spotter^freq^call^comment^time date^^^continent^band^country^id
HAMQTH_BAND_FIELD = 8

UNKNOWN_CALLSIGN = 'UNKNOWN'
UNKNOWN_FREQUENCY = '0.000'


def make_spot(freq: str, call: str, comment: str = '', time: str = '', spotter: str = '') -> Dict[str, str]:
    """Build a spot in the wire format served by the API."""
    return {
        'freq': freq,
        'call': call,
        'comment': comment,
        'time': time,
        'spotter': spotter
    }


def _hhmm_to_utc(time_date: str) -> str:
    """Turn '0610 2026-01-30' into '06:10z'."""
    if not time_date or len(time_date) < 4:
        return ''
    hhmm = time_date[:4]
    return f"{hhmm[:2]}:{hhmm[2:4]}z"


def _parse_khz(value: str) -> Optional[float]:
    try:
        khz = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(khz) or khz <= 0:
        return None
    return khz


def parse_hamqth_spots(text: str, source: str = 'HamQTH') -> List[Dict[str, str]]:
    """
    Parse the HamQTH '^'-delimited cluster dump.

    Example line:
        F5PAC^7022.0^KP5/NP3VI^Up 2^0610 2026-01-30^^^NA^40M^Desecheo Island^43

    Only the first 25 non-comment lines are considered. Lines with a bad
    frequency or no callsign are dropped.
    """
    if not isinstance(text, str):
        raise SpotParseError(source, f"expected text payload, got {type(text).__name__}")

    lines = [line for line in text.strip().split('\n') if line.strip() and not line.startswith('#')]

    spots = []
    for line in lines[:HAMQTH_LINE_LIMIT]:
        parts = line.rstrip('\r').split('^')
        if len(parts) < 5:
            continue

        spotter = parts[0]
        dx_call = parts[2]
        comment = parts[3]
        band = parts[HAMQTH_BAND_FIELD].strip() if len(parts) > HAMQTH_BAND_FIELD else ''

        khz = _parse_khz(parts[1])
        if khz is None or not dx_call:
            continue

        spots.append(make_spot(
            freq=f"{khz / 1000:.3f}",
            call=dx_call,
            comment=f"{comment} {band}" if band else comment,
            time=_hhmm_to_utc(parts[4]),
            spotter=spotter
        ))

    return spots


class JsonSpotSchema:
    """
    Key aliases for one JSON spot feed.

    Each canonical field maps to an ordered tuple of candidate keys; the first
    key holding a truthy value wins. Adding a feed means adding a schema, not
    new parsing code.
    """

    def __init__(self, name: str, aliases: Dict[str, Tuple[str, ...]], time_slice: Tuple[int, int],
                 envelope_key: Optional[str] = None, limit: int = JSON_RECORD_LIMIT):
        self.name = name
        self.aliases = aliases
        self.time_slice = time_slice
        self.envelope_key = envelope_key
        self.limit = limit

    def lookup(self, record: Dict[str, Any], field: str, default: str = '') -> Any:
        for key in self.aliases.get(field, ()):
            value = record.get(key)
            if value:
                return value
        return default

    def to_spot(self, record: Dict[str, Any]) -> Dict[str, str]:
        raw_time = self.lookup(record, 'time')
        start, end = self.time_slice
        return make_spot(
            freq=str(self.lookup(record, 'freq', UNKNOWN_FREQUENCY)),
            call=str(self.lookup(record, 'call', UNKNOWN_CALLSIGN)),
            comment=str(self.lookup(record, 'comment')),
            time=f"{str(raw_time)[start:end]}z" if raw_time else '',
            spotter=str(self.lookup(record, 'spotter'))
        )


DXSUMMIT_SCHEMA = JsonSpotSchema(
    name='DX Summit',
    aliases={
        'freq': ('frequency',),
        'call': ('dx_call', 'dxcall', 'callsign'),
        'comment': ('info', 'comment'),
        'time': ('time',),
        'spotter': ('spotter', 'de'),
    },
    time_slice=(0, 5)
)

DXHEAT_SCHEMA = JsonSpotSchema(
    name='DXHeat',
    aliases={
        'freq': ('f', 'frequency'),
        'call': ('c', 'dx', 'callsign'),
        'comment': ('i', 'info'),
        'time': ('t',),
        'spotter': ('s', 'spotter'),
    },
    time_slice=(11, 16),
    envelope_key='spots'
)


def parse_json_spots(payload: Any, schema: JsonSpotSchema) -> List[Dict[str, str]]:
    """Map a JSON spot array (raw text or decoded) through a key-alias schema."""
    data = payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except (ValueError, RecursionError) as e:
            raise SpotParseError(schema.name, f"invalid JSON: {e}", payload_preview=str(payload)[:300]) from e

    if schema.envelope_key and isinstance(data, dict) and schema.envelope_key in data:
        data = data[schema.envelope_key]

    if not isinstance(data, list):
        raise SpotParseError(schema.name, f"expected a spot array, got {type(data).__name__}")

    return [schema.to_spot(record) for record in data[:schema.limit] if isinstance(record, dict)]


def parse_dxsummit_spots(payload: Any) -> List[Dict[str, str]]:
    """Parse the DX Summit JSON spot array."""
    return parse_json_spots(payload, DXSUMMIT_SCHEMA)


def parse_dxheat_spots(payload: Any) -> List[Dict[str, str]]:
    """Parse the DXHeat feed, either a bare array or {'spots': [...]}."""
    return parse_json_spots(payload, DXHEAT_SCHEMA)
