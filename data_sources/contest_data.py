"""
Contest calendar data provider for the HamClock data service.

Fetches upcoming and active contests from the WA7BNM Contest Calendar JSON
feed, falling back to a calculated schedule of well known recurring contests.
"""

import calendar
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

import pytz

from config import Config
from .http_fetch import SourceResult, fetch_source

logger = logging.getLogger(__name__)

LIVE_CONTEST_LIMIT = 20
CALCULATED_CONTEST_LIMIT = 15

SATURDAY = 5

# Major contests: month (1-12), which Saturday (-1 = last), duration in hours
MAJOR_CONTESTS = [
    {'name': 'CQ WW DX CW', 'month': 11, 'weekend': -1, 'duration': 48, 'mode': 'CW'},
    {'name': 'CQ WW DX SSB', 'month': 10, 'weekend': -1, 'duration': 48, 'mode': 'SSB'},
    {'name': 'ARRL DX CW', 'month': 2, 'weekend': 3, 'duration': 48, 'mode': 'CW'},
    {'name': 'ARRL DX SSB', 'month': 3, 'weekend': 1, 'duration': 48, 'mode': 'SSB'},
    {'name': 'CQ WPX SSB', 'month': 3, 'weekend': -1, 'duration': 48, 'mode': 'SSB'},
    {'name': 'CQ WPX CW', 'month': 5, 'weekend': -1, 'duration': 48, 'mode': 'CW'},
    {'name': 'IARU HF Championship', 'month': 7, 'weekend': 2, 'duration': 24, 'mode': 'Mixed'},
    {'name': 'ARRL Field Day', 'month': 6, 'weekend': 4, 'duration': 27, 'mode': 'Mixed'},
    {'name': 'ARRL Sweepstakes CW', 'month': 11, 'weekend': 1, 'duration': 24, 'mode': 'CW'},
    {'name': 'ARRL Sweepstakes SSB', 'month': 11, 'weekend': 3, 'duration': 24, 'mode': 'SSB'},
    {'name': 'ARRL 10m Contest', 'month': 12, 'weekend': 2, 'duration': 48, 'mode': 'Mixed'},
    {'name': 'ARRL RTTY Roundup', 'month': 1, 'weekend': 1, 'duration': 24, 'mode': 'RTTY'},
    {'name': 'NA QSO Party CW', 'month': 1, 'weekend': 2, 'duration': 12, 'mode': 'CW'},
    {'name': 'NA QSO Party SSB', 'month': 1, 'weekend': 3, 'duration': 12, 'mode': 'SSB'},
    {'name': 'CQ 160m CW', 'month': 1, 'weekend': -1, 'duration': 42, 'mode': 'CW'},
    {'name': 'CQ WW RTTY', 'month': 9, 'weekend': -1, 'duration': 48, 'mode': 'RTTY'},
    {'name': 'JIDX CW', 'month': 4, 'weekend': 2, 'duration': 48, 'mode': 'CW'},
    {'name': 'JIDX SSB', 'month': 11, 'weekend': 2, 'duration': 48, 'mode': 'SSB'},
]

# Weekly mini-contests: weekday (Monday = 0), UTC start, duration in hours
WEEKLY_CONTESTS = [
    {'name': 'CWT 1300z', 'weekday': 2, 'hour': 13, 'minute': 0, 'duration': 1, 'mode': 'CW'},
    {'name': 'CWT 1900z', 'weekday': 2, 'hour': 19, 'minute': 0, 'duration': 1, 'mode': 'CW'},
    {'name': 'CWT 0300z', 'weekday': 3, 'hour': 3, 'minute': 0, 'duration': 1, 'mode': 'CW'},
    {'name': 'NCCC Sprint', 'weekday': 4, 'hour': 3, 'minute': 30, 'duration': 0.5, 'mode': 'CW'},
    {'name': 'K1USN SST', 'weekday': 6, 'hour': 0, 'minute': 0, 'duration': 1, 'mode': 'CW'},
    {'name': 'ICWC MST', 'weekday': 0, 'hour': 13, 'minute': 0, 'duration': 1, 'mode': 'CW'},
]


def to_iso(dt: datetime) -> str:
    """ISO-8601 UTC timestamp with a Z suffix."""
    return dt.astimezone(pytz.utc).isoformat().replace('+00:00', 'Z')


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-ish timestamp into an aware UTC datetime."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def contest_status(start: datetime, end: datetime, now: datetime) -> str:
    return 'active' if start <= now <= end else 'upcoming'


def nth_saturday_of_month(year: int, month: int, n: int) -> datetime:
    """Date of the nth Saturday; the first of the next month if there is none."""
    day = datetime(year, month, 1, tzinfo=pytz.utc)
    count = 0
    while day.month == month:
        if day.weekday() == SATURDAY:
            count += 1
            if count == n:
                return day
        day += timedelta(days=1)
    return day


def last_saturday_of_month(year: int, month: int) -> datetime:
    last_day = calendar.monthrange(year, month)[1]
    day = datetime(year, month, last_day, tzinfo=pytz.utc)
    while day.weekday() != SATURDAY:
        day -= timedelta(days=1)
    return day


def next_weekly_occurrence(contest: Dict, now: datetime) -> datetime:
    """Start of the next occurrence of a weekly contest that has not ended yet."""
    days_until = (contest['weekday'] - now.weekday()) % 7
    start = (now + timedelta(days=days_until)).replace(
        hour=contest['hour'], minute=contest['minute'], second=0, microsecond=0
    )
    if start + timedelta(hours=contest['duration']) < now:
        start += timedelta(days=7)
    return start


def calculate_upcoming_contests(now: Optional[datetime] = None) -> List[Dict]:
    """Calculate the next occurrences of recurring contests."""
    if now is None:
        now = datetime.now(pytz.utc)

    contests = []

    for contest in WEEKLY_CONTESTS:
        start = next_weekly_occurrence(contest, now)
        end = start + timedelta(hours=contest['duration'])
        contests.append({
            'name': contest['name'],
            'start': start,
            'end': end,
            'mode': contest['mode'],
            'status': contest_status(start, end, now)
        })

    for contest in MAJOR_CONTESTS:
        for year in (now.year, now.year + 1):
            if contest['weekend'] == -1:
                start = last_saturday_of_month(year, contest['month'])
            else:
                start = nth_saturday_of_month(year, contest['month'], contest['weekend'])
            end = start + timedelta(hours=contest['duration'])

            if end > now:
                contests.append({
                    'name': contest['name'],
                    'start': start,
                    'end': end,
                    'mode': contest['mode'],
                    'status': contest_status(start, end, now)
                })
                break

    contests.sort(key=lambda c: c['start'])

    return [
        dict(c, start=to_iso(c['start']), end=to_iso(c['end']))
        for c in contests[:CALCULATED_CONTEST_LIMIT]
    ]


class ContestDataProvider:
    """Provider for ham radio contest calendar data."""

    def __init__(self, fetcher: Callable[..., SourceResult] = fetch_source,
                 url: Optional[str] = None, timeout: Optional[float] = None):
        self.fetcher = fetcher
        self.url = url or Config.CONTEST_CALENDAR_URL
        self.timeout = timeout if timeout is not None else Config.SOURCE_TIMEOUT

    def get_contests(self, now: Optional[datetime] = None) -> List[Dict]:
        """Get current and upcoming contests, live first, calculated otherwise."""
        if now is None:
            now = datetime.now(pytz.utc)

        contests = self._fetch_contests(now)
        if contests:
            logger.info(f"WA7BNM returned {len(contests)} current contests")
            return contests

        try:
            contests = calculate_upcoming_contests(now)
            logger.info(f"Using calculated contests: {len(contests)}")
            return contests
        except Exception as e:
            logger.error(f"Contest calculation error: {e}")
            return []

    def _fetch_contests(self, now: datetime) -> List[Dict]:
        """Fetch and map contests from the WA7BNM calendar."""
        result = self.fetcher(
            'WA7BNM', self.url,
            headers={'User-Agent': Config.USER_AGENT, 'Accept': 'application/json'},
            timeout=self.timeout,
            as_json=True
        )
        if not result.ok or not isinstance(result.payload, list):
            return []

        contests = []
        for item in result.payload:
            if not isinstance(item, dict):
                continue

            start = parse_timestamp(item.get('start'))
            end = parse_timestamp(item.get('end'))
            if start is None or end is None or end <= now:
                continue

            contests.append({
                'name': item.get('name') or item.get('contest'),
                'start': to_iso(start),
                'end': to_iso(end),
                'mode': item.get('mode') or 'Mixed',
                'status': contest_status(start, end, now),
                'url': item.get('url') or None
            })

            if len(contests) >= LIVE_CONTEST_LIMIT:
                break

        return contests
