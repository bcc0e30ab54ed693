import os
import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault('FLASK_ENV', 'testing')

from data_sources.errors import HttpStatusError, NetworkError, SourceTimeoutError  # noqa: E402
from data_sources.http_fetch import SourceResult  # noqa: E402


HAMQTH_SAMPLE = "\n".join([
    "# HamQTH DX cluster dump",
    "F5PAC^7022.0^KP5/NP3VI^Up 2^0610 2026-01-30^^^NA^40M^Desecheo Island^43",
    "DL1ABC^14074.0^JA1XYZ^FT8 -12dB^0612 2026-01-30^^^AS^20M^Japan^44",
    "W1AW^abc^K1ABC^bad freq^0613 2026-01-30^^^NA^20M^USA^45",
    "",
])


class FakeFetcher:
    """Stands in for fetch_source: answers by source name and records calls."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, source, url, headers=None, timeout=None, as_json=False):
        self.calls.append(source)
        response = self.responses.get(source)
        if response is None:
            return SourceResult.failure(source, NetworkError(source, 'unreachable'))
        if isinstance(response, SourceResult):
            return response
        if isinstance(response, Exception):
            raise response
        return SourceResult.success(source, response)


def failure(source, kind='network'):
    errors = {
        'network': NetworkError(source, 'connection refused'),
        'timeout': SourceTimeoutError(source, 'timed out'),
        'http': HttpStatusError(source, 503),
    }
    return SourceResult.failure(source, errors[kind])


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def app():
    from app_factory import create_app
    from calculations.propagation_calculator import PropagationCalculator
    from data_sources.contest_data import ContestDataProvider
    from data_sources.solar_data import SpaceWeatherProvider
    from data_sources.spots_data import SpotsDataProvider, default_spot_sources

    fetcher = FakeFetcher({
        'HamQTH': HAMQTH_SAMPLE,
        'NOAA flux': [{'flux': 120.4, 'time_tag': '2026-01-30T20:00:00'}],
        'NOAA K-index': [['time_tag', 'Kp'], ['2026-01-30 18:00:00.000', '3.00']],
        'WA7BNM': [],
    })

    services = {
        'SPOTS_PROVIDER': SpotsDataProvider(default_spot_sources(), fetcher=fetcher),
        'SPACE_WEATHER': SpaceWeatherProvider(fetcher=fetcher),
        'PROPAGATION': PropagationCalculator(),
        'CONTESTS_PROVIDER': ContestDataProvider(fetcher=fetcher),
    }
    flask_app = create_app('testing', services=services)
    flask_app.config['FAKE_FETCHER'] = fetcher
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()
