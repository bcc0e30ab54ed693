"""Tests for the HTTP API blueprint."""

from unittest.mock import MagicMock, patch

from app_factory import create_app
import config
from conftest import failure
from data_sources.http_fetch import SourceResult


def test_dx_spots_from_first_source(client, app):
    response = client.get('/api/dxcluster/spots')

    assert response.status_code == 200
    spots = response.get_json()
    assert [s['call'] for s in spots] == ['KP5/NP3VI', 'JA1XYZ']
    assert spots[0] == {
        'freq': '7.022', 'call': 'KP5/NP3VI', 'comment': 'Up 2 40M', 'time': '06:10z', 'spotter': 'F5PAC'
    }
    assert app.config['FAKE_FETCHER'].calls == ['HamQTH']


def test_dx_spots_never_errors(client, app):
    app.config['SPOTS_PROVIDER'] = MagicMock(get_spots=MagicMock(side_effect=RuntimeError('boom')))

    response = client.get('/api/dxcluster/spots')

    assert response.status_code == 200
    assert response.get_json() == []


def test_propagation_report(client):
    response = client.get('/api/propagation?deLat=40&deLon=-75&dxLat=35&dxLon=139')

    assert response.status_code == 200
    report = response.get_json()
    assert set(report) == {'solarData', 'distanceKm', 'currentHourUTC', 'currentBands', 'hourlyPredictions'}
    assert report['solarData'] == {'sfi': 120, 'ssn': 55, 'kIndex': 3}
    assert len(report['hourlyPredictions']['20m']) == 24
    assert len(report['currentBands']) == 10


def test_propagation_uses_default_path_for_bad_coordinates(client):
    defaults = client.get('/api/propagation').get_json()
    garbage = client.get('/api/propagation?deLat=abc&deLon=999&dxLat=&dxLon=x').get_json()

    assert defaults['distanceKm'] == garbage['distanceKm']
    assert defaults['distanceKm'] > 10000


def test_propagation_failure_is_500(client, app):
    app.config['SPACE_WEATHER'] = MagicMock(get_snapshot=MagicMock(side_effect=RuntimeError('boom')))

    response = client.get('/api/propagation')

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to calculate propagation'}


def test_contests_fall_back_to_calculated(client):
    response = client.get('/api/contests')

    assert response.status_code == 200
    contests = response.get_json()
    assert len(contests) == 15
    assert {'name', 'start', 'end', 'mode', 'status'} <= set(contests[0])


@patch('routes.api.fetch_feed')
def test_feed_proxy_passes_json_through(mock_fetch, client):
    mock_fetch.return_value = SourceResult.success('noaa_flux', [{'flux': 151.2}])

    response = client.get('/api/noaa/flux')

    assert response.status_code == 200
    assert response.get_json() == [{'flux': 151.2}]
    mock_fetch.assert_called_once_with('noaa_flux')


@patch('routes.api.fetch_feed')
def test_feed_proxy_failure_is_500(mock_fetch, client):
    mock_fetch.return_value = failure('pota_spots', 'timeout')

    response = client.get('/api/pota/spots')

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to fetch POTA spots'}


@patch('routes.api.fetch_feed')
def test_hamqsl_returns_xml(mock_fetch, client):
    mock_fetch.return_value = SourceResult.success('hamqsl_conditions', '<solar><solardata/></solar>')

    response = client.get('/api/hamqsl/conditions')

    assert response.status_code == 200
    assert response.mimetype == 'application/xml'
    assert response.get_data(as_text=True) == '<solar><solardata/></solar>'


def test_health(client):
    response = client.get('/api/health')

    data = response.get_json()
    assert response.status_code == 200
    assert data['status'] == 'ok'
    assert data['version'] == '3.3.0'
    assert data['uptime'] >= 0
    assert data['timestamp'].endswith('Z')


def test_client_config(client):
    data = client.get('/api/config').get_json()

    assert data['features']['dxCluster'] is True
    assert data['refreshIntervals']['dxCluster'] == 30000


def test_cache_clear(client):
    response = client.post('/api/cache/clear', json={'path': '/api/noaa/flux'})
    assert response.status_code == 200
    assert response.get_json() == {'message': 'Cache /api/noaa/flux cleared'}

    response = client.post('/api/cache/clear')
    assert response.get_json() == {'message': 'All caches cleared'}


def test_cors_headers(client):
    response = client.get('/api/health', headers={'Origin': 'https://dashboard.example'})
    assert response.headers.get('Access-Control-Allow-Origin') == '*'


class CachingConfig(config.TestingConfig):
    CACHE_TYPE = 'SimpleCache'


@patch('routes.api.fetch_feed')
def test_feed_responses_are_cached_until_cleared(mock_fetch):
    client = create_app(CachingConfig).test_client()
    mock_fetch.side_effect = [
        failure('noaa_xray', 'http'),
        SourceResult.success('noaa_xray', [1]),
        SourceResult.success('noaa_xray', [2]),
    ]

    # Upstream failures are not kept
    assert client.get('/api/noaa/xray').status_code == 500
    assert client.get('/api/noaa/xray').get_json() == [1]
    assert client.get('/api/noaa/xray').get_json() == [1]
    assert mock_fetch.call_count == 2

    client.post('/api/cache/clear', json={'path': '/api/noaa/xray'})

    assert client.get('/api/noaa/xray').get_json() == [2]
    assert mock_fetch.call_count == 3


@patch('routes.api.fetch_feed')
def test_json_feed_with_string_body_stays_json(mock_fetch, client):
    mock_fetch.return_value = SourceResult.success('sota_spots', 'maintenance')

    response = client.get('/api/sota/spots')

    assert response.status_code == 200
    assert response.mimetype == 'application/json'
    assert response.get_json() == 'maintenance'


def test_qrz_lookup_placeholder(client):
    response = client.get('/api/qrz/lookup/kp5np3vi')

    assert response.status_code == 200
    assert response.get_json() == {
        'message': 'QRZ lookup requires API key configuration',
        'callsign': 'KP5NP3VI'
    }
