"""Tests for the single-attempt source fetcher."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from data_sources.errors import HttpStatusError, SourceTimeoutError
from data_sources.http_fetch import CHUNK_SIZE, SourceResult, _read_body, fetch_source


def make_response(body=b'', status_code=200, encoding='utf-8'):
    response = MagicMock()
    response.status_code = status_code
    response.encoding = encoding
    response.iter_content.return_value = [body] if body else []
    return response


@patch('data_sources.http_fetch.requests.get')
def test_success_returns_text_body(mock_get):
    response = make_response(b'F5PAC^7022.0^KP5/NP3VI')
    mock_get.return_value = response

    result = fetch_source('HamQTH', 'https://example.org/dxc', headers={'User-Agent': 'x'}, timeout=3)

    assert result.ok
    assert result.status == SourceResult.SUCCESS
    assert result.payload == 'F5PAC^7022.0^KP5/NP3VI'
    mock_get.assert_called_once_with(
        'https://example.org/dxc', headers={'User-Agent': 'x'}, timeout=3, stream=True
    )
    response.close.assert_called_once()


@patch('data_sources.http_fetch.requests.get')
def test_as_json_decodes_payload(mock_get):
    mock_get.return_value = make_response(b'[{"flux": 151.2}]')

    result = fetch_source('NOAA flux', 'https://example.org/flux', as_json=True)

    assert result.ok
    assert result.payload == [{'flux': 151.2}]


@patch('data_sources.http_fetch.requests.get')
def test_non_2xx_is_http_status_failure(mock_get):
    response = make_response(b'Service Unavailable', status_code=503)
    mock_get.return_value = response

    result = fetch_source('DX Summit', 'https://example.org/spots')

    assert not result.ok
    assert result.status == SourceResult.FAILURE
    assert result.reason == 'http status'
    assert isinstance(result.error, HttpStatusError)
    assert result.error.status_code == 503
    response.close.assert_called_once()
    response.iter_content.assert_not_called()


@patch('data_sources.http_fetch.requests.get')
def test_timeout_is_classified(mock_get):
    mock_get.side_effect = requests.exceptions.ConnectTimeout('connect timed out')

    result = fetch_source('HamQTH', 'https://example.org/dxc', timeout=1)

    assert result.status == SourceResult.FAILURE
    assert result.reason == 'timeout'


@patch('data_sources.http_fetch.requests.get')
def test_connection_error_is_network_failure(mock_get):
    mock_get.side_effect = requests.exceptions.ConnectionError('connection refused')

    result = fetch_source('DXHeat', 'https://example.org/spots')

    assert result.status == SourceResult.FAILURE
    assert result.reason == 'network error'


@patch('data_sources.http_fetch.requests.get')
def test_read_error_mid_body_is_network_failure(mock_get):
    response = make_response()
    response.iter_content.side_effect = requests.exceptions.ChunkedEncodingError('broken')
    mock_get.return_value = response

    result = fetch_source('HamQTH', 'https://example.org/dxc')

    assert result.reason == 'network error'
    response.close.assert_called_once()


@pytest.mark.parametrize('body', [b'', b'   \n\t'])
@patch('data_sources.http_fetch.requests.get')
def test_blank_body_is_empty(mock_get, body):
    mock_get.return_value = make_response(body)

    result = fetch_source('HamQTH', 'https://example.org/dxc')

    assert result.status == SourceResult.EMPTY
    assert result.reason == 'empty'
    assert not result.ok


@patch('data_sources.http_fetch.requests.get')
def test_invalid_json_is_parse_failure(mock_get):
    mock_get.return_value = make_response(b'<html>Bad Gateway</html>')

    result = fetch_source('NOAA K-index', 'https://example.org/k', as_json=True)

    assert result.status == SourceResult.FAILURE
    assert result.reason == 'parse error'
    assert result.error.payload_preview.startswith('<html>')


@patch('data_sources.http_fetch.requests.get')
def test_missing_encoding_defaults_to_utf8(mock_get):
    mock_get.return_value = make_response('Zürich'.encode('utf-8'), encoding=None)

    result = fetch_source('HamQTH', 'https://example.org/dxc')

    assert result.payload == 'Zürich'


def test_read_body_enforces_deadline():
    """A body that keeps trickling past the deadline is abandoned."""
    ticks = iter([1.0, 2.0, 6.0, 7.0])
    response = MagicMock()
    response.iter_content.return_value = [b'a', b'b', b'c', b'd']

    with pytest.raises(SourceTimeoutError):
        _read_body('HamQTH', response, deadline=5.0, clock=lambda: next(ticks))


def test_read_body_joins_chunks_within_deadline():
    response = MagicMock()
    response.iter_content.return_value = [b'ab', b'', b'cd']

    body = _read_body('HamQTH', response, deadline=10.0, clock=lambda: 0.0)

    assert body == b'abcd'


@patch('data_sources.http_fetch.requests.get')
def test_unknown_charset_falls_back_to_utf8(mock_get):
    mock_get.return_value = make_response('Zürich'.encode('utf-8'), encoding='x-bogus-charset')

    result = fetch_source('HamQTH', 'https://example.org/dxc')

    assert result.ok
    assert result.payload == 'Zürich'


@patch('data_sources.http_fetch.requests.get')
def test_deeply_nested_json_is_parse_failure(mock_get):
    mock_get.return_value = make_response(('[' * 100000 + ']' * 100000).encode('ascii'))

    result = fetch_source('NOAA flux', 'https://example.org/flux', as_json=True)

    assert result.status == SourceResult.FAILURE
    assert result.reason == 'parse error'


def test_read_body_checks_deadline_before_first_read():
    response = MagicMock()
    response.iter_content.return_value = [b'late']

    with pytest.raises(SourceTimeoutError):
        _read_body('HamQTH', response, deadline=5.0, clock=lambda: 6.0)

    response.iter_content.assert_not_called()


def test_read_body_uses_small_chunks():
    response = MagicMock()
    response.iter_content.return_value = [b'x']

    _read_body('HamQTH', response, deadline=10.0, clock=lambda: 0.0)

    response.iter_content.assert_called_once_with(chunk_size=CHUNK_SIZE)
    assert CHUNK_SIZE <= 1024
