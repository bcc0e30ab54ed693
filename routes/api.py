"""
API Routes
Provides RESTful endpoints for DX spots, propagation, contests and proxied feeds.
"""

import time
import logging
from datetime import datetime

import pytz
from flask import Blueprint, Response, jsonify, current_app, request

from calculations.constants import DEFAULT_DE, DEFAULT_DX
from calculations.helpers import parse_coordinate
from config import Config
from data_sources.feeds import FEEDS, fetch_feed, feed_error_message
from utils.cache_manager import cache, cache_clear

api_bp = Blueprint('api', __name__)
logger = logging.getLogger(__name__)

_started_at = time.time()


def _error(message: str, status: int = 500):
    response = jsonify({'error': message})
    response.status_code = status
    return response


def _only_success(response) -> bool:
    """Cache filter: never keep upstream failures."""
    return getattr(response, 'status_code', 200) == 200


def _proxy_feed(name: str):
    """Forward one upstream feed, or answer 500 with an error message."""
    try:
        result = fetch_feed(name)
        if not result.ok:
            logger.error(f"{name} feed error: {result.reason}")
            return _error(feed_error_message(name))

        if not FEEDS[name].as_json:
            return Response(result.payload, mimetype='application/xml')
        return jsonify(result.payload)

    except Exception as e:
        logger.error(f"{name} feed error: {e}")
        return _error(feed_error_message(name))


@api_bp.route('/dxcluster/spots', methods=['GET'])
def get_dx_spots():
    """Get DX cluster spots from the first source that answers."""
    try:
        provider = current_app.config['SPOTS_PROVIDER']
        return jsonify(provider.get_spots())
    except Exception as e:
        logger.error(f"Error getting DX cluster spots: {e}")
        return jsonify([])


@api_bp.route('/propagation', methods=['GET'])
def get_propagation():
    """Get band-by-band, hour-by-hour propagation for a DE/DX path."""
    try:
        de = parse_coordinate(request.args.get('deLat'), request.args.get('deLon'), DEFAULT_DE)
        dx = parse_coordinate(request.args.get('dxLat'), request.args.get('dxLon'), DEFAULT_DX)
        logger.info(f"Propagation for DE {de['lat']},{de['lon']} to DX {dx['lat']},{dx['lon']}")

        solar = current_app.config['SPACE_WEATHER'].get_snapshot()
        report = current_app.config['PROPAGATION'].predict(de, dx, solar)
        return jsonify(report)

    except Exception as e:
        logger.error(f"Error calculating propagation: {e}")
        return _error('Failed to calculate propagation')


@api_bp.route('/contests', methods=['GET'])
def get_contests():
    """Get active and upcoming contests."""
    try:
        provider = current_app.config['CONTESTS_PROVIDER']
        return jsonify(provider.get_contests())
    except Exception as e:
        logger.error(f"Error getting contests: {e}")
        return jsonify([])


@api_bp.route('/noaa/flux', methods=['GET'])
@cache.cached(timeout=Config.SPACE_WEATHER_CACHE_TIMEOUT, response_filter=_only_success)
def get_noaa_flux():
    """NOAA Space Weather - Solar Flux"""
    return _proxy_feed('noaa_flux')


@api_bp.route('/noaa/kindex', methods=['GET'])
@cache.cached(timeout=Config.SPACE_WEATHER_CACHE_TIMEOUT, response_filter=_only_success)
def get_noaa_kindex():
    """NOAA Space Weather - K-Index"""
    return _proxy_feed('noaa_kindex')


@api_bp.route('/noaa/sunspots', methods=['GET'])
@cache.cached(timeout=Config.SPACE_WEATHER_CACHE_TIMEOUT, response_filter=_only_success)
def get_noaa_sunspots():
    """NOAA Space Weather - Sunspots"""
    return _proxy_feed('noaa_sunspots')


@api_bp.route('/noaa/xray', methods=['GET'])
@cache.cached(timeout=Config.SPACE_WEATHER_CACHE_TIMEOUT, response_filter=_only_success)
def get_noaa_xray():
    """NOAA Space Weather - X-Ray Flux"""
    return _proxy_feed('noaa_xray')


@api_bp.route('/pota/spots', methods=['GET'])
@cache.cached(timeout=Config.FEED_CACHE_TIMEOUT, response_filter=_only_success)
def get_pota_spots():
    """Parks On The Air activator spots"""
    return _proxy_feed('pota_spots')


@api_bp.route('/sota/spots', methods=['GET'])
@cache.cached(timeout=Config.FEED_CACHE_TIMEOUT, response_filter=_only_success)
def get_sota_spots():
    """Summits On The Air spots"""
    return _proxy_feed('sota_spots')


@api_bp.route('/hamqsl/conditions', methods=['GET'])
@cache.cached(timeout=Config.SPACE_WEATHER_CACHE_TIMEOUT, response_filter=_only_success)
def get_hamqsl_conditions():
    """HamQSL band conditions XML"""
    return _proxy_feed('hamqsl_conditions')


@api_bp.route('/qrz/lookup/<callsign>', methods=['GET'])
def qrz_lookup(callsign):
    """Callsign lookup placeholder; QRZ needs account credentials."""
    return jsonify({
        'message': 'QRZ lookup requires API key configuration',
        'callsign': callsign.upper()
    })


@api_bp.route('/health', methods=['GET'])
def health():
    """Health check."""
    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', Config.APP_VERSION),
        'uptime': round(time.time() - _started_at, 3),
        'timestamp': datetime.now(pytz.utc).isoformat().replace('+00:00', 'Z')
    })


@api_bp.route('/config', methods=['GET'])
def get_client_config():
    """Feature flags and refresh intervals for the dashboard."""
    return jsonify({
        'version': current_app.config.get('APP_VERSION', Config.APP_VERSION),
        'features': {
            'spaceWeather': True,
            'pota': True,
            'sota': True,
            'dxCluster': True,
            'propagation': True,
            'contests': True
        },
        'refreshIntervals': current_app.config.get('REFRESH_INTERVALS', Config.REFRESH_INTERVALS)
    })


@api_bp.route('/cache/clear', methods=['POST'])
def clear_cache():
    """Clear one cached feed (by request path) or all of them."""
    try:
        data = request.get_json(silent=True) or {}
        path = data.get('path')

        cache_clear(path)
        if path:
            return jsonify({'message': f'Cache {path} cleared'})
        return jsonify({'message': 'All caches cleared'})

    except Exception as e:
        logger.error(f"Error clearing cache: {e}")
        return _error('Internal server error')
