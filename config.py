"""
Configuration module for the HamClock data service.
Centralizes all configuration settings and environment variables.
"""

import os
from dotenv import load_dotenv
from typing import Optional

# Load environment variables
load_dotenv()


class Config:
    """Application configuration class."""

    # Flask Configuration
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_ENV') == 'development'
    PORT = int(os.getenv('PORT', 3000))

    APP_VERSION = '3.3.0'
    USER_AGENT = os.getenv('USER_AGENT', 'OpenHamClock/3.3')

    # Upstream fetch deadline in seconds
    SOURCE_TIMEOUT = float(os.getenv('SOURCE_TIMEOUT', 8))

    # DX cluster sources, in priority order
    HAMQTH_URL = os.getenv('HAMQTH_URL', 'https://www.hamqth.com/dxc_csv.php')
    DXSUMMIT_URL = os.getenv('DXSUMMIT_URL', 'https://www.dxsummit.fi/api/v1/spots?limit=25')
    DXHEAT_URL = os.getenv('DXHEAT_URL', 'https://dxheat.com/dxc/data.php')

    # NOAA SWPC space weather
    NOAA_FLUX_URL = 'https://services.swpc.noaa.gov/json/f107_cm_flux.json'
    NOAA_KINDEX_URL = 'https://services.swpc.noaa.gov/products/noaa-planetary-k-index.json'
    NOAA_SUNSPOTS_URL = 'https://services.swpc.noaa.gov/json/solar-cycle/observed-solar-cycle-indices.json'
    NOAA_XRAY_URL = 'https://services.swpc.noaa.gov/json/goes/primary/xrays-7-day.json'

    # Activations, band conditions and contests
    POTA_URL = 'https://api.pota.app/spot/activator'
    SOTA_URL = 'https://api2.sota.org.uk/api/spots/50/all'
    HAMQSL_URL = 'https://www.hamqsl.com/solarxml.php'
    CONTEST_CALENDAR_URL = os.getenv('CONTEST_CALENDAR_URL', 'https://www.contestcalendar.com/contestcal.json')

    # Flask-Caching Configuration (pass-through feeds only)
    CACHE_TYPE = 'SimpleCache'
    CACHE_DEFAULT_TIMEOUT = 300  # 5 minutes default
    CACHE_KEY_PREFIX = 'hamclock_'
    FEED_CACHE_TIMEOUT = int(os.getenv('FEED_CACHE_TIMEOUT', 60))
    SPACE_WEATHER_CACHE_TIMEOUT = int(os.getenv('SPACE_WEATHER_CACHE_TIMEOUT', 300))

    # Client refresh intervals in milliseconds, reported by /api/config
    REFRESH_INTERVALS = {
        'spaceWeather': 300000,
        'pota': 60000,
        'sota': 60000,
        'dxCluster': 30000
    }

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL')
    LOG_FILE = os.getenv('LOG_FILE')

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration values."""
        errors = []

        if cls.SOURCE_TIMEOUT <= 0:
            errors.append("SOURCE_TIMEOUT must be positive")

        if not cls.USER_AGENT:
            errors.append("USER_AGENT is required")

        return errors


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    PORT = 5001  # Development port


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False

    @classmethod
    def validate(cls) -> list[str]:
        """Additional validation for production."""
        errors = super().validate()

        # Only warn about SECRET_KEY in production, don't fail
        if cls.SECRET_KEY == 'dev-secret-key-change-in-production':
            print("Warning: SECRET_KEY is using default value - consider setting a secure key in production")

        return errors


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    CACHE_TYPE = 'NullCache'
    SOURCE_TIMEOUT = 1.0


# Configuration mapping
config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': ProductionConfig  # Default to production
}


def get_config(config_name: Optional[str] = None) -> Config:
    """Get configuration based on environment."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'default')

    return config_map.get(config_name, config_map['default'])
