"""
Flask Application Factory
Creates and configures the Flask application with all necessary components.
"""

import logging
from typing import Optional, Union

from flask import Flask
from flask_cors import CORS

from config import Config, get_config
from calculations.propagation_calculator import PropagationCalculator
from data_sources.contest_data import ContestDataProvider
from data_sources.solar_data import SpaceWeatherProvider
from data_sources.spots_data import SpotsDataProvider, default_spot_sources
from utils.cache_manager import init_cache
from utils.logging_config import setup_logging
from routes.api import api_bp

logger = logging.getLogger(__name__)


def create_app(config_class: Optional[Union[str, type]] = None, services: Optional[dict] = None):
    """
    Create and configure the Flask application.

    Args:
        config_class: Config class, or a name understood by get_config()
        services: Optional overrides for the providers in initialize_services()
    """
    if config_class is None or isinstance(config_class, str):
        config_class = get_config(config_class)

    setup_logging(level=config_class.LOG_LEVEL, log_file=config_class.LOG_FILE)

    app = Flask(__name__)
    app.config.from_object(config_class)

    errors = config_class.validate()
    for error in errors:
        logger.warning(f"Configuration problem: {error}")

    logger.info("Initializing services...")

    # Initialize CORS
    CORS(app)

    # Initialize cache
    init_cache(app)

    # Initialize services
    app.config.update(initialize_services(config_class))
    if services:
        app.config.update(services)

    # Register blueprints
    register_blueprints(app)

    logger.info("Application created successfully")
    return app


def initialize_services(config_class=Config) -> dict:
    """Initialize all application services."""
    timeout = config_class.SOURCE_TIMEOUT
    services = {
        'SPOTS_PROVIDER': SpotsDataProvider(default_spot_sources(config_class), timeout=timeout),
        'SPACE_WEATHER': SpaceWeatherProvider(
            flux_url=config_class.NOAA_FLUX_URL,
            kindex_url=config_class.NOAA_KINDEX_URL,
            timeout=timeout
        ),
        'PROPAGATION': PropagationCalculator(),
        'CONTESTS_PROVIDER': ContestDataProvider(url=config_class.CONTEST_CALENDAR_URL, timeout=timeout),
    }
    logger.info("Data providers initialized")
    return services


def register_blueprints(app):
    """Register Flask blueprints."""
    app.register_blueprint(api_bp, url_prefix='/api')
    logger.info("Blueprints registered")
