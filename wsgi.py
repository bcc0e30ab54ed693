#!/usr/bin/env python3
"""
WSGI entry point for the HamClock data service.

    flask --app wsgi run
    PORT=8080 python wsgi.py
"""

import os
from app_factory import create_app
from config import get_config
from utils.logging_config import get_logger

config_class = get_config()

# Create the application
app = create_app(config_class)
logger = get_logger(__name__)

if __name__ == '__main__':
    host = '127.0.0.1' if config_class.DEBUG else '0.0.0.0'
    port = int(os.getenv('PORT', config_class.PORT))
    logger.info(f"Starting HamClock data service v{config_class.APP_VERSION} on {host}:{port}")
    app.run(debug=config_class.DEBUG, host=host, port=port)
