#!/usr/bin/env python3
"""
Retail Inventory Service
Flask-based service for orders, stock and financial reporting.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from retail_inventory.validators.config_validator import validate_config

from retail_inventory import create_app, init_database

logger = logging.getLogger(__name__)


def main():
    """Main application entry point."""
    validate_config()

    env = os.environ.get('FLASK_ENV', 'production')

    app = create_app(env)
    logger.info(f"Starting Retail Inventory Service in {env} mode")

    # Tables are normally managed by Flask-Migrate; this covers fresh local setups
    init_database(app)

    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', 5000))
    debug = env == 'development'

    logger.info(f"Starting Retail Inventory Service on {host}:{port}")

    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True
    )


if __name__ == '__main__':
    main()
