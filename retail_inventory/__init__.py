import logging
from flask import Flask
from flask_cors import CORS


def create_app(config_name='default'):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load environment variables
    from dotenv import load_dotenv
    load_dotenv()

    # Load configuration
    from config import config, get_database_uri
    app.config.from_object(config[config_name])

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.config['SQLALCHEMY_DATABASE_URI'] = get_database_uri()

    # Configure logging
    if not app.testing:
        from retail_inventory.api.middlewares.correlation_id import CorrelationIdFilter
        logging.basicConfig(
            level=getattr(logging, app.config['LOG_LEVEL'].upper()),
            format='%(asctime)s %(levelname)s %(name)s [%(correlation_id)s]: %(message)s'
        )
        for handler in logging.getLogger().handlers:
            handler.addFilter(CorrelationIdFilter())

    # Initialize correlation ID middleware
    from retail_inventory.api.middlewares.correlation_id import CorrelationIdMiddleware
    CorrelationIdMiddleware(app)

    # Initialize database
    from retail_inventory.database import init_db
    init_db(app)

    CORS(app, origins=app.config['CORS_ORIGINS'])

    # Register API blueprints
    from retail_inventory.api.controllers import api_bp, health_bp
    app.register_blueprint(api_bp, url_prefix='/api/v1')
    app.register_blueprint(health_bp)
    app.logger.info("Retail inventory API registered")

    # Register error handlers
    from retail_inventory.utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    return app


def init_database(app):
    """Create missing tables - call this explicitly when ready"""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError
    from retail_inventory.database import db

    with app.app_context():
        try:
            db.session.execute(text('SELECT 1'))  # Test connection
            db.create_all()
            app.logger.info("Database tables created successfully")
            return True
        except SQLAlchemyError as e:
            app.logger.error(f"Failed to create database tables: {e}")
            if not app.debug:
                # Outside development, fail fast
                raise
            app.logger.warning("Continuing without database connection in development mode")
            return False
