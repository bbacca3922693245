import os


def get_database_uri():
    """
    Resolve the database URI from the environment.
    DATABASE_URL wins; otherwise a MySQL URI is assembled from its parts.
    """
    url = os.environ.get('DATABASE_URL')
    if url:
        # SQLAlchemy only accepts the postgresql:// scheme
        if url.startswith('postgres://'):
            url = url.replace('postgres://', 'postgresql://', 1)
        return url

    user = os.environ.get('MYSQL_USER', 'admin')
    password = os.environ.get('MYSQL_PASSWORD', 'admin123')
    host = os.environ.get('DATABASE_HOST', 'localhost')
    port = os.environ.get('DATABASE_PORT', '3306')
    database = os.environ.get('MYSQL_DATABASE', 'retail_inventory_db')
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{database}"


class Config:
    """Base configuration"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database - resolved in create_app so .env is already loaded
    SQLALCHEMY_DATABASE_URI = None
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Transactions
    LOCK_WAIT_TIMEOUT_SECONDS = int(os.environ.get('LOCK_WAIT_TIMEOUT_SECONDS', 5))
    TRANSACTION_RETRY_LIMIT = int(os.environ.get('TRANSACTION_RETRY_LIMIT', 1))

    # Orders and reporting
    ORDER_NUMBER_PREFIX = os.environ.get('ORDER_NUMBER_PREFIX', 'ORD')
    TOP_PRODUCTS_LIMIT = int(os.environ.get('TOP_PRODUCTS_LIMIT', 10))

    # Products
    DEFAULT_MIN_STOCK = int(os.environ.get('DEFAULT_MIN_STOCK', 5))

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = 'DEBUG'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    # Use in-memory SQLite for testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
