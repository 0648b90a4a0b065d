"""
Centralized Configuration for the quoting/ordering data layer
Manages environment-specific settings for storage, logging and reports.
"""
import os


class Config:
    """Base configuration with defaults"""

    # File Storage Paths
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    DATA_FOLDER = os.environ.get('DATA_FOLDER', os.path.join(BASE_DIR, 'data'))
    MIGRATIONS_FOLDER = os.path.join(BASE_DIR, 'database', 'migrations')

    # Database Settings
    DATABASE_URL = os.environ.get(
        'DATABASE_URL',
        'sqlite:///' + os.path.join(DATA_FOLDER, 'orcamentos.db')
    )
    SQL_ECHO = os.environ.get('SQL_ECHO', 'false').lower() == 'true'

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_FILE = os.environ.get('LOG_FILE', 'orcamentos.log')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')

    # Report windows (days)
    ALERT_WINDOW_DAYS = 7
    WEEKLY_WINDOW_DAYS = 7
    TOP_PRODUCTS_LIMIT = 5

    # Quote editor defaults
    DEFAULT_QUOTE_VALIDITY_DAYS = 7
    DEFAULT_SHIPPING_RATE_PER_KM = 5.0

    # First-run setup defaults
    DEFAULT_OBSERVATIONS = 'Orçamento válido por 7 dias. Formas de pagamento: A combinar.'


class DevelopmentConfig(Config):
    """Development-specific configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = 'DEBUG'


class ProductionConfig(Config):
    """Production-specific configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing-specific configuration"""
    DEBUG = True
    TESTING = True
    # In-memory database, migrated on open
    DATABASE_URL = 'sqlite://'


# Configuration selector
config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}


def get_config():
    """Get configuration based on APP_ENV environment variable"""
    env = os.environ.get('APP_ENV', 'development')
    return config_by_name.get(env, DevelopmentConfig)
