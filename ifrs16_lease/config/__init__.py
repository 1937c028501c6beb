"""
Configuration Management
Configuration with environment variables
"""

import os
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY', 'ifrs16-lease-secret-key-change-in-production')
    LOG_DIR = Path(os.environ.get('LOG_DIR', BASE_DIR / 'logs'))

    # Flask settings
    FLASK_ENV = os.environ.get('FLASK_ENV', 'development')
    DEBUG = FLASK_ENV == 'development'
    TESTING = False

    # API settings
    API_HOST = os.environ.get('API_HOST', 'localhost')
    API_PORT = int(os.environ.get('API_PORT', 5001))

    # CORS settings
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Logging
    LOG_TO_FILE = _env_flag('LOG_TO_FILE', 'true')
    LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT = 5

    # Lease engine
    DEFAULT_CURRENCY = os.environ.get('DEFAULT_CURRENCY', 'NGN')
    ROU_FLOOR_AT_ZERO = _env_flag('ROU_FLOOR_AT_ZERO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


class TestingConfig(Config):
    """Test configuration - console logging only"""
    TESTING = True
    DEBUG = False
    LOG_TO_FILE = False
    DEFAULT_CURRENCY = 'NGN'
    ROU_FLOOR_AT_ZERO = False


# Get configuration based on environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
