import os
from datetime import timedelta


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() == 'true'


class Config:
    """Base configuration class"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///tasktracker.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session configuration
    SESSION_COOKIE_NAME = 'tasktracker_session'
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE')
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.environ.get('SESSION_LIFETIME_HOURS', '168')))

    # CSRF can be switched off for test environments
    WTF_CSRF_ENABLED = not _env_flag('CSRF_DISABLED')

    # Fixed work factor for stored password hashes
    PASSWORD_HASH_METHOD = os.environ.get('PASSWORD_HASH_METHOD', 'pbkdf2:sha256:600000')

    # Expired session records are purged on this interval
    SESSION_PURGE_INTERVAL_MINUTES = int(os.environ.get('SESSION_PURGE_INTERVAL_MINUTES', '60'))
    SCHEDULER_ENABLED = not _env_flag('FLASK_SKIP_BACKGROUND_TASKS')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    SHOW_ERROR_DETAILS = False
    SKIP_DB_CHECK = False


class DevelopmentConfig(Config):
    SHOW_ERROR_DETAILS = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'
    SCHEDULER_ENABLED = False
    SHOW_ERROR_DETAILS = True


class ProductionConfig(Config):
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE', 'True')


def get_config(env=None):
    """Pick the configuration class for FLASK_ENV"""
    env = env or os.environ.get('FLASK_ENV', 'development')
    return {
        'production': ProductionConfig,
        'testing': TestingConfig,
    }.get(env, DevelopmentConfig)
