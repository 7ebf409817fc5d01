import logging
from datetime import datetime, timezone

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tasktracker.config import get_config
from tasktracker.logging_setup import setup_logging

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
csrf = CSRFProtect()

logger = logging.getLogger(__name__)


def utcnow():
    """Naive UTC timestamp, matching what the DateTime columns store"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_app(config_class=None):
    """Application factory pattern"""
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class or get_config())
    setup_logging(flask_app.config['LOG_LEVEL'])

    # Initialize extensions with flask_app
    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    csrf.init_app(flask_app)

    from tasktracker.sessions import DatabaseSessionInterface
    flask_app.session_interface = DatabaseSessionInterface()

    # Authentication is wired from an explicit context rather than module globals
    from tasktracker.auth.credentials import CredentialStore
    from tasktracker.auth.identity import AuthContext
    auth_context = AuthContext(CredentialStore(hash_method=flask_app.config['PASSWORD_HASH_METHOD']))
    auth_context.init_app(flask_app)

    from tasktracker.store import TaskStore
    flask_app.extensions['task_store'] = TaskStore()

    # Register blueprints
    from tasktracker.auth import bp as auth_bp
    flask_app.register_blueprint(auth_bp, url_prefix='/auth')

    from tasktracker.routes import bp as main_bp
    flask_app.register_blueprint(main_bp)

    from tasktracker.errors import register_error_handlers
    register_error_handlers(flask_app)

    if not flask_app.config['SKIP_DB_CHECK']:
        check_store(flask_app)

    logger.info('Application created (CSRF %s)',
                'enabled' if flask_app.config['WTF_CSRF_ENABLED'] else 'disabled')
    return flask_app


def check_store(flask_app):
    """Fail fast when the database cannot be reached"""
    from tasktracker.errors import StoreUnavailable
    with flask_app.app_context():
        try:
            db.session.execute(text('SELECT 1'))
        except SQLAlchemyError as exc:
            logger.critical('Database connection failed: %s', exc)
            raise StoreUnavailable(f'Cannot connect to database: {exc}') from exc
        finally:
            db.session.remove()
