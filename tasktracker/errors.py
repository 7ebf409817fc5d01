"""
Application exceptions and the top-level error handlers
"""
import logging
import traceback
from contextlib import contextmanager

from flask import render_template, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

TASK_ACCESS_MESSAGE = 'Task not found or you do not have permission to access it.'


class TaskTrackerError(Exception):
    """Base class for errors raised by the core"""


class ValidationError(TaskTrackerError):
    """One or more fields violate their constraints"""

    def __init__(self, errors):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__('; '.join(
            f'{field}: {message}'
            for field, messages in self.errors.items()
            for message in messages
        ))


class DuplicateEmailError(TaskTrackerError):
    def __init__(self, message='An account with this email already exists'):
        super().__init__(message)


class InvalidCredentialsError(TaskTrackerError):
    def __init__(self, message='Invalid login credentials'):
        super().__init__(message)


class Unauthenticated(TaskTrackerError):
    def __init__(self, message='Please log in to access this page'):
        super().__init__(message)


class TaskAccessDenied(TaskTrackerError):
    """Task is missing or owned by someone else; callers cannot tell which"""

    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(TASK_ACCESS_MESSAGE)


class TaskNotFound(TaskAccessDenied):
    pass


class TaskForbidden(TaskAccessDenied):
    pass


class StoreUnavailable(TaskTrackerError):
    def __init__(self, message='The data store is unavailable'):
        super().__init__(message)


@contextmanager
def store_operation(action):
    """Roll back and re-raise database failures as StoreUnavailable"""
    from tasktracker import db
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error('Store failure while %s: %s', action, exc)
        raise StoreUnavailable() from exc


def register_error_handlers(flask_app):
    """Render a generic error page for anything the views did not handle"""

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(error):
        return render_template(
            'error.html',
            status=error.code,
            message=error.description if error.code != 404 else 'Page Not Found',
            details=None,
        ), error.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception('Unhandled error: %s', error)
        details = None
        if current_app.config.get('SHOW_ERROR_DETAILS'):
            details = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        return render_template(
            'error.html',
            status=500,
            message='Something went wrong. Please try again later.',
            details=details,
        ), 500
