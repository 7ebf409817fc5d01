"""
Access guard for task operations.
"""
import logging
from functools import wraps

from flask import flash, redirect, url_for
from flask_login import current_user

from tasktracker import db
from tasktracker.auth.identity import get_auth
from tasktracker.errors import Unauthenticated, TaskNotFound, TaskForbidden, store_operation
from tasktracker.models import Task

logger = logging.getLogger(__name__)


def require_authenticated():
    """Return the logged-in user or raise Unauthenticated"""
    if not current_user.is_authenticated:
        raise Unauthenticated()
    return current_user._get_current_object()


def require_ownership(user, task_id):
    """Load a task the user owns.

    Missing and foreign tasks raise different exceptions that share one
    user-facing message.
    """
    with store_operation('loading task'):
        task = db.session.get(Task, task_id)
    if task is None:
        logger.info('User %s asked for missing task %s', user.id, task_id)
        raise TaskNotFound(task_id)
    if task.user_id != user.id:
        logger.warning('User %s denied access to task %s owned by %s', user.id, task_id, task.user_id)
        raise TaskForbidden(task_id)
    return task


def login_required(f):
    """Decorator for views that need a logged-in user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            require_authenticated()
        except Unauthenticated:
            return get_auth().handle_unauthorized()
        return f(*args, **kwargs)
    return decorated_function


def anonymous_required(f):
    """Decorator for the login and register pages"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_user.is_authenticated:
            flash('You are already logged in', 'info')
            return redirect(url_for('main.tasks'))
        return f(*args, **kwargs)
    return decorated_function
