"""
Session identity: who is logged in on this request, and the login/logout
transitions that change it.
"""
import logging

from flask import current_app, flash, redirect, request, session, url_for
from flask_login import LoginManager, login_user, logout_user

from tasktracker.sessions import load_record, store_record

logger = logging.getLogger(__name__)

RETURN_TO_KEY = 'return_to'
USER_ID_KEY = '_user_id'


def is_local_path(target):
    return bool(target) and target.startswith('/') and not target.startswith('//') and '\\' not in target


class SessionIdentityResolver:
    """Maps sessions to users for Flask-Login"""

    def __init__(self, credentials):
        self.credentials = credentials

    def load_user(self, user_id):
        """Flask-Login user loader for the current request's session"""
        user = self._lookup(user_id)
        if user is None:
            logger.info('Dropping stale user id %s from session', user_id)
            session.pop(USER_ID_KEY, None)
            session.pop('_fresh', None)
        return user

    def resolve(self, sid):
        """Look up the user bound to a stored session id, if any"""
        record = load_record(sid)
        if record is None or record.is_expired():
            return None
        data = record.get_data()
        user_id = data.get(USER_ID_KEY)
        if user_id is None:
            return None
        user = self._lookup(user_id)
        if user is None:
            data.pop(USER_ID_KEY, None)
            data.pop('_fresh', None)
            store_record(sid, data, record.expires_at)
        return user

    def login(self, user):
        """Bind the user to a fresh session id and hand back the return-to target"""
        if hasattr(session, 'regenerate'):
            session.regenerate()
        session.permanent = True
        login_user(user)
        logger.info('User %s logged in', user.id)
        return self.pop_return_to()

    def logout(self):
        user_id = session.get(USER_ID_KEY)
        logout_user()
        if hasattr(session, 'destroy'):
            session.destroy()
        else:
            session.clear()
        logger.info('User %s logged out', user_id)

    def capture_return_to(self, target):
        if is_local_path(target):
            session[RETURN_TO_KEY] = target

    def pop_return_to(self):
        return session.pop(RETURN_TO_KEY, None)

    def _lookup(self, user_id):
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            return None
        return self.credentials.get(user_id)


class AuthContext:
    """Authentication collaborators for one application instance"""

    login_message = 'Please log in to access this page'

    def __init__(self, credentials, identity=None):
        self.credentials = credentials
        self.identity = identity or SessionIdentityResolver(credentials)
        self.login_manager = None

    def init_app(self, flask_app):
        login_manager = LoginManager()
        login_manager.init_app(flask_app)
        login_manager.login_view = 'auth.login'
        login_manager.user_loader(self.identity.load_user)
        login_manager.unauthorized_handler(self.handle_unauthorized)
        self.login_manager = login_manager
        flask_app.extensions['auth'] = self

    def handle_unauthorized(self):
        """Remember where the anonymous user was going, then send them to log in"""
        if request.blueprint != 'auth' and request.method == 'GET':
            target = request.full_path if request.query_string else request.path
            self.identity.capture_return_to(target)
        flash(self.login_message, 'error')
        return redirect(url_for('auth.login'))


def get_auth():
    return current_app.extensions['auth']
