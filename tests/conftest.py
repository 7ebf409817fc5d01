import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from tasktracker import create_app, db
from tasktracker.config import TestingConfig
from tasktracker.models import Task

SESSION_COOKIE = TestingConfig.SESSION_COOKIE_NAME


@pytest.fixture()
def app():
    """Fresh application with an empty in-memory database.

    No application context stays pushed, so every test client request gets
    its own context exactly as in production.
    """
    flask_app = create_app(TestingConfig)
    with flask_app.app_context():
        db.create_all()
    yield flask_app
    with flask_app.app_context():
        db.drop_all()


@pytest.fixture()
def ctx(app):
    """Application context for tests that call the stores directly"""
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture()
def break_next_commit(monkeypatch):
    """Returns a switch that makes the next database commit fail"""
    original = Session.commit

    def arm():
        state = {'armed': True}

        def commit(self):
            if state['armed']:
                state['armed'] = False
                raise OperationalError('COMMIT', {}, Exception('database is gone'))
            return original(self)

        monkeypatch.setattr(Session, 'commit', commit)

    return arm


@pytest.fixture()
def break_task_lookup(monkeypatch):
    """Returns a switch that makes loading a Task by id fail"""
    original = Session.get

    def arm():
        def get(self, entity, ident, **kwargs):
            if entity is Task:
                raise OperationalError('SELECT', {}, Exception('database is gone'))
            return original(self, entity, ident, **kwargs)

        monkeypatch.setattr(Session, 'get', get)

    return arm


@pytest.fixture()
def credentials(app, ctx):
    return app.extensions['auth'].credentials


@pytest.fixture()
def resolver(app, ctx):
    return app.extensions['auth'].identity


@pytest.fixture()
def store(app, ctx):
    return app.extensions['task_store']


@pytest.fixture()
def alice(credentials):
    return credentials.register('Alice', 'a@x.com', 'pass123')


@pytest.fixture()
def bob(credentials):
    return credentials.register('Bob', 'bob@example.com', 'secret42')


@pytest.fixture()
def client(app):
    return app.test_client()


def register(client, name='Alice', email='a@x.com', password='pass123', confirm=None):
    return client.post('/auth/register', data={
        'name': name,
        'email': email,
        'password': password,
        'confirm_password': password if confirm is None else confirm,
    })


def login(client, email='a@x.com', password='pass123'):
    return client.post('/auth/login', data={'email': email, 'password': password})


def session_id(client):
    cookie = client.get_cookie(SESSION_COOKIE)
    return cookie.value if cookie else None
