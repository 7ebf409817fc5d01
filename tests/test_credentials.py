from types import SimpleNamespace

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from tasktracker import db
from tasktracker.auth import credentials as credentials_module
from tasktracker.auth.credentials import run_blocking
from tasktracker.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError
from tasktracker.models import User


def test_register_stores_only_a_hash(credentials):
    user = credentials.register('Alice', 'a@x.com', 'pass123')

    stored = db.session.get(User, user.id)
    assert stored.password_hash != 'pass123'
    assert 'pass123' not in stored.password_hash
    assert stored.password_hash.startswith('pbkdf2:sha256:1000$')
    assert 'password_hash' not in stored.to_dict()
    assert 'pass123' not in str(stored.to_dict())


def test_register_then_verify_scenario(credentials):
    credentials.register('Alice', 'a@x.com', 'pass123')

    assert credentials.verify_credentials('a@x.com', 'pass123').name == 'Alice'
    with pytest.raises(InvalidCredentialsError):
        credentials.verify_credentials('a@x.com', 'wrong')


def test_unknown_email_and_wrong_password_look_the_same(credentials, alice):
    with pytest.raises(InvalidCredentialsError) as unknown:
        credentials.verify_credentials('nobody@x.com', 'pass123')
    with pytest.raises(InvalidCredentialsError) as wrong:
        credentials.verify_credentials('a@x.com', 'pass124')

    assert str(unknown.value) == str(wrong.value) == 'Invalid login credentials'


def test_email_is_normalized_and_matched_case_insensitively(credentials):
    user = credentials.register('  Carol ', '  Carol@Example.COM ', 'abc123')

    assert user.name == 'Carol'
    assert user.email == 'carol@example.com'
    assert credentials.verify_credentials('CAROL@example.com', 'abc123').id == user.id


def test_duplicate_email_rejected(credentials, alice):
    with pytest.raises(DuplicateEmailError):
        credentials.register('Other Alice', 'A@X.com', 'pass456')
    assert User.query.count() == 1


@pytest.mark.parametrize('name, email, password, field', [
    ('A', 'a@x.com', 'pass123', 'name'),
    ('A' * 51, 'a@x.com', 'pass123', 'name'),
    ('Alice', 'not-an-email', 'pass123', 'email'),
    ('Alice', 'a@x', 'pass123', 'email'),
    ('Alice', 'a@x.com', 'p4ss', 'password'),
    ('Alice', 'a@x.com', 'password', 'password'),
])
def test_register_validation(credentials, name, email, password, field):
    with pytest.raises(ValidationError) as excinfo:
        credentials.register(name, email, password)

    assert field in excinfo.value.errors
    assert User.query.count() == 0


def test_register_checks_confirmation(credentials):
    with pytest.raises(ValidationError) as excinfo:
        credentials.register('Alice', 'a@x.com', 'pass123', 'pass321')
    assert excinfo.value.errors == {'confirm_password': ['Passwords do not match']}


def test_get_returns_none_for_missing_user(credentials):
    assert credentials.get(12345) is None


def test_concurrent_registration_race_reports_duplicate(credentials, alice, monkeypatch):
    # The other request's insert lands between the lookup and the commit
    monkeypatch.setattr(credentials, 'find_by_email', lambda email: None)

    with pytest.raises(DuplicateEmailError):
        credentials.register('Other Alice', 'a@x.com', 'pass456')
    assert User.query.count() == 1


def test_unknown_email_still_checks_a_hash(credentials, alice, monkeypatch):
    checked = []

    def recording_check(pwhash, password):
        checked.append(pwhash)
        return check_password_hash(pwhash, password)

    monkeypatch.setattr(credentials_module, 'check_password_hash', recording_check)

    for email in ['nobody@x.com', 'a@x.com', 'ghost@x.com']:
        with pytest.raises(InvalidCredentialsError):
            credentials.verify_credentials(email, 'wrong1')

    assert len(checked) == 3
    assert checked[0] == checked[2] != alice.password_hash
    assert checked[0].startswith('pbkdf2:sha256:1000$')


class RecordingPool:
    def __init__(self):
        self.calls = []

    def apply(self, func, args=None, kwds=None):
        self.calls.append(func)
        return func(*(args or ()), **(kwds or {}))


def test_hashing_goes_to_threadpool_under_gevent(credentials, monkeypatch):
    pool = RecordingPool()
    monkeypatch.setattr(credentials_module.monkey, 'is_module_patched', lambda name: name == 'threading')
    monkeypatch.setattr(credentials_module, 'get_hub', lambda: SimpleNamespace(threadpool=pool))

    user = credentials.register('Alice', 'a@x.com', 'pass123')
    assert credentials.verify_credentials('a@x.com', 'pass123').id == user.id
    assert pool.calls == [generate_password_hash, check_password_hash]


def test_hashing_runs_inline_without_gevent(monkeypatch):
    monkeypatch.setattr(credentials_module.monkey, 'is_module_patched', lambda name: False)
    monkeypatch.setattr(credentials_module, 'get_hub', lambda: pytest.fail('hub should not be used'))

    assert run_blocking(lambda a, b=0: a + b, 2, b=3) == 5
