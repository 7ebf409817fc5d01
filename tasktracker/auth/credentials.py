"""
Credential store: registration and password verification.
"""
import logging
import secrets

from gevent import get_hub, monkey
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash, check_password_hash

from tasktracker import db
from tasktracker.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    ValidationError,
    store_operation,
)
from tasktracker.models import User
from tasktracker.validation import normalize_email, validate_registration

logger = logging.getLogger(__name__)


def run_blocking(func, *args, **kwargs):
    """Run CPU-bound work without stalling other greenlets.

    Under gevent (production workers) the call goes to the hub's native
    thread pool; otherwise it simply runs inline.
    """
    if monkey.is_module_patched('threading'):
        return get_hub().threadpool.apply(func, args, kwargs)
    return func(*args, **kwargs)


class CredentialStore:
    """Creates users and checks their passwords"""

    def __init__(self, hash_method='pbkdf2:sha256:600000'):
        self.hash_method = hash_method
        self._unknown_user_hash = None

    def get(self, user_id):
        with store_operation('loading user'):
            return db.session.get(User, user_id)

    def find_by_email(self, email):
        with store_operation('looking up email'):
            return db.session.execute(
                select(User).where(func.lower(User.email) == normalize_email(email))
            ).scalar_one_or_none()

    def register(self, name, email, password, confirm_password=None):
        errors = validate_registration(name, email, password, confirm_password)
        if errors:
            raise ValidationError(errors)

        email = normalize_email(email)
        if self.find_by_email(email) is not None:
            raise DuplicateEmailError()

        user = User(
            name=name.strip(),
            email=email,
            password_hash=run_blocking(generate_password_hash, password, method=self.hash_method),
        )
        with store_operation('registering user'):
            db.session.add(user)
            try:
                db.session.commit()
            except IntegrityError as exc:
                # Lost a race with a concurrent registration for the same email
                db.session.rollback()
                raise DuplicateEmailError() from exc

        logger.info('Registered user %s <%s>', user.id, user.email)
        return user

    def verify_credentials(self, email, password):
        """Return the user for a matching email/password pair.

        Unknown email and wrong password raise the same error.
        """
        user = self.find_by_email(email)
        if user is None:
            # Unknown emails cost one hash check, the same as a wrong password
            run_blocking(check_password_hash, self._dummy_hash(), password or '')
            raise InvalidCredentialsError()
        if not run_blocking(check_password_hash, user.password_hash, password or ''):
            raise InvalidCredentialsError()
        return user

    def _dummy_hash(self):
        if self._unknown_user_hash is None:
            self._unknown_user_hash = run_blocking(
                generate_password_hash, secrets.token_urlsafe(16), method=self.hash_method
            )
        return self._unknown_user_hash
