import logging

from flask import render_template, redirect, url_for, flash
from flask_login import current_user

from tasktracker.auth import bp
from tasktracker.auth.guard import login_required, anonymous_required
from tasktracker.auth.identity import get_auth
from tasktracker.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    StoreUnavailable,
    ValidationError,
)
from tasktracker.user_forms import RegistrationForm, LoginForm

logger = logging.getLogger(__name__)


@bp.route('/register', methods=['GET', 'POST'])
@anonymous_required
def register():
    """Create an account and log straight in"""
    form = RegistrationForm()
    if not form.validate_on_submit():
        status = 400 if form.is_submitted() else 200
        return render_template('auth/register.html', form=form), status

    auth = get_auth()
    try:
        user = auth.credentials.register(
            form.name.data,
            form.email.data,
            form.password.data,
            form.confirm_password.data
        )
    except ValidationError as e:
        for name, messages in e.errors.items():
            field = getattr(form, name)
            field.errors = list(field.errors) + messages
        return render_template('auth/register.html', form=form), 400
    except DuplicateEmailError as e:
        flash(str(e), 'error')
        return redirect(url_for('auth.register'))
    except StoreUnavailable:
        flash('Registration failed. Please try again.', 'error')
        return redirect(url_for('auth.register'))

    target = auth.identity.login(user)
    flash(f'Welcome to Task Tracker, {user.name}!', 'success')
    return redirect(target or url_for('main.tasks'))


@bp.route('/login', methods=['GET', 'POST'])
@anonymous_required
def login():
    """Check credentials and return the user where they were headed"""
    form = LoginForm()
    if not form.validate_on_submit():
        status = 400 if form.is_submitted() else 200
        return render_template('auth/login.html', form=form), status

    auth = get_auth()
    try:
        user = auth.credentials.verify_credentials(form.email.data, form.password.data)
    except InvalidCredentialsError as e:
        logger.info('Failed login for %s', form.email.data)
        flash(str(e), 'error')
        return redirect(url_for('auth.login'))
    except StoreUnavailable:
        flash('An error occurred during login', 'error')
        return redirect(url_for('auth.login'))

    target = auth.identity.login(user)
    flash(f'Welcome back, {user.name}!', 'success')
    return redirect(target or url_for('main.tasks'))


@bp.route('/logout')
@login_required
def logout():
    """End the session; the record is gone before this response is sent"""
    name = current_user.name
    get_auth().identity.logout()
    logger.debug('Logged out %s', name)
    return redirect(url_for('main.index', loggedOut='true'))
