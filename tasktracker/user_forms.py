from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, EmailField
from wtforms.validators import DataRequired, Length, EqualTo, Regexp

from tasktracker.validation import (
    NAME_MIN_LENGTH,
    NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    EMAIL_PATTERN,
    PASSWORD_MIN_LENGTH,
)


def _strip(value):
    return value.strip() if value else value


def _normalize_email(value):
    return value.strip().lower() if value else value


class RegistrationForm(FlaskForm):
    """Form for creating an account"""
    name = StringField('Name', filters=[_strip], validators=[
        DataRequired(message='Please provide a name'),
        Length(min=NAME_MIN_LENGTH, max=NAME_MAX_LENGTH,
               message=f'Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters')
    ])
    email = EmailField('Email', filters=[_normalize_email], validators=[
        DataRequired(message='Please provide a valid email'),
        Length(max=EMAIL_MAX_LENGTH, message='Please provide a valid email'),
        Regexp(EMAIL_PATTERN, message='Please provide a valid email')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Please provide a password'),
        Length(min=PASSWORD_MIN_LENGTH,
               message=f'Password must be at least {PASSWORD_MIN_LENGTH} characters long'),
        Regexp(r'.*\d', message='Password must contain at least one number')
    ])
    confirm_password = PasswordField('Confirm Password', validators=[
        DataRequired(message='Please confirm your password'),
        EqualTo('password', message='Passwords do not match')
    ])


class LoginForm(FlaskForm):
    """Form for signing in"""
    email = EmailField('Email', filters=[_normalize_email], validators=[
        DataRequired(message='Please provide a valid email'),
        Regexp(EMAIL_PATTERN, message='Please provide a valid email')
    ])
    password = PasswordField('Password', validators=[DataRequired(message='Password is required')])
