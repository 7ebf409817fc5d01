#!/usr/bin/env python
"""
Script to add users to the database
"""
import getpass
import sys
import os

# Add the parent directory to the path to ensure imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tasktracker import create_app  # noqa: E402
from tasktracker.auth.identity import get_auth  # noqa: E402
from tasktracker.errors import DuplicateEmailError, ValidationError  # noqa: E402


def prompt_and_register(flask_app):
    """Ask for the account details and register them; returns the user or None"""
    with flask_app.app_context():
        print("Add User to Task Tracker")
        print("=" * 40)

        name = input("Enter name: ").strip()
        email = input("Enter email: ").strip()
        password = getpass.getpass("Enter password: ")
        confirm = getpass.getpass("Confirm password: ")

        try:
            user = get_auth().credentials.register(name, email, password, confirm)
        except ValidationError as e:
            for field, messages in e.errors.items():
                for message in messages:
                    print(f"{field}: {message}")
            return None
        except DuplicateEmailError as e:
            print(f"Error: {e}")
            return None

        print(f"\n✓ User '{user.email}' created successfully!")
        return user


if __name__ == '__main__':
    if prompt_and_register(create_app()) is None:
        sys.exit(1)
