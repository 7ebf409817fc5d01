#!/usr/bin/env python
"""
Initialize database tables and optionally create a first user
"""
import sys
import os

# Add the parent directory to the path to ensure imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tasktracker import create_app, db  # noqa: E402
from tasktracker.models import User  # noqa: E402

flask_app = create_app()

with flask_app.app_context():
    # Create all tables
    db.create_all()
    print("Tables created.")

    if User.query.first() is None:
        answer = input("No users found. Create one now? (y/n) [n]: ").strip().lower()
        if answer in ('y', 'yes'):
            from add_user import prompt_and_register
            prompt_and_register(flask_app)
    else:
        print("Database already initialized. Users exist.")
