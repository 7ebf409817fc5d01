"""
Production entry point: gunicorn -c gunicorn_config.py wsgi:application

The standard library is patched before anything else imports it, so password
hashing can be pushed to gevent's thread pool.
"""
from gevent import monkey
monkey.patch_all()

from tasktracker import create_app, db  # noqa: E402
from tasktracker.scheduler import start_background_tasks  # noqa: E402

application = create_app()

with application.app_context():
    db.create_all()

# Each worker purges expired sessions; the delete is idempotent
start_background_tasks(application)
