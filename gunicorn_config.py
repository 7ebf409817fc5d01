"""
Gunicorn settings for the task tracker (gevent workers, see wsgi.py)
"""
import multiprocessing
import os


def _env_int(name, default):
    return int(os.environ.get(name, default))


bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')

workers = _env_int('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1)
worker_class = 'gevent'
worker_connections = _env_int('GUNICORN_WORKER_CONNECTIONS', 1000)
timeout = _env_int('GUNICORN_TIMEOUT', 30)
graceful_timeout = _env_int('GUNICORN_GRACEFUL_TIMEOUT', 30)
keepalive = 2

# Same stdout stream and level as the application logger
accesslog = os.environ.get('GUNICORN_ACCESS_LOG', '-')
errorlog = os.environ.get('GUNICORN_ERROR_LOG', '-')
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(t)s "%(r)s" %(s)s %(b)s %(D)sus'

proc_name = 'tasktracker'
pidfile = os.environ.get('GUNICORN_PIDFILE')
user = os.environ.get('GUNICORN_USER')
group = os.environ.get('GUNICORN_GROUP')
