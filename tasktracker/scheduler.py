import atexit
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError

from tasktracker.sessions import purge_expired_sessions

logger = logging.getLogger(__name__)

# Global scheduler
scheduler = BackgroundScheduler()


def purge_sessions_job(app):
    """Background task that deletes expired session records"""
    with app.app_context():
        try:
            removed = purge_expired_sessions()
        except SQLAlchemyError:
            logger.exception('Error purging expired sessions')
            return 0
        if removed:
            logger.info('Purged %d expired sessions', removed)
        return removed


def start_background_tasks(app):
    """Start all background tasks"""
    if not app.config['SCHEDULER_ENABLED']:
        logger.info('Background tasks disabled')
        return

    scheduler.add_job(
        func=purge_sessions_job,
        args=[app],
        trigger=IntervalTrigger(minutes=app.config['SESSION_PURGE_INTERVAL_MINUTES']),
        id='purge_sessions',
        name='Purge expired sessions',
        replace_existing=True
    )

    if not scheduler.running:
        scheduler.start()
        logger.info('Background tasks started')

        # Shut down scheduler on app exit
        atexit.register(lambda: scheduler.shutdown(wait=False))
