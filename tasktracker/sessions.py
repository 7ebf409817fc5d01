"""
Server-side sessions stored in the database.

The cookie only carries an opaque session id. Logging out deletes the record,
so a copied cookie stops working the moment the logout response is sent.
"""
import logging
import secrets

from flask.sessions import SessionInterface, SessionMixin
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import CallbackDict

from tasktracker import db, utcnow
from tasktracker.models import SessionRecord

logger = logging.getLogger(__name__)


def new_session_id():
    return secrets.token_urlsafe(32)


class ServerSideSession(CallbackDict, SessionMixin):
    """Session dict that remembers its id and whether it must be rewritten"""

    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True
        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid or new_session_id()
        self.new = new
        self.modified = False
        self.destroyed = False
        self.stale_sids = []

    def regenerate(self):
        """Move the data to a fresh id; the old record is dropped on save"""
        if not self.new:
            self.stale_sids.append(self.sid)
        self.sid = new_session_id()
        self.new = True
        self.modified = True

    def destroy(self):
        """Wipe the data and invalidate the record for good"""
        self.clear()
        if not self.new:
            self.stale_sids.append(self.sid)
        self.destroyed = True
        self.modified = True


class DatabaseSessionInterface(SessionInterface):
    """Flask session interface backed by the session_record table"""

    def open_session(self, app, request):
        sid = request.cookies.get(self.get_cookie_name(app))
        if not sid:
            return ServerSideSession(new=True)

        record = load_record(sid)
        if record is None:
            return ServerSideSession(new=True)
        if record.is_expired():
            # Expiry is noticed lazily; the caller simply starts anonymous again
            logger.debug('Session %s expired at %s', sid[:8], record.expires_at)
            discard_records([sid])
            return ServerSideSession(new=True)
        return ServerSideSession(record.get_data(), sid=sid)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)

        response.vary.add('Cookie')

        if session.stale_sids:
            discard_records(session.stale_sids)
            session.stale_sids = []

        if session.destroyed or (not session and session.modified):
            discard_records([session.sid])
            response.delete_cookie(
                name, domain=domain, path=path, secure=secure,
                samesite=samesite, httponly=httponly
            )
            return

        if not session:
            return

        if not self.should_set_cookie(app, session):
            return

        # Every save slides the inactivity window forward
        store_record(session.sid, session, utcnow() + app.permanent_session_lifetime)
        response.set_cookie(
            name,
            session.sid,
            expires=self.get_expiration_time(app, session),
            httponly=httponly,
            domain=domain,
            path=path,
            secure=secure,
            samesite=samesite,
        )


def load_record(sid):
    return db.session.execute(
        select(SessionRecord).filter_by(sid=sid)
    ).scalar_one_or_none()


def store_record(sid, data, expires_at):
    record = load_record(sid)
    if record is None:
        record = SessionRecord(sid=sid)
        db.session.add(record)
    record.set_data(data)
    record.expires_at = expires_at
    _commit('saving session')


def discard_records(sids):
    db.session.execute(delete(SessionRecord).where(SessionRecord.sid.in_(sids)))
    _commit('discarding session')


def purge_expired_sessions(now=None):
    """Delete every session record past its expiry; returns how many went"""
    result = db.session.execute(
        delete(SessionRecord).where(SessionRecord.expires_at <= (now or utcnow()))
    )
    _commit('purging sessions')
    return result.rowcount


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Session store failure while %s', action)
        raise
