from flask.sessions import session_json_serializer

from tasktracker import db, utcnow


class SessionRecord(db.Model):
    """Server-side session data, keyed by the opaque id in the cookie"""
    __tablename__ = 'session_record'
    id = db.Column(db.Integer, primary_key=True)
    sid = db.Column(db.String(64), unique=True, nullable=False, index=True)
    data = db.Column(db.Text, nullable=False, default='{}')
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def get_data(self):
        """Parse and return session data"""
        try:
            return session_json_serializer.loads(self.data)
        except ValueError:
            return {}

    def set_data(self, data_dict):
        self.data = session_json_serializer.dumps(dict(data_dict))

    def is_expired(self, now=None):
        return self.expires_at <= (now or utcnow())

    def __repr__(self):
        return f'<SessionRecord {self.sid[:8]}: {self.expires_at}>'
