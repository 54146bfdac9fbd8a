# passauth/models/auth_session.py
"""Server-side session records
The signed Flask session cookie only carries the session id; the record here
decides whether that id is still live.
"""
from passauth.extensions import db
from passauth.models.user import utcnow


class AuthSession(db.Model):
    """Authenticated context bound to one user until logout or expiry"""
    __tablename__ = 'auth_sessions'

    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def __repr__(self):
        return f'<AuthSession user_id={self.user_id} expires_at={self.expires_at}>'

    @classmethod
    def find_active(cls, session_id, now=None):
        if not session_id:
            return None
        return cls.query.filter(
            cls.id == session_id,
            cls.expires_at > (now or utcnow())
        ).first()

    @classmethod
    def cleanup_expired(cls, now=None):
        """Delete expired session records, returning how many were removed"""
        deleted = cls.query.filter(cls.expires_at <= (now or utcnow())).delete(
            synchronize_session=False)
        db.session.commit()
        return deleted
