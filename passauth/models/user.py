"""User model for Passauth Authentication Service"""
from datetime import datetime, timezone

from flask_login import UserMixin

from passauth.extensions import db
from passauth.utils.security import hash_password, verify_password

ROLE_ADMIN = 'admin'
ROLE_USER = 'user'
ALLOWED_ROLES = (ROLE_ADMIN, ROLE_USER)


def utcnow():
    """Naive UTC timestamp, the form stored in DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_email(email):
    return email.strip().lower() if isinstance(email, str) else email


class User(UserMixin, db.Model):
    """User identity with hashed credentials and an optional pending reset token"""
    __tablename__ = 'users'
    __table_args__ = (
        db.CheckConstraint("role IN ('admin', 'user')", name='ck_users_role'),
        db.CheckConstraint(
            '(reset_token IS NULL AND token_expiration IS NULL) OR '
            '(reset_token IS NOT NULL AND token_expiration IS NOT NULL)',
            name='ck_users_reset_token_pair'
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_USER)
    phone_number = db.Column(db.String(20), nullable=False)

    # Password reset
    reset_token = db.Column(db.String(64), nullable=True, index=True)
    token_expiration = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    sessions = db.relationship('AuthSession', backref='user',
                               lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<User {self.email}>'

    @classmethod
    def create(cls, email, password, phone_number, role=None, rounds=12):
        """Build a new user with a hashed password; role falls back to 'user'"""
        return cls(
            email=normalize_email(email),
            password_hash=hash_password(password, rounds),
            role=role if role in ALLOWED_ROLES else ROLE_USER,
            phone_number=phone_number
        )

    @classmethod
    def find_by_email(cls, email):
        return cls.query.filter_by(email=normalize_email(email)).first()

    @classmethod
    def find_by_reset_token(cls, token, now=None):
        """Return the user holding a live reset token, None when absent or expired"""
        now = now or utcnow()
        return cls.query.filter(
            cls.reset_token == token,
            cls.token_expiration > now
        ).first()

    def check_password(self, password):
        return verify_password(password, self.password_hash)

    def to_dict(self):
        """Read-facing projection; never includes credentials or reset state"""
        return {
            'id': self.id,
            'email': self.email,
            'role': self.role,
            'phoneNumber': self.phone_number,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
