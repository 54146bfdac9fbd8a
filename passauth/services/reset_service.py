"""Password reset token lifecycle for Passauth"""
import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from passauth.extensions import db
from passauth.models.user import User, utcnow
from passauth.utils.errors import InternalError, InvalidOrExpired
from passauth.utils.security import generate_secure_token, hash_password

logger = logging.getLogger(__name__)

MAX_TOKEN_ATTEMPTS = 10


class ResetService:
    """Issues and consumes single-use password reset tokens"""

    @staticmethod
    def _unused_token(nbytes, now):
        # Short tokens can collide; never hand out one another user holds live
        for _ in range(MAX_TOKEN_ATTEMPTS):
            token = generate_secure_token(nbytes)
            if User.find_by_reset_token(token, now) is None:
                return token
        raise InternalError('Could not allocate a reset token.')

    @staticmethod
    def issue(user, nbytes=3, ttl=timedelta(hours=1)):
        """
        Attach a fresh reset token to user, replacing any pending one

        Returns:
            The token string
        """
        now = utcnow()
        try:
            token = ResetService._unused_token(nbytes, now)
            user.reset_token = token
            user.token_expiration = now + ttl
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to store reset token for user {user.id}")
            raise InternalError('Failed to create password reset token.')

        logger.info(f"Reset token issued for user {user.id}, expires {user.token_expiration.isoformat()}")
        return token

    @staticmethod
    def consume(token, new_password, rounds=12):
        """
        Set a new password using a live reset token

        The password write and the token clearing happen in one conditional
        UPDATE, so a token that was consumed concurrently matches no row.

        Raises:
            InvalidOrExpired: token unknown, already used or past expiration
        """
        now = utcnow()
        user = User.find_by_reset_token(token, now)
        if user is None:
            raise InvalidOrExpired()

        new_hash = hash_password(new_password, rounds)
        try:
            updated = User.query.filter(
                User.id == user.id,
                User.reset_token == token,
                User.token_expiration > now
            ).update({
                User.password_hash: new_hash,
                User.reset_token: None,
                User.token_expiration: None,
                User.updated_at: now
            }, synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to reset password for user {user.id}")
            raise InternalError('Failed to reset password.')

        if updated != 1:
            raise InvalidOrExpired()

        logger.info(f"Password reset completed for user {user.id}")
        return user

    @staticmethod
    def cleanup_expired(now=None):
        """Clear reset tokens past their expiration, returning how many were cleared"""
        now = now or utcnow()
        cleared = User.query.filter(
            User.reset_token.isnot(None),
            User.token_expiration <= now
        ).update({
            User.reset_token: None,
            User.token_expiration: None
        }, synchronize_session=False)
        db.session.commit()
        return cleared
