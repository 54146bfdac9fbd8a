"""Authentication service for Passauth
Credential verification returns a tagged outcome instead of raising, so the
login workflow can tell store failures from bad credentials.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from passauth.models.user import User
from passauth.utils.security import generate_secure_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid login credentials.'

# Hashes checked against when the email is unknown, keyed by cost factor
_dummy_hashes = {}


@dataclass(frozen=True)
class AuthError:
    """Verification could not run (store failure)"""
    error: Exception


@dataclass(frozen=True)
class AuthInvalid:
    """Email unknown or password wrong; reason is safe to show to the caller"""
    reason: str = INVALID_CREDENTIALS


@dataclass(frozen=True)
class AuthSuccess:
    user: User


def _dummy_hash(rounds):
    if rounds not in _dummy_hashes:
        _dummy_hashes[rounds] = hash_password(generate_secure_token(16), rounds)
    return _dummy_hashes[rounds]


class AuthService:
    """Handles credential verification"""

    @staticmethod
    def verify(email: str, password: str):
        """
        Verify email/password against the stored bcrypt hash

        Returns:
            AuthError, AuthInvalid or AuthSuccess
        """
        try:
            user: Optional[User] = User.find_by_email(email)
        except SQLAlchemyError as e:
            logger.error(f"Credential lookup failed: {e}")
            return AuthError(e)

        # Same reason and the same bcrypt work for unknown email and wrong password
        if user is None:
            verify_password(password, _dummy_hash(current_app.config['BCRYPT_ROUNDS']))
            return AuthInvalid()
        if not user.check_password(password):
            return AuthInvalid()

        return AuthSuccess(user)
