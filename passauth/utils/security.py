# passauth/utils/security.py
"""Security utilities for Passauth Authentication Service
Passwords are hashed with bcrypt; reset tokens come from the secrets module
"""
import base64
import hashlib
import secrets

import bcrypt

DEFAULT_ROUNDS = 12
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    """
    Encode password for bcrypt, which only accepts 72 bytes of input.
    Longer secrets are reduced to a base64 SHA-256 digest so no part is ignored.
    """
    encoded = password.encode('utf-8')
    if len(encoded) > BCRYPT_MAX_BYTES:
        encoded = base64.b64encode(hashlib.sha256(encoded).digest())
    return encoded


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash password using bcrypt

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash string, salt included
    """
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Verify password against stored bcrypt hash

    Args:
        password: Plain text password to verify
        stored_hash: Hash produced by hash_password

    Returns:
        True if password matches, False otherwise
    """
    if not password or not stored_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), stored_hash.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def generate_secure_token(length: int = 32) -> str:
    """
    Generate cryptographically secure random token

    Args:
        length: Number of bytes (hex-encoded, so output is 2x length)

    Returns:
        Hex-encoded secure random token
    """
    return secrets.token_hex(length)


def generate_session_id() -> str:
    return secrets.token_urlsafe(32)
