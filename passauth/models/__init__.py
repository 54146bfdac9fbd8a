# passauth/models/__init__.py
"""Database models for Passauth Authentication Service"""
from .user import User
from .auth_session import AuthSession

__all__ = ['User', 'AuthSession']
