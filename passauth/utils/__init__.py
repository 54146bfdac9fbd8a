# passauth/utils/__init__.py
"""Utility functions: hashing, validation and the API error envelope"""
from .security import hash_password, verify_password
from .errors import ApiError, api_response

__all__ = ['hash_password', 'verify_password', 'ApiError', 'api_response']
