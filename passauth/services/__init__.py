# passauth/services/__init__.py
"""Service layer: credential verification, sessions, reset tokens and email"""
