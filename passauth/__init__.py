# passauth/__init__.py
"""Passauth Authentication Service - Core Package"""
__version__ = "1.0.0"
