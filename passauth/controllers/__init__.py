# passauth/controllers/__init__.py
"""Controllers implementing the authentication workflow"""
