# passauth/config.py
"""Configuration for Passauth Authentication Service
Values are read from the environment, with a local .env file honoured when present
"""
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration with secure defaults"""
    # Security settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.urandom(32).hex()

    # Session configuration
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = timedelta(hours=1)

    # Cookie mirroring the bound user id after login
    AUTH_COOKIE_NAME = 'session_cookie'

    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///passauth.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Password hashing
    BCRYPT_ROUNDS = 12

    # Validation
    PHONE_NUMBER_PATTERN = r'^\+91\d{10}$'
    # Shown when PHONE_NUMBER_PATTERN does not match
    PHONE_NUMBER_MESSAGE = 'Phone number must be in the format +91 followed by 10 digits.'

    # Password reset
    RESET_TOKEN_BYTES = 3  # 6 hex characters
    RESET_TOKEN_TTL = timedelta(hours=1)
    RESET_URL_PATH = '/verifyEmail/'

    # Outgoing mail
    SMTP_SERVER = os.environ.get('SMTP_SERVER', 'smtp.gmail.com')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', '587'))
    SENDER_EMAIL = os.environ.get('SENDER_EMAIL')
    SENDER_PASSWORD = os.environ.get('SENDER_PASSWORD')
    MAIL_SUPPRESS_SEND = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    # Allow HTTP in dev
    SESSION_COOKIE_SECURE = False
    # Opt in to keep reset emails in the outbox instead of sending
    MAIL_SUPPRESS_SEND = os.environ.get('MAIL_SUPPRESS_SEND', 'false').lower() == 'true'


class ProductionConfig(Config):
    """Production configuration with enhanced security"""
    DEBUG = False
    TESTING = False

    # Checked in create_app, a missing value refuses to start
    SECRET_KEY = os.environ.get('SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')

    REQUIRED_SETTINGS = ('SECRET_KEY', 'SQLALCHEMY_DATABASE_URI')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True

    # Use in-memory database for tests
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    SECRET_KEY = 'testing-secret-key'
    SESSION_COOKIE_SECURE = False

    # Faster hashing for tests
    BCRYPT_ROUNDS = 4

    # Reset emails are captured in the notifier outbox
    MAIL_SUPPRESS_SEND = True

    LOG_LEVEL = 'WARNING'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
