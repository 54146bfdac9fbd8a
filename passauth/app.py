# passauth/app.py
"""Application factory for Passauth Authentication Service"""
import logging
import logging.config

import click
from flask import Flask, session
from werkzeug.exceptions import HTTPException

from passauth.config import config
from passauth.extensions import db, login_manager, notifier
from passauth.models.auth_session import AuthSession
from passauth.models.user import User
from passauth.services import session_service
from passauth.services.reset_service import ResetService
from passauth.utils.errors import ApiError, Unauthorized

logger = logging.getLogger(__name__)


def configure_logging(level='INFO'):
    """Console logging for the passauth package"""
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
                'stream': 'ext://sys.stdout'
            }
        },
        'loggers': {
            'passauth': {
                'level': level,
                'handlers': ['console'],
                'propagate': False
            }
        }
    })


def create_app(config_name='default'):
    """Create and configure Flask application"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    for key in app.config.get('REQUIRED_SETTINGS', ()):
        if not app.config.get(key):
            raise RuntimeError(f'{key} must be set for the {config_name} configuration')

    configure_logging(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    notifier.init_app(app)

    # Register blueprints
    from passauth.controllers.auth_controller import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    register_error_handlers(app)
    register_commands(app)

    # Create database tables
    with app.app_context():
        db.create_all()

    logger.info(f"Passauth started with {config_name} configuration")
    return app


@login_manager.user_loader
def load_user(user_id):
    """Resolve the user only while the server-side session record is live"""
    record = session_service.current(session)
    if record is None or str(record.user_id) != str(user_id):
        return None
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    error = Unauthorized('Authentication required.')
    return error.to_dict(), error.status_code


def register_error_handlers(app):
    """Render every failure in the JSON error envelope"""
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            db.session.rollback()
        return error.to_dict(), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return {'statusCode': error.code, 'message': error.description, 'success': False}, error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        db.session.rollback()
        logger.exception('Unhandled error')
        return {'statusCode': 500, 'message': 'Internal server error', 'success': False}, 500


def register_commands(app):
    @app.cli.command('purge-expired')
    def purge_expired():
        """Delete expired sessions and clear expired reset tokens."""
        sessions = AuthSession.cleanup_expired()
        tokens = ResetService.cleanup_expired()
        click.echo(f'Removed {sessions} expired sessions, cleared {tokens} expired reset tokens')
