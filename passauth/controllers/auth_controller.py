# passauth/controllers/auth_controller.py
"""Authentication Controller for Passauth
Register, login, logout and the forgot/reset password flow.
Every step runs in order: validate, look up, mutate, respond.
"""
import logging

from flask import Blueprint, current_app, request, session
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from passauth.extensions import db, notifier
from passauth.models.user import User
from passauth.services import session_service
from passauth.services.auth_service import AuthError, AuthInvalid, AuthService
from passauth.services.reset_service import ResetService
from passauth.utils.errors import Conflict, InternalError, InvalidInput, NotFound, api_response
from passauth.utils.validation import (email_check, first_failure, password_check,
                                       phone_check, required_check)

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def _payload():
    """Request fields from a JSON body, falling back to form data"""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _validate(*checks):
    failure = first_failure(checks)
    if failure is not None:
        raise InvalidInput(failure.message)


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create a user and open a session for it in the same request"""
    data = _payload()
    email = data.get('email')
    password = data.get('password')
    phone_number = data.get('phoneNumber')
    role = data.get('role')

    _validate(
        required_check(email=email, password=password, phoneNumber=phone_number),
        email_check(email),
        password_check(password),
        phone_check(phone_number, current_app.config['PHONE_NUMBER_PATTERN'],
                    current_app.config['PHONE_NUMBER_MESSAGE'])
    )

    if User.find_by_email(email):
        raise Conflict('User already exists.')

    user = User.create(email, password, phone_number, role=role,
                       rounds=current_app.config['BCRYPT_ROUNDS'])
    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        db.session.rollback()
        raise Conflict('User already exists.')
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error while creating user')
        raise InternalError('Error while creating user.')

    session_service.bind(session, user.id)
    if not login_user(user):
        raise InternalError('Failed to establish login session.')

    logger.info(f"User {user.id} registered with role {user.role}")
    return api_response(201, user.to_dict(), 'User registered successfully.')


@auth_bp.route('/login', methods=['POST'])
def login():
    """Verify credentials, bind a session and mirror the user id into a cookie"""
    data = _payload()
    email = data.get('email')
    password = data.get('password')

    _validate(
        required_check(email=email, password=password),
        email_check(email),
        password_check(password)
    )

    outcome = AuthService.verify(email, password)
    if isinstance(outcome, AuthError):
        raise InternalError('Authentication failed. Please try again.')
    if isinstance(outcome, AuthInvalid):
        logger.warning('Failed login attempt')
        return api_response(401, {}, outcome.reason)

    user = outcome.user
    session_service.bind(session, user.id)

    # Re-read: the account may have been deleted since verification
    sanitized = User.query.filter_by(id=user.id).first()
    if sanitized is None:
        session_service.destroy(session)
        raise NotFound('User not found.')

    if not login_user(sanitized):
        session_service.destroy(session)
        raise InternalError('Failed to establish login session.')

    response, status = api_response(200, {'user': sanitized.to_dict()}, 'Login successful')
    response.set_cookie(current_app.config['AUTH_COOKIE_NAME'], str(sanitized.id),
                        httponly=True, samesite='Strict')
    logger.info(f"User {sanitized.id} logged in")
    return response, status


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """End the current session; succeeds whether or not one existed"""
    user_id = session.get(session_service.USER_ID_KEY)
    session_service.destroy(session)
    logout_user()

    response, status = api_response(200, {}, 'User logged out successfully')
    response.delete_cookie(current_app.config['AUTH_COOKIE_NAME'], httponly=True, secure=True)
    if user_id is not None:
        logger.info(f"User {user_id} logged out")
    return response, status


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """Current user for a live session"""
    return api_response(200, {'user': current_user.to_dict()}, 'Session active')


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    """Issue a reset token and email the recovery link"""
    email = _payload().get('email')

    _validate(email_check(email))

    user = User.find_by_email(email)
    if user is None:
        raise NotFound('User with this email does not exist.')

    token = ResetService.issue(
        user,
        nbytes=current_app.config['RESET_TOKEN_BYTES'],
        ttl=current_app.config['RESET_TOKEN_TTL']
    )

    path = current_app.config['RESET_URL_PATH'].strip('/')
    reset_url = f"{request.host_url.rstrip('/')}/{path}/{token}"
    notifier.send_reset_email(user.email, reset_url)

    return api_response(200, {}, 'Password reset email sent successfully.')


@auth_bp.route('/reset-password/<token>', methods=['POST'])
def reset_password(token):
    """Replace the password using a live reset token, consuming the token"""
    new_password = _payload().get('newPassword')

    _validate(password_check(new_password, name='newPassword'))

    ResetService.consume(token, new_password, rounds=current_app.config['BCRYPT_ROUNDS'])
    return api_response(200, {}, 'Password reset successfully')
