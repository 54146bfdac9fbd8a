# passauth/services/session_service.py
"""Session binding for Passauth

The Flask session is passed in explicitly. Binding writes a server-side
AuthSession record and stores its id in the signed session cookie;
destroying removes both.
"""
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from passauth.extensions import db
from passauth.models.auth_session import AuthSession
from passauth.models.user import utcnow
from passauth.utils.errors import InternalError, NotFound
from passauth.utils.security import generate_session_id

logger = logging.getLogger(__name__)

SESSION_ID_KEY = 'sid'
USER_ID_KEY = 'user_id'


def bind(sess, user_id):
    """
    Establish a fresh session for user_id

    Any session already carried by the request is discarded first so an
    identifier issued before authentication is never reused after it.

    Args:
        sess: The request's Flask session
        user_id: Identifier of the authenticated user

    Returns:
        The new AuthSession record

    Raises:
        NotFound: user_id no longer exists
        InternalError: the session record could not be persisted
    """
    now = utcnow()
    record = AuthSession(
        id=generate_session_id(),
        user_id=user_id,
        created_at=now,
        expires_at=now + current_app.permanent_session_lifetime
    )
    previous = sess.get(SESSION_ID_KEY)

    try:
        if previous:
            AuthSession.query.filter_by(id=previous).delete(synchronize_session=False)
        db.session.add(record)
        db.session.commit()
    except IntegrityError:
        # Account deleted after its credentials were checked
        db.session.rollback()
        logger.warning(f"Session bind for missing user {user_id}")
        raise NotFound('User not found.')
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(f"Failed to bind session for user {user_id}")
        raise InternalError('Failed to establish session.')

    sess.clear()
    sess[SESSION_ID_KEY] = record.id
    sess[USER_ID_KEY] = user_id
    sess.permanent = True
    return record


def current(sess):
    """Return the live AuthSession for this request, or None"""
    return AuthSession.find_active(sess.get(SESSION_ID_KEY))


def destroy(sess):
    """
    Destroy the request's session; a request without one is a no-op

    Raises:
        InternalError: the session record could not be removed
    """
    session_id = sess.get(SESSION_ID_KEY)
    if session_id:
        try:
            AuthSession.query.filter_by(id=session_id).delete(synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception('Session destruction error')
            raise InternalError('Failed to log out')
    sess.clear()
