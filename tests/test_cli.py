"""purge-expired command tests"""
from datetime import timedelta

from passauth.extensions import db
from passauth.models.auth_session import AuthSession
from passauth.models.user import User, utcnow


def test_purge_expired(app):
    with app.app_context():
        now = utcnow()
        user = User.create('a@b.com', 'Abcd1!', '+919876543210', rounds=4)
        user.reset_token = 'abc123'
        user.token_expiration = now - timedelta(minutes=1)
        db.session.add(user)
        db.session.commit()
        db.session.add_all([
            AuthSession(id='old', user_id=user.id, expires_at=now - timedelta(hours=1)),
            AuthSession(id='new', user_id=user.id, expires_at=now + timedelta(hours=1)),
        ])
        db.session.commit()

    result = app.test_cli_runner().invoke(args=['purge-expired'])
    assert result.exit_code == 0
    assert 'Removed 1 expired sessions, cleared 1 expired reset tokens' in result.output

    with app.app_context():
        assert AuthSession.query.count() == 1
        user = User.find_by_email('a@b.com')
        assert user.reset_token is None
        assert user.token_expiration is None
