"""Pytest fixtures for Passauth tests"""
import pytest

from passauth.app import create_app
from passauth.extensions import db

VALID_USER = {
    'email': 'a@b.com',
    'password': 'Abcd1!',
    'phoneNumber': '+919876543210'
}


@pytest.fixture
def app():
    app = create_app('testing')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Application context for tests that touch the database directly"""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_user(client):
    """POST a registration, valid by default; keyword arguments override fields"""
    def _register(**overrides):
        payload = dict(VALID_USER, **overrides)
        return client.post('/auth/register', json=payload)
    return _register


def set_cookie_headers(response, name):
    return [c for c in response.headers.getlist('Set-Cookie') if c.startswith(f'{name}=')]
