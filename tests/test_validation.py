"""Validator tests"""
import pytest

from passauth.utils.validation import (INVALID_FORMAT, MISSING_FIELD, PASSWORD_MESSAGE,
                                       PHONE_MESSAGE, WEAK_PASSWORD, Check, email_check, first_failure,
                                       password_check, phone_check, required_check,
                                       validate_email, validate_password,
                                       validate_phone_number, validate_required_fields)


def test_required_fields_all_present():
    assert validate_required_fields(email='a@b.com', password='x') is None


def test_required_fields_names_missing_in_order():
    message = validate_required_fields(email='', password='Abcd1!', phoneNumber=None)
    assert message == 'Missing required fields: email, phoneNumber'


def test_required_fields_whitespace_is_missing():
    assert validate_required_fields(email='   ') == 'Missing required fields: email'


@pytest.mark.parametrize('email', ['a@b.com', 'first.last@example.co.uk', 'x+tag@d.io'])
def test_valid_emails(email):
    assert validate_email(email)


@pytest.mark.parametrize('email', ['', 'plain', 'a@b', '@b.com', 'a b@c.com', None, 42])
def test_invalid_emails(email):
    assert not validate_email(email)


@pytest.mark.parametrize('password', ['Abcd1!', 'Newp1!', 'Str0ng#Password'])
def test_strong_passwords(password):
    assert validate_password(password)


@pytest.mark.parametrize('password,reason', [
    ('Ab1!', 'too short'),
    ('abcd1!', 'no uppercase'),
    ('ABCD1!', 'no lowercase'),
    ('Abcde!', 'no digit'),
    ('Abcde1', 'no special character'),
    ('Abc 12', 'space is not a special character'),
    (None, 'absent'),
])
def test_weak_passwords(password, reason):
    assert not validate_password(password), reason


def test_phone_number_format():
    assert validate_phone_number('+919876543210')
    assert not validate_phone_number('9876543210')
    assert not validate_phone_number('+91987654321')
    assert not validate_phone_number('+9198765432100')
    assert not validate_phone_number('+449876543210')


def test_phone_number_custom_pattern():
    assert validate_phone_number('+14155550100', pattern=r'^\+1\d{10}$')


def test_phone_check_reports_configured_message():
    check = phone_check('9876543210', r'^\+1\d{10}$', 'Use +1 and 10 digits.')
    assert first_failure([check]) == ('phoneNumber', INVALID_FORMAT, 'Use +1 and 10 digits.')
    assert first_failure([phone_check('9876543210')]).message == PHONE_MESSAGE


def test_first_failure_short_circuits_in_declaration_order():
    """Only the first failing check is reported and later ones are never evaluated"""
    evaluated = []

    def never():
        evaluated.append('late')
        return False

    failure = first_failure([
        required_check(email='a@b.com'),
        email_check('broken'),
        Check('late', never, INVALID_FORMAT, 'late'),
    ])
    assert failure.name == 'email'
    assert failure.kind == INVALID_FORMAT
    assert failure.message == 'Invalid email format.'
    assert evaluated == []


def test_first_failure_reports_missing_fields():
    failure = first_failure([required_check(email=None, password='x'), email_check(None)])
    assert failure.kind == MISSING_FIELD
    assert failure.message == 'Missing required fields: email'


def test_weak_password_failure():
    failure = first_failure([password_check('abc', name='newPassword')])
    assert failure == ('newPassword', WEAK_PASSWORD, PASSWORD_MESSAGE)


def test_all_checks_pass():
    assert first_failure([
        required_check(email='a@b.com', password='Abcd1!', phoneNumber='+919876543210'),
        email_check('a@b.com'),
        password_check('Abcd1!'),
        phone_check('+919876543210'),
    ]) is None
