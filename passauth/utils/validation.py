# passauth/utils/validation.py
"""Input validation for the authentication endpoints

Each rule is a named predicate. Rules are checked in order and the first
failing one is reported, so callers surface exactly one message per request.
"""
import re
from collections import namedtuple

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
DEFAULT_PHONE_PATTERN = r'^\+91\d{10}$'
MIN_PASSWORD_LENGTH = 6

# Failure kinds
MISSING_FIELD = 'MissingField'
INVALID_FORMAT = 'InvalidFormat'
WEAK_PASSWORD = 'WeakPassword'

EMAIL_MESSAGE = 'Invalid email format.'
PASSWORD_MESSAGE = ('Password must be at least 6 characters long, include uppercase '
                    'and lowercase letters, a number, and a special character.')
PHONE_MESSAGE = 'Phone number must be in the format +91 followed by 10 digits.'

Check = namedtuple('Check', ['name', 'predicate', 'kind', 'message'])
ValidationFailure = namedtuple('ValidationFailure', ['name', 'kind', 'message'])


def _is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(**fields):
    """Return the names of fields that are absent or blank, in call order"""
    return [name for name, value in fields.items() if _is_blank(value)]


def validate_required_fields(**fields):
    """
    Check that every given field carries a value

    Returns:
        None when all are present, otherwise a message naming the missing ones
    """
    missing = missing_fields(**fields)
    if not missing:
        return None
    return f"Missing required fields: {', '.join(missing)}"


def validate_email(email) -> bool:
    return isinstance(email, str) and bool(EMAIL_PATTERN.match(email.strip()))


def validate_password(password) -> bool:
    """Length >= 6 with an uppercase, a lowercase, a digit and a special character"""
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return False
    return (
        re.search(r'[A-Z]', password) is not None
        and re.search(r'[a-z]', password) is not None
        and re.search(r'\d', password) is not None
        and re.search(r'[^A-Za-z0-9\s]', password) is not None
    )


def validate_phone_number(phone_number, pattern=DEFAULT_PHONE_PATTERN) -> bool:
    return isinstance(phone_number, str) and re.fullmatch(pattern, phone_number) is not None


def required_check(**fields):
    """Build a check covering presence of all given fields"""
    message = validate_required_fields(**fields)
    return Check('required', lambda: message is None, MISSING_FIELD, message)


def email_check(email):
    return Check('email', lambda: validate_email(email), INVALID_FORMAT, EMAIL_MESSAGE)


def password_check(password, name='password'):
    return Check(name, lambda: validate_password(password), WEAK_PASSWORD, PASSWORD_MESSAGE)


def phone_check(phone_number, pattern=DEFAULT_PHONE_PATTERN, message=PHONE_MESSAGE):
    return Check('phoneNumber', lambda: validate_phone_number(phone_number, pattern),
                 INVALID_FORMAT, message)


def first_failure(checks):
    """
    Evaluate checks in declaration order, stopping at the first failure

    Args:
        checks: Iterable of Check tuples

    Returns:
        ValidationFailure for the first failing check, or None if all pass
    """
    for check in checks:
        if not check.predicate():
            return ValidationFailure(check.name, check.kind, check.message)
    return None
