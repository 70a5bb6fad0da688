"""Credential policy — syntactic checks run before any hashing.

Learn: These are deliberately simple. They reject obviously-bad input
before we pay ~100ms of Argon2 work, not to be RFC 5322 compliant.
Exotic-but-valid addresses (quoted local parts, dotless domains) are
rejected on purpose.

Both checks also reject strings that can't be encoded as UTF-8 (lone
surrogates from JSON "\\ud800" escapes), since neither Argon2 nor the
database can store them.
"""

# Inclusive bounds: a 3-char and a 254-char email are both accepted.
# 254 is the longest address that fits in an SMTP path (RFC 5321).
EMAIL_MIN_LENGTH = 3
EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 8


def is_utf8_encodable(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_email(email: str) -> bool:
    """Return True if email looks like local@domain.tld."""
    if not EMAIL_MIN_LENGTH <= len(email) <= EMAIL_MAX_LENGTH:
        return False
    if any(ch.isspace() for ch in email):
        return False
    if not is_utf8_encodable(email):
        return False
    if email.count("@") != 1:
        return False
    local, domain = email.split("@")
    if not local or not domain:
        return False
    return "." in domain


def validate_password(password: str) -> bool:
    """Return True if password has 8+ chars with an ASCII letter and digit.

    No upper bound and no special-character requirement.
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        return False
    if not is_utf8_encodable(password):
        return False
    has_alpha = any(ch.isascii() and ch.isalpha() for ch in password)
    has_digit = any(ch.isascii() and ch.isdigit() for ch in password)
    return has_alpha and has_digit
