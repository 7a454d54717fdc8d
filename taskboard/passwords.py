"""Salted, adaptive password hashing on top of werkzeug.security."""
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import HashFormatError


def hash_password(plaintext):
    # werkzeug picks a fresh salt on every call
    return generate_password_hash(plaintext)


def verify_password(plaintext, hashed):
    """Return True when ``plaintext`` matches ``hashed``.

    A wrong password is just False; a stored value that is not a
    ``method$salt$hash`` string raises HashFormatError.
    """
    if not isinstance(hashed, str) or hashed.count("$") < 2:
        raise HashFormatError("malformed password hash")
    method, salt, hashval = hashed.split("$", 2)
    if not method or not salt or not hashval:
        raise HashFormatError("malformed password hash")
    try:
        return check_password_hash(hashed, plaintext)
    except ValueError as e:
        # unknown method or bad cost parameters
        raise HashFormatError(str(e)) from e
