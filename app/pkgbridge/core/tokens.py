"""Allow-list validation for user-supplied tokens.

Package names and search queries end up as arguments of package manager
commands. Anything outside the allow-list is rejected, never rewritten.
"""

import re
from collections.abc import Iterable

from pkgbridge.core.errors import InvalidRequestError, UnsafeTokenError

# Alphanumeric start (no option injection), then alphanumerics and . _ + - :
_SAFE_TOKEN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._+:-]*")

MAX_TOKEN_LENGTH = 255


def is_safe_token(token: str) -> bool:
    """Check whether a token may be passed to a package manager.

    Args:
        token: Candidate package name or search query.

    Returns:
        True if the token passes the allow-list check.
    """
    if not isinstance(token, str) or not token or len(token) > MAX_TOKEN_LENGTH:
        return False
    return _SAFE_TOKEN.fullmatch(token) is not None


def validate_token(token: str, what: str = "package name") -> str:
    """Return the token unchanged if it is safe.

    Raises:
        UnsafeTokenError: If the token fails the allow-list check.
    """
    if not is_safe_token(token):
        raise UnsafeTokenError(token, what)
    return token


def validate_names(names: Iterable[str]) -> tuple[str, ...]:
    """Validate a non-empty list of package names.

    Duplicates are folded, keeping the first occurrence.

    Raises:
        InvalidRequestError: If no names were given.
        UnsafeTokenError: If any name fails the allow-list check.
    """
    if isinstance(names, str):
        msg = "Package names must be a list, not a single string"
        raise InvalidRequestError(msg)
    unique = tuple(dict.fromkeys(validate_token(name) for name in names))
    if not unique:
        msg = "At least one package name is required"
        raise InvalidRequestError(msg)
    return unique
