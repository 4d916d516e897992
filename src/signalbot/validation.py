"""Syntactic checks for destinations and log redaction.

These are deliberately shallow: a phone number is ``+`` followed by
digits, and a group identifier is a short base64-ish token.  Anything
semantic is left to ``signal-cli``.
"""

from __future__ import annotations

import string

PHONE_MIN_LEN = 8
PHONE_MAX_LEN = 20
IDENTIFIER_MAX_LEN = 100

_IDENTIFIER_CHARS = frozenset(string.ascii_letters + string.digits + "-_=+/")
_MASK = "****"


def is_valid_phone_number(value: str) -> bool:
    """Return ``True`` for ``+`` followed by ASCII digits, 8-20 chars total."""
    if not PHONE_MIN_LEN <= len(value) <= PHONE_MAX_LEN:
        return False
    if not value.startswith("+"):
        return False
    return all(c in string.digits for c in value[1:])


def is_valid_identifier(value: str) -> bool:
    """Return ``True`` for a non-empty group id of allowed characters.

    Accepts the union of the standard and URL-safe base64 alphabets
    plus padding, up to 100 characters.
    """
    if not 0 < len(value) <= IDENTIFIER_MAX_LEN:
        return False
    return all(c in _IDENTIFIER_CHARS for c in value)


def mask_phone_number(value: str) -> str:
    """Redact all but the last four characters: ``+15551234567`` -> ``****4567``."""
    if len(value) <= len(_MASK):
        return _MASK
    return _MASK + value[-4:]
