"""
Validation predicates for subscriber form fields.

Kept separate from the value objects in models.py so the rules can be
checked (and tested) without constructing anything. Both functions are
total: they return a bool for any input and never raise.
"""

import regex
from email_validator import EmailNotValidError, validate_email

MAX_NAME_GRAPHEMES = 256
FORBIDDEN_NAME_CHARACTERS = frozenset('/()"<>\\{}')

# Extended grapheme cluster, so "é" written as e + combining accent counts once
_GRAPHEME = regex.compile(r'\X')


def grapheme_count(text: str) -> int:
    """Count user-perceived characters (extended grapheme clusters)."""
    return len(_GRAPHEME.findall(text))


def is_valid_name(name: str) -> bool:
    """
    Check whether a raw subscriber name is acceptable.

    A name is rejected when it is empty or whitespace-only, longer than
    256 graphemes, or contains any of / ( ) " < > \\ { }.

    Args:
        name: Raw name as submitted

    Returns:
        True if the name passes every rule
    """
    if not isinstance(name, str):
        return False

    is_empty_or_whitespace = not name.strip()
    is_too_long = grapheme_count(name) > MAX_NAME_GRAPHEMES
    contains_forbidden_character = any(c in FORBIDDEN_NAME_CHARACTERS for c in name)

    return not (is_empty_or_whitespace or is_too_long or contains_forbidden_character)


def is_valid_email(email: str) -> bool:
    """
    Check whether a raw string is a syntactically valid email address.

    Deliverability (DNS) checks are disabled: this only checks the
    address grammar, so it stays pure and works offline.

    Args:
        email: Raw email as submitted

    Returns:
        True if the address is well formed (local-part@domain)
    """
    if not isinstance(email, str) or not email.strip():
        return False

    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False

    return True
