"""
Input validation helper functions.
"""

import re


def validate_username(username: str) -> bool:
    """
    A username must keep at least one letter or digit once normalized,
    otherwise the synthesized login email has an empty local part.
    """
    if not username:
        return False
    return bool(re.search(r'[a-z0-9]', username.lower()))


def validate_phone(phone: str) -> bool:
    """
    Lenient international phone check.
    Accepts an optional leading +, digits, spaces, dashes and parentheses,
    with 7 to 15 digits in total.

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    if not re.match(r'^\+?[\d\s\-\(\)]+$', phone):
        return False

    digits = re.sub(r'\D', '', phone)
    return 7 <= len(digits) <= 15
