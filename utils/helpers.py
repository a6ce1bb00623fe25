"""
Miscellaneous utility helper functions.
"""

from datetime import date, datetime


def format_date(value, format_str: str = '%d %b %Y') -> str:
    """
    Format a date for display.

    Args:
        value: date/datetime or ISO string (YYYY-MM-DD or full timestamp)
        format_str: Output format

    Returns:
        Formatted date string or the original value if unparseable
    """
    if not value:
        return ''
    if isinstance(value, (date, datetime)):
        return value.strftime(format_str)
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00')).strftime(format_str)
    except ValueError:
        return str(value)


def status_badge_class(status: str) -> str:
    """CSS class for a booking status badge."""
    return {
        'pending': 'badge-pending',
        'confirmed': 'badge-confirmed',
        'completed': 'badge-completed',
        'cancelled': 'badge-cancelled',
    }.get(status, 'badge-pending')
