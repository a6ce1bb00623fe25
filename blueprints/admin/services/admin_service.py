"""
Business logic for the admin console.
Gate check, session flag, and the dashboard summary.
"""

import hmac

from flask import current_app, session

from models.booking import count_by_status


def check_admin_credentials(username: str, password: str) -> bool:
    """
    Compare submitted credentials against the configured pair.

    This is a demo gate shipped with the site, not a security boundary.

    Args:
        username: Submitted username
        password: Submitted password

    Returns:
        True only for an exact match
    """
    expected_user = current_app.config.get('ADMIN_USERNAME') or ''
    expected_password = current_app.config.get('ADMIN_PASSWORD') or ''
    if not expected_user or not expected_password:
        return False

    user_ok = hmac.compare_digest((username or '').encode(), expected_user.encode())
    password_ok = hmac.compare_digest((password or '').encode(), expected_password.encode())
    return user_ok and password_ok


def admin_login() -> None:
    """Set the admin flag. It persists with the session cookie."""
    session.permanent = True
    session[current_app.config['ADMIN_SESSION_KEY']] = True


def admin_logout() -> None:
    session.pop(current_app.config['ADMIN_SESSION_KEY'], None)


def get_dashboard_summary(bookings, profiles, destinations, packages) -> dict:
    """Counts shown on the admin landing page."""
    return {
        'total_bookings': len(bookings),
        'bookings_by_status': count_by_status(bookings),
        'total_users': len(profiles),
        'total_destinations': len(destinations),
        'total_packages': len(packages),
    }
