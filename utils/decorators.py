"""
Route decorators for the admin console gate.
"""

from functools import wraps
from flask import current_app, flash, redirect, session, url_for
from flask_login import login_required


def is_admin_session() -> bool:
    """True when the admin flag is set in the browser session."""
    return session.get(current_app.config['ADMIN_SESSION_KEY']) is True


def admin_required(func):
    """
    Decorator to require the admin console flag.

    Usage:
        @admin_bp.route('/bookings')
        @admin_required
        def bookings():
            ...

    The flag is a demo gate, not a security boundary.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not is_admin_session():
            flash('Admin login required', 'warning')
            return redirect(url_for('admin.login'))
        return func(*args, **kwargs)
    return wrapper


# Re-export login_required for convenience
__all__ = ['login_required', 'admin_required', 'is_admin_session']
