"""
Backend connection management.
One client per application, created at startup from configuration.
"""

from flask import current_app

from backend.client import BackendClient


def init_backend(app, client=None):
    """
    Attach a backend client to the app.

    Args:
        app: Flask application
        client: Optional prebuilt client (tests pass an in-memory double)

    Returns:
        The attached client
    """
    if client is None:
        client = BackendClient(
            app.config.get('BACKEND_URL'),
            app.config.get('BACKEND_ANON_KEY'),
            timeout=app.config.get('BACKEND_TIMEOUT')
        )
    app.extensions['backend'] = client
    return client


def get_backend():
    """
    Get the backend client for the current app.

    Returns:
        BackendClient attached by init_backend
    """
    return current_app.extensions['backend']
