"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os
from datetime import timedelta


def _float_or_none(value):
    return float(value) if value else None


class Config:
    """Base configuration class with common settings."""

    # Secret key for session management and CSRF protection
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Hosted backend connection
    BACKEND_URL = os.environ.get('BACKEND_URL') or 'http://localhost:54321'
    BACKEND_ANON_KEY = os.environ.get('BACKEND_ANON_KEY') or ''
    BACKEND_TIMEOUT = _float_or_none(os.environ.get('BACKEND_TIMEOUT'))
    STORAGE_BUCKET = os.environ.get('STORAGE_BUCKET') or 'destination-images'

    # Synthesized login emails: <username>@AUTH_EMAIL_DOMAIN
    AUTH_EMAIL_DOMAIN = 'unexplore.com'

    # Admin console gate (demo placeholder, not a security boundary)
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME') or 'admin'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'himalayas123'
    ADMIN_SESSION_KEY = 'unexplore_admin_session'

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # CSRF token expires after 1 hour
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    PERMANENT_SESSION_LIFETIME = timedelta(
        days=int(os.environ.get('SESSION_LIFETIME_DAYS', 365))
    )

    # Image uploads
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 8 * 1024 * 1024))  # 8MB
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'webp', 'gif'}

    # Landing page "view more" step
    PACKAGES_PAGE_SIZE = 3

    # Application settings
    APP_NAME = 'UNEXPLORE'
    APP_VERSION = '1.0.0'
    CONTACT_EMAIL = 'unexplorehimalayas@gmail.com'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False
    TEMPLATES_AUTO_RELOAD = True
    SESSION_COOKIE_SECURE = False
    WTF_CSRF_SSL_STRICT = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', 'true').lower() == 'true'
    WTF_CSRF_SSL_STRICT = SESSION_COOKIE_SECURE

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY

    # URL scheme preference (follows SESSION_COOKIE_SECURE setting)
    PREFERRED_URL_SCHEME = 'https' if SESSION_COOKIE_SECURE else 'http'

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('BACKEND_URL'):
            raise ValueError("BACKEND_URL environment variable must be set in production")
        if not os.environ.get('BACKEND_ANON_KEY'):
            raise ValueError("BACKEND_ANON_KEY environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    WTF_CSRF_ENABLED = False  # Disable CSRF for tests
    BACKEND_URL = 'http://backend.test'
    BACKEND_ANON_KEY = 'test-anon-key'
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'himalayas123'
    SECRET_KEY = 'test-secret-key'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
