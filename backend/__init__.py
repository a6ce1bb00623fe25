"""
Hosted backend package for UNEXPLORE.

This package provides access to the managed backend service:
- client: REST client for tables, auth and storage
- query: chainable table query builder
- errors: BackendError / AuthError
- connection: per-app client (init_backend, get_backend)
- seed: fallback catalog content
"""

from backend.errors import BackendError, AuthError
from backend.query import TableQuery
from backend.client import BackendClient, AuthResult
from backend.connection import init_backend, get_backend
from backend.seed import FALLBACK_DESTINATIONS, FALLBACK_PACKAGES, seed_catalog

__all__ = [
    'BackendError',
    'AuthError',
    'TableQuery',
    'BackendClient',
    'AuthResult',
    'init_backend',
    'get_backend',
    'FALLBACK_DESTINATIONS',
    'FALLBACK_PACKAGES',
    'seed_catalog',
]
