"""
Hosted backend client.
Talks to the managed table API (PostgREST), the auth service (GoTrue) and the
object storage bucket over HTTPS with requests.
"""

import logging
from collections import namedtuple
from typing import Dict, Optional

import requests

from backend.errors import AuthError, BackendError
from backend.query import TableQuery

logger = logging.getLogger(__name__)

# PostgREST error code when single() matched no row
NO_ROWS_CODE = 'PGRST116'

AuthResult = namedtuple('AuthResult', ['user', 'session'])


class BackendClient:
    """
    Thin adapter over the hosted backend's REST surface.

    Args:
        url: Project base URL (https://<project>.example.co)
        key: Public (anon) API key
        timeout: Optional request timeout in seconds (None = library default)
        session: Optional requests.Session to reuse
    """

    def __init__(self, url: str, key: str, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.url = (url or '').rstrip('/')
        self.key = key or ''
        self.timeout = timeout
        self.http = session or requests.Session()

    # ==================== Tables ====================

    def table(self, name: str, access_token: Optional[str] = None) -> TableQuery:
        """Start a query against a table, optionally as a signed-in user."""
        return TableQuery(self, name, access_token=access_token)

    def build_request(self, query: TableQuery) -> Dict:
        """
        Translate a TableQuery into request arguments.

        Returns:
            Dict with method, url, params, headers and json keys
        """
        params = []
        headers = self._headers(query.access_token)
        body = None

        if query.action == 'select':
            method = 'GET'
            params.append(('select', query.columns))
        elif query.action in ('insert', 'upsert'):
            method = 'POST'
            body = query.payload
            prefer = ['return=representation']
            if query.action == 'upsert':
                prefer.append('resolution=merge-duplicates')
                params.append(('on_conflict', query.on_conflict))
            headers['Prefer'] = ','.join(prefer)
        elif query.action == 'update':
            method = 'PATCH'
            body = query.payload
            headers['Prefer'] = 'return=representation'
        elif query.action == 'delete':
            method = 'DELETE'
            headers['Prefer'] = 'return=representation'
        else:
            raise ValueError(f'Unknown query action: {query.action}')

        for column, value in query.filters:
            params.append((column, f'eq.{_format_value(value)}'))

        if query.ordering:
            params.append(('order', ','.join(
                f'{column}.{"asc" if ascending else "desc"}'
                for column, ascending in query.ordering
            )))

        if query.is_single:
            headers['Accept'] = 'application/vnd.pgrst.object+json'

        return {
            'method': method,
            'url': f'{self.url}/rest/v1/{query.table}',
            'params': params,
            'headers': headers,
            'json': body,
        }

    def run_query(self, query: TableQuery):
        """Execute a TableQuery and decode the response."""
        request_args = self.build_request(query)
        response = self._send(**request_args)

        if response.status_code >= 400:
            error = _error_from_response(response, BackendError)
            if query.is_single and error.code == NO_ROWS_CODE:
                return None
            raise error

        if not response.content:
            return None if query.is_single else []
        return response.json()

    # ==================== Auth ====================

    def sign_up(self, email: str, password: str, metadata: Optional[Dict] = None) -> AuthResult:
        """Create an account. Session is None when email confirmation is on."""
        response = self._send(
            'POST', f'{self.url}/auth/v1/signup',
            headers=self._headers(),
            json={'email': email, 'password': password, 'data': metadata or {}}
        )
        if response.status_code >= 400:
            raise _error_from_response(response, AuthError)
        return _auth_result(response.json())

    def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password."""
        response = self._send(
            'POST', f'{self.url}/auth/v1/token',
            params=[('grant_type', 'password')],
            headers=self._headers(),
            json={'email': email, 'password': password}
        )
        if response.status_code >= 400:
            raise _error_from_response(response, AuthError)
        return _auth_result(response.json())

    def refresh_session(self, refresh_token: str) -> AuthResult:
        """Exchange a refresh token for a new session."""
        response = self._send(
            'POST', f'{self.url}/auth/v1/token',
            params=[('grant_type', 'refresh_token')],
            headers=self._headers(),
            json={'refresh_token': refresh_token}
        )
        if response.status_code >= 400:
            raise _error_from_response(response, AuthError)
        return _auth_result(response.json())

    def sign_out(self, access_token: str) -> None:
        """Revoke the session server-side."""
        response = self._send(
            'POST', f'{self.url}/auth/v1/logout',
            headers=self._headers(access_token)
        )
        if response.status_code >= 400:
            raise _error_from_response(response, AuthError)

    # ==================== Storage ====================

    def upload(self, bucket: str, path: str, data: bytes,
               content_type: str = 'application/octet-stream') -> str:
        """Upload an object. Returns the stored path."""
        headers = self._headers()
        headers['Content-Type'] = content_type
        headers['x-upsert'] = 'false'
        response = self._send(
            'POST', f'{self.url}/storage/v1/object/{bucket}/{path}',
            headers=headers, data=data
        )
        if response.status_code >= 400:
            raise _error_from_response(response, BackendError)
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        return f'{self.url}/storage/v1/object/public/{bucket}/{path}'

    # ==================== Internals ====================

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        return {
            'apikey': self.key,
            'Authorization': f'Bearer {access_token or self.key}',
        }

    def _send(self, method, url, **kwargs):
        try:
            return self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f'Backend request failed: {method} {url}: {e}')
            raise BackendError(f'Network error: {e}') from e


def _format_value(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    return str(value)


def _error_from_response(response, error_class):
    """Build an error from a backend error body, whatever its shape."""
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    message = (payload.get('msg') or payload.get('error_description')
               or payload.get('message') or payload.get('error')
               or f'Backend request failed with status {response.status_code}')
    code = payload.get('code') or payload.get('error_code')
    return error_class(
        message,
        code=str(code) if code is not None else None,
        details=payload.get('details'),
        status=response.status_code
    )


def _auth_result(payload: Dict) -> AuthResult:
    """
    Normalize auth responses.

    Token responses carry access_token + user; a sign-up awaiting email
    confirmation returns the bare user object.
    """
    if payload.get('access_token'):
        session = {
            'access_token': payload['access_token'],
            'refresh_token': payload.get('refresh_token'),
            'expires_in': payload.get('expires_in'),
            'expires_at': payload.get('expires_at'),
            'user': payload.get('user') or {},
        }
        return AuthResult(session['user'], session)
    if isinstance(payload.get('user'), dict):
        return AuthResult(payload['user'], None)
    if payload.get('id'):
        return AuthResult(payload, None)
    return AuthResult(None, None)
