"""
User model and session gateway.
Handles sign-up/sign-in/sign-out against the hosted auth service, resolves
sessions into profile records, and wraps profiles for Flask-Login.
"""

import logging
import re
import time
from typing import Callable, Dict, List, Optional

from flask import current_app

from backend import AuthError, BackendError, get_backend

logger = logging.getLogger(__name__)

PROFILES_TABLE = 'profiles'
SESSION_KEY = 'auth_session'
DEFAULT_EMAIL_DOMAIN = 'unexplore.com'

# RLS rejected the client-side profile write: the server trigger owns it
RLS_VIOLATION_CODE = '42501'

# Refresh this many seconds before the access token actually expires
EXPIRY_MARGIN_SECONDS = 60

PROFILE_DEFAULTS = {
    'username': 'User',
    'full_name': None,
    'address': None,
    'phone': None,
    'role': 'user',
}


class User:
    """
    User class for Flask-Login integration.
    Wraps a resolved profile dictionary with required Flask-Login properties.
    """

    def __init__(self, profile):
        """
        Initialize User from a resolved profile.

        Args:
            profile: Dictionary from resolve_profile()
        """
        self.id = profile['id']
        self.email = profile.get('email', '')
        self.username = profile.get('username') or PROFILE_DEFAULTS['username']
        self.full_name = profile.get('full_name')
        self.address = profile.get('address')
        self.phone = profile.get('phone')
        self.role = profile.get('role') or PROFILE_DEFAULTS['role']

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def display_name(self):
        return self.full_name or self.username

    def get_id(self):
        """Required by Flask-Login."""
        return str(self.id)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'email': self.email,
            'username': self.username,
            'full_name': self.full_name,
            'address': self.address,
            'phone': self.phone,
            'role': self.role,
        }


def synthesize_email(username: str, domain: Optional[str] = None) -> str:
    """
    Derive the placeholder email the auth service needs from a username.

    Lower-cases the username and drops everything outside [a-z0-9], so
    'Ravi.K' and 'ravik' map to the same address.

    Args:
        username: Username as typed
        domain: Email domain (default: unexplore.com)

    Returns:
        Email address string
    """
    local_part = re.sub(r'[^a-z0-9]', '', (username or '').lower())
    return f'{local_part}@{domain or DEFAULT_EMAIL_DOMAIN}'


def _email_domain():
    return current_app.config.get('AUTH_EMAIL_DOMAIN', DEFAULT_EMAIL_DOMAIN)


# ==================== Session Gateway ====================

class SessionGateway:
    """
    Sign-up / sign-in / sign-out plus session change notifications.

    The raw auth session is persisted in ``store`` (the Flask session), which
    is the only state kept across requests besides the admin flag.

    Args:
        backend: BackendClient
        store: Mutable mapping holding the serialized session
    """

    def __init__(self, backend, store):
        self.backend = backend
        self.store = store
        self._listeners: List[Callable] = []

    def sign_up(self, username: str, password: str, full_name: str = '',
                address: str = '', phone: str = '') -> Dict:
        """
        Create an account for a username.

        Returns:
            The auth user dict

        Raises:
            AuthError: Invalid or duplicate credentials, or no user created
        """
        metadata = {
            'username': username,
            'full_name': full_name,
            'address': address,
            'phone': phone,
        }
        result = self.backend.sign_up(
            synthesize_email(username, _email_domain()), password, metadata
        )
        if not result.user:
            raise AuthError('No user created')

        if result.session:
            self._store_session(result.session)
            self._create_profile(result.user['id'], result.session['access_token'], metadata)
            self._notify(self.current_profile())

        return result.user

    def sign_in(self, username: str, password: str) -> Dict:
        """
        Authenticate a username and password.

        Returns:
            The resolved profile

        Raises:
            AuthError: Invalid credentials
        """
        result = self.backend.sign_in_with_password(
            synthesize_email(username, _email_domain()), password
        )
        if not result.session:
            raise AuthError('Authentication failed. Please check your credentials.')

        self._store_session(result.session)
        profile = self.resolve_profile(result.session)
        self._notify(profile)
        return profile

    def sign_out(self) -> None:
        """Clear the session. Remote revocation is best effort."""
        session = self.store.get(SESSION_KEY)
        if session:
            try:
                self.backend.sign_out(session['access_token'])
            except BackendError as e:
                logger.warning(f'Remote sign-out failed: {e}')
        self.store.pop(SESSION_KEY, None)
        self._notify(None)

    def current_session(self) -> Optional[Dict]:
        """
        The stored session, refreshed first if its access token has expired.

        A rejected refresh token signs the user out and returns None. A
        transport failure keeps the old session so a later request can retry.
        """
        session = self.store.get(SESSION_KEY)
        if not session or not self._is_expired(session):
            return session

        try:
            result = self.backend.refresh_session(session.get('refresh_token') or '')
        except AuthError as e:
            logger.info(f'Session refresh rejected, signing out: {e}')
            self.store.pop(SESSION_KEY, None)
            self._notify(None)
            return None
        except BackendError as e:
            logger.warning(f'Session refresh failed: {e}')
            return session

        if not result.session:
            self.store.pop(SESSION_KEY, None)
            self._notify(None)
            return None

        refreshed = dict(result.session)
        if not (refreshed.get('user') or {}).get('id'):
            refreshed['user'] = session.get('user')
        self._store_session(refreshed)
        return self.store[SESSION_KEY]

    def access_token(self) -> Optional[str]:
        session = self.current_session()
        return session['access_token'] if session else None

    def current_profile(self) -> Optional[Dict]:
        session = self.current_session()
        return self.resolve_profile(session) if session else None

    def on_session_change(self, callback: Callable) -> Callable:
        """
        Register a session listener.

        The callback receives the resolved profile (or None) immediately and
        again on every sign-in, sign-up with session, and sign-out.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(callback)
        callback(self.current_profile())

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def resolve_profile(self, session: Dict) -> Dict:
        """
        Turn a raw session into a profile record via a secondary read.

        Missing profile rows or read failures fall back to PROFILE_DEFAULTS.
        """
        user = session.get('user') or {}
        user_id = user.get('id')

        row = None
        try:
            row = (self.backend.table(PROFILES_TABLE, access_token=session.get('access_token'))
                   .select('*').eq('id', user_id).single().execute())
        except BackendError as e:
            logger.warning(f'Profile lookup failed for {user_id}: {e}')

        row = row or {}
        profile = {'id': user_id, 'email': user.get('email') or ''}
        for field, default in PROFILE_DEFAULTS.items():
            profile[field] = row.get(field) or default
        return profile

    # -------------------- internals --------------------

    def _store_session(self, session: Dict) -> None:
        user = session.get('user') or {}
        expires_at = session.get('expires_at')
        if not expires_at and session.get('expires_in'):
            expires_at = int(time.time()) + int(session['expires_in'])
        self.store[SESSION_KEY] = {
            'access_token': session['access_token'],
            'refresh_token': session.get('refresh_token'),
            'expires_at': expires_at,
            'user': {'id': user.get('id'), 'email': user.get('email')},
        }

    @staticmethod
    def _is_expired(session: Dict) -> bool:
        expires_at = session.get('expires_at')
        return bool(expires_at) and time.time() >= expires_at - EXPIRY_MARGIN_SECONDS

    def _create_profile(self, user_id: str, access_token: str, metadata: Dict) -> None:
        """Client-side profile fallback; the server trigger usually wins."""
        try:
            self.backend.table(PROFILES_TABLE, access_token=access_token).upsert(
                dict(metadata, id=user_id, role='user'), on_conflict='id'
            ).execute()
        except BackendError as e:
            if e.code != RLS_VIOLATION_CODE:
                logger.warning(f'Profile client-side upsert warning: {e}')

    def _notify(self, profile) -> None:
        for listener in list(self._listeners):
            listener(profile)


def get_session_gateway():
    """Session gateway bound to the current request's session."""
    from flask import g, session

    if 'session_gateway' not in g:
        g.session_gateway = SessionGateway(get_backend(), session)
    return g.session_gateway


def get_user_by_id(user_id: str) -> Optional[User]:
    """
    Load the signed-in user for Flask-Login.

    Only resolves when the stored session belongs to user_id.
    """
    gateway = get_session_gateway()
    session = gateway.current_session()
    if not session or (session.get('user') or {}).get('id') != user_id:
        return None
    return User(gateway.resolve_profile(session))


# ==================== Admin profile operations ====================

def get_all_profiles() -> List[Dict]:
    """
    Get all profiles, newest first.

    Returns:
        List of profile dicts, empty on backend failure
    """
    try:
        return (get_backend().table(PROFILES_TABLE).select('*')
                .order('created_at', ascending=False).execute())
    except BackendError as e:
        logger.warning(f'Error fetching users: {e}')
        return []


def update_profile(profile_id: str, full_name: str = None, address: str = None,
                   phone: str = None) -> bool:
    """
    Update the mutable profile fields.

    Returns:
        True if the backend accepted the update
    """
    updates = {'full_name': full_name, 'address': address, 'phone': phone}
    try:
        get_backend().table(PROFILES_TABLE).update(updates).eq('id', profile_id).execute()
        return True
    except BackendError as e:
        logger.error(f'Error updating profile {profile_id}: {e}')
        return False


def update_password(profile_id: str, new_password: str) -> bool:
    """
    Reset another user's password.

    Always returns False: this needs the backend's service-role key, which
    the site does not hold.
    """
    logger.info(f'Password reset requested for user {profile_id}; not applied')
    return False
