"""
Tests for the session gateway: sign-up, sign-in, sign-out and listeners.
"""

import time

import pytest
from flask import session as flask_session

from backend import AuthError, BackendError
from models.user import (PROFILE_DEFAULTS, SESSION_KEY, SessionGateway, User, get_user_by_id,
                         synthesize_email)


@pytest.fixture
def store():
    return {}


@pytest.fixture
def gateway(app_ctx, backend, store):
    return SessionGateway(backend, store)


class TestSynthesizeEmail:
    """Tests for username -> login email."""

    def test_deterministic(self):
        assert synthesize_email('ravi') == synthesize_email('ravi')

    def test_strips_case_and_punctuation(self):
        assert synthesize_email('Ravi.K') == 'ravik@unexplore.com'
        assert synthesize_email('ravi_k') == 'ravik@unexplore.com'
        assert synthesize_email('RAVI K!') == 'ravik@unexplore.com'

    def test_custom_domain(self):
        assert synthesize_email('asha', 'example.org') == 'asha@example.org'


class TestSignUp:
    """Tests for account creation."""

    def test_sign_up_with_session_signs_in(self, gateway, backend, store):
        user = gateway.sign_up('asha', 'secret1', full_name='Asha Rao', phone='9876543210')

        assert store[SESSION_KEY]['user']['id'] == user['id']
        profile = gateway.current_profile()
        assert profile['username'] == 'asha'
        assert profile['full_name'] == 'Asha Rao'
        assert profile['role'] == 'user'
        assert profile['email'] == 'asha@unexplore.com'

    def test_sign_up_notifies_listeners(self, gateway):
        seen = []
        gateway.on_session_change(seen.append)
        gateway.sign_up('asha', 'secret1', full_name='Asha Rao')

        assert seen[0] is None
        assert seen[-1]['username'] == 'asha'

    def test_sign_up_awaiting_confirmation(self, gateway, backend, store):
        backend.confirm_email = True
        seen = []
        gateway.on_session_change(seen.append)

        user = gateway.sign_up('asha', 'secret1')

        assert user['email'] == 'asha@unexplore.com'
        assert SESSION_KEY not in store
        assert seen == [None]

    def test_duplicate_username_fails(self, gateway, backend):
        backend.create_account('asha')
        with pytest.raises(AuthError):
            gateway.sign_up('Asha', 'secret1')

    def test_weak_password_fails(self, gateway, store):
        with pytest.raises(AuthError):
            gateway.sign_up('asha', '123')
        assert SESSION_KEY not in store

    def test_row_level_security_rejection_is_ignored(self, gateway, backend):
        backend.write_errors['profiles'] = BackendError(
            'new row violates row-level security policy', code='42501', status=403
        )
        gateway.sign_up('asha', 'secret1', full_name='Asha Rao')

        # The server-side trigger row is still there
        assert gateway.current_profile()['full_name'] == 'Asha Rao'

    def test_other_profile_errors_do_not_fail_sign_up(self, gateway, backend):
        backend.write_errors['profiles'] = BackendError('timeout', code='57014')
        user = gateway.sign_up('asha', 'secret1')
        assert user['id']

    def test_missing_profile_falls_back_to_defaults(self, gateway, backend):
        backend.profile_trigger = False
        backend.write_errors['profiles'] = BackendError('denied', code='42501')

        gateway.sign_up('asha', 'secret1')
        profile = gateway.current_profile()

        assert profile['username'] == PROFILE_DEFAULTS['username']
        assert profile['role'] == 'user'
        assert profile['full_name'] is None


class TestSignIn:
    """Tests for password sign-in."""

    def test_sign_in_resolves_profile(self, gateway, backend, store):
        backend.create_account('ravi', password='secret1', full_name='Ravi Kumar')

        profile = gateway.sign_in('Ravi', 'secret1')

        assert profile['full_name'] == 'Ravi Kumar'
        assert gateway.access_token() == store[SESSION_KEY]['access_token']

    def test_wrong_password(self, gateway, backend, store):
        backend.create_account('ravi', password='secret1')
        with pytest.raises(AuthError):
            gateway.sign_in('ravi', 'wrong-password')
        assert SESSION_KEY not in store

    def test_unknown_user(self, gateway):
        with pytest.raises(AuthError):
            gateway.sign_in('nobody', 'secret1')

    def test_profile_read_failure_uses_defaults(self, gateway, backend):
        backend.create_account('ravi', password='secret1', full_name='Ravi Kumar')
        backend.fail_tables['profiles'] = BackendError('unavailable')

        profile = gateway.sign_in('ravi', 'secret1')

        assert profile['username'] == 'User'
        assert profile['role'] == 'user'


class TestSignOut:
    """Tests for sign-out and session listeners."""

    def test_sign_out_clears_session(self, gateway, backend, store):
        backend.create_account('ravi', password='secret1')
        gateway.sign_in('ravi', 'secret1')
        token = gateway.access_token()

        gateway.sign_out()

        assert SESSION_KEY not in store
        assert backend.signed_out == [token]
        assert gateway.current_profile() is None

    def test_remote_failure_still_clears(self, gateway, backend, store):
        backend.create_account('ravi', password='secret1')
        gateway.sign_in('ravi', 'secret1')
        backend.fail_sign_out = True

        gateway.sign_out()

        assert SESSION_KEY not in store

    def test_listener_sees_sign_in_and_sign_out(self, gateway, backend):
        backend.create_account('ravi', password='secret1')
        seen = []
        gateway.on_session_change(seen.append)

        gateway.sign_in('ravi', 'secret1')
        gateway.sign_out()

        assert seen[0] is None
        assert seen[1]['username'] == 'ravi'
        assert seen[2] is None

    def test_unsubscribe(self, gateway, backend):
        backend.create_account('ravi', password='secret1')
        seen = []
        unsubscribe = gateway.on_session_change(seen.append)
        unsubscribe()

        gateway.sign_in('ravi', 'secret1')

        assert seen == [None]


class TestUser:
    """Tests for the Flask-Login wrapper."""

    def test_user_properties(self):
        user = User({'id': 'u1', 'username': 'ravi', 'full_name': None, 'role': 'admin'})

        assert user.is_authenticated is True
        assert user.is_admin is True
        assert user.display_name == 'ravi'
        assert user.get_id() == 'u1'


def expire(store, backend):
    """Age the stored session past its expiry and have the backend reject its token."""
    backend.expired_tokens.add(store[SESSION_KEY]['access_token'])
    store[SESSION_KEY] = dict(store[SESSION_KEY], expires_at=1)


class TestSessionRefresh:
    """Tests for expired access tokens."""

    def test_sign_in_records_expiry(self, gateway, backend, store):
        backend.create_account('ravi', password='secret1')
        gateway.sign_in('ravi', 'secret1')

        assert store[SESSION_KEY]['expires_at'] > time.time()

    def test_fresh_session_is_not_refreshed(self, gateway, backend):
        backend.create_account('ravi', password='secret1')
        gateway.sign_in('ravi', 'secret1')

        gateway.current_session()
        assert backend.refreshed == []

    def test_expired_session_is_refreshed(self, gateway, backend, store):
        backend.create_account('ravi', password='secret1', full_name='Ravi Kumar')
        gateway.sign_in('ravi', 'secret1')
        old_token = gateway.access_token()
        expire(store, backend)

        profile = gateway.current_profile()

        assert len(backend.refreshed) == 1
        assert gateway.access_token() != old_token
        assert store[SESSION_KEY]['expires_at'] > time.time()
        assert profile['full_name'] == 'Ravi Kumar'

    def test_rejected_refresh_signs_out(self, gateway, backend, store):
        backend.create_account('ravi', password='secret1')
        gateway.sign_in('ravi', 'secret1')
        seen = []
        gateway.on_session_change(seen.append)
        expire(store, backend)
        backend.refresh_tokens.clear()

        assert gateway.current_session() is None
        assert SESSION_KEY not in store
        assert seen[-1] is None

    def test_network_failure_keeps_session(self, gateway, backend, store, monkeypatch):
        backend.create_account('ravi', password='secret1')
        gateway.sign_in('ravi', 'secret1')
        store[SESSION_KEY] = dict(store[SESSION_KEY], expires_at=1)

        def unreachable(refresh_token):
            raise BackendError('Network error: connection refused')

        monkeypatch.setattr(backend, 'refresh_session', unreachable)

        assert gateway.current_session()['expires_at'] == 1
        assert SESSION_KEY in store

    def test_user_loader_after_rejected_refresh(self, app, backend):
        user = backend.create_account('ravi', password='secret1')
        with app.test_request_context():
            gateway = SessionGateway(backend, flask_session)
            gateway.sign_in('ravi', 'secret1')
            expire(flask_session, backend)
            backend.refresh_tokens.clear()

            assert get_user_by_id(user['id']) is None
