"""
Pytest configuration and fixtures.
Tests run against an in-memory backend double, never the hosted project.
"""

import itertools
from collections import defaultdict
from datetime import datetime, timedelta

import pytest

from backend import AuthError, AuthResult, BackendClient, BackendError

ADMIN_CREDENTIALS = {'username': 'admin', 'password': 'himalayas123'}


class FakeBackend(BackendClient):
    """
    In-memory stand-in for the hosted backend.

    Tables are lists of row dicts. Inserts get a string id and a
    monotonically increasing created_at. Auth accounts are keyed by email,
    and a sign-up mirrors the server trigger by writing the profile row
    from the sign-up metadata.
    """

    def __init__(self):
        super().__init__('http://backend.test', 'test-anon-key')
        self.tables = defaultdict(list)
        self.accounts = {}
        self.uploads = {}
        self.queries = []
        self.signed_out = []
        # table -> BackendError raised on any query
        self.fail_tables = {}
        # table -> BackendError raised on writes only
        self.write_errors = {}
        self.fail_uploads = False
        self.fail_sign_out = False
        self.confirm_email = False
        self.profile_trigger = True
        # access tokens the table API rejects as expired
        self.expired_tokens = set()
        # refresh token -> account email
        self.refresh_tokens = {}
        self.refreshed = []
        self._tokens = itertools.count(1)
        self._ids = itertools.count(1)
        self._clock = datetime(2025, 1, 1)

    # ==================== Helpers ====================

    def next_id(self):
        return str(next(self._ids))

    def timestamp(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def add_row(self, table, **values):
        row = dict(values)
        row.setdefault('id', self.next_id())
        row.setdefault('created_at', self.timestamp())
        self.tables[table].append(row)
        return row

    def create_account(self, username, password='secret1', **profile):
        """Register an account directly, bypassing the HTTP routes."""
        from models.user import synthesize_email

        email = synthesize_email(username)
        user = {'id': f'user-{self.next_id()}', 'email': email}
        self.accounts[email] = dict(user, password=password)
        self.add_row('profiles', id=user['id'], username=username,
                     role=profile.pop('role', 'user'), **profile)
        return user

    # ==================== Tables ====================

    def run_query(self, query):
        self.queries.append(query)
        if query.access_token in self.expired_tokens:
            raise BackendError('JWT expired', code='PGRST301', status=401)
        if query.table in self.fail_tables:
            raise self.fail_tables[query.table]
        if query.action != 'select' and query.table in self.write_errors:
            raise self.write_errors[query.table]

        rows = self.tables[query.table]
        matched = [row for row in rows if all(
            str(row.get(column)) == str(value) for column, value in query.filters
        )]

        if query.action == 'select':
            for column, ascending in reversed(query.ordering):
                matched = sorted(matched, key=lambda r: r.get(column) or '', reverse=not ascending)
            result = [self._project(query.columns, row) for row in matched]
        elif query.action == 'insert':
            result = [self.add_row(query.table, **row) for row in query.payload]
        elif query.action == 'upsert':
            result = []
            for values in query.payload:
                existing = next((r for r in rows if r.get(query.on_conflict) == values.get(query.on_conflict)), None)
                if existing:
                    existing.update(values)
                    result.append(existing)
                else:
                    result.append(self.add_row(query.table, **values))
        elif query.action == 'update':
            for row in matched:
                row.update(query.payload)
            result = matched
        elif query.action == 'delete':
            self.tables[query.table] = [row for row in rows if row not in matched]
            result = matched
        else:
            raise ValueError(query.action)

        if query.is_single:
            return dict(result[0]) if len(result) == 1 else None
        return [dict(row) for row in result]

    def _project(self, columns, row):
        if columns.strip() == '*':
            return dict(row)
        projected = {}
        for column in (c.strip() for c in columns.split(',')):
            if column.endswith('(*)'):
                embedded = column[:-3]
                foreign_id = row.get(embedded.rstrip('s') + '_id')
                projected[embedded] = next(
                    (dict(r) for r in self.tables[embedded] if str(r.get('id')) == str(foreign_id)),
                    None
                )
            else:
                projected[column] = row.get(column)
        return projected

    # ==================== Auth ====================

    def _session_for(self, account):
        user = {'id': account['id'], 'email': account['email']}
        serial = next(self._tokens)
        refresh_token = f'refresh-{account["id"]}-{serial}'
        self.refresh_tokens[refresh_token] = account['email']
        return {
            'access_token': f'token-{account["id"]}-{serial}',
            'refresh_token': refresh_token,
            'expires_in': 3600,
            'user': user,
        }

    def sign_up(self, email, password, metadata=None):
        if email in self.accounts:
            raise AuthError('User already registered', code='user_already_exists', status=422)
        if len(password or '') < 6:
            raise AuthError('Password should be at least 6 characters.',
                            code='weak_password', status=422)

        account = {'id': f'user-{self.next_id()}', 'email': email, 'password': password}
        self.accounts[email] = account
        if self.profile_trigger:
            self.add_row('profiles', id=account['id'], role='user', **(metadata or {}))

        user = {'id': account['id'], 'email': email}
        if self.confirm_email:
            return AuthResult(user, None)
        return AuthResult(user, self._session_for(account))

    def sign_in_with_password(self, email, password):
        account = self.accounts.get(email)
        if not account or account['password'] != password:
            raise AuthError('Invalid login credentials', code='invalid_credentials', status=400)
        session = self._session_for(account)
        return AuthResult(session['user'], session)

    def refresh_session(self, refresh_token):
        self.refreshed.append(refresh_token)
        email = self.refresh_tokens.pop(refresh_token, None)
        if email is None:
            raise AuthError('Invalid Refresh Token: Refresh Token Not Found',
                            code='refresh_token_not_found', status=400)
        session = self._session_for(self.accounts[email])
        return AuthResult(session['user'], session)

    def sign_out(self, access_token):
        if self.fail_sign_out:
            raise BackendError('Network error: connection refused')
        self.signed_out.append(access_token)

    # ==================== Storage ====================

    def upload(self, bucket, path, data, content_type='application/octet-stream'):
        if self.fail_uploads:
            raise BackendError('Bucket not found', code='404', status=400)
        self.uploads[(bucket, path)] = (data, content_type)
        return path


@pytest.fixture
def backend():
    """Fresh in-memory backend."""
    return FakeBackend()


@pytest.fixture
def app(backend):
    """Create test application bound to the in-memory backend."""
    from app import create_app

    return create_app('test', backend=backend)


@pytest.fixture
def app_ctx(app):
    """Application context for calling data functions directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def signed_in_client(app, backend, client):
    """Client signed in as a customer account."""
    backend.create_account('ravi', password='secret1', full_name='Ravi Kumar', phone='+91 98765 43210')
    client.post('/login', data={'username': 'ravi', 'password': 'secret1'})
    return client


@pytest.fixture
def admin_client(client):
    """Client with the admin console unlocked."""
    client.post('/admin/login', data=ADMIN_CREDENTIALS)
    return client


@pytest.fixture
def catalog(backend):
    """Three destinations and four packages in creation order."""
    destinations = [
        backend.add_row('destinations', name='Pangong Lake', region='Ladakh', season='MAY - SEP',
                        description='High lake', image='https://img.test/pangong.jpg'),
        backend.add_row('destinations', name='Spiti Valley', region='Himachal', season='JUN - OCT',
                        description='Middle land', image='https://img.test/spiti.jpg'),
        backend.add_row('destinations', name='Kedarnath', region='Uttarakhand', season='MAY - NOV',
                        description='Temple trek', image='https://img.test/kedarnath.jpg'),
    ]
    packages = [
        backend.add_row('packages', name='Manali Escape', price='₹14,999', color='white',
                        accent='bg-white/5', features=['3 Nights / 4 Days']),
        backend.add_row('packages', name='Ladakh Expedition', price='₹34,999', color='teal',
                        accent='bg-[#4fb7b3]/10 border-[#4fb7b3]/50', features=['Bike Rental Included']),
        backend.add_row('packages', name='Char Dham Yatra', price='₹89,999', color='periwinkle',
                        accent='bg-[#637ab9]/10 border-[#637ab9]/50', features=['Luxury Stays']),
        backend.add_row('packages', name='Zanskar Trek', price='₹24,999', color='white',
                        accent='bg-white/5', features=['Frozen River']),
    ]
    return {'destinations': destinations, 'packages': packages}
