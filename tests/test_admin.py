from werkzeug.test import EnvironBuilder
from flask import Request

from bakery.extensions import cache
from bakery.utils.auth import SessionStore, keys_match, verify_admin_key

ADMIN_KEY = 'test-admin-key'


def _request(**kwargs):
    return Request(EnvironBuilder(**kwargs).get_environ())


def test_keys_match_is_strict():
    assert keys_match('secret', 'secret')
    assert not keys_match('secreT', 'secret')
    assert not keys_match('', 'secret')
    assert not keys_match('secret', None)
    assert not keys_match(None, 'secret')


def test_session_store_expires_tokens(app):
    now = [1000.0]
    store = SessionStore(cache, ttl=60, clock=lambda: now[0])
    token = store.issue()
    assert store.is_valid(token)

    now[0] += 61
    assert not store.is_valid(token)
    assert not store.is_valid(None)


def test_session_store_revoke(app):
    store = app.extensions['admin_sessions']
    token = store.issue()
    store.revoke(token)
    assert not store.is_valid(token)


def test_verify_admin_key_sources(app):
    sessions = app.extensions['admin_sessions']
    assert verify_admin_key(_request(headers={'X-Admin-Key': ADMIN_KEY}), ADMIN_KEY, sessions)
    assert verify_admin_key(_request(query_string={'key': ADMIN_KEY}), ADMIN_KEY, sessions)
    assert not verify_admin_key(_request(headers={'X-Admin-Key': 'nope'}), ADMIN_KEY, sessions)
    assert not verify_admin_key(_request(), ADMIN_KEY, sessions)

    token = sessions.issue()
    cookie_request = _request(headers={'Cookie': f'admin_session={token}'})
    assert verify_admin_key(cookie_request, ADMIN_KEY, sessions)


def test_verify_denies_everything_without_secret(app):
    sessions = app.extensions['admin_sessions']
    assert not verify_admin_key(_request(headers={'X-Admin-Key': ''}), None, sessions)
    assert not verify_admin_key(_request(headers={'X-Admin-Key': 'anything'}), '', sessions)


def test_verify_endpoint_issues_cookie_session(client):
    resp = client.post('/api/admin/verify', json={'key': ADMIN_KEY})
    assert resp.status_code == 200
    assert resp.get_json() == {'success': True, 'message': 'Authentication successful'}
    set_cookie = resp.headers['Set-Cookie']
    assert 'admin_session=' in set_cookie
    assert 'HttpOnly' in set_cookie
    assert 'SameSite=Strict' in set_cookie

    status = client.get('/api/admin/verify').get_json()
    assert status == {'success': True, 'authenticated': True}

    # Cookie 会话可以直接调用管理接口
    created = client.post('/api/categories', json={'name': 'Cakes'})
    assert created.status_code == 201


def test_logout_revokes_session(client):
    client.post('/api/admin/verify', json={'key': ADMIN_KEY})
    resp = client.delete('/api/admin/verify')
    assert resp.status_code == 200

    assert client.get('/api/admin/verify').get_json()['authenticated'] is False
    assert client.post('/api/categories', json={'name': 'Cakes'}).status_code == 401


def test_verify_rejects_missing_and_wrong_keys(client):
    resp = client.post('/api/admin/verify', json={})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Admin key is required'

    resp = client.post('/api/admin/verify', json={'key': 'wrong'})
    assert resp.status_code == 401
    assert resp.get_json() == {'success': False, 'error': 'Invalid admin key'}


def test_verify_is_rate_limited(client):
    for _ in range(5):
        assert client.post('/api/admin/verify', json={'key': 'wrong'}).status_code == 401

    resp = client.post('/api/admin/verify', json={'key': ADMIN_KEY})
    assert resp.status_code == 429
    body = resp.get_json()
    assert body['error'] == 'Too many attempts. Please try again later.'
    assert body['retryAfter'] == 900


def test_mutations_require_admin(client):
    resp = client.post('/api/categories', json={'name': 'Cakes'})
    assert resp.status_code == 401
    assert resp.get_json() == {'success': False, 'error': 'Unauthorized'}
