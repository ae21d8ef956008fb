import re

import pytest

from bakery.models import BlogPost
from bakery.services.blog_service import BlogService

SLUG_RE = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')


def _post(client, headers, **overrides):
    payload = {
        'title': 'Hello World!',
        'excerpt': 'A short intro',
        'content': '<p>Fresh <strong>bread</strong> every morning.</p>',
        'cover_image': 'https://example.com/cover.jpg',
        'tags': ['Baking', 'baking', ' Tips '],
    }
    payload.update(overrides)
    return client.post('/api/blog', json=payload, headers=headers)


@pytest.mark.parametrize('title, expected', [
    ('Hello World!', 'hello-world'),
    ('  Tom &amp; Jerry  ', 'tom-jerry'),
    ('Crème brûlée -- tips', 'crme-brle-tips'),
    ('!!!', 'post'),
])
def test_generate_slug(title, expected):
    slug = BlogService.generate_slug(title)
    assert slug == expected
    assert SLUG_RE.match(slug)


def test_read_time_is_at_least_one_minute():
    assert BlogService.calculate_read_time('') == 1
    assert BlogService.calculate_read_time('word ' * 401) == 3


def test_create_post(client, admin_headers, uploader):
    resp = _post(client, admin_headers)
    assert resp.status_code == 201
    body = resp.get_json()
    data = body['data']
    assert data['slug'] == 'hello-world'
    assert data['title'] == 'Hello World!'
    assert data['content'] == '<p>Fresh <strong>bread</strong> every morning.</p>'
    assert data['author'] == 'Cocoa&Cherry Team'
    assert data['category'] == 'General'
    assert data['tags'] == ['baking', 'tips']
    assert data['read_time'] == 1
    assert 'f_avif,q_auto' in data['cover_image']
    assert data['cover_image_public_id'] == 'cocoa-cherry/blog/img1'
    assert body['cloudinary']['size'] == '2.0KB'
    assert uploader.uploads[0][1]['folder'] == 'cocoa-cherry/blog'


def test_duplicate_title_gets_timestamp_suffix(client, admin_headers):
    _post(client, admin_headers)
    second = _post(client, admin_headers).get_json()['data']
    assert re.match(r'^hello-world-\d+$', second['slug'])


def test_title_over_limit_after_escaping_is_rejected(client, admin_headers):
    resp = _post(client, admin_headers, title='<' * 51)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Title must be less than 200 characters'
    assert BlogPost.query.count() == 0

    resp = _post(client, admin_headers, title='x' * 201)
    assert resp.status_code == 400
    assert BlogPost.query.count() == 0


def test_missing_fields(client, admin_headers):
    resp = client.post('/api/blog', json={'title': 'Only title'}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Missing required fields: excerpt, content, cover_image'


def test_public_read_increments_views_and_hides_drafts(client, admin_headers):
    _post(client, admin_headers)
    _post(client, admin_headers, title='Draft', is_published=False)

    resp = client.get('/api/blog/hello-world')
    assert resp.status_code == 200
    assert resp.get_json()['data']['views'] == 1
    assert client.get('/api/blog/hello-world').get_json()['data']['views'] == 2

    assert client.get('/api/blog/draft').status_code == 404
    assert client.get('/api/blog/draft', headers=admin_headers).status_code == 200


def test_list_excludes_content_and_respects_include_inactive(client, admin_headers):
    _post(client, admin_headers)
    _post(client, admin_headers, title='Draft', is_published=False)

    public = client.get('/api/blog').get_json()['data']
    assert [p['slug'] for p in public] == ['hello-world']
    assert 'content' not in public[0]

    everything = client.get('/api/blog?include_inactive=true', headers=admin_headers).get_json()['data']
    assert len(everything) == 2

    # 非管理员传 include_inactive 无效
    assert len(client.get('/api/blog?include_inactive=true').get_json()['data']) == 1


def test_update_regenerates_slug_and_replaces_cover(client, admin_headers, uploader):
    _post(client, admin_headers)
    resp = client.put('/api/blog/hello-world', json={
        'title': 'Brand New Title',
        'cover_image': 'https://example.com/new.jpg',
        'content': 'word ' * 450,
    }, headers=admin_headers)

    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['slug'] == 'brand-new-title'
    assert data['read_time'] == 3
    assert data['cover_image_public_id'] == 'cocoa-cherry/blog/img2'
    assert uploader.destroyed == ['cocoa-cherry/blog/img1']
    assert client.get('/api/blog/hello-world').status_code == 404


def test_update_unknown_slug(client, admin_headers):
    resp = client.put('/api/blog/nope', json={'title': 'x'}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.get_json() == {'success': False, 'error': 'Blog not found'}


def test_delete_survives_remote_failure(client, admin_headers, uploader):
    _post(client, admin_headers)
    uploader.fail_destroy = True

    resp = client.delete('/api/blog/hello-world', headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()['message'] == 'Blog deleted successfully'
    assert BlogPost.query.count() == 0


def test_upload_failure_returns_500_without_persisting(client, admin_headers, uploader):
    uploader.fail_upload = True
    resp = _post(client, admin_headers)
    assert resp.status_code == 500
    assert resp.get_json()['error'] == 'Failed to upload image to Cloudinary'
    assert BlogPost.query.count() == 0


def test_non_string_slug_falls_back_to_title(client, admin_headers):
    resp = _post(client, admin_headers, slug=123)
    assert resp.status_code == 201
    assert resp.get_json()['data']['slug'] == 'hello-world'
