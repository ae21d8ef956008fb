from bakery.extensions import db
from bakery.models import Event


def _create(client, headers, **fields):
    payload = {
        'title': 'Cupcake Workshop',
        'venue': 'City Public School',
        'date': '2024-05-01T10:00:00Z',
        'cover_image': 'https://example.com/cover.jpg',
        'images': ['https://example.com/1.jpg', 'https://example.com/2.jpg'],
        'highlights': '500+ students served',
    }
    payload.update(fields)
    resp = client.post('/api/events', json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['data']


def test_create_event_uploads_cover_and_images(client, admin_headers, uploader):
    event = _create(client, admin_headers)
    assert event['date'] == '2024-05-01T10:00:00'
    assert len(event['images']) == 2
    assert event['image_public_ids'] == ['cocoa-cherry/events/img2', 'cocoa-cherry/events/img3']
    assert event['cover_image_public_id'] == 'cocoa-cherry/events/img1'
    assert len(uploader.uploads) == 3


def test_invalid_extra_images_are_skipped(client, admin_headers):
    event = _create(client, admin_headers, images=['not-an-image', 'https://example.com/ok.jpg'])
    assert len(event['images']) == 1


def test_validation(client, admin_headers):
    resp = client.post('/api/events', json={'title': 'x'}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Missing required fields: venue, date, cover_image'

    resp = client.post('/api/events', json={
        'title': 'x', 'venue': 'y', 'date': 'someday', 'cover_image': 'https://example.com/c.jpg',
    }, headers=admin_headers)
    assert resp.status_code == 400


def test_event_order_swap(client, admin_headers):
    a = _create(client, admin_headers, title='Alpha', order=0)
    b = _create(client, admin_headers, title='Beta', order=1)

    body = client.put(f"/api/events/{b['id']}", json={'order': 0}, headers=admin_headers).get_json()
    assert body['swapped_with'] == {'id': a['id'], 'title': 'Alpha', 'old_order': 0, 'new_order': 1}

    db.session.expire_all()
    assert db.session.get(Event, a['id']).order == 1
    assert db.session.get(Event, b['id']).order == 0


def test_public_listing_order_and_visibility(client, admin_headers):
    _create(client, admin_headers, title='Old', date='2023-01-01T00:00:00Z', order=0)
    _create(client, admin_headers, title='New', date='2024-01-01T00:00:00Z', order=0)
    hidden = _create(client, admin_headers, title='Hidden', order=0)
    client.put(f"/api/events/{hidden['id']}", json={'is_active': False}, headers=admin_headers)

    titles = [e['title'] for e in client.get('/api/events').get_json()['data']]
    assert titles == ['New', 'Old']


def test_replacing_images_deletes_stale_uploads(client, admin_headers, uploader):
    event = _create(client, admin_headers)
    resp = client.put(f"/api/events/{event['id']}", json={
        'images': ['https://example.com/3.jpg'],
    }, headers=admin_headers)
    assert resp.status_code == 200
    assert sorted(uploader.destroyed) == ['cocoa-cherry/events/img2', 'cocoa-cherry/events/img3']


def test_delete_removes_all_images(client, admin_headers, uploader):
    event = _create(client, admin_headers)
    assert client.delete(f"/api/events/{event['id']}", headers=admin_headers).status_code == 200
    assert sorted(uploader.destroyed) == [
        'cocoa-cherry/events/img1', 'cocoa-cherry/events/img2', 'cocoa-cherry/events/img3']
    assert Event.query.count() == 0
