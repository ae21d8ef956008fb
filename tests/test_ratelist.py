from bakery.extensions import db
from bakery.models import RateListEntry


def _create(client, headers, **fields):
    payload = {'category': 'Cakes', 'item': 'Chocolate Cake', 'price': 800}
    payload.update(fields)
    resp = client.post('/api/ratelist', json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['data']


def _order(entry_id):
    db.session.expire_all()
    return db.session.get(RateListEntry, entry_id).order


def test_swap_is_scoped_to_category(client, admin_headers):
    a = _create(client, admin_headers, item='Truffle', order=1)
    b = _create(client, admin_headers, item='Pineapple', order=2)
    c = _create(client, admin_headers, category='Cookies', item='Choco Chip', order=2)

    body = client.put(f"/api/ratelist/{a['id']}", json={'order': 2}, headers=admin_headers).get_json()

    assert body['swapped_with']['id'] == b['id']
    assert body['swapped_with']['item'] == 'Pineapple'
    assert body['message'] == 'Order swapped with "Pineapple"'
    assert _order(a['id']) == 2
    assert _order(b['id']) == 1
    assert _order(c['id']) == 2


def test_reorder_never_touches_other_category(client, admin_headers):
    a = _create(client, admin_headers, item='Truffle', order=1)
    c = _create(client, admin_headers, category='Cookies', item='Choco Chip', order=1)

    body = client.put(f"/api/ratelist/{a['id']}", json={'order': 3}, headers=admin_headers).get_json()
    assert body['swapped_with'] is None
    assert _order(c['id']) == 1

    body = client.put(f"/api/ratelist/{c['id']}", json={'order': 3}, headers=admin_headers).get_json()
    assert body['swapped_with'] is None
    assert _order(a['id']) == 3


def test_discount_must_be_below_price(client, admin_headers):
    resp = client.post('/api/ratelist', json={
        'category': 'Cakes', 'item': 'Truffle', 'price': 500, 'discount_price': 500,
    }, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Discount price must be less than original price'

    entry = _create(client, admin_headers, price=500, discount_price=450)
    resp = client.put(f"/api/ratelist/{entry['id']}", json={'price': 400}, headers=admin_headers)
    assert resp.status_code == 400


def test_text_limits_and_unit_fallback(client, admin_headers):
    resp = client.post('/api/ratelist', json={
        'category': 'c' * 51, 'item': 'Truffle', 'price': 500,
    }, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Category must be less than 50 characters'

    entry = _create(client, admin_headers, unit='per tonne')
    assert entry['unit'] == 'per kg'
    assert entry['is_available'] is True


def test_public_list_shows_available_sorted(client, admin_headers):
    _create(client, admin_headers, category='Cookies', item='Oat', order=0)
    _create(client, admin_headers, category='Cakes', item='Zebra', order=1)
    _create(client, admin_headers, category='Cakes', item='Apple', order=1)
    _create(client, admin_headers, category='Cakes', item='Hidden', is_available=False)

    public = client.get('/api/ratelist').get_json()['data']
    assert [(e['category'], e['item']) for e in public] == [
        ('Cakes', 'Apple'), ('Cakes', 'Zebra'), ('Cookies', 'Oat')]
    assert len(client.get('/api/ratelist', headers=admin_headers).get_json()['data']) == 4


def test_missing_entry(client, admin_headers):
    resp = client.put('/api/ratelist/42', json={'order': 1}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.get_json()['error'] == 'Item not found'
    assert client.delete('/api/ratelist/42', headers=admin_headers).status_code == 404
