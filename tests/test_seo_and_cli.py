from bakery.models import BlogPost, Event, MenuItem, RateListEntry, Review


def test_sitemap_lists_pages_and_published_posts(client, admin_headers):
    client.post('/api/blog', json={
        'title': 'Cake Care', 'excerpt': 'e', 'content': 'c',
        'cover_image': 'https://example.com/c.jpg',
    }, headers=admin_headers)

    resp = client.get('/sitemap.xml')
    assert resp.status_code == 200
    assert resp.mimetype == 'application/xml'
    xml = resp.get_data(as_text=True)
    assert '<loc>https://cocoa-cherry.vercel.app/menu</loc>' in xml
    assert '<loc>https://cocoa-cherry.vercel.app/blog/cake-care</loc>' in xml


def test_robots_points_at_sitemap(client):
    resp = client.get('/robots.txt')
    assert resp.mimetype == 'text/plain'
    text = resp.get_data(as_text=True)
    assert 'Disallow: /api/' in text
    assert 'Sitemap: https://cocoa-cherry.vercel.app/sitemap.xml' in text


def test_unknown_route_is_json(client):
    resp = client.get('/api/nothing-here')
    assert resp.status_code == 404
    assert resp.get_json() == {'success': False, 'error': 'Not found'}

    resp = client.patch('/api/reels')
    assert resp.status_code == 405
    assert resp.get_json()['success'] is False


def test_forge_and_status(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['forge', '--count', '2'])
    assert result.exit_code == 0, result.output
    assert BlogPost.query.count() == 2
    assert RateListEntry.query.count() == 10
    assert MenuItem.query.count() == 10
    assert Review.query.count() == 4

    result = runner.invoke(args=['status'])
    assert result.exit_code == 0
    assert '数据已存在' in result.output


def test_forge_keeps_event_image_lists_parallel(app):
    app.test_cli_runner().invoke(args=['forge', '--count', '3'])
    for event in Event.query.all():
        assert len(event.images) == len(event.image_public_ids)
