"""sitemap.xml 与 robots.txt"""
from datetime import datetime
from xml.etree import ElementTree as ET
from flask import Response, current_app

from . import seo_bp
from bakery.models import BlogPost

SITEMAP_NS = 'http://www.sitemaps.org/schemas/sitemap/0.9'

# (路径, 更新频率, 优先级)
STATIC_PAGES = [
    ('', 'daily', '1.0'),
    ('/about', 'monthly', '0.9'),
    ('/menu', 'daily', '1.0'),
    ('/services', 'weekly', '0.9'),
    ('/gallery', 'weekly', '0.9'),
    ('/events', 'weekly', '0.9'),
    ('/reviews', 'daily', '0.9'),
    ('/blog', 'daily', '0.9'),
    ('/contact', 'monthly', '1.0'),
    ('/terms-and-conditions', 'yearly', '0.3'),
]

ROBOTS_RULES = [
    ('*', ['/admin', '/admin/*', '/api/', '/api/*', '/private/']),
    ('Googlebot', ['/admin', '/api/']),
    ('Googlebot-Image', []),
    ('Bingbot', ['/admin', '/api/']),
]


def _add_url(urlset, loc, lastmod, changefreq, priority):
    url = ET.SubElement(urlset, 'url')
    ET.SubElement(url, 'loc').text = loc
    ET.SubElement(url, 'lastmod').text = lastmod.strftime('%Y-%m-%d')
    ET.SubElement(url, 'changefreq').text = changefreq
    ET.SubElement(url, 'priority').text = priority


@seo_bp.route('/sitemap.xml')
def sitemap():
    """静态页面加上已发布的博客文章"""
    base_url = current_app.config['SITE_URL']
    now = datetime.utcnow()

    urlset = ET.Element('urlset', xmlns=SITEMAP_NS)
    for path, changefreq, priority in STATIC_PAGES:
        _add_url(urlset, f'{base_url}{path}', now, changefreq, priority)

    posts = BlogPost.query.filter_by(is_active=True, is_published=True) \
        .order_by(BlogPost.published_at.desc()).all()
    for post in posts:
        _add_url(urlset, f'{base_url}/blog/{post.slug}',
                 post.updated_at or post.published_at or now, 'weekly', '0.7')

    body = ET.tostring(urlset, encoding='unicode')
    return Response('<?xml version="1.0" encoding="UTF-8"?>\n' + body, mimetype='application/xml')


@seo_bp.route('/robots.txt')
def robots():
    base_url = current_app.config['SITE_URL']
    lines = []
    for agent, disallow in ROBOTS_RULES:
        lines.append(f'User-agent: {agent}')
        lines.append('Allow: /')
        lines.extend(f'Disallow: {path}' for path in disallow)
        lines.append('')
    lines.append(f'Sitemap: {base_url}/sitemap.xml')
    lines.append(f'Host: {base_url}')
    return Response('\n'.join(lines) + '\n', mimetype='text/plain')
