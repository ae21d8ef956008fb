"""博客文章路由（按 slug 寻址）"""
from datetime import datetime
from flask import request, current_app

from . import blog_bp
from bakery.exceptions import NotFound, ValidationError
from bakery.extensions import db
from bakery.models import BlogPost
from bakery.services.blog_service import BlogService
from bakery.utils import cloud_storage
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import (
    require_fields, clean_text, parse_order, parse_datetime, parse_flag
)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _get_post_or_404(slug):
    post = BlogPost.query.filter_by(slug=slug).first()
    if post is None:
        raise NotFound('Blog not found')
    return post


def _optional_text(value, max_length, label):
    return clean_text(value, max_length, label) if value else None


@blog_bp.route('', methods=['GET'])
@api_route('Failed to fetch blogs')
def list_posts():
    """文章列表（不含正文）；管理员加 include_inactive=true 可查看全部"""
    limit = request.args.get('limit', DEFAULT_LIMIT, type=int) or DEFAULT_LIMIT
    limit = max(1, min(limit, MAX_LIMIT))
    category = request.args.get('category', '', type=str)
    include_inactive = request.args.get('include_inactive') == 'true'

    query = BlogPost.query
    if not (include_inactive and is_admin()):
        query = query.filter_by(is_active=True, is_published=True)
    if category:
        query = query.filter_by(category=category)

    posts = query.order_by(BlogPost.published_at.desc(), BlogPost.order.asc()).limit(limit).all()
    return success([p.to_dict(exclude=('content',)) for p in posts])


@blog_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to add blog')
def create_post():
    """发布文章"""
    data = json_body()
    require_fields(data, ['title', 'excerpt', 'content', 'cover_image'])

    title = clean_text(data['title'], BlogPost.TITLE_MAX, 'Title')
    excerpt = clean_text(data['excerpt'], BlogPost.EXCERPT_MAX, 'Excerpt')
    content = data['content']  # 富文本 HTML 原样保存
    if not isinstance(content, str):
        raise ValidationError('Content must be a string')

    seo_title = _optional_text(data.get('seo_title'), BlogPost.SEO_TITLE_MAX, 'SEO title')
    seo_description = _optional_text(
        data.get('seo_description'), BlogPost.SEO_DESCRIPTION_MAX, 'SEO description')
    published_at = parse_datetime(data['published_at'], 'Published date') \
        if data.get('published_at') else datetime.utcnow()
    order = parse_order(data.get('order'))

    custom_slug = data.get('slug') if isinstance(data.get('slug'), str) else None
    base_slug = BlogService.generate_slug(custom_slug or title)
    slug = BlogService.unique_slug(base_slug)

    upload = cloud_storage.upload_image(data['cover_image'], 'blog')

    post = BlogPost(
        title=title,
        slug=slug,
        excerpt=excerpt,
        content=content,
        cover_image=upload['secure_url'],
        cover_image_public_id=upload['public_id'],
        author=clean_text(data['author'], 100, 'Author') if data.get('author')
        else current_app.config['SITE_AUTHOR'],
        published_at=published_at,
        read_time=BlogService.calculate_read_time(content),
        tags=BlogService.process_tags(data.get('tags')),
        category=clean_text(data['category'], 64, 'Category') if data.get('category') else 'General',
        seo_title=seo_title,
        seo_description=seo_description,
        order=order,
        is_published=parse_flag(data.get('is_published')) is not False,
    )
    post.save()
    current_app.logger.info(f'📝 新文章发布: {post.slug}')

    return success(post.to_dict(), 'Blog added successfully', 201,
                   cloudinary=cloud_storage.upload_summary(upload))


@blog_bp.route('/<slug>', methods=['GET'])
@api_route('Failed to fetch blog')
def get_post(slug):
    """文章详情；公开访问时阅读数 +1"""
    admin = is_admin()
    query = BlogPost.query.filter_by(slug=slug)
    if not admin:
        query = query.filter_by(is_active=True, is_published=True)

    post = query.first()
    if post is None:
        raise NotFound('Blog not found')

    if not admin:
        post.views = (post.views or 0) + 1
        db.session.commit()

    return success(post.to_dict())


@blog_bp.route('/<slug>', methods=['PUT'])
@admin_required
@api_route('Failed to update blog')
def update_post(slug):
    """部分更新文章，标题变化时重新生成 slug"""
    post = _get_post_or_404(slug)
    data = json_body()
    updates = {}

    if 'title' in data:
        title = clean_text(data['title'], BlogPost.TITLE_MAX, 'Title')
        updates['title'] = title
        if title != post.title:
            updates['slug'] = BlogService.unique_slug(
                BlogService.generate_slug(title), exclude_id=post.id)

    if 'excerpt' in data:
        updates['excerpt'] = clean_text(data['excerpt'], BlogPost.EXCERPT_MAX, 'Excerpt')

    if 'content' in data:
        if not isinstance(data['content'], str):
            raise ValidationError('Content must be a string')
        updates['content'] = data['content']
        updates['read_time'] = BlogService.calculate_read_time(data['content'])

    if 'author' in data:
        updates['author'] = clean_text(data['author'], 100, 'Author')

    if 'published_at' in data:
        updates['published_at'] = parse_datetime(data['published_at'], 'Published date')

    if isinstance(data.get('tags'), list):
        updates['tags'] = BlogService.process_tags(data['tags'])

    if 'category' in data:
        updates['category'] = clean_text(data['category'], 64, 'Category')

    if 'seo_title' in data:
        updates['seo_title'] = _optional_text(data['seo_title'], BlogPost.SEO_TITLE_MAX, 'SEO title')

    if 'seo_description' in data:
        updates['seo_description'] = _optional_text(
            data['seo_description'], BlogPost.SEO_DESCRIPTION_MAX, 'SEO description')

    if 'order' in data:
        updates['order'] = parse_order(data['order'])

    for flag in ('is_published', 'is_active'):
        value = parse_flag(data.get(flag))
        if value is not None:
            updates[flag] = value

    old_public_id = None
    cover_image = data.get('cover_image')
    if cover_image and cover_image != post.cover_image:
        upload = cloud_storage.upload_image(cover_image, 'blog')
        updates['cover_image'] = upload['secure_url']
        updates['cover_image_public_id'] = upload['public_id']
        old_public_id = post.cover_image_public_id

    for field, value in updates.items():
        setattr(post, field, value)
    db.session.commit()

    if old_public_id and old_public_id != post.cover_image_public_id:
        cloud_storage.delete_from_cloud(old_public_id)

    return success(post.to_dict(), 'Blog updated successfully')


@blog_bp.route('/<slug>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete blog')
def delete_post(slug):
    """硬删除文章，随后尽力删除云端封面"""
    post = _get_post_or_404(slug)
    public_id = post.cover_image_public_id
    post.delete()

    # 云端删除失败不影响记录删除
    cloud_storage.delete_from_cloud(public_id)

    current_app.logger.info(f'🗑️ 文章已删除: {slug}')
    return success(message='Blog deleted successfully')
