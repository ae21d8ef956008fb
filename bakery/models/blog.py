from datetime import datetime
from bakery.extensions import db
from .base import BaseModel


class BlogPost(BaseModel):
    """博客文章（正文保留原始 HTML）"""
    __tablename__ = 'blog_posts'
    __table_args__ = (
        db.Index('ix_blog_posts_listing', 'is_active', 'is_published', 'published_at'),
        db.Index('ix_blog_posts_category', 'category', 'is_active'),
    )

    TITLE_MAX = 200
    EXCERPT_MAX = 300
    SEO_TITLE_MAX = 60
    SEO_DESCRIPTION_MAX = 160

    title = db.Column(db.String(TITLE_MAX), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.String(EXCERPT_MAX), nullable=False)
    content = db.Column(db.Text, nullable=False)  # HTML 内容，不做转义

    cover_image = db.Column(db.String(512), nullable=False)  # Cloudinary URL
    cover_image_public_id = db.Column(db.String(255))  # 删除时使用

    author = db.Column(db.String(100))
    published_at = db.Column(db.DateTime, default=datetime.utcnow)
    read_time = db.Column(db.Integer, default=5)  # 分钟
    tags = db.Column(db.JSON, default=list)
    category = db.Column(db.String(64), default='General')

    views = db.Column(db.Integer, default=0)
    is_published = db.Column(db.Boolean, default=True)
    is_active = db.Column(db.Boolean, default=True)
    order = db.Column(db.Integer, default=0)

    seo_title = db.Column(db.String(SEO_TITLE_MAX))
    seo_description = db.Column(db.String(SEO_DESCRIPTION_MAX))
