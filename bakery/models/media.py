from bakery.extensions import db
from .base import BaseModel


class GalleryImage(BaseModel):
    """相册图片"""
    __tablename__ = 'gallery_images'

    image_url = db.Column(db.String(512), nullable=False)
    public_id = db.Column(db.String(255))
    caption = db.Column(db.String(200), nullable=False)
    alt = db.Column(db.String(200), default='')
    order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)


class Event(BaseModel):
    """活动记录，images 与 image_public_ids 按下标一一对应"""
    __tablename__ = 'events'
    __table_args__ = (
        db.Index('ix_events_listing', 'is_active', 'order', 'date'),
    )

    title = db.Column(db.String(150), nullable=False)
    venue = db.Column(db.String(200), nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    description = db.Column(db.String(1000), default='')
    images = db.Column(db.JSON, default=list)
    image_public_ids = db.Column(db.JSON, default=list)
    cover_image = db.Column(db.String(512), nullable=False)
    cover_image_public_id = db.Column(db.String(255))
    highlights = db.Column(db.String(200), default='')  # 例如 "500+ students served"
    order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)


class Reel(BaseModel):
    """短视频（Instagram / YouTube 链接）"""
    __tablename__ = 'reels'

    video_url = db.Column(db.String(512), nullable=False)
    thumbnail_url = db.Column(db.String(512), nullable=False)
    thumbnail_public_id = db.Column(db.String(255))
    caption = db.Column(db.String(200), nullable=False)
    order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)


class HeroImage(BaseModel):
    """首页横幅，同一时间最多一张处于启用状态"""
    __tablename__ = 'hero_images'

    image_url = db.Column(db.String(512), nullable=False)
    public_id = db.Column(db.String(255))
    title = db.Column(db.String(150), default='Artisanal Cakes')
    subtitle = db.Column(db.String(200), default='Handcrafted with Love')
    alt = db.Column(db.String(200), default='Hero image for Cocoa & Cherry bakery')
    order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)

    @classmethod
    def deactivate_others(cls, keep_id=None):
        """启用某张横幅前，先停用其余横幅"""
        query = cls.query.filter(cls.is_active.is_(True))
        if keep_id is not None:
            query = query.filter(cls.id != keep_id)
        query.update({'is_active': False}, synchronize_session=False)
