from bakery.extensions import db
from .base import BaseModel


class Review(BaseModel):
    """顾客评价，需管理员审核后才公开"""
    __tablename__ = 'reviews'
    __table_args__ = (
        db.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating_range'),
    )

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(254), nullable=False)
    cake_type = db.Column(db.String(100), default='')
    rating = db.Column(db.Integer, nullable=False)
    review = db.Column(db.String(1000), nullable=False)
    avatar = db.Column(db.String(512))  # 用户提交时恒为空
    is_approved = db.Column(db.Boolean, default=False)
    is_featured = db.Column(db.Boolean, default=False)
