from bakery.extensions import db
from .base import BaseModel

# 价格单位枚举，未知单位回退为默认值
PRICE_UNITS = ('per kg', 'per piece', 'per box', 'per dozen', 'per set', 'per serving')
DEFAULT_PRICE_UNIT = 'per kg'


class Category(BaseModel):
    """菜单分类"""
    __tablename__ = 'categories'

    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.String(300))
    order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)


class MenuItem(BaseModel):
    """菜单商品"""
    __tablename__ = 'menu_items'

    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=False)
    image_url = db.Column(db.String(512), nullable=False)
    public_id = db.Column(db.String(255))
    badge = db.Column(db.String(50))  # "Best Seller", "New" 等
    price = db.Column(db.Float, default=0.0)
    discount_price = db.Column(db.Float)
    price_unit = db.Column(db.String(20), default=DEFAULT_PRICE_UNIT)

    # 弱引用：只保存分类 ID，删除分类不级联
    category_id = db.Column(db.Integer, index=True)

    order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)

    @property
    def has_discount(self):
        return (self.discount_price is not None and self.price is not None
                and self.discount_price < self.price)

    @property
    def discount_percentage(self):
        if not self.has_discount or not self.price:
            return 0
        return round((self.price - self.discount_price) / self.price * 100)

    def to_dict(self, exclude=()):
        data = super().to_dict(exclude)
        data['has_discount'] = self.has_discount
        data['discount_percentage'] = self.discount_percentage
        return data


class RateListEntry(BaseModel):
    """价目表条目，order 在同一 category 内有效"""
    __tablename__ = 'rate_list'

    category = db.Column(db.String(50), nullable=False, index=True)  # 自由文本，不是外键
    item = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(300), default='')
    price = db.Column(db.Float, nullable=False)
    discount_price = db.Column(db.Float)
    unit = db.Column(db.String(20), default=DEFAULT_PRICE_UNIT)
    is_available = db.Column(db.Boolean, default=True)
    order = db.Column(db.Integer, default=0)
