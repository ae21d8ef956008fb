# 按照依赖顺序导入
from .base import BaseModel
from .blog import BlogPost
from .catalog import Category, MenuItem, RateListEntry, PRICE_UNITS, DEFAULT_PRICE_UNIT
from .media import GalleryImage, Event, Reel, HeroImage
from .review import Review
