from flask import Blueprint

# 注意：url_prefix 在 bakery/__init__.py 注册时设置，这里不重复设置
reviews_bp = Blueprint('reviews', __name__)

from . import routes
