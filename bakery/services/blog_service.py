"""博客文章服务"""
import html
import math
import re
import time

from bakery.models import BlogPost
from bakery.utils.security import sanitize_string

WORDS_PER_MINUTE = 200


class BlogService:
    """Slug 生成、阅读时长与标签处理"""

    @staticmethod
    def generate_slug(title):
        """由标题生成 URL 友好的 slug（仅 ASCII 小写字母、数字和连字符）"""
        # 标题入库前已转义，这里先还原实体，避免 '&amp;' 变成 'amp'
        text = html.unescape(title or '').lower().strip()
        text = re.sub(r'[^\w\s-]', '', text, flags=re.ASCII)
        text = re.sub(r'[\s_-]+', '-', text)
        text = text.strip('-')
        return text or 'post'

    @staticmethod
    def unique_slug(slug, exclude_id=None):
        """slug 已被占用时追加毫秒时间戳"""
        query = BlogPost.query.filter(BlogPost.slug == slug)
        if exclude_id is not None:
            query = query.filter(BlogPost.id != exclude_id)
        if query.first() is not None:
            return f'{slug}-{int(time.time() * 1000)}'
        return slug

    @staticmethod
    def calculate_read_time(content):
        """按每分钟 200 词估算，至少 1 分钟"""
        word_count = len((content or '').split())
        return max(1, math.ceil(word_count / WORDS_PER_MINUTE))

    @staticmethod
    def process_tags(tags):
        """标签转义并统一小写，丢弃空值"""
        if not isinstance(tags, list):
            return []
        cleaned = (sanitize_string(t).lower() for t in tags)
        return list(dict.fromkeys(t for t in cleaned if t))
