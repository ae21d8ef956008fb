"""
请求数据校验器
"""
import math
import re
from collections import namedtuple
from datetime import datetime
from urllib.parse import urlparse

from bakery.exceptions import ValidationError
from bakery.models.catalog import PRICE_UNITS, DEFAULT_PRICE_UNIT
from bakery.utils.security import sanitize_string

EMAIL_MAX_LENGTH = 254
REVIEW_MAX_LENGTH = 1000
REVIEWER_NAME_MAX_LENGTH = 100
CAKE_TYPE_MAX_LENGTH = 100

_EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
_PHONE_RE = re.compile(r'^\+?[0-9]{10,15}$')

RequiredCheck = namedtuple('RequiredCheck', ['valid', 'missing', 'error'])
ReviewCheck = namedtuple('ReviewCheck', ['valid', 'errors', 'sanitized'])


def is_valid_email(email):
    """验证邮箱格式"""
    if not isinstance(email, str):
        return False
    return len(email) <= EMAIL_MAX_LENGTH and bool(_EMAIL_RE.match(email))


def is_valid_url(url):
    """验证 http(s) 链接格式"""
    if not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def is_valid_phone(phone):
    """验证手机号格式：去掉空格、连字符和括号后为 10-15 位数字，可带 +"""
    if not isinstance(phone, str):
        return False
    cleaned = re.sub(r'[\s\-()]', '', phone)
    return bool(_PHONE_RE.match(cleaned))


def validate_required(data, fields):
    """检查必填字段：缺失、None 或空字符串都视为未填写"""
    missing = [f for f in fields if data.get(f) is None or data.get(f) == '']
    error = f"Missing required fields: {', '.join(missing)}" if missing else None
    return RequiredCheck(not missing, missing, error)


def _as_number(value):
    """转为有限数值；NaN、无穷大与无法解析的输入返回 None"""
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    return value if is_number(value) else None


def validate_review_data(data):
    """
    校验并清洗顾客提交的评价。

    返回 ReviewCheck(valid, errors, sanitized)；入库时只能使用 sanitized，
    不能使用原始输入。
    """
    errors = []

    required = validate_required(data, ['name', 'email', 'rating', 'review'])
    if not required.valid:
        errors.append(required.error)

    email = data.get('email')
    if email and not is_valid_email(email):
        errors.append('Invalid email format')

    rating = None
    if data.get('rating') is not None:
        rating = _as_number(data.get('rating'))
        if rating is None or rating != int(rating) or not 1 <= rating <= 5:
            errors.append('Rating must be between 1 and 5')
            rating = None

    sanitized = {
        'name': sanitize_string(data.get('name')),
        'email': sanitize_string(email).lower(),
        'cake_type': sanitize_string(data.get('cake_type')),
        'rating': int(rating) if rating is not None else 0,
        'review': sanitize_string(data.get('review')),
    }

    # 长度按转义后的入库值计算
    if len(sanitized['review']) > REVIEW_MAX_LENGTH:
        errors.append(f'Review must be less than {REVIEW_MAX_LENGTH} characters')
    if len(sanitized['name']) > REVIEWER_NAME_MAX_LENGTH:
        errors.append(f'Name must be less than {REVIEWER_NAME_MAX_LENGTH} characters')
    if len(sanitized['cake_type']) > CAKE_TYPE_MAX_LENGTH:
        errors.append(f'Cake type must be less than {CAKE_TYPE_MAX_LENGTH} characters')
    if len(sanitized['email']) > EMAIL_MAX_LENGTH and 'Invalid email format' not in errors:
        errors.append('Invalid email format')

    return ReviewCheck(not errors, errors, sanitized)


# ---------------- 路由共用的字段校验 ----------------

def require_fields(data, fields):
    """必填字段缺失时直接抛出 400"""
    check = validate_required(data, fields)
    if not check.valid:
        raise ValidationError(check.error)


def clean_text(value, max_length, label):
    """转义后校验长度，超长时拒绝"""
    text = sanitize_string(value)
    if len(text) > max_length:
        raise ValidationError(f'{label} must be less than {max_length} characters')
    return text


def clip_text(value, max_length):
    """转义后截断到最大长度（更新接口的宽松处理）"""
    return sanitize_string(value)[:max_length]


def is_number(value):
    """有限的 int / float；布尔值、NaN 与无穷大都不算数字"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def parse_order(value, default=0):
    """
    解析展示顺序：非数字时使用默认值，负数、非整数或非有限值拒绝
    """
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError('Order must be a non-negative integer')
    if not is_number(value):
        return default
    if value < 0 or value != int(value):
        raise ValidationError('Order must be a non-negative integer')
    return int(value)


def validate_price_pair(price, discount_price, label='Price'):
    """价格必须为非负数，折扣价（若有）必须小于原价"""
    if not is_number(price) or price < 0:
        raise ValidationError(f'{label} must be a positive number')
    if discount_price is None:
        return
    if not is_number(discount_price) or discount_price < 0:
        raise ValidationError('Discount price must be a positive number')
    if discount_price >= price:
        raise ValidationError('Discount price must be less than original price')


def normalize_unit(unit):
    return unit if unit in PRICE_UNITS else DEFAULT_PRICE_UNIT


def parse_datetime(value, label='Date'):
    """解析 ISO 8601 时间字符串"""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'Invalid {label.lower()}')
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f'Invalid {label.lower()}')
    # 统一存储为不带时区的 UTC 时间
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def parse_flag(value):
    """只接受真正的布尔值，其它类型视为未提供"""
    return value if isinstance(value, bool) else None
