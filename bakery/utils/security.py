"""
安全工具函数
输入转义、客户端识别与速率限制
"""
import math
import random
import threading
import time
from collections import namedtuple
from functools import wraps
from flask import request, current_app
from bakery.exceptions import RateLimitExceeded

# 需要转义的 HTML 字符，'&' 必须最先处理
_HTML_ESCAPES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&#x27;'),
    ('/', '&#x2F;'),
)

UNKNOWN_CLIENT = 'unknown'


def sanitize_string(value):
    """
    转义 HTML 特殊字符并去除首尾空白，防止 XSS。
    非字符串输入一律返回空字符串。
    """
    if not isinstance(value, str):
        return ''
    for char, entity in _HTML_ESCAPES:
        value = value.replace(char, entity)
    return value.strip()


def sanitize_object(value):
    """递归转义 dict / list 中的所有字符串"""
    if isinstance(value, str):
        return sanitize_string(value)
    if isinstance(value, dict):
        return {k: sanitize_object(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_object(v) for v in value]
    return value


def get_client_ip(req=None):
    """
    从代理头获取客户端 IP。
    所有缺少代理头的请求共用 'unknown' 这一个计数桶。
    """
    req = req or request
    forwarded = req.headers.get('X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    real_ip = req.headers.get('X-Real-IP')
    if real_ip:
        return real_ip
    return UNKNOWN_CLIENT


RateLimitResult = namedtuple('RateLimitResult', ['allowed', 'remaining', 'reset_time', 'retry_after'])


class RateLimiter:
    """
    固定窗口计数器（进程内存，重启即清空，多实例之间不共享）。

    记录结构: identifier -> {'count': int, 'reset_time': float}
    约 1% 的调用会顺带清理已过期的记录，无需后台任务。
    """

    def __init__(self, clock=time.time, sweep_probability=0.01, rng=random.random):
        self._clock = clock
        self._sweep_probability = sweep_probability
        self._rng = rng
        self._records = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._records)

    def __contains__(self, identifier):
        return identifier in self._records

    def check(self, identifier, max_requests=10, window=60):
        """
        记录一次请求并判断是否放行

        Args:
            identifier: 客户端标识（通常为 scope:ip）
            max_requests: 时间窗口内最大请求数
            window: 时间窗口（秒）
        """
        now = self._clock()
        with self._lock:
            if self._sweep_probability and self._rng() < self._sweep_probability:
                self._sweep(now)

            record = self._records.get(identifier)
            if record is None or now > record['reset_time']:
                reset_time = now + window
                self._records[identifier] = {'count': 1, 'reset_time': reset_time}
                return RateLimitResult(True, max_requests - 1, reset_time, 0)

            if record['count'] >= max_requests:
                retry_after = max(0, math.ceil(record['reset_time'] - now))
                return RateLimitResult(False, 0, record['reset_time'], retry_after)

            record['count'] += 1
            return RateLimitResult(True, max_requests - record['count'], record['reset_time'], 0)

    def sweep(self):
        """立即清理过期记录，返回删除数量"""
        with self._lock:
            return self._sweep(self._clock())

    def _sweep(self, now):
        expired = [k for k, v in self._records.items() if now > v['reset_time']]
        for key in expired:
            del self._records[key]
        return len(expired)


def rate_limit(scope, setting=None, max_requests=60, window=60, message=None):
    """
    API速率限制装饰器

    Args:
        scope: 计数桶前缀，不同接口互不影响
        setting: 配置项名称，值为 (max_requests, window)，优先于固定参数
        max_requests: 时间窗口内最大请求数
        window: 时间窗口（秒）
        message: 拒绝时返回的提示
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            limit, period = max_requests, window
            if setting:
                limit, period = current_app.config[setting]

            limiter = current_app.extensions['rate_limiter']
            client_id = get_client_ip()
            result = limiter.check(f'{scope}:{client_id}', limit, period)
            if not result.allowed:
                current_app.logger.warning(f'速率限制触发: {scope} / {client_id}')
                if message:
                    raise RateLimitExceeded(result.retry_after, message)
                raise RateLimitExceeded(result.retry_after)

            return func(*args, **kwargs)
        return wrapper
    return decorator
