"""
管理员认证工具
单一共享密钥 + 会话令牌缓存（Cookie 只保存不透明令牌）
"""
import hmac
import secrets
import time
from flask import current_app, request


class SessionStore:
    """
    管理员会话存储：token -> 有效期截止时间戳

    底层使用 Flask-Caching 的 cache 对象，默认 SimpleCache，
    生产环境切换为 Redis 后多实例即可共享会话。
    """
    KEY_PREFIX = 'admin_session:'

    def __init__(self, cache, ttl=24 * 60 * 60, clock=time.time):
        self.cache = cache
        self.ttl = ttl
        self._clock = clock

    def issue(self):
        """签发新令牌"""
        token = secrets.token_urlsafe(32)
        self.cache.set(self.KEY_PREFIX + token, self._clock() + self.ttl, timeout=self.ttl)
        return token

    def is_valid(self, token):
        if not token:
            return False
        verified_until = self.cache.get(self.KEY_PREFIX + token)
        return verified_until is not None and verified_until > self._clock()

    def revoke(self, token):
        if token:
            self.cache.delete(self.KEY_PREFIX + token)


def keys_match(provided, secret):
    """常量时间比较，防止计时攻击"""
    if not isinstance(provided, str) or not provided or not secret:
        return False
    return hmac.compare_digest(provided.encode(), secret.encode())


def verify_admin_key(req, secret, sessions, cookie_name='admin_session'):
    """
    校验请求是否携带有效的管理员凭证，不抛出异常

    依次检查：会话 Cookie -> X-Admin-Key 请求头 -> key 查询参数（旧版兼容）
    """
    if not secret:
        current_app.logger.error('管理员访问被拒绝：ADMIN_SECRET_KEY 未配置')
        return False

    if sessions.is_valid(req.cookies.get(cookie_name)):
        return True

    header_key = req.headers.get('X-Admin-Key')
    if header_key:
        return keys_match(header_key, secret)

    query_key = req.args.get('key')
    if query_key:
        return keys_match(query_key, secret)

    return False


def get_session_store():
    return current_app.extensions['admin_sessions']


def is_admin(req=None):
    """使用当前应用配置检查请求"""
    return verify_admin_key(
        req or request,
        current_app.config.get('ADMIN_SECRET_KEY'),
        get_session_store(),
        current_app.config.get('ADMIN_SESSION_COOKIE', 'admin_session'),
    )
