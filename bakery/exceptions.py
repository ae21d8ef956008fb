class BakeryException(Exception):
    """系统基础异常类，序列化为统一的 JSON 信封"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['error'] = self.message
        rv['success'] = False
        return rv


class ValidationError(BakeryException):
    """输入校验错误"""
    def __init__(self, message="Invalid data", payload=None):
        super().__init__(message, code=400, payload=payload)


class Unauthorized(BakeryException):
    """管理员密钥缺失或错误"""
    def __init__(self, message="Unauthorized", payload=None):
        super().__init__(message, code=401, payload=payload)


class NotFound(BakeryException):
    def __init__(self, message="Not found", payload=None):
        super().__init__(message, code=404, payload=payload)


class Conflict(BakeryException):
    """唯一字段冲突"""
    def __init__(self, message="Conflict", payload=None):
        super().__init__(message, code=409, payload=payload)


class RateLimitExceeded(BakeryException):
    """请求过于频繁"""
    def __init__(self, retry_after, message="Too many requests. Please try again later."):
        super().__init__(message, code=429, payload={'retryAfter': retry_after})
        self.retry_after = retry_after


class MediaUploadError(BakeryException):
    """云存储上传失败"""
    def __init__(self, message="Failed to upload image", payload=None):
        super().__init__(message, code=500, payload=payload)
