import traceback
from functools import wraps
from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from bakery.exceptions import BakeryException, Unauthorized
from bakery.extensions import db
from bakery.utils.auth import is_admin


def admin_required(f):
    """
    检查请求是否携带管理员凭证，否则返回 401
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_admin():
            raise Unauthorized()
        return f(*args, **kwargs)
    return decorated_function


def api_route(failure_message):
    """
    处理器边界的兜底异常处理：
    业务异常交给全局错误处理器，其余异常回滚会话、记录日志并返回 500
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except (BakeryException, HTTPException):
                db.session.rollback()
                raise
            except Exception as e:
                db.session.rollback()
                current_app.logger.error(f'{failure_message}: {e}')
                current_app.logger.error(traceback.format_exc())
                return jsonify({'success': False, 'error': failure_message}), 500
        return decorated_function
    return decorator

