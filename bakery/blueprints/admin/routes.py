"""管理员认证路由"""
from flask import request, jsonify, current_app

from . import admin_bp
from bakery.exceptions import ValidationError, Unauthorized
from bakery.utils.auth import get_session_store, keys_match
from bakery.utils.decorators import api_route
from bakery.utils.responses import json_body
from bakery.utils.security import rate_limit


def _cookie_name():
    return current_app.config.get('ADMIN_SESSION_COOKIE', 'admin_session')


@admin_bp.route('/verify', methods=['POST'])
@rate_limit('admin-verify', setting='ADMIN_VERIFY_RATE_LIMIT',
            message='Too many attempts. Please try again later.')
@api_route('Internal server error')
def verify():
    """校验管理员密钥并签发会话 Cookie"""
    data = json_body()
    key = data.get('key')
    if not key or not isinstance(key, str):
        raise ValidationError('Admin key is required')

    if not keys_match(key, current_app.config.get('ADMIN_SECRET_KEY')):
        current_app.logger.warning('管理员密钥校验失败')
        raise Unauthorized('Invalid admin key')

    sessions = get_session_store()
    token = sessions.issue()

    response = jsonify({'success': True, 'message': 'Authentication successful'})
    response.set_cookie(
        _cookie_name(),
        token,
        max_age=sessions.ttl,
        path='/',
        httponly=True,
        samesite='Strict',
        secure=current_app.config.get('SESSION_COOKIE_SECURE', False),
    )
    return response


@admin_bp.route('/verify', methods=['GET'])
def check_session():
    """检查会话 Cookie 是否仍然有效（不重新签发）"""
    authenticated = get_session_store().is_valid(request.cookies.get(_cookie_name()))
    return jsonify({'success': authenticated, 'authenticated': authenticated})


@admin_bp.route('/verify', methods=['DELETE'])
def logout():
    """注销会话"""
    get_session_store().revoke(request.cookies.get(_cookie_name()))
    response = jsonify({'success': True, 'message': 'Logged out'})
    response.delete_cookie(_cookie_name(), path='/', httponly=True, samesite='Strict')
    return response
