"""统一 JSON 信封: {success, data?, error?, message?}"""
from flask import jsonify, request
from bakery.exceptions import ValidationError


def success(data=None, message=None, status=200, **extra):
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body.update(extra)
    return jsonify(body), status


def json_body():
    """读取 JSON 请求体，必须是对象"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data
