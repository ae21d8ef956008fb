"""
图片处理工具（Pillow）
上传前压缩 Base64 图片：限制尺寸、按 EXIF 旋转、统一转为 WebP
"""
import base64
import binascii
import io
import re
from collections import namedtuple

from PIL import Image, ImageOps

# 不同用途的压缩预设
IMAGE_PRESETS = {
    'gallery': {'max_width': 1200, 'max_height': 1200, 'quality': 80},
    'menu': {'max_width': 800, 'max_height': 800, 'quality': 75},
    'thumbnail': {'max_width': 600, 'max_height': 600, 'quality': 70},
}

ALLOWED_FORMATS = ('jpeg', 'jpg', 'png', 'gif', 'webp')

_DATA_URL_RE = re.compile(r'^data:image/(\w+);base64,(.+)$', re.DOTALL)

ImageCheck = namedtuple('ImageCheck', ['valid', 'error'])
CompressionResult = namedtuple('CompressionResult', ['data_url', 'original_size', 'compressed_size', 'savings'])


def is_data_url(data):
    return isinstance(data, str) and data.startswith('data:image/')


def validate_image(data, max_mb=20):
    """
    校验 Base64 图片的格式和大小

    Returns:
        ImageCheck(valid, error)
    """
    if not data or not isinstance(data, str):
        return ImageCheck(False, 'Invalid image data')

    if not is_data_url(data):
        return ImageCheck(False, 'Invalid image format')

    match = re.match(r'^data:image/(\w+);base64,', data)
    if not match:
        return ImageCheck(False, 'Could not determine image format')

    fmt = match.group(1).lower()
    if fmt not in ALLOWED_FORMATS:
        return ImageCheck(False, f"Invalid format: {fmt}. Allowed: {', '.join(ALLOWED_FORMATS)}")

    payload = data.split(',', 1)[1]
    size_mb = len(payload) * 3 / 4 / (1024 * 1024)
    if size_mb > max_mb:
        return ImageCheck(False, f'Image size ({size_mb:.2f}MB) exceeds maximum ({max_mb}MB)')

    return ImageCheck(True, None)


def decode_data_url(data):
    """Base64 data URL -> bytes"""
    match = _DATA_URL_RE.match(data or '')
    if not match:
        raise ValueError('Invalid image data URL')
    try:
        return base64.b64decode(match.group(2), validate=True)
    except binascii.Error as e:
        raise ValueError(f'Could not parse Base64 data: {e}')


def encode_data_url(raw, fmt='webp'):
    return f"data:image/{fmt};base64,{base64.b64encode(raw).decode('ascii')}"


def compress_image(data, max_width=1200, max_height=1200, quality=80):
    """
    压缩图片并转为 WebP，小图不放大

    Returns:
        CompressionResult(data_url, original_size, compressed_size, savings)
    """
    raw = decode_data_url(data)
    original_size = len(raw)

    with Image.open(io.BytesIO(raw)) as img:
        img = ImageOps.exif_transpose(img)
        img.thumbnail((max_width, max_height))
        if img.mode not in ('RGB', 'RGBA'):
            img = img.convert('RGBA' if 'transparency' in img.info or img.mode in ('LA', 'PA') else 'RGB')

        out = io.BytesIO()
        img.save(out, format='WEBP', quality=quality, method=4)

    compressed = out.getvalue()
    savings = (1 - len(compressed) / original_size) * 100 if original_size else 0.0
    return CompressionResult(
        encode_data_url(compressed),
        original_size,
        len(compressed),
        f'{savings:.1f}%',
    )


def compress_with_preset(data, preset='gallery'):
    options = IMAGE_PRESETS.get(preset, IMAGE_PRESETS['gallery'])
    return compress_image(data, **options)
