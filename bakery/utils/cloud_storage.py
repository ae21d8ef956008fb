"""
云存储工具模块
使用 Cloudinary 保存封面、缩略图和相册图片，数据库只保存 URL 与 public_id
"""
import re
import cloudinary
import cloudinary.uploader
from flask import current_app

from bakery.exceptions import MediaUploadError, ValidationError
from bakery.utils.image_processor import is_data_url, validate_image, compress_with_preset

# Cloudinary 是否已配置
_cloudinary_configured = False

AVIF_TRANSFORMATION = 'f_avif,q_auto'


def init_cloud_storage(app):
    """初始化云存储配置"""
    global _cloudinary_configured

    cloudinary_url = app.config.get('CLOUDINARY_URL')
    cloud_name = app.config.get('CLOUDINARY_CLOUD_NAME')
    api_key = app.config.get('CLOUDINARY_API_KEY')
    api_secret = app.config.get('CLOUDINARY_API_SECRET')

    if cloudinary_url or (cloud_name and api_key and api_secret):
        try:
            if cloudinary_url:
                cloudinary.config(cloudinary_url=cloudinary_url)
            else:
                cloudinary.config(
                    cloud_name=cloud_name,
                    api_key=api_key,
                    api_secret=api_secret,
                    secure=True
                )
            _cloudinary_configured = True
            app.logger.info('✅ Cloudinary 云存储已配置')
        except Exception as e:
            app.logger.error(f'❌ Cloudinary 配置失败: {e}')
    else:
        app.logger.info('ℹ️ 未配置 Cloudinary，图片上传不可用')


def is_cloudinary_url(url):
    return isinstance(url, str) and 'cloudinary.com' in url


def extract_public_id(url):
    """从 Cloudinary URL 中提取 public_id；非 URL 视为 public_id 本身"""
    if not url or not isinstance(url, str):
        return None
    match = re.search(r'/v\d+/([^.?]+)', url)
    if match:
        return match.group(1)
    if 'http' not in url:
        return url
    return None


def with_avif(url):
    """在 /upload/ 之后插入 AVIF 变换参数"""
    if url and '/upload/' in url and 'f_avif' not in url:
        return url.replace('/upload/', f'/upload/{AVIF_TRANSFORMATION}/', 1)
    return url


def upload_image(data, folder, preset=None, public_id=None):
    """
    上传图片到云存储

    Args:
        data: Base64 data URL、http(s) 远程地址，或已有的 Cloudinary URL
        folder: 子目录（如 'blog'、'reels'）
        preset: 上传前的压缩预设（见 image_processor.IMAGE_PRESETS），None 表示不压缩
        public_id: 指定的 public_id

    Returns:
        dict: {'url', 'secure_url', 'public_id', 'bytes', 'width', 'height', 'format', 'original_url'}

    Raises:
        ValidationError: 图片数据格式不合法
        MediaUploadError: 云存储不可用或上传失败
    """
    if not data or not isinstance(data, str):
        raise ValidationError('Image data is required and must be a string')

    # 已经是 Cloudinary 地址，无需重复上传
    if is_cloudinary_url(data):
        return {
            'url': data,
            'secure_url': data,
            'public_id': extract_public_id(data),
            'bytes': None,
            'width': None,
            'height': None,
            'format': 'avif',
            'original_url': data,
        }

    if is_data_url(data):
        check = validate_image(data, current_app.config.get('MAX_IMAGE_MB', 20))
        if not check.valid:
            raise ValidationError(check.error)
        if preset:
            try:
                result = compress_with_preset(data, preset)
                current_app.logger.info(
                    f'✅ 图片已压缩: {result.original_size / 1024:.1f}KB → '
                    f'{result.compressed_size / 1024:.1f}KB ({result.savings})'
                )
                data = result.data_url
            except (OSError, ValueError) as e:
                current_app.logger.warning(f'⚠️ 图片压缩失败，使用原图: {e}')
    elif not data.startswith(('http://', 'https://')):
        raise ValidationError('Image data must be a valid URL or base64 data URL')

    if not _cloudinary_configured:
        current_app.logger.warning('云存储未配置，无法上传')
        raise MediaUploadError('Failed to upload image: cloud storage is not configured')

    root = current_app.config.get('CLOUDINARY_FOLDER', 'cocoa-cherry')
    upload_options = {
        'folder': f'{root}/{folder}',
        'resource_type': 'image',
        'overwrite': False,
        'transformation': [{'quality': 'auto', 'fetch_format': 'avif'}],
    }
    if public_id:
        upload_options['public_id'] = public_id

    try:
        result = cloudinary.uploader.upload(data, **upload_options)
    except Exception as e:
        current_app.logger.error(f'❌ 云存储上传失败: {e}')
        raise MediaUploadError('Failed to upload image to Cloudinary')

    avif_url = with_avif(result.get('secure_url'))
    current_app.logger.info(f'✅ 图片上传到云存储: {avif_url}')

    return {
        'url': avif_url,
        'secure_url': avif_url,
        'public_id': result.get('public_id'),
        'bytes': result.get('bytes'),
        'width': result.get('width'),
        'height': result.get('height'),
        'format': 'avif',
        'original_url': result.get('secure_url'),
    }


def upload_images(items, folder, preset=None):
    """
    批量上传，单张失败时跳过（记录警告）

    Returns:
        (urls, public_ids) 两个按顺序对应的列表
    """
    urls, public_ids = [], []
    for data in items or []:
        try:
            result = upload_image(data, folder, preset=preset)
        except (ValidationError, MediaUploadError) as e:
            current_app.logger.warning(f'⚠️ 跳过无法上传的图片: {e.message}')
            continue
        urls.append(result['secure_url'])
        public_ids.append(result['public_id'])
    return urls, public_ids


def upload_summary(result):
    """上传结果摘要，随创建接口返回"""
    size = result.get('bytes')
    return {
        'url': result.get('secure_url'),
        'public_id': result.get('public_id'),
        'size': f'{size / 1024:.1f}KB' if size else None,
    }


def delete_from_cloud(public_id, resource_type='image'):
    """
    从云存储删除文件（尽力而为，失败只记录警告）

    Returns:
        bool: 是否删除成功
    """
    if not public_id:
        return False
    if not _cloudinary_configured:
        current_app.logger.warning(f'⚠️ 云存储未配置，跳过删除: {public_id}')
        return False

    try:
        result = cloudinary.uploader.destroy(public_id, resource_type=resource_type)
        success = result.get('result') == 'ok'

        if success:
            current_app.logger.info(f'✅ 云存储文件已删除: {public_id}')
        else:
            current_app.logger.warning(f'⚠️ 云存储文件删除失败: {public_id}')

        return success

    except Exception as e:
        current_app.logger.warning(f'⚠️ 删除云存储文件失败: {public_id}: {e}')
        return False


def delete_many(public_ids):
    return sum(1 for pid in public_ids or [] if delete_from_cloud(pid))
