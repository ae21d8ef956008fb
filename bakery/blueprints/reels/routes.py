"""短视频路由"""
from . import reels_bp
from bakery.exceptions import NotFound, ValidationError
from bakery.extensions import db
from bakery.models import Reel
from bakery.services.ordering import OrderingService
from bakery.utils import cloud_storage
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import (
    require_fields, clean_text, clip_text, parse_order, parse_flag,
    is_valid_url
)


def _get_reel_or_404(id):
    reel = db.session.get(Reel, id)
    if reel is None:
        raise NotFound('Reel not found')
    return reel


def _video_url(value):
    if not is_valid_url(value):
        raise ValidationError('Invalid video URL format')
    return value.strip()


@reels_bp.route('', methods=['GET'])
@api_route('Failed to fetch reels')
def list_reels():
    query = Reel.query
    if not is_admin():
        query = query.filter_by(is_active=True)
    reels = query.order_by(Reel.order.asc(), Reel.created_at.desc()).all()
    return success([r.to_dict() for r in reels])


@reels_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to add reel')
def create_reel():
    data = json_body()
    require_fields(data, ['video_url', 'thumbnail', 'caption'])

    video_url = _video_url(data['video_url'])
    caption = clean_text(data['caption'], 200, 'Caption')
    upload = cloud_storage.upload_image(data['thumbnail'], 'reels', preset='thumbnail')

    reel = Reel(
        video_url=video_url,
        thumbnail_url=upload['secure_url'],
        thumbnail_public_id=upload['public_id'],
        caption=caption,
        order=parse_order(data.get('order')),
    )
    reel.save()
    return success(reel.to_dict(), 'Reel added successfully', 201,
                   cloudinary=cloud_storage.upload_summary(upload))


@reels_bp.route('/<int:id>', methods=['GET'])
@api_route('Failed to fetch reel')
def get_reel(id):
    reel = _get_reel_or_404(id)
    if not reel.is_active and not is_admin():
        raise NotFound('Reel not found')
    return success(reel.to_dict())


@reels_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update reel')
def update_reel(id):
    """部分更新；order 变化时与占用目标顺序的短视频交换"""
    reel = _get_reel_or_404(id)
    data = json_body()
    updates = {}

    if 'video_url' in data:
        updates['video_url'] = _video_url(data['video_url'])
    if 'caption' in data:
        updates['caption'] = clip_text(data['caption'], 200)
    is_active = parse_flag(data.get('is_active'))
    if is_active is not None:
        updates['is_active'] = is_active

    old_public_id = None
    thumbnail = data.get('thumbnail')
    if thumbnail and thumbnail != reel.thumbnail_url:
        upload = cloud_storage.upload_image(thumbnail, 'reels', preset='thumbnail')
        updates['thumbnail_url'] = upload['secure_url']
        updates['thumbnail_public_id'] = upload['public_id']
        old_public_id = reel.thumbnail_public_id

    swapped_with = None
    if 'order' in data:
        target = parse_order(data['order'], reel.order)
        swapped_with = OrderingService.apply(reel, target, label='caption')

    for field, value in updates.items():
        setattr(reel, field, value)
    db.session.commit()

    if old_public_id and old_public_id != reel.thumbnail_public_id:
        cloud_storage.delete_from_cloud(old_public_id)

    return success(reel.to_dict(),
                   OrderingService.update_message(swapped_with, 'caption', 'Reel updated successfully'),
                   swapped_with=swapped_with)


@reels_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete reel')
def delete_reel(id):
    reel = _get_reel_or_404(id)
    public_id = reel.thumbnail_public_id
    reel.delete()
    cloud_storage.delete_from_cloud(public_id)
    return success(message='Reel deleted successfully')
