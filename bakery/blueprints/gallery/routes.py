"""相册路由"""
from . import gallery_bp
from bakery.exceptions import NotFound
from bakery.extensions import db
from bakery.models import GalleryImage
from bakery.utils import cloud_storage
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import require_fields, clean_text, clip_text, parse_order, parse_flag
from bakery.utils.security import sanitize_string


def _get_image_or_404(id):
    image = db.session.get(GalleryImage, id)
    if image is None:
        raise NotFound('Image not found')
    return image


@gallery_bp.route('', methods=['GET'])
@api_route('Failed to fetch gallery')
def list_images():
    query = GalleryImage.query
    if not is_admin():
        query = query.filter_by(is_active=True)
    images = query.order_by(GalleryImage.order.asc(), GalleryImage.created_at.desc()).all()
    return success([i.to_dict() for i in images])


@gallery_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to add image')
def create_image():
    data = json_body()
    require_fields(data, ['image', 'caption'])

    caption = clean_text(data['caption'], 200, 'Caption')
    # alt 缺省时沿用标题
    alt = sanitize_string(data.get('alt') or data['caption'])[:200]
    upload = cloud_storage.upload_image(data['image'], 'gallery', preset='gallery')

    image = GalleryImage(
        image_url=upload['secure_url'],
        public_id=upload['public_id'],
        caption=caption,
        alt=alt,
        order=parse_order(data.get('order')),
    )
    image.save()
    return success(image.to_dict(), 'Image added successfully', 201,
                   cloudinary=cloud_storage.upload_summary(upload))


@gallery_bp.route('/<int:id>', methods=['GET'])
@api_route('Failed to fetch image')
def get_image(id):
    image = _get_image_or_404(id)
    if not image.is_active and not is_admin():
        raise NotFound('Image not found')
    return success(image.to_dict())


@gallery_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update image')
def update_image(id):
    image = _get_image_or_404(id)
    data = json_body()
    updates = {}

    if 'caption' in data:
        updates['caption'] = clip_text(data['caption'], 200)
    if 'alt' in data:
        updates['alt'] = clip_text(data['alt'], 200)
    if 'order' in data:
        updates['order'] = parse_order(data['order'], image.order)
    is_active = parse_flag(data.get('is_active'))
    if is_active is not None:
        updates['is_active'] = is_active

    old_public_id = None
    if data.get('image') and data['image'] != image.image_url:
        upload = cloud_storage.upload_image(data['image'], 'gallery', preset='gallery')
        updates['image_url'] = upload['secure_url']
        updates['public_id'] = upload['public_id']
        old_public_id = image.public_id

    for field, value in updates.items():
        setattr(image, field, value)
    db.session.commit()

    if old_public_id and old_public_id != image.public_id:
        cloud_storage.delete_from_cloud(old_public_id)

    return success(image.to_dict(), 'Image updated successfully')


@gallery_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete image')
def delete_image(id):
    image = _get_image_or_404(id)
    public_id = image.public_id
    image.delete()
    cloud_storage.delete_from_cloud(public_id)
    return success(message='Image deleted successfully')
