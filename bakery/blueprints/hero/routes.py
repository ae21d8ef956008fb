"""首页横幅路由"""
from . import hero_bp
from bakery.exceptions import NotFound
from bakery.extensions import db
from bakery.models import HeroImage
from bakery.utils import cloud_storage
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import require_fields, clip_text, parse_order, parse_flag

TEXT_LIMITS = {'title': 150, 'subtitle': 200, 'alt': 200}


def _get_hero_or_404(id):
    hero = db.session.get(HeroImage, id)
    if hero is None:
        raise NotFound('Hero image not found')
    return hero


@hero_bp.route('', methods=['GET'])
@api_route('Failed to fetch hero images')
def list_heroes():
    query = HeroImage.query
    if not is_admin():
        query = query.filter_by(is_active=True)
    heroes = query.order_by(HeroImage.order.asc(), HeroImage.created_at.desc()).all()
    return success([h.to_dict() for h in heroes])


@hero_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to create hero image')
def create_hero():
    """新建横幅；启用时停用其余横幅"""
    data = json_body()
    require_fields(data, ['image'])

    upload = cloud_storage.upload_image(data['image'], 'hero', preset='gallery')
    is_active = parse_flag(data.get('is_active')) is True

    hero = HeroImage(
        image_url=upload['secure_url'],
        public_id=upload['public_id'],
        order=parse_order(data.get('order')),
        is_active=is_active,
    )
    for field, max_length in TEXT_LIMITS.items():
        if data.get(field):
            setattr(hero, field, clip_text(data[field], max_length))

    if is_active:
        HeroImage.deactivate_others()
    hero.save()
    return success(hero.to_dict(), 'Hero image created successfully', 201,
                   cloudinary=cloud_storage.upload_summary(upload))


@hero_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update hero image')
def update_hero(id):
    hero = _get_hero_or_404(id)
    data = json_body()
    updates = {}

    for field, max_length in TEXT_LIMITS.items():
        if data.get(field):
            updates[field] = clip_text(data[field], max_length)
    if 'order' in data:
        updates['order'] = parse_order(data['order'], hero.order)
    is_active = parse_flag(data.get('is_active'))
    if is_active is not None:
        updates['is_active'] = is_active

    old_public_id = None
    if data.get('image') and data['image'] != hero.image_url:
        upload = cloud_storage.upload_image(data['image'], 'hero', preset='gallery')
        updates['image_url'] = upload['secure_url']
        updates['public_id'] = upload['public_id']
        old_public_id = hero.public_id

    if updates.get('is_active'):
        HeroImage.deactivate_others(keep_id=hero.id)
    for field, value in updates.items():
        setattr(hero, field, value)
    db.session.commit()

    if old_public_id and old_public_id != hero.public_id:
        cloud_storage.delete_from_cloud(old_public_id)

    return success(hero.to_dict(), 'Hero image updated successfully')


@hero_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete hero image')
def delete_hero(id):
    hero = _get_hero_or_404(id)
    public_id = hero.public_id
    hero.delete()
    cloud_storage.delete_from_cloud(public_id)
    return success(message='Hero image deleted successfully')
