"""菜单商品路由"""
from flask import request

from . import menu_bp
from bakery.exceptions import NotFound, ValidationError
from bakery.extensions import db
from bakery.models import MenuItem, Category
from bakery.utils import cloud_storage
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import (
    require_fields, clean_text, clip_text, parse_order, parse_flag,
    validate_price_pair, normalize_unit, is_number
)


def _get_item_or_404(id):
    item = db.session.get(MenuItem, id)
    if item is None:
        raise NotFound('Menu item not found')
    return item


def _resolve_category_id(value):
    """category_id 可为空；非空时必须指向已存在的分类"""
    if value is None or value == '':
        return None
    if not isinstance(value, int) or isinstance(value, bool) or db.session.get(Category, value) is None:
        raise ValidationError('Invalid category')
    return value


@menu_bp.route('', methods=['GET'])
@api_route('Failed to fetch menu')
def list_items():
    query = MenuItem.query
    if not is_admin():
        query = query.filter_by(is_active=True)
    category_id = request.args.get('category_id', type=int)
    if category_id is not None:
        query = query.filter_by(category_id=category_id)
    items = query.order_by(MenuItem.order.asc(), MenuItem.created_at.desc()).all()
    return success([i.to_dict() for i in items])


@menu_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to add menu item')
def create_item():
    data = json_body()
    require_fields(data, ['name', 'description', 'image'])

    name = clean_text(data['name'], 100, 'Name')
    description = clean_text(data['description'], 500, 'Description')
    badge = clip_text(data['badge'], 50) if data.get('badge') else None

    price = data.get('price', 0)
    discount_price = data.get('discount_price')
    validate_price_pair(price, discount_price)

    category_id = _resolve_category_id(data.get('category_id'))
    upload = cloud_storage.upload_image(data['image'], 'menu', preset='menu')

    item = MenuItem(
        name=name,
        description=description,
        image_url=upload['secure_url'],
        public_id=upload['public_id'],
        badge=badge,
        price=price,
        discount_price=discount_price,
        price_unit=normalize_unit(data.get('price_unit')),
        category_id=category_id,
        order=parse_order(data.get('order')),
    )
    item.save()
    return success(item.to_dict(), 'Menu item added successfully', 201,
                   cloudinary=cloud_storage.upload_summary(upload))


@menu_bp.route('/<int:id>', methods=['GET'])
@api_route('Failed to fetch menu item')
def get_item(id):
    item = _get_item_or_404(id)
    if not item.is_active and not is_admin():
        raise NotFound('Menu item not found')
    return success(item.to_dict())


@menu_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update menu item')
def update_item(id):
    item = _get_item_or_404(id)
    data = json_body()
    updates = {}

    if 'name' in data:
        updates['name'] = clip_text(data['name'], 100)
    if 'description' in data:
        updates['description'] = clip_text(data['description'], 500)
    if 'badge' in data:
        updates['badge'] = clip_text(data['badge'], 50) if data['badge'] else None
    if is_number(data.get('price')):
        updates['price'] = data['price']
    if 'discount_price' in data:
        updates['discount_price'] = data['discount_price'] if is_number(data['discount_price']) else None
    if 'price_unit' in data:
        updates['price_unit'] = normalize_unit(data['price_unit'])
    if 'category_id' in data:
        updates['category_id'] = _resolve_category_id(data['category_id'])
    if 'order' in data:
        updates['order'] = parse_order(data['order'], item.order)
    is_active = parse_flag(data.get('is_active'))
    if is_active is not None:
        updates['is_active'] = is_active

    # 以合并后的值校验价格关系
    validate_price_pair(updates.get('price', item.price),
                        updates.get('discount_price', item.discount_price))

    old_public_id = None
    if data.get('image') and data['image'] != item.image_url:
        upload = cloud_storage.upload_image(data['image'], 'menu', preset='menu')
        updates['image_url'] = upload['secure_url']
        updates['public_id'] = upload['public_id']
        old_public_id = item.public_id

    for field, value in updates.items():
        setattr(item, field, value)
    db.session.commit()

    if old_public_id and old_public_id != item.public_id:
        cloud_storage.delete_from_cloud(old_public_id)

    return success(item.to_dict(), 'Menu item updated successfully')


@menu_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete menu item')
def delete_item(id):
    item = _get_item_or_404(id)
    public_id = item.public_id
    item.delete()
    cloud_storage.delete_from_cloud(public_id)
    return success(message='Menu item deleted successfully')
