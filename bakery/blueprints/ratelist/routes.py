"""价目表路由"""
from . import ratelist_bp
from bakery.exceptions import NotFound
from bakery.extensions import db
from bakery.models import RateListEntry
from bakery.services.ordering import OrderingService
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import (
    require_fields, clean_text, clip_text, parse_order, parse_flag,
    validate_price_pair, normalize_unit, is_number
)


def _get_entry_or_404(id):
    entry = db.session.get(RateListEntry, id)
    if entry is None:
        raise NotFound('Item not found')
    return entry


@ratelist_bp.route('', methods=['GET'])
@api_route('Failed to fetch rate list')
def list_entries():
    """按分类、顺序、名称排序；公开访问只返回在售条目"""
    query = RateListEntry.query
    if not is_admin():
        query = query.filter_by(is_available=True)
    entries = query.order_by(
        RateListEntry.category.asc(), RateListEntry.order.asc(), RateListEntry.item.asc()
    ).all()
    return success([e.to_dict() for e in entries])


@ratelist_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to create rate list item')
def create_entry():
    data = json_body()
    require_fields(data, ['category', 'item', 'price'])

    price = data['price']
    discount_price = data.get('discount_price')
    validate_price_pair(price, discount_price)

    entry = RateListEntry(
        category=clean_text(data['category'], 50, 'Category'),
        item=clean_text(data['item'], 100, 'Item name'),
        description=clean_text(data.get('description') or '', 300, 'Description'),
        price=price,
        discount_price=discount_price or None,
        unit=normalize_unit(data.get('unit')),
        is_available=data.get('is_available') is not False,
        order=parse_order(data.get('order')),
    )
    entry.save()
    return success(entry.to_dict(), status=201)


@ratelist_bp.route('/<int:id>', methods=['GET'])
@api_route('Failed to fetch item')
def get_entry(id):
    entry = _get_entry_or_404(id)
    if not entry.is_available and not is_admin():
        raise NotFound('Item not found')
    return success(entry.to_dict())


@ratelist_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update item')
def update_entry(id):
    """部分更新；order 变化时在同一分类内交换顺序"""
    entry = _get_entry_or_404(id)
    data = json_body()
    updates = {}

    if 'category' in data:
        updates['category'] = clip_text(data['category'], 50)
    if 'item' in data:
        updates['item'] = clip_text(data['item'], 100)
    if 'description' in data:
        updates['description'] = clip_text(data['description'], 300)
    if is_number(data.get('price')) and data['price'] >= 0:
        updates['price'] = data['price']
    if 'discount_price' in data:
        discount = data['discount_price']
        if discount is None:
            updates['discount_price'] = None
        elif is_number(discount) and discount >= 0:
            updates['discount_price'] = discount
    if 'unit' in data:
        updates['unit'] = normalize_unit(data['unit'])
    is_available = parse_flag(data.get('is_available'))
    if is_available is not None:
        updates['is_available'] = is_available

    validate_price_pair(updates.get('price', entry.price),
                        updates.get('discount_price', entry.discount_price))

    # 交换范围以条目当前分类为准
    swapped_with = None
    if 'order' in data:
        target = parse_order(data['order'], entry.order)
        swapped_with = OrderingService.apply(entry, target, scope=('category',), label='item')

    for field, value in updates.items():
        setattr(entry, field, value)
    db.session.commit()

    return success(entry.to_dict(),
                   OrderingService.update_message(swapped_with, 'item', 'Item updated successfully'),
                   swapped_with=swapped_with)


@ratelist_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete item')
def delete_entry(id):
    entry = _get_entry_or_404(id)
    entry.delete()
    return success(message='Item deleted successfully')
