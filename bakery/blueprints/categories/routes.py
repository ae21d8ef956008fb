"""菜单分类路由"""
from . import categories_bp
from bakery.exceptions import NotFound, Conflict, ValidationError
from bakery.extensions import db
from bakery.models import Category
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import require_fields, clip_text, parse_order, parse_flag


def _ensure_unique_name(name, exclude_id=None):
    if not name:
        raise ValidationError('Category name cannot be empty')
    query = Category.query.filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first() is not None:
        raise Conflict('Category with this name already exists')


@categories_bp.route('', methods=['GET'])
@api_route('Failed to fetch categories')
def list_categories():
    query = Category.query
    if not is_admin():
        query = query.filter_by(is_active=True)
    categories = query.order_by(Category.order.asc(), Category.created_at.desc()).all()
    return success([c.to_dict() for c in categories])


@categories_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to create category')
def create_category():
    data = json_body()
    require_fields(data, ['name'])

    name = clip_text(data['name'], 100)
    _ensure_unique_name(name)

    category = Category(
        name=name,
        description=clip_text(data['description'], 300) if data.get('description') else None,
        order=parse_order(data.get('order')),
    )
    category.save()
    return success(category.to_dict(), 'Category created', 201)


@categories_bp.route('/<int:id>', methods=['GET'])
@api_route('Failed to fetch category')
def get_category(id):
    category = db.session.get(Category, id)
    if category is None or (not category.is_active and not is_admin()):
        raise NotFound('Category not found')
    return success(category.to_dict())


@categories_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update category')
def update_category(id):
    category = db.session.get(Category, id)
    if category is None:
        raise NotFound('Category not found')

    data = json_body()
    if 'name' in data:
        name = clip_text(data['name'], 100)
        _ensure_unique_name(name, exclude_id=category.id)
        category.name = name
    if 'description' in data:
        category.description = clip_text(data['description'], 300) if data['description'] else None
    if 'order' in data:
        category.order = parse_order(data['order'], category.order)
    is_active = parse_flag(data.get('is_active'))
    if is_active is not None:
        category.is_active = is_active

    db.session.commit()
    return success(category.to_dict(), 'Category updated')


@categories_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete category')
def delete_category(id):
    """删除分类；菜单商品上的 category_id 保持不变"""
    category = db.session.get(Category, id)
    if category is None:
        raise NotFound('Category not found')
    category.delete()
    return success(message='Category deleted')
