"""顾客评价路由：公开提交，管理员审核"""
from . import reviews_bp
from bakery.exceptions import NotFound, ValidationError
from bakery.extensions import db
from bakery.models import Review
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.security import rate_limit
from bakery.utils.validators import validate_review_data, parse_flag


def _get_review_or_404(id):
    review = db.session.get(Review, id)
    if review is None:
        raise NotFound('Review not found')
    return review


@reviews_bp.route('', methods=['GET'])
@api_route('Failed to fetch reviews')
def list_reviews():
    """公开访问只返回已审核评价，精选优先"""
    query = Review.query
    if not is_admin():
        query = query.filter_by(is_approved=True)
    reviews = query.order_by(Review.is_featured.desc(), Review.created_at.desc()).all()
    return success([r.to_dict() for r in reviews])


@reviews_bp.route('', methods=['POST'])
@rate_limit('review', setting='REVIEW_RATE_LIMIT')
@api_route('Failed to submit review')
def submit_review():
    data = json_body()
    check = validate_review_data(data)
    if not check.valid:
        raise ValidationError('. '.join(check.errors))

    # 只使用清洗后的字段入库
    review = Review(
        **check.sanitized,
        avatar=None,
        is_approved=False,
        is_featured=False,
    )
    review.save()
    return success({'id': review.id},
                   'Review submitted successfully. It will be visible after approval.', 201)


@reviews_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update review')
def update_review(id):
    """只允许修改审核与精选标记"""
    data = json_body()
    updates = {}
    for flag in ('is_approved', 'is_featured'):
        value = parse_flag(data.get(flag))
        if value is not None:
            updates[flag] = value
    if not updates:
        raise ValidationError('No valid fields to update')

    review = _get_review_or_404(id)
    for field, value in updates.items():
        setattr(review, field, value)
    db.session.commit()
    return success(review.to_dict(), 'Review updated successfully')


@reviews_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete review')
def delete_review(id):
    review = _get_review_or_404(id)
    review.delete()
    return success(message='Review deleted successfully')
