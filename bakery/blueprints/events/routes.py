"""活动路由"""
from . import events_bp
from bakery.exceptions import NotFound
from bakery.extensions import db
from bakery.models import Event
from bakery.services.ordering import OrderingService
from bakery.utils import cloud_storage
from bakery.utils.auth import is_admin
from bakery.utils.decorators import admin_required, api_route
from bakery.utils.responses import success, json_body
from bakery.utils.validators import (
    require_fields, clean_text, clip_text, parse_order, parse_flag,
    parse_datetime
)

FOLDER = 'events'
PRESET = 'gallery'


def _get_event_or_404(id):
    event = db.session.get(Event, id)
    if event is None:
        raise NotFound('Event not found')
    return event


@events_bp.route('', methods=['GET'])
@api_route('Failed to fetch events')
def list_events():
    query = Event.query
    if not is_admin():
        query = query.filter_by(is_active=True)
    events = query.order_by(Event.order.asc(), Event.date.desc()).all()
    return success([e.to_dict() for e in events])


@events_bp.route('', methods=['POST'])
@admin_required
@api_route('Failed to add event')
def create_event():
    data = json_body()
    require_fields(data, ['title', 'venue', 'date', 'cover_image'])

    title = clean_text(data['title'], 150, 'Title')
    venue = clean_text(data['venue'], 200, 'Venue')
    description = clean_text(data.get('description') or '', 1000, 'Description')
    highlights = clean_text(data.get('highlights') or '', 200, 'Highlights')
    date = parse_datetime(data['date'], 'Date')

    cover = cloud_storage.upload_image(data['cover_image'], FOLDER, preset=PRESET)
    images, image_public_ids = [], []
    if isinstance(data.get('images'), list):
        images, image_public_ids = cloud_storage.upload_images(data['images'], FOLDER, preset=PRESET)

    event = Event(
        title=title,
        venue=venue,
        date=date,
        description=description,
        images=images,
        image_public_ids=image_public_ids,
        cover_image=cover['secure_url'],
        cover_image_public_id=cover['public_id'],
        highlights=highlights,
        order=parse_order(data.get('order')),
    )
    event.save()
    return success(event.to_dict(), 'Event added successfully', 201,
                   cloudinary=cloud_storage.upload_summary(cover))


@events_bp.route('/<int:id>', methods=['GET'])
@api_route('Failed to fetch event')
def get_event(id):
    event = _get_event_or_404(id)
    if not event.is_active and not is_admin():
        raise NotFound('Event not found')
    return success(event.to_dict())


@events_bp.route('/<int:id>', methods=['PUT'])
@admin_required
@api_route('Failed to update event')
def update_event(id):
    """部分更新；传入 images 时整体替换相册，order 变化时全局交换"""
    event = _get_event_or_404(id)
    data = json_body()
    updates = {}
    stale_ids = []

    if 'title' in data:
        updates['title'] = clip_text(data['title'], 150)
    if 'venue' in data:
        updates['venue'] = clip_text(data['venue'], 200)
    if 'description' in data:
        updates['description'] = clip_text(data['description'], 1000)
    if 'highlights' in data:
        updates['highlights'] = clip_text(data['highlights'], 200)
    if 'date' in data:
        updates['date'] = parse_datetime(data['date'], 'Date')
    is_active = parse_flag(data.get('is_active'))
    if is_active is not None:
        updates['is_active'] = is_active

    cover_image = data.get('cover_image')
    if cover_image and cover_image != event.cover_image:
        cover = cloud_storage.upload_image(cover_image, FOLDER, preset=PRESET)
        updates['cover_image'] = cover['secure_url']
        updates['cover_image_public_id'] = cover['public_id']
        if event.cover_image_public_id != cover['public_id']:
            stale_ids.append(event.cover_image_public_id)

    if isinstance(data.get('images'), list):
        images, image_public_ids = cloud_storage.upload_images(data['images'], FOLDER, preset=PRESET)
        updates['images'] = images
        updates['image_public_ids'] = image_public_ids
        stale_ids.extend(pid for pid in event.image_public_ids or [] if pid not in image_public_ids)

    swapped_with = None
    if 'order' in data:
        target = parse_order(data['order'], event.order)
        swapped_with = OrderingService.apply(event, target, label='title')

    for field, value in updates.items():
        setattr(event, field, value)
    db.session.commit()

    cloud_storage.delete_many(stale_ids)

    return success(event.to_dict(),
                   OrderingService.update_message(swapped_with, 'title', 'Event updated successfully'),
                   swapped_with=swapped_with)


@events_bp.route('/<int:id>', methods=['DELETE'])
@admin_required
@api_route('Failed to delete event')
def delete_event(id):
    event = _get_event_or_404(id)
    public_ids = [event.cover_image_public_id, *(event.image_public_ids or [])]
    event.delete()
    cloud_storage.delete_many(public_ids)
    return success(message='Event deleted successfully')
