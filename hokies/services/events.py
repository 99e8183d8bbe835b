from models import db, new_id
from models.event import StoreEvent
from hokies.utils.clock import utcnow, to_naive_utc
from .errors import ValidationError, NotFoundError

EVENT_FIELDS = ("name", "date", "location", "description", "link")


def get_event(event_id: str) -> StoreEvent:
    event = db.session.get(StoreEvent, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event


def list_events(upcoming_from=None):
    query = StoreEvent.query
    if upcoming_from is not None:
        query = query.filter(StoreEvent.date >= upcoming_from)
    return query.order_by(StoreEvent.date.asc()).all()


def _clean(fields: dict) -> dict:
    data = {k: fields[k] for k in EVENT_FIELDS if k in fields}
    if "name" in data:
        data["name"] = (data["name"] or "").strip()
        if not data["name"]:
            raise ValidationError("Event name is required")
    if "date" in data:
        if data["date"] is None:
            raise ValidationError("Event date is required")
        data["date"] = to_naive_utc(data["date"])
    return data


def create_event(fields: dict) -> StoreEvent:
    data = _clean(fields)
    if "name" not in data or "date" not in data:
        raise ValidationError("Event name and date are required")
    event = StoreEvent(id=new_id("event"), created_at=utcnow(), **data)
    db.session.add(event)
    return event


def update_event(event_id: str, fields: dict) -> StoreEvent:
    event = get_event(event_id)
    for key, value in _clean(fields).items():
        setattr(event, key, value)
    return event


def delete_event(event_id: str) -> None:
    db.session.delete(get_event(event_id))
