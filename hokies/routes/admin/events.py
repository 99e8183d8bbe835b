from flask import request
from hokies.services import events as event_service
from hokies.services.errors import ServiceError
from hokies.schemas.events import EventRequest, UpdateEventRequest
from hokies.utils import ok, error, transactional, validate_schema
from . import admin_bp


@admin_bp.route("/events", methods=["GET"])
def list_events():
    return ok([e.to_dict() for e in event_service.list_events()])


@admin_bp.route("/events", methods=["POST"])
@validate_schema(EventRequest)
def create_event():
    data: EventRequest = request.validated_data
    try:
        with transactional("Failed to create event"):
            event = event_service.create_event(data.model_dump())
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(event.to_dict(), message="Event created", status=201)


@admin_bp.route("/events/<event_id>", methods=["PUT"])
@validate_schema(UpdateEventRequest)
def update_event(event_id):
    data: UpdateEventRequest = request.validated_data
    try:
        with transactional("Failed to update event"):
            event = event_service.update_event(event_id, data.model_dump(exclude_unset=True))
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(event.to_dict(), message="Event updated")


@admin_bp.route("/events/<event_id>", methods=["DELETE"])
def delete_event(event_id):
    try:
        with transactional("Failed to delete event"):
            event_service.delete_event(event_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(message="Event deleted")
