from flask import request
from models.drop import DropStatus
from hokies.services import drops as drop_service
from hokies.services.errors import ServiceError
from hokies.services.scheduler import get_scheduler
from hokies.schemas.drops import SaveDropRequest, ScheduleDropRequest
from hokies.utils import ok, error, transactional, validate_schema
from . import admin_bp


def _drop_response(drop, message, status=200):
    return ok(drop_service.drop_to_dict(drop, include_items=True), message=message, status=status)


@admin_bp.route("/drops", methods=["GET"])
def list_drops():
    """
    List drops, optionally filtered by status
    ---
    tags: [Admin]
    parameters:
      - in: query
        name: status
        type: string
        enum: [draft, scheduled, live, completed]
    responses:
      200: {description: Drops}
    """
    status = request.args.get("status")
    if status:
        try:
            status = DropStatus(status)
        except ValueError:
            return error("Unknown drop status", status=400)
    drops = drop_service.list_drops(status or None)
    return ok([drop_service.drop_to_dict(d) for d in drops])


@admin_bp.route("/drops/countdowns", methods=["GET"])
def drop_countdowns():
    return ok(get_scheduler().snapshot())


@admin_bp.route("/drops", methods=["POST"])
@validate_schema(SaveDropRequest)
def create_drop():
    """
    Create a drop
    ---
    tags: [Admin]
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: {type: string}
            description: {type: string}
            item_ids: {type: array, items: {type: string}}
            schedule_type: {type: string, enum: [draft, schedule, now]}
            scheduled_date: {type: string, format: date-time}
    responses:
      201: {description: Drop created}
      400: {description: Invalid drop}
      409: {description: Item held by another drop}
    """
    data: SaveDropRequest = request.validated_data
    try:
        with transactional("Failed to create drop"):
            drop = drop_service.save_drop(data.model_dump())
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "Drop created", status=201)


@admin_bp.route("/drops/<drop_id>", methods=["GET"])
def get_drop(drop_id):
    try:
        drop = drop_service.get_drop(drop_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "success")


@admin_bp.route("/drops/<drop_id>", methods=["PUT"])
@validate_schema(SaveDropRequest)
def update_drop(drop_id):
    data: SaveDropRequest = request.validated_data
    try:
        with transactional("Failed to update drop"):
            drop = drop_service.save_drop(data.model_dump(exclude_unset=True), drop_id=drop_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "Drop updated")


@admin_bp.route("/drops/<drop_id>", methods=["DELETE"])
def delete_drop(drop_id):
    try:
        with transactional("Failed to delete drop"):
            drop_service.delete_drop(drop_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(message="Drop deleted")


@admin_bp.route("/drops/<drop_id>/schedule", methods=["POST"])
@validate_schema(ScheduleDropRequest)
def schedule_drop(drop_id):
    data: ScheduleDropRequest = request.validated_data
    try:
        with transactional("Failed to schedule drop"):
            drop = drop_service.schedule_drop(drop_id, data.scheduled_date)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "Drop scheduled")


@admin_bp.route("/drops/<drop_id>/reschedule", methods=["POST"])
@validate_schema(ScheduleDropRequest)
def reschedule_drop(drop_id):
    data: ScheduleDropRequest = request.validated_data
    try:
        with transactional("Failed to reschedule drop"):
            drop = drop_service.reschedule_drop(drop_id, data.scheduled_date)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "Drop rescheduled")


@admin_bp.route("/drops/<drop_id>/cancel", methods=["POST"])
def cancel_drop(drop_id):
    try:
        with transactional("Failed to cancel drop"):
            drop = drop_service.cancel_scheduled_drop(drop_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "Drop moved back to draft")


@admin_bp.route("/drops/<drop_id>/go-live", methods=["POST"])
def go_live(drop_id):
    try:
        with transactional("Failed to launch drop"):
            drop = drop_service.go_live(drop_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "Drop is live")


@admin_bp.route("/drops/<drop_id>/complete", methods=["POST"])
def complete_drop(drop_id):
    try:
        with transactional("Failed to complete drop"):
            drop = drop_service.complete_drop(drop_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return _drop_response(drop, "Drop completed")
