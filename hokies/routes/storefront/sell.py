from flask import request, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from hokies.services import submissions as submission_service
from hokies.services.errors import ServiceError
from hokies.schemas.submissions import SubmissionRequest
from hokies.utils import ok, error, transactional, validate_schema
from . import storefront_bp


@storefront_bp.route("/sell/submissions", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["SUBMISSION_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many submissions from this IP",
)
@validate_schema(SubmissionRequest)
def create_submission():
    """
    Submit an item for consignment
    ---
    tags: [Storefront]
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: {type: string}
            email: {type: string}
            phone: {type: string}
            item_type: {type: string}
            description: {type: string}
            condition: {type: string, enum: [excellent, good, fair, poor]}
            era: {type: string}
            photos: {type: array, items: {type: string}}
    responses:
      201: {description: Submission received}
      400: {description: Invalid submission}
    """
    data: SubmissionRequest = request.validated_data
    try:
        with transactional("Failed to save submission"):
            submission = submission_service.create_submission(data.model_dump())
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(
        submission_service.submission_to_dict(submission),
        message="Thanks! We'll review your item and get back to you.",
        status=201,
    )


@storefront_bp.route("/sell/submissions/<submission_id>", methods=["GET"])
def get_submission(submission_id):
    try:
        submission = submission_service.get_submission(submission_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(submission_service.submission_to_dict(submission))


@storefront_bp.route("/sell/submissions/<submission_id>/accept", methods=["POST"])
def accept_offer(submission_id):
    """
    Seller accepts the admin's offer
    ---
    tags: [Storefront]
    responses:
      200: {description: Offer accepted, item added to inventory}
      409: {description: Submission no longer pending approval}
    """
    try:
        with transactional("Failed to accept offer"):
            submission, item = submission_service.seller_approve(submission_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(
        {"submission": submission_service.submission_to_dict(submission), "item_id": item.id},
        message="Thank you! Your item has been approved. We will contact you shortly to arrange pickup/shipping.",
    )
