from flask import request
from models.submission import SubmissionStatus
from hokies.services import submissions as submission_service
from hokies.services.errors import ServiceError
from hokies.schemas.submissions import ReviewSubmissionRequest, RejectSubmissionRequest
from hokies.utils import ok, error, transactional, validate_schema
from . import admin_bp


@admin_bp.route("/submissions", methods=["GET"])
def list_submissions():
    status = request.args.get("status")
    if status:
        try:
            status = SubmissionStatus(status)
        except ValueError:
            return error("Unknown submission status", status=400)
    rows = submission_service.list_submissions(status or None)
    return ok([submission_service.submission_to_dict(s, admin=True) for s in rows])


@admin_bp.route("/submissions/<submission_id>", methods=["GET"])
def get_submission(submission_id):
    try:
        submission = submission_service.get_submission(submission_id)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(submission_service.submission_to_dict(submission, admin=True))


@admin_bp.route("/submissions/<submission_id>/review", methods=["POST"])
@validate_schema(ReviewSubmissionRequest)
def review_submission(submission_id):
    """
    Send the seller an offer
    ---
    tags: [Admin]
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            price: {type: number}
            notes: {type: string}
    responses:
      200: {description: Offer recorded, approval URL returned}
      409: {description: Submission already reviewed}
    """
    data: ReviewSubmissionRequest = request.validated_data
    try:
        with transactional("Failed to review submission"):
            submission, url = submission_service.review_submission(
                submission_id, data.price, data.notes
            )
    except ServiceError as e:
        return error(e.message, status=e.status)
    payload = submission_service.submission_to_dict(submission, admin=True)
    payload["approval_url"] = url
    return ok(payload, message="Offer sent to seller")


@admin_bp.route("/submissions/<submission_id>/reject", methods=["POST"])
@validate_schema(RejectSubmissionRequest)
def reject_submission(submission_id):
    data: RejectSubmissionRequest = request.validated_data
    try:
        with transactional("Failed to reject submission"):
            submission = submission_service.reject_submission(submission_id, data.reason)
    except ServiceError as e:
        return error(e.message, status=e.status)
    return ok(submission_service.submission_to_dict(submission, admin=True), message="Submission rejected")
