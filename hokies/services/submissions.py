"""Seller consignment workflow: submit, admin offer, seller acceptance."""
import logging
from flask import current_app
from models import db, new_id
from models.submission import SellerSubmission, SubmissionPhoto, SubmissionStatus
from models.inventory import ItemCondition
from hokies.metrics import SUBMISSION_OUTCOMES
from hokies.utils.clock import utcnow, isoformat
from .errors import ValidationError, NotFoundError, ConflictError
from .inventory import create_item, to_money

logger = logging.getLogger(__name__)

MIN_PHOTOS = 1
MAX_PHOTOS = 5
PAYOUT_RATE = 0.6

SUBMISSION_TRANSITIONS = {
    SubmissionStatus.PENDING_ADMIN: frozenset({SubmissionStatus.PENDING_SELLER, SubmissionStatus.REJECTED}),
    SubmissionStatus.PENDING_SELLER: frozenset({SubmissionStatus.APPROVED, SubmissionStatus.REJECTED}),
    SubmissionStatus.APPROVED: frozenset(),
    SubmissionStatus.REJECTED: frozenset(),
}

BASE_PRICES = {
    "hoodie": (25, 45),
    "jacket": (40, 90),
    "tshirt": (15, 35),
    "jersey": (30, 70),
    "hat": (10, 25),
    "other": (15, 40),
}

CONDITION_MULTIPLIERS = {
    "excellent": 1.0,
    "good": 0.8,
    "fair": 0.6,
    "poor": 0.4,
}

ERA_BONUS = {
    "2020s": 0,
    "2010s": 5,
    "2000s": 10,
    "1990s": 15,
    "1980s": 20,
    "older": 25,
}


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def estimate_payout(item_type, condition, era=None) -> str:
    """Price range we expect to pay the seller, e.g. ``"$12 - $22"``."""
    low, high = BASE_PRICES.get((item_type or "").lower(), BASE_PRICES["other"])
    multiplier = CONDITION_MULTIPLIERS.get((condition or "").lower(), 0.8)
    bonus = ERA_BONUS.get(era, 0) if era else 0
    min_price = _round_half_up((low * multiplier + bonus) * PAYOUT_RATE)
    max_price = _round_half_up((high * multiplier + bonus) * PAYOUT_RATE)
    return f"${min_price} - ${max_price}"


def approval_url(submission_id: str) -> str:
    base = (current_app.config.get("PUBLIC_BASE_URL") or "").rstrip("/")
    return f"{base}/seller-approval.html?id={submission_id}"


def _move(submission: SellerSubmission, target: SubmissionStatus):
    current = submission.status
    if target not in SUBMISSION_TRANSITIONS[current]:
        raise ConflictError(
            f"Submission cannot move from {current.value} to {target.value}"
        )
    submission.status = target
    SUBMISSION_OUTCOMES.labels(target.value).inc()
    logger.info("Submission %s moved %s -> %s", submission.id, current.value, target.value)


def get_submission(submission_id: str) -> SellerSubmission:
    submission = db.session.get(SellerSubmission, submission_id)
    if submission is None:
        raise NotFoundError("Submission not found")
    return submission


def _get_for_update(submission_id: str) -> SellerSubmission:
    submission = (
        SellerSubmission.query.filter_by(id=submission_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if submission is None:
        raise NotFoundError("Submission not found")
    return submission


def list_submissions(status: SubmissionStatus = None):
    query = SellerSubmission.query
    if status is not None:
        query = query.filter_by(status=status)
    return query.order_by(SellerSubmission.created_at.desc()).all()


def create_submission(fields: dict) -> SellerSubmission:
    for key in ("name", "email", "item_type", "description", "condition"):
        if not (fields.get(key) or "").strip():
            raise ValidationError(f"{key.replace('_', ' ').capitalize()} is required")
    condition = fields["condition"].strip().lower()
    if condition not in {c.value for c in ItemCondition}:
        raise ValidationError(
            "Condition must be one of: " + ", ".join(c.value for c in ItemCondition)
        )
    photos = [p for p in (fields.get("photos") or []) if p]
    if not MIN_PHOTOS <= len(photos) <= MAX_PHOTOS:
        raise ValidationError(f"Please upload between {MIN_PHOTOS} and {MAX_PHOTOS} photos")

    item_type = fields["item_type"].strip().lower()
    era = (fields.get("era") or "").strip() or None
    submission = SellerSubmission(
        id=new_id("submission"),
        name=fields["name"].strip(),
        email=fields["email"].strip(),
        phone=(fields.get("phone") or "").strip() or None,
        item_type=item_type,
        description=fields["description"].strip(),
        condition=condition,
        era=era,
        estimate=fields.get("estimate") or estimate_payout(item_type, condition, era),
        status=SubmissionStatus.PENDING_ADMIN,
        created_at=utcnow(),
    )
    submission.photos = [SubmissionPhoto(position=i, url=u) for i, u in enumerate(photos)]
    db.session.add(submission)
    SUBMISSION_OUTCOMES.labels(SubmissionStatus.PENDING_ADMIN.value).inc()
    logger.info("Seller submission %s received (%s)", submission.id, item_type)
    return submission


def review_submission(submission_id: str, price, notes=None, now=None):
    """Admin offer: pending_admin -> pending_seller. Returns (submission, approval_url)."""
    now = now or utcnow()
    try:
        amount = to_money(price, "price") if price is not None else None
    except ValidationError:
        amount = None
    if amount is None or amount <= 0:
        raise ValidationError("Please enter a valid price")
    submission = _get_for_update(submission_id)
    if submission.status is not SubmissionStatus.PENDING_ADMIN:
        raise ConflictError("This submission has already been reviewed")
    _move(submission, SubmissionStatus.PENDING_SELLER)
    submission.admin_price = amount
    submission.admin_notes = notes
    submission.reviewed_at = now
    return submission, approval_url(submission.id)


def seller_approve(submission_id: str, now=None):
    """Seller accepts the offer; creates exactly one inventory item."""
    now = now or utcnow()
    submission = _get_for_update(submission_id)
    if submission.status is not SubmissionStatus.PENDING_SELLER:
        raise ConflictError("This submission is no longer pending approval")
    _move(submission, SubmissionStatus.APPROVED)
    item = create_item(
        {
            "name": f"{submission.item_type} - {submission.era or 'Vintage'} VT",
            "description": submission.description,
            "price": 0,
            "cost": submission.admin_price or 0,
            "category": submission.item_type,
            "size": "TBD",
            "condition": submission.condition,
            "images": submission.photo_urls,
            "available": True,
            "submission_id": submission.id,
        },
        prefix="sub",
    )
    submission.seller_approved_at = now
    submission.inventory_item_id = item.id
    return submission, item


def reject_submission(submission_id: str, reason=None, now=None) -> SellerSubmission:
    now = now or utcnow()
    submission = _get_for_update(submission_id)
    if submission.status not in (SubmissionStatus.PENDING_ADMIN, SubmissionStatus.PENDING_SELLER):
        raise ConflictError("This submission has already been closed")
    previous = submission.status
    _move(submission, SubmissionStatus.REJECTED)
    submission.rejected_from = previous
    submission.admin_notes = (reason or "").strip() or "No reason provided"
    submission.reviewed_at = now
    return submission


def submission_to_dict(submission: SellerSubmission, admin=False):
    data = {
        "id": submission.id,
        "item_type": submission.item_type,
        "description": submission.description,
        "condition": submission.condition,
        "era": submission.era,
        "estimate": submission.estimate,
        "status": submission.status.value,
        "admin_price": float(submission.admin_price) if submission.admin_price is not None else None,
        "photos": submission.photo_urls,
        "created_at": isoformat(submission.created_at),
        "reviewed_at": isoformat(submission.reviewed_at),
        "seller_approved_at": isoformat(submission.seller_approved_at),
    }
    if admin:
        data.update(
            {
                "name": submission.name,
                "email": submission.email,
                "phone": submission.phone,
                "admin_notes": submission.admin_notes,
                "rejected_from": submission.rejected_from.value if submission.rejected_from else None,
                "inventory_item_id": submission.inventory_item_id,
            }
        )
        if submission.status is SubmissionStatus.PENDING_SELLER:
            data["approval_url"] = approval_url(submission.id)
    return data
