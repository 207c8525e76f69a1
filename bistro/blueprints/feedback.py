import logging
from flask import Blueprint, g, jsonify
from ..extensions import db
from ..models import Feedback, Reservation, User
from ..http import parse_body, parse_args, not_found
from ..auth import login_required, admin_required, check_owner
from ..dto import feedback_dto
from ..schemas import CreateFeedbackRequest, FeedbackListQuery, FeedbackResponseRequest

logger = logging.getLogger(__name__)

bp = Blueprint("feedback", __name__)


def _get_feedback(feedback_id: int) -> Feedback:
    fb = db.session.get(Feedback, feedback_id)
    if fb is None:
        raise not_found("Feedback")
    return fb


@bp.post("/feedback")
@login_required
def submit_feedback():
    data = parse_body(CreateFeedbackRequest)
    if data.reservation_id is not None and db.session.get(Reservation, data.reservation_id) is None:
        raise not_found("Reservation")

    # name and email fall back to the submitting account
    user = db.session.get(User, g.user["id"])
    if user is None:
        raise not_found("User")

    fb = Feedback(
        user_id=user.id,
        reservation_id=data.reservation_id,
        customer_name=data.customer_name or user.name,
        customer_email=(data.customer_email or user.email).lower(),
        rating=data.rating,
        category=data.category,
        comment=data.comment,
    )
    db.session.add(fb)
    db.session.commit()

    logger.info("feedback %s submitted (rating %s)", fb.id, fb.rating)
    return jsonify(message="Feedback submitted successfully", feedback=feedback_dto(fb)), 201


@bp.get("/feedback/my-feedback")
@login_required
def my_feedback():
    rows = (
        Feedback.query
        .filter(Feedback.user_id == g.user["id"])
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        .all()
    )
    return jsonify(feedback=[feedback_dto(f) for f in rows])


@bp.get("/feedback/<int:feedback_id>")
@login_required
def get_feedback(feedback_id: int):
    fb = _get_feedback(feedback_id)
    check_owner(fb)
    return jsonify(feedback=feedback_dto(fb))


@bp.get("/admin/feedback")
@admin_required
def list_feedback():
    query = parse_args(FeedbackListQuery)
    q = Feedback.query
    if query.category:
        q = q.filter(Feedback.category == query.category)
    if query.min_rating is not None:
        q = q.filter(Feedback.rating >= query.min_rating)
    rows = q.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()
    return jsonify(feedback=[feedback_dto(f) for f in rows])


@bp.put("/admin/feedback/<int:feedback_id>")
@admin_required
def respond_to_feedback(feedback_id: int):
    fb = _get_feedback(feedback_id)
    data = parse_body(FeedbackResponseRequest)
    fb.admin_response = data.admin_response
    db.session.commit()
    return jsonify(message="Feedback response saved", feedback=feedback_dto(fb))


@bp.delete("/admin/feedback/<int:feedback_id>")
@admin_required
def delete_feedback(feedback_id: int):
    fb = _get_feedback(feedback_id)
    db.session.delete(fb)
    db.session.commit()
    logger.info("feedback %s deleted", feedback_id)
    return jsonify(message="Feedback deleted successfully")
