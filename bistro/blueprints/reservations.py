import logging
from flask import Blueprint, g, jsonify, current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models import Reservation
from ..http import ApiError, check_table_number, parse_body, parse_args, not_found, unique_violation
from ..auth import login_required, admin_required, check_owner, is_admin
from ..dto import reservation_dto
from ..schemas import (
    AvailabilityQuery,
    CreateReservationRequest,
    ReservationListQuery,
    ReservationStatusRequest,
    UpdateReservationRequest,
)
from ..rules.reservations import ACTIVE_STATUSES, available_tables, can_cancel, can_transition, is_table_free

logger = logging.getLogger(__name__)

bp = Blueprint("reservations", __name__)

SLOT_TAKEN = "This table is already reserved for this time slot"


def _get_reservation(reservation_id: int) -> Reservation:
    res = db.session.get(Reservation, reservation_id)
    if res is None:
        raise not_found("Reservation")
    return res


def _commit_slot():
    # the partial unique index catches a concurrent booking of the same slot
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if unique_violation(e, "uq_reservation_active_slot", "reservations.table_number"):
            raise ApiError(409, "SLOT_TAKEN", SLOT_TAKEN)
        raise


@bp.get("/reservations/available-tables")
def get_available_tables():
    query = parse_args(AvailabilityQuery)
    tables = available_tables(query.date, query.time, current_app.config["TOTAL_TABLES"])
    return jsonify(date=query.date.isoformat(), time=query.time, availableTables=tables)


@bp.post("/reservations")
@login_required
def create_reservation():
    data = parse_body(CreateReservationRequest)
    check_table_number(data.table_number)

    if not is_table_free(data.table_number, data.reservation_date, data.reservation_time):
        raise ApiError(409, "SLOT_TAKEN", SLOT_TAKEN)

    res = Reservation(
        user_id=g.user["id"],
        customer_name=data.customer_name,
        customer_email=data.customer_email.lower(),
        customer_phone=data.customer_phone,
        table_number=data.table_number,
        guest_count=data.guest_count,
        reservation_date=data.reservation_date,
        reservation_time=data.reservation_time,
        special_requests=data.special_requests,
        status="pending",
    )
    db.session.add(res)
    _commit_slot()

    logger.info("reservation %s: table %s on %s %s", res.id, res.table_number,
                res.reservation_date, res.reservation_time)
    return jsonify(message="Reservation created successfully", reservation=reservation_dto(res)), 201


@bp.get("/reservations")
@login_required
def list_my_reservations():
    query = parse_args(ReservationListQuery)
    q = Reservation.query.filter(Reservation.user_id == g.user["id"])
    if query.status:
        q = q.filter(Reservation.status == query.status)
    rows = q.order_by(Reservation.reservation_date.desc(), Reservation.reservation_time.desc()).all()
    return jsonify(reservations=[reservation_dto(r) for r in rows])


@bp.get("/reservations/<int:reservation_id>")
@login_required
def get_reservation(reservation_id: int):
    res = _get_reservation(reservation_id)
    check_owner(res)
    return jsonify(reservation=reservation_dto(res))


@bp.put("/reservations/<int:reservation_id>")
@login_required
def update_reservation(reservation_id: int):
    res = _get_reservation(reservation_id)
    check_owner(res)
    data = parse_body(UpdateReservationRequest)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    new_status = changes.get("status")
    if new_status == res.status and new_status in ACTIVE_STATUSES:
        del changes["status"]
    elif new_status is not None:
        if not can_transition(res.status, new_status):
            raise ApiError(400, "INVALID_STATE", f"Cannot move reservation from {res.status} to {new_status}")
        # only staff confirm a booking
        if new_status == "confirmed" and not is_admin():
            raise ApiError(403, "FORBIDDEN", "Only an admin can confirm a reservation")
    if "table_number" in changes:
        check_table_number(changes["table_number"])
    if "customer_email" in changes:
        changes["customer_email"] = changes["customer_email"].lower()

    table_number = changes.get("table_number", res.table_number)
    day = changes.get("reservation_date", res.reservation_date)
    time = changes.get("reservation_time", res.reservation_time)
    status = changes.get("status", res.status)
    if status in ACTIVE_STATUSES and not is_table_free(table_number, day, time, exclude_id=res.id):
        raise ApiError(409, "SLOT_TAKEN", SLOT_TAKEN)

    for field, value in changes.items():
        setattr(res, field, value)
    _commit_slot()

    return jsonify(message="Reservation updated successfully", reservation=reservation_dto(res))


@bp.delete("/reservations/<int:reservation_id>")
@login_required
def cancel_reservation(reservation_id: int):
    res = _get_reservation(reservation_id)
    check_owner(res)
    if not can_cancel(res.status):
        raise ApiError(400, "INVALID_STATE", f"Cannot cancel reservation with status: {res.status}")

    res.status = "cancelled"
    db.session.commit()
    logger.info("reservation %s cancelled", res.id)
    return jsonify(message="Reservation cancelled successfully", reservation=reservation_dto(res))


@bp.get("/admin/reservations")
@admin_required
def list_reservations():
    """
    Admin list across all users.
    Query: ?status=pending&date=YYYY-MM-DD
    """
    query = parse_args(ReservationListQuery)
    q = Reservation.query
    if query.status:
        q = q.filter(Reservation.status == query.status)
    if query.date:
        q = q.filter(Reservation.reservation_date == query.date)
    rows = q.order_by(
        Reservation.reservation_date.desc(),
        Reservation.reservation_time.desc(),
        Reservation.table_number.asc(),
    ).all()
    return jsonify(reservations=[reservation_dto(r) for r in rows])


@bp.put("/admin/reservations/<int:reservation_id>/status")
@admin_required
def update_reservation_status(reservation_id: int):
    res = _get_reservation(reservation_id)
    data = parse_body(ReservationStatusRequest)

    if data.status != res.status and not can_transition(res.status, data.status):
        logger.warning("reservation %s forced from %s to %s", res.id, res.status, data.status)
    res.status = data.status
    _commit_slot()

    return jsonify(message="Reservation status updated", reservation=reservation_dto(res))
