"""
Table availability and reservation status rules.
"""
from datetime import date
from sqlalchemy import select
from ..extensions import db
from ..models import Reservation

RESERVATION_STATUSES = ("pending", "confirmed", "completed", "cancelled")
ACTIVE_STATUSES = ("pending", "confirmed")

_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


def can_transition(current: str, new: str) -> bool:
    return new in _TRANSITIONS.get(current, set())


def can_cancel(status: str) -> bool:
    return can_transition(status, "cancelled")


def booked_tables(day: date, time: str, exclude_id: int | None = None) -> set[int]:
    """Table numbers held by an active reservation at exactly (day, time)."""
    stmt = select(Reservation.table_number).where(
        Reservation.reservation_date == day,
        Reservation.reservation_time == time,
        Reservation.status.in_(ACTIVE_STATUSES),
    )
    if exclude_id is not None:
        stmt = stmt.where(Reservation.id != exclude_id)
    return set(db.session.execute(stmt).scalars())


def is_table_free(table_number: int, day: date, time: str, exclude_id: int | None = None) -> bool:
    return table_number not in booked_tables(day, time, exclude_id=exclude_id)


def available_tables(day: date, time: str, total_tables: int) -> list[int]:
    booked = booked_tables(day, time)
    return [n for n in range(1, total_tables + 1) if n not in booked]
