"""
Order status rules, totals arithmetic and order numbers.

Payment status moves independently of the order status.
"""
import random
from datetime import datetime

from ..utils.time import order_day

ORDER_STATUSES = ("pending", "confirmed", "preparing", "ready", "cancelled")
ACTIVE_ORDER_STATUSES = ("pending", "confirmed", "preparing", "ready")
PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")
PAYMENT_METHODS = ("cash", "card", "apple pay")

_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"preparing", "cancelled"},
    "preparing": {"ready"},
    "ready": set(),
    "cancelled": set(),
}

_PAYMENT_TRANSITIONS = {
    "pending": {"paid", "failed"},
    "paid": {"refunded"},
    "failed": {"refunded"},
    "refunded": set(),
}


def can_transition(current: str, new: str) -> bool:
    return new in _TRANSITIONS.get(current, set())


def can_cancel(status: str) -> bool:
    return can_transition(status, "cancelled")


def can_transition_payment(current: str, new: str) -> bool:
    return new in _PAYMENT_TRANSITIONS.get(current, set())


def items_subtotal(lines) -> float:
    """Sum of price * quantity over (price, quantity) pairs."""
    return round(sum(price * quantity for price, quantity in lines), 2)


def calculate_totals(subtotal: float, tax_rate: float, discount: float = 0.0) -> dict:
    tax = round(subtotal * tax_rate, 2)
    total = round(max(0.0, subtotal + tax - discount), 2)
    return {"subtotal": round(subtotal, 2), "tax": tax, "discount": discount, "total": total}


def generate_order_number(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """ORD-YYYYMMDD-NNNNN, dated in UTC. Not unique on its own."""
    rng = rng or random
    return f"ORD-{order_day(now)}-{rng.randint(0, 99998):05d}"
