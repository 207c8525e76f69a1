import logging
from flask import Blueprint, g, jsonify, current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models import MenuItem, Order, OrderItem, Reservation
from ..http import ApiError, check_table_number, parse_body, parse_args, not_found, unique_violation
from ..auth import login_required, admin_required, check_owner
from ..dto import order_dto
from ..schemas import CreateOrderRequest, OrderListQuery, OrderStatusRequest, PaymentRequest
from ..rules.orders import (
    ACTIVE_ORDER_STATUSES,
    calculate_totals,
    can_cancel,
    can_transition,
    can_transition_payment,
    generate_order_number,
    items_subtotal,
)

logger = logging.getLogger(__name__)

bp = Blueprint("orders", __name__)


def _get_order(order_id: int) -> Order:
    order = db.session.get(Order, order_id)
    if order is None:
        raise not_found("Order")
    return order


def _load_menu(data: CreateOrderRequest) -> dict[int, MenuItem]:
    ids = {line.menu_item_id for line in data.items}
    menu = {m.id: m for m in MenuItem.query.filter(MenuItem.id.in_(ids))}
    for line in data.items:
        if line.menu_item_id not in menu:
            raise ApiError(404, "NOT_FOUND", f"Menu item {line.menu_item_id} not found")
    return menu


def _priced_lines(data: CreateOrderRequest, menu: dict[int, MenuItem], trust_client: bool) -> list[OrderItem]:
    lines = []
    for line in data.items:
        item = menu[line.menu_item_id]
        if trust_client:
            name = line.item_name or item.name
            price = line.price if line.price is not None else item.price
        else:
            name, price = item.name, item.price
        lines.append(OrderItem(
            menu_item_id=item.id,
            item_name=name,
            quantity=line.quantity,
            price=price,
            special_instructions=line.special_instructions,
        ))
    return lines


def _totals(data: CreateOrderRequest, lines: list[OrderItem], trust_client: bool) -> dict:
    computed = items_subtotal((l.price, l.quantity) for l in lines)
    if not trust_client:
        return calculate_totals(computed, current_app.config["TAX_RATE"], data.discount)

    subtotal = data.subtotal if data.subtotal is not None else computed
    tax = data.tax or 0.0
    total = data.total if data.total is not None else round(max(0.0, subtotal + tax - data.discount), 2)
    return {"subtotal": subtotal, "tax": tax, "discount": data.discount, "total": total}


@bp.post("/orders")
@login_required
def create_order():
    data = parse_body(CreateOrderRequest)
    check_table_number(data.table_number)
    if data.reservation_id is not None and db.session.get(Reservation, data.reservation_id) is None:
        raise not_found("Reservation")

    trust_client = current_app.config["TRUST_CLIENT_TOTALS"]
    menu = _load_menu(data)
    lines = _priced_lines(data, menu, trust_client)

    order = Order(
        user_id=g.user["id"],
        reservation_id=data.reservation_id,
        order_number=generate_order_number(),
        table_number=data.table_number,
        items=lines,
        payment_method=data.payment_method,
        special_requests=data.special_requests,
        status="pending",
        payment_status="pending",
        **_totals(data, lines, trust_client),
    )
    db.session.add(order)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if unique_violation(e, "ix_orders_order_number", "orders.order_number"):
            raise ApiError(409, "ORDER_NUMBER_TAKEN", "Order number collision, please resubmit the order")
        raise

    logger.info("order %s created for table %s, total %.2f", order.order_number, order.table_number, order.total)
    return jsonify(message="Order created successfully", order=order_dto(order)), 201


@bp.get("/orders")
@login_required
def list_my_orders():
    query = parse_args(OrderListQuery)
    q = Order.query.filter(Order.user_id == g.user["id"])
    if query.status:
        q = q.filter(Order.status == query.status)
    rows = q.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return jsonify(orders=[order_dto(o) for o in rows])


@bp.get("/orders/<int:order_id>")
@login_required
def get_order(order_id: int):
    order = _get_order(order_id)
    check_owner(order)
    return jsonify(order=order_dto(order))


@bp.get("/admin/orders")
@admin_required
def list_orders():
    query = parse_args(OrderListQuery)
    q = Order.query
    if query.status:
        q = q.filter(Order.status == query.status)
    if query.payment_status:
        q = q.filter(Order.payment_status == query.payment_status)
    if query.table_number:
        q = q.filter(Order.table_number == query.table_number)
    rows = q.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return jsonify(orders=[order_dto(o) for o in rows])


@bp.get("/admin/orders/table/<int:table_number>")
@admin_required
def table_orders(table_number: int):
    rows = (
        Order.query
        .filter(Order.table_number == table_number, Order.status.in_(ACTIVE_ORDER_STATUSES))
        .order_by(Order.created_at.asc(), Order.id.asc())
        .all()
    )
    return jsonify(tableNumber=table_number, orders=[order_dto(o) for o in rows])


@bp.put("/admin/orders/<int:order_id>/status")
@admin_required
def update_order_status(order_id: int):
    order = _get_order(order_id)
    data = parse_body(OrderStatusRequest)

    if data.status != order.status and not can_transition(order.status, data.status):
        logger.warning("order %s forced from %s to %s", order.order_number, order.status, data.status)
    order.status = data.status
    db.session.commit()

    return jsonify(message=f"Order status updated to {data.status}", order=order_dto(order))


@bp.put("/admin/orders/<int:order_id>/payment")
@admin_required
def update_payment_status(order_id: int):
    order = _get_order(order_id)
    data = parse_body(PaymentRequest)

    if data.payment_status != order.payment_status and not can_transition_payment(order.payment_status, data.payment_status):
        logger.warning("order %s payment forced from %s to %s",
                       order.order_number, order.payment_status, data.payment_status)
    order.payment_status = data.payment_status
    if data.payment_method:
        order.payment_method = data.payment_method
    db.session.commit()

    return jsonify(message="Payment status updated", order=order_dto(order))


@bp.put("/admin/orders/<int:order_id>/cancel")
@login_required
def cancel_order(order_id: int):
    order = _get_order(order_id)
    check_owner(order)
    if not can_cancel(order.status):
        raise ApiError(400, "INVALID_STATE", f"Cannot cancel order with status: {order.status}")

    order.status = "cancelled"
    db.session.commit()
    logger.info("order %s cancelled", order.order_number)
    return jsonify(message="Order cancelled successfully", order=order_dto(order))
