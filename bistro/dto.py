"""
Response shapes sent to clients. Password hashes never leave the server.
"""
from .utils.time import api_iso_z


def user_dto(user) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
    }


def menu_item_dto(item) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "category": item.category,
        "price": item.price,
        "createdAt": api_iso_z(item.created_at),
        "updatedAt": api_iso_z(item.updated_at),
    }


def reservation_dto(res) -> dict:
    return {
        "id": res.id,
        "userId": res.user_id,
        "customerName": res.customer_name,
        "customerEmail": res.customer_email,
        "customerPhone": res.customer_phone,
        "tableNumber": res.table_number,
        "guestCount": res.guest_count,
        "reservationDate": res.reservation_date.isoformat(),
        "reservationTime": res.reservation_time,
        "status": res.status,
        "specialRequests": res.special_requests,
        "createdAt": api_iso_z(res.created_at),
        "updatedAt": api_iso_z(res.updated_at),
    }


def order_dto(order) -> dict:
    return {
        "id": order.id,
        "userId": order.user_id,
        "orderNumber": order.order_number,
        "tableNumber": order.table_number,
        "items": [
            {
                "menuItemId": item.menu_item_id,
                "itemName": item.item_name,
                "quantity": item.quantity,
                "price": item.price,
                "specialInstructions": item.special_instructions,
            }
            for item in order.items
        ],
        "subtotal": order.subtotal,
        "tax": order.tax,
        "discount": order.discount,
        "total": order.total,
        "status": order.status,
        "paymentStatus": order.payment_status,
        "paymentMethod": order.payment_method,
        "specialRequests": order.special_requests,
        "reservationId": order.reservation_id,
        "createdAt": api_iso_z(order.created_at),
        "updatedAt": api_iso_z(order.updated_at),
    }


def feedback_dto(fb) -> dict:
    return {
        "id": fb.id,
        "userId": fb.user_id,
        "reservationId": fb.reservation_id,
        "customerName": fb.customer_name,
        "customerEmail": fb.customer_email,
        "rating": fb.rating,
        "category": fb.category,
        "comment": fb.comment,
        "adminResponse": fb.admin_response,
        "createdAt": api_iso_z(fb.created_at),
        "updatedAt": api_iso_z(fb.updated_at),
    }
