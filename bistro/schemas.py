import datetime as dt
from typing import Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

PHONE_PATTERN = r"^\+?[0-9 ()\-]{7,20}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

ReservationStatus = Literal["pending", "confirmed", "completed", "cancelled"]
OrderStatus = Literal["pending", "confirmed", "preparing", "ready", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]
PaymentMethod = Literal["cash", "card", "apple pay"]


class RequestModel(BaseModel):
    """Accepts camelCase keys from the client, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class RegisterRequest(RequestModel):
    name: str = Field(..., min_length=2, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: Literal["user", "admin"] = "user"


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class MenuItemCreate(RequestModel):
    name: str = Field(..., min_length=2, max_length=120)
    category: str = Field(..., min_length=1, max_length=60)
    price: float = Field(..., ge=0)


class MenuItemUpdate(RequestModel):
    name: str | None = Field(None, min_length=2, max_length=120)
    category: str | None = Field(None, min_length=1, max_length=60)
    price: float | None = Field(None, ge=0)


class CreateReservationRequest(RequestModel):
    customer_name: str = Field(..., min_length=2, max_length=50)
    customer_email: EmailStr
    customer_phone: str = Field(..., pattern=PHONE_PATTERN)
    table_number: int = Field(..., ge=1)
    guest_count: int = Field(..., ge=1, le=12)
    reservation_date: dt.date
    reservation_time: str = Field(..., pattern=TIME_PATTERN)
    special_requests: str | None = Field(None, max_length=500)


class UpdateReservationRequest(RequestModel):
    customer_name: str | None = Field(None, min_length=2, max_length=50)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(None, pattern=PHONE_PATTERN)
    table_number: int | None = Field(None, ge=1)
    guest_count: int | None = Field(None, ge=1, le=12)
    reservation_date: dt.date | None = None
    reservation_time: str | None = Field(None, pattern=TIME_PATTERN)
    special_requests: str | None = Field(None, max_length=500)
    status: Literal["pending", "confirmed", "cancelled"] | None = None


class ReservationStatusRequest(RequestModel):
    status: ReservationStatus


class AvailabilityQuery(RequestModel):
    date: dt.date
    time: str = Field(..., pattern=TIME_PATTERN)


class ReservationListQuery(RequestModel):
    status: ReservationStatus | None = None
    date: dt.date | None = None


class OrderItemRequest(RequestModel):
    menu_item_id: int
    item_name: str | None = Field(None, min_length=1, max_length=120)
    quantity: int = Field(..., ge=1)
    price: float | None = Field(None, ge=0)
    special_instructions: str | None = Field(None, max_length=300)


class CreateOrderRequest(RequestModel):
    table_number: int = Field(..., ge=1)
    items: list[OrderItemRequest] = Field(..., min_length=1)
    subtotal: float | None = Field(None, ge=0)
    tax: float | None = Field(None, ge=0)
    discount: float = Field(0, ge=0)
    total: float | None = Field(None, ge=0)
    payment_method: PaymentMethod = "cash"
    special_requests: str | None = Field(None, max_length=500)
    reservation_id: int | None = None


class OrderStatusRequest(RequestModel):
    status: OrderStatus


class PaymentRequest(RequestModel):
    payment_status: PaymentStatus
    payment_method: PaymentMethod | None = None


class OrderListQuery(RequestModel):
    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    table_number: int | None = Field(None, ge=1)


class CreateFeedbackRequest(RequestModel):
    customer_name: str | None = Field(None, min_length=2, max_length=50)
    customer_email: EmailStr | None = None
    rating: int = Field(..., ge=0, le=10)
    category: str = Field("general", min_length=1, max_length=60)
    comment: str = Field(..., min_length=10, max_length=1000)
    reservation_id: int | None = None


class FeedbackResponseRequest(RequestModel):
    admin_response: str = Field(..., max_length=500)


class FeedbackListQuery(RequestModel):
    category: str | None = None
    min_rating: int | None = Field(None, ge=0, le=10)
