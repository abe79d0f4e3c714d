from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, field_serializer


class OrderStatus(str, Enum):
    """Order fulfilment stages, valued with the strings the backend stores"""

    PENDING = "pending_payment"
    PREPARING = "preparing"
    AWAITING_DRIVER = "waiting for a driver to be assigned"
    PICKING_UP = "driver coming to pickup"
    DELIVERING = "driver delivering"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["OrderStatus"]:
        """Match a backend value ("driver delivering") or a member name ("DELIVERING")."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        text = raw.strip()
        try:
            return cls(text)
        except ValueError:
            return cls.__members__.get(text.upper())


class UnrecognizedStatus(BaseModel):
    """A status string outside the known set, kept verbatim"""

    model_config = ConfigDict(frozen=True)

    raw: str


StatusValue = Union[OrderStatus, UnrecognizedStatus]


def parse_status(raw: Any) -> StatusValue:
    """Never raises; anything unknown comes back as UnrecognizedStatus."""
    if isinstance(raw, UnrecognizedStatus):
        return raw
    status = OrderStatus.from_raw(raw)
    if status is not None:
        return status
    return UnrecognizedStatus(raw="" if raw is None else str(raw))


def status_name(status: StatusValue) -> str:
    if isinstance(status, OrderStatus):
        return status.name
    return status.raw


def coerce_timestamp(value: Any) -> Any:
    """Accept Firestore {seconds, nanoseconds} maps and epoch numbers
    alongside anything pydantic already parses as a datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if seconds is None:
            return value
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        return datetime.fromtimestamp(seconds + nanos / 1_000_000_000, tz=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    item_id: str = Field(alias="itemID")
    name: str
    quantity: int = Field(gt=0)
    price: Decimal = Field(ge=0)
    barcode: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class OrderAmounts(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subtotal: Decimal = Field(ge=0)
    tax: Decimal = Field(ge=0)
    service_fee: Decimal = Field(ge=0, alias="serviceFee")
    delivery_fee: Decimal = Field(ge=0, alias="deliveryFee")
    tip: Optional[Decimal] = Field(default=None, ge=0)
    total: Decimal = Field(ge=0)


class DeliveryInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    distance_in_km: Optional[float] = Field(default=None, alias="distanceInKm")
    distance_in_miles: Optional[float] = Field(default=None, alias="distanceInMiles")
    estimated_time: Optional[int] = Field(default=None, alias="estimatedTime")  # minutes

    @field_validator("estimated_time", mode="before")
    @classmethod
    def _whole_minutes(cls, value):
        if isinstance(value, float):
            return round(value)
        return value


class Order(BaseModel):
    """Read-only projection of the backend order document.

    Keys follow the backend document (mostly camelCase, a few snake_case);
    the Python field names are accepted as well.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    status: StatusValue
    line_items: List[OrderItem] = Field(default_factory=list, alias="lineItems")
    amount: OrderAmounts

    created_at: datetime
    updated_at: Optional[datetime] = None
    estimated_delivery: Optional[datetime] = None

    # Customer info
    customer_id: Optional[str] = Field(default=None, alias="customerID")
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    customer_phone: Optional[str] = Field(default=None, alias="customerPhone")
    customer_location: Optional[str] = Field(default=None, alias="customerLocation")
    customer_coordinates: Optional[Coordinates] = Field(default=None, alias="customerCoordinates")

    # Vendor info
    vendor_id: Optional[str] = Field(default=None, alias="vendorID")
    vendor_name: Optional[str] = Field(default=None, alias="vendorName")
    vendor_email: Optional[str] = Field(default=None, alias="vendorEmail")
    vendor_phone: Optional[str] = Field(default=None, alias="vendorPhone")
    vendor_location: Optional[str] = Field(default=None, alias="vendorLocation")
    vendor_coordinates: Optional[Coordinates] = Field(default=None, alias="vendorCoordinates")

    # Driver info, absent until a driver is assigned
    driver_id: Optional[str] = Field(default=None, alias="driverID")
    driver_name: Optional[str] = Field(default=None, alias="driverName")
    driver_phone: Optional[str] = Field(default=None, alias="driverPhone")
    driver_email: Optional[str] = Field(default=None, alias="driverEmail")

    # Payment / cancellation
    payment_intent_id: Optional[str] = Field(default=None, alias="paymentIntentId")
    payment_status: Optional[str] = None
    cancelled_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None

    special_instructions: Optional[str] = None
    delivery_info: Optional[DeliveryInfo] = Field(default=None, alias="deliveryInfo")

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        return parse_status(value)

    @field_validator("created_at", "updated_at", "estimated_delivery", "cancelled_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, value):
        return coerce_timestamp(value)

    @field_validator("created_at", "updated_at", "estimated_delivery", "cancelled_at")
    @classmethod
    def _assume_utc(cls, value):
        return _as_utc(value)

    @field_serializer("status")
    def _serialize_status(self, status: StatusValue) -> str:
        if isinstance(status, OrderStatus):
            return status.value
        return status.raw

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.line_items)
