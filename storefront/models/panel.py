from typing import Optional, List, Any

from pydantic import BaseModel

from ..core.contacts import ContactAction
from .order import Coordinates


class StatusBadge(BaseModel):
    status: str
    label: str
    color: str
    css_class: str


class OrderHeader(BaseModel):
    order_id: str
    vendor_name: Optional[str] = None
    placed_on: str
    total: str
    item_count: int
    badge: StatusBadge


class ProgressSection(BaseModel):
    percent: int
    message: Optional[str] = None


class RouteSection(BaseModel):
    source_address: str
    source_coordinates: Coordinates
    destination_address: str
    destination_coordinates: Coordinates
    map: Optional[Any] = None
    distance: Optional[str] = None
    estimated_time: Optional[str] = None


class PartySection(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    phone: str = ""
    email: Optional[str] = None
    contact: Optional[ContactAction] = None


class DriverSection(BaseModel):
    name: str
    phone: Optional[str] = None
    contact: Optional[ContactAction] = None


class LineItemRow(BaseModel):
    name: str
    sku: Optional[str] = None
    quantity: int
    price: str
    total: str


class PaymentSummary(BaseModel):
    subtotal: str
    delivery_fee: str
    service_fee: str
    tax: str
    tip: Optional[str] = None
    total: str
    payment_reference: str


class CancellationSection(BaseModel):
    reason: Optional[str] = None
    cancelled_on: Optional[str] = None
    payment_note: Optional[str] = None


class OrderDetailPanel(BaseModel):
    header: OrderHeader
    progress: Optional[ProgressSection] = None
    route: Optional[RouteSection] = None
    delivery: PartySection
    vendor: PartySection
    driver: Optional[DriverSection] = None
    items: List[LineItemRow]
    payment: PaymentSummary
    special_instructions: Optional[str] = None
    cancellation: Optional[CancellationSection] = None
    support: Optional[ContactAction] = None
    loading: bool = False


class OrderDetailResponse(BaseModel):
    navigation: str
    order: OrderDetailPanel
