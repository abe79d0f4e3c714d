import logging
from typing import Optional, Union

import redis
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from ..core.contacts import ContactRole, NoAction, CallAction, MessageAction
from ..core.errors import OrderNotFound, OrderStoreError, InvalidStatusError, InvalidTransitionError
from ..core.permissions import get_current_role, navigation_for
from ..core.reconciler import LiveOrderReconciler
from ..core.status_policy import validate_status, validate_transition
from ..models.order import Order, status_name
from ..models.panel import OrderDetailResponse
from ..models.user import UserRole
from ..services.feedback import FeedbackRequest, FeedbackService
from ..services.maps import RouteRenderer
from ..services.order_store import OrderStore, publish_order_update
from ..views.order_detail import OrderDetailView
from .dependencies import get_order_store, get_route_renderer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


class OrderUpdateEvent(BaseModel):
    order: Order
    previous_status: Optional[str] = None


async def load_order(store: OrderStore, order_id: str) -> Order:
    try:
        return await store.get_order(order_id)
    except OrderNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    except OrderStoreError as e:
        logger.warning(f"Order store failed for {order_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Order store unavailable")


@router.post("/webhook")
async def order_webhook(event: OrderUpdateEvent):
    """Receive a snapshot from the fulfilment backend and fan it out to live panels"""
    order = event.order
    try:
        validate_status(order.status)
        if event.previous_status is not None:
            validate_transition(event.previous_status, order.status)
    except InvalidStatusError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    try:
        listeners = publish_order_update(order)
    except redis.RedisError as e:
        logger.error(f"Could not publish update for order {order.id}: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Update channel unavailable")

    return {
        "order_id": order.id,
        "status": status_name(order.status),
        "listeners": listeners,
    }


@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order_details(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    renderer: RouteRenderer = Depends(get_route_renderer),
    role: UserRole = Depends(get_current_role),
):
    order = await load_order(store, order_id)
    async with LiveOrderReconciler(order, store) as reconciler:
        view = OrderDetailView(reconciler, route_renderer=renderer)
        return OrderDetailResponse(navigation=navigation_for(role), order=view.render())


@router.get("/{order_id}/contact/{role}", response_model=Union[CallAction, MessageAction, NoAction])
async def get_contact_action(
    order_id: str,
    role: ContactRole,
    store: OrderStore = Depends(get_order_store),
):
    order = await load_order(store, order_id)
    async with LiveOrderReconciler(order, store) as reconciler:
        return OrderDetailView(reconciler).contact(role)


@router.post("/{order_id}/feedback")
async def submit_feedback(order_id: str, feedback: FeedbackRequest):
    if feedback.order_id != order_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order ID mismatch")

    sent = await run_in_threadpool(FeedbackService.send, feedback)
    if not sent:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to submit feedback. Please try again.")

    return {"message": "Thank you for your feedback!"}
