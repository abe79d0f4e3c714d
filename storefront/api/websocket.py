import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends, Query

from ..core.errors import OrderNotFound, OrderStoreError
from ..core.permissions import resolve_role, navigation_for
from ..core.reconciler import LiveOrderReconciler, RefreshOutcome
from ..services.maps import RouteRenderer
from ..services.order_store import OrderStore
from ..views.order_detail import OrderDetailView
from .dependencies import get_order_store, get_route_renderer, get_subscription_factory, SubscriptionFactory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])

REFRESH_COMMAND = "refresh"


def order_message(event: str, order_id: str, data: Optional[dict] = None) -> dict:
    return {
        "event": event,
        "order_id": order_id,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def _forward(websocket: WebSocket, outbox: asyncio.Queue):
    """Single writer for the socket; every outgoing message goes through the outbox"""
    while True:
        message = await outbox.get()
        await websocket.send_json(message)


async def _refresh(reconciler: LiveOrderReconciler, outbox: asyncio.Queue):
    outcome = await reconciler.refresh()
    if outcome is RefreshOutcome.SUPERSEDED:
        # the pushed update already reached the client as order_update
        outbox.put_nowait(order_message("refresh_superseded", reconciler.order_id))
    elif not outcome:
        outbox.put_nowait(order_message("refresh_failed", reconciler.order_id))


@router.websocket("/orders/{order_id}")
async def live_order(
    websocket: WebSocket,
    order_id: str,
    session_token: Optional[str] = Query(None),
    store: OrderStore = Depends(get_order_store),
    renderer: RouteRenderer = Depends(get_route_renderer),
    subscription_factory: SubscriptionFactory = Depends(get_subscription_factory),
):
    """Live order panel: a snapshot on connect, then one message per applied update.

    Sending the text "refresh" asks for a fresh read of the order.
    """
    await websocket.accept()

    try:
        order = await store.get_order(order_id)
    except OrderNotFound:
        await websocket.close(code=1008, reason="Order not found")
        return
    except OrderStoreError as e:
        logger.warning(f"Order store failed for {order_id}: {e}")
        await websocket.close(code=1011, reason="Order store unavailable")
        return

    navigation = navigation_for(resolve_role(session_token))
    outbox: asyncio.Queue = asyncio.Queue()

    async with LiveOrderReconciler(order, store) as reconciler:
        view = OrderDetailView(reconciler, route_renderer=renderer)

        def panel() -> dict:
            return {"navigation": navigation, "order": view.render().model_dump(mode="json")}

        reconciler.add_listener(lambda facts: outbox.put_nowait(order_message("order_update", order_id, panel())))
        outbox.put_nowait(order_message("order_snapshot", order_id, panel()))

        writer = asyncio.create_task(_forward(websocket, outbox))
        refresh_task: Optional[asyncio.Task] = None
        try:
            await reconciler.attach(subscription_factory(order_id, store))
            logger.info(f"Live panel opened for order {order_id}")

            while True:
                text = await websocket.receive_text()
                if text.strip().lower() != REFRESH_COMMAND:
                    continue
                if reconciler.loading or (refresh_task is not None and not refresh_task.done()):
                    outbox.put_nowait(order_message("refresh_skipped", order_id))
                    continue
                outbox.put_nowait(order_message("refresh_started", order_id))
                refresh_task = asyncio.create_task(_refresh(reconciler, outbox))
        except WebSocketDisconnect:
            logger.info(f"Live panel closed for order {order_id}")
        finally:
            for task in (refresh_task, writer):
                if task is not None and not task.done():
                    task.cancel()
            await asyncio.gather(*(t for t in (refresh_task, writer) if t is not None), return_exceptions=True)
