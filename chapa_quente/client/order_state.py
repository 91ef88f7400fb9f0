"""
Storefront-side order tracking.

The server stamps each order with ``queue_position`` when it is created and
never updates it: where the customer stood when they ordered. The board
below derives the live position from every poll: how many active orders are
still ahead right now. Both numbers are kept; neither replaces the other.
"""
import asyncio
import contextlib
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from chapa_quente.app_logger import get_logger
from chapa_quente.client.api import ApiClient, ApiError
from chapa_quente.models import OrderStatus
from chapa_quente.services.order_status import ACTIVE_STATUSES, TERMINAL_STATUSES

log = get_logger("client.order_state")

DEFAULT_POLL_INTERVAL = 10.0

_ACTIVE_VALUES = frozenset(s.value for s in ACTIVE_STATUSES)
_TERMINAL_VALUES = frozenset(s.value for s in TERMINAL_STATUSES)


def _created_at(order: Dict[str, Any]) -> datetime:
    value = order["created_at"]
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # Timestamps without an offset are UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class OrderBoard:
    """Locally known orders, as last seen by a poll."""

    def __init__(self, orders: Optional[List[Dict[str, Any]]] = None):
        self.orders: List[Dict[str, Any]] = list(orders or [])
        self.active_order_id: Optional[str] = None
        self.refreshed_at: Optional[datetime] = None

    def replace(self, orders: List[Dict[str, Any]]) -> None:
        self.orders = list(orders)
        self.refreshed_at = datetime.now()

    def track(self, order: Dict[str, Any]) -> None:
        """Follow a freshly placed order until the next poll brings it in."""
        self.active_order_id = order["id"]
        if self.find(order["id"]) is None:
            self.orders.insert(0, order)

    def find(self, order_id: str) -> Optional[Dict[str, Any]]:
        return next((o for o in self.orders if o["id"] == order_id), None)

    @property
    def active_order(self) -> Optional[Dict[str, Any]]:
        if self.active_order_id is None:
            return None
        return self.find(self.active_order_id)

    def queue(self) -> List[Dict[str, Any]]:
        """Orders still waiting on the kitchen, oldest first."""
        pending = [o for o in self.orders if o.get("status") in _ACTIVE_VALUES]
        return sorted(pending, key=lambda o: (_created_at(o), o.get("queue_position") or 0))

    def live_queue_position(self, order_id: str) -> int:
        """Number of active orders ahead of ``order_id``; 0 when it is next or not queued."""
        for idx, order in enumerate(self.queue()):
            if order["id"] == order_id:
                return idx
        return 0

    def snapshot_queue_position(self, order_id: str) -> Optional[int]:
        order = self.find(order_id)
        return order.get("queue_position") if order is not None else None

    def is_finished(self, order_id: str) -> bool:
        order = self.find(order_id)
        return order is not None and order.get("status") in _TERMINAL_VALUES

    def status_of(self, order_id: str) -> Optional[OrderStatus]:
        order = self.find(order_id)
        return OrderStatus(order["status"]) if order is not None else None


class OrderPoller:
    """Refreshes an OrderBoard on a fixed interval until stopped."""

    def __init__(self, api: ApiClient, board: OrderBoard, interval: float = DEFAULT_POLL_INTERVAL):
        self.api = api
        self.board = board
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> bool:
        try:
            orders = await self.api.list_orders()
        except (httpx.HTTPError, ApiError) as e:
            # Keep showing the last known list
            log.warning("order poll failed: %s", e)
            return False
        self.board.replace(orders)
        return True

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
