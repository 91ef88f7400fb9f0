"""
Order status handling.

    received -> preparing -> ready -> delivered
    (any) -> cancelled

Admins may set any of the five statuses directly; the forward sequence is
only what ``next_status`` offers the back-office as the one-click next step.
Status changes never touch stock or loyalty, both are settled at creation.
"""
from typing import Optional, Union

from sqlalchemy.orm import Session

from chapa_quente.app_logger import get_logger
from chapa_quente.errors import InvalidStatus, OrderNotFound
from chapa_quente.models import Order, OrderStatus, utcnow

log = get_logger("order_status")

FORWARD_SEQUENCE = (
    OrderStatus.RECEIVED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
)
ACTIVE_STATUSES = frozenset({OrderStatus.RECEIVED, OrderStatus.PREPARING})
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def parse_status(value: Optional[str]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus("Invalid status")


def next_status(current: Union[OrderStatus, str]) -> Optional[OrderStatus]:
    current = OrderStatus(current)
    if current not in FORWARD_SEQUENCE:
        return None
    idx = FORWARD_SEQUENCE.index(current)
    return FORWARD_SEQUENCE[idx + 1] if idx < len(FORWARD_SEQUENCE) - 1 else None


def is_active(status: Union[OrderStatus, str]) -> bool:
    return OrderStatus(status) in ACTIVE_STATUSES


def set_status(db: Session, order_id: str, value: Optional[str]) -> Order:
    status = parse_status(value)
    order = db.get(Order, order_id)
    if order is None:
        raise OrderNotFound(order_id)
    previous = order.status
    order.status = status.value
    order.updated_at = utcnow()
    db.commit()
    log.info("order %s: %s -> %s", order_id, previous, status.value)
    return order
