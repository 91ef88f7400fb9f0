"""
Order placement and retrieval.

Placing an order is one transaction: take the queue snapshot, write the
order and its items, draw down stock, stamp the customer's loyalty card.
If any step fails nothing is kept.

The total is stored exactly as the storefront sends it; it is not
recomputed from the item prices here.
"""
import secrets
import string
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, selectinload

from chapa_quente.app_logger import get_logger
from chapa_quente.errors import OrderNotFound, OrderValidationError
from chapa_quente.models import DeliveryMode, Order, OrderItem, OrderStatus, User, utcnow
from chapa_quente.schemas import CreateOrderRequest
from chapa_quente.security import TokenIdentity
from chapa_quente.services import stock as stock_ledger
from chapa_quente.services.order_status import ACTIVE_STATUSES
from chapa_quente.services.users import award_loyalty_point

log = get_logger("orders")

ORDER_CODE_ALPHABET = string.ascii_uppercase + string.digits
ORDER_CODE_LENGTH = 7
MAX_CODE_ATTEMPTS = 5
DEFAULT_PAGE_SIZE = 50


def generate_order_code() -> str:
    return "".join(secrets.choice(ORDER_CODE_ALPHABET) for _ in range(ORDER_CODE_LENGTH))


def _unused_order_code(db: Session) -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_order_code()
        if db.get(Order, code) is None:
            return code
        log.warning("order code %s already taken, drawing another", code)
    raise RuntimeError(f"no free order code after {MAX_CODE_ATTEMPTS} attempts")


def queue_snapshot(db: Session) -> int:
    """1 + number of orders currently received or preparing."""
    active = db.scalar(
        select(func.count()).select_from(Order).where(
            Order.status.in_([s.value for s in ACTIVE_STATUSES])
        )
    )
    return (active or 0) + 1


def validate_order(payload: CreateOrderRequest) -> str:
    if not payload.items:
        raise OrderValidationError("missing items")
    customer_name = (payload.customer_name or "").strip()
    if not customer_name:
        raise OrderValidationError("missing customer name")
    for item in payload.items:
        if item.quantity <= 0:
            raise OrderValidationError(f"invalid quantity for {item.product_name!r}")
    return customer_name


def create_order(db: Session, payload: CreateOrderRequest, identity: Optional[TokenIdentity] = None) -> Order:
    customer_name = validate_order(payload)
    delivery = payload.delivery_mode == DeliveryMode.DELIVERY

    try:
        position = queue_snapshot(db)

        # Guests carry no token; a token for a since-deleted account counts as a guest too
        customer = db.get(User, identity.user_id) if identity is not None else None

        order = Order(
            id=_unused_order_code(db),
            user_id=customer.id if customer is not None else None,
            customer_name=customer_name,
            status=OrderStatus.RECEIVED.value,
            total=payload.total,
            delivery_mode=payload.delivery_mode.value,
            delivery_address=payload.delivery_address if delivery else None,
            delivery_fee=payload.delivery_fee if delivery else 0,
            payment_method=payload.payment_method,
            machine_needed=payload.machine_needed,
            queue_position=position,
            observation=payload.observation or None,
        )
        db.add(order)

        for item in payload.items:
            order.items.append(OrderItem(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                custom_description=item.custom_description,
            ))
            if item.product_id is not None:
                stock_ledger.consume(db, item.product_id, item.quantity)

        if customer is not None:
            award_loyalty_point(db, customer.id)

        db.commit()
    except Exception:
        db.rollback()
        log.exception("order for %r rolled back", customer_name)
        raise

    log.info(
        "order %s placed by %s: %d items, total %.2f, queue position %d",
        order.id,
        customer.id if customer is not None else "guest",
        sum(i.quantity for i in order.items),
        order.total,
        position,
    )
    return order


def list_orders(
    db: Session,
    identity: Optional[TokenIdentity] = None,
    status: Optional[str] = None,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> List[Order]:
    stmt = select(Order).options(selectinload(Order.items))
    # Signed-in customers see their own orders; admins and the anonymous queue board see all
    if identity is not None and not identity.is_admin:
        stmt = stmt.where(Order.user_id == identity.user_id)
    if status:
        stmt = stmt.where(Order.status == status)
    stmt = stmt.order_by(Order.created_at.desc(), Order.id).limit(limit).offset(offset)
    return list(db.scalars(stmt))


def get_order(db: Session, order_id: str) -> Order:
    order = db.get(Order, order_id, options=[selectinload(Order.items)])
    if order is None:
        raise OrderNotFound(order_id)
    return order


def financial_stats(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = start_of_day - timedelta(days=7)
    month_ago = start_of_day - timedelta(days=30)

    def revenue_since(since):
        return func.coalesce(func.sum(case((Order.created_at >= since, Order.total), else_=0)), 0)

    row = db.execute(
        select(
            revenue_since(start_of_day),
            revenue_since(week_ago),
            revenue_since(month_ago),
            func.count(Order.id),
        ).where(Order.status != OrderStatus.CANCELLED.value)
    ).one()
    daily, weekly, monthly, count = row
    return {
        "daily": round(float(daily), 2),
        "weekly": round(float(weekly), 2),
        "monthly": round(float(monthly), 2),
        "total_orders": int(count),
    }
