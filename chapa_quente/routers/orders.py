from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from chapa_quente.database import get_db
from chapa_quente.errors import ChapaError, to_http
from chapa_quente.schemas import (
    CreateOrderRequest,
    FinancialStats,
    OrderList,
    OrderOut,
    OrderStatusOut,
    UpdateOrderStatusRequest,
)
from chapa_quente.security import TokenIdentity, optional_user, require_admin
from chapa_quente.services import order_status
from chapa_quente.services import orders as order_service

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=OrderList)
def list_orders(
    status: Optional[str] = None,
    limit: int = Query(order_service.DEFAULT_PAGE_SIZE, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: Optional[TokenIdentity] = Depends(optional_user),
):
    orders = order_service.list_orders(db, user, status=status, limit=limit, offset=offset)
    return OrderList(orders=[OrderOut.model_validate(o) for o in orders], total=len(orders))


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: CreateOrderRequest,
    db: Session = Depends(get_db),
    user: Optional[TokenIdentity] = Depends(optional_user),
):
    try:
        order = order_service.create_order(db, payload, user)
    except ChapaError as e:
        raise to_http(e)
    return OrderOut.model_validate(order)


# Declared before /{order_id} so "stats" is not read as an order code
@router.get("/stats/financial", response_model=FinancialStats)
def financial_stats(db: Session = Depends(get_db), admin: TokenIdentity = Depends(require_admin)):
    return FinancialStats(**order_service.financial_stats(db))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    try:
        return OrderOut.model_validate(order_service.get_order(db, order_id))
    except ChapaError as e:
        raise to_http(e)


@router.patch("/{order_id}/status", response_model=OrderStatusOut)
def update_order_status(
    order_id: str,
    payload: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    try:
        order = order_status.set_status(db, order_id, payload.status)
    except ChapaError as e:
        raise to_http(e)
    return OrderStatusOut(id=order.id, status=order.status, updated_at=order.updated_at)
