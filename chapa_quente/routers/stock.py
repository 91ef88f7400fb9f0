from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from chapa_quente.database import get_db
from chapa_quente.errors import ChapaError, to_http
from chapa_quente.schemas import (
    LowStockReport,
    StockBatchRequest,
    StockBatchResult,
    StockList,
    StockOut,
    StockUpdate,
)
from chapa_quente.security import TokenIdentity, require_admin
from chapa_quente.services import stock as stock_ledger

router = APIRouter(prefix="/api/stock", tags=["stock"])


@router.get("", response_model=StockList)
def list_stock(db: Session = Depends(get_db)):
    return StockList(stock=[StockOut(**row) for row in stock_ledger.list_stock(db)])


@router.get("/alerts/low", response_model=LowStockReport)
def low_stock(
    threshold: int = Query(stock_ledger.DEFAULT_LOW_STOCK_THRESHOLD, ge=0),
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    rows = stock_ledger.low_stock(db, threshold)
    return LowStockReport(low_stock=[StockOut(**row) for row in rows], threshold=threshold)


@router.post("/batch", response_model=StockBatchResult)
def batch_update(
    payload: StockBatchRequest,
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    try:
        count = stock_ledger.batch_set_stock(db, payload.updates)
    except ChapaError as e:
        raise to_http(e)
    return StockBatchResult(message="Stock updated", count=count)


@router.get("/{product_id}", response_model=StockOut)
def get_stock(product_id: int, db: Session = Depends(get_db)):
    try:
        return StockOut(**stock_ledger.get_stock(db, product_id))
    except ChapaError as e:
        raise to_http(e)


@router.put("/{product_id}", response_model=StockOut)
def update_stock(
    product_id: int,
    payload: StockUpdate,
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    try:
        return StockOut(**stock_ledger.set_stock(db, product_id, payload.quantity))
    except ChapaError as e:
        raise to_http(e)
