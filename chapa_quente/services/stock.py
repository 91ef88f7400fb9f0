"""
Stock ledger.

One row per product holding a non-negative quantity. Admins overwrite it
directly (single or batch upsert); order placement draws it down through
``consume`` inside the order transaction.
"""
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from chapa_quente.app_logger import get_logger
from chapa_quente.errors import InvalidQuantity, ProductNotFound, ValidationFailed
from chapa_quente.models import Product, Stock, utcnow

log = get_logger("stock")

DEFAULT_LOW_STOCK_THRESHOLD = 10


def _row(product: Product, stock: Optional[Stock]) -> dict:
    return {
        "product_id": product.id,
        "product_name": product.name,
        "category": product.category,
        "quantity": stock.quantity if stock is not None else 0,
        "updated_at": stock.updated_at if stock is not None else None,
    }


def _joined():
    return select(Product, Stock).outerjoin(Stock, Stock.product_id == Product.id)


def list_stock(db: Session) -> List[dict]:
    stmt = _joined().where(Product.is_active.is_(True)).order_by(Product.category, Product.name)
    return [_row(p, s) for p, s in db.execute(stmt).all()]


def get_stock(db: Session, product_id: int) -> dict:
    found = db.execute(_joined().where(Product.id == product_id)).first()
    if found is None:
        raise ProductNotFound(product_id)
    return _row(*found)


def _check_quantity(quantity: Optional[int]) -> int:
    if quantity is None or quantity < 0:
        raise InvalidQuantity("Invalid quantity")
    return quantity


def _upsert(db: Session, product_id: int, quantity: int) -> Tuple[Product, Stock]:
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFound(product_id)
    stock = db.get(Stock, product_id)
    if stock is None:
        stock = Stock(product_id=product_id, quantity=quantity, updated_at=utcnow())
        db.add(stock)
        db.flush()
    else:
        stock.quantity = quantity
        stock.updated_at = utcnow()
    return product, stock


def set_stock(db: Session, product_id: int, quantity: Optional[int]) -> dict:
    quantity = _check_quantity(quantity)
    try:
        product, stock = _upsert(db, product_id, quantity)
        db.commit()
    except Exception:
        db.rollback()
        raise
    log.info("stock for product %s set to %d", product_id, quantity)
    return _row(product, stock)


def batch_set_stock(db: Session, updates: Iterable) -> int:
    """Apply every (product_id, quantity) upsert in one transaction.

    Nothing is written if any entry is invalid or names an unknown product.
    """
    if not isinstance(updates, list) or not updates:
        raise ValidationFailed("Invalid update list")
    pairs = [(u.product_id, _check_quantity(u.quantity)) for u in updates]
    try:
        for product_id, quantity in pairs:
            _upsert(db, product_id, quantity)
        db.commit()
    except Exception:
        db.rollback()
        raise
    log.info("batch stock update applied to %d products", len(pairs))
    return len(pairs)


def low_stock(db: Session, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> List[dict]:
    on_hand = func.coalesce(Stock.quantity, 0)
    stmt = (
        _joined()
        .where(Product.is_active.is_(True), on_hand <= threshold)
        .order_by(on_hand.asc(), Product.name)
    )
    return [_row(p, s) for p, s in db.execute(stmt).all()]


def consume(db: Session, product_id: int, quantity: int) -> Optional[int]:
    """Draw ``quantity`` units from a product, clamping at zero.

    Runs inside the caller's transaction and does not commit. Returns the new
    quantity, or None when the product has no stock row.
    """
    stock = db.execute(
        select(Stock).where(Stock.product_id == product_id).with_for_update()
    ).scalar_one_or_none()
    if stock is None:
        log.debug("no stock row for product %s, nothing to draw down", product_id)
        return None
    stock.quantity = max(0, stock.quantity - quantity)
    stock.updated_at = utcnow()
    return stock.quantity
