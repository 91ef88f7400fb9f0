"""Menu catalog. Products are only ever deactivated, never deleted."""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from chapa_quente.app_logger import get_logger
from chapa_quente.errors import ProductNotFound, ValidationFailed
from chapa_quente.models import Product, Stock
from chapa_quente.schemas import ProductCreate, ProductUpdate

log = get_logger("products")


def list_products(db: Session, category: Optional[str] = None, active_only: bool = True) -> List[Product]:
    stmt = select(Product).options(selectinload(Product.stock))
    if active_only:
        stmt = stmt.where(Product.is_active.is_(True))
    if category:
        stmt = stmt.where(Product.category == category)
    stmt = stmt.order_by(Product.category, Product.name)
    return list(db.scalars(stmt))


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id, options=[selectinload(Product.stock)])
    if product is None:
        raise ProductNotFound(product_id)
    return product


def create_product(db: Session, payload: ProductCreate) -> Product:
    if not payload.name or payload.price is None or payload.category is None:
        raise ValidationFailed("Name, price and category are required")
    product = Product(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        image=payload.image,
        category=payload.category.value,
        tags=list(payload.tags),
    )
    product.stock = Stock(quantity=payload.stock)
    try:
        db.add(product)
        db.commit()
    except Exception:
        db.rollback()
        raise
    log.info("created product %s (%s) with %d in stock", product.id, product.name, payload.stock)
    return product


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product(db, product_id)
    changes = payload.model_dump(exclude_none=True)
    if "category" in changes:
        changes["category"] = payload.category.value
    for field, value in changes.items():
        setattr(product, field, value)
    db.commit()
    return product


def deactivate_product(db: Session, product_id: int) -> Product:
    product = get_product(db, product_id)
    product.is_active = False
    db.commit()
    log.info("deactivated product %s", product_id)
    return product
