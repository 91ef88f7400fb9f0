from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chapa_quente.database import get_db
from chapa_quente.errors import ChapaError, to_http
from chapa_quente.models import ProductCategory
from chapa_quente.schemas import ProductCreate, ProductList, ProductOut, ProductUpdate
from chapa_quente.security import TokenIdentity, require_admin
from chapa_quente.services import products as product_service

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductList)
def list_products(
    category: Optional[ProductCategory] = None,
    active_only: bool = True,
    db: Session = Depends(get_db),
):
    products = product_service.list_products(
        db, category=category.value if category else None, active_only=active_only
    )
    return ProductList(products=[ProductOut.model_validate(p) for p in products])


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductOut.model_validate(product_service.get_product(db, product_id))
    except ChapaError as e:
        raise to_http(e)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    try:
        return ProductOut.model_validate(product_service.create_product(db, payload))
    except ChapaError as e:
        raise to_http(e)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    try:
        return ProductOut.model_validate(product_service.update_product(db, product_id, payload))
    except ChapaError as e:
        raise to_http(e)


@router.delete("/{product_id}")
def remove_product(
    product_id: int,
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    try:
        product_service.deactivate_product(db, product_id)
    except ChapaError as e:
        raise to_http(e)
    return {"deleted": True, "id": product_id}
