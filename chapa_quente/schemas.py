"""
API Schemas for the Chapa Quente Ordering System

Request bodies and response models. Response models read straight from the
SQLAlchemy rows (``from_attributes``).
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from chapa_quente.models import DeliveryMode, ProductCategory


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ===================== Users / Auth =====================
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class GuestRequest(BaseModel):
    name: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class AdminFlagUpdate(BaseModel):
    is_admin: bool


class UserOut(ORMModel):
    id: str
    name: str
    email: Optional[str] = None
    loyalty_points: int = 0
    loyalty_started_at: Optional[datetime] = None
    is_admin: bool = False
    is_guest: bool = False
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    user: UserOut
    token: Optional[str] = None


class UserList(BaseModel):
    users: List[UserOut]


class RedeemResponse(BaseModel):
    message: str
    new_points: int


# ===================== Products =====================
class ProductCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[ProductCategory] = None
    tags: List[str] = Field(default_factory=list)
    stock: int = Field(50, ge=0, description="Initial stock quantity")


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    category: Optional[ProductCategory] = None
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ProductOut(ORMModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None
    category: str
    tags: List[str] = []
    stock: int = Field(0, validation_alias="stock_quantity")
    is_active: bool


class ProductList(BaseModel):
    products: List[ProductOut]


# ===================== Orders =====================
class OrderItemIn(BaseModel):
    product_id: Optional[int] = Field(None, description="Catalog product; empty for custom items")
    product_name: str
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    custom_description: Optional[str] = None


class CreateOrderRequest(BaseModel):
    customer_name: Optional[str] = None
    items: List[OrderItemIn] = Field(default_factory=list)
    total: float = Field(..., ge=0)
    delivery_mode: DeliveryMode = DeliveryMode.PICKUP
    delivery_address: Optional[str] = None
    delivery_fee: float = Field(0, ge=0)
    payment_method: Optional[str] = None
    machine_needed: bool = False
    observation: Optional[str] = None


class UpdateOrderStatusRequest(BaseModel):
    status: Optional[str] = None


class OrderItemOut(ORMModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    unit_price: float
    custom_description: Optional[str] = None


class OrderOut(ORMModel):
    id: str
    user_id: Optional[str] = None
    customer_name: str
    status: str
    total: float
    delivery_mode: str
    delivery_address: Optional[str] = None
    delivery_fee: float = 0.0
    payment_method: Optional[str] = None
    machine_needed: bool = False
    queue_position: Optional[int] = None
    observation: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut] = []


class OrderList(BaseModel):
    orders: List[OrderOut]
    total: int


class OrderStatusOut(BaseModel):
    id: str
    status: str
    updated_at: datetime


class FinancialStats(BaseModel):
    daily: float
    weekly: float
    monthly: float
    total_orders: int


# ===================== Stock =====================
class StockUpdate(BaseModel):
    quantity: Optional[int] = None


class StockBatchEntry(BaseModel):
    product_id: int
    quantity: Optional[int] = None


class StockBatchRequest(BaseModel):
    updates: List[StockBatchEntry]


class StockOut(BaseModel):
    product_id: int
    product_name: str
    category: Optional[str] = None
    quantity: int
    updated_at: Optional[datetime] = None


class StockList(BaseModel):
    stock: List[StockOut]


class StockBatchResult(BaseModel):
    message: str
    count: int


class LowStockReport(BaseModel):
    low_stock: List[StockOut]
    threshold: int
