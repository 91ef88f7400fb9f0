"""
Relational schema for the ordering platform.

Five tables: users, products, stock, orders and order_items. Orders are
append-only; order items carry a name/price snapshot so later catalog edits
never rewrite history.
"""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductCategory(str, enum.Enum):
    HOT_DOG = "hot_dog"
    SANDWICH = "sandwich"
    SIDE_DISH = "side_dish"
    BEVERAGE = "beverage"


class OrderStatus(str, enum.Enum):
    RECEIVED = "received"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryMode(str, enum.Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


# Money columns come back as floats, the API speaks plain JSON numbers
Money = Numeric(10, 2, asdecimal=False)


class UtcDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend.

    SQLite keeps no offset, so naive values read back are UTC by construction.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    loyalty_points = Column(Integer, nullable=False, default=0)
    loyalty_started_at = Column(UtcDateTime, default=utcnow)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(UtcDateTime, nullable=False, default=utcnow)
    updated_at = Column(UtcDateTime, nullable=False, default=utcnow, onupdate=utcnow)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Money, nullable=False)
    image = Column(Text)
    category = Column(String(50), index=True, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UtcDateTime, nullable=False, default=utcnow)

    stock = relationship(
        "Stock",
        back_populates="product",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def stock_quantity(self) -> int:
        return self.stock.quantity if self.stock is not None else 0


class Stock(Base):
    __tablename__ = "stock"

    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True)
    quantity = Column(Integer, nullable=False, default=0)
    updated_at = Column(UtcDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    product = relationship("Product", back_populates="stock")


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(20), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True)
    customer_name = Column(String(255), nullable=False)
    status = Column(String(20), index=True, nullable=False, default=OrderStatus.RECEIVED.value)
    total = Column(Money, nullable=False)
    delivery_mode = Column(String(20), nullable=False, default=DeliveryMode.PICKUP.value)
    delivery_address = Column(Text)
    delivery_fee = Column(Money, nullable=False, default=0)
    payment_method = Column(String(50))
    machine_needed = Column(Boolean, nullable=False, default=False)
    queue_position = Column(Integer)
    observation = Column(Text)
    created_at = Column(UtcDateTime, index=True, nullable=False, default=utcnow)
    updated_at = Column(UtcDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(20), ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    # Not a foreign key: custom items have no product and deactivated ones must stay readable
    product_id = Column(Integer, nullable=True)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Money, nullable=False)
    custom_description = Column(Text)

    order = relationship("Order", back_populates="items")
