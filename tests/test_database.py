from datetime import timedelta

from sqlalchemy import func, inspect, select, text

from chapa_quente import config
from chapa_quente.catalog import DEFAULT_MENU, DEFAULT_STOCK
from chapa_quente.database import auto_migrate, create_db_engine, make_session_factory
from chapa_quente.models import Order, Product, Stock, User
from chapa_quente.security import verify_password


def test_first_run_seeds_menu_and_admin():
    engine = create_db_engine("sqlite://")
    auto_migrate(engine)
    with make_session_factory(engine)() as s:
        assert s.scalar(select(func.count(Product.id))) == len(DEFAULT_MENU)
        assert set(s.scalars(select(Stock.quantity))) == {DEFAULT_STOCK}
        admin = s.scalar(select(User).where(User.email == config.ADMIN_EMAIL.lower()))
        assert admin.is_admin
        assert verify_password(config.ADMIN_PASSWORD, admin.password_hash)
    engine.dispose()


def test_migration_is_idempotent():
    engine = create_db_engine("sqlite://")
    auto_migrate(engine)
    auto_migrate(engine)
    with make_session_factory(engine)() as s:
        assert s.scalar(select(func.count(Product.id))) == len(DEFAULT_MENU)
        assert s.scalar(select(func.count(User.id))) == 1
    engine.dispose()


def test_late_columns_are_added_to_existing_orders_table():
    engine = create_db_engine("sqlite://")
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE orders (id VARCHAR(20) PRIMARY KEY, customer_name VARCHAR(255), "
            "total NUMERIC(10, 2), status VARCHAR(20))"
        ))
        conn.execute(text("INSERT INTO orders (id, customer_name, total, status) VALUES ('OLD0001', 'Ana', 10, 'delivered')"))

    auto_migrate(engine, seed=False)

    columns = {c["name"] for c in inspect(engine).get_columns("orders")}
    assert {"observation", "machine_needed"} <= columns
    with engine.connect() as conn:
        assert conn.execute(text("SELECT customer_name FROM orders WHERE id = 'OLD0001'")).scalar() == "Ana"
    engine.dispose()


def test_timestamps_read_back_as_utc(session_factory, make_order):
    order_id = make_order()
    with session_factory() as s:
        order = s.get(Order, order_id)
        assert order.created_at.tzinfo is not None
        assert order.created_at.utcoffset() == timedelta(0)
