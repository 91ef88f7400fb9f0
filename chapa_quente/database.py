"""
Database Helper Functions

Engine and session factory for the relational store, the request-scoped
session dependency, and the startup auto-migration (idempotent table creation,
late column additions and first-run seed).

The engine is created once at startup and kept on ``app.state``; each request
gets its own Session through ``get_db``.
"""
import re
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, inspect, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from chapa_quente import config
from chapa_quente.app_logger import get_logger
from chapa_quente.catalog import DEFAULT_MENU, DEFAULT_STOCK
from chapa_quente.models import Base, Product, Stock, User
from chapa_quente.security import hash_password

log = get_logger("database")

# Columns added after the first release; (table, column, DDL type)
LATE_COLUMNS = [
    ("orders", "observation", "TEXT"),
    ("orders", "machine_needed", "BOOLEAN DEFAULT FALSE"),
]


def _mask(url: str) -> str:
    return re.sub(r"//([^:@/]+)(?::[^@/]+)?@", r"//\1:*****@", url)


def create_db_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    url = url or config.DATABASE_URL
    kwargs = {"echo": config.SQL_ECHO if echo is None else echo}
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(url, **kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    log.info("database engine ready: %s", _mask(url))
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db(request: Request) -> Iterator[Session]:
    factory = getattr(request.app.state, "session_factory", None)
    if factory is None:
        raise RuntimeError("Database not available. Check the DATABASE_URL environment variable.")
    db = factory()
    try:
        yield db
    finally:
        db.close()


# Auto-migration

def _add_missing_columns(engine: Engine) -> None:
    inspector = inspect(engine)
    for table, column, ddl in LATE_COLUMNS:
        existing = {c["name"] for c in inspector.get_columns(table)}
        if column in existing:
            continue
        with engine.begin() as conn:
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}"))
        log.info("added column %s.%s", table, column)


def seed_defaults(db: Session) -> None:
    """Insert the default menu and admin account into an empty database."""
    has_products = db.scalar(select(Product.id).limit(1)) is not None
    if not has_products:
        for entry in DEFAULT_MENU:
            product = Product(**entry)
            product.stock = Stock(quantity=DEFAULT_STOCK)
            db.add(product)
        log.info("seeded %d products", len(DEFAULT_MENU))

    admin_email = config.ADMIN_EMAIL.lower()
    if db.scalar(select(User.id).where(User.email == admin_email)) is None:
        db.add(User(
            name=config.ADMIN_NAME,
            email=admin_email,
            password_hash=hash_password(config.ADMIN_PASSWORD),
            is_admin=True,
        ))
        log.info("seeded admin account %s", admin_email)
    db.commit()


def auto_migrate(engine: Engine, seed: bool = True) -> None:
    Base.metadata.create_all(engine)
    _add_missing_columns(engine)
    if seed:
        with Session(engine) as db:
            seed_defaults(db)
    log.info("schema is up to date")
