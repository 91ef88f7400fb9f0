"""
Accounts and the loyalty card.

Every order placed by a signed-in customer stamps one point on the card, up
to ``LOYALTY_GOAL``. A full card can be redeemed, which empties it and starts
a new cycle.
"""
import time
from typing import List, Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from chapa_quente.app_logger import get_logger
from chapa_quente.errors import (
    EmailTaken,
    InvalidCredentials,
    LoyaltyNotReady,
    UserNotFound,
    ValidationFailed,
)
from chapa_quente.models import User, utcnow
from chapa_quente.security import hash_password, verify_password

log = get_logger("users")

LOYALTY_GOAL = 10
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(func.lower(User.email) == normalize_email(email)))


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound(user_id)
    return user


def register(db: Session, name: Optional[str], email: Optional[str], password: Optional[str]) -> User:
    if not name or not email or not password:
        raise ValidationFailed("Name, email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if find_by_email(db, email) is not None:
        raise EmailTaken(email)

    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        loyalty_points=0,
        loyalty_started_at=utcnow(),
    )
    db.add(user)
    db.commit()
    log.info("registered user %s", user.id)
    return user


def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> User:
    if not email or not password:
        raise ValidationFailed("Email and password are required")
    user = find_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials("Invalid email or password")
    return user


def guest_profile(name: Optional[str]) -> dict:
    """A throwaway identity for ordering without an account. Never persisted."""
    if not name or not name.strip():
        raise ValidationFailed("Name is required")
    return {
        "id": f"guest_{int(time.time() * 1000)}",
        "name": name.strip(),
        "email": None,
        "loyalty_points": 0,
        "is_admin": False,
        "is_guest": True,
    }


def update_profile(
    db: Session,
    user_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    current_password: Optional[str] = None,
    new_password: Optional[str] = None,
) -> User:
    user = get_user(db, user_id)

    if new_password:
        if not current_password:
            raise ValidationFailed("Current password is required to change the password")
        if not verify_password(current_password, user.password_hash):
            raise InvalidCredentials("Current password is incorrect")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if email:
        other = find_by_email(db, email)
        if other is not None and other.id != user.id:
            raise EmailTaken(email)
        user.email = normalize_email(email)
    if name:
        user.name = name.strip()
    if new_password:
        user.password_hash = hash_password(new_password)

    user.updated_at = utcnow()
    db.commit()
    return user


def award_loyalty_point(db: Session, user_id: str) -> None:
    # One atomic UPDATE, clamped in SQL; the caller owns the transaction
    stamped = func.coalesce(User.loyalty_points, 0) + 1
    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            loyalty_points=case((stamped > LOYALTY_GOAL, LOYALTY_GOAL), else_=stamped),
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session="fetch")
    )


def redeem_loyalty(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    if (user.loyalty_points or 0) < LOYALTY_GOAL:
        raise LoyaltyNotReady(f"You need {LOYALTY_GOAL} stamps to redeem the reward")
    now = utcnow()
    user.loyalty_points = 0
    user.loyalty_started_at = now
    user.updated_at = now
    db.commit()
    log.info("user %s redeemed a loyalty reward", user.id)
    return user


def list_users(db: Session, limit: int = 50, offset: int = 0) -> List[User]:
    stmt = select(User).order_by(User.created_at.desc()).limit(limit).offset(offset)
    return list(db.scalars(stmt))


def set_admin(db: Session, user_id: str, is_admin: bool) -> User:
    user = get_user(db, user_id)
    user.is_admin = is_admin
    user.updated_at = utcnow()
    db.commit()
    log.info("user %s admin flag set to %s", user.id, is_admin)
    return user
