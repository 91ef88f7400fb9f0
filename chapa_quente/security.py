"""
Password hashing and bearer-token auth.

Tokens are HS256 JWTs carrying the user id, email and admin flag. Three
FastAPI dependencies gate the routes:

- ``optional_user``: anonymous on a missing or bad token
- ``require_user``: 401 unless a valid token is present
- ``require_admin``: 403 for authenticated non-admins
"""
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from chapa_quente import config
from chapa_quente.app_logger import get_logger
from chapa_quente.models import User, utcnow

log = get_logger("security")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=config.BCRYPT_ROUNDS)


class TokenIdentity(BaseModel):
    user_id: str
    email: str
    is_admin: bool = False


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def check_jwt_secret() -> bool:
    """Warn when tokens are signed with the built-in development secret."""
    if config.JWT_SECRET == config.DEFAULT_JWT_SECRET:
        log.warning("JWT_SECRET is not set; tokens are signed with the default development secret")
        return False
    return True


def create_access_token(user: User) -> str:
    payload = {
        "user_id": user.id,
        "email": user.email,
        "is_admin": bool(user.is_admin),
        "exp": utcnow() + timedelta(days=config.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenIdentity:
    claims = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    return TokenIdentity(
        user_id=claims["user_id"],
        email=claims["email"],
        is_admin=bool(claims.get("is_admin", False)),
    )


def _split_bearer(authorization: str) -> Optional[str]:
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


def optional_user(authorization: Optional[str] = Header(default=None)) -> Optional[TokenIdentity]:
    if not authorization:
        return None
    token = _split_bearer(authorization)
    if token is None:
        return None
    try:
        return decode_access_token(token)
    except (JWTError, KeyError) as e:
        log.debug("ignoring bad token on optional-auth route: %s", e)
        return None


def require_user(authorization: Optional[str] = Header(default=None)) -> TokenIdentity:
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token not provided")
    token = _split_bearer(authorization)
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Malformed token")
    try:
        return decode_access_token(token)
    except ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except (JWTError, KeyError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def require_admin(user: TokenIdentity = Depends(require_user)) -> TokenIdentity:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admins only")
    return user
