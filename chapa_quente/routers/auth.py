from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chapa_quente.database import get_db
from chapa_quente.errors import ChapaError, to_http
from chapa_quente.schemas import AuthResponse, GuestRequest, LoginRequest, RegisterRequest, UserOut
from chapa_quente.security import create_access_token
from chapa_quente.services import users as user_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    try:
        user = user_service.register(db, payload.name, payload.email, payload.password)
    except ChapaError as e:
        raise to_http(e)
    return AuthResponse(user=UserOut.model_validate(user), token=create_access_token(user))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = user_service.authenticate(db, payload.email, payload.password)
    except ChapaError as e:
        raise to_http(e)
    return AuthResponse(user=UserOut.model_validate(user), token=create_access_token(user))


@router.post("/guest", response_model=AuthResponse)
def guest(payload: GuestRequest):
    try:
        profile = user_service.guest_profile(payload.name)
    except ChapaError as e:
        raise to_http(e)
    # Guests order without a token
    return AuthResponse(user=UserOut(**profile), token=None)
