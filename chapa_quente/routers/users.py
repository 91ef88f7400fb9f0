from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from chapa_quente.database import get_db
from chapa_quente.errors import ChapaError, to_http
from chapa_quente.schemas import AdminFlagUpdate, ProfileUpdate, RedeemResponse, UserList, UserOut
from chapa_quente.security import TokenIdentity, require_admin, require_user
from chapa_quente.services import users as user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def me(db: Session = Depends(get_db), user: TokenIdentity = Depends(require_user)):
    try:
        return UserOut.model_validate(user_service.get_user(db, user.user_id))
    except ChapaError as e:
        raise to_http(e)


@router.put("/me", response_model=UserOut)
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: TokenIdentity = Depends(require_user),
):
    try:
        updated = user_service.update_profile(
            db,
            user.user_id,
            name=payload.name,
            email=payload.email,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except ChapaError as e:
        raise to_http(e)
    return UserOut.model_validate(updated)


@router.post("/loyalty/redeem", response_model=RedeemResponse)
def redeem(db: Session = Depends(get_db), user: TokenIdentity = Depends(require_user)):
    try:
        updated = user_service.redeem_loyalty(db, user.user_id)
    except ChapaError as e:
        raise to_http(e)
    return RedeemResponse(message="Reward redeemed, enjoy a free hot dog!", new_points=updated.loyalty_points)


@router.get("", response_model=UserList)
def list_users(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    return UserList(users=[UserOut.model_validate(u) for u in user_service.list_users(db, limit, offset)])


@router.patch("/{user_id}/admin", response_model=UserOut)
def set_admin(
    user_id: str,
    payload: AdminFlagUpdate,
    db: Session = Depends(get_db),
    admin: TokenIdentity = Depends(require_admin),
):
    try:
        return UserOut.model_validate(user_service.set_admin(db, user_id, payload.is_admin))
    except ChapaError as e:
        raise to_http(e)
