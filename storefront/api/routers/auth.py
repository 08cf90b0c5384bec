# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_token_service
from storefront.data.database import get_db
from storefront.domain.errors import AuthenticationFailed, EmailTaken
from storefront.domain.schemas import LoginIn, MessageOut, SignupIn, TokenOut, UserOut
from storefront.services.auth_service import AuthService
from storefront.services.token_service import AuthContext, TokenService

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=TokenOut, status_code=201)
def signup(
    payload: SignupIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    service = AuthService(db, tokens)
    try:
        user, token = service.signup(payload)
    except EmailTaken as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Signup successful", "token": token, "user": user}


@router.post("/login", response_model=TokenOut)
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    service = AuthService(db, tokens)
    try:
        user, token = service.login(payload)
    except AuthenticationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Login successful", "token": token, "user": user}


@router.post("/logout", response_model=MessageOut)
def logout(
    ctx: AuthContext = Depends(get_current_user),
    tokens: TokenService = Depends(get_token_service),
):
    tokens.revoke(ctx)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserOut)
def current_user(ctx: AuthContext = Depends(get_current_user)):
    return {"user": ctx.public()}
