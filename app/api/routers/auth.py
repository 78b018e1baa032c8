import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security.session_tokens import (
    SessionTokenError,
    create_session_token,
    decode_session_token,
)
from app.crud.users import authenticate, get_user
from app.db.session import get_db
from app.schemas.users import LoginRequest, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=UserOut)
def login_api(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = authenticate(db, payload.username, payload.password)
    if user is None:
        logger.info("login_failed username=%s", payload.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(user.id, user.username),
        max_age=settings.SESSION_TOKEN_TTL_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    logger.info("login_succeeded user_id=%s", user.id)
    return user


@router.post("/logout")
def logout_api(response: Response):
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return {"success": True}


@router.get("/me", response_model=UserOut)
def me_api(request: Request, db: Session = Depends(get_db)):
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        claims = decode_session_token(token)
    except SessionTokenError:
        raise HTTPException(status_code=401, detail="Invalid session")

    user = get_user(db, claims["user_id"])
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid session")
    return user
