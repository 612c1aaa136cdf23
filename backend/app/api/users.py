# app/api/users.py

import logging

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import clear_session_cookie, set_session_cookie
from app.config import LOGIN_RATE_LIMIT, SESSION_COOKIE_NAME, SESSION_MAX_AGE_SECONDS
from app.core.rate_limit import limiter
from app.core.user import authenticate, close_session, open_session, register_user
from app.infra.postgres import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users")


class RegisterUserSchema(BaseModel):
    userType: str = ""
    first: str = ""
    last: str = ""
    email1: str = ""
    dob: str = ""
    email2: str = ""
    password: str = ""
    confirm: str = ""


class LoginSchema(BaseModel):
    email: str = ""
    password: str = ""


@router.post("/register")
@limiter.limit(LOGIN_RATE_LIMIT)
def register_user_endpoint(
    request: Request,
    response: Response,
    payload: RegisterUserSchema,
    db: Session = Depends(get_db),
):
    user = register_user(db, payload.model_dump())
    session_id = open_session(db, user.id, SESSION_MAX_AGE_SECONDS)
    set_session_cookie(request, response, session_id)

    logger.info("Registered %s user %s", user.user_type, user.id)
    return {"outcome": "success", "userId": user.id}


@router.post("/login")
@limiter.limit(LOGIN_RATE_LIMIT)
def login_endpoint(
    request: Request,
    response: Response,
    payload: LoginSchema,
    db: Session = Depends(get_db),
):
    user = authenticate(db, payload.email, payload.password)
    session_id = open_session(db, user.id, SESSION_MAX_AGE_SECONDS)
    set_session_cookie(request, response, session_id)

    logger.info("User %s logged in", user.id)
    return {
        "outcome": "success",
        "userId": user.id,
        "userType": user.user_type,
        "first": user.first,
        "last": user.last,
    }


@router.get("/logout")
def logout_endpoint(request: Request, response: Response, db: Session = Depends(get_db)):
    close_session(db, request.cookies.get(SESSION_COOKIE_NAME))
    clear_session_cookie(request, response)
    return {"outcome": "success", "loggedOut": True}
