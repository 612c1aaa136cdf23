# app/api/deps.py

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from app.config import SESSION_COOKIE_NAME, SESSION_MAX_AGE_SECONDS
from app.core.errors import AuthenticationError
from app.core.user import get_user, resolve_session
from app.infra.postgres import get_db
from app.models.user import User


def get_current_user_id(request: Request, db: Session = Depends(get_db)) -> int:
    """Id of the user behind the session cookie; 401 otherwise."""
    user_id = resolve_session(db, request.cookies.get(SESSION_COOKIE_NAME))
    if user_id is None:
        raise AuthenticationError("unauthenticated")
    return user_id


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = get_user(db, user_id)
    if user is None:
        # Session outlived its user
        raise AuthenticationError("unauthenticated")
    return user


def set_session_cookie(request: Request, response: Response, session_id: str) -> None:
    secure = request.app.state.cookie_secure
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        max_age=SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=secure,
        samesite="none" if secure else "lax",
    )


def clear_session_cookie(request: Request, response: Response) -> None:
    secure = request.app.state.cookie_secure
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        secure=secure,
        samesite="none" if secure else "lax",
    )
