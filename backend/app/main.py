# app/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from app.api import messages, subjects, users
from app.config import COOKIE_SECURE, CORS_ORIGINS, DATABASE_URL
from app.core.errors import AppError, StoreError
from app.core.rate_limit import limiter
from app.infra.message_store import MessageStore
from app.infra.postgres import check_connection, create_db_engine, make_session_factory
from app.models.base import Base
from app.utils.logger import setup_logger

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("Database tables ready")
    yield


def create_app(database_url: Optional[str] = None, cookie_secure: Optional[bool] = None) -> FastAPI:
    setup_logger()

    app = FastAPI(
        title="Homework Hero Backend",
        version="1.0.0",
        description="Tutoring marketplace: users, subjects, search and direct messages",
        lifespan=lifespan,
    )

    # Database handles are built once here and reached through app.state
    engine = create_db_engine(database_url or DATABASE_URL)
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.message_store = MessageStore(app.state.session_factory)
    app.state.cookie_secure = COOKIE_SECURE if cookie_secure is None else cookie_secure

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routers
    app.include_router(users.router, tags=["Users"])
    app.include_router(subjects.router, tags=["Subjects"])
    app.include_router(messages.router, tags=["Messages"])

    @app.get("/health")
    def health_check():
        try:
            check_connection(engine)
        except SQLAlchemyError as e:
            logger.warning("Health check: database unreachable: %s", e)
            return {"status": "ok", "database": "unreachable"}
        return {"status": "ok", "database": "ok"}

    @app.get("/unauthenticated")
    def unauthenticated():
        return {"outcome": "failure", "error": "unauthenticated"}

    return app


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as {"outcome": "failure", "error": ...}."""

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.detail, exc_info=exc.__cause__ or exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
        error = StoreError(str(exc))
        error.__cause__ = exc
        return await store_error_handler(request, error)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        reasons = []
        for error in exc.errors():
            # loc is ("body" | "query" | "path" | ..., field, ...)
            loc = list(error.get("loc", ()))[1:]
            reasons.append(f"{loc[0]}Invalid" if loc else "requestInvalid")
        reasons = list(dict.fromkeys(reasons))
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, reasons)
        return JSONResponse(status_code=400, content={"outcome": "failure", "error": reasons})


app = create_app()
