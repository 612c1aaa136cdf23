from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# =========================
# ENGINE CONFIGURATION
# =========================

def create_db_engine(database_url: str) -> Engine:
    """
    Build the engine for a database URL.
    SQLite (used by the tests) gets a single shared connection so an
    in-memory database survives across sessions.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Check connections before using them
        pool_size=5,         # Maintain 5 connections in the pool
        max_overflow=10,     # Allow 10 extra connections if needed
        pool_recycle=3600,   # Recycle connections every hour
        pool_timeout=10,     # Fail fast when the pool is exhausted
        echo=False           # Set True to see SQL statements (debugging)
    )

# =========================
# SESSION CONFIGURATION
# =========================

def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine
    )

# =========================
# DATABASE FUNCTIONS
# =========================

def get_db(request: Request):
    """
    FastAPI dependency to provide a DB session to routes.
    The session factory is created once by create_app() and lives on app.state.
    Usage:
        def my_route(db: Session = Depends(get_db)):
            ...
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def db_session(session_factory: sessionmaker):
    """
    Context manager for standalone DB operations.
    Usage:
        with db_session(factory) as db:
            user = db.query(User).first()
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def check_connection(engine: Engine) -> bool:
    """
    Run a trivial query; raises on connectivity failure.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True
