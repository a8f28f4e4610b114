"""
Database engine, session factory and the FastAPI session dependency.
"""
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from config import settings


def _resolve_url(database_url: str) -> str:
    """Use the psycopg3 dialect for plain postgresql:// URLs."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://")
    return database_url


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite files get their parent directory created; server databases get
    a small pre-pinged connection pool.
    """
    url = _resolve_url(database_url)

    if url.startswith("sqlite"):
        database = make_url(url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=5,
        pool_timeout=30,  # Wait up to 30s for a connection
        pool_pre_ping=True,  # Verify connections before using them
        pool_recycle=300,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# Session factory
SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def get_session() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get a database session.
    Properly closes the session after the request completes.
    Usage in endpoints:
        def my_endpoint(db: Session = Depends(get_session)):
            ...
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
