from pathlib import Path
from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL, preparing the directory for SQLite files."""
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}

    if is_sqlite and ":memory:" not in database_url:
        db_path = database_url.replace("sqlite:///", "", 1)
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(database_url, echo=echo, connect_args=connect_args)


def get_session(request: Request) -> Generator[Session, None, None]:
    """Get database session on the app's engine"""
    with Session(request.app.state.engine) as session:
        yield session


def init_db(bind: Engine) -> None:
    """Initialize database - create all tables"""
    # Import models so they're registered with SQLModel metadata
    from storefront.models.content import Product, Service  # noqa: F401

    SQLModel.metadata.create_all(bind)
