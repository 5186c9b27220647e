"""
PVSync - Database Configuration
SQLAlchemy with the local SQLite sample store
"""

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def sqlite_url(db_path: str | Path) -> str:
    """Build an SQLAlchemy URL for a SQLite file (":memory:" stays in memory)."""
    if str(db_path) == ":memory:":
        return "sqlite://"
    return f"sqlite:///{db_path}"


def create_db_engine(db_path: str | Path) -> Engine:
    """Create the engine for the sample store at db_path."""
    return create_engine(sqlite_url(db_path), echo=False)


def create_session_maker(engine: Engine) -> sessionmaker[Session]:
    """Session factory; objects stay usable after commit."""
    return sessionmaker(
        engine,
        class_=Session,
        expire_on_commit=False,
    )
