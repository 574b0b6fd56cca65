"""
Database engine and session management.
"""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mediconnect.core.config import settings
from mediconnect.db.base import Base


def build_engine(database_url: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    options = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return create_engine(database_url, **options)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _register_models() -> None:
    from mediconnect.models import credential, kv_entry  # noqa: F401


def create_tables(bind: Engine = engine) -> None:
    """Create the credential, revoked token and key-value tables."""
    _register_models()
    Base.metadata.create_all(bind=bind)


def drop_tables(bind: Engine = engine) -> None:
    """Drop all tables."""
    _register_models()
    Base.metadata.drop_all(bind=bind)
