"""
Database handle and session dependency.

The Database object is built by the application entry point and stored on
``app.state``; request handlers get a session per request through ``get_db``.
"""

import logging
from typing import Iterator
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from carefit.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine and session factory for one process."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=engine
        )

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "Database":
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
            if ":memory:" in url:
                engine = create_engine(
                    url,
                    connect_args=connect_args,
                    poolclass=StaticPool,
                    echo=echo,
                )
            else:
                engine = create_engine(url, connect_args=connect_args, echo=echo)
        else:
            engine = create_engine(url, pool_pre_ping=True, echo=echo)
        return cls(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        access = "service" if settings.uses_service_credential else "anon"
        logger.info(f"[DATABASE] Connecting with {access} credential")
        return cls.from_url(settings.effective_database_url, echo=settings.database_echo)

    def create_all(self) -> None:
        # Register mapped classes before creating tables
        from carefit import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a session bound to the app's database."""
    session = request.app.state.database.session()
    try:
        yield session
    finally:
        session.close()
