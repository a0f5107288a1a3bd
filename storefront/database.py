"""
Database handle and request-scoped session management.
"""
from __future__ import annotations

from typing import Any, Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.config import Settings


class Database:
    """
    Owns one engine and session factory. Built by the application lifespan
    and stored on ``app.state.database``.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_recycle: int = 1800,
        echo: bool = False,
    ) -> None:
        self.url = url
        if url.startswith("sqlite"):
            # In-memory SQLite must share a single connection across threads.
            self.engine: Engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=echo,
            )
        else:
            self.engine = create_engine(
                url,
                pool_pre_ping=True,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=pool_recycle,
                echo=echo,
            )
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
            echo=settings.app_debug,
        )

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """
        Register models and create any missing tables.
        """
        from storefront.models import Base

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        from storefront.models import Base

        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        """
        Return True when the database connection is healthy.
        """
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def health(self) -> dict[str, Any]:
        """
        Return structured database health details.
        """
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return {
                "ok": True,
                "dialect": self.engine.dialect.name,
                "database": self.engine.url.database,
            }
        except SQLAlchemyError as exc:
            return {
                "ok": False,
                "dialect": self.engine.dialect.name,
                "error": str(exc),
            }

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database handle is not initialized.")
    return database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for getting a request-scoped database session.
    """
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
