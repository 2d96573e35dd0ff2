"""Database utilities for the catalog store."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import Integer, MetaData, String
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for catalog tables."""

    metadata = MetaData()


class MovieRecord(Base):
    """Row of the movies table."""

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("movie", String, nullable=False)
    trigger_word: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    jellyfin_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)


class AlbumRecord(Base):
    """Row of the albums table."""

    __tablename__ = "albums"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("album", String, nullable=False)
    trigger_word: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    jellyfin_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)


class Database:
    """Thin wrapper managing the SQLAlchemy async engine and sessions."""

    def __init__(self, database_url: str):
        self._engine: AsyncEngine = create_async_engine(database_url)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self._engine, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_all(self) -> None:
        """Create catalog tables if they do not yet exist."""
        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Dispose of the underlying database engine."""
        await self._engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a session scope around a series of operations."""
        async with self.session_factory() as session:
            yield session
