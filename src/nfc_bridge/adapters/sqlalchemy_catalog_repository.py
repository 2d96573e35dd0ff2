"""SQLAlchemy implementation of the trigger catalog store."""

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from nfc_bridge.adapters.database import AlbumRecord, Database, MovieRecord
from nfc_bridge.domain.catalog import CatalogEntry, MediaKind
from nfc_bridge.domain.errors import CatalogStoreError
from nfc_bridge.services.catalog import CatalogRepository

_logger = logging.getLogger(__name__)

_RECORDS: dict[MediaKind, type[MovieRecord] | type[AlbumRecord]] = {
    MediaKind.MOVIE: MovieRecord,
    MediaKind.ALBUM: AlbumRecord,
}


@dataclass
class SqlAlchemyCatalogRepository(CatalogRepository):
    """Catalog store backed by one table per media kind."""

    database: Database

    async def find_by_trigger(
        self, kind: MediaKind, trigger_word: str
    ) -> CatalogEntry | None:
        """Return the entry bound to a trigger word, if present."""
        record = _RECORDS[kind]
        try:
            async with self.database.session() as session:
                row = await session.scalar(
                    select(record).where(record.trigger_word == trigger_word).limit(1)
                )
        except SQLAlchemyError as exc:
            raise CatalogStoreError(f"Failed to look up {kind} trigger") from exc
        return _to_entry(row) if row else None

    async def insert_entry(
        self,
        kind: MediaKind,
        display_name: str,
        trigger_word: str,
        external_item_id: str,
    ) -> CatalogEntry | None:
        """Insert a binding; return None when it collides with an existing one."""
        record = _RECORDS[kind]
        row = record(
            name=display_name, trigger_word=trigger_word, jellyfin_id=external_item_id
        )
        try:
            async with self.database.session() as session:
                session.add(row)
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    return None
        except SQLAlchemyError as exc:
            raise CatalogStoreError(f"Failed to insert {kind} entry") from exc
        return _to_entry(row)

    async def list_entries(self, kind: MediaKind) -> list[CatalogEntry]:
        """Return all entries of a kind ordered by display name."""
        record = _RECORDS[kind]
        try:
            async with self.database.session() as session:
                rows = await session.scalars(select(record).order_by(record.name))
                return [_to_entry(row) for row in rows]
        except SQLAlchemyError as exc:
            raise CatalogStoreError(f"Failed to list {kind} entries") from exc

    async def count_entries(self, kind: MediaKind) -> int:
        """Return the number of entries of a kind."""
        record = _RECORDS[kind]
        try:
            async with self.database.session() as session:
                count = await session.scalar(select(func.count()).select_from(record))
        except SQLAlchemyError as exc:
            raise CatalogStoreError(f"Failed to count {kind} entries") from exc
        return int(count or 0)

    async def delete_entry(self, kind: MediaKind, entry_id: int) -> None:
        """Delete an entry by id; missing ids are ignored."""
        record = _RECORDS[kind]
        try:
            async with self.database.session() as session:
                await session.execute(delete(record).where(record.id == entry_id))
                await session.commit()
        except SQLAlchemyError as exc:
            raise CatalogStoreError(f"Failed to delete {kind} entry") from exc
        _logger.info("Deleted %s entry", kind, extra={"entry_id": entry_id})


def _to_entry(row: MovieRecord | AlbumRecord) -> CatalogEntry:
    return CatalogEntry(
        id=row.id,
        display_name=row.name,
        trigger_word=row.trigger_word,
        external_item_id=row.jellyfin_id,
    )
