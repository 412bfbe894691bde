"""
Availability Cache
Persists TorBox cache-check answers so repeated stream listings skip the API
"""
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional
from loguru import logger
from sqlalchemy import select, delete, or_
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from torbox_resolver.config import settings
from torbox_resolver.database import async_session
from torbox_resolver.models.availability import AvailabilityRecord
from torbox_resolver.models.torrent import AvailabilityEntry


_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def _upsert_insert(dialect_name: str):
    """INSERT construct supporting ON CONFLICT for the active database"""
    try:
        return _UPSERT_INSERTS[dialect_name]
    except KeyError:
        raise ValueError(f"Availability cache does not support the {dialect_name} dialect") from None


class AvailabilityCache:
    """
    Key-value store of infohash -> AvailabilityEntry backed by SQLAlchemy.
    
    Entries with files live for ``availability_ttl``; "not cached" answers
    expire sooner (``availability_empty_ttl``) so they get re-checked.
    """
    
    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        ttl: Optional[int] = None,
        empty_ttl: Optional[int] = None,
    ):
        self.session_factory = session_factory or async_session
        self.ttl = timedelta(seconds=ttl if ttl is not None else settings.availability_ttl)
        self.empty_ttl = timedelta(seconds=empty_ttl if empty_ttl is not None else settings.availability_empty_ttl)
    
    async def get(self, info_hashes: Iterable[str]) -> Dict[str, AvailabilityEntry]:
        """Return the still-valid entries among ``info_hashes``"""
        keys = list(set(info_hashes))
        if not keys:
            return {}
        
        now = datetime.utcnow()
        async with self.session_factory() as session:
            result = await session.execute(
                select(AvailabilityRecord)
                .where(AvailabilityRecord.infohash.in_(keys))
                .where(AvailabilityRecord.expires_at > now)
            )
            records = result.scalars().all()
        
        return {r.infohash: AvailabilityEntry.from_files(r.files) for r in records}
    
    async def merge(self, entries: Dict[str, AvailabilityEntry]) -> Dict[str, AvailabilityEntry]:
        """
        Store ``entries`` and return them as stored.
        
        Written as a single INSERT ... ON CONFLICT DO UPDATE so concurrent merges of
        the same hash cannot collide. An empty entry never replaces a still-valid
        entry that has files.
        """
        if not entries:
            return {}
        
        now = datetime.utcnow()
        rows = [
            {
                "infohash": info_hash,
                "files": [f.to_dict() for f in entry.files],
                "cached": entry.cached,
                "expires_at": now + (self.ttl if entry.cached else self.empty_ttl),
                "updated_at": now,
            }
            for info_hash, entry in entries.items()
        ]
        
        async with self.session_factory() as session:
            insert = _upsert_insert(session.get_bind().dialect.name)
            stmt = insert(AvailabilityRecord).values(rows)
            stmt = stmt.on_conflict_do_update(
                index_elements=[AvailabilityRecord.infohash],
                set_={
                    "files": stmt.excluded.files,
                    "cached": stmt.excluded.cached,
                    "expires_at": stmt.excluded.expires_at,
                    "updated_at": stmt.excluded.updated_at,
                },
                where=or_(
                    stmt.excluded.cached,
                    AvailabilityRecord.cached.is_(False),
                    AvailabilityRecord.expires_at <= now,
                ),
            )
            await session.execute(stmt)
            
            result = await session.execute(
                select(AvailabilityRecord).where(AvailabilityRecord.infohash.in_(list(entries)))
            )
            stored = {r.infohash: AvailabilityEntry.from_files(r.files) for r in result.scalars().all()}
            await session.commit()
        
        cached_count = sum(1 for e in stored.values() if e.cached)
        logger.debug(f"Availability cache: stored {len(stored)} entries ({cached_count} cached)")
        return stored
    
    async def purge_expired(self) -> int:
        """Delete expired entries. Returns the number removed."""
        async with self.session_factory() as session:
            result = await session.execute(
                delete(AvailabilityRecord).where(AvailabilityRecord.expires_at <= datetime.utcnow())
            )
            await session.commit()
        return result.rowcount or 0


# Singleton instance
availability_cache = AvailabilityCache()
