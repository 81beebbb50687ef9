"""Primary Word Datastore

Document-style reads (`read(database, collection, filter)`) over the
SQLAlchemy word tables. `database` selects the lexicon namespace; the only
collection is `words`. Filters are exact matches on wire keys, except `c`
which matches records whose code list contains the value.
"""
from typing import Any, Mapping, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.database import AsyncSessionLocal
from core.logging import db_logger
from models.record import WordRecord
from models.word import WordEntry, WordEntryCode

log = db_logger()

WORDS_COLLECTION = "words"

FILTER_COLUMNS = {
    "_id": WordEntry.id,
    "w": WordEntry.word,
    "yb": WordEntry.phonetic,
    "cx": WordEntry.part_of_speech,
    "audio": WordEntry.audio_path,
}


class WordStore(Protocol):
    """Read access to word records."""

    async def read(
        self,
        database: str,
        collection: str,
        filter: Mapping[str, Any],
        limit: int | None = None,
    ) -> list[WordRecord]:
        ...


class SqlWordStore:
    """WordStore backed by the async SQLAlchemy engine."""

    __slots__ = ("_session_factory",)

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal):
        self._session_factory = session_factory

    async def read(
        self,
        database: str,
        collection: str,
        filter: Mapping[str, Any],
        limit: int | None = None,
    ) -> list[WordRecord]:
        _check_collection(collection)

        query = select(WordEntry).where(WordEntry.lexicon == database).order_by(WordEntry.pk)
        for key, value in filter.items():
            if key == "c":
                query = query.where(
                    WordEntry.pk.in_(select(WordEntryCode.entry_pk).where(WordEntryCode.code == value))
                )
            elif key in FILTER_COLUMNS:
                query = query.where(FILTER_COLUMNS[key] == value)
            else:
                raise ValueError(f"Unsupported filter field: {key!r}")
        if limit:
            query = query.limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(query)
            records = [entry.to_record() for entry in result.scalars().all()]

        log.debug("words_read", database=database, filter=dict(filter), count=len(records))
        return records

    async def add(self, database: str, record: WordRecord) -> WordRecord:
        """Insert a record; an id is generated when the record has none."""
        entry = WordEntry.from_record(database, record)
        async with self._session_factory() as session:
            session.add(entry)
            await session.commit()
        return entry.to_record()

    async def add_many(self, database: str, records: list[WordRecord]) -> int:
        entries = [WordEntry.from_record(database, record) for record in records]
        async with self._session_factory() as session:
            session.add_all(entries)
            await session.commit()
        log.info("words_added", database=database, count=len(entries))
        return len(entries)


def _check_collection(collection: str) -> None:
    if collection != WORDS_COLLECTION:
        raise ValueError(f"Unknown collection: {collection!r}")
