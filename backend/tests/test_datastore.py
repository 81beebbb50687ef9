"""Tests for the SQLAlchemy-backed word datastore."""
import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import models  # noqa: F401
from core.database import Base
from core.datastore import SqlWordStore
from models.record import WordRecord

RECORDS = [
    WordRecord(word="a", codes=(4649,), phonetic="[eɪ]", part_of_speech="article."),
    WordRecord(word="a", codes=(1, 4726), phonetic="[ə]", part_of_speech="art.", audio_path="/jh/a.mp3"),
    WordRecord(word="able", codes=(4650, 4649), phonetic="[ˈeɪbl]"),
    WordRecord(word="A", codes=(5000,)),
]


def run_with_store(tmp_path, scenario):
    """Run `scenario(store)` against a fresh SQLite file seeded with RECORDS."""
    async def _run():
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'words.db'}")
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            store = SqlWordStore(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
            await store.add_many("res", RECORDS)
            return await scenario(store)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def test_read_by_word_in_insertion_order(tmp_path):
    records = run_with_store(tmp_path, lambda store: store.read("res", "words", {"w": "a"}))
    assert [r.codes for r in records] == [(4649,), (1, 4726)]
    assert records[1].audio_path == "/jh/a.mp3"
    assert all(r.id for r in records)


def test_word_match_is_case_sensitive(tmp_path):
    records = run_with_store(tmp_path, lambda store: store.read("res", "words", {"w": "A"}))
    assert [r.codes for r in records] == [(5000,)]


def test_code_filter_matches_any_position(tmp_path):
    records = run_with_store(tmp_path, lambda store: store.read("res", "words", {"c": 4649}))
    assert [r.word for r in records] == ["a", "able"]


def test_combined_filters(tmp_path):
    records = run_with_store(tmp_path, lambda store: store.read("res", "words", {"w": "a", "c": 4726}))
    assert [r.phonetic for r in records] == ["[ə]"]


def test_lexicons_are_isolated(tmp_path):
    async def scenario(store):
        await store.add("other", WordRecord(word="a", codes=(9,), id="fixed-id"))
        return await store.read("res", "words", {"w": "a"}), await store.read("other", "words", {"w": "a"})

    res, other = run_with_store(tmp_path, scenario)
    assert len(res) == 2
    assert other == [WordRecord(word="a", codes=(9,), id="fixed-id")]


def test_limit(tmp_path):
    records = run_with_store(tmp_path, lambda store: store.read("res", "words", {"c": 4649}, limit=1))
    assert [r.word for r in records] == ["a"]


def test_unknown_collection(tmp_path):
    with pytest.raises(ValueError, match="Unknown collection"):
        run_with_store(tmp_path, lambda store: store.read("res", "sentences", {}))


def test_unknown_filter_field(tmp_path):
    with pytest.raises(ValueError, match="Unsupported filter field"):
        run_with_store(tmp_path, lambda store: store.read("res", "words", {"zz": 1}))
