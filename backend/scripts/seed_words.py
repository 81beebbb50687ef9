#!/usr/bin/env python3
"""Seed the word datastore from an export file.

The file holds a list of records in wire form (`w`, `c`, `yb`, `cx`, `sy`,
`audio`, ...), as JSON or YAML.

Run with: python3 -m scripts.seed_words words.json [--lexicon res] [--replace]
"""
import argparse
import asyncio
import json
from pathlib import Path

import yaml
from sqlalchemy import delete, select

from core.config import settings
from core.database import get_db_session, engine, Base
from core.datastore import SqlWordStore
from models.record import WordRecord
from models.word import WordEntry, WordEntryCode


def load_records(path: Path) -> list[WordRecord]:
    with open(path, encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    return [WordRecord.from_dict(item) for item in data or []]


async def clear_lexicon(lexicon: str) -> None:
    async with get_db_session() as session:
        entry_pks = select(WordEntry.pk).where(WordEntry.lexicon == lexicon)
        await session.execute(delete(WordEntryCode).where(WordEntryCode.entry_pk.in_(entry_pks)))
        await session.execute(delete(WordEntry).where(WordEntry.lexicon == lexicon))
        await session.commit()
    print(f"Cleared lexicon '{lexicon}'")


async def main(path: Path, lexicon: str, replace: bool) -> None:
    print("Creating tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if replace:
        await clear_lexicon(lexicon)

    records = load_records(path)
    count = await SqlWordStore().add_many(lexicon, records)
    print(f"Seeded {count} records into '{lexicon}' from {path.name}")
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the word datastore")
    parser.add_argument("path", type=Path, help="JSON or YAML export of word records")
    parser.add_argument("--lexicon", default=settings.WORD_DB, help="Datastore database name")
    parser.add_argument("--replace", action="store_true", help="Delete the lexicon's records first")
    args = parser.parse_args()
    asyncio.run(main(args.path, args.lexicon, args.replace))
