"""Field Resolution

Picks one display phonetic, part of speech, gloss and audio URL for a word
out of the duplicate records different textbooks keep for it.

An authoritative record (primary code 1) is taken verbatim. Otherwise each
field goes to a majority vote: the value seen most often wins and ties go
to the value seen first. Audio is the first audio path in record order,
falling back to the curated recording directories.

UK phonetics share the phonetic tally, but their count is bumped under the
condition that the record's *generic* phonetic is already tallied and is
reset to 1 otherwise. A UK value bumped before it was ever tallied counts
as NaN and can never win. Majority outcomes depend on this, so it is kept.
"""
import math
from collections import OrderedDict
from typing import NamedTuple, Sequence

from core.filecache import DictFileCache
from core.logging import engine_logger
from engines.config import WordServiceConfig
from engines.lexicon import LexiconEngine
from models.record import WordRecord

log = engine_logger()


class ResolvedEntry(NamedTuple):
    phonetic: str
    part_of_speech: str
    gloss: str
    audio_url: str


class FieldChoice(NamedTuple):
    phonetic: str
    part_of_speech: str
    gloss: str
    audio_path: str
    authoritative: bool


def _bump(tally: dict[str, float], value: str) -> None:
    tally[value] = tally[value] + 1 if value in tally else 1


def majority(tally: dict[str, float]) -> str:
    """Most frequent value; the earliest one wins ties."""
    best, best_count = "", 0
    for value, count in tally.items():
        if count > best_count:
            best, best_count = value, count
    return best


def choose_fields(records: Sequence[WordRecord]) -> FieldChoice:
    phonetics: dict[str, float] = {}
    parts_of_speech: dict[str, float] = {}
    glosses: dict[str, float] = {}
    audio_path = ""

    for record in records:
        if record.is_authoritative:
            return FieldChoice(
                record.phonetic or "",
                record.part_of_speech or "",
                record.gloss or "",
                record.audio_path or "",
                True,
            )

        if record.phonetic:
            _bump(phonetics, record.phonetic)
        if record.uk_phonetic:
            if record.phonetic in phonetics:
                phonetics[record.uk_phonetic] = phonetics.get(record.uk_phonetic, math.nan) + 1
            else:
                phonetics[record.uk_phonetic] = 1
        if record.part_of_speech:
            _bump(parts_of_speech, record.part_of_speech)
        if record.gloss:
            _bump(glosses, record.gloss)
        if record.audio_path and not audio_path:
            audio_path = record.audio_path

    return FieldChoice(
        majority(phonetics),
        majority(parts_of_speech),
        majority(glosses),
        audio_path,
        False,
    )


class FieldResolver:
    """Memoized best-field resolution.

    Entries live in an LRU bounded by `resolved_cache_size`; a size of 0
    keeps every entry for the life of the process.
    """

    __slots__ = ("_config", "_lexicon", "_files", "_memo")

    def __init__(self, config: WordServiceConfig, lexicon: LexiconEngine, files: DictFileCache):
        self._config = config
        self._lexicon = lexicon
        self._files = files
        self._memo: OrderedDict[str, ResolvedEntry] = OrderedDict()

    async def resolve(self, word: str, preserve_case: bool = False) -> ResolvedEntry:
        src_word = word
        key = word if preserve_case else word.lower()

        cached = self._memo.get(key)
        if cached is not None:
            self._memo.move_to_end(key)
            return cached

        records = await self._lexicon.resolve_word(key)
        choice = choose_fields(records)

        prefix = self._config.audio_url_prefix
        if choice.audio_path:
            audio_url = prefix + choice.audio_path
        else:
            found = await self._files.find_curated_audio(key, src_word)
            audio_url = prefix + found if found else ""

        entry = ResolvedEntry(choice.phonetic, choice.part_of_speech, choice.gloss, audio_url)
        self._remember(key, entry)
        log.debug(
            "fields_resolved",
            word=key,
            records=len(records),
            authoritative=choice.authoritative,
            audio=bool(audio_url),
        )
        return entry

    def _remember(self, key: str, entry: ResolvedEntry) -> None:
        self._memo[key] = entry
        capacity = self._config.resolved_cache_size
        if capacity > 0:
            while len(self._memo) > capacity:
                self._memo.popitem(last=False)

    def __contains__(self, word: str) -> bool:
        return word in self._memo

    def __len__(self) -> int:
        return len(self._memo)
