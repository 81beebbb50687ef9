"""Lexicon Lookup and Word Aggregation

Course word lists come straight from the datastore. Single-word lookups merge
every datastore record for the word with one record synthesized from the
Youdao translation, and keep the merged list in the fast cache.
"""
import json

from core.datastore import WORDS_COLLECTION
from core.logging import engine_logger
from engines.config import WordServiceConfig
from engines.translation import TranslationFetcher
from models.record import SYNTHESIZED_CODE, WordRecord

log = engine_logger()

CACHE_KEY_PREFIX = "mongoWords:"


def cache_key(word: str) -> str:
    """Fast-cache key; case is preserved."""
    return CACHE_KEY_PREFIX + word


def bracketed(phonetic: str | None) -> str:
    return f"[{phonetic}]" if phonetic else ""


def synthesize_record(word: str, payload: dict) -> WordRecord | None:
    """Record built from a translation payload, or None when it carries no meaning."""
    basic = payload.get("basic")
    translation = payload.get("translation")
    if basic is None and translation in (None, ""):
        return None

    basic = basic if isinstance(basic, dict) else {}
    explains = basic.get("explains")
    if explains is not None:
        gloss = "\n".join(explains)
    elif isinstance(translation, list):
        gloss = "\n".join(translation)
    else:
        gloss = translation or ""

    return WordRecord(
        word=word,
        codes=(SYNTHESIZED_CODE,),
        uk_phonetic=bracketed(basic.get("uk-phonetic")),
        us_phonetic=bracketed(basic.get("us-phonetic")),
        gloss=gloss,
    )


class LexiconEngine:
    """Datastore reads plus the cached word aggregation."""

    __slots__ = ("_config", "_translations")

    def __init__(self, config: WordServiceConfig, translations: TranslationFetcher):
        self._config = config
        self._translations = translations

    async def list_by_code(self, code: int) -> list[WordRecord]:
        """Every record tagged with a course or chapter code."""
        return await self._config.datastore.read(
            self._config.store, WORDS_COLLECTION, {"c": code}
        )

    async def resolve_word(self, word: str) -> list[WordRecord]:
        """All records for `word`, datastore first, translation-derived last.

        A cached list is returned as-is. On a miss the merged list is cached
        even when it is empty.
        """
        key = cache_key(word)
        cached = await self._config.cache.get(key, -1)
        if cached:
            return [WordRecord.from_dict(item) for item in json.loads(cached)]

        records = list(await self._config.datastore.read(
            self._config.store, WORDS_COLLECTION, {"w": word}
        ))

        payload = await self._translations.fetch(word)
        if payload:
            synthesized = synthesize_record(word, payload)
            if synthesized is not None:
                records.append(synthesized)

        await self._config.cache.set(
            key,
            json.dumps([r.to_dict() for r in records], ensure_ascii=False),
            self._config.cache_ttl,
        )
        log.debug("word_resolved", word=word, records=len(records))
        return records
