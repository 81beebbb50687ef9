"""Word Service

Facade over the lookup engines, wired from one `WordServiceConfig`.

Usage:
    service = init("res", "/srv/dict", app_key, app_secret, SqlWordStore(), InMemoryCache())
    phonetic, pos, gloss, audio_url = await service.resolve_best_fields("Apple")
"""
from pathlib import Path

import httpx

from clients.youdao import YoudaoClient
from core.cache import FastCache
from core.config import Settings
from core.datastore import WordStore
from core.filecache import DictFileCache, WriteErrorHook
from core.logging import engine_logger
from engines.config import WordServiceConfig
from engines.lexicon import LexiconEngine
from engines.resolution import FieldResolver, ResolvedEntry
from engines.speech import SpeechFetcher
from engines.translation import TranslationFetcher
from models.record import WordRecord

log = engine_logger()


class WordService:
    """Dictionary lookups: course lists, merged records, translations, speech, display fields."""

    def __init__(
        self,
        config: WordServiceConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        on_write_error: WriteErrorHook | None = None,
    ):
        self.config = config
        self.files = DictFileCache(config.file_cache_root, on_write_error=on_write_error)
        self.youdao = YoudaoClient(
            config.app_key,
            config.app_secret,
            client=http_client,
            timeout_seconds=config.timeout_seconds,
        )
        self.translations = TranslationFetcher(self.files, self.youdao)
        self.speech = SpeechFetcher(self.files, self.youdao)
        self.lexicon = LexiconEngine(config, self.translations)
        self.resolver = FieldResolver(config, self.lexicon, self.files)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        datastore: WordStore,
        cache: FastCache,
        **kwargs,
    ) -> "WordService":
        config = WordServiceConfig(
            store=settings.WORD_DB,
            file_cache_root=Path(settings.DICT_PATH),
            app_key=settings.YOUDAO_APP_KEY,
            app_secret=settings.YOUDAO_APP_SECRET,
            datastore=datastore,
            cache=cache,
            cache_ttl=settings.CACHE_TTL_XXL,
            audio_url_prefix=settings.AUDIO_URL_PREFIX,
            resolved_cache_size=settings.RESOLVED_CACHE_SIZE,
            timeout_seconds=settings.YOUDAO_TIMEOUT_SECONDS,
        )
        return cls(config, **kwargs)

    async def list_by_code(self, code: int) -> list[WordRecord]:
        return await self.lexicon.list_by_code(code)

    async def resolve_word(self, word: str) -> list[WordRecord]:
        return await self.lexicon.resolve_word(word)

    async def fetch_translation(self, word: str) -> dict | None:
        return await self.translations.fetch(word)

    async def fetch_speech(self, word: str) -> bytes:
        return await self.speech.fetch(word)

    async def resolve_best_fields(self, word: str, preserve_case: bool = False) -> ResolvedEntry:
        return await self.resolver.resolve(word, preserve_case)

    async def aclose(self) -> None:
        """Finish background file writes and close the HTTP client if owned."""
        await self.files.drain()
        await self.youdao.aclose()


def init(
    store: str,
    file_cache_root: str | Path,
    app_key: str,
    app_secret: str,
    datastore: WordStore,
    cache: FastCache,
    *,
    http_client: httpx.AsyncClient | None = None,
    on_write_error: WriteErrorHook | None = None,
    **options,
) -> WordService:
    """Build the configuration once and return the service wired with it.

    `options` are the remaining `WordServiceConfig` fields (`cache_ttl`,
    `audio_url_prefix`, `resolved_cache_size`, `timeout_seconds`).
    """
    config = WordServiceConfig(
        store=store,
        file_cache_root=Path(file_cache_root),
        app_key=app_key,
        app_secret=app_secret,
        datastore=datastore,
        cache=cache,
        **options,
    )
    log.info("word_service_initialized", store=store, file_cache_root=str(config.file_cache_root))
    return WordService(config, http_client=http_client, on_write_error=on_write_error)
