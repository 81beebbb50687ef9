"""Translation Fetcher

Youdao translation payloads, served from the file cache when a word was
looked up before. Upstream failures resolve to None: callers treat that as
"no translation available", never as an error.
"""
from clients.youdao import YoudaoClient
from core.errors import Ok, Err
from core.filecache import DictFileCache, sanitize_key
from core.logging import engine_logger

log = engine_logger()

# Playback URLs, status and raw dictionary blobs are not kept on disk
STRIPPED_FIELDS = ("tSpeakUrl", "errorCode", "dict", "webdict", "l", "speakUrl")
STRIPPED_BASIC_FIELDS = ("uk-speech", "us-speech")


def trim_payload(payload: dict) -> dict:
    trimmed = {k: v for k, v in payload.items() if k not in STRIPPED_FIELDS}
    basic = trimmed.get("basic")
    if isinstance(basic, dict):
        trimmed["basic"] = {k: v for k, v in basic.items() if k not in STRIPPED_BASIC_FIELDS}
    return trimmed


class TranslationFetcher:
    """File cache first, then the signed Youdao translation call."""

    __slots__ = ("_files", "_youdao")

    def __init__(self, files: DictFileCache, youdao: YoudaoClient):
        self._files = files
        self._youdao = youdao

    async def fetch(self, word: str) -> dict | None:
        key = sanitize_key(word)

        cached = await self._files.read_translation(key)
        if cached is not None:
            return cached

        match await self._youdao.translate(key):
            case Ok(payload):
                trimmed = trim_payload(payload)
                await self._files.write_translation(key, trimmed)
                log.info("translation_fetched", word=word, key=key)
                return trimmed
            case Err(error):
                log.warning(
                    "translation_unavailable",
                    word=word,
                    error_code=error.code.name,
                    message=error.message,
                )
                return None
