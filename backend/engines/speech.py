"""Speech Fetcher

Pronunciation audio from saved files, or synthesized by Youdao TTS and
saved in the background for next time.
"""
from clients.youdao import YoudaoClient
from core.errors import AppErrorException, Ok, Err
from core.filecache import DictFileCache, sanitize_key
from core.logging import engine_logger

log = engine_logger()


class SpeechFetcher:
    __slots__ = ("_files", "_youdao")

    def __init__(self, files: DictFileCache, youdao: YoudaoClient):
        self._files = files
        self._youdao = youdao

    async def fetch(self, word: str) -> bytes:
        """MP3 bytes for `word`.

        Raises:
            AppErrorException: the TTS service could not be reached.
        """
        key = sanitize_key(word)

        saved = await self._files.find_speech(key)
        if saved is not None:
            return await self._files.read_bytes(saved)

        match await self._youdao.synthesize(key):
            case Ok(audio):
                self._files.write_speech_in_background(key, audio)
                log.info("speech_synthesized", word=word, key=key, size=len(audio))
                return audio
            case Err(error):
                raise AppErrorException(error.with_metadata(word=word))
