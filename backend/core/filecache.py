"""On-disk dictionary cache.

Layout under the cache root:
    dict/<key>.json              trimmed translation payloads
    wyaudio/youdao/<key>.mp3     synthesized speech
    wyaudio/{p,jh,sh}/<word>.mp3 curated recordings, probed in that order

Blocking file I/O runs in worker threads so the event loop never stalls.
"""
import asyncio
import json
import re
from pathlib import Path
from typing import Callable

from core.errors import AppError, file_write_error
from core.logging import cache_logger

log = cache_logger()

UNSAFE_KEY_CHARS = re.compile(r"[/\\%]")
CURATED_AUDIO_SOURCES = ("p", "jh", "sh")

WriteErrorHook = Callable[[AppError], None]


def sanitize_key(word: str) -> str:
    """Filesystem-safe cache key: path separators and `%` become commas."""
    return UNSAFE_KEY_CHARS.sub(",", word)


def log_write_error(error: AppError) -> None:
    log.warning(
        "cache_write_failed",
        error_code=error.code.name,
        message=error.message,
        path=error.metadata.get("path"),
    )


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class DictFileCache:
    """Translation payloads and audio files keyed by sanitized word."""

    __slots__ = ("root", "_on_write_error", "_pending")

    def __init__(self, root: str | Path, on_write_error: WriteErrorHook | None = None):
        self.root = Path(root)
        self._on_write_error = on_write_error or log_write_error
        self._pending: set[asyncio.Task] = set()

    def translation_path(self, key: str) -> Path:
        return self.root / "dict" / f"{key}.json"

    def speech_path(self, key: str) -> Path:
        return self.root / "wyaudio" / "youdao" / f"{key}.mp3"

    def curated_audio_path(self, source: str, name: str) -> Path:
        return self.root / "wyaudio" / source / f"{name}.mp3"

    async def read_translation(self, key: str) -> dict | None:
        """Saved payload, or None when the file cannot be read.

        A file that reads but is not valid JSON raises `json.JSONDecodeError`.
        """
        path = self.translation_path(key)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            # Unreadable or unrepresentable path: treated as a miss
            log.warning("cache_read_failed", path=str(path), error=str(e))
            return None
        return json.loads(text)

    async def write_translation(self, key: str, payload: dict) -> bool:
        """Persist a payload before returning; failures go to the write-error hook."""
        path = self.translation_path(key)
        try:
            await asyncio.to_thread(_write_text, path, json.dumps(payload, ensure_ascii=False))
        except (OSError, ValueError) as e:
            self._on_write_error(file_write_error(str(path), e, origin="filecache.translation").error)
            return False
        return True

    async def find_speech(self, key: str) -> Path | None:
        """Saved speech for `key`, trying the exact case first, then lowercase."""
        for candidate in (self.speech_path(key), self.speech_path(key.lower())):
            if await asyncio.to_thread(candidate.is_file):
                return candidate
        return None

    async def read_bytes(self, path: Path) -> bytes:
        return await asyncio.to_thread(path.read_bytes)

    def write_speech_in_background(self, key: str, data: bytes) -> asyncio.Task:
        """Schedule the write and return immediately."""
        task = asyncio.create_task(self._write_speech(self.speech_path(key), data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _write_speech(self, path: Path, data: bytes) -> None:
        try:
            await asyncio.to_thread(_write_bytes, path, data)
        except (OSError, ValueError) as e:
            self._on_write_error(file_write_error(str(path), e, origin="filecache.speech").error)

    async def find_curated_audio(self, *names: str) -> str | None:
        """First curated recording for any of `names`, as `/<source>/<name>.mp3`.

        Sources are probed in priority order; within a source each name is
        tried in the order given.
        """
        for source in CURATED_AUDIO_SOURCES:
            for name in names:
                if await asyncio.to_thread(self.curated_audio_path(source, name).is_file):
                    return f"/{source}/{name}.mp3"
        return None

    async def drain(self) -> None:
        """Wait for background writes still in flight."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
