"""Wiring configuration shared by the lookup engines.

Built once at startup and handed by reference to every component.
"""
from dataclasses import dataclass
from pathlib import Path

from core.cache import FastCache
from core.datastore import WordStore


@dataclass(frozen=True, slots=True)
class WordServiceConfig:
    store: str                      # Datastore database name
    file_cache_root: Path
    app_key: str
    app_secret: str
    datastore: WordStore
    cache: FastCache
    cache_ttl: int = 30 * 24 * 3600  # The single "XXL" expiry for merged records
    audio_url_prefix: str = "/dict/wyaudio"
    resolved_cache_size: int = 10000
    timeout_seconds: float = 10.0
