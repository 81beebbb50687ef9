from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Primary datastore
    DATABASE_URL: str = "sqlite+aiosqlite:///./wordbank.db"
    WORD_DB: str = "res"  # Lexicon namespace inside the datastore

    # Fast cache (empty = process-local in-memory cache)
    REDIS_URL: str = ""
    CACHE_TTL_XXL: int = 30 * 24 * 3600

    # File cache
    DICT_PATH: str = "./dict"
    AUDIO_URL_PREFIX: str = "/dict/wyaudio"

    # Youdao open API
    YOUDAO_APP_KEY: str = ""
    YOUDAO_APP_SECRET: str = ""
    YOUDAO_TIMEOUT_SECONDS: float = 10.0

    # In-process memo of resolved entries (0 = unbounded)
    RESOLVED_CACHE_SIZE: int = 10000

    # Backend
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8000
    APP_DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    LOG_SQL: bool = False   # Enable SQLAlchemy query logging

    @property
    def is_production(self) -> bool:
        return not self.APP_DEBUG

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
