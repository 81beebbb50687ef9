from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api import words
from core.cache import build_cache
from core.config import settings
from core.database import engine, Base
from core.datastore import SqlWordStore
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware, SlowRequestMiddleware
from core.errors import register_error_handlers
from engines.service import WordService
import models  # noqa: F401  registers the word tables on Base.metadata

# Initialize logging before anything else
configure_logging(
    level=settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
    log_sql=settings.LOG_SQL,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", message="Wordbank API starting up")

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("database_connected", message="Word tables initialized")
    except Exception as e:
        log.warning("database_unavailable", error=str(e), message="App starting without database")

    cache = build_cache(settings.REDIS_URL)
    app.state.word_service = WordService.from_settings(settings, SqlWordStore(), cache)

    yield

    log.info("shutdown", message="Wordbank API shutting down")
    await app.state.word_service.aclose()
    await cache.aclose()
    await engine.dispose()


app = FastAPI(
    title="Wordbank API",
    description="Dictionary lookups merging textbook word records, Youdao translations and pronunciation audio",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

# Middleware (order matters: last added = first executed)
app.add_middleware(SlowRequestMiddleware, slow_threshold_ms=1000)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(words.router, prefix="/api/words", tags=["words"])

# Resolved audio URLs point here
audio_dir = Path(settings.DICT_PATH) / "wyaudio"
if audio_dir.is_dir():
    app.mount(settings.AUDIO_URL_PREFIX, StaticFiles(directory=audio_dir), name="audio")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )
