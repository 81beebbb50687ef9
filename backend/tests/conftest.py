"""Shared fixtures: an in-memory datastore, a mocked Youdao API and a file cache root."""
from urllib.parse import parse_qs

import httpx
import pytest

from core.cache import InMemoryCache
from engines.service import init
from models.record import WordRecord


class FakeWordStore:
    """WordStore over a list, recording every read."""

    def __init__(self, records=()):
        self.records: list[WordRecord] = list(records)
        self.reads: list[tuple[str, str, dict]] = []
        self.error: Exception | None = None

    async def read(self, database, collection, filter, limit=None):
        self.reads.append((database, collection, dict(filter)))
        if self.error is not None:
            raise self.error
        matches = []
        for record in self.records:
            if "w" in filter and record.word != filter["w"]:
                continue
            if "c" in filter and filter["c"] not in record.codes:
                continue
            matches.append(record)
        return matches[:limit] if limit else matches


class FakeYoudao:
    """httpx.MockTransport handler standing in for openapi.youdao.com."""

    def __init__(self):
        self.requests: list[tuple[str, dict]] = []
        self.translations: dict[str, dict] = {}
        self.audio = b"ID3\x03fake-mp3-frames"
        self.tts_reply: httpx.Response | None = None
        self.fail = False
        self.timeout = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = {k: v[0] for k, v in parse_qs(request.content.decode(), keep_blank_values=True).items()}
        self.requests.append((request.url.path, form))
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        if self.timeout:
            raise httpx.ReadTimeout("read timed out", request=request)
        if request.url.path == "/api":
            return httpx.Response(200, json=self.translations.get(form["q"], {"errorCode": "302"}))
        if self.tts_reply is not None:
            return self.tts_reply
        return httpx.Response(200, content=self.audio, headers={"content-type": "audio/mpeg"})

    def calls(self, path: str) -> list[dict]:
        return [form for p, form in self.requests if p == path]


def make_payload(**overrides) -> dict:
    """A successful translation response, with the fields that get trimmed."""
    payload = {
        "errorCode": "0",
        "query": "apple",
        "translation": ["苹果"],
        "basic": {
            "uk-phonetic": "ˈæpl",
            "us-phonetic": "ˈæpəl",
            "explains": ["n. 苹果", "n. 苹果树"],
            "uk-speech": "https://openapi.youdao.com/ttsapi?q=apple&uk",
            "us-speech": "https://openapi.youdao.com/ttsapi?q=apple&us",
        },
        "l": "en2zh-CHS",
        "tSpeakUrl": "https://openapi.youdao.com/ttsapi?q=苹果",
        "speakUrl": "https://openapi.youdao.com/ttsapi?q=apple",
        "dict": {"url": "yddict://m.youdao.com/dict?le=eng&q=apple"},
        "webdict": {"url": "http://m.youdao.com/dict?le=eng&q=apple"},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def datastore():
    return FakeWordStore()


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def youdao():
    return FakeYoudao()


@pytest.fixture
def write_errors():
    return []


@pytest.fixture
def make_service(tmp_path, datastore, cache, youdao, write_errors):
    def _make(**options):
        return init(
            "res",
            tmp_path,
            "app-key",
            "app-secret",
            datastore,
            cache,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(youdao)),
            on_write_error=write_errors.append,
            **options,
        )
    return _make


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def youdao_payload():
    return make_payload
