"""Tests for course word lists and the cached word aggregation."""
import asyncio
import json

import httpx
import pytest

from core.cache import InMemoryCache
from engines.lexicon import CACHE_KEY_PREFIX, bracketed, synthesize_record
from engines.service import init
from models.record import SYNTHESIZED_CODE, WordRecord


def test_bracketed():
    assert bracketed("ˈæpl") == "[ˈæpl]"
    assert bracketed("") == ""
    assert bracketed(None) == ""


class TestSynthesizeRecord:

    def test_from_basic_dictionary_entry(self, youdao_payload):
        record = synthesize_record("apple", youdao_payload())
        assert record.word == "apple"
        assert record.codes == (SYNTHESIZED_CODE,)
        assert record.uk_phonetic == "[ˈæpl]"
        assert record.us_phonetic == "[ˈæpəl]"
        assert record.gloss == "n. 苹果\nn. 苹果树"
        assert record.phonetic is None
        assert record.is_synthesized

    def test_falls_back_to_translation(self):
        record = synthesize_record("apple pie", {"translation": ["苹果派"]})
        assert record.gloss == "苹果派"
        assert record.uk_phonetic == ""
        assert record.us_phonetic == ""

    def test_string_translation(self):
        assert synthesize_record("hi", {"translation": "嗨"}).gloss == "嗨"

    def test_nothing_to_say(self):
        assert synthesize_record("zzz", {"query": "zzz"}) is None
        assert synthesize_record("zzz", {"translation": ""}) is None


class TestListByCode:

    def test_reads_code_filter(self, service, datastore):
        datastore.records = [
            WordRecord(word="a", codes=(4649,)),
            WordRecord(word="able", codes=(4650, 4649)),
            WordRecord(word="about", codes=(4700,)),
        ]
        records = asyncio.run(service.list_by_code(4649))
        assert [r.word for r in records] == ["a", "able"]
        assert datastore.reads == [("res", "words", {"c": 4649})]

    def test_unknown_code(self, service):
        assert asyncio.run(service.list_by_code(99)) == []

    def test_datastore_errors_propagate(self, service, datastore):
        datastore.error = ConnectionError("datastore down")
        with pytest.raises(ConnectionError):
            asyncio.run(service.list_by_code(1))


class TestResolveWord:

    def test_merges_datastore_and_translation(self, service, datastore, youdao, cache, youdao_payload):
        datastore.records = [
            WordRecord(word="apple", codes=(4700,), phonetic="[ˈæpl]", gloss="苹果"),
            WordRecord(word="apple", codes=(1, 4800), phonetic="[ˈæpl]", gloss="n. 苹果"),
        ]
        youdao.translations["apple"] = youdao_payload()

        records = asyncio.run(service.resolve_word("apple"))

        assert [r.codes for r in records] == [(4700,), (1, 4800), (SYNTHESIZED_CODE,)]
        assert records[-1].uk_phonetic == "[ˈæpl]"
        cached = json.loads(asyncio.run(cache.get(CACHE_KEY_PREFIX + "apple")))
        assert cached[-1] == {"c": [SYNTHESIZED_CODE], "w": "apple", "sy": "n. 苹果\nn. 苹果树", "uk": "[ˈæpl]", "us": "[ˈæpəl]"}

    def test_empty_result_is_cached(self, service, cache):
        assert asyncio.run(service.resolve_word("qwzx")) == []
        assert asyncio.run(cache.get(CACHE_KEY_PREFIX + "qwzx")) == "[]"

    def test_cached_list_skips_datastore_and_translation(self, service, datastore, youdao, cache):
        stored = [{"_id": "5f1", "c": [4649], "w": "a", "yb": "[ə]", "cx": "art."}]
        asyncio.run(cache.set(CACHE_KEY_PREFIX + "a", json.dumps(stored), 60))

        records = asyncio.run(service.resolve_word("a"))

        assert records == [WordRecord(word="a", codes=(4649,), id="5f1", phonetic="[ə]", part_of_speech="art.")]
        assert datastore.reads == []
        assert youdao.requests == []

    def test_cache_key_preserves_case(self, service, datastore):
        asyncio.run(service.resolve_word("Apple"))
        asyncio.run(service.resolve_word("apple"))
        assert [read[2] for read in datastore.reads] == [{"w": "Apple"}, {"w": "apple"}]

    def test_cached_with_configured_ttl(self, tmp_path, datastore, youdao):
        now = [0.0]
        cache = InMemoryCache(clock=lambda: now[0])
        service = init(
            "res", tmp_path, "k", "s", datastore, cache,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(youdao)),
            cache_ttl=120,
        )
        asyncio.run(service.resolve_word("word"))

        now[0] = 119.0
        assert asyncio.run(cache.get(CACHE_KEY_PREFIX + "word")) == "[]"
        now[0] = 120.0
        assert asyncio.run(cache.get(CACHE_KEY_PREFIX + "word")) is None

    def test_malformed_cache_entry_raises(self, service, cache):
        asyncio.run(cache.set(CACHE_KEY_PREFIX + "bad", "{not json", 60))
        with pytest.raises(json.JSONDecodeError):
            asyncio.run(service.resolve_word("bad"))

    def test_datastore_error_propagates_without_caching(self, service, datastore, cache):
        datastore.error = ConnectionError("datastore down")
        with pytest.raises(ConnectionError):
            asyncio.run(service.resolve_word("apple"))
        assert asyncio.run(cache.get(CACHE_KEY_PREFIX + "apple")) is None

    def test_translation_failure_still_returns_datastore_records(self, service, datastore, youdao):
        datastore.records = [WordRecord(word="apple", codes=(4700,))]
        youdao.fail = True
        records = asyncio.run(service.resolve_word("apple"))
        assert [r.codes for r in records] == [(4700,)]

