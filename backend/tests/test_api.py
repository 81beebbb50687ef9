"""HTTP tests for the words API."""
import pytest
from fastapi.testclient import TestClient

import main
from models.record import SYNTHESIZED_CODE, WordRecord


@pytest.fixture
def client(service):
    # lifespan is not entered; the fixture service stands in for the wired one
    main.app.state.word_service = service
    yield TestClient(main.app)
    del main.app.state.word_service


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_by_code(client, datastore):
    datastore.records = [
        WordRecord(word="a", codes=(4649,), id="1", phonetic="[ə]", audio_path="/jh/a.mp3"),
        WordRecord(word="able", codes=(4649,), id="2"),
    ]
    response = client.get("/api/words/code/4649")
    assert response.status_code == 200
    assert response.json() == [
        {"_id": "1", "c": [4649], "w": "a", "yb": "[ə]", "audio": "/jh/a.mp3"},
        {"_id": "2", "c": [4649], "w": "able"},
    ]


def test_list_by_code_only_matches_integer_codes(client):
    response = client.get("/api/words/code/abc")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "E4010_NOT_FOUND"


def test_word_code_is_looked_up_like_any_other_word(client, datastore, youdao):
    datastore.records = [WordRecord(word="code", codes=(4800,), phonetic="[kəʊd]", part_of_speech="n.", gloss="代码")]
    youdao.translations["code"] = {"errorCode": "0", "translation": ["代码"]}

    resolved = client.get("/api/words/code/resolved")
    translation = client.get("/api/words/code/translation")
    speech = client.get("/api/words/code/speech")

    assert resolved.status_code == 200
    assert resolved.json()["phonetic"] == "[kəʊd]"
    assert translation.json() == {"translation": ["代码"]}
    assert speech.content == youdao.audio


def test_word_records(client, datastore, youdao, youdao_payload):
    datastore.records = [WordRecord(word="apple", codes=(4700,), id="9", gloss="苹果")]
    youdao.translations["apple"] = youdao_payload()

    body = client.get("/api/words/apple").json()

    assert [r["c"] for r in body] == [[4700], [SYNTHESIZED_CODE]]
    assert body[1]["uk"] == "[ˈæpl]"
    assert "_id" not in body[1]


def test_translation(client, youdao, youdao_payload):
    youdao.translations["apple"] = youdao_payload()
    response = client.get("/api/words/apple/translation")
    assert response.status_code == 200
    assert response.json()["translation"] == ["苹果"]


def test_translation_not_found(client):
    response = client.get("/api/words/xqzj/translation")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "E4010_NOT_FOUND"


def test_speech(client, youdao):
    response = client.get("/api/words/apple/speech")
    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == youdao.audio


def test_speech_upstream_failure(client, youdao):
    youdao.fail = True
    response = client.get("/api/words/apple/speech")
    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "E1010_EXTERNAL_SERVICE_UNAVAILABLE"
    assert error["metadata"]["word"] == "apple"


def test_speech_upstream_timeout(client, youdao):
    youdao.timeout = True
    response = client.get("/api/words/apple/speech")
    assert response.status_code == 504
    error = response.json()["error"]
    assert error["code"] == "E1002_TIMEOUT"
    assert error["message"].startswith("upstream TTS service unavailable: timed out after")


def test_resolved(client, datastore):
    datastore.records = [
        WordRecord(word="a", codes=(1, 4726), phonetic="[ə]", part_of_speech="art.", gloss="一（个）", audio_path="/jh/a.mp3"),
    ]
    response = client.get("/api/words/A/resolved")
    assert response.json() == {
        "word": "A",
        "phonetic": "[ə]",
        "part_of_speech": "art.",
        "gloss": "一（个）",
        "audio_url": "/dict/wyaudio/jh/a.mp3",
    }


def test_resolved_preserving_case(client, datastore):
    client.get("/api/words/Apple/resolved", params={"preserve_case": "true"})
    assert datastore.reads[0][2] == {"w": "Apple"}


def test_blank_word_is_rejected(client):
    response = client.get("/api/words/%20/resolved")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "E2001_REQUIRED_FIELD_MISSING"


def test_correlation_id_is_echoed(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc123"})
    assert response.headers["X-Correlation-ID"] == "abc123"


def test_error_uses_request_correlation_id(client):
    response = client.get("/api/words/xqzj/translation", headers={"X-Correlation-ID": "abc123"})
    assert response.json()["error"]["correlation_id"] == "abc123"


def test_invalid_query_parameter(client):
    response = client.get("/api/words/apple/resolved", params={"preserve_case": "maybe"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "E2000_VALIDATION_GENERIC"
    assert error["metadata"]["fields"][0]["field"] == "query.preserve_case"
