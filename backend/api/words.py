"""Words API

Course word lists, merged word records, Youdao translations, pronunciation
audio and resolved display fields.
"""
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from core.errors import not_found, raise_error, required_field
from engines.service import WordService
from models.record import WordRecord

router = APIRouter()


class WordRecordResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(None, alias="_id")
    codes: list[int] = Field(default_factory=list, alias="c")
    word: str = Field(alias="w")
    phonetic: str | None = Field(None, alias="yb")
    part_of_speech: str | None = Field(None, alias="cx")
    gloss: str | None = Field(None, alias="sy")
    definition: str | None = None
    example: str | None = None
    audio_path: str | None = Field(None, alias="audio")
    uk_phonetic: str | None = Field(None, alias="uk")
    us_phonetic: str | None = Field(None, alias="us")

    @classmethod
    def from_record(cls, record: WordRecord) -> "WordRecordResponse":
        return cls.model_validate(record.to_dict())


class ResolvedEntryResponse(BaseModel):
    word: str
    phonetic: str
    part_of_speech: str
    gloss: str
    audio_url: str


def get_word_service(request: Request) -> WordService:
    return request.app.state.word_service


def _require_word(word: str) -> str:
    if not word.strip():
        raise_error(required_field("word", origin="api.words").error)
    return word


@router.get(
    "/code/{code:int}",
    response_model=list[WordRecordResponse],
    response_model_exclude_none=True,
)
async def list_words_by_code(code: int, service: WordService = Depends(get_word_service)):
    """Word list of a textbook or chapter."""
    records = await service.list_by_code(code)
    return [WordRecordResponse.from_record(r) for r in records]


@router.get(
    "/{word}",
    response_model=list[WordRecordResponse],
    response_model_exclude_none=True,
)
async def get_word(word: str, service: WordService = Depends(get_word_service)):
    """Every record for a word across textbooks, plus the translation-derived one."""
    records = await service.resolve_word(_require_word(word))
    return [WordRecordResponse.from_record(r) for r in records]


@router.get("/{word}/translation")
async def get_translation(word: str, service: WordService = Depends(get_word_service)):
    payload = await service.fetch_translation(_require_word(word))
    if payload is None:
        raise_error(not_found("Translation", word, origin="api.words").error)
    return payload


@router.get(
    "/{word}/speech",
    response_class=Response,
    responses={200: {"content": {"audio/mpeg": {}}}},
)
async def get_speech(word: str, service: WordService = Depends(get_word_service)):
    audio = await service.fetch_speech(_require_word(word))
    return Response(content=audio, media_type="audio/mpeg")


@router.get("/{word}/resolved", response_model=ResolvedEntryResponse)
async def get_resolved(
    word: str,
    preserve_case: bool = Query(False, description="Look the word up without lowercasing it"),
    service: WordService = Depends(get_word_service),
):
    """Best phonetic, part of speech, gloss and audio URL for a word."""
    entry = await service.resolve_best_fields(_require_word(word), preserve_case)
    return ResolvedEntryResponse(word=word, **entry._asdict())
