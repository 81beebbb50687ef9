from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Index
from sqlalchemy.orm import relationship

from core.database import Base
from models.record import WordRecord


class WordEntry(Base):
    """Curated dictionary entry, one per (textbook source, word) pair"""
    __tablename__ = "word_entries"
    __table_args__ = (
        Index("ix_word_entries_lexicon_word", "lexicon", "word"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)  # Keeps insertion order
    id = Column(String(32), nullable=False, unique=True, default=lambda: uuid4().hex)
    lexicon = Column(String(64), nullable=False, default="res")  # Datastore database name
    word = Column(String(255), nullable=False)
    phonetic = Column(String(255))
    part_of_speech = Column(String(64))
    gloss = Column(Text)
    definition = Column(Text)
    example = Column(Text)
    audio_path = Column(String(500))  # Relative to the audio root, e.g. "/jh/a.mp3"
    uk_phonetic = Column(String(255))
    us_phonetic = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)

    codes = relationship(
        "WordEntryCode",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="WordEntryCode.position",
        lazy="selectin",
    )

    def to_record(self) -> WordRecord:
        return WordRecord(
            id=self.id,
            codes=tuple(c.code for c in self.codes),
            word=self.word,
            phonetic=self.phonetic,
            part_of_speech=self.part_of_speech,
            gloss=self.gloss,
            definition=self.definition,
            example=self.example,
            audio_path=self.audio_path,
            uk_phonetic=self.uk_phonetic,
            us_phonetic=self.us_phonetic,
        )

    @classmethod
    def from_record(cls, lexicon: str, record: WordRecord) -> "WordEntry":
        entry = cls(
            id=record.id or uuid4().hex,
            lexicon=lexicon,
            word=record.word,
            phonetic=record.phonetic,
            part_of_speech=record.part_of_speech,
            gloss=record.gloss,
            definition=record.definition,
            example=record.example,
            audio_path=record.audio_path,
            uk_phonetic=record.uk_phonetic,
            us_phonetic=record.us_phonetic,
        )
        entry.codes = [WordEntryCode(position=i, code=code) for i, code in enumerate(record.codes)]
        return entry


class WordEntryCode(Base):
    """Course or chapter code attached to an entry; position 0 is the primary code"""
    __tablename__ = "word_entry_codes"

    entry_pk = Column(Integer, ForeignKey("word_entries.pk", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, primary_key=True)
    code = Column(Integer, nullable=False, index=True)

    entry = relationship("WordEntry", back_populates="codes")
