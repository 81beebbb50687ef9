from models.record import WordRecord, AUTHORITATIVE_CODE, SYNTHESIZED_CODE
from models.word import WordEntry, WordEntryCode

__all__ = [
    "WordRecord", "AUTHORITATIVE_CODE", "SYNTHESIZED_CODE",
    "WordEntry", "WordEntryCode",
]
