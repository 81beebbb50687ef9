"""Word records as the lookup engines see them.

Records travel in the datastore's short-key wire form (`w`, `c`, `yb`, ...)
through the fast cache and the HTTP API; `WordRecord` is the typed view.
"""
from dataclasses import dataclass, fields
from typing import Any, Mapping

AUTHORITATIVE_CODE = 1
SYNTHESIZED_CODE = 1000001

# attribute -> wire key
WIRE_KEYS: dict[str, str] = {
    "id": "_id",
    "codes": "c",
    "word": "w",
    "phonetic": "yb",
    "part_of_speech": "cx",
    "gloss": "sy",
    "definition": "definition",
    "example": "example",
    "audio_path": "audio",
    "uk_phonetic": "uk",
    "us_phonetic": "us",
}


@dataclass(frozen=True, slots=True)
class WordRecord:
    """One dictionary entry for a word, tagged with the course codes it belongs to."""
    word: str
    codes: tuple[int, ...] = ()
    id: str | None = None
    phonetic: str | None = None
    part_of_speech: str | None = None
    gloss: str | None = None
    definition: str | None = None
    example: str | None = None
    audio_path: str | None = None
    uk_phonetic: str | None = None
    us_phonetic: str | None = None

    @property
    def primary_code(self) -> int | None:
        return self.codes[0] if self.codes else None

    @property
    def is_authoritative(self) -> bool:
        """Curator-verified textbook entry, exempt from majority voting."""
        return self.primary_code == AUTHORITATIVE_CODE

    @property
    def is_synthesized(self) -> bool:
        return SYNTHESIZED_CODE in self.codes

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WordRecord":
        """Build from wire form. Unknown keys are ignored."""
        values: dict[str, Any] = {}
        for attr, key in WIRE_KEYS.items():
            if key not in data or data[key] is None:
                continue
            value = data[key]
            if attr == "codes":
                value = tuple(int(code) for code in value)
            elif attr == "id":
                value = str(value)
            values[attr] = value
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Wire form; unset optional fields are omitted."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[WIRE_KEYS[f.name]] = list(value) if f.name == "codes" else value
        return data
