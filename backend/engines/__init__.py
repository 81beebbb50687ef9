from engines.config import WordServiceConfig
from engines.lexicon import LexiconEngine
from engines.translation import TranslationFetcher
from engines.speech import SpeechFetcher
from engines.resolution import FieldResolver, ResolvedEntry
from engines.service import WordService, init

__all__ = [
    "WordServiceConfig",
    "LexiconEngine",
    "TranslationFetcher",
    "SpeechFetcher",
    "FieldResolver",
    "ResolvedEntry",
    "WordService",
    "init",
]
