from __future__ import annotations

from .translator import PassthroughTranslator, TranslationEngine
from .google_translator import GoogleTranslator
from .factory import get_translation_engine

__all__ = [
    "TranslationEngine",
    "PassthroughTranslator",
    "GoogleTranslator",
    "get_translation_engine",
]
