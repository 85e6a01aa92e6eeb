"""
Services package for the phrasebook backend.

Contains the phrase merge core, the sync service and the translation service.
"""

from .phrase_merge import normalize_phrase, identity_key, merge_phrases
from .sync_service import SyncService
from .translation_service import OpenAITranslationService

__all__ = [
    "normalize_phrase",
    "identity_key",
    "merge_phrases",
    "SyncService",
    "OpenAITranslationService",
]
