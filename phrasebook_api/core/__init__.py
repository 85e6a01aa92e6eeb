"""
Core building blocks for the phrasebook backend.
Provides the phrase store port, error types, logging and dependency wiring.
"""

from .exceptions import PhrasebookException, ErrorCode, StorageUnavailableError
from .storage import PhraseStore, InMemoryPhraseStore, RedisPhraseStore

__all__ = [
    "PhrasebookException",
    "ErrorCode",
    "StorageUnavailableError",
    "PhraseStore",
    "InMemoryPhraseStore",
    "RedisPhraseStore",
]
