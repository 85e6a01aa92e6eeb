"""
Anonymous phrase sync.

A client mints its own sync key and keeps it locally; the key is the only
thing tying a device to its stored phrase list. Pull returns the list, push
merges the client's list into it.

Push is a read-merge-write against the store and is not atomic: two pushes
for the same key running at the same time race, and the later write wins.
"""

import hashlib
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from phrasebook_api.config.settings import SyncSettings
from phrasebook_api.core.exceptions import InvalidSyncKeyError, TooManyPhrasesError
from phrasebook_api.core.storage import PhraseStore
from phrasebook_api.services.phrase_merge import merge_phrases

logger = logging.getLogger(__name__)


def key_fingerprint(sync_key: str) -> str:
    """Short digest of a sync key, safe to log."""
    return hashlib.sha256(sync_key.encode("utf-8")).hexdigest()[:12]


class SyncService:
    """Pull and push of phrase lists keyed by a client-chosen sync key."""

    def __init__(self, store: PhraseStore, sync_settings: Optional[SyncSettings] = None):
        self.store = store
        self.settings = sync_settings or SyncSettings()

    def ensure_sync_key(self, sync_key: Any) -> str:
        """Return the trimmed key, or raise InvalidSyncKeyError."""
        if not isinstance(sync_key, str):
            raise InvalidSyncKeyError(self.settings.min_key_length)
        key = sync_key.strip()
        if len(key) < self.settings.min_key_length:
            raise InvalidSyncKeyError(self.settings.min_key_length)
        return key

    def storage_key(self, sync_key: str) -> str:
        return f"{self.settings.key_prefix}{sync_key}"

    def coerce_incoming(self, phrases: Any) -> List[Mapping]:
        """A non-list body reads as empty; entries that are not objects are dropped."""
        if not isinstance(phrases, list):
            return []
        if len(phrases) > self.settings.max_phrases_per_push:
            raise TooManyPhrasesError(len(phrases), self.settings.max_phrases_per_push)

        records = [p for p in phrases if isinstance(p, Mapping)]
        dropped = len(phrases) - len(records)
        if dropped:
            logger.debug(f"Dropped {dropped} non-object phrase entries from push")
        return records

    async def pull(self, sync_key: Any) -> List[Dict[str, Any]]:
        key = self.ensure_sync_key(sync_key)
        phrases = await self.store.get(self.storage_key(key))
        logger.info(
            "Sync pull",
            extra={"sync_key": key_fingerprint(key), "count": len(phrases)},
        )
        return phrases

    async def push(self, sync_key: Any, phrases: Any) -> int:
        """
        Merge ``phrases`` into the stored list and write it back.

        Returns:
            Size of the merged list now stored under the key
        """
        key = self.ensure_sync_key(sync_key)
        incoming = self.coerce_incoming(phrases)
        kv_key = self.storage_key(key)

        existing = await self.store.get(kv_key)
        merged = merge_phrases(existing, incoming)
        await self.store.set(kv_key, [p.to_record() for p in merged])

        logger.info(
            "Sync push",
            extra={
                "sync_key": key_fingerprint(key),
                "existing": len(existing),
                "incoming": len(incoming),
                "count": len(merged),
            },
        )
        return len(merged)
