"""
Sync API endpoints - anonymous phrase list pull and push.

The client generates and stores its own sync key (an anonymous account of
sorts); phrases are kept under "phrases:<syncKey>" in the phrase store.
"""
from typing import Optional
from fastapi import APIRouter, Depends

from phrasebook_api.core.dependencies import get_sync_service
from phrasebook_api.core.metrics import record_latency
from phrasebook_api.schemas.phrase import (
    SyncPullRequest,
    SyncPullResponse,
    SyncPushRequest,
    SyncPushResponse,
)
from phrasebook_api.services.sync_service import SyncService

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.post("/pull", response_model=SyncPullResponse)
async def sync_pull(
    body: Optional[SyncPullRequest] = None,
    sync_service: SyncService = Depends(get_sync_service),
):
    """
    Return the phrase list stored under a sync key.

    - **syncKey**: client-generated key, at least 10 characters after trimming
    """
    body = body or SyncPullRequest()
    with record_latency("sync_pull"):
        phrases = await sync_service.pull(body.syncKey)
    return SyncPullResponse(phrases=phrases)


@router.post("/push", response_model=SyncPushResponse)
async def sync_push(
    body: Optional[SyncPushRequest] = None,
    sync_service: SyncService = Depends(get_sync_service),
):
    """
    Merge incoming phrases into the stored list (deduplicated, newest first).

    - **syncKey**: client-generated key, at least 10 characters after trimming
    - **phrases**: list of phrase objects; anything else is treated as empty
    """
    body = body or SyncPushRequest()
    with record_latency("sync_push"):
        count = await sync_service.push(body.syncKey, body.phrases)
    return SyncPushResponse(ok=True, count=count)
