"""Health endpoint."""
from fastapi import APIRouter, Depends

from phrasebook_api.core.dependencies import ServiceContainer, get_service_container
from phrasebook_api.core.error_handlers import error_handler
from phrasebook_api.core.metrics import snapshot_latency_stats

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(
    verbose: bool = False,
    container: ServiceContainer = Depends(get_service_container),
):
    """
    Liveness check.

    With **verbose=true** also reports store reachability, whether the
    translator has an API key, request latency and error counts.
    """
    payload = {"ok": True, "route": "/api/health"}
    if not verbose:
        return payload

    store_ok = await container.get_phrase_store().ping()
    payload.update({
        "storage": {
            "backend": container.settings.storage_backend.value,
            "status": "healthy" if store_ok else "unreachable",
        },
        "translator": {
            "configured": container.get_translation_service().is_configured,
            "model": container.settings.openai.model,
        },
        "latency": snapshot_latency_stats(),
        "error_statistics": error_handler.get_error_statistics(),
    })
    return payload
