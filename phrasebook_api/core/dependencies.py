"""
Dependency injection setup for FastAPI.
Provides dependency providers for core services with lifecycle management.
"""

from fastapi import Depends, Request
from typing import Optional
import logging
import asyncio

from phrasebook_api.config.settings import Settings, StorageBackend, get_settings
from phrasebook_api.core.storage import InMemoryPhraseStore, PhraseStore, RedisPhraseStore
from phrasebook_api.services.sync_service import SyncService
from phrasebook_api.services.translation_service import OpenAITranslationService


logger = logging.getLogger(__name__)


def build_phrase_store(settings: Settings) -> PhraseStore:
    if settings.storage_backend == StorageBackend.MEMORY:
        logger.warning("Using in-memory phrase store; synced phrases are lost on restart")
        return InMemoryPhraseStore()
    return RedisPhraseStore(settings.redis)


class ServiceContainer:
    """
    Container for application services with lifecycle management.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self._phrase_store: Optional[PhraseStore] = None
        self._sync_service: Optional[SyncService] = None
        self._translation_service: Optional[OpenAITranslationService] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    async def initialize_services(self) -> None:
        """
        Initialize all services in dependency order.
        """
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing service container")

            try:
                self._phrase_store = build_phrase_store(self.settings)
                self._sync_service = SyncService(self._phrase_store, self.settings.sync)
                self._translation_service = OpenAITranslationService(self.settings.openai)

                self._initialized = True
                logger.info(
                    "Service container initialization completed",
                    extra={"storage_backend": self.settings.storage_backend.value},
                )

            except Exception as e:
                logger.error(f"Service container initialization failed: {e}", exc_info=True)
                raise

    async def cleanup_services(self) -> None:
        """
        Cleanup all services in reverse dependency order.
        """
        logger.info("Cleaning up service container")

        try:
            if self._translation_service:
                await self._translation_service.close()

            if self._phrase_store:
                await self._phrase_store.close()

            logger.info("Service container cleanup completed")

        except Exception as e:
            logger.error(f"Service container cleanup failed: {e}", exc_info=True)
        finally:
            self._translation_service = None
            self._sync_service = None
            self._phrase_store = None
            self._initialized = False

    def get_phrase_store(self) -> PhraseStore:
        if not self._initialized or self._phrase_store is None:
            raise RuntimeError("Service container not initialized")
        return self._phrase_store

    def get_sync_service(self) -> SyncService:
        if not self._initialized or self._sync_service is None:
            raise RuntimeError("Service container not initialized")
        return self._sync_service

    def get_translation_service(self) -> OpenAITranslationService:
        if not self._initialized or self._translation_service is None:
            raise RuntimeError("Service container not initialized")
        return self._translation_service


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get the service container from application state.

    Raises:
        RuntimeError: If the application started without a container
    """
    container = getattr(request.app.state, 'service_container', None)
    if container is None:
        logger.error("Service container not initialized")
        raise RuntimeError("Service container not available")
    return container


def get_sync_service(
    container: ServiceContainer = Depends(get_service_container)
) -> SyncService:
    return container.get_sync_service()


def get_translation_service(
    container: ServiceContainer = Depends(get_service_container)
) -> OpenAITranslationService:
    return container.get_translation_service()


def get_app_settings(
    container: ServiceContainer = Depends(get_service_container)
) -> Settings:
    return container.settings
