"""
Shared fixtures: an in-memory phrase store, a sync service on top of it, and
a TestClient for an app wired to both with a mocked OpenAI client.
"""
import pytest
from fastapi.testclient import TestClient

from phrasebook_api.config.settings import OpenAISettings, Settings, StorageBackend
from phrasebook_api.core.dependencies import ServiceContainer, get_translation_service
from phrasebook_api.core.error_handlers import error_handler
from phrasebook_api.core.storage import InMemoryPhraseStore
from phrasebook_api.main import create_app
from phrasebook_api.services.sync_service import SyncService
from phrasebook_api.services.translation_service import OpenAITranslationService
from tests.fakes import make_openai_client

SYNC_KEY = "device-0123456789"


@pytest.fixture
def memory_store():
    return InMemoryPhraseStore()


@pytest.fixture
def sync_service(memory_store):
    return SyncService(memory_store)


@pytest.fixture
def test_settings():
    return Settings(
        storage_backend=StorageBackend.MEMORY,
        log_json=False,
        openai=OpenAISettings(api_key=None),
    )


@pytest.fixture
def openai_client():
    return make_openai_client({
        "arabic": "مرحبا",
        "transliteration": "marḥaban",
        "english": "Hello",
    })


@pytest.fixture
def translator(test_settings, openai_client):
    return OpenAITranslationService(test_settings.openai, client=openai_client)


@pytest.fixture
def app(test_settings, translator):
    application = create_app(test_settings, ServiceContainer(test_settings))
    application.dependency_overrides[get_translation_service] = lambda: translator
    return application


@pytest.fixture
def client(app):
    error_handler.reset()
    with TestClient(app) as test_client:
        yield test_client
