"""Bootstrap wiring for the Chit Chest services.

The document store is PostgreSQL when ``DATABASE_URL`` is set and the
in-memory stub otherwise. Every service shares the store, the keyed lock,
the clock and the config, so same-process callers serialize on the same
locks.
"""

from __future__ import annotations

from structlog import get_logger

from src.application.ports.document_store import DocumentStoreProtocol
from src.application.ports.keyed_lock import KeyedLockProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.chest_lifecycle_service import ChestLifecycleService
from src.application.services.chit_service import ChitService
from src.application.services.identity_service import IdentityService
from src.application.services.pairing_service import PairingService
from src.application.services.settings_service import SettingsService
from src.application.services.time_authority_service import TimeAuthorityService
from src.bootstrap.database import get_session_factory, is_database_configured
from src.config.chest_config import ChestConfig
from src.infrastructure.adapters.locking import AsyncioKeyedLock
from src.infrastructure.adapters.persistence import (
    DocumentChestRepository,
    DocumentChitRepository,
    DocumentIdentityRepository,
    DocumentPairingRepository,
    DocumentSettingsRepository,
    SqlAlchemyDocumentStore,
)
from src.infrastructure.stubs.document_store_stub import InMemoryDocumentStore

logger = get_logger(__name__)

_document_store: DocumentStoreProtocol | None = None
_keyed_lock: KeyedLockProtocol | None = None
_time_authority: TimeAuthorityProtocol | None = None
_chest_config: ChestConfig | None = None
_identity_service: IdentityService | None = None
_pairing_service: PairingService | None = None
_lifecycle_service: ChestLifecycleService | None = None
_chit_service: ChitService | None = None
_settings_service: SettingsService | None = None


def get_document_store() -> DocumentStoreProtocol:
    global _document_store
    if _document_store is None:
        if is_database_configured():
            _document_store = SqlAlchemyDocumentStore(get_session_factory())
            logger.info("document_store_selected", backend="postgresql")
        else:
            _document_store = InMemoryDocumentStore()
            logger.info("document_store_selected", backend="memory")
    return _document_store


def get_keyed_lock() -> KeyedLockProtocol:
    global _keyed_lock
    if _keyed_lock is None:
        _keyed_lock = AsyncioKeyedLock()
    return _keyed_lock


def get_time_authority() -> TimeAuthorityProtocol:
    global _time_authority
    if _time_authority is None:
        _time_authority = TimeAuthorityService()
    return _time_authority


def get_chest_config() -> ChestConfig:
    global _chest_config
    if _chest_config is None:
        _chest_config = ChestConfig.from_environment()
    return _chest_config


def get_identity_service() -> IdentityService:
    global _identity_service
    if _identity_service is None:
        _identity_service = IdentityService(
            DocumentIdentityRepository(get_document_store()),
            get_time_authority(),
        )
    return _identity_service


def get_pairing_service() -> PairingService:
    global _pairing_service
    if _pairing_service is None:
        store = get_document_store()
        _pairing_service = PairingService(
            DocumentIdentityRepository(store),
            DocumentPairingRepository(store),
            get_keyed_lock(),
            get_time_authority(),
        )
    return _pairing_service


def get_chest_lifecycle_service() -> ChestLifecycleService:
    global _lifecycle_service
    if _lifecycle_service is None:
        store = get_document_store()
        _lifecycle_service = ChestLifecycleService(
            DocumentChestRepository(store),
            DocumentChitRepository(store),
            DocumentIdentityRepository(store),
            DocumentSettingsRepository(store),
            get_keyed_lock(),
            get_time_authority(),
            get_chest_config(),
        )
    return _lifecycle_service


def get_chit_service() -> ChitService:
    global _chit_service
    if _chit_service is None:
        store = get_document_store()
        _chit_service = ChitService(
            DocumentChitRepository(store),
            DocumentChestRepository(store),
            get_chest_lifecycle_service(),
            get_time_authority(),
            get_chest_config(),
        )
    return _chit_service


def get_settings_service() -> SettingsService:
    global _settings_service
    if _settings_service is None:
        store = get_document_store()
        _settings_service = SettingsService(
            DocumentSettingsRepository(store),
            DocumentIdentityRepository(store),
            DocumentChestRepository(store),
            get_keyed_lock(),
            get_time_authority(),
            get_chest_config(),
        )
    return _settings_service


def get_document_store_backend() -> str:
    """Backend name for health reporting: postgresql or memory."""
    if isinstance(get_document_store(), SqlAlchemyDocumentStore):
        return "postgresql"
    return "memory"


async def initialize_document_store() -> None:
    """Create the backing schema when running on PostgreSQL."""
    store = get_document_store()
    if isinstance(store, SqlAlchemyDocumentStore):
        await store.create_schema()


def set_document_store(store: DocumentStoreProtocol) -> None:
    """Set custom document store for testing."""
    global _document_store
    _document_store = store


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    """Set custom clock for testing."""
    global _time_authority
    _time_authority = time_authority


def set_chest_config(config: ChestConfig) -> None:
    """Set custom config for testing."""
    global _chest_config
    _chest_config = config


def reset_chest_services() -> None:
    """Reset all singleton instances for testing."""
    global _document_store
    global _keyed_lock
    global _time_authority
    global _chest_config
    global _identity_service
    global _pairing_service
    global _lifecycle_service
    global _chit_service
    global _settings_service

    _document_store = None
    _keyed_lock = None
    _time_authority = None
    _chest_config = None
    _identity_service = None
    _pairing_service = None
    _lifecycle_service = None
    _chit_service = None
    _settings_service = None
