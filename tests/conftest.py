"""
Pytest configuration and shared fixtures for Chit Chest tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async collaborators
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/

The service fixtures share one InMemoryDocumentStore, one keyed lock and
one FakeTimeAuthority, the same way bootstrap wires them in production.
"""

from dataclasses import dataclass

import pytest

from src.application.services.chest_lifecycle_service import ChestLifecycleService
from src.application.services.chit_service import ChitService
from src.application.services.identity_service import IdentityService
from src.application.services.pairing_service import PairingService
from src.application.services.settings_service import SettingsService
from src.config.chest_config import ChestConfig
from src.domain.models.identity import Identity
from src.infrastructure.adapters.locking import AsyncioKeyedLock
from src.infrastructure.adapters.persistence import (
    DocumentChestRepository,
    DocumentChitRepository,
    DocumentIdentityRepository,
    DocumentPairingRepository,
    DocumentSettingsRepository,
)
from src.infrastructure.stubs.document_store_stub import InMemoryDocumentStore
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from src import __version__

    return __version__


@pytest.fixture
def fake_time() -> FakeTimeAuthority:
    return FakeTimeAuthority()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def keyed_lock() -> AsyncioKeyedLock:
    return AsyncioKeyedLock()


@pytest.fixture
def chest_config() -> ChestConfig:
    return ChestConfig()


@pytest.fixture
def identity_repo(store: InMemoryDocumentStore) -> DocumentIdentityRepository:
    return DocumentIdentityRepository(store)


@pytest.fixture
def pairing_repo(store: InMemoryDocumentStore) -> DocumentPairingRepository:
    return DocumentPairingRepository(store)


@pytest.fixture
def chest_repo(store: InMemoryDocumentStore) -> DocumentChestRepository:
    return DocumentChestRepository(store)


@pytest.fixture
def chit_repo(store: InMemoryDocumentStore) -> DocumentChitRepository:
    return DocumentChitRepository(store)


@pytest.fixture
def settings_repo(store: InMemoryDocumentStore) -> DocumentSettingsRepository:
    return DocumentSettingsRepository(store)


@pytest.fixture
def identity_service(
    identity_repo: DocumentIdentityRepository, fake_time: FakeTimeAuthority
) -> IdentityService:
    return IdentityService(identity_repo, fake_time)


@pytest.fixture
def pairing_service(
    identity_repo: DocumentIdentityRepository,
    pairing_repo: DocumentPairingRepository,
    keyed_lock: AsyncioKeyedLock,
    fake_time: FakeTimeAuthority,
) -> PairingService:
    return PairingService(identity_repo, pairing_repo, keyed_lock, fake_time)


@pytest.fixture
def lifecycle(
    chest_repo: DocumentChestRepository,
    chit_repo: DocumentChitRepository,
    identity_repo: DocumentIdentityRepository,
    settings_repo: DocumentSettingsRepository,
    keyed_lock: AsyncioKeyedLock,
    fake_time: FakeTimeAuthority,
    chest_config: ChestConfig,
) -> ChestLifecycleService:
    return ChestLifecycleService(
        chest_repo,
        chit_repo,
        identity_repo,
        settings_repo,
        keyed_lock,
        fake_time,
        chest_config,
    )


@pytest.fixture
def chit_service(
    chit_repo: DocumentChitRepository,
    chest_repo: DocumentChestRepository,
    lifecycle: ChestLifecycleService,
    fake_time: FakeTimeAuthority,
    chest_config: ChestConfig,
) -> ChitService:
    return ChitService(chit_repo, chest_repo, lifecycle, fake_time, chest_config)


@pytest.fixture
def settings_service(
    settings_repo: DocumentSettingsRepository,
    identity_repo: DocumentIdentityRepository,
    chest_repo: DocumentChestRepository,
    keyed_lock: AsyncioKeyedLock,
    fake_time: FakeTimeAuthority,
    chest_config: ChestConfig,
) -> SettingsService:
    return SettingsService(
        settings_repo, identity_repo, chest_repo, keyed_lock, fake_time, chest_config
    )


@dataclass
class Couple:
    alice: Identity
    bob: Identity


@pytest.fixture
async def couple(
    identity_service: IdentityService, pairing_service: PairingService
) -> Couple:
    """alice (female) and bob (male), registered and paired."""
    alice = await identity_service.register("alice", "female")
    bob = await identity_service.register("bob", "male")
    await pairing_service.pair(alice.id, "bob")
    return Couple(
        alice=await identity_service.get_identity(alice.id),
        bob=await identity_service.get_identity(bob.id),
    )
