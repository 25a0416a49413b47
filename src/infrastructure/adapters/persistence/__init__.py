"""Persistence adapters: document store implementations and the
document-backed repositories built on them."""

from src.infrastructure.adapters.persistence.document_chest_repository import (
    DocumentChestRepository,
)
from src.infrastructure.adapters.persistence.document_chit_repository import (
    DocumentChitRepository,
)
from src.infrastructure.adapters.persistence.document_identity_repository import (
    DocumentIdentityRepository,
)
from src.infrastructure.adapters.persistence.document_pairing_repository import (
    DocumentPairingRepository,
)
from src.infrastructure.adapters.persistence.document_settings_repository import (
    DocumentSettingsRepository,
)
from src.infrastructure.adapters.persistence.sqlalchemy_document_store import (
    SqlAlchemyDocumentStore,
)

__all__ = [
    "DocumentChestRepository",
    "DocumentChitRepository",
    "DocumentIdentityRepository",
    "DocumentPairingRepository",
    "DocumentSettingsRepository",
    "SqlAlchemyDocumentStore",
]
