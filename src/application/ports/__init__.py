"""Application ports - abstract interfaces for infrastructure adapters.

Ports enable dependency inversion and keep the services testable against
in-memory implementations.

Available ports:
- TimeAuthorityProtocol: current time
- DocumentStoreProtocol: single-document atomic store
- KeyedLockProtocol: in-process serialization per pair
- Identity/Pairing/Chest/Chit/Settings repository protocols
"""

from src.application.ports.chest_repository import (
    ChestRepositoryProtocol,
    LiveChestSlot,
)
from src.application.ports.chit_repository import ChitRepositoryProtocol
from src.application.ports.document_store import (
    Document,
    DocumentStoreProtocol,
    Versioned,
)
from src.application.ports.identity_repository import IdentityRepositoryProtocol
from src.application.ports.keyed_lock import KeyedLockProtocol
from src.application.ports.pairing_repository import PairingRepositoryProtocol
from src.application.ports.settings_repository import SettingsRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "ChestRepositoryProtocol",
    "ChitRepositoryProtocol",
    "Document",
    "DocumentStoreProtocol",
    "IdentityRepositoryProtocol",
    "KeyedLockProtocol",
    "LiveChestSlot",
    "PairingRepositoryProtocol",
    "SettingsRepositoryProtocol",
    "TimeAuthorityProtocol",
    "Versioned",
]
