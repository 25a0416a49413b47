"""Domain errors for Chit Chest.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from ChestAppError through one of the five
categories in src.domain.errors.base.
"""

from src.domain.errors.base import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from src.domain.errors.chest import (
    ChestAccessDeniedError,
    ChestAlreadyActiveError,
    ChestNotFoundError,
    ChestStillLockedError,
    DurationOutOfRangeError,
    InvalidChestTransitionError,
)
from src.domain.errors.chit import (
    ChestNotWritableError,
    ChitNotFoundError,
    ContentTooLongError,
    EmptyContentError,
    InvalidEmotionError,
    OwnChitAccessError,
)
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.document_store import DocumentExistsError, DocumentNotFoundError
from src.domain.errors.identity import (
    IdentityNotFoundError,
    InvalidGenderError,
    InvalidUsernameError,
    UsernameTakenError,
)
from src.domain.errors.pairing import (
    AlreadyPairedError,
    GenderMismatchError,
    HistoricalRepairBlockedError,
    NotPairedError,
    PartnerAlreadyPairedError,
    SelfPairError,
)
from src.domain.errors.settings import ChestActiveLockedError, InvalidSettingError

__all__: list[str] = [
    "AlreadyPairedError",
    "AuthorizationError",
    "ChestAccessDeniedError",
    "ChestActiveLockedError",
    "ChestAlreadyActiveError",
    "ChestNotFoundError",
    "ChestNotWritableError",
    "ChestStillLockedError",
    "ChitNotFoundError",
    "ConcurrentModificationError",
    "ConflictError",
    "ContentTooLongError",
    "DocumentExistsError",
    "DocumentNotFoundError",
    "DurationOutOfRangeError",
    "EmptyContentError",
    "GenderMismatchError",
    "HistoricalRepairBlockedError",
    "IdentityNotFoundError",
    "InvalidChestTransitionError",
    "InvalidEmotionError",
    "InvalidGenderError",
    "InvalidSettingError",
    "InvalidUsernameError",
    "NotFoundError",
    "NotPairedError",
    "OwnChitAccessError",
    "PartnerAlreadyPairedError",
    "SelfPairError",
    "StateError",
    "UsernameTakenError",
    "ValidationError",
]
