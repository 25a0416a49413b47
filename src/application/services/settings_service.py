"""Settings gate.

Settings are created with defaults on first access. ``chestDurationDays`` is
frozen while the owner's pair has a chest in ``active`` or ``unlockable``
status. The check and the write happen under the owner's settings lock,
which chest creation also takes for both owners, so a settings change
cannot interleave with a chest being started, paired or not. Cosmetic
settings are never lock-gated.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any
from uuid import UUID

from structlog import get_logger

from src.application.ports.document_store import Versioned
from src.application.services.chest_lifecycle_service import settings_lock_key
from src.config.chest_config import ChestConfig
from src.domain.errors import (
    ChestActiveLockedError,
    DocumentExistsError,
    IdentityNotFoundError,
    InvalidSettingError,
)
from src.domain.models.chest import Chest
from src.domain.models.identity import Identity
from src.domain.models.pairing import pair_key
from src.domain.models.settings import Settings, Theme
from src.domain.services.duration_validator import validate_duration

if TYPE_CHECKING:
    from src.application.ports.chest_repository import ChestRepositoryProtocol
    from src.application.ports.identity_repository import (
        IdentityRepositoryProtocol,
    )
    from src.application.ports.keyed_lock import KeyedLockProtocol
    from src.application.ports.settings_repository import (
        SettingsRepositoryProtocol,
    )
    from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)


@dataclass(frozen=True)
class SettingsEditability:
    can_edit: bool
    reason: str | None = None
    chest_id: UUID | None = None


class SettingsService:
    """Reads and updates per-identity settings."""

    def __init__(
        self,
        settings_repo: SettingsRepositoryProtocol,
        identity_repo: IdentityRepositoryProtocol,
        chest_repo: ChestRepositoryProtocol,
        keyed_lock: KeyedLockProtocol,
        time_authority: TimeAuthorityProtocol,
        config: ChestConfig | None = None,
    ) -> None:
        self._settings_repo = settings_repo
        self._identity_repo = identity_repo
        self._chest_repo = chest_repo
        self._locks = keyed_lock
        self._time = time_authority
        self._config = config or ChestConfig()

    async def get(self, owner_id: UUID) -> Settings:
        """Return the owner's settings, writing defaults on first access."""
        await self._require_identity(owner_id)
        return (await self._get_or_create(owner_id)).value

    async def can_edit(self, owner_id: UUID) -> SettingsEditability:
        identity = await self._require_identity(owner_id)
        blocking = await self._find_blocking_chest(identity)
        if blocking is None:
            return SettingsEditability(can_edit=True)
        return SettingsEditability(
            can_edit=False,
            reason=f"chest_{blocking.status.value}",
            chest_id=blocking.id,
        )

    async def update(
        self,
        owner_id: UUID,
        chest_duration_days: int | None = None,
        notifications_enabled: bool | None = None,
        sound_enabled: bool | None = None,
        theme: Theme | str | None = None,
    ) -> Settings:
        """Update settings; omitted fields keep their value.

        Raises:
            IdentityNotFoundError: Unknown owner.
            DurationOutOfRangeError: Duration outside the configured range.
            InvalidSettingError: Bad cosmetic value.
            ChestActiveLockedError: Duration change while a chest is running.
        """
        changes: dict[str, Any] = {}
        if chest_duration_days is not None:
            changes["chest_duration_days"] = validate_duration(
                chest_duration_days,
                self._config.min_duration_days,
                self._config.max_duration_days,
            )
        if notifications_enabled is not None:
            changes["notifications_enabled"] = _require_bool(
                "notificationsEnabled", notifications_enabled
            )
        if sound_enabled is not None:
            changes["sound_enabled"] = _require_bool("soundEnabled", sound_enabled)
        if theme is not None:
            changes["theme"] = Theme.parse(theme)

        log = logger.bind(owner_id=str(owner_id), fields=sorted(changes))
        async with self._locks.hold(settings_lock_key(owner_id)):
            # Re-read under the lock: the owner may have paired meanwhile
            identity = await self._require_identity(owner_id)
            if "chest_duration_days" in changes:
                blocking = await self._find_blocking_chest(identity)
                if blocking is not None:
                    log.warning(
                        "settings_update_rejected",
                        reason="chest_active",
                        chest_id=str(blocking.id),
                        status=blocking.status.value,
                    )
                    raise ChestActiveLockedError(owner_id, blocking.id)

            current = await self._get_or_create(owner_id)
            if not changes:
                return current.value
            updated = replace(current.value, updated_at=self._time.now(), **changes)
            stored = await self._settings_repo.update(updated, current.version)

        log.info("settings_updated")
        return stored.value

    async def _get_or_create(self, owner_id: UUID) -> Versioned[Settings]:
        found = await self._settings_repo.get(owner_id)
        if found is not None:
            return found
        defaults = Settings(
            owner_id=owner_id,
            chest_duration_days=self._config.default_duration_days,
            updated_at=self._time.now(),
        )
        try:
            created = await self._settings_repo.create(defaults)
        except DocumentExistsError:
            # Concurrent first access; the other writer's defaults win
            raced = await self._settings_repo.get(owner_id)
            assert raced is not None
            return raced
        logger.info("settings_defaults_created", owner_id=str(owner_id))
        return created

    async def _find_blocking_chest(self, identity: Identity) -> Chest | None:
        if identity.paired_id is None:
            return None
        chests = await self._chest_repo.list_for_pair(
            pair_key(identity.id, identity.paired_id)
        )
        for chest in chests:
            if chest.status.locks_settings():
                return chest
        return None

    async def _require_identity(self, owner_id: UUID) -> Identity:
        found = await self._identity_repo.get(owner_id)
        if found is None:
            raise IdentityNotFoundError(identity_id=owner_id)
        return found.value


def _require_bool(name: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise InvalidSettingError(name, value)
    return value
