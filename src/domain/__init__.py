"""
Domain layer - Pure business logic for Chit Chest.

This layer contains:
- Domain models (Identity, PairingRecord, Chest, Chit, Settings)
- Domain errors (validation, authorization, state, not-found, conflict)
- Domain services (TimeGate deadline arithmetic)

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from src.domain.exceptions import ChestAppError

__all__: list[str] = ["ChestAppError"]
