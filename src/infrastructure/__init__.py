"""
Infrastructure layer - External adapters for Chit Chest.

This layer contains:
- PostgreSQL document store (SQLAlchemy async) and the repositories on it
- In-process keyed locks
- Structured logging setup

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""

__all__: list[str] = []
