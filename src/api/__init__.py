"""
API layer - FastAPI routes and HTTP concerns for Chit Chest.

This layer contains:
- FastAPI route definitions
- Request/Response DTOs
- HTTP middleware

IMPORT RULES:
- CAN import from: application, domain, bootstrap
- CANNOT import from: infrastructure directly (except observability)
"""

__all__: list[str] = []
