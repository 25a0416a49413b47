"""
Application layer - use cases and orchestration for Chit Chest.

This layer contains:
- Application services (pairing, chest lifecycle, chits, settings)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain, config
- CANNOT import from: infrastructure, api
"""
