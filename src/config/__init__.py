"""Configuration module for Chit Chest.

Available Configurations:
- ChestConfig: chest duration bounds, chit length, duration unit
"""

from src.config.chest_config import (
    DEFAULT_CHEST_CONFIG,
    DEV_CHEST_CONFIG,
    ChestConfig,
)

__all__ = [
    "ChestConfig",
    "DEFAULT_CHEST_CONFIG",
    "DEV_CHEST_CONFIG",
]
