"""
Chit Chest - time-locked, emotion-tagged messages between paired partners

Two permanently paired participants drop private "chits" into a shared
chest. Chits become readable by the partner only once the chest's unlock
deadline has passed, and an author never reads their own chits.

Ground rules:
- Pairing is permanent and symmetric
- At most one live chest per pair
- Writes only inside the lock window
- Reads only of the partner's chits (the blind box)
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
