"""Collection names used in the document store."""

USERS = "users"
USERNAMES = "usernames"
PAIRINGS = "pairings"
CHESTS = "chests"
CHEST_SLOTS = "chest_slots"
CHEST_COUNTERS = "chest_counters"
SETTINGS = "settings"


def chits_of(chest_id: object) -> str:
    """Sub-collection holding the chits of one chest."""
    return f"chests/{chest_id}/chits"
