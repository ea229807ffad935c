"""Permission matrix - explicit per-user read grants

Grants are keyed by (content_id, user_id) and hold a boolean. A missing
entry means "no explicit grant" and reads as False, which is distinct
from an entry that holds False.

Usage:
    matrix = PermissionMatrix()
    matrix.grant(1, "alice")
    matrix.has_grant(1, "alice")  # True
    matrix.has_grant(1, "bob")    # False
    matrix.has_entry(1, "bob")    # False

Entries are independent of the record store: deleting a record leaves
its grants in place, and transferring ownership neither adds nor moves
a grant.
"""

from __future__ import annotations

GrantKey = tuple[int, str]


class PermissionMatrix:
    """Explicit (content_id, user_id) -> bool grants.

    Thread-safety: This class is NOT thread-safe. Concurrent access is
    synchronized by the owning RegistryService.
    """

    _grants: dict[GrantKey, bool]

    def __init__(self) -> None:
        self._grants = {}

    def grant(self, content_id: int, user_id: str) -> None:
        """Record an explicit grant for user_id on content_id."""
        self._grants[(content_id, user_id)] = True

    def set_entry(self, content_id: int, user_id: str, allowed: bool) -> None:
        """Write a raw entry. Only used when restoring a checkpoint."""
        self._grants[(content_id, user_id)] = bool(allowed)

    def has_grant(self, content_id: int, user_id: str) -> bool:
        """True only if an entry exists and holds True."""
        return self._grants.get((content_id, user_id), False)

    def has_entry(self, content_id: int, user_id: str) -> bool:
        """True if any entry exists for the pair, whatever its value."""
        return (content_id, user_id) in self._grants

    def entries_for(self, content_id: int) -> dict[str, bool]:
        """All entries for one content id, keyed by user."""
        return {
            user: allowed
            for (cid, user), allowed in self._grants.items()
            if cid == content_id
        }

    def entries(self) -> list[tuple[int, str, bool]]:
        """All entries as (content_id, user_id, allowed), sorted."""
        return sorted(
            (cid, user, allowed) for (cid, user), allowed in self._grants.items()
        )

    def count(self) -> int:
        """Total number of entries, orphaned ones included."""
        return len(self._grants)

    def clear(self) -> None:
        """Drop all entries. Used when restoring a checkpoint."""
        self._grants.clear()
