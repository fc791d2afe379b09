"""Flagpole flag snapshots.

Provides the per-user flag store consulted when a user record is serialized
and rebuilt when a cached record is loaded.

Example:
    from flagpole.flags import FlagStore, FlagValueSource

    store = FlagStore({"dark-mode": True}, source=FlagValueSource.CACHE)
    store.replace_all({"dark-mode": False})
"""

from flagpole.flags.store import FlagStore, FlagValueSource

__all__ = [
    "FlagStore",
    "FlagValueSource",
]
