"""Point-in-time feature flag snapshots held per user."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class FlagValueSource(str, Enum):
    """Where a flag snapshot came from."""

    SERVER = "server"  # Fresh evaluation from the flag service
    CACHE = "cache"  # Rehydrated from a persisted user record
    FALLBACK = "fallback"  # Caller-supplied defaults


class FlagStore:
    """Holds the evaluated flag values for a single user.

    The store only keeps flattened values (flag key -> value). Readers always
    receive a copy, so a snapshot taken for serialization is never affected by
    a later ``replace_all``.

    Example:
        >>> store = FlagStore({"new-checkout": True}, source=FlagValueSource.CACHE)
        >>> store.value("new-checkout")
        True
        >>> store.current_flags()
        {'new-checkout': True}
    """

    def __init__(
        self,
        flags: Mapping[str, Any] | None = None,
        source: FlagValueSource = FlagValueSource.SERVER,
    ):
        """Initialize the store.

        Args:
            flags: Raw flag values keyed by flag key. Non-string keys are skipped.
            source: Provenance of the values.
        """
        self._lock = threading.Lock()
        self._flags = self._clean(flags)
        self._source = source

    @property
    def source(self) -> FlagValueSource:
        """Provenance of the current snapshot."""
        return self._source

    def current_flags(self) -> dict[str, Any]:
        """Return a copy of the flattened flag values."""
        with self._lock:
            return dict(self._flags)

    def value(self, flag_key: str, fallback: Any = None) -> Any:
        """Return a single flag value, or ``fallback`` when the flag is unknown."""
        with self._lock:
            return self._flags.get(flag_key, fallback)

    def replace_all(
        self,
        flags: Mapping[str, Any] | None,
        source: FlagValueSource = FlagValueSource.SERVER,
    ) -> None:
        """Swap the whole snapshot for a new one.

        Args:
            flags: New flag values. ``None`` clears the store.
            source: Provenance of the new values.
        """
        cleaned = self._clean(flags)
        with self._lock:
            self._flags = cleaned
            self._source = source
        logger.debug(f"Replaced flag snapshot: {len(cleaned)} flags from {source.value}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._flags)

    def __repr__(self) -> str:
        return f"FlagStore(flags={len(self)}, source={self._source.value})"

    @staticmethod
    def _clean(flags: Mapping[str, Any] | None) -> dict[str, Any]:
        if not isinstance(flags, Mapping):
            return {}
        return {key: value for key, value in flags.items() if isinstance(key, str)}
