"""Loading users from the local cache, including the legacy record shape.

Older SDK versions archived users with the same flat attribute fields as the
current record, but nested the flag values one level deeper::

    {"key": "u1", ..., "config": {"featuresJsonDictionary": {"flag": true}}}

Those archives also stored ``device``/``os`` at the top level and could store
``updatedAt`` as a native datetime. Current records put flag values directly
under ``config``.

The legacy shape is only ever read. ``load_cached_user`` decides once, at load
time, which path a record takes; the current path never goes through the
migrator.

Example:
    >>> user = load_cached_user(
    ...     {"key": "u1", "config": {"featuresJsonDictionary": {"beta": True}}})
    >>> user.flag_store.current_flags()
    {'beta': True}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from flagpole.flags import FlagStore, FlagValueSource
from flagpole.user.attributes import UserAttribute
from flagpole.user.environment import EnvironmentReporting
from flagpole.user.timestamps import canonicalize_timestamp
from flagpole.user.user import User

logger = logging.getLogger(__name__)

# Wrapper key holding flag values inside a legacy record's config
LEGACY_FLAGS_KEY = "featuresJsonDictionary"


class CacheFormat(str, Enum):
    """Persisted user record formats."""

    LEGACY = "legacy"  # Flags nested under LEGACY_FLAGS_KEY
    CURRENT = "current"  # Flags directly under config


def detect_cache_format(record: Mapping[str, Any]) -> CacheFormat:
    """Work out which record format a cached user uses.

    A record is legacy only when ``config`` holds nothing but the wrapper key
    and the wrapped value is a flag map. A current record may have a flag that
    happens to share the wrapper's name.
    """
    config = record.get(UserAttribute.CONFIG.value)
    if (
        isinstance(config, Mapping)
        and len(config) == 1
        and isinstance(config.get(LEGACY_FLAGS_KEY), Mapping)
    ):
        return CacheFormat.LEGACY
    return CacheFormat.CURRENT


class LegacyCacheMigrator:
    """Rebuilds users from legacy cache records.

    Example:
        >>> migrator = LegacyCacheMigrator()
        >>> user = migrator.migrate(legacy_record)
    """

    def __init__(self, environment: EnvironmentReporting | None = None):
        self.environment = environment

    def migrate(self, record: Any) -> User | None:
        """Convert a legacy record to a user.

        Args:
            record: A legacy record. Anything other than a mapping yields None.

        Returns:
            The rebuilt user with a cache-sourced flag snapshot, or None.
        """
        if not isinstance(record, Mapping):
            return None

        flat = {
            name: value
            for name, value in record.items()
            if name != UserAttribute.CONFIG.value
        }
        user = User.from_dict(flat, environment=self.environment)

        device = record.get(UserAttribute.DEVICE.value)
        if isinstance(device, str):
            user.device = device
        operating_system = record.get(UserAttribute.OPERATING_SYSTEM.value)
        if isinstance(operating_system, str):
            user.operating_system = operating_system

        updated_at = record.get(UserAttribute.LAST_UPDATED.value)
        if isinstance(updated_at, datetime):
            user._last_updated = canonicalize_timestamp(updated_at)

        user.flag_store = FlagStore(
            self._unwrap_flags(record.get(UserAttribute.CONFIG.value)),
            source=FlagValueSource.CACHE,
        )
        logger.debug(
            f"Migrated legacy cached user {user.key} with {len(user.flag_store)} flags"
        )
        return user

    @staticmethod
    def _unwrap_flags(config: Any) -> Mapping[str, Any] | None:
        if not isinstance(config, Mapping):
            return None
        flags = config.get(LEGACY_FLAGS_KEY)
        return flags if isinstance(flags, Mapping) else None


def load_cached_user(
    record: Any,
    environment: EnvironmentReporting | None = None,
) -> User | None:
    """Load a cached user record of either format.

    Args:
        record: The persisted record.
        environment: Capability supplying the default key.

    Returns:
        The user, or None if the record is not a mapping.
    """
    if not isinstance(record, Mapping):
        return None
    if detect_cache_format(record) is CacheFormat.LEGACY:
        return LegacyCacheMigrator(environment).migrate(record)
    return User.from_dict(record, environment=environment)
