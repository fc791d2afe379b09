"""Flagpole user model.

This package provides the end-user context for the feature-flag client SDK:
- User construction with SDK defaults (anonymous key, device, system version)
- Private attribute redaction driven by per-user and global policy
- Canonical record serialization
- Loading cached users, including the legacy record shape

Example:
    from flagpole.user import PrivacyConfig, User, load_cached_user

    user = User(
        key="user-123",
        email="jane@example.com",
        custom={"plan": "pro", "score": 42},
        private_attributes=["email", "score"],
    )
    record = user.to_dict(PrivacyConfig.from_env(), include_flags=True)

    # Later, on the next launch
    cached = load_cached_user(record)
"""

from flagpole.user.attributes import (
    PRIVATIZABLE_ATTRIBUTES,
    SDK_SET_ATTRIBUTES,
    UserAttribute,
)
from flagpole.user.config import EnvironmentConfig, PrivacyConfig
from flagpole.user.environment import (
    EnvironmentReporter,
    EnvironmentReporting,
    InMemoryKeyValueStore,
    InstallationKeyProvider,
    JsonFileKeyValueStore,
    KeyValueStore,
    default_state_path,
    get_environment,
    set_environment,
)
from flagpole.user.exceptions import FlagpoleError, PersistenceError
from flagpole.user.legacy import (
    CacheFormat,
    LegacyCacheMigrator,
    detect_cache_format,
    load_cached_user,
)
from flagpole.user.privacy import effective_private_attributes, is_private
from flagpole.user.serializer import user_to_json, user_to_record
from flagpole.user.timestamps import (
    canonicalize_timestamp,
    format_timestamp,
    parse_timestamp,
)
from flagpole.user.user import User
from flagpole.user.values import CustomValue, coerce_custom_value, values_equal

__all__ = [
    # Attributes
    "PRIVATIZABLE_ATTRIBUTES",
    "SDK_SET_ATTRIBUTES",
    "UserAttribute",
    # Config
    "EnvironmentConfig",
    "PrivacyConfig",
    # Environment
    "EnvironmentReporter",
    "EnvironmentReporting",
    "InMemoryKeyValueStore",
    "InstallationKeyProvider",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "default_state_path",
    "get_environment",
    "set_environment",
    # Exceptions
    "FlagpoleError",
    "PersistenceError",
    # Legacy cache
    "CacheFormat",
    "LegacyCacheMigrator",
    "detect_cache_format",
    "load_cached_user",
    # Privacy
    "effective_private_attributes",
    "is_private",
    # Serialization
    "user_to_json",
    "user_to_record",
    # Timestamps
    "canonicalize_timestamp",
    "format_timestamp",
    "parse_timestamp",
    # User
    "User",
    # Values
    "CustomValue",
    "coerce_custom_value",
    "values_equal",
]
