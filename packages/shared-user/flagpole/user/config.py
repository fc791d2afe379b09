"""Configuration models for the user model."""

from __future__ import annotations

import os

from pydantic import BaseModel


def _split_names(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(name.strip() for name in raw.split(",") if name.strip())


class PrivacyConfig(BaseModel):
    """Global private-attribute policy applied to every serialized user."""

    all_attributes_private: bool = False
    private_attribute_names: frozenset[str] = frozenset()

    @classmethod
    def from_env(cls) -> PrivacyConfig:
        """Load configuration from environment variables.

        Uses FLAGPOLE_ALL_ATTRIBUTES_PRIVATE (any boolean pydantic accepts) and
        FLAGPOLE_PRIVATE_ATTRIBUTES (comma-separated attribute names).
        """
        return cls(
            all_attributes_private=os.getenv("FLAGPOLE_ALL_ATTRIBUTES_PRIVATE", "false"),
            private_attribute_names=_split_names(os.getenv("FLAGPOLE_PRIVATE_ATTRIBUTES")),
        )


class EnvironmentConfig(BaseModel):
    """Configuration for the default environment capability."""

    state_path: str | None = None  # JSON file for the installation key; ~/.cache/flagpole if unset
    vendor_id: str | None = None  # Platform-provided per-vendor identifier

    @classmethod
    def from_env(cls) -> EnvironmentConfig:
        """Load configuration from environment variables."""
        return cls(
            state_path=os.getenv("FLAGPOLE_STATE_PATH") or None,
            vendor_id=os.getenv("FLAGPOLE_VENDOR_ID") or None,
        )
