"""Pytest fixtures for shared-user tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from flagpole.user import PrivacyConfig, set_environment


class FakeEnvironment:
    """Deterministic environment capability for testing."""

    def __init__(
        self,
        key: str = "INSTALL-KEY-0001",
        device: str = "iPhone10,3",
        system: str = "iOS 17.2",
    ):
        self.key = key
        self.device = device
        self.system = system
        self.default_key_calls = 0

    def default_key(self) -> str:
        self.default_key_calls += 1
        return self.key

    def device_model(self) -> str:
        return self.device

    def system_version(self) -> str:
        return self.system


@pytest.fixture
def environment() -> Generator[FakeEnvironment, None, None]:
    """Install a fake environment as the process default.

    Resets the process default after the test.
    """
    fake = FakeEnvironment()
    set_environment(fake)
    yield fake
    set_environment(None)


@pytest.fixture
def privacy_config() -> PrivacyConfig:
    """Policy with no global private attributes."""
    return PrivacyConfig()


@pytest.fixture
def full_user_kwargs() -> dict:
    """Every constructor attribute set to a distinct value."""
    return {
        "key": "user-123",
        "name": "Jane Doe",
        "first_name": "Jane",
        "last_name": "Doe",
        "country": "US",
        "ip_address": "203.0.113.7",
        "email": "jane.doe@example.com",
        "avatar": "https://example.com/jane.png",
        "custom": {"plan": "pro", "score": 42, "tags": ["beta", "early"]},
        "is_anonymous": False,
        "device": "Pixel 8",
        "operating_system": "Android 14",
        "private_attributes": ["email"],
    }
