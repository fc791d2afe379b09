"""Shared pytest fixtures for Flagpole packages."""

import pytest


@pytest.fixture
def sample_user_record():
    """A user record as written to the local cache."""
    return {
        "key": "user-123",
        "name": "Jane Doe",
        "email": "jane.doe@example.com",
        "custom": {
            "plan": "pro",
            "device": "iPhone10,3",
            "os": "iOS 17.2",
        },
        "anonymous": False,
        "updatedAt": "2024-03-01T12:30:45.250Z",
        "privateAttrs": ["email"],
        "config": {
            "new-checkout": True,
            "banner-text": "spring sale",
            "max-items": 25,
        },
    }


@pytest.fixture(autouse=True)
def isolated_state_path(monkeypatch, tmp_path):
    """Keep the installation key file out of the real home directory."""
    monkeypatch.setenv("FLAGPOLE_STATE_PATH", str(tmp_path / "state.json"))
