"""Environment capability: installation key and device strings.

The user model never asks the platform anything directly. It goes through an
``EnvironmentReporting`` object, which supplies the per-install anonymous key
plus the device model and system version that the SDK writes into every
user's custom attributes.

Example:
    >>> store = InMemoryKeyValueStore()
    >>> reporter = EnvironmentReporter(store=store, device_model="iPhone10,3")
    >>> reporter.default_key() == reporter.default_key()
    True
"""

from __future__ import annotations

import contextlib
import fcntl
import json
import logging
import os
import platform
import threading
import uuid
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from flagpole.user.config import EnvironmentConfig
from flagpole.user.exceptions import PersistenceError

logger = logging.getLogger(__name__)

# Storage name of the generated installation key
INSTALLATION_KEY_NAME = "deviceIdentifier"


def default_state_path() -> Path:
    """Per-user state file used when no path is configured."""
    return Path.home() / ".cache" / "flagpole" / "state.json"


@runtime_checkable
class EnvironmentReporting(Protocol):
    """Capability consumed by the user model."""

    def default_key(self) -> str: ...

    def device_model(self) -> str: ...

    def system_version(self) -> str: ...


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string persistence used for the installation key."""

    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...

    def locked(self) -> contextlib.AbstractContextManager[None]:
        """Hold exclusive access to the store across a read and a write."""
        ...


class InMemoryKeyValueStore:
    """Process-local key-value store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def locked(self) -> contextlib.AbstractContextManager[None]:
        return contextlib.nullcontext()


class JsonFileKeyValueStore:
    """Key-value store persisted as a flat JSON object on disk.

    A missing file reads as empty. A corrupt file also reads as empty and is
    overwritten on the next ``set``. ``locked`` takes an advisory ``flock`` on
    a sidecar ``.lock`` file, so processes sharing the file serialize.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.lock_path = self.path.with_suffix(self.path.suffix + ".lock")

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        """Hold an exclusive cross-process lock on the state file.

        Raises:
            PersistenceError: If the lock file cannot be opened.
        """
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(str(self.lock_path), os.O_CREAT | os.O_RDWR)
        except OSError as e:
            raise PersistenceError(f"Failed to open lock file {self.lock_path}: {e}") from e
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Could not read state file {self.path}: {e}")
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt state file: {self.path}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring state file without a JSON object: {self.path}")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, name: str) -> str | None:
        return self._load().get(name)

    def set(self, name: str, value: str) -> None:
        """Persist a value.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        data = self._load()
        data[name] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write state file {self.path}: {e}") from e


class InstallationKeyProvider:
    """Hands out one stable anonymous key per installation.

    The first call generates a UUID and stores it; every later call, from any
    thread or any process sharing the store, returns the stored value. The
    read and the write happen under the store's lock. If storing fails the
    generated key is still kept for the life of the process.
    """

    def __init__(self, store: KeyValueStore, key_name: str = INSTALLATION_KEY_NAME):
        self.store = store
        self.key_name = key_name
        self._lock = threading.Lock()
        self._cached: str | None = None

    def get_key(self) -> str:
        """Return the installation key, creating it on first use."""
        with self._lock:
            if self._cached is None:
                try:
                    with self.store.locked():
                        self._cached = self._read_or_create()
                except PersistenceError as e:
                    logger.warning(f"Installation key store could not be locked: {e}")
                    self._cached = self._read_or_create()
            return self._cached

    def _read_or_create(self) -> str:
        existing = self.store.get(self.key_name)
        if existing:
            return existing

        key = str(uuid.uuid4()).upper()
        try:
            self.store.set(self.key_name, key)
            logger.info("Created installation key")
        except PersistenceError as e:
            logger.warning(f"Installation key kept in memory only: {e}")
        return key


class EnvironmentReporter:
    """Default ``EnvironmentReporting`` implementation.

    ``default_key`` prefers a platform vendor identifier when one is given and
    falls back to the generated installation key. Device strings come from
    the ``platform`` module unless overridden.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        vendor_id: str | None = None,
        device_model: str | None = None,
        system_version: str | None = None,
    ):
        self._installation = InstallationKeyProvider(store or InMemoryKeyValueStore())
        self._vendor_id = vendor_id
        self._device_model = device_model
        self._system_version = system_version

    @classmethod
    def from_config(cls, config: EnvironmentConfig) -> EnvironmentReporter:
        """Build a reporter from configuration.

        The installation key is persisted to ``config.state_path``, or to
        ``default_state_path()`` when none is configured.
        """
        store = JsonFileKeyValueStore(config.state_path or default_state_path())
        return cls(store=store, vendor_id=config.vendor_id)

    def default_key(self) -> str:
        return self._vendor_id or self._installation.get_key()

    def device_model(self) -> str:
        if self._device_model is None:
            self._device_model = platform.machine() or "unknown"
        return self._device_model

    def system_version(self) -> str:
        if self._system_version is None:
            self._system_version = f"{platform.system()} {platform.release()}".strip() or "unknown"
        return self._system_version


_environment: EnvironmentReporting | None = None
_environment_lock = threading.Lock()


def get_environment() -> EnvironmentReporting:
    """Get the process-wide environment, building it from env vars on first use."""
    global _environment
    with _environment_lock:
        if _environment is None:
            _environment = EnvironmentReporter.from_config(EnvironmentConfig.from_env())
        return _environment


def set_environment(environment: EnvironmentReporting | None) -> None:
    """Replace the process-wide environment. ``None`` resets to lazy default."""
    global _environment
    with _environment_lock:
        _environment = environment
