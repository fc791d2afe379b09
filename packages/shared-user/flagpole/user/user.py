"""The end-user context sent with every flag evaluation and analytics event.

A ``User`` is created once per user switch in the host app. The SDK fills in
anything the app leaves out: an anonymous installation key, the anonymous
flag, the device model and the system version. Apps should not use sensitive
information as the user key, since the key is never private.

Examples:
    Creating an identified user:
        >>> user = User(
        ...     key="user-123",
        ...     email="jane@example.com",
        ...     custom={"plan": "pro"},
        ...     private_attributes=["email"],
        ... )
        >>> user.is_anonymous
        False

    Users compare by key only:
        >>> User(key="user-123", name="Jane") == User(key="user-123", name="J")
        True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from flagpole.flags import FlagStore, FlagValueSource
from flagpole.user.attributes import (
    ATTRIBUTE_ACCESSORS,
    PRIVATIZABLE_ATTRIBUTES,
    SDK_SET_ATTRIBUTES,
    UserAttribute,
)
from flagpole.user.environment import EnvironmentReporting, get_environment
from flagpole.user.timestamps import parse_timestamp, utc_now
from flagpole.user.values import CustomValue, coerce_custom_map, values_equal

if TYPE_CHECKING:
    from flagpole.user.config import PrivacyConfig

logger = logging.getLogger(__name__)


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _string_list_or_none(value: Any) -> list[str] | None:
    if not isinstance(value, (list, tuple)):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return list(value)


class User:
    """A feature-flag user.

    Attributes:
        key: Stable identifier. Never private.
        name, first_name, last_name, country, ip_address, email, avatar:
            Optional scalars the app may declare private.
        custom: App-defined attributes. Top-level keys, or the whole map, may
            be declared private. ``device`` and ``os`` inside it are owned by
            the SDK and are never private.
        is_anonymous: Whether the user is the SDK-defined anonymous user.
        device, operating_system: SDK-owned, written into ``custom`` when
            serialized.
        private_attributes: Names this user declares private, combined with
            ``PrivacyConfig.private_attribute_names``.
        flag_store: The user's current flag snapshot.
    """

    privatizable_attributes: tuple[str, ...] = PRIVATIZABLE_ATTRIBUTES

    def __init__(
        self,
        key: str | None = None,
        name: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        country: str | None = None,
        ip_address: str | None = None,
        email: str | None = None,
        avatar: str | None = None,
        custom: Mapping[str, Any] | None = None,
        is_anonymous: bool | None = None,
        device: str | None = None,
        operating_system: str | None = None,
        private_attributes: list[str] | None = None,
        *,
        environment: EnvironmentReporting | None = None,
        flag_store: FlagStore | None = None,
    ):
        """Create a user, defaulting anything not supplied.

        Args:
            key: Unique user key. The installation key is used when omitted.
            is_anonymous: When omitted, True exactly when ``key`` equals the
                installation's default key, even if the key was passed in.
            device: Overrides ``custom["device"]`` and the detected model.
            operating_system: Overrides ``custom["os"]`` and the detected
                system version.
            environment: Capability supplying default key and device strings.
                Defaults to the process-wide environment.
            flag_store: Initial flag snapshot. Defaults to an empty store.
        """
        environment = environment or get_environment()
        default_key = environment.default_key()
        selected_key = key or default_key

        self.key: str = selected_key
        self.name = name
        self.first_name = first_name
        self.last_name = last_name
        self.country = country
        self.ip_address = ip_address
        self.email = email
        self.avatar = avatar
        self.custom: dict[str, CustomValue] | None = coerce_custom_map(custom)
        self.is_anonymous: bool = (
            is_anonymous if is_anonymous is not None else selected_key == default_key
        )
        self.device: str | None = self._first_present(
            device,
            self._custom_string(UserAttribute.DEVICE.value),
            environment.device_model,
        )
        self.operating_system: str | None = self._first_present(
            operating_system,
            self._custom_string(UserAttribute.OPERATING_SYSTEM.value),
            environment.system_version,
        )
        self.private_attributes: list[str] | None = (
            list(private_attributes) if private_attributes is not None else None
        )
        self.flag_store: FlagStore = flag_store if flag_store is not None else FlagStore()
        self._last_updated: datetime = utc_now()
        logger.debug(f"Created user: {self!r}")

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        environment: EnvironmentReporting | None = None,
    ) -> User:
        """Create a user from a record dictionary.

        Every field is optional and mistyped fields are treated as absent.
        Unlike the constructor, ``is_anonymous`` is False unless the record
        says ``"anonymous": true``, and ``device``/``operating_system`` are
        only read from ``custom``. Flags under ``config`` become a
        cache-sourced snapshot.

        Args:
            data: Dictionary keyed by wire attribute names.
            environment: Capability supplying the default key.

        Returns:
            User instance.
        """
        environment = environment or get_environment()

        user = cls.__new__(cls)
        user.key = _string_or_none(data.get(UserAttribute.KEY.value)) or environment.default_key()
        user.is_anonymous = data.get(UserAttribute.IS_ANONYMOUS.value) is True
        user._last_updated = (
            parse_timestamp(data.get(UserAttribute.LAST_UPDATED.value)) or utc_now()
        )

        user.name = _string_or_none(data.get(UserAttribute.NAME.value))
        user.first_name = _string_or_none(data.get(UserAttribute.FIRST_NAME.value))
        user.last_name = _string_or_none(data.get(UserAttribute.LAST_NAME.value))
        user.country = _string_or_none(data.get(UserAttribute.COUNTRY.value))
        user.ip_address = _string_or_none(data.get(UserAttribute.IP_ADDRESS.value))
        user.email = _string_or_none(data.get(UserAttribute.EMAIL.value))
        user.avatar = _string_or_none(data.get(UserAttribute.AVATAR.value))
        user.private_attributes = _string_list_or_none(
            data.get(UserAttribute.PRIVATE_ATTRIBUTES.value)
        )

        user.custom = coerce_custom_map(data.get(UserAttribute.CUSTOM.value))
        user.device = user._custom_string(UserAttribute.DEVICE.value)
        user.operating_system = user._custom_string(UserAttribute.OPERATING_SYSTEM.value)

        user.flag_store = FlagStore(
            data.get(UserAttribute.CONFIG.value), source=FlagValueSource.CACHE
        )
        logger.debug(f"Created user from dict: {user!r}")
        return user

    @classmethod
    def from_object(
        cls,
        obj: Any,
        environment: EnvironmentReporting | None = None,
    ) -> User | None:
        """Create a user from any object, or return None if it is not a mapping."""
        if not isinstance(obj, Mapping):
            return None
        return cls.from_dict(obj, environment=environment)

    @property
    def last_updated(self) -> datetime:
        """When this user was created or last rebuilt from a record."""
        return self._last_updated

    @property
    def custom_without_sdk_attributes(self) -> dict[str, CustomValue] | None:
        """The custom map minus the SDK-owned ``device`` and ``os`` keys."""
        if self.custom is None:
            return None
        return {
            key: value for key, value in self.custom.items() if key not in SDK_SET_ATTRIBUTES
        }

    def value_for(self, attribute: UserAttribute) -> Any:
        """Look up an attribute value by its identifier."""
        return ATTRIBUTE_ACCESSORS[attribute](self)

    def to_dict(
        self,
        config: PrivacyConfig | None = None,
        include_flags: bool = False,
        include_private: bool = False,
    ) -> dict[str, Any]:
        """Serialize to a record dictionary.

        See ``flagpole.user.serializer.user_to_record``.
        """
        from flagpole.user.serializer import user_to_record

        return user_to_record(
            self,
            config,
            include_flags=include_flags,
            include_private=include_private,
        )

    def is_equal_to(self, other: User) -> bool:
        """Compare every attribute except ``last_updated`` and ``flag_store``.

        This is stricter than ``==``, which compares keys only.
        """
        return (
            self.key == other.key
            and self.name == other.name
            and self.first_name == other.first_name
            and self.last_name == other.last_name
            and self.country == other.country
            and self.ip_address == other.ip_address
            and self.email == other.email
            and self.avatar == other.avatar
            and values_equal(self.custom, other.custom)
            and self.is_anonymous == other.is_anonymous
            and self.device == other.device
            and self.operating_system == other.operating_system
            and self.private_attributes == other.private_attributes
        )

    @staticmethod
    def _first_present(
        explicit: str | None,
        from_custom: str | None,
        detect: Callable[[], str],
    ) -> str:
        if explicit is not None:
            return explicit
        if from_custom is not None:
            return from_custom
        return detect()

    def _custom_string(self, name: str) -> str | None:
        if self.custom is None:
            return None
        return _string_or_none(self.custom.get(name))

    def __eq__(self, other: object) -> bool:
        """Users are the same user when their keys match.

        Caches rely on this to update a user's flags in place while the app
        collects more attributes over time.
        """
        if not isinstance(other, User):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        # Attribute values may be private, so only names are shown
        present = [
            attribute.value
            for attribute in (
                UserAttribute.NAME,
                UserAttribute.FIRST_NAME,
                UserAttribute.LAST_NAME,
                UserAttribute.COUNTRY,
                UserAttribute.IP_ADDRESS,
                UserAttribute.EMAIL,
                UserAttribute.AVATAR,
                UserAttribute.CUSTOM,
            )
            if self.value_for(attribute) is not None
        ]
        return (
            f"User(key={self.key!r}, anonymous={self.is_anonymous}, "
            f"attributes={present})"
        )
