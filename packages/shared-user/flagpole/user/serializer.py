"""Canonical user records.

Turns a ``User`` into the dictionary sent with analytics events and written to
the local cache. Private attribute values are left out of the record, but
their names are listed under ``privateAttrs`` so the server knows they exist.

Record fields, in emission order::

    key, name, firstName, lastName, country, ip, email, avatar,
    custom, anonymous, updatedAt, privateAttrs, config

``device`` and ``os`` always travel inside ``custom``, whatever the privacy
settings, because the server segments analytics on them.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from flagpole.user.attributes import OPTIONAL_SCALAR_ATTRIBUTES, UserAttribute
from flagpole.user.config import PrivacyConfig
from flagpole.user.privacy import effective_private_attributes, is_private
from flagpole.user.timestamps import format_timestamp

if TYPE_CHECKING:
    from flagpole.user.user import User

logger = logging.getLogger(__name__)


def user_to_record(
    user: User,
    config: PrivacyConfig | None = None,
    *,
    include_flags: bool = False,
    include_private: bool = False,
) -> dict[str, Any]:
    """Serialize a user to a record dictionary.

    Args:
        user: The user to serialize.
        config: Global privacy policy. Defaults to no global private attributes.
        include_flags: Add the user's flag values under ``config``.
        include_private: Keep private values and omit ``privateAttrs``. Only
            for local storage; never for records sent off the device.

    Returns:
        Ordered record dictionary.

    Examples:
        >>> record = user_to_record(
        ...     User(key="u1", email="a@b.c", private_attributes=["email"]))
        >>> "email" in record, record["privateAttrs"]
        (False, ['email'])
    """
    config = config or PrivacyConfig()
    private_attributes = effective_private_attributes(user.private_attributes, config)
    redact = not include_private
    redacted: list[str] = []

    record: dict[str, Any] = {UserAttribute.KEY.value: user.key}

    for attribute in OPTIONAL_SCALAR_ATTRIBUTES:
        value = user.value_for(attribute)
        if value is None:
            continue
        if redact and is_private(attribute.value, private_attributes):
            redacted.append(attribute.value)
        else:
            record[attribute.value] = value

    custom_record: dict[str, Any] = {}
    user_custom = user.custom_without_sdk_attributes
    if (
        redact
        and is_private(UserAttribute.CUSTOM.value, private_attributes)
        and user_custom
    ):
        redacted.append(UserAttribute.CUSTOM.value)
    elif user_custom:
        for custom_key, value in user_custom.items():
            if redact and is_private(custom_key, private_attributes):
                redacted.append(custom_key)
            else:
                custom_record[custom_key] = value

    if user.device is not None:
        custom_record[UserAttribute.DEVICE.value] = user.device
    if user.operating_system is not None:
        custom_record[UserAttribute.OPERATING_SYSTEM.value] = user.operating_system
    if custom_record:
        record[UserAttribute.CUSTOM.value] = custom_record

    record[UserAttribute.IS_ANONYMOUS.value] = user.is_anonymous
    record[UserAttribute.LAST_UPDATED.value] = format_timestamp(user.last_updated)

    if redact and redacted:
        record[UserAttribute.PRIVATE_ATTRIBUTES.value] = sorted(set(redacted))
        logger.debug(f"Redacted {len(set(redacted))} attributes for user {user.key}")

    if include_flags:
        record[UserAttribute.CONFIG.value] = user.flag_store.current_flags()

    return record


def user_to_json(
    user: User,
    config: PrivacyConfig | None = None,
    *,
    include_flags: bool = False,
    include_private: bool = False,
) -> str:
    """Serialize a user record to JSON text."""
    return json.dumps(
        user_to_record(
            user,
            config,
            include_flags=include_flags,
            include_private=include_private,
        )
    )
