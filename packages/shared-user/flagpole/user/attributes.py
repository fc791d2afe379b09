"""User attribute identifiers and the accessor table.

Every attribute a user record can carry is a member of ``UserAttribute``. The
member value is the stable wire/cache name, so ``UserAttribute.IP_ADDRESS``
serializes as ``"ip"``.

Examples:
    >>> UserAttribute.FIRST_NAME.value
    'firstName'
    >>> "custom" in PRIVATIZABLE_ATTRIBUTES
    True
    >>> "os" in SDK_SET_ATTRIBUTES
    True
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from operator import attrgetter
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from flagpole.user.user import User


class UserAttribute(str, Enum):
    """Wire names of user attributes, in record emission order."""

    KEY = "key"
    NAME = "name"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    COUNTRY = "country"
    IP_ADDRESS = "ip"
    EMAIL = "email"
    AVATAR = "avatar"
    CUSTOM = "custom"
    IS_ANONYMOUS = "anonymous"
    DEVICE = "device"
    OPERATING_SYSTEM = "os"
    LAST_UPDATED = "updatedAt"
    PRIVATE_ATTRIBUTES = "privateAttrs"
    CONFIG = "config"


# Attributes whose values may be withheld while their names are disclosed
PRIVATIZABLE_ATTRIBUTES: tuple[str, ...] = (
    UserAttribute.NAME.value,
    UserAttribute.FIRST_NAME.value,
    UserAttribute.LAST_NAME.value,
    UserAttribute.COUNTRY.value,
    UserAttribute.IP_ADDRESS.value,
    UserAttribute.EMAIL.value,
    UserAttribute.AVATAR.value,
    UserAttribute.CUSTOM.value,
)

# Privatizable scalars, i.e. everything above except the custom bag
OPTIONAL_SCALAR_ATTRIBUTES: tuple[UserAttribute, ...] = (
    UserAttribute.NAME,
    UserAttribute.FIRST_NAME,
    UserAttribute.LAST_NAME,
    UserAttribute.COUNTRY,
    UserAttribute.IP_ADDRESS,
    UserAttribute.EMAIL,
    UserAttribute.AVATAR,
)

# Written into custom by the SDK and never redacted
SDK_SET_ATTRIBUTES: tuple[str, ...] = (
    UserAttribute.DEVICE.value,
    UserAttribute.OPERATING_SYSTEM.value,
)


def _flag_values(user: User) -> dict[str, Any]:
    return user.flag_store.current_flags()


ATTRIBUTE_ACCESSORS: dict[UserAttribute, Callable[[User], Any]] = {
    UserAttribute.KEY: attrgetter("key"),
    UserAttribute.NAME: attrgetter("name"),
    UserAttribute.FIRST_NAME: attrgetter("first_name"),
    UserAttribute.LAST_NAME: attrgetter("last_name"),
    UserAttribute.COUNTRY: attrgetter("country"),
    UserAttribute.IP_ADDRESS: attrgetter("ip_address"),
    UserAttribute.EMAIL: attrgetter("email"),
    UserAttribute.AVATAR: attrgetter("avatar"),
    UserAttribute.CUSTOM: attrgetter("custom"),
    UserAttribute.IS_ANONYMOUS: attrgetter("is_anonymous"),
    UserAttribute.DEVICE: attrgetter("device"),
    UserAttribute.OPERATING_SYSTEM: attrgetter("operating_system"),
    UserAttribute.LAST_UPDATED: attrgetter("last_updated"),
    UserAttribute.PRIVATE_ATTRIBUTES: attrgetter("private_attributes"),
    UserAttribute.CONFIG: _flag_values,
}
