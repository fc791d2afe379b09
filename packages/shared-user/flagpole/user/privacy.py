"""Private attribute policy.

Two independent sources declare attributes private: the user's own
``private_attributes`` and the global ``PrivacyConfig``. The effective set is
their union, or every privatizable attribute when the config marks all
attributes private. Names match exactly; a name may refer to a top-level
attribute (``"email"``) or to a direct key of the custom map (``"score"``).
"""

from __future__ import annotations

from collections.abc import Iterable

from flagpole.user.attributes import PRIVATIZABLE_ATTRIBUTES
from flagpole.user.config import PrivacyConfig


def effective_private_attributes(
    user_private_attributes: Iterable[str] | None,
    config: PrivacyConfig,
) -> frozenset[str]:
    """Compute the set of attribute names that must be redacted.

    Args:
        user_private_attributes: The user's own private attribute names.
        config: Global privacy policy.

    Returns:
        Names to redact when serializing without private values.

    Examples:
        >>> sorted(effective_private_attributes(["email"], PrivacyConfig(
        ...     private_attribute_names=frozenset({"name"}))))
        ['email', 'name']
    """
    if config.all_attributes_private:
        return frozenset(PRIVATIZABLE_ATTRIBUTES)
    return frozenset(user_private_attributes or ()) | config.private_attribute_names


def is_private(attribute: str, private_attributes: frozenset[str]) -> bool:
    """Return True if ``attribute`` is in the effective private set."""
    return attribute in private_attributes
