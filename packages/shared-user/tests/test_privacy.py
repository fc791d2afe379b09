"""Tests for flagpole.user.privacy module."""

from __future__ import annotations

from flagpole.user import (
    PRIVATIZABLE_ATTRIBUTES,
    PrivacyConfig,
    effective_private_attributes,
    is_private,
)


class TestEffectivePrivateAttributes:
    """Tests for effective_private_attributes."""

    def test_no_sources(self) -> None:
        """Test nothing is private by default."""
        assert effective_private_attributes(None, PrivacyConfig()) == frozenset()

    def test_user_only(self) -> None:
        """Test user-declared names are used as given."""
        result = effective_private_attributes(["email", "score"], PrivacyConfig())
        assert result == {"email", "score"}

    def test_global_only(self) -> None:
        """Test global names apply without a user list."""
        config = PrivacyConfig(private_attribute_names=frozenset({"name"}))
        assert effective_private_attributes(None, config) == {"name"}

    def test_union(self) -> None:
        """Test both sources are combined."""
        config = PrivacyConfig(private_attribute_names=frozenset({"name", "email"}))
        result = effective_private_attributes(["email", "avatar"], config)

        assert result == {"name", "email", "avatar"}

    def test_all_private_uses_privatizable_names(self) -> None:
        """Test all-private replaces both sources with every privatizable name."""
        config = PrivacyConfig(
            all_attributes_private=True,
            private_attribute_names=frozenset({"score"}),
        )
        result = effective_private_attributes(["other"], config)

        assert result == frozenset(PRIVATIZABLE_ATTRIBUTES)
        assert "score" not in result
        assert "key" not in result
        assert "device" not in result


class TestIsPrivate:
    """Tests for is_private."""

    def test_exact_match(self) -> None:
        """Test membership is exact and case sensitive."""
        private = frozenset({"email", "custom"})

        assert is_private("email", private)
        assert not is_private("Email", private)
        assert not is_private("emai", private)
        assert not is_private("custom.score", private)
