"""Integration tests for package imports."""


class TestAllPackagesImportable:
    """Test that all Flagpole packages can be imported together."""

    def test_user_package_imports(self):
        """User package classes should be importable."""
        from flagpole.user import LegacyCacheMigrator
        from flagpole.user import PrivacyConfig
        from flagpole.user import User
        from flagpole.user import UserAttribute

        assert User is not None
        assert PrivacyConfig is not None
        assert LegacyCacheMigrator is not None
        assert UserAttribute is not None

    def test_flags_package_imports(self):
        """Flags package classes should be importable."""
        from flagpole.flags import FlagStore
        from flagpole.flags import FlagValueSource

        assert FlagStore is not None
        assert FlagValueSource is not None


class TestCrossPackageIntegration:
    """Test that packages work together."""

    def test_cached_record_rebuilds_flag_store(self, sample_user_record):
        """A cached record should come back with a cache-sourced flag store."""
        from flagpole.flags import FlagStore, FlagValueSource
        from flagpole.user import load_cached_user

        user = load_cached_user(sample_user_record)

        assert user is not None
        assert isinstance(user.flag_store, FlagStore)
        assert user.flag_store.source == FlagValueSource.CACHE
        assert user.flag_store.current_flags() == sample_user_record["config"]

    def test_replaced_flags_are_serialized(self, sample_user_record):
        """Swapping the flag snapshot should change the emitted config."""
        from flagpole.user import load_cached_user

        user = load_cached_user(sample_user_record)
        user.flag_store.replace_all({"new-checkout": False})

        record = user.to_dict(include_flags=True)

        assert record["config"] == {"new-checkout": False}
        assert record["key"] == sample_user_record["key"]
        assert "email" not in record
        assert record["privateAttrs"] == ["email"]
