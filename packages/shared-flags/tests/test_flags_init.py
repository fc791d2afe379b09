"""Tests for flagpole.flags public API."""


def test_import_store_classes():
    """Test that store classes are importable from top level."""
    from flagpole.flags import FlagStore, FlagValueSource

    assert hasattr(FlagStore, "current_flags")
    assert hasattr(FlagValueSource, "CACHE")


def test_all_exports():
    """Test that __all__ contains expected exports."""
    from flagpole.flags import __all__

    assert sorted(__all__) == ["FlagStore", "FlagValueSource"]
