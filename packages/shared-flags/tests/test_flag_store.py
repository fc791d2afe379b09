"""Tests for flagpole.flags.store module."""

from __future__ import annotations

from flagpole.flags import FlagStore, FlagValueSource


class TestFlagValueSource:
    """Tests for FlagValueSource enum."""

    def test_values(self) -> None:
        """Test the provenance tags."""
        assert FlagValueSource.SERVER == "server"
        assert FlagValueSource.CACHE == "cache"
        assert FlagValueSource.FALLBACK == "fallback"


class TestFlagStore:
    """Tests for FlagStore class."""

    def test_empty_by_default(self) -> None:
        """Test a new store has no flags and server provenance."""
        store = FlagStore()

        assert store.current_flags() == {}
        assert store.source == FlagValueSource.SERVER
        assert len(store) == 0

    def test_current_flags_returns_copy(self) -> None:
        """Test mutating the returned map does not touch the store."""
        store = FlagStore({"a": 1})

        flags = store.current_flags()
        flags["b"] = 2

        assert store.current_flags() == {"a": 1}

    def test_source_tag_is_kept(self) -> None:
        """Test the provenance tag passed at construction."""
        store = FlagStore({"a": True}, source=FlagValueSource.CACHE)
        assert store.source == FlagValueSource.CACHE

    def test_non_mapping_input_is_empty(self) -> None:
        """Test non-mapping flag input degrades to an empty store."""
        store = FlagStore(["not", "a", "map"])  # type: ignore[arg-type]
        assert store.current_flags() == {}

    def test_non_string_keys_skipped(self) -> None:
        """Test only string flag keys are kept."""
        store = FlagStore({"ok": 1, 2: "bad"})  # type: ignore[dict-item]
        assert store.current_flags() == {"ok": 1}

    def test_value_with_fallback(self) -> None:
        """Test single flag lookup."""
        store = FlagStore({"dark-mode": False})

        assert store.value("dark-mode") is False
        assert store.value("missing") is None
        assert store.value("missing", "default") == "default"

    def test_replace_all(self) -> None:
        """Test swapping the snapshot replaces values and provenance."""
        store = FlagStore({"old": 1}, source=FlagValueSource.CACHE)
        snapshot = store.current_flags()

        store.replace_all({"new": 2})

        assert store.current_flags() == {"new": 2}
        assert store.source == FlagValueSource.SERVER
        assert snapshot == {"old": 1}

    def test_replace_all_with_none_clears(self) -> None:
        """Test replacing with None empties the store."""
        store = FlagStore({"old": 1})
        store.replace_all(None, source=FlagValueSource.FALLBACK)

        assert store.current_flags() == {}
        assert store.source == FlagValueSource.FALLBACK

    def test_repr_does_not_list_values(self) -> None:
        """Test repr reports size and provenance only."""
        store = FlagStore({"secret-flag": "value"})
        assert repr(store) == "FlagStore(flags=1, source=server)"
