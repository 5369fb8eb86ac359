"""
Tests for appvms.registry module.

Tests the in-memory version store including:
- Lazy application creation
- Overwrite-by-key uploads
- Typed lookup failures
- Lazy, unordered listing
"""

from __future__ import annotations

import dataclasses
import types

import pytest

from appvms.exceptions import AppNotFoundError, NotFoundError, VersionNotFoundError
from appvms.registry import VersionRecord, VersionRegistry


class TestUploadVersion:
    """Tests for VersionRegistry.upload_version."""

    def test_upload_creates_app_lazily(self):
        """Test that the first upload creates the application."""
        registry = VersionRegistry()
        assert not registry.has_app("PhonePe")

        registry.upload_version("PhonePe", "v1.0", "Android-9", b"one", False)

        assert registry.has_app("PhonePe")
        assert registry.app_names() == ["PhonePe"]
        assert registry.get_app("PhonePe").name == "PhonePe"

    def test_upload_stores_all_fields(self):
        """Test that every field of the record is stored as given."""
        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v2.0", "Android-10", b"payload", True)

        record = registry.get_version("PhonePe", "v2.0")
        assert record.version_id == "v2.0"
        assert record.min_os_version == "Android-10"
        assert record.content == b"payload"
        assert record.is_beta is True
        assert record.released_devices == []

    def test_reupload_overwrites_and_resets_released_devices(self):
        """Test that re-uploading a version replaces it with a fresh record."""
        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v1.0", "Android-9", b"old", False)
        registry.get_version("PhonePe", "v1.0").released_devices.append("device1")

        registry.upload_version("PhonePe", "v1.0", "Android-8", b"new", True)

        record = registry.get_version("PhonePe", "v1.0")
        assert record.content == b"new"
        assert record.min_os_version == "Android-8"
        assert record.is_beta is True
        assert record.released_devices == []

    def test_upload_new_version_keeps_others(self):
        """Test that uploading a new version never removes existing ones."""
        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v1.0", "Android-9", b"1", False)
        registry.upload_version("PhonePe", "v2.0", "Android-10", b"2", False)
        registry.upload_version("PhonePe", "v3.0", "Android-11", b"3", False)

        ids = {r.version_id for r in registry.list_versions("PhonePe")}
        assert ids == {"v1.0", "v2.0", "v3.0"}

    def test_apps_are_independent(self):
        """Test that versions of one app don't leak into another."""
        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v1.0", "Android-9", b"", False)
        registry.upload_version("Wallet", "w1", "Android-9", b"", False)

        assert [r.version_id for r in registry.list_versions("Wallet")] == ["w1"]

    @pytest.mark.parametrize("app_name, version_id", [("", "v1.0"), ("PhonePe", "")])
    def test_upload_rejects_empty_identifiers(self, app_name, version_id):
        """Test that empty app names and version IDs are programmer errors."""
        registry = VersionRegistry()
        with pytest.raises(ValueError, match="non-empty"):
            registry.upload_version(app_name, version_id, "Android-9", b"", False)
        assert registry.app_names() == []


class TestLookups:
    """Tests for get_app, get_version and list_versions."""

    def test_get_version_unknown_app_raises(self):
        """Test that looking up an unknown app raises AppNotFoundError."""
        registry = VersionRegistry()

        with pytest.raises(AppNotFoundError) as exc_info:
            registry.get_version("Nope", "v1.0")
        assert exc_info.value.app_name == "Nope"

    def test_get_version_unknown_version_raises(self):
        """Test that looking up an unknown version raises VersionNotFoundError."""
        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v1.0", "Android-9", b"", False)

        with pytest.raises(VersionNotFoundError, match="v9.9") as exc_info:
            registry.get_version("PhonePe", "v9.9")
        assert exc_info.value.version_id == "v9.9"

    def test_not_found_errors_share_base(self):
        """Test that both lookup failures can be caught as NotFoundError."""
        registry = VersionRegistry()
        with pytest.raises(NotFoundError):
            registry.get_app("Nope")

    def test_list_versions_is_lazy(self):
        """Test that list_versions returns a generator."""
        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v1.0", "Android-9", b"", False)

        listing = registry.list_versions("PhonePe")
        assert isinstance(listing, types.GeneratorType)
        assert [r.version_id for r in listing] == ["v1.0"]

    def test_list_versions_unknown_app_is_empty(self):
        """Test that listing an unknown app yields nothing."""
        assert list(VersionRegistry().list_versions("Nope")) == []


class TestVersionRecord:
    """Tests for the VersionRecord dataclass."""

    def test_record_fields_are_frozen(self):
        """Test that identifying fields cannot be reassigned."""
        record = VersionRecord("v1.0", "Android-9", b"")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.version_id = "v2.0"  # type: ignore[misc]

    def test_record_is_hashable(self):
        """Test that records can be used in sets and as dict keys."""
        record = VersionRecord("v1.0", "Android-9", b"x", released_devices=["d1"])
        same = VersionRecord("v1.0", "Android-9", b"x", released_devices=["d1"])

        assert hash(record) == hash(same)
        assert len({record, same}) == 1
        assert {record: "seen"}[same] == "seen"

    def test_hash_ignores_released_devices(self):
        """Test that rolling a version out doesn't change its hash."""
        record = VersionRecord("v1.0", "Android-9", b"x")
        before = hash(record)

        record.released_devices.append("d1")

        assert hash(record) == before

    def test_snapshot_detaches_released_devices(self):
        """Test that a snapshot doesn't share the released_devices list."""
        record = VersionRecord("v1.0", "Android-9", b"", released_devices=["d1"])
        snap = record.snapshot()

        snap.released_devices.append("d2")

        assert record.released_devices == ["d1"]
        assert snap == VersionRecord("v1.0", "Android-9", b"", released_devices=["d1", "d2"])
