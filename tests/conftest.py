"""
Pytest configuration and shared fixtures for AVMS tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest
import yaml

from appvms import logging as logging_module
from appvms.logging import SilentLogger
from appvms.manager import VersionManager

# Hash-classified fixtures (first byte of SHA-256):
#   candidates:     device1 (24), device4 (79), device5 (12), device7 (22),
#                   device9 (67), device10 (2)
#   non-candidates: device2 (153), device3 (150), device6 (225), device8 (242),
#                   device11 (208), device12 (218)
EIGHT_DEVICES = [f"device{i}" for i in range(1, 9)]
CANDIDATES_OF_EIGHT = ["device1", "device4", "device5", "device7"]


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def device_ids() -> list[str]:
    """Provide the eight-device fleet used by the rollout scenarios."""
    return list(EIGHT_DEVICES)


@pytest.fixture
def manager() -> VersionManager:
    """
    Provide a VersionManager with PhonePe v1.0 (Android-9) and
    v2.0 (Android-10) uploaded.
    """
    mgr = VersionManager()
    mgr.upload_new_version("PhonePe", "v1.0", "Android-9", b"v1.0 content", False)
    mgr.upload_new_version("PhonePe", "v2.0", "Android-10", b"v2.0 content", False)
    return mgr


class RecordingInstaller:
    """Installer fake that remembers every call."""

    def __init__(self) -> None:
        self.installed: list[str] = []
        self.updates: list[bytes] = []

    def perform_install(self, version_id: str) -> None:
        self.installed.append(version_id)

    def perform_update(self, patch: bytes) -> None:
        self.updates.append(patch)


@pytest.fixture
def recording_installer() -> RecordingInstaller:
    """Provide an Installer fake that records installs and updates."""
    return RecordingInstaller()


@pytest.fixture
def sample_plan_data() -> dict[str, Any]:
    """
    Provide a complete plan structure for testing.

    Mirrors the PhonePe walkthrough: two versions, an update check, a 50%
    rollout over eight devices, and a beta rollout to two devices.
    """
    return {
        "apiVersion": "appvms/v1",
        "devices": list(EIGHT_DEVICES),
        "apps": [
            {
                "name": "PhonePe",
                "versions": [
                    {"id": "v1.0", "min_os": "Android-9", "content": "v1.0 content"},
                    {"id": "v2.0", "min_os": "Android-10", "content": "v2.0 content"},
                ],
            }
        ],
        "steps": [
            {"action": "check_update", "app": "PhonePe", "current": "v1.0", "os": "Android-10"},
            {"action": "release", "app": "PhonePe", "version": "v2.0", "strategy": "percentage", "percentage": 50},
            {"action": "release", "app": "PhonePe", "version": "v2.0", "strategy": "beta", "devices": ["device2", "device3"]},
        ],
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("plan.yaml", {"key": "value"})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Keep every test independent of the caller's shell and of earlier tests.

    Clears APPVMS_* overrides (including any a loaded .env file wrote) and
    restores the silent global logger that the CLI replaces.
    """
    env_names = ("APPVMS_COMPARATOR", "APPVMS_REQUIRE_CURRENT_VERSION")
    for name in env_names:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(logging_module, "_global_logger", SilentLogger())
    yield
    for name in env_names:
        os.environ.pop(name, None)
