# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""In-memory version registry implementation for AVMS.

The registry is the leaf data store: it maps application names to their
uploaded versions and nothing else. It holds no lock of its own; callers
that share a registry between threads (the VersionManager) serialize access
around it.

Key Features:

- Applications are created lazily on first upload and never deleted
- Uploading an existing version ID overwrites the record (released devices
  are reset because the new record starts empty)
- Lookups raise typed errors (AppNotFoundError, VersionNotFoundError)
- list_versions() is a generator; unknown apps simply yield nothing

Example:
    Basic usage:
        ```python
        from appvms.registry import VersionRegistry

        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v1.0", "Android-9", b"...", False)
        record = registry.get_version("PhonePe", "v1.0")
        print(record.min_os_version)  # "Android-9"
        ```

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from appvms.exceptions import AppNotFoundError, VersionNotFoundError
from appvms.logging import Logger, get_global_logger


@dataclass(frozen=True)
class VersionRecord:
    """A single uploaded version of an application.

    Attributes:
        version_id: Opaque version identifier (e.g., "v2.0").
        min_os_version: Lowest device OS string this version supports.
        content: Installable artifact bytes.
        is_beta: Informational beta flag.
        released_devices: Device IDs this version was rolled out to, in
            rollout order. Append-only; a device released twice appears twice.

    Note:
        The dataclass is frozen so the identifying fields cannot be
        reassigned. Only the rollout engine appends to released_devices,
        which is left out of the hash so records can key dicts and sets.
    """

    version_id: str
    min_os_version: str
    content: bytes
    is_beta: bool = False
    released_devices: list[str] = field(default_factory=list, hash=False)

    def snapshot(self) -> VersionRecord:
        """Return a copy whose released_devices list is detached."""
        return replace(self, released_devices=list(self.released_devices))


@dataclass
class Application:
    """An application and its versions keyed by version ID."""

    name: str
    versions: dict[str, VersionRecord] = field(default_factory=dict)


class VersionRegistry:
    """Stores applications and their version records.

    Attributes:
        apps: Mapping of application name to Application.

    Example:
        ```python
        registry = VersionRegistry()
        registry.upload_version("PhonePe", "v2.0", "Android-10", b"new", False)
        for record in registry.list_versions("PhonePe"):
            print(record.version_id)
        ```
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self.apps: dict[str, Application] = {}
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    def upload_version(
        self,
        app_name: str,
        version_id: str,
        min_os_version: str,
        content: bytes,
        is_beta: bool = False,
    ) -> VersionRecord:
        """Insert or overwrite a version record.

        Args:
            app_name: Application name; the app is created if absent.
            version_id: Version identifier, unique within the app.
            min_os_version: Minimum device OS string.
            content: Artifact bytes.
            is_beta: Informational beta flag.

        Returns:
            The stored record.

        Raises:
            ValueError: If app_name or version_id is empty.

        Note:
            Re-uploading an existing version_id replaces content and flags
            and starts with an empty released_devices list. Other versions
            of the app are never touched.
        """
        if not app_name:
            raise ValueError("app_name must be a non-empty string")
        if not version_id:
            raise ValueError("version_id must be a non-empty string")

        app = self.apps.get(app_name)
        if app is None:
            app = Application(name=app_name)
            self.apps[app_name] = app
            self.logger.debug("REGISTRY", f"Created app {app_name}")

        replaced = version_id in app.versions
        record = VersionRecord(
            version_id=version_id,
            min_os_version=min_os_version,
            content=bytes(content),
            is_beta=is_beta,
        )
        app.versions[version_id] = record

        action = "Replaced" if replaced else "Uploaded"
        self.logger.verbose(
            "REGISTRY",
            f"{action} version {version_id} for app {app_name} "
            f"(Min OS Version: {min_os_version})",
        )
        return record

    def has_app(self, app_name: str) -> bool:
        return app_name in self.apps

    def app_names(self) -> list[str]:
        return list(self.apps)

    def get_app(self, app_name: str) -> Application:
        """Look up an application.

        Raises:
            AppNotFoundError: If the app was never uploaded.
        """
        app = self.apps.get(app_name)
        if app is None:
            raise AppNotFoundError(app_name)
        return app

    def get_version(self, app_name: str, version_id: str) -> VersionRecord:
        """Look up one version of an application.

        Raises:
            AppNotFoundError: If the app was never uploaded.
            VersionNotFoundError: If the app lacks version_id.
        """
        app = self.get_app(app_name)
        record = app.versions.get(version_id)
        if record is None:
            raise VersionNotFoundError(app_name, version_id)
        return record

    def list_versions(self, app_name: str) -> Iterator[VersionRecord]:
        """Yield every version of an application, in no particular order.

        Unknown applications yield nothing.
        """
        app = self.apps.get(app_name)
        if app is None:
            return
        # Copy the values so uploads during iteration don't break the loop
        yield from list(app.versions.values())
