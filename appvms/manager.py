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

"""Version manager facade for AVMS.

VersionManager is the single thread-safe entry point for uploads, patch
creation, install/update checks, and rollouts. It owns a ManagerState
(registry plus device assignment map) and serializes every operation that
reads or writes it behind one lock:

    request -> acquire lock -> evaluator / engine / registry -> release -> result

The lock is held with a ``with`` block, so it is released on every exit path
including raised errors. Nothing inside the critical section blocks on I/O
apart from logging. Operations that fail (unknown app, unknown version,
unknown strategy) do all of their lookups before any write, so shared state
is left exactly as it was.

Update-check policy:

check_for_updates() reports "no update" when the app is unknown. With the
default UpdatePolicy it also reports "no update" when the device's current
version was never uploaded; set ``require_current_version=False`` to search
for newer versions regardless.

Example:
    Programmatic usage:
        ```python
        from appvms.manager import VersionManager

        manager = VersionManager()
        manager.upload_new_version("PhonePe", "v1.0", "Android-9", b"v1.0 content")
        manager.upload_new_version("PhonePe", "v2.0", "Android-10", b"v2.0 content")

        check = manager.check_for_updates("PhonePe", "v1.0", "Android-10")
        print(check.version_id)  # "v2.0"

        manager.release_version("PhonePe", "v2.0", "beta", 0, ["d1", "d2"])
        print(manager.get_assignment("d1"))  # "v2.0"
        ```

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import threading

from appvms.delivery import ConcatPatchGenerator, PatchGenerator
from appvms.logging import Logger, get_global_logger
from appvms.policy import UpdatePolicy
from appvms.registry import VersionRecord, VersionRegistry
from appvms.results import ReleaseResult, UpdateCheck
from appvms.rollout import RolloutEngine
from appvms.versioning.compatibility import CompatibilityEvaluator


@dataclass
class ManagerState:
    """Shared mutable state guarded by the VersionManager lock.

    Attributes:
        registry: Applications and their version records.
        assignments: Device ID -> version ID most recently rolled out to it.
    """

    registry: VersionRegistry = field(default_factory=VersionRegistry)
    assignments: dict[str, str] = field(default_factory=dict)


class VersionManager:
    """Thread-safe facade over the registry, evaluator, and rollout engine.

    Attributes:
        policy: UpdatePolicy used for install/update decisions.
        patch_generator: Collaborator that builds update patches.
    """

    def __init__(
        self,
        policy: UpdatePolicy | None = None,
        patch_generator: PatchGenerator | None = None,
        state: ManagerState | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            policy: Install/update policy. Defaults to lexicographic
                comparison with the current version required to exist.
            patch_generator: Diff generator used by create_update_patch().
                Defaults to ConcatPatchGenerator.
            state: Pre-built state to manage. A fresh empty state is created
                when omitted. The manager takes ownership; do not touch the
                state from outside the manager afterwards.
            logger: Logger for all components; the global logger otherwise.
        """
        self.policy = policy or UpdatePolicy()
        self.patch_generator = patch_generator or ConcatPatchGenerator()
        self._state = state or ManagerState(registry=VersionRegistry(logger))
        self._logger = logger
        self._lock = threading.Lock()

        self._evaluator = CompatibilityEvaluator(
            self._state.registry, self.policy, logger
        )
        self._engine = RolloutEngine(logger)

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    # -------------------------------
    # Mutating operations
    # -------------------------------

    def upload_new_version(
        self,
        app_name: str,
        version_id: str,
        min_os_version: str,
        content: bytes,
        is_beta: bool = False,
    ) -> VersionRecord:
        """Upload (or overwrite) a version. Returns a snapshot of the record.

        Raises:
            ValueError: If app_name or version_id is empty.
        """
        with self._lock:
            record = self._state.registry.upload_version(
                app_name, version_id, min_os_version, content, is_beta
            )
            return record.snapshot()

    def release_version(
        self,
        app_name: str,
        version_id: str,
        strategy: str,
        percentage: int,
        device_ids: Sequence[str],
    ) -> ReleaseResult:
        """Roll a version out to devices under a named strategy.

        Args:
            app_name: Application to release.
            version_id: Version to release.
            strategy: "beta", "percentage", or another registered strategy.
            percentage: Requested share of device_ids (ignored by "beta").
            device_ids: Devices eligible for the rollout.

        Returns:
            ReleaseResult listing the devices that received the version.

        Raises:
            AppNotFoundError: If the app was never uploaded.
            VersionNotFoundError: If the app lacks version_id.
            UnknownStrategyError: If strategy is not registered.
        """
        devices = list(device_ids)
        with self._lock:
            return self._engine.release(
                self._state.registry,
                self._state.assignments,
                app_name,
                version_id,
                strategy,
                percentage,
                devices,
            )

    # -------------------------------
    # Queries
    # -------------------------------

    def create_update_patch(
        self, app_name: str, from_version: str, to_version: str
    ) -> bytes:
        """Build the patch taking from_version to to_version.

        The patch generator's output is returned verbatim.

        Raises:
            AppNotFoundError: If the app was never uploaded.
            VersionNotFoundError: If either version is missing.
        """
        with self._lock:
            registry = self._state.registry
            old = registry.get_version(app_name, from_version)
            new = registry.get_version(app_name, to_version)
            patch = self.patch_generator.compute_patch(old.content, new.content)
        self.logger.verbose(
            "MANAGER",
            f"Created patch {from_version} -> {to_version} for app {app_name} "
            f"({len(patch)} bytes)",
        )
        return patch

    def check_for_updates(
        self, app_name: str, current_version_id: str, device_os: str
    ) -> UpdateCheck:
        """Find the newest version a device on current_version_id can update to.

        Never raises for missing data: an unknown app (or, under the default
        policy, an unknown current version) reports no update.
        """
        with self._lock:
            registry = self._state.registry
            latest: str | None = None
            if registry.has_app(app_name) and (
                not self.policy.require_current_version
                or current_version_id in registry.get_app(app_name).versions
            ):
                latest = self._evaluator.newer_compatible(
                    app_name, current_version_id, device_os
                )

        if latest is not None:
            self.logger.verbose(
                "MANAGER",
                f"Update available: version {latest} of app {app_name} "
                f"for devices with OS {device_os}",
            )
        else:
            self.logger.verbose(
                "MANAGER",
                f"No update available for app {app_name} on version "
                f"{current_version_id}",
            )
        return UpdateCheck(app_name=app_name, version_id=latest, available=latest is not None)

    def check_for_install(self, app_name: str, device_os: str) -> UpdateCheck:
        """Find the newest version a fresh device with device_os can install."""
        with self._lock:
            latest = self._evaluator.latest_compatible(app_name, device_os)
        self.logger.verbose(
            "MANAGER",
            f"Install check for app {app_name} on OS {device_os}: "
            f"{latest or 'nothing compatible'}",
        )
        return UpdateCheck(app_name=app_name, version_id=latest, available=latest is not None)

    def get_version(self, app_name: str, version_id: str) -> VersionRecord:
        """Return a snapshot of a version record.

        Raises:
            AppNotFoundError: If the app was never uploaded.
            VersionNotFoundError: If the app lacks version_id.
        """
        with self._lock:
            return self._state.registry.get_version(app_name, version_id).snapshot()

    def list_versions(self, app_name: str) -> list[VersionRecord]:
        """Return snapshots of every version of an app, in no particular order."""
        with self._lock:
            return [
                record.snapshot()
                for record in self._state.registry.list_versions(app_name)
            ]

    def get_assignment(self, device_id: str) -> str | None:
        """Return the version most recently rolled out to a device, if any."""
        with self._lock:
            return self._state.assignments.get(device_id)

    def assignments(self) -> dict[str, str]:
        """Return a copy of the full device-to-version assignment map."""
        with self._lock:
            return dict(self._state.assignments)
