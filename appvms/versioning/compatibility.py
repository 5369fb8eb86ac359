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

"""Compatibility evaluation for AVMS.

Answers two questions over the registry without mutating it:

- Which is the latest version a fresh device can install?
- Is there a version newer than the one a device runs that its OS supports?

Both scan every version of the app and keep the greatest version ID among
those that qualify. Version IDs are unique per app so no tie-break is needed.

Example:
    ```python
    from appvms.registry import VersionRegistry
    from appvms.versioning.compatibility import CompatibilityEvaluator

    registry = VersionRegistry()
    registry.upload_version("PhonePe", "v1.0", "Android-9", b"", False)
    registry.upload_version("PhonePe", "v2.0", "Android-10", b"", False)

    evaluator = CompatibilityEvaluator(registry)
    evaluator.newer_compatible("PhonePe", "v1.0", "Android-10")  # "v2.0"
    ```

Note:
    With the default lexicographic comparator "Android-9" sorts AFTER
    "Android-10". Supply zero-padded OS strings or opt into the "semver"
    comparator through UpdatePolicy when that matters.
"""

from __future__ import annotations

from collections.abc import Callable

from appvms.logging import Logger, get_global_logger
from appvms.policy.updates import UpdatePolicy, is_installable, should_offer_update
from appvms.registry import VersionRecord, VersionRegistry
from appvms.versioning.keys import is_newer


class CompatibilityEvaluator:
    """Pure queries over registry data for install and update decisions."""

    def __init__(
        self,
        registry: VersionRegistry,
        policy: UpdatePolicy | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.registry = registry
        self.policy = policy or UpdatePolicy()
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    def is_compatible(self, version: VersionRecord, device_os: str) -> bool:
        """True iff version.min_os_version <= device_os under the comparator."""
        return is_installable(candidate=version, device_os=device_os, policy=self.policy)

    def latest_compatible(self, app_name: str, device_os: str) -> str | None:
        """Return the greatest compatible version ID, or None.

        Unknown apps and apps with no compatible version both return None.
        """
        return self._pick_greatest(
            app_name,
            lambda record: self.is_compatible(record, device_os),
        )

    def newer_compatible(
        self, app_name: str, current_version_id: str, device_os: str
    ) -> str | None:
        """Return the greatest compatible version ID newer than the current one.

        Args:
            app_name: Application to search.
            current_version_id: Version the device runs. It does not need to
                exist in the registry; the caller decides whether that matters.
            device_os: The device's OS version string.

        Returns:
            The version ID to update to, or None if nothing qualifies.
        """
        return self._pick_greatest(
            app_name,
            lambda record: should_offer_update(
                candidate=record,
                current_version_id=current_version_id,
                device_os=device_os,
                policy=self.policy,
            ),
        )

    def _pick_greatest(
        self, app_name: str, accept: Callable[[VersionRecord], bool]
    ) -> str | None:
        latest: str | None = None
        for record in self.registry.list_versions(app_name):
            if not accept(record):
                continue
            if latest is None or is_newer(
                record.version_id, latest, comparator=self.policy.comparator
            ):
                latest = record.version_id
        self.logger.debug(
            "COMPAT", f"Best match for app {app_name}: {latest or '(none)'}"
        )
        return latest
