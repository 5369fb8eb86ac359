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

"""Rollout engine for AVMS.

Releases an uploaded version to devices under a named strategy and records
the result in two places:

- the process-wide assignment map (device ID -> version ID, last write wins)
- the version record's released_devices list (append-only)

Release lifecycle per (app, version):

    uploaded --release--> partially_released --release--> partially_released

Releases are cumulative. There is no distinct "fully released" state and no
rollback.

Failure Behavior:

All lookups happen before the first write. A release for an unknown app,
an unknown version, or an unregistered strategy raises without touching the
assignment map or any record.

Example:
    ```python
    from appvms.registry import VersionRegistry
    from appvms.rollout import RolloutEngine

    registry = VersionRegistry()
    registry.upload_version("PhonePe", "v2.0", "Android-10", b"v2.0", False)
    assignments: dict[str, str] = {}

    result = RolloutEngine().release(
        registry, assignments, "PhonePe", "v2.0", "beta", 0, ["d1", "d2"]
    )
    assert assignments == {"d1": "v2.0", "d2": "v2.0"}
    ```

"""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence
from typing import Literal

from appvms.logging import Logger, get_global_logger, progress_bar
from appvms.registry import VersionRecord, VersionRegistry
from appvms.results import ReleaseResult

from .base import get_strategy

ReleaseState = Literal["uploaded", "partially_released"]


def release_state(record: VersionRecord) -> ReleaseState:
    """Report where a version is in its release lifecycle."""
    return "partially_released" if record.released_devices else "uploaded"


class RolloutEngine:
    """Applies rollout strategies to the registry and assignment map.

    The engine holds no state of its own. Callers pass the registry and the
    assignment map explicitly and are responsible for serializing access.
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    def release(
        self,
        registry: VersionRegistry,
        assignments: MutableMapping[str, str],
        app_name: str,
        version_id: str,
        strategy: str,
        percentage: int,
        device_ids: Sequence[str],
    ) -> ReleaseResult:
        """Release a version to the devices chosen by a strategy.

        Args:
            registry: Registry holding the version.
            assignments: Device-to-version map updated in place.
            app_name: Application to release.
            version_id: Version to release.
            strategy: Registered strategy name ("beta", "percentage", ...).
            percentage: Requested share of device_ids (ignored by "beta").
            device_ids: Devices eligible for the rollout.

        Returns:
            ReleaseResult listing the devices that received the version.

        Raises:
            AppNotFoundError: If the app was never uploaded.
            VersionNotFoundError: If the app lacks version_id.
            UnknownStrategyError: If strategy is not registered.
        """
        record = registry.get_version(app_name, version_id)
        selector = get_strategy(strategy)

        devices = list(device_ids)
        selected = selector.select(devices, percentage)

        total = len(selected)
        for i, device_id in enumerate(selected, start=1):
            assignments[device_id] = version_id
            record.released_devices.append(device_id)

            progress = i / total * 100
            self.logger.debug(
                "ROLLOUT",
                f"Rolling out {version_id} ({strategy}): "
                f"[{progress_bar(progress)}] {progress:.2f}% -> Device: {device_id}",
            )

        if strategy == "percentage":
            summary = (
                f"Percentage rollout: version {version_id} of app {app_name} "
                f"released to {total} of {len(devices)} devices "
                f"(requested {percentage}%)"
            )
        else:
            summary = (
                f"{strategy.capitalize()} rollout: version {version_id} of app "
                f"{app_name} released to {total} devices"
            )
        self.logger.verbose("ROLLOUT", summary)

        return ReleaseResult(
            app_name=app_name,
            version_id=version_id,
            strategy=strategy,
            requested=len(devices),
            released=tuple(selected),
        )
