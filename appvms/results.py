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

"""Public API return types for AVMS.

This module defines dataclasses for return values from public API functions:
update/install checks, rollouts, plan validation, and plan runs.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from appvms.manager import VersionManager

        manager = VersionManager()
        check = manager.check_for_install("PhonePe", "Android-10")
        if check.available:
            print(check.version_id)
        ```

Note:
    Only public API return types belong in this module. Domain types
    (like VersionRecord) stay co-located with the registry.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UpdateCheck:
    """Result of an update or install check.

    Attributes:
        app_name: Application that was checked.
        version_id: Version to install or update to (None if unavailable).
        available: True if a suitable version was found.
    """

    app_name: str
    version_id: str | None
    available: bool

    def __iter__(self):
        # Allows ``version_id, available = manager.check_for_install(...)``
        return iter((self.version_id, self.available))


@dataclass(frozen=True)
class ReleaseResult:
    """Result of a rollout.

    Attributes:
        app_name: Application that was released.
        version_id: Version that was released.
        strategy: Strategy name used (e.g., "beta", "percentage").
        requested: Number of devices named in the request.
        released: Devices that received the version, in assignment order.
    """

    app_name: str
    version_id: str
    strategy: str
    requested: int
    released: tuple[str, ...]


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a plan file.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        app_count: Number of apps in the plan.
        plan_path: String path to the validated plan file.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    app_count: int
    plan_path: str


@dataclass(frozen=True)
class StepOutcome:
    """Outcome of one plan step.

    Attributes:
        index: 1-based step number.
        action: Step action (e.g., "release", "check_update").
        status: "ok", "unavailable", or "error".
        detail: Human-readable summary of what happened.
    """

    index: int
    action: str
    status: str
    detail: str


@dataclass(frozen=True)
class PlanResult:
    """Result from running a plan file.

    Attributes:
        plan_path: String path to the plan that was run.
        uploaded: Number of versions uploaded before the steps ran.
        outcomes: One StepOutcome per step, in plan order.
        assignments: Final device-to-version assignment map.
    """

    plan_path: str
    uploaded: int
    outcomes: list[StepOutcome]
    assignments: dict[str, str]

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == "error")
