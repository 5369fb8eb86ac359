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

"""Exception hierarchy for AVMS.

This module defines a custom exception hierarchy that allows library users
to distinguish between the ways a version-management call can fail:

- AppNotFoundError: The named application has never been uploaded
- VersionNotFoundError: The application exists but the version does not
- UnknownStrategyError: A rollout named a strategy nobody registered
- ConfigError: Plan files, YAML defaults, or settings are invalid

AppNotFoundError and VersionNotFoundError share the NotFoundError base so
callers that only care about "missing data" can catch one class. All
exceptions inherit from AVMSError.

None of these errors leave partial state behind: every lookup that can fail
happens before the first write.

Example:
    Catching specific error types:
        ```python
        from appvms.exceptions import AppNotFoundError, UnknownStrategyError

        try:
            manager.release_version("PhonePe", "v2.0", "canary", 10, devices)
        except AppNotFoundError as e:
            print(f"No such app: {e.app_name}")
        except UnknownStrategyError as e:
            print(f"Bad strategy: {e}")
        ```

    Catching all AVMS errors:
        ```python
        from appvms.exceptions import AVMSError

        try:
            patch = manager.create_update_patch("PhonePe", "v1.0", "v2.0")
        except AVMSError as e:
            print(f"AVMS error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "AVMSError",
    "NotFoundError",
    "AppNotFoundError",
    "VersionNotFoundError",
    "UnknownStrategyError",
    "ConfigError",
]


class AVMSError(Exception):
    """Base exception for all AVMS errors."""

    pass


class NotFoundError(AVMSError):
    """Raised when an application or version lookup fails."""

    pass


class AppNotFoundError(NotFoundError):
    """Raised when an application has no uploaded versions.

    Attributes:
        app_name: The application that was looked up.
    """

    def __init__(self, app_name: str) -> None:
        super().__init__(f"App does not exist: {app_name!r}")
        self.app_name = app_name


class VersionNotFoundError(NotFoundError):
    """Raised when an application exists but lacks the requested version.

    Attributes:
        app_name: The application that was looked up.
        version_id: The missing version identifier.
    """

    def __init__(self, app_name: str, version_id: str) -> None:
        super().__init__(
            f"Version {version_id!r} does not exist for app {app_name!r}"
        )
        self.app_name = app_name
        self.version_id = version_id


class UnknownStrategyError(AVMSError):
    """Raised when a rollout names an unregistered strategy.

    Attributes:
        strategy: The strategy name that was requested.
    """

    def __init__(self, strategy: str, available: list[str] | None = None) -> None:
        names = ", ".join(available or []) or "(none)"
        super().__init__(
            f"Unknown rollout strategy: {strategy!r}. Available: {names}"
        )
        self.strategy = strategy


class ConfigError(AVMSError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, empty files, invalid structure)
    - Plan files missing required fields
    - Settings values outside their allowed set (e.g., an unknown comparator)
    - Environment overrides that cannot be parsed

    Example:
        Catching configuration errors:
            ```python
            from appvms.exceptions import ConfigError

            try:
                policy = load_update_policy(load_effective_config(Path("plan.yaml")))
            except ConfigError as e:
                print(f"Config error: {e}")
            ```
    """

    pass
