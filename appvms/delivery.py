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

"""Delivery collaborators: patch generation and on-device execution.

AVMS decides WHAT a device should get; it does not build binary diffs or
run installers. Those jobs sit behind two small protocols so deployments
can plug in real implementations and tests can plug in fakes:

- PatchGenerator.compute_patch(old, new) -> bytes
- Installer.perform_install(version_id) / Installer.perform_update(patch)

The defaults shipped here are stand-ins. ConcatPatchGenerator returns the
old content followed by the new content, and LoggingInstaller only reports
what it would do.

Example:
    Substituting a fake in tests:
        ```python
        class RecordingInstaller:
            def __init__(self):
                self.installed = []

            def perform_install(self, version_id):
                self.installed.append(version_id)

            def perform_update(self, patch):
                pass
        ```
"""

from __future__ import annotations

from typing import Protocol

from appvms.logging import Logger, get_global_logger


class PatchGenerator(Protocol):
    """Protocol for diff generators."""

    def compute_patch(self, old_content: bytes, new_content: bytes) -> bytes:
        """Build an update patch taking old_content to new_content."""
        ...


class Installer(Protocol):
    """Protocol for on-device install/update execution."""

    def perform_install(self, version_id: str) -> None:
        """Install the given version on the device."""
        ...

    def perform_update(self, patch: bytes) -> None:
        """Apply an update patch on the device."""
        ...


class ConcatPatchGenerator:
    """Stand-in diff generator: the patch is old content + new content."""

    def compute_patch(self, old_content: bytes, new_content: bytes) -> bytes:
        return bytes(old_content) + bytes(new_content)


class LoggingInstaller:
    """Stand-in installer that only reports the requested action."""

    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    def perform_install(self, version_id: str) -> None:
        self.logger.verbose("DELIVERY", f"Installing app version: {version_id}")

    def perform_update(self, patch: bytes) -> None:
        self.logger.verbose(
            "DELIVERY", f"Updating app with diff pack ({len(patch)} bytes)"
        )
