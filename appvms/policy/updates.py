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

"""Update decision policy for AVMS.

Determines whether an uploaded version may be offered to a device, either as
an update over the version it runs or as a fresh install.

Example:
    Check if v2.0 is an update for a device on v1.0:

        from appvms.policy.updates import UpdatePolicy, should_offer_update

        offer = should_offer_update(
            candidate=registry.get_version("PhonePe", "v2.0"),
            current_version_id="v1.0",
            device_os="Android-10",
            policy=UpdatePolicy(comparator="lexicographic"),
        )

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from appvms.versioning.keys import Comparator, is_at_least, is_newer

if TYPE_CHECKING:
    from appvms.registry import VersionRecord


@dataclass(frozen=True)
class UpdatePolicy:
    """Knobs controlling install and update decisions.

    Attributes:
        comparator: How version IDs and OS strings are ordered. The
            "lexicographic" default compares raw strings.
        require_current_version: When True, an update check for a version
            the registry has never seen reports "no update" instead of
            searching for newer versions.
    """

    comparator: Comparator = "lexicographic"
    require_current_version: bool = True


def is_installable(
    *, candidate: VersionRecord, device_os: str, policy: UpdatePolicy
) -> bool:
    """True iff the device OS is at or above the candidate's minimum OS."""
    return is_at_least(
        device_os, candidate.min_os_version, comparator=policy.comparator
    )


def should_offer_update(
    *,
    candidate: VersionRecord,
    current_version_id: str,
    device_os: str,
    policy: UpdatePolicy,
) -> bool:
    """Decide whether a candidate version is an update for a device.

    Args:
        candidate: The uploaded version being considered.
        current_version_id: Version the device runs today.
        device_os: The device's OS version string.
        policy: UpdatePolicy controlling the comparison.

    Returns:
        True if the candidate sorts strictly after the current version and
        the device OS satisfies the candidate's minimum OS.

    Note:
        "Newer" is decided purely by version ID ordering, so an update is
        only offered if the candidate ID sorts after the current one.
    """
    if not is_newer(
        candidate.version_id, current_version_id, comparator=policy.comparator
    ):
        return False
    return is_installable(candidate=candidate, device_os=device_os, policy=policy)
