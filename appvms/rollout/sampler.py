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

"""Deterministic device sampling for percentage rollouts.

Each device is classified as a rollout *candidate* from nothing but its
identifier: the first byte of SHA-256(device_id) must be below
CANDIDATE_THRESHOLD. The same device therefore lands in the same cohort in
every process, on every run, without any stored state.

A percentage rollout then walks the device list in input order and takes
candidates until the target count is reached.

Known limitation:
    The candidate split is fixed at roughly 50% of the hash space and does
    not depend on the requested percentage. Asking for more than ~50% of a
    device list can return fewer devices than the target count.

Example:
    ```python
    from appvms.rollout.sampler import select_for_percentage

    devices = [f"device{i}" for i in range(1, 9)]
    chosen = select_for_percentage(devices, 50)
    assert len(chosen) <= 4
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
import hashlib

CANDIDATE_THRESHOLD = 128


def candidate_score(device_id: str) -> int:
    """Return the first byte (0-255) of the device ID's SHA-256 digest."""
    return hashlib.sha256(device_id.encode("utf-8")).digest()[0]


def is_candidate(device_id: str) -> bool:
    """True iff the device falls in the lower half of the hash space."""
    return candidate_score(device_id) < CANDIDATE_THRESHOLD


def target_count(device_count: int, percentage: int) -> int:
    """Number of devices a percentage rollout aims for.

    Integer truncation of device_count * percentage / 100; never negative.
    """
    return max(0, int(device_count * percentage // 100))


def select_for_percentage(device_ids: Sequence[str], percentage: int) -> list[str]:
    """Select up to target_count candidate devices, preserving input order.

    Args:
        device_ids: Devices eligible for the rollout.
        percentage: Requested share of device_ids (0-100).

    Returns:
        The selected device IDs. Never longer than
        target_count(len(device_ids), percentage), and shorter when there
        are not enough candidates.
    """
    limit = target_count(len(device_ids), percentage)
    selected: list[str] = []
    for device_id in device_ids:
        if len(selected) >= limit:
            break
        if is_candidate(device_id):
            selected.append(device_id)
    return selected
