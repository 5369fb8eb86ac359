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

"""Built-in rollout strategies.

Both strategies register themselves when this module is imported (the
rollout package imports it, so ``import appvms.rollout`` is enough).
"""

from __future__ import annotations

from collections.abc import Sequence

from .base import register_strategy
from .sampler import select_for_percentage


class BetaStrategy:
    """Release to every listed device. The percentage argument is ignored."""

    def select(self, device_ids: Sequence[str], percentage: int) -> list[str]:
        return list(device_ids)


class PercentageStrategy:
    """Release to a deterministic hash-selected share of the listed devices."""

    def select(self, device_ids: Sequence[str], percentage: int) -> list[str]:
        return select_for_percentage(device_ids, percentage)


register_strategy("percentage", PercentageStrategy)
register_strategy("beta", BetaStrategy)
