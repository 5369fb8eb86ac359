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

"""Rollout strategies, deterministic sampling, and the rollout engine.

Importing this package registers the built-in "beta" and "percentage"
strategies.

Public API:

- RolloutEngine: Applies a strategy and records assignments
- release_state: Report a version's lifecycle state
- register_strategy / get_strategy / available_strategies: Strategy registry
- select_for_percentage / is_candidate: Deterministic device sampling

Example:
    Basic usage:

        from appvms.rollout import RolloutEngine, select_for_percentage

        chosen = select_for_percentage(["d1", "d2", "d3", "d4"], 50)

"""

from . import strategies  # noqa: F401  (registers built-in strategies)
from .base import RolloutStrategy, available_strategies, get_strategy, register_strategy
from .engine import ReleaseState, RolloutEngine, release_state
from .sampler import (
    CANDIDATE_THRESHOLD,
    candidate_score,
    is_candidate,
    select_for_percentage,
    target_count,
)

__all__ = [
    "CANDIDATE_THRESHOLD",
    "ReleaseState",
    "RolloutEngine",
    "RolloutStrategy",
    "available_strategies",
    "candidate_score",
    "get_strategy",
    "is_candidate",
    "register_strategy",
    "release_state",
    "select_for_percentage",
    "target_count",
]
