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

"""Rollout strategy protocol and registry for AVMS.

This module defines the foundational components for rollout strategies:

- RolloutStrategy protocol: Interface that all strategies must implement
- Strategy registry: Global dict mapping strategy names to implementations
- Registration and lookup functions: register_strategy() and get_strategy()

A strategy only decides WHICH devices receive a version. Recording the
assignment and the released device list is the engine's job, so strategies
stay free of shared state.

Built-in strategies (see strategies.py):

- beta: Every listed device receives the version; percentage is ignored
- percentage: Deterministic hash-based subset of the listed devices

Example:
    Implementing a custom strategy:
        ```python
        from collections.abc import Sequence
        from appvms.rollout.base import register_strategy

        class FirstNStrategy:
            def select(self, device_ids: Sequence[str], percentage: int) -> list[str]:
                return list(device_ids[:percentage])

        register_strategy("first_n", FirstNStrategy)
        ```

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from appvms.exceptions import UnknownStrategyError

# -------------------------------
# Strategy Protocol
# -------------------------------


class RolloutStrategy(Protocol):
    """Protocol for rollout device-selection strategies."""

    def select(self, device_ids: Sequence[str], percentage: int) -> list[str]:
        """Choose the devices that receive the version.

        Args:
            device_ids: Devices named by the release request, in order.
            percentage: Requested share; strategies may ignore it.

        Returns:
            The devices to assign, in assignment order.

        Note:
            Must be deterministic and must not mutate device_ids.
        """
        ...


# -------------------------------
# Strategy Registry
# -------------------------------

_STRATEGY_REGISTRY: dict[str, type[RolloutStrategy]] = {}


def register_strategy(name: str, strategy_class: type[RolloutStrategy]) -> None:
    """Register a rollout strategy by name in the global registry.

    Registering the same name twice overwrites the previous registration.

    Args:
        name: Strategy name used in release requests (e.g., "beta").
        strategy_class: Class implementing RolloutStrategy.
    """
    _STRATEGY_REGISTRY[name] = strategy_class


def available_strategies() -> list[str]:
    """Return registered strategy names in registration order."""
    return list(_STRATEGY_REGISTRY)


def get_strategy(name: str) -> RolloutStrategy:
    """Get a new rollout strategy instance by name.

    Args:
        name: Strategy name. Case-sensitive.

    Returns:
        A new instance of the requested strategy.

    Raises:
        UnknownStrategyError: If the name is not registered. The message
            lists the available strategies.
    """
    if name not in _STRATEGY_REGISTRY:
        raise UnknownStrategyError(name, available_strategies())
    return _STRATEGY_REGISTRY[name]()
