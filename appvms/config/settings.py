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

"""Manager settings resolution.

Builds the UpdatePolicy a VersionManager runs with from, in increasing
precedence:

1. Built-in defaults (lexicographic comparator, current version required)
2. The ``settings`` mapping of a merged plan config
3. Environment variables (a ``.env`` file in the working directory is
   loaded first, without overriding variables already set):

   - APPVMS_COMPARATOR: "lexicographic" or "semver"
   - APPVMS_REQUIRE_CURRENT_VERSION: true/false, yes/no, on/off, 1/0

Example:
    ```python
    from appvms.config import load_effective_config, load_update_policy

    policy = load_update_policy(load_effective_config(Path("plan.yaml")))
    ```
"""

from __future__ import annotations

import os
from typing import Any

from dotenv import find_dotenv, load_dotenv

from appvms.exceptions import ConfigError
from appvms.policy import UpdatePolicy
from appvms.versioning import COMPARATORS

ENV_PREFIX = "APPVMS_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _parse_comparator(value: Any, name: str) -> str:
    if value not in COMPARATORS:
        raise ConfigError(
            f"{name} must be one of {', '.join(COMPARATORS)}, got {value!r}"
        )
    return value


def load_update_policy(
    config: dict[str, Any] | None = None,
    *,
    use_env: bool = True,
) -> UpdatePolicy:
    """Resolve the UpdatePolicy for a manager.

    Args:
        config: Merged plan configuration (its ``settings`` key is read).
        use_env: If True, apply APPVMS_* environment overrides (and load
            ``.env``).

    Returns:
        The resolved UpdatePolicy.

    Raises:
        ConfigError: If ``settings`` is not a mapping or a value is invalid.
    """
    settings = (config or {}).get("settings") or {}
    if not isinstance(settings, dict):
        raise ConfigError("settings must be a mapping")

    comparator = _parse_comparator(
        settings.get("comparator", "lexicographic"), "settings.comparator"
    )
    require_current = _parse_bool(
        settings.get("require_current_version", True),
        "settings.require_current_version",
    )

    if use_env:
        load_dotenv(find_dotenv(usecwd=True))
        env_comparator = os.getenv(f"{ENV_PREFIX}COMPARATOR")
        if env_comparator:
            comparator = _parse_comparator(
                env_comparator.strip(), f"{ENV_PREFIX}COMPARATOR"
            )
        env_require = os.getenv(f"{ENV_PREFIX}REQUIRE_CURRENT_VERSION")
        if env_require:
            require_current = _parse_bool(
                env_require, f"{ENV_PREFIX}REQUIRE_CURRENT_VERSION"
            )

    return UpdatePolicy(
        comparator=comparator,  # type: ignore[arg-type]
        require_current_version=require_current,
    )
