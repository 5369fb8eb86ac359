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

"""Configuration loading for AVMS.

This module loads YAML plan files with a layered approach:

  - Organization-wide defaults (defaults/org.yaml)
  - Plan-specific configuration (plans/<name>.yaml)

and resolves the UpdatePolicy a manager runs with, including APPVMS_*
environment overrides.

Public API:

- load_effective_config: Load and merge configuration for a plan
- load_update_policy: Build an UpdatePolicy from config and environment

Example:
    Basic usage:

        from pathlib import Path
        from appvms.config import load_effective_config, load_update_policy

        config = load_effective_config(Path("plans/phonepe.yaml"))
        policy = load_update_policy(config)

"""

from .loader import load_effective_config
from .settings import load_update_policy

__all__ = ["load_effective_config", "load_update_policy"]
