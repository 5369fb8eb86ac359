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

"""Plan validation module.

This module checks plan syntax and structure without uploading anything or
running any step. It gives quick feedback while writing plans and in CI.

Validation Checks:

- YAML syntax is valid and the top level is a mapping
- apiVersion is present (warning if not appvms/v1)
- apps is a non-empty list; each app has a name and a list of versions,
  and each version has an id and a min_os
- steps (if present) is a list; each step has a known action and the
  fields that action needs
- release steps name a registered rollout strategy, percentage rollouts
  carry an integer percentage, and a device list is available

Example:
    Validate a plan and handle results:
        ```python
        from pathlib import Path
        from appvms.validation import validate_plan

        result = validate_plan(Path("plans/phonepe.yaml"))
        if result.status == "valid":
            print(f"Plan is valid with {result.app_count} app(s)")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from appvms.config.loader import resolve_load_context
from appvms.exceptions import UnknownStrategyError
from appvms.results import ValidationResult
from appvms.rollout import get_strategy

__all__ = ["STEP_FIELDS", "SUPPORTED_API_VERSION", "validate_plan"]

SUPPORTED_API_VERSION = "appvms/v1"

# Required fields per step action
STEP_FIELDS: dict[str, tuple[str, ...]] = {
    "check_update": ("app", "current", "os"),
    "check_install": ("app", "os"),
    "install": ("app", "os"),
    "update": ("app", "current", "os"),
    "patch": ("app", "from", "to"),
    "release": ("app", "version", "strategy"),
}


def _invalid(errors: list[str], warnings: list[str], plan_path: Path) -> ValidationResult:
    return ValidationResult(
        status="invalid",
        errors=errors,
        warnings=warnings,
        app_count=0,
        plan_path=str(plan_path),
    )


def _validate_apps(apps: list[Any], errors: list[str]) -> None:
    for idx, app in enumerate(apps):
        app_prefix = f"apps[{idx}]"
        if not isinstance(app, dict):
            errors.append(f"{app_prefix}: App must be a dictionary")
            continue

        name = app.get("name")
        if not isinstance(name, str) or not name:
            errors.append(f"{app_prefix}: Field 'name' must be a non-empty string")

        versions = app.get("versions")
        if not isinstance(versions, list) or not versions:
            errors.append(f"{app_prefix}: Field 'versions' must be a non-empty list")
            continue

        for v_idx, version in enumerate(versions):
            v_prefix = f"{app_prefix}.versions[{v_idx}]"
            if not isinstance(version, dict):
                errors.append(f"{v_prefix}: Version must be a dictionary")
                continue
            for field in ("id", "min_os"):
                if not isinstance(version.get(field), str) or not version[field]:
                    errors.append(
                        f"{v_prefix}: Field '{field}' must be a non-empty string"
                    )
            if "beta" in version and not isinstance(version["beta"], bool):
                errors.append(f"{v_prefix}: Field 'beta' must be a boolean")


def _validate_release(
    step: dict[str, Any], prefix: str, has_default_devices: bool, errors: list[str]
) -> None:
    strategy_name = step.get("strategy")
    if not isinstance(strategy_name, str):
        errors.append(f"{prefix}.strategy: Must be a string")
        return
    try:
        get_strategy(strategy_name)
    except UnknownStrategyError as err:
        errors.append(f"{prefix}.strategy: {err}")
        return

    percentage = step.get("percentage")
    is_int = isinstance(percentage, int) and not isinstance(percentage, bool)
    if strategy_name == "percentage" and not is_int:
        errors.append(f"{prefix}: percentage rollout requires integer 'percentage'")
    elif "percentage" in step and not is_int:
        errors.append(f"{prefix}: 'percentage' must be an integer")
    elif is_int and not 0 <= percentage <= 100:
        errors.append(f"{prefix}: 'percentage' must be between 0 and 100")

    devices = step.get("devices")
    if devices is None:
        if not has_default_devices:
            errors.append(f"{prefix}: No 'devices' on step and no top-level 'devices'")
    elif not isinstance(devices, list):
        errors.append(f"{prefix}.devices: Must be a list")


def _validate_steps(
    steps: list[Any], has_default_devices: bool, errors: list[str]
) -> None:
    for idx, step in enumerate(steps):
        prefix = f"steps[{idx}]"
        if not isinstance(step, dict):
            errors.append(f"{prefix}: Step must be a dictionary")
            continue

        action = step.get("action")
        if action not in STEP_FIELDS:
            known = ", ".join(STEP_FIELDS)
            errors.append(f"{prefix}: Unknown action {action!r} (expected: {known})")
            continue

        missing = [f for f in STEP_FIELDS[action] if f not in step]
        for field in missing:
            errors.append(f"{prefix}: Missing required field: {field}")
        if missing:
            continue

        if action == "release":
            _validate_release(step, prefix, has_default_devices, errors)


def _org_default_devices(plan_path: Path, errors: list[str]) -> bool:
    """True if defaults/org.yaml above the plan supplies a devices list."""
    org_path = resolve_load_context(plan_path).org_defaults_path
    if org_path is None:
        return False
    try:
        with open(org_path, encoding="utf-8") as f:
            org = yaml.safe_load(f)
    except yaml.YAMLError as err:
        errors.append(f"Invalid YAML syntax in org defaults {org_path}: {err}")
        return False
    if not isinstance(org, dict):
        return False
    devices = org.get("devices")
    if devices is not None and not isinstance(devices, list):
        errors.append(f"{org_path}: Field 'devices' must be a list")
    return isinstance(devices, list)


def validate_plan(plan_path: Path, verbose: bool = False) -> ValidationResult:
    """Validate a plan file without running it.

    Args:
        plan_path: Path to the plan YAML file to validate.
        verbose: If True, print validation progress.

    Returns:
        ValidationResult with status "valid" or "invalid", the collected
        errors and warnings, and the number of apps in the plan.

    Note:
        Only the plan file itself is checked in full. Organization defaults
        (defaults/org.yaml above the plan) are consulted for one thing: a
        default ``devices`` list when the plan declares none.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if verbose:
        print(f"Validating plan: {plan_path}")

    if not plan_path.exists():
        errors.append(f"Plan file not found: {plan_path}")
        return _invalid(errors, warnings, plan_path)

    try:
        with open(plan_path, encoding="utf-8") as f:
            plan = yaml.safe_load(f)
    except yaml.YAMLError as err:
        errors.append(f"Invalid YAML syntax: {err}")
        return _invalid(errors, warnings, plan_path)

    if verbose:
        print("  [OK] YAML syntax is valid")

    if not isinstance(plan, dict):
        errors.append("Plan must be a YAML dictionary/mapping")
        return _invalid(errors, warnings, plan_path)

    if "apiVersion" not in plan:
        errors.append("Missing required field: apiVersion")
    elif plan["apiVersion"] != SUPPORTED_API_VERSION:
        warnings.append(
            f"apiVersion '{plan['apiVersion']}' may not be supported "
            f"(expected: {SUPPORTED_API_VERSION})"
        )

    apps = plan.get("apps")
    if not isinstance(apps, list) or not apps:
        errors.append("Field 'apps' must be a non-empty list")
        return _invalid(errors, warnings, plan_path)

    app_count = len(apps)
    if verbose:
        print(f"  [OK] Found {app_count} app(s)")
    _validate_apps(apps, errors)

    devices = plan.get("devices")
    if devices is not None and not isinstance(devices, list):
        errors.append("Field 'devices' must be a list")
    has_default_devices = isinstance(devices, list)
    if devices is None:
        has_default_devices = _org_default_devices(plan_path, errors)

    steps = plan.get("steps", [])
    if not isinstance(steps, list):
        errors.append("Field 'steps' must be a list")
    else:
        if not steps:
            warnings.append("Plan has no steps; only uploads will run")
        _validate_steps(steps, has_default_devices, errors)

    status = "valid" if not errors else "invalid"
    if verbose:
        if status == "valid":
            print("  [OK] Plan is valid!")
        else:
            print(f"  [ERROR] Plan has {len(errors)} error(s)")

    return ValidationResult(
        status=status,
        errors=errors,
        warnings=warnings,
        app_count=app_count,
        plan_path=str(plan_path),
    )
