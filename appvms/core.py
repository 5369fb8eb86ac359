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

"""Plan orchestration for AVMS.

This module runs a plan file end to end against a fresh VersionManager:

1. Load effective configuration (org defaults + plan merged)
2. Resolve the UpdatePolicy (settings + APPVMS_* environment overrides)
3. Upload every app version listed in the plan
4. Execute the steps in order, recording one StepOutcome per step

Step Actions:

- check_update: Ask whether a device on ``current`` with ``os`` can update
- check_install: Ask which version a fresh device with ``os`` would get
- install: check_install, then hand the version to the Installer
- update: check_update, build the patch, then hand it to the Installer
- patch: Build the patch between ``from`` and ``to``
- release: Roll ``version`` out with ``strategy`` (and ``percentage``)
  to the step's ``devices`` or the plan's top-level ``devices``

Failure Handling:

Errors raised by the manager (unknown app, unknown version, unknown
strategy) become ``status="error"`` outcomes and the run continues, the same
way a caller would handle each request independently. Structural problems
in the plan itself raise ConfigError before or during the run.

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from appvms.core import run_plan

        result = run_plan(Path("plans/phonepe.yaml"))
        for outcome in result.outcomes:
            print(outcome.index, outcome.action, outcome.status, outcome.detail)
        print(result.assignments)
        ```

"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from appvms.config import load_effective_config, load_update_policy
from appvms.delivery import Installer, LoggingInstaller, PatchGenerator
from appvms.exceptions import AVMSError, ConfigError
from appvms.logging import Logger, get_global_logger
from appvms.manager import VersionManager
from appvms.results import PlanResult, StepOutcome

StepHandler = Callable[
    [VersionManager, Installer, dict[str, Any], list[str]], tuple[str, str]
]


def _field(step: dict[str, Any], name: str) -> Any:
    try:
        return step[name]
    except KeyError as err:
        raise ConfigError(
            f"Step {step.get('action')!r} is missing required field: {name}"
        ) from err


def _upload_apps(manager: VersionManager, apps: list[dict[str, Any]]) -> int:
    """Upload every version of every app. Returns the number uploaded."""
    uploaded = 0
    for app in apps:
        app_name = _field(app, "name")
        for version in app.get("versions") or []:
            version_id = _field(version, "id")
            content = version.get("content", f"{version_id} content")
            if isinstance(content, str):
                content = content.encode("utf-8")
            manager.upload_new_version(
                app_name,
                version_id,
                _field(version, "min_os"),
                content,
                bool(version.get("beta", False)),
            )
            uploaded += 1
    return uploaded


# -------------------------------
# Step handlers
# -------------------------------


def _check_update(manager, installer, step, devices):
    check = manager.check_for_updates(
        _field(step, "app"), _field(step, "current"), _field(step, "os")
    )
    if not check.available:
        return "unavailable", f"No update available from {step['current']}"
    return "ok", f"Update available: {check.version_id}"


def _check_install(manager, installer, step, devices):
    check = manager.check_for_install(_field(step, "app"), _field(step, "os"))
    if not check.available:
        return "unavailable", f"No version installable on {step['os']}"
    return "ok", f"Installable version: {check.version_id}"


def _install(manager, installer, step, devices):
    check = manager.check_for_install(_field(step, "app"), _field(step, "os"))
    if not check.available:
        return "unavailable", f"No version installable on {step['os']}"
    installer.perform_install(check.version_id)
    return "ok", f"Installed {check.version_id}"


def _update(manager, installer, step, devices):
    app_name = _field(step, "app")
    current = _field(step, "current")
    check = manager.check_for_updates(app_name, current, _field(step, "os"))
    if not check.available:
        return "unavailable", f"No update available from {current}"
    patch = manager.create_update_patch(app_name, current, check.version_id)
    installer.perform_update(patch)
    return "ok", f"Updated {current} -> {check.version_id} ({len(patch)} byte patch)"


def _patch(manager, installer, step, devices):
    from_version = _field(step, "from")
    to_version = _field(step, "to")
    patch = manager.create_update_patch(_field(step, "app"), from_version, to_version)
    return "ok", f"Patch {from_version} -> {to_version}: {len(patch)} bytes"


def _release(manager, installer, step, devices):
    targets = step.get("devices")
    if targets is None:
        targets = devices
    percentage = step.get("percentage")
    if percentage is None:
        percentage = 0
    if not isinstance(percentage, int) or isinstance(percentage, bool):
        raise ConfigError(f"Step 'release' has non-integer percentage: {percentage!r}")
    result = manager.release_version(
        _field(step, "app"),
        _field(step, "version"),
        _field(step, "strategy"),
        percentage,
        list(targets),
    )
    return "ok", (
        f"{result.strategy} rollout of {result.version_id} reached "
        f"{len(result.released)}/{result.requested} devices"
    )


_STEP_HANDLERS: dict[str, StepHandler] = {
    "check_update": _check_update,
    "check_install": _check_install,
    "install": _install,
    "update": _update,
    "patch": _patch,
    "release": _release,
}


# -------------------------------
# Public API
# -------------------------------


def run_plan(
    plan_path: Path,
    *,
    installer: Installer | None = None,
    patch_generator: PatchGenerator | None = None,
    logger: Logger | None = None,
) -> PlanResult:
    """Run a plan file against a fresh VersionManager.

    Args:
        plan_path: Path to the plan YAML file.
        installer: Collaborator for install/update steps. Defaults to
            LoggingInstaller.
        patch_generator: Collaborator for patch creation. Defaults to
            ConcatPatchGenerator.
        logger: Logger for progress; the global logger otherwise.

    Returns:
        PlanResult with one outcome per step and the final assignment map.

    Raises:
        ConfigError: If the plan cannot be loaded, defines no apps, or a
            step has an unknown action or lacks a required field.
    """
    logger = logger or get_global_logger()

    config = load_effective_config(plan_path, logger=logger)
    policy = load_update_policy(config)

    apps = config.get("apps") or []
    if not apps:
        raise ConfigError(f"No apps defined in plan: {plan_path}")
    steps = config.get("steps") or []
    default_devices = list(config.get("devices") or [])

    manager = VersionManager(
        policy=policy, patch_generator=patch_generator, logger=logger
    )
    installer = installer or LoggingInstaller(logger)

    total = len(steps) + 1
    logger.step(1, total, "Uploading versions...")
    uploaded = _upload_apps(manager, apps)
    logger.verbose("PLAN", f"Uploaded {uploaded} version(s)")

    outcomes: list[StepOutcome] = []
    for index, step in enumerate(steps, start=1):
        action = step.get("action") if isinstance(step, dict) else None
        handler = _STEP_HANDLERS.get(action)
        if handler is None:
            raise ConfigError(f"Unknown action {action!r} in step {index}")

        logger.step(index + 1, total, f"Running {action}...")
        try:
            status, detail = handler(manager, installer, step, default_devices)
        except ConfigError:
            raise
        except AVMSError as err:
            status, detail = "error", str(err)
        logger.verbose("PLAN", f"Step {index} ({action}): {status}: {detail}")
        outcomes.append(
            StepOutcome(index=index, action=action, status=status, detail=detail)
        )

    return PlanResult(
        plan_path=str(plan_path),
        uploaded=uploaded,
        outcomes=outcomes,
        assignments=manager.assignments(),
    )
