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

"""Command-line interface for AVMS.

This module provides the main CLI entry point for the appvms tool, offering
commands for validating and running version-management plans.

Commands:

    validate: Validate plan syntax and structure
    run: Upload the plan's versions and execute its steps

Example:
    Validate a plan:
        ```bash
        $ appvms validate plans/phonepe.yaml
        ```

    Run a plan with rollout summaries:
        ```bash
        $ appvms run plans/phonepe.yaml --verbose
        ```

    Run a plan with per-device rollout progress:
        ```bash
        $ appvms run plans/phonepe.yaml --debug
        ```

Exit Codes:

- 0: Success
- 1: Error (invalid plan, configuration error, or a failed step)

Note:
    Commands are registered with argparse subparsers; each has its own
    handler function (cmd_<command>). Verbose mode shows full tracebacks on
    errors. Debug mode implies verbose mode.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
import time
import traceback

from appvms.core import run_plan
from appvms.exceptions import AVMSError
from appvms.logging import get_logger, set_global_logger
from appvms.validation import validate_plan


def _package_version() -> str:
    try:
        return version("appvms")
    except PackageNotFoundError:
        from appvms import __version__

        return __version__


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'appvms validate' command.

    Args:
        args: Parsed command-line arguments containing the plan path and
            verbose flag.

    Returns:
        Exit code (0 for valid plan, 1 for invalid).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=False))

    plan_path = Path(args.plan).resolve()

    print(f"Validating plan: {plan_path}")
    print()

    result = validate_plan(plan_path, verbose=args.verbose)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Plan:        {result.plan_path}")
    print(f"Status:      {result.status.upper()}")
    print(f"App Count:   {result.app_count}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Plan is valid!")
        return 0
    print()
    print(f"[FAILED] Plan validation failed with {len(result.errors)} error(s).")
    return 1


def cmd_run(args: argparse.Namespace) -> int:
    """Handler for 'appvms run' command.

    Validates the plan, uploads its versions, executes its steps, and prints
    each step's outcome along with the final device assignments.

    Args:
        args: Parsed command-line arguments containing the plan path and
            verbose/debug flags.

    Returns:
        Exit code (0 when every step succeeded or reported "unavailable",
        1 on invalid plans, configuration errors, or failed steps).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    plan_path = Path(args.plan).resolve()
    if not plan_path.exists():
        print(f"Error: Plan file not found: {plan_path}")
        return 1

    validation = validate_plan(plan_path)
    if validation.status != "valid":
        print(f"Error: Plan is invalid ({len(validation.errors)} error(s)):")
        for error in validation.errors:
            print(f"  [X] {error}")
        return 1

    print(f"Running plan: {plan_path}")
    print()

    start = time.perf_counter()
    try:
        result = run_plan(plan_path)
    except AVMSError as err:
        print(f"Error: {err}")
        if args.verbose or args.debug:
            traceback.print_exc()
        return 1
    elapsed = time.perf_counter() - start

    print("=" * 70)
    print("PLAN RESULTS")
    print("=" * 70)
    print(f"Plan:            {result.plan_path}")
    print(f"Uploaded:        {result.uploaded} version(s)")
    print()
    for outcome in result.outcomes:
        print(
            f"  [{outcome.index}] {outcome.action:<14} "
            f"{outcome.status.upper():<12} {outcome.detail}"
        )
    print()
    print(f"Assignments ({len(result.assignments)}):")
    for device_id, version_id in sorted(result.assignments.items()):
        print(f"  {device_id:<20} {version_id}")
    print("=" * 70)
    print(f"Total execution time: {elapsed:.3f}s")
    print()

    if result.failed:
        print(f"[FAILED] {result.failed} step(s) failed.")
        return 1
    print("[SUCCESS] Plan completed successfully!")
    return 0


def main() -> None:
    """Main entry point for the appvms CLI.

    This function is registered as the 'appvms' console script in
    pyproject.toml.
    """
    parser = argparse.ArgumentParser(
        prog="appvms",
        description="AVMS - App version management, update checks, and rollouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"appvms {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate plan syntax and structure (runs nothing)",
        description="Check a plan YAML for syntax errors and structural issues.",
    )
    parser_validate.add_argument(
        "plan",
        help="Path to the plan YAML file",
    )
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'run' command
    parser_run = subparsers.add_parser(
        "run",
        help="Upload versions and execute plan steps",
        description="Upload the plan's versions into a fresh manager and run its steps in order.",
    )
    parser_run.add_argument(
        "plan",
        help="Path to the plan YAML file",
    )
    parser_run.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show uploads, checks, and rollout summaries",
    )
    parser_run.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show per-device rollout progress (implies --verbose)",
    )
    parser_run.set_defaults(func=cmd_run)

    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
