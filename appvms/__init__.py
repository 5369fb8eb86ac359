"""
AVMS - App Version Management System

A Python library and CLI for tracking application versions, deciding whether
a device should receive an update or a fresh install, and rolling versions
out to subsets of devices under named strategies.

AVMS provides:
  - An in-memory version registry per application
  - Install and update checks driven by minimum-OS compatibility
  - Deterministic, hash-based device sampling for percentage rollouts
  - Beta and percentage rollout strategies behind a strategy registry
  - A thread-safe VersionManager facade over all of the above
  - YAML plan files to script uploads, checks, and rollouts

Quick Start
-----------
Validate a plan:

    $ appvms validate plans/phonepe.yaml

Run a plan:

    $ appvms run plans/phonepe.yaml --verbose

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    Plan orchestration (run_plan).
manager : module
    VersionManager, the thread-safe facade.
registry : package
    Applications and version records.
versioning : package
    Version/OS comparison and the compatibility evaluator.
policy : package
    Update policy and per-version offer decisions.
rollout : package
    Rollout strategies, deterministic sampler, and rollout engine.
delivery : module
    Patch generator and installer collaborators.
config : package
    YAML plan loading and settings resolution.

Public API
----------
    from appvms.manager import VersionManager
    from appvms.policy import UpdatePolicy
    from appvms.core import run_plan
    from appvms.validation import validate_plan

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "App version management, update checks, and rollouts"

# Re-export commonly used classes for convenience
from appvms.core import run_plan
from appvms.manager import ManagerState, VersionManager
from appvms.policy import UpdatePolicy
from appvms.validation import validate_plan

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "ManagerState",
    "UpdatePolicy",
    "VersionManager",
    "run_plan",
    "validate_plan",
]
