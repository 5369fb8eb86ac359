"""
Configuration loading and merging for AVMS plans.

A plan file describes apps, versions, devices, and the steps to run
against a VersionManager. Organization-wide settings that apply to every
plan live in a shared defaults file, so individual plans stay short.

Configuration Layers
--------------------
1. **Organization defaults** (defaults/org.yaml)
   - Found by walking upward from the plan's directory
   - Typically holds ``settings`` (comparator, update-check policy)
     and a default ``devices`` list
   - Optional

2. **Plan configuration** (plans/<name>.yaml)
   - Always required; defines apps, versions, and steps
   - Overrides organization defaults

Merge Behavior
--------------
The loader performs deep merging with "last wins" semantics:
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Error Handling
--------------
- ConfigError: plan file missing, YAML parse errors, empty files, or a
  top-level value that is not a mapping
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from pathlib import Path
    >>> from appvms.config import load_effective_config
    >>> cfg = load_effective_config(Path("plans/phonepe.yaml"))
    >>> cfg["apps"][0]["name"]
    'PhonePe'
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from appvms.exceptions import ConfigError
from appvms.logging import Logger, get_global_logger

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class LoadContext:
    """Metadata describing how the config was resolved."""

    plan_path: Path
    defaults_root: Path | None
    org_defaults_path: Path | None


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Load a YAML file and return the parsed Python object.

    Raises:
        ConfigError: When the file does not exist, fails to parse, or is empty.
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Defaults discovery
# -------------------------------


def _find_defaults_root(start_dir: Path) -> Path | None:
    """
    Walk upward from 'start_dir' looking for a 'defaults/org.yaml'.
    Returns the 'defaults' directory or None if not found.
    """
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.exists():
            return parent / "defaults"
    return None


def resolve_load_context(plan_path: Path) -> LoadContext:
    """Work out which files load_effective_config() would read for a plan."""
    plan_path = plan_path.resolve()
    defaults_root = _find_defaults_root(plan_path.parent)
    org_path = defaults_root / "org.yaml" if defaults_root else None
    return LoadContext(
        plan_path=plan_path,
        defaults_root=defaults_root,
        org_defaults_path=org_path,
    )


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(
    plan_path: Path,
    *,
    logger: Logger | None = None,
) -> dict[str, Any]:
    """
    Load and merge the effective configuration for a plan.

    Steps
      1) Read plan YAML (must be a mapping).
      2) Find defaults root by scanning upwards for 'defaults/org.yaml'.
      3) Load org defaults if present.
      4) Merge: org -> plan (dicts deep-merge, lists replace).

    Args:
        plan_path: Path to the plan YAML file.
        logger: Logger for progress messages; the global logger otherwise.

    Returns:
        A merged configuration dict. Without defaults, the plan as-is.

    Raises:
        ConfigError: On missing files, YAML parse errors, empty files, or
            non-mapping top-level values.
    """
    logger = logger or get_global_logger()
    context = resolve_load_context(plan_path)

    logger.verbose("CONFIG", f"Loading plan: {context.plan_path}")
    plan_obj = _load_yaml_file(context.plan_path)
    if not isinstance(plan_obj, dict):
        raise ConfigError(
            f"top-level YAML must be a mapping (dict): {context.plan_path}"
        )

    merged: dict[str, Any] = {}
    layers_merged = 0

    if context.org_defaults_path is not None:
        logger.verbose("CONFIG", f"Loading defaults: {context.org_defaults_path}")
        org_defaults = _load_yaml_file(context.org_defaults_path)
        if not isinstance(org_defaults, dict):
            raise ConfigError(
                f"top-level YAML must be a mapping (dict): {context.org_defaults_path}"
            )
        merged = _deep_merge_dicts(merged, org_defaults)
        layers_merged += 1

    merged = _deep_merge_dicts(merged, plan_obj)
    layers_merged += 1

    logger.verbose("CONFIG", f"Deep merged {layers_merged} layer(s)")
    logger.debug(
        "CONFIG",
        "Final config top-level keys: " + ", ".join(merged.keys()),
    )
    return merged
