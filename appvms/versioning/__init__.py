"""
Version and OS string comparison for AVMS.

This package decides how two version identifiers (or two OS version
strings) are ordered, and evaluates which uploaded versions a device can
install or update to.

Modules
-------
keys : module
    Comparators: plain lexicographic ordering and a structured "semver" key.
compatibility : module
    CompatibilityEvaluator, the install/update queries over a registry.
    Import it directly: ``from appvms.versioning.compatibility import
    CompatibilityEvaluator``.

Public API
----------
Comparator : Literal type
    "lexicographic" or "semver".
compare_versions : function
    Compare two strings, returning -1, 0, or 1.
is_newer : function
    Check if a candidate sorts strictly after the current value.
is_at_least : function
    Check if a value sorts at or after a minimum.
version_key : function
    Structured sortable key used by the "semver" comparator.

Comparison Strategies
---------------------
1. **Lexicographic** (default):
   - Raw string ordering, exactly as identifiers were always compared
   - "v10.0" < "v9.0" and "Android-10" < "Android-9" under this mode
   - Correct only for zero-padded or otherwise order-preserving identifiers

2. **Semver** (opt-in):
   - Alphabetic platform prefix ("Android", "iOS") compared first
   - Numeric release components compared as integers (1.10 > 1.9)
   - Prerelease tags: dev < alpha < beta < rc < final

Examples
--------
    >>> from appvms.versioning import compare_versions
    >>> compare_versions("Android-10", "Android-9")
    -1
    >>> compare_versions("Android-10", "Android-9", comparator="semver")
    1
"""

from .keys import (
    COMPARATORS,
    Comparator,
    compare_versions,
    is_at_least,
    is_newer,
    version_key,
)

__all__ = [
    "COMPARATORS",
    "Comparator",
    "compare_versions",
    "is_at_least",
    "is_newer",
    "version_key",
]
