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

"""Core version and OS string comparison utilities for AVMS.

Two comparators are supported:

- "lexicographic" (default): plain string ordering. This is what version
  IDs and OS strings have always been compared with, and it is only right
  when identifiers are written so that string order matches release order
  (e.g., zero-padded "Android-09" / "Android-10").
- "semver": a structured key that understands an alphabetic platform prefix
  ("Android-", "iOS "), numeric release components, prerelease tags, and
  post-release tags. Opt-in only.
"""

from __future__ import annotations

import re
from typing import Literal

Comparator = Literal["lexicographic", "semver"]
COMPARATORS: tuple[str, ...] = ("lexicographic", "semver")

# ----------------------------
# Structured ("semver") keys
# ----------------------------

# Known prerelease tag ordering (lower = older)
_PRE_TAG_RANK: dict[str, float] = {
    "dev": 0,
    "alpha": 1,
    "a": 1,
    "pre": 1,
    "preview": 1,
    "beta": 2,
    "b": 2,
    "rc": 3,
}
_UNKNOWN_PRE_RANK = 2.5  # unknown prerelease tags sort between beta and rc
_FINAL_RANK = 4.0
_POST_TAGS = {"post", "p", "rev", "r", "hotfix", "hf"}

_CORE = re.compile(
    r"^\s*(?P<prefix>[A-Za-z][A-Za-z ]*?)?[\s._-]*v?"
    r"(?P<core>\d+(?:[._]\d+)*)(?P<suffix>.*)$"
)


def _split_pre_tokens(pre: str) -> tuple[tuple[int, object], ...]:
    """Split a prerelease suffix into tokens with numeric awareness.
    Numeric tokens encode as (0, int) and sort before text tokens (1, str).
    """
    out: list[tuple[int, object]] = []
    for t in re.split(r"[.\-]", pre):
        if not t:
            continue
        if t.isdigit():
            out.append((0, int(t)))
        else:
            out.append((1, t.lower()))
    return tuple(out)


def _find_pre_segment(s: str) -> tuple[float | None, tuple[tuple[int, object], ...]]:
    """Detect a prerelease tag in the suffix after the numeric core.
    Returns (rank, tokens) or (None, ()) if not a prerelease.
    """
    m = re.search(r"(?i)([A-Za-z]+)[._-]?([0-9A-Za-z.\-]*)", s)
    if not m:
        return None, ()
    tag = m.group(1).lower()
    if tag in _POST_TAGS:
        return None, ()
    rank = _PRE_TAG_RANK.get(tag, _UNKNOWN_PRE_RANK)
    rest = m.group(2) or ""
    tokens = _split_pre_tokens(rest) if rest else ()
    return float(rank), ((1, tag),) + tokens


def _find_post_segment(s: str) -> int:
    """Return a positive number if a post-release tag is found; else 0."""
    m = re.search(r"(?i)\b(post|p|rev|r|hotfix|hf)[._-]?(\d+)?\b", s)
    if not m:
        return 0
    return int(m.group(2)) if m.group(2) else 1


def _release_tuple(core: str) -> tuple[int, ...]:
    """Parse "10.2.0" into (10, 2), dropping trailing zeros so 1.0 == 1.0.0."""
    nums = [int(p) for p in re.split(r"[._]", core) if p]
    while len(nums) > 1 and nums[-1] == 0:
        nums.pop()
    return tuple(nums)


def version_key(s: str) -> tuple:
    """Compute a structured, comparable key for a version or OS string.

    - "Android-10"    -> ("semverish", "android", ((10,), 4.0, (), 0))
    - "v1.2.0-rc.1"   -> ("semverish", "", ((1, 2), 3.0, ((1, "rc"), (0, 1)), 0))
    - "nightly"       -> ("text", "nightly")

    A leading "v" is ignored, so "v1.2" and "1.2" produce equal keys. Strings
    with no numeric component fall back to plain text ordering.
    """
    base = s.split("+", 1)[0]  # build metadata is ignored in ordering
    m = _CORE.match(base)
    if not m:
        return ("text", s)

    prefix = (m.group("prefix") or "").strip(" ._-").lower()
    if prefix == "v":
        prefix = ""
    release = _release_tuple(m.group("core"))
    suffix = m.group("suffix")

    pre_rank, pre_tokens = _find_pre_segment(suffix)
    post_num = _find_post_segment(suffix)
    if pre_rank is None:
        return ("semverish", prefix, (release, _FINAL_RANK, (), post_num))
    return ("semverish", prefix, (release, pre_rank, pre_tokens, post_num))


# ----------------------------
# Comparison API
# ----------------------------


def compare_versions(
    a: str,
    b: str,
    *,
    comparator: Comparator = "lexicographic",
) -> int:
    """Compare two version (or OS) strings.
    Returns -1 if a < b, 0 if equal, 1 if a > b.

    Raises:
        ValueError: If comparator is not one of COMPARATORS.
    """
    if comparator == "lexicographic":
        return (a > b) - (a < b)
    if comparator == "semver":
        ka = version_key(a)
        kb = version_key(b)
        return (ka > kb) - (ka < kb)
    raise ValueError(
        f"Unknown comparator {comparator!r}; expected one of {', '.join(COMPARATORS)}"
    )


def is_newer(
    candidate: str,
    current: str | None,
    *,
    comparator: Comparator = "lexicographic",
) -> bool:
    """True iff candidate sorts strictly after current.
    A missing current version makes any candidate newer.
    """
    if current is None:
        return True
    return compare_versions(candidate, current, comparator=comparator) > 0


def is_at_least(
    value: str,
    minimum: str,
    *,
    comparator: Comparator = "lexicographic",
) -> bool:
    """True iff value sorts at or after minimum (minimum <= value)."""
    return compare_versions(value, minimum, comparator=comparator) >= 0
